#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/ast/transforms.py
"""Primitive, path-based mutations of the document tree.

Every structural change made by the normalization engine, the editor and the
codecs goes through these functions. Each one mutates the tree in place and
validates its paths, raising :class:`~richnote.exceptions.ValidationError` for
a path that does not address a node.

"""

from __future__ import annotations

import copy
import logging
from dataclasses import replace
from typing import Any, Iterable

from richnote.ast.nodes import ELEMENT_PROPERTIES, Element, Node, Text, clone_element_shell
from richnote.ast.paths import Path, Point, get_node, get_parent, next_path, parent_path
from richnote.constants import MARK_NAMES
from richnote.exceptions import ValidationError

logger = logging.getLogger(__name__)

_TEXT_PROPERTIES = ("text",) + MARK_NAMES


def clone_node(node: Node) -> Node:
    """Create a deep copy of a node."""
    return copy.deepcopy(node)


def _child_list(root: Node, path: Path) -> list[Node]:
    parent = get_node(root, path)
    if isinstance(parent, Text):
        raise ValidationError("Text leaves have no children", parameter_name="path", parameter_value=path)
    return parent.children  # type: ignore[attr-defined]


def insert_nodes(root: Node, path: Path, nodes: Iterable[Node]) -> None:
    """Insert ``nodes`` so that the first one lands at ``path``.

    Parameters
    ----------
    root : Node
        Tree root
    path : tuple of int
        Target position; the index may equal the parent's child count to append
    nodes : iterable of Node
        Nodes to insert, in order

    """
    children = _child_list(root, parent_path(path))
    index = path[-1]
    if index < 0 or index > len(children):
        raise ValidationError(f"Cannot insert at {path}", parameter_name="path", parameter_value=path)
    children[index:index] = list(nodes)


def remove_node(root: Node, path: Path) -> Node:
    """Remove and return the node at ``path``."""
    get_node(root, path)
    return get_parent(root, path).children.pop(path[-1])


def replace_node(root: Node, path: Path, node: Node) -> Node:
    """Replace the node at ``path`` and return the old one."""
    old = get_node(root, path)
    get_parent(root, path).children[path[-1]] = node
    return old


def wrap_node(root: Node, path: Path, wrapper: Element) -> Element:
    """Wrap the node at ``path`` in ``wrapper``, which keeps the same path."""
    node = get_node(root, path)
    wrapper.children = [node]
    replace_node(root, path, wrapper)
    return wrapper


def wrap_range(root: Node, path: Path, start: int, end: int, wrapper: Element) -> Element:
    """Wrap children ``start`` (inclusive) to ``end`` (exclusive) of the node at ``path``.

    The wrapper takes the place of the first wrapped child.
    """
    children = _child_list(root, path)
    if not 0 <= start < end <= len(children):
        raise ValidationError(f"Invalid child range {start}..{end}", parameter_name="start", parameter_value=start)
    wrapper.children = children[start:end]
    children[start:end] = [wrapper]
    return wrapper


def unwrap_node(root: Node, path: Path) -> int:
    """Replace the element at ``path`` with its children.

    Returns
    -------
    int
        Number of children moved into the element's place

    """
    node = get_node(root, path)
    if not isinstance(node, Element):
        raise ValidationError("Only elements can be unwrapped", parameter_name="path", parameter_value=path)
    children = get_parent(root, path).children
    index = path[-1]
    children[index : index + 1] = node.children
    return len(node.children)


def move_node(root: Node, from_path: Path, to_path: Path) -> None:
    """Move a node; ``to_path`` is resolved against the tree after removal."""
    node = remove_node(root, from_path)
    insert_nodes(root, to_path, [node])


def set_properties(root: Node, path: Path, **props: Any) -> Node:
    """Set fields on the node at ``path``.

    Text leaves accept ``text`` and the mark names; elements accept ``type``,
    ``url``, ``title`` and ``checked``.
    """
    node = get_node(root, path)
    allowed = _TEXT_PROPERTIES if isinstance(node, Text) else ELEMENT_PROPERTIES
    for name, value in props.items():
        if name not in allowed:
            raise ValidationError(f"Unknown property '{name}'", parameter_name=name, parameter_value=value)
        setattr(node, name, value)
    return node


def unset_property(root: Node, path: Path, name: str) -> Node:
    """Clear a field: marks become False, element properties become None."""
    node = get_node(root, path)
    if isinstance(node, Text):
        if name not in MARK_NAMES:
            raise ValidationError(f"Cannot unset '{name}' on text", parameter_name=name)
        setattr(node, name, False)
    else:
        if name not in ELEMENT_PROPERTIES:
            raise ValidationError(f"Cannot unset '{name}' on element", parameter_name=name)
        setattr(node, name, None)
    return node


def split_children(root: Node, path: Path, position: int) -> Path:
    """Split the element at ``path`` before child ``position``.

    Children from ``position`` on move to a new element with the same
    properties, inserted right after the original.

    Returns
    -------
    tuple of int
        Path of the new right-hand element

    """
    node = get_node(root, path)
    if not isinstance(node, Element):
        raise ValidationError("Only elements can be split", parameter_name="path", parameter_value=path)
    right = clone_element_shell(node)
    right.children = node.children[position:]
    del node.children[position:]
    right_path = next_path(path)
    insert_nodes(root, right_path, [right])
    return right_path


def lift_node(root: Node, path: Path) -> Path:
    """Move a node out of its parent element to become the parent's sibling.

    An only child replaces its parent. A first child moves before the parent and
    a last child after it. A middle child splits the parent in two and lands
    between the halves.

    Returns
    -------
    tuple of int
        New path of the lifted node

    """
    if len(path) < 2:
        raise ValidationError("Top-level nodes cannot be lifted", parameter_name="path", parameter_value=path)
    container_path = parent_path(path)
    container = get_node(root, container_path)
    assert isinstance(container, Element)
    index = path[-1]
    count = len(container.children)

    if count == 1:
        unwrap_node(root, container_path)
        return container_path
    if index == 0:
        move_node(root, path, container_path)
        return container_path
    if index < count - 1:
        split_children(root, container_path, index + 1)
    node = remove_node(root, path)
    target = next_path(container_path)
    insert_nodes(root, target, [node])
    return target


def _split_subtree(node: Node, relative: Path, offset: int) -> tuple[Node, Node]:
    if isinstance(node, Text):
        return replace(node, text=node.text[:offset]), replace(node, text=node.text[offset:])
    if not isinstance(node, Element) or not relative:
        raise ValidationError("Split point must address a text leaf", parameter_name="point")
    index = relative[0]
    left_child, right_child = _split_subtree(node.children[index], relative[1:], offset)
    left = clone_element_shell(node)
    left.children = node.children[:index] + [left_child]
    right = clone_element_shell(node)
    right.children = [right_child] + node.children[index + 1 :]
    return left, right


def split_node_at_point(root: Node, block_path: Path, point: Point) -> Path:
    """Split a block at a caret position into two blocks of the same type.

    Every element between the block and the caret's text leaf is split too, so
    marks and links are preserved on both sides.

    Returns
    -------
    tuple of int
        Path of the right-hand block

    """
    if not block_path or point.path[: len(block_path)] != block_path:
        raise ValidationError("Point is not inside the block", parameter_name="point", parameter_value=point)
    block = get_node(root, block_path)
    left, right = _split_subtree(block, point.path[len(block_path) :], point.offset)
    replace_node(root, block_path, left)
    right_path = next_path(block_path)
    insert_nodes(root, right_path, [right])
    logger.debug("Split %s at %s", getattr(block, "type", None), point)
    return right_path
