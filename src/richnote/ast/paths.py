#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/ast/paths.py
"""Path-based navigation of the document tree.

A path is a tuple of child indexes starting at the document root; the empty
tuple addresses the document itself. A :class:`Point` is a caret position
inside a text leaf and a :class:`Range` is a pair of points (anchor, focus).

Examples
--------
    >>> doc = Document(children=[paragraph("hello")])
    >>> get_node(doc, (0, 0))
    Text(text='hello', ...)
    >>> next_path((0, 0))
    (0, 1)

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Literal

from richnote.ast.nodes import Document, Element, Node, Text, get_node_children
from richnote.exceptions import ValidationError

Path = tuple[int, ...]


@dataclass(frozen=True)
class Point:
    """Caret position: a path to a text leaf plus a character offset."""

    path: Path
    offset: int = 0

    def sort_key(self) -> tuple[Path, int]:
        """Return a key that orders points in document order."""
        return (self.path, self.offset)


@dataclass(frozen=True)
class Range:
    """Selection between an anchor point and a focus point.

    Parameters
    ----------
    anchor : Point
        Where the selection started
    focus : Point
        Where the selection ends (the caret)

    """

    anchor: Point
    focus: Point

    @classmethod
    def collapsed(cls, point: Point) -> "Range":
        """Create a collapsed range at a single point."""
        return cls(anchor=point, focus=point)

    @property
    def is_collapsed(self) -> bool:
        """Whether anchor and focus are the same point."""
        return self.anchor == self.focus

    @property
    def start(self) -> Point:
        """The earlier of the two points in document order."""
        return min(self.anchor, self.focus, key=Point.sort_key)

    @property
    def end(self) -> Point:
        """The later of the two points in document order."""
        return max(self.anchor, self.focus, key=Point.sort_key)


def get_node(root: Node, path: Path) -> Node:
    """Return the node at ``path``.

    Raises
    ------
    ValidationError
        If the path does not address a node

    """
    node = root
    for depth, index in enumerate(path):
        children = get_node_children(node)
        if index < 0 or index >= len(children):
            raise ValidationError(
                f"Path {tuple(path)} has no node at depth {depth}", parameter_name="path", parameter_value=path
            )
        node = children[index]
    return node


def has_path(root: Node, path: Path) -> bool:
    """Check whether ``path`` addresses a node."""
    try:
        get_node(root, path)
    except ValidationError:
        return False
    return True


def parent_path(path: Path) -> Path:
    """Return the path of the parent of ``path``."""
    if not path:
        raise ValidationError("The document root has no parent", parameter_name="path", parameter_value=path)
    return path[:-1]


def get_parent(root: Node, path: Path) -> Document | Element:
    """Return the parent of the node at ``path``."""
    parent = get_node(root, parent_path(path))
    if isinstance(parent, Text):
        raise ValidationError("Text leaves have no children", parameter_name="path", parameter_value=path)
    return parent


def next_path(path: Path) -> Path:
    """Return the path of the following sibling position."""
    if not path:
        raise ValidationError("The document root has no siblings", parameter_name="path", parameter_value=path)
    return path[:-1] + (path[-1] + 1,)


def previous_path(path: Path) -> Path:
    """Return the path of the preceding sibling.

    Raises
    ------
    ValidationError
        If ``path`` is the first child of its parent

    """
    if not path or path[-1] <= 0:
        raise ValidationError("Path has no previous sibling", parameter_name="path", parameter_value=path)
    return path[:-1] + (path[-1] - 1,)


def siblings(root: Node, path: Path) -> list[Node]:
    """Return the child list that holds the node at ``path``."""
    return get_parent(root, path).children


def path_ancestors(path: Path) -> list[Path]:
    """Return every proper ancestor path of ``path``, shallowest first."""
    return [path[:depth] for depth in range(len(path))]


def common_path(first: Path, second: Path) -> Path:
    """Return the longest shared prefix of two paths."""
    shared = []
    for a, b in zip(first, second):
        if a != b:
            break
        shared.append(a)
    return tuple(shared)


def iter_nodes(root: Node, order: Literal["pre", "post"] = "pre", path: Path = ()) -> Iterator[tuple[Node, Path]]:
    """Yield ``(node, path)`` for ``root`` and all of its descendants.

    Parameters
    ----------
    root : Node
        Node to start from
    order : {"pre", "post"}, default "pre"
        Whether parents are yielded before or after their children
    path : tuple of int, default ()
        Path of ``root`` itself

    """
    if order == "pre":
        yield root, path
    for index, child in enumerate(get_node_children(root)):
        yield from iter_nodes(child, order, path + (index,))
    if order == "post":
        yield root, path


def iter_texts(root: Node, path: Path = ()) -> Iterator[tuple[Text, Path]]:
    """Yield every text leaf under the node at ``path`` in document order."""
    start = get_node(root, path)
    for node, sub_path in iter_nodes(start, "pre", path):
        if isinstance(node, Text):
            yield node, sub_path


def first_text_path(root: Node, path: Path = ()) -> Path:
    """Return the path of the first text leaf under ``path``."""
    for _, text_path in iter_texts(root, path):
        return text_path
    raise ValidationError("Node contains no text leaf", parameter_name="path", parameter_value=path)


def last_text_path(root: Node, path: Path = ()) -> Path:
    """Return the path of the last text leaf under ``path``."""
    found: Path | None = None
    for _, text_path in iter_texts(root, path):
        found = text_path
    if found is None:
        raise ValidationError("Node contains no text leaf", parameter_name="path", parameter_value=path)
    return found


def start_point(root: Node, path: Path = ()) -> Point:
    """Return the first caret position inside the node at ``path``."""
    return Point(first_text_path(root, path), 0)


def end_point(root: Node, path: Path = ()) -> Point:
    """Return the last caret position inside the node at ``path``."""
    text_path = last_text_path(root, path)
    leaf = get_node(root, text_path)
    assert isinstance(leaf, Text)
    return Point(text_path, len(leaf.text))


def is_ancestor_path(ancestor: Path, path: Path) -> bool:
    """Check whether ``ancestor`` is a proper prefix of ``path``."""
    return len(ancestor) < len(path) and path[: len(ancestor)] == ancestor
