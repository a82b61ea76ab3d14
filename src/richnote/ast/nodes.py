#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/ast/nodes.py
"""Node classes for the rich-text document tree.

A note is an ordered, rooted tree. The root is a :class:`Document`; every other
node is either a :class:`Text` leaf carrying independent boolean marks, or a
generic :class:`Element` distinguished by its ``type`` string.

Node Vocabulary
---------------
Text leaves
    A string payload plus the marks bold, italic, underline, strikethrough,
    code, superscript, subscript, inserted and deleted. Marks combine freely.

Inline elements
    ``link`` (url, optional title). Inline elements live in a block's text
    flow next to text leaves.

Block elements
    ``paragraph``, ``heading-one``, ``heading-two``, ``heading-three``,
    ``quote``, ``code``, ``thematic-break``, ``image``, ``bulleted-list``,
    ``numbered-list``, ``task-list``, ``sequence-list``, ``list-item``,
    ``table``, ``table-row`` and ``table-cell``. A typeless element (``type``
    is None) is also treated as a block; these appear while HTML is being
    deserialized and are resolved by normalization.

Void elements
    ``thematic-break`` and ``image``. They are never blank; an image carries
    its alt text as its single text child.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields, replace
from typing import Any, Optional, Union

from richnote.constants import CHECKLIST_TYPES, INLINE_TYPES, LIST_TYPES, MARK_NAMES, VOID_TYPES


class Node(ABC):
    """Base class for all document tree nodes.

    All nodes support the visitor pattern for traversal and rendering.
    """

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


@dataclass
class Document(Node):
    """Root node of a note's document tree.

    Parameters
    ----------
    children : list of Node, default = empty list
        Top-level nodes of the note
    metadata : dict, default = empty dict
        Note-level metadata (subtype, source title, etc.)

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self)


@dataclass
class Text(Node):
    """Text leaf with formatting marks.

    Parameters
    ----------
    text : str, default = ""
        The text payload
    bold, italic, underline, strikethrough, code, superscript, subscript, inserted, deleted : bool
        Independent formatting marks, all False by default

    """

    text: str = ""
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    code: bool = False
    superscript: bool = False
    subscript: bool = False
    inserted: bool = False
    deleted: bool = False

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text leaf."""
        return visitor.visit_text(self)

    def marks(self) -> dict[str, bool]:
        """Return the active marks of this leaf.

        Returns
        -------
        dict[str, bool]
            Mapping of each active mark name to True

        """
        return {name: True for name in MARK_NAMES if getattr(self, name)}

    def has_same_marks(self, other: "Text") -> bool:
        """Check whether two leaves carry exactly the same marks."""
        return all(getattr(self, name) == getattr(other, name) for name in MARK_NAMES)

    def with_text(self, value: str) -> "Text":
        """Return a copy of this leaf with the same marks and different text."""
        return replace(self, text=value)


@dataclass
class Element(Node):
    """Generic element node.

    Parameters
    ----------
    type : str or None, default = None
        Element type (e.g. ``"paragraph"``, ``"link"``); None while typeless
    children : list of Node, default = empty list
        Child nodes; either all blocks or all text/inline once normalized
    url : str or None, default = None
        Target URL of a ``link`` or source URL of an ``image``
    title : str or None, default = None
        Advisory title of a ``link`` or ``image``
    checked : bool or None, default = None
        Completion flag of a checklist ``list-item``; None means the field is absent

    """

    type: Optional[str] = None
    children: list[Node] = field(default_factory=list)
    url: Optional[str] = None
    title: Optional[str] = None
    checked: Optional[bool] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this element."""
        return visitor.visit_element(self)

    @property
    def has_checked(self) -> bool:
        """Whether the ``checked`` field is present."""
        return self.checked is not None


ParentNode = Union[Document, Element]

ELEMENT_PROPERTIES = tuple(f.name for f in fields(Element) if f.name != "children")


def is_text(node: Any) -> bool:
    """Check whether a node is a text leaf."""
    return isinstance(node, Text)


def is_element(node: Any) -> bool:
    """Check whether a node is an element (the document root is not)."""
    return isinstance(node, Element)


def is_inline(node: Any) -> bool:
    """Check whether a node is an inline element."""
    return isinstance(node, Element) and node.type in INLINE_TYPES


def is_block(node: Any) -> bool:
    """Check whether a node is a block element, typeless elements included."""
    return isinstance(node, Element) and node.type not in INLINE_TYPES


def is_void(node: Any) -> bool:
    """Check whether a node is a void element (thematic break or image)."""
    return isinstance(node, Element) and node.type in VOID_TYPES


def is_list(node: Any) -> bool:
    """Check whether a node is one of the four list containers."""
    return isinstance(node, Element) and node.type in LIST_TYPES


def is_checklist(node: Any) -> bool:
    """Check whether a node is a checklist-typed list container."""
    return isinstance(node, Element) and node.type in CHECKLIST_TYPES


def get_node_children(node: Node) -> list[Node]:
    """Return the child list of a node, or an empty list for a text leaf."""
    if isinstance(node, (Document, Element)):
        return node.children
    return []


def has_blocks(node: Node) -> bool:
    """Check whether any child of a node is a block element."""
    return any(is_block(child) for child in get_node_children(node))


def has_inlines(node: Node) -> bool:
    """Check whether any child of a node is a text leaf or inline element."""
    return any(isinstance(child, Text) or is_inline(child) for child in get_node_children(node))


def node_string(node: Node) -> str:
    """Concatenate the text of every leaf under a node.

    Parameters
    ----------
    node : Node
        Any node of the tree

    Returns
    -------
    str
        The node's text content, without separators between blocks

    """
    if isinstance(node, Text):
        return node.text
    return "".join(node_string(child) for child in get_node_children(node))


def is_blank(node: Node) -> bool:
    """Check whether a node has no non-whitespace text.

    Images and thematic breaks are never blank. An element with no children is
    blank.

    Parameters
    ----------
    node : Node
        Node to test

    Returns
    -------
    bool
        True if the node carries no meaningful text

    """
    if isinstance(node, Text):
        return not node.text.strip()
    if isinstance(node, Element):
        if node.type in VOID_TYPES:
            return False
        if node.type in INLINE_TYPES:
            return not node_string(node).strip()
    return all(is_blank(child) for child in get_node_children(node))


def is_empty(node: Node) -> bool:
    """Check whether a node has zero-length text, images and rules excepted."""
    if isinstance(node, Text):
        return len(node.text) == 0
    if isinstance(node, Element):
        if node.type in VOID_TYPES:
            return False
        if node.type in INLINE_TYPES:
            return len(node_string(node)) == 0
    return all(is_empty(child) for child in get_node_children(node))


# ============================================================================
# Construction helpers
# ============================================================================


def text(value: str = "", **marks: bool) -> Text:
    """Create a text leaf with the given marks."""
    return Text(text=value, **marks)


def _coerce_children(children: tuple[Union[Node, str], ...]) -> list[Node]:
    return [Text(text=child) if isinstance(child, str) else child for child in children]


def element(type_: Optional[str], *children: Union[Node, str], **props: Any) -> Element:
    """Create an element; string children become unmarked text leaves.

    Examples
    --------
        >>> element("link", "docs", url="https://example.com/docs")
        Element(type='link', children=[Text(text='docs', ...)], url='https://example.com/docs', ...)

    """
    return Element(type=type_, children=_coerce_children(children), **props)


def paragraph(*children: Union[Node, str]) -> Element:
    """Create a paragraph; with no arguments it holds one empty text leaf."""
    return Element(type="paragraph", children=_coerce_children(children) or [Text()])


def clone_element_shell(source: Element) -> Element:
    """Return a copy of an element's properties with no children."""
    return Element(**{name: getattr(source, name) for name in ELEMENT_PROPERTIES})
