#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/ast/__init__.py
"""Document tree for rich-text notes.

The module consists of several components:

- nodes: the Document, Element and Text node classes and structural queries
- paths: path-based navigation, caret points and selection ranges
- transforms: primitive in-place mutations used by normalization and editing
- visitors: visitor pattern base classes for traversal and rendering

Examples
--------
    >>> from richnote.ast import Document, element, paragraph, text
    >>> doc = Document(children=[
    ...     element("heading-one", "Groceries"),
    ...     paragraph("Milk and ", text("eggs", bold=True)),
    ... ])

"""

from richnote.ast.nodes import (
    Document,
    Element,
    Node,
    ParentNode,
    Text,
    clone_element_shell,
    element,
    get_node_children,
    has_blocks,
    has_inlines,
    is_blank,
    is_block,
    is_checklist,
    is_element,
    is_empty,
    is_inline,
    is_list,
    is_text,
    is_void,
    node_string,
    paragraph,
    text,
)
from richnote.ast.paths import (
    Path,
    Point,
    Range,
    common_path,
    end_point,
    first_text_path,
    get_node,
    get_parent,
    iter_nodes,
    iter_texts,
    last_text_path,
    next_path,
    parent_path,
    path_ancestors,
    previous_path,
    siblings,
    start_point,
)
from richnote.ast.visitors import NodeCollector, NodeVisitor, extract_nodes

__all__ = [
    # Nodes
    "Node",
    "Document",
    "Element",
    "Text",
    "ParentNode",
    # Queries
    "is_text",
    "is_element",
    "is_inline",
    "is_block",
    "is_void",
    "is_list",
    "is_checklist",
    "is_blank",
    "is_empty",
    "has_blocks",
    "has_inlines",
    "node_string",
    "get_node_children",
    # Construction
    "text",
    "element",
    "paragraph",
    "clone_element_shell",
    # Navigation
    "Path",
    "Point",
    "Range",
    "get_node",
    "get_parent",
    "parent_path",
    "next_path",
    "previous_path",
    "siblings",
    "path_ancestors",
    "common_path",
    "iter_nodes",
    "iter_texts",
    "first_text_path",
    "last_text_path",
    "start_point",
    "end_point",
    # Visitors
    "NodeVisitor",
    "NodeCollector",
    "extract_nodes",
]
