#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/transforms/normalization.py
"""Structural repair of document trees.

The engine repeatedly scans the tree depth-first, children before parents and
the document last, evaluating an ordered rule list on each node. The first rule
that changes the tree ends the pass and the scan starts over. Normalization is
complete when a full pass makes no change.

After normalization a tree satisfies these properties:

- every list-item is a child of one of the four list types, and every child of
  a list is a list-item; list-items in checklists carry ``checked``
- every table-cell is in a table-row, every table-row is in a table, and all
  rows of a table have the same number of cells
- no element has both block and inline children, and the document has only
  block children
- no inline element is blank or holds a block
- no text leaf is both inserted and deleted
- the document is never empty

Examples
--------
    >>> doc = Document(children=[Element("list-item", [Text("milk")])])
    >>> normalize_document(doc).children[0].type
    'bulleted-list'

"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from richnote.ast.nodes import (
    Document,
    Element,
    Node,
    Text,
    clone_element_shell,
    has_blocks,
    is_blank,
    is_block,
    is_checklist,
    is_inline,
    is_list,
)
from richnote.ast.paths import Path, get_parent, iter_nodes, next_path, parent_path
from richnote.ast.transforms import insert_nodes, remove_node, set_properties, wrap_node, wrap_range
from richnote.constants import LINK_LABEL_MAX, LIST_TYPES, RETYPEABLE_AS_LIST_ITEM
from richnote.exceptions import NormalizationError
from richnote.options.normalization import NormalizationOptions

logger = logging.getLogger(__name__)

Rule = Callable[[Document, Node, Path], bool]

_URL_LABEL_RE = re.compile(r"([^/]+)/?$")


def link_label(url: Optional[str]) -> str:
    """Derive a short label from the last path segment of a URL.

    Parameters
    ----------
    url : str or None
        Link target

    Returns
    -------
    str
        The last segment, at most 52 characters, or ``"link"``

    """
    match = _URL_LABEL_RE.search(url or "")
    if match is None:
        return "link"
    return match.group(1)[:LINK_LABEL_MAX]


def wrap_block_for(parent: Node) -> Element:
    """Return a new block suitable for wrapping inline content inside ``parent``.

    Plain lists get a list-item, checklists a list-item with ``checked=False``,
    table rows a table-cell, tables a table-row, and everything else a
    paragraph.
    """
    if isinstance(parent, Element):
        if parent.type in LIST_TYPES:
            return Element(type="list-item", checked=False if is_checklist(parent) else None)
        if parent.type == "table-row":
            return Element(type="table-cell")
        if parent.type == "table":
            return Element(type="table-row")
    return Element(type="paragraph")


def _is_flow(node: Node) -> bool:
    return isinstance(node, Text) or is_inline(node)


def _flow_run(children: list[Node], index: int) -> tuple[int, int]:
    """Return the bounds of the run of text/inline siblings around ``index``."""
    start = index
    while start > 0 and _is_flow(children[start - 1]):
        start -= 1
    end = index + 1
    while end < len(children) and _is_flow(children[end]):
        end += 1
    return start, end


class NormalizationEngine:
    """Repair a document tree until it satisfies the structural invariants.

    Parameters
    ----------
    options : NormalizationOptions or None, default = None
        Engine configuration

    Examples
    --------
        >>> engine = NormalizationEngine()
        >>> repairs = engine.normalize(document)

    """

    def __init__(self, options: NormalizationOptions | None = None):
        """Initialize the engine with its ordered rule list."""
        self.options = options or NormalizationOptions()
        self._rules: list[Rule] = [
            self._accept_edits,
            self._hoist_block_from_inline,
            self._remove_blank_inline,
            self._place_list_item,
            self._regularize_list,
            self._place_table_parts,
            self._regularize_table,
            self._wrap_mixed_children,
            self._type_top_level,
            self._fill_empty_document,
            self._fill_empty_element,
            self._merge_adjacent_texts,
            self._remove_empty_text,
        ]

    def normalize(self, document: Document) -> int:
        """Normalize ``document`` in place.

        Parameters
        ----------
        document : Document
            Tree to repair

        Returns
        -------
        int
            Number of repairs applied

        Raises
        ------
        NormalizationError
            If the tree has not converged after ``options.max_passes`` repairs

        """
        repairs = 0
        while self._run_pass(document):
            repairs += 1
            if repairs >= self.options.max_passes:
                raise NormalizationError(
                    f"Normalization did not converge after {repairs} passes", passes=repairs
                )
        if repairs:
            logger.debug("Normalization applied %d repairs", repairs)
        return repairs

    def _run_pass(self, document: Document) -> bool:
        for node, path in iter_nodes(document, "post"):
            for rule in self._rules:
                if rule(document, node, path):
                    return True
        return False

    def _log(self, path: Path, message: str, *args: object, level: int = logging.DEBUG) -> None:
        if level >= logging.WARNING or self.options.log_repairs:
            logger.log(level, "Repair at %s: " + message, path, *args)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _accept_edits(self, document: Document, node: Node, path: Path) -> bool:
        if isinstance(node, Text) and node.deleted and node.inserted:
            node.deleted = False
            self._log(path, "cleared deleted mark on inserted text")
            return True
        return False

    def _hoist_block_from_inline(self, document: Document, node: Node, path: Path) -> bool:
        if not is_inline(node) or not has_blocks(node):
            return False
        assert isinstance(node, Element)
        parent = get_parent(document, path)
        container_path = parent_path(path)

        if (
            isinstance(parent, Document)
            or parent.type in LIST_TYPES
            or parent.type in ("table", "table-row")
            or has_blocks(parent)
        ):
            start, end = _flow_run(parent.children, path[-1])
            wrapper = wrap_block_for(parent)
            wrap_range(document, container_path, start, end, wrapper)
            self._log(path, "wrapped inline run in %s before hoisting", wrapper.type)
            return True

        block_index = max(i for i, child in enumerate(node.children) if is_block(child))
        block = node.children.pop(block_index)
        trailing = parent.children[path[-1] + 1 :]
        del parent.children[path[-1] + 1 :]

        if not node.children and node.type == "link":
            node.children.append(Text(text=link_label(node.url)))

        hoisted_path = next_path(container_path)
        insert_nodes(document, hoisted_path, [block])
        if trailing:
            tail = clone_element_shell(parent)
            tail.children = trailing
            insert_nodes(document, next_path(hoisted_path), [tail])
        self._log(path, "hoisted %s out of %s", block.type if isinstance(block, Element) else "node", node.type)
        return True

    def _remove_blank_inline(self, document: Document, node: Node, path: Path) -> bool:
        if is_inline(node) and is_blank(node):
            remove_node(document, path)
            self._log(path, "removed blank inline")
            return True
        return False

    def _place_list_item(self, document: Document, node: Node, path: Path) -> bool:
        if not isinstance(node, Element) or node.type != "list-item":
            return False
        parent = get_parent(document, path)
        if is_list(parent):
            if not node.children:
                remove_node(document, path)
                self._log(path, "removed list-item with no children", level=logging.WARNING)
                return True
            return False
        if is_blank(node):
            remove_node(document, path)
            self._log(path, "removed blank list-item outside a list", level=logging.WARNING)
            return True
        list_type = "task-list" if node.has_checked else "bulleted-list"
        wrap_node(document, path, Element(type=list_type))
        self._log(path, "wrapped orphan list-item in %s", list_type)
        return True

    def _regularize_list(self, document: Document, node: Node, path: Path) -> bool:
        if not is_list(node):
            return False
        assert isinstance(node, Element)
        if not node.children:
            remove_node(document, path)
            self._log(path, "removed empty %s", node.type, level=logging.WARNING)
            return True
        checklist = is_checklist(node)
        for index, child in enumerate(node.children):
            child_path = path + (index,)
            if isinstance(child, Element) and child.type == "list-item":
                if checklist and not child.has_checked:
                    child.checked = False
                    self._log(child_path, "added checked=False to checklist item")
                    return True
                continue
            if is_blank(child):
                remove_node(document, child_path)
                self._log(child_path, "removed blank non-item from %s", node.type, level=logging.WARNING)
                return True
            if isinstance(child, Element) and child.type in RETYPEABLE_AS_LIST_ITEM:
                set_properties(document, child_path, type="list-item", checked=False if checklist else None)
                self._log(child_path, "retyped %s to list-item", child.type)
                return True
            wrap_node(document, child_path, Element(type="list-item", checked=False if checklist else None))
            self._log(child_path, "wrapped list child in list-item")
            return True
        return False

    def _place_table_parts(self, document: Document, node: Node, path: Path) -> bool:
        if not isinstance(node, Element) or node.type not in ("table-cell", "table-row"):
            return False
        parent = get_parent(document, path)
        required_parent, wrapper_type = ("table-row", "table-row") if node.type == "table-cell" else ("table", "table")
        parent_type = parent.type if isinstance(parent, Element) else None

        if parent_type == required_parent:
            if node.type == "table-row" and not node.children:
                remove_node(document, path)
                self._log(path, "removed table-row with no cells", level=logging.WARNING)
                return True
            return False
        if is_blank(node):
            remove_node(document, path)
            self._log(path, "removed blank orphan %s", node.type, level=logging.WARNING)
            return True
        wrap_node(document, path, Element(type=wrapper_type))
        self._log(path, "wrapped orphan %s in %s", node.type, wrapper_type)
        return True

    def _regularize_table(self, document: Document, node: Node, path: Path) -> bool:
        if not isinstance(node, Element) or node.type != "table":
            return False
        if not node.children:
            remove_node(document, path)
            self._log(path, "removed table with no rows")
            return True

        for index, row in enumerate(node.children):
            row_path = path + (index,)
            if isinstance(row, Element) and row.type == "table-row":
                continue
            if is_blank(row):
                remove_node(document, row_path)
                self._log(row_path, "removed blank non-row from table")
                return True
            wrap_node(document, row_path, Element(type="table-row"))
            self._log(row_path, "wrapped table child in table-row")
            return True

        rows = [row for row in node.children if isinstance(row, Element)]
        for row_index, row in enumerate(rows):
            for cell_index, cell in enumerate(row.children):
                if not (isinstance(cell, Element) and cell.type == "table-cell"):
                    wrap_node(document, path + (row_index, cell_index), Element(type="table-cell"))
                    self._log(path + (row_index, cell_index), "wrapped row child in table-cell")
                    return True

        width = max(1, max(len(row.children) for row in rows))
        for row_index, row in enumerate(rows):
            missing = width - len(row.children)
            if missing <= 0:
                continue
            bold = row_index == 0 and _last_cell_starts_bold(row)
            row.children.extend(Element(type="table-cell", children=[Text(bold=bold)]) for _ in range(missing))
            self._log(path + (row_index,), "padded row with %d cells", missing)
            return True
        return False

    def _wrap_mixed_children(self, document: Document, node: Node, path: Path) -> bool:
        if isinstance(node, Document):
            if not any(_is_flow(child) for child in node.children):
                return False
        elif not (isinstance(node, Element) and has_blocks(node) and any(_is_flow(c) for c in node.children)):
            return False
        children = node.children
        start = next(i for i, child in enumerate(children) if _is_flow(child))
        _, end = _flow_run(children, start)
        wrap_range(document, path, start, end, Element(type="paragraph"))
        self._log(path, "wrapped inline run %d..%d in paragraph", start, end)
        return True

    def _type_top_level(self, document: Document, node: Node, path: Path) -> bool:
        if isinstance(node, Element) and node.type is None and len(path) == 1:
            node.type = "paragraph"
            self._log(path, "typed top-level element as paragraph")
            return True
        return False

    def _fill_empty_document(self, document: Document, node: Node, path: Path) -> bool:
        if isinstance(node, Document) and not node.children:
            node.children.append(Element(type="paragraph", children=[Text()]))
            self._log(path, "added paragraph to empty document")
            return True
        return False

    def _fill_empty_element(self, document: Document, node: Node, path: Path) -> bool:
        if isinstance(node, Element) and not is_inline(node) and not node.children:
            node.children.append(Text())
            self._log(path, "added empty text to childless %s", node.type)
            return True
        return False

    def _merge_adjacent_texts(self, document: Document, node: Node, path: Path) -> bool:
        if isinstance(node, Text):
            return False
        children = node.children  # type: ignore[attr-defined]
        for index in range(len(children) - 1):
            left, right = children[index], children[index + 1]
            if isinstance(left, Text) and isinstance(right, Text) and left.has_same_marks(right):
                left.text += right.text
                del children[index + 1]
                self._log(path + (index,), "merged adjacent text")
                return True
        return False

    def _remove_empty_text(self, document: Document, node: Node, path: Path) -> bool:
        if isinstance(node, Text):
            return False
        children = node.children  # type: ignore[attr-defined]
        if len(children) < 2:
            return False
        for index, child in enumerate(children[:-1]):
            if isinstance(child, Text) and not child.text:
                del children[index]
                self._log(path + (index,), "removed empty text")
                return True
        return False


def _last_cell_starts_bold(row: Element) -> bool:
    if not row.children:
        return False
    last_cell = row.children[-1]
    for leaf, _ in iter_nodes(last_cell):
        if isinstance(leaf, Text):
            return leaf.bold
    return False


def normalize_document(document: Document, options: NormalizationOptions | None = None) -> Document:
    """Normalize a document in place and return it.

    Parameters
    ----------
    document : Document
        Tree to repair
    options : NormalizationOptions or None, default = None
        Engine configuration

    Returns
    -------
    Document
        The same document, repaired

    """
    NormalizationEngine(options).normalize(document)
    return document


def normalize_nodes(nodes: list[Node], options: NormalizationOptions | None = None) -> list[Node]:
    """Normalize a list of top-level nodes as a document and return its children."""
    return normalize_document(Document(children=list(nodes)), options).children
