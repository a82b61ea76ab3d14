#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/editor.py
"""Editing operations on a note's document tree.

The :class:`Editor` owns a :class:`~richnote.ast.nodes.Document`, a selection
and the note's content subtype. Every operation reads the caret from
``editor.selection`` when it starts, mutates the tree through the primitive
transforms, normalizes, and then places the caret again.

Examples
--------
    >>> editor = Editor([paragraph("Shopping")])
    >>> editor.select(end_point(editor.document))
    >>> editor.insert_break()
    >>> editor.insert_text("milk")
    >>> [node_string(block) for block in editor.children]
    ['Shopping', 'milk']

"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Literal, Optional, Sequence

from richnote.ast.nodes import (
    Document,
    Element,
    Node,
    Text,
    is_block,
    is_empty,
    is_inline,
    is_void,
    node_string,
    paragraph,
)
from richnote.ast.paths import (
    Path,
    Point,
    Range,
    common_path,
    end_point,
    get_node,
    get_parent,
    iter_nodes,
    iter_texts,
    next_path,
    parent_path,
    start_point,
)
from richnote.ast.transforms import insert_nodes, lift_node, remove_node, split_node_at_point, wrap_range
from richnote.constants import CHECKLIST_TYPES, DEFAULT_RICH_SUBTYPE, LIST_TYPES, NoticeSeverity
from richnote.exceptions import RichNoteError, ValidationError
from richnote.options.normalization import NormalizationOptions
from richnote.transforms.normalization import NormalizationEngine
from richnote.utils.mime import target_format

logger = logging.getLogger(__name__)

DeleteUnit = Literal["character", "word"]

_BREAKABLE_TEXT_BLOCKS = frozenset(
    {"heading-one", "heading-two", "heading-three", "paragraph", "quote", "code", "thematic-break"}
)


@dataclass
class Notice:
    """A message for the user, produced by an editor or ingestion operation.

    Parameters
    ----------
    message : str
        Human-readable text
    severity : {"info", "warning", "error"}, default "info"
        How prominently the message should be shown

    """

    message: str
    severity: NoticeSeverity = "info"


# A caret remembered as a node plus a character offset into that node's text,
# so it survives the path changes normalization makes.
_CaretMarker = tuple[Node, int]


class Editor:
    """A note being edited: document tree, selection and content subtype.

    Parameters
    ----------
    children : sequence of Node, optional
        Initial top-level nodes; the editor normalizes them
    selection : Range, optional
        Initial selection; defaults to the end of the document on first use
    subtype : str, default "html;hint=SEMANTIC"
        Content subtype: ``html…`` for rich text, ``markdown…`` or anything
        else for plain text
    options : NormalizationOptions, optional
        Options for the normalization engine

    """

    def __init__(
        self,
        children: Optional[Sequence[Node]] = None,
        selection: Optional[Range] = None,
        subtype: str = DEFAULT_RICH_SUBTYPE,
        options: Optional[NormalizationOptions] = None,
    ):
        """Initialize and normalize the editor's document."""
        self.document = Document(children=list(children or []))
        self.selection = selection
        self.subtype = subtype
        self.notices: list[Notice] = []
        self._engine = NormalizationEngine(options)
        self._engine.normalize(self.document)

    @property
    def children(self) -> list[Node]:
        """Top-level nodes of the document."""
        return self.document.children

    def notify(self, message: str, severity: NoticeSeverity = "info") -> None:
        """Record a notice for the user."""
        self.notices.append(Notice(message, severity))

    # ------------------------------------------------------------------
    # Selection helpers
    # ------------------------------------------------------------------

    def select(self, anchor: Point, focus: Optional[Point] = None) -> None:
        """Set the selection; with one point the selection is collapsed."""
        self.selection = Range(anchor, focus or anchor)

    def _require_selection(self) -> Range:
        if self.selection is None:
            self.selection = Range.collapsed(end_point(self.document))
        for point in (self.selection.anchor, self.selection.focus):
            leaf = get_node(self.document, point.path)
            if not isinstance(leaf, Text) or not 0 <= point.offset <= len(leaf.text):
                raise ValidationError("Selection does not address a text position", parameter_name="selection")
        return self.selection

    def _block_path_of(self, path: Path) -> Path:
        for depth in range(len(path), 0, -1):
            if is_block(get_node(self.document, path[:depth])):
                return path[:depth]
        return ()

    def block_at_selection(self) -> tuple[Document | Element, Path]:
        """Return the lowest block containing both ends of the selection.

        Returns
        -------
        tuple
            ``(block, path)``; the document and ``()`` when no block encloses
            the whole selection

        """
        selection = self._require_selection()
        shared = common_path(selection.anchor.path, selection.focus.path)
        block_path = self._block_path_of(shared)
        node = get_node(self.document, block_path)
        assert isinstance(node, (Document, Element))
        return node, block_path

    def _path_of(self, target: Node) -> Optional[Path]:
        for node, path in iter_nodes(self.document):
            if node is target:
                return path
        return None

    def _marker_at(self, node_path: Path, point: Point) -> _CaretMarker:
        offset = 0
        for leaf, leaf_path in iter_texts(self.document, node_path):
            if leaf_path == point.path:
                return get_node(self.document, node_path), offset + point.offset
            offset += len(leaf.text)
        return get_node(self.document, node_path), offset

    def _place_caret(self, marker: _CaretMarker) -> None:
        node, offset = marker
        path = self._path_of(node)
        if path is None:
            logger.debug("Caret node was removed by normalization; moving caret to document end")
            self.selection = Range.collapsed(end_point(self.document))
            return
        remaining = offset
        last: Optional[Point] = None
        for leaf, leaf_path in iter_texts(self.document, path):
            if remaining <= len(leaf.text):
                self.selection = Range.collapsed(Point(leaf_path, remaining))
                return
            remaining -= len(leaf.text)
            last = Point(leaf_path, len(leaf.text))
        self.selection = Range.collapsed(last or end_point(self.document))

    def normalize(self, marker: Optional[_CaretMarker] = None) -> int:
        """Normalize the document and re-place the caret.

        Parameters
        ----------
        marker : tuple, optional
            Caret to restore; by default the current caret is remembered
            relative to its block

        Returns
        -------
        int
            Number of repairs applied

        """
        if marker is None and self.selection is not None:
            focus = self.selection.focus
            marker = self._marker_at(self._block_path_of(focus.path), focus)
        repairs = self._engine.normalize(self.document)
        if marker is not None:
            self._place_caret(marker)
        return repairs

    def _prune_empty_ancestors(self, path: Path) -> None:
        while path:
            node = get_node(self.document, path)
            if not (isinstance(node, Element) and not node.children):
                return
            remove_node(self.document, path)
            path = parent_path(path)

    # ------------------------------------------------------------------
    # Text editing
    # ------------------------------------------------------------------

    def insert_text(self, value: str) -> None:
        """Insert text at the caret, replacing an expanded selection."""
        selection = self._require_selection()
        if not selection.is_collapsed:
            self.delete_fragment()
            selection = self._require_selection()
        point = selection.focus
        leaf = get_node(self.document, point.path)
        assert isinstance(leaf, Text)
        leaf.text = leaf.text[: point.offset] + value + leaf.text[point.offset :]
        self.selection = Range.collapsed(Point(point.path, point.offset + len(value)))

    def delete_fragment(self) -> None:
        """Delete the content of an expanded selection."""
        selection = self._require_selection()
        if selection.is_collapsed:
            return
        start, end = selection.start, selection.end
        start_leaf = get_node(self.document, start.path)
        end_leaf = get_node(self.document, end.path)
        assert isinstance(start_leaf, Text) and isinstance(end_leaf, Text)

        if start.path == end.path:
            start_leaf.text = start_leaf.text[: start.offset] + start_leaf.text[end.offset :]
            self.selection = Range.collapsed(start)
            return

        start_block = get_node(self.document, self._block_path_of(start.path))
        end_block = get_node(self.document, self._block_path_of(end.path))
        block_offset = self._marker_at(self._block_path_of(start.path), start)[1]

        end_leaf.text = end_leaf.text[end.offset :]
        inside: list[Path] = []
        for node, path in iter_nodes(self.document):
            if any(path[: len(covered)] == covered for covered in inside):
                continue
            if start.path < path < end.path and end.path[: len(path)] != path:
                inside.append(path)
        for path in reversed(inside):
            remove_node(self.document, path)
        start_leaf.text = start_leaf.text[: start.offset]

        if start_block is not end_block and isinstance(start_block, Element) and isinstance(end_block, Element):
            end_path = self._path_of(end_block)
            if end_path is not None:
                start_block.children.extend(end_block.children)
                remove_node(self.document, end_path)
                self._prune_empty_ancestors(parent_path(end_path))
        self.normalize((start_block, block_offset))

    def _text_entries(self) -> list[tuple[Text, Path]]:
        return list(iter_texts(self.document))

    def delete_backward(self, unit: DeleteUnit = "character") -> None:
        """Delete backward from the caret, merging blocks at a block start.

        Deletion is suppressed at the start of a table cell.
        """
        selection = self._require_selection()
        if not selection.is_collapsed:
            self.delete_fragment()
            return
        point = selection.focus
        block, block_path = self.block_at_selection()
        at_block_start = point == start_point(self.document, block_path)
        if at_block_start and isinstance(block, Element) and block.type == "table-cell":
            logger.debug("Backward delete suppressed at start of table cell")
            return

        leaf = get_node(self.document, point.path)
        assert isinstance(leaf, Text)
        if point.offset > 0:
            count = _delete_count(leaf.text[: point.offset], unit, backward=True)
            leaf.text = leaf.text[: point.offset - count] + leaf.text[point.offset :]
            self.selection = Range.collapsed(Point(point.path, point.offset - count))
            return

        entries = self._text_entries()
        index = next(i for i, (_, path) in enumerate(entries) if path == point.path)
        if not at_block_start:
            for prev_leaf, prev_path in reversed(entries[:index]):
                if prev_path[: len(block_path)] == block_path and prev_leaf.text:
                    self.selection = Range.collapsed(Point(prev_path, len(prev_leaf.text)))
                    self.delete_backward(unit)
                    return
            return
        if index == 0:
            return

        prev_leaf, prev_path = entries[index - 1]
        prev_block_path = self._block_path_of(prev_path)
        prev_block = get_node(self.document, prev_block_path)
        if is_void(prev_block):
            marker = self._marker_at(block_path, point)
            remove_node(self.document, prev_block_path)
            self._prune_empty_ancestors(parent_path(prev_block_path))
            self.normalize(marker)
            return
        self._merge_blocks(prev_block_path, block_path)

    def delete_forward(self, unit: DeleteUnit = "character") -> None:
        """Delete forward from the caret, merging blocks at a block end.

        Deletion is suppressed at the end of a table cell.
        """
        selection = self._require_selection()
        if not selection.is_collapsed:
            self.delete_fragment()
            return
        point = selection.focus
        block, block_path = self.block_at_selection()
        at_block_end = point == end_point(self.document, block_path)
        if at_block_end and isinstance(block, Element) and block.type == "table-cell":
            logger.debug("Forward delete suppressed at end of table cell")
            return

        leaf = get_node(self.document, point.path)
        assert isinstance(leaf, Text)
        if point.offset < len(leaf.text):
            count = _delete_count(leaf.text[point.offset :], unit, backward=False)
            leaf.text = leaf.text[: point.offset] + leaf.text[point.offset + count :]
            return

        entries = self._text_entries()
        index = next(i for i, (_, path) in enumerate(entries) if path == point.path)
        if not at_block_end:
            for next_leaf, following_path in entries[index + 1 :]:
                if following_path[: len(block_path)] == block_path and next_leaf.text:
                    next_leaf.text = next_leaf.text[_delete_count(next_leaf.text, unit, backward=False) :]
                    return
            return
        if index == len(entries) - 1:
            return

        _, following_path = entries[index + 1]
        following_block_path = self._block_path_of(following_path)
        if is_void(get_node(self.document, following_block_path)):
            marker = self._marker_at(block_path, point)
            remove_node(self.document, following_block_path)
            self._prune_empty_ancestors(parent_path(following_block_path))
            self.normalize(marker)
            return
        self._merge_blocks(block_path, following_block_path)

    def _merge_blocks(self, target_path: Path, source_path: Path) -> None:
        """Append the source block's children to the target block."""
        target = get_node(self.document, target_path)
        source = get_node(self.document, source_path)
        assert isinstance(target, Element) and isinstance(source, Element)
        marker = (target, len(node_string(target)))
        target.children.extend(source.children)
        source_path = self._path_of(source) or source_path
        remove_node(self.document, source_path)
        self._prune_empty_ancestors(parent_path(source_path))
        self.normalize(marker)

    # ------------------------------------------------------------------
    # Breaks
    # ------------------------------------------------------------------

    def insert_break(self) -> None:
        """Insert a paragraph break at the caret.

        The effect depends on the block at the caret: list items lift out of
        their list when empty, images and text blocks at their end get a new
        paragraph after them, table structure is left alone, and everything
        else is split at the caret. Failures are logged and reported as a
        notice rather than raised.
        """
        try:
            self._insert_break()
        except (RichNoteError, IndexError, ValueError) as exc:
            logger.exception("Insert break failed")
            self.notify(f"Could not insert a line break: {exc}", "error")

    def _insert_empty_after(self, path: Path, node: Element) -> None:
        insert_nodes(self.document, next_path(path), [node])
        self.normalize((node, 0))

    def _split_at_caret(self, block_path: Path) -> None:
        point = self._require_selection().focus
        right_path = split_node_at_point(self.document, block_path, point)
        self.normalize((get_node(self.document, right_path), 0))

    def _insert_break(self) -> None:
        selection = self._require_selection()
        if not selection.is_collapsed:
            self.delete_fragment()
            selection = self._require_selection()
        block, path = self.block_at_selection()
        if isinstance(block, Document):
            logger.debug("Caret is not inside a block; break ignored")
            return

        block_type = block.type
        if block_type == "image":
            self._insert_empty_after(path, paragraph())
            return
        if block_type in ("table", "table-row"):
            return
        if block_type == "table-cell":
            wrap_range(self.document, path, 0, len(block.children), Element(type="paragraph"))
            point = selection.focus
            self.selection = Range.collapsed(Point(path + (0,) + point.path[len(path) :], point.offset))
            self._insert_break()
            return
        if block_type == "list-item":
            self._break_list_item(block, path)
            return
        if block_type in _BREAKABLE_TEXT_BLOCKS:
            parent = get_parent(self.document, path)
            if (
                isinstance(parent, Element)
                and parent.type in ("list-item", "quote")
                and path[-1] == len(parent.children) - 1
                and is_empty(block)
            ):
                remove_node(self.document, path)
                sibling = Element(
                    type="paragraph" if parent.type == "quote" else parent.type,
                    children=[Text()],
                    checked=False if parent.has_checked else None,
                )
                self._insert_empty_after(parent_path(path), sibling)
                return
            if selection.focus == end_point(self.document, path) and block_type != "code":
                self._insert_empty_after(path, paragraph())
                return
        self._split_at_caret(path)

    def _break_list_item(self, item: Element, path: Path) -> None:
        if is_empty(item) and len(path) >= 2:
            new_path = lift_node(self.document, path)
            lifted = get_node(self.document, new_path)
            assert isinstance(lifted, Element)
            lifted.type = "paragraph"
            lifted.checked = None
            self.normalize((lifted, 0))
            return
        if item.has_checked:
            focus = self._require_selection().focus
            if focus == end_point(self.document, path):
                self._insert_empty_after(path, Element(type="list-item", children=[Text()], checked=False))
                return
            right_path = split_node_at_point(self.document, path, focus)
            right = get_node(self.document, right_path)
            assert isinstance(right, Element)
            right.checked = False
            self.normalize((right, 0))
            return
        self._split_at_caret(path)

    # ------------------------------------------------------------------
    # Fragments and structure
    # ------------------------------------------------------------------

    def insert_fragment(self, nodes: Sequence[Node]) -> None:
        """Insert nodes at the caret, then normalize.

        An all-inline fragment is spliced into the text at the caret. A
        fragment containing blocks splits the caret block and lands between
        the halves.
        """
        fragment = [copy.deepcopy(node) for node in nodes]
        if not fragment:
            return
        selection = self._require_selection()
        if not selection.is_collapsed:
            self.delete_fragment()
            selection = self._require_selection()
        point = selection.focus

        if all(isinstance(node, Text) or is_inline(node) for node in fragment):
            block_path = self._block_path_of(point.path)
            block, offset = self._marker_at(block_path, point)
            leaf = get_node(self.document, point.path)
            assert isinstance(leaf, Text)
            siblings = get_parent(self.document, point.path).children
            index = point.path[-1]
            right = leaf.with_text(leaf.text[point.offset :])
            leaf.text = leaf.text[: point.offset]
            siblings[index + 1 : index + 1] = fragment + [right]
            inserted = sum(len(node_string(node)) for node in fragment)
            self.normalize((block, offset + inserted))
            return

        _, block_path = self.block_at_selection()
        if not block_path:
            self.document.children.extend(fragment)
            self.normalize((fragment[-1], len(node_string(fragment[-1]))))
            return
        right_path = split_node_at_point(self.document, block_path, point)
        left = get_node(self.document, block_path)
        right = get_node(self.document, right_path)
        insert_nodes(self.document, right_path, fragment)
        marker: _CaretMarker = (fragment[-1], len(node_string(fragment[-1])))
        for half in (right, left):
            half_path = self._path_of(half)
            if half_path is not None and is_empty(half):
                remove_node(self.document, half_path)
        self.normalize(marker)

    def _insertion_path(self) -> Path:
        _, block_path = self.block_at_selection()
        if not block_path:
            return (len(self.document.children),)
        return next_path(block_path)

    def insert_table_after(self) -> None:
        """Insert a 2x2 table with a bold header row after the caret block."""

        def cell(bold: bool = False) -> Element:
            return Element(type="table-cell", children=[Text(bold=bold)])

        table = Element(
            type="table",
            children=[
                Element(type="table-row", children=[cell(True), cell(True)]),
                Element(type="table-row", children=[cell(), cell()]),
            ],
        )
        insert_nodes(self.document, self._insertion_path(), [table])
        self.normalize((table, 0))

    def insert_list_after(self, list_type: str = "bulleted-list") -> None:
        """Insert a list with one empty item after the caret block."""
        if list_type not in LIST_TYPES:
            raise ValidationError(f"Unknown list type '{list_type}'", parameter_name="list_type", parameter_value=list_type)
        item = Element(type="list-item", children=[Text()], checked=False if list_type in CHECKLIST_TYPES else None)
        new_list = Element(type=list_type, children=[item])
        insert_nodes(self.document, self._insertion_path(), [new_list])
        self.normalize((item, 0))

    def change_content_type(self, new_subtype: str) -> None:
        """Convert the document between rich, Markdown and plain subtypes.

        Parameters
        ----------
        new_subtype : str
            Target subtype, e.g. ``"html;hint=SEMANTIC"`` or ``"markdown"``

        """
        from richnote.parsers.markdown import deserialize_markdown
        from richnote.renderers.markdown import serialize_markdown
        from richnote.renderers.plaintext import coerce_to_plain_text

        old_format = target_format(self.subtype)
        new_format = target_format(new_subtype)
        nodes: list[Node] = list(self.document.children)

        if old_format == "markdown" and new_format != "markdown":
            markdown = "\n".join(node_string(node) for node in nodes)
            nodes = deserialize_markdown(markdown)
            if new_format == "plain":
                nodes = list(coerce_to_plain_text(nodes))
        elif old_format == "rich" and new_format == "markdown":
            markdown = serialize_markdown(nodes)
            nodes = [paragraph(line) for line in markdown.split("\n")]
        elif new_format == "plain" and old_format != "plain":
            nodes = list(coerce_to_plain_text(nodes))

        logger.info("Changed content type from %s to %s", self.subtype, new_subtype)
        self.subtype = new_subtype
        self.document.children = nodes
        self.selection = None
        self._engine.normalize(self.document)
        self.selection = Range.collapsed(start_point(self.document))


def _delete_count(text: str, unit: DeleteUnit, backward: bool) -> int:
    """Return how many characters a delete of ``unit`` removes from ``text``."""
    if not text:
        return 0
    if unit == "character":
        return 1
    chars = reversed(text) if backward else iter(text)
    count = 0
    seen_word = False
    for char in chars:
        if char.isspace() and seen_word:
            break
        seen_word = seen_word or not char.isspace()
        count += 1
    return count
