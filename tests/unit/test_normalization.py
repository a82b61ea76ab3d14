#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_normalization.py
"""Unit and property tests for the normalization engine.

Tests cover:
- Placement of list items, table rows and table cells
- Regular tables and typed checklists
- Mixed block and inline children
- Blank inlines, hoisting of blocks out of links
- Text merging and empty document handling
- Convergence and idempotence on generated trees

"""

import logging

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from richnote.ast import Document, Element, Node, Text, element, is_block, is_inline, iter_nodes, node_string, paragraph, text
from richnote.constants import CHECKLIST_TYPES, LIST_TYPES
from richnote.exceptions import NormalizationError
from richnote.options import NormalizationOptions
from richnote.transforms import NormalizationEngine, link_label, normalize_document, normalize_nodes


def _types(nodes: list[Node]) -> list:
    return [node.type if isinstance(node, Element) else "text" for node in nodes]


@pytest.mark.unit
class TestListRules:
    """Tests for list structure repairs."""

    def test_orphan_list_item_wrapped_in_bulleted_list(self) -> None:
        """Test that a top-level list-item gets a bulleted-list parent."""
        nodes = normalize_nodes([element("list-item", "milk")])
        assert _types(nodes) == ["bulleted-list"]
        assert nodes[0].children[0].type == "list-item"

    def test_orphan_checked_item_wrapped_in_task_list(self) -> None:
        """Test that an orphan item with a checked field gets a task-list parent."""
        nodes = normalize_nodes([element("list-item", "milk", checked=True)])
        assert nodes[0].type == "task-list"
        assert nodes[0].children[0].checked is True

    def test_blank_orphan_list_item_removed(self) -> None:
        """Test that a blank list-item outside a list is dropped."""
        nodes = normalize_nodes([paragraph("a"), element("list-item", " ")])
        assert _types(nodes) == ["paragraph"]

    def test_dropped_orphans_logged_as_warnings(self, caplog) -> None:
        """Test that removing an orphan is visible at WARNING even without repair logging."""
        options = NormalizationOptions(log_repairs=False)
        with caplog.at_level(logging.WARNING, logger="richnote.transforms.normalization"):
            normalize_nodes([paragraph("a"), element("list-item", " "), element("table-cell", " ")], options)
        messages = [record.getMessage() for record in caplog.records if record.levelno == logging.WARNING]
        assert any("removed blank list-item outside a list" in message for message in messages)
        assert any("removed blank orphan table-cell" in message for message in messages)

    def test_paragraph_in_list_retyped(self) -> None:
        """Test that a paragraph child of a list becomes a list-item."""
        nodes = normalize_nodes([element("numbered-list", paragraph("one"))])
        assert nodes[0].children[0].type == "list-item"

    def test_checklist_items_get_checked(self) -> None:
        """Test that checklist items always carry checked."""
        nodes = normalize_nodes([element("task-list", element("list-item", "a"), paragraph("b"))])
        assert [item.checked for item in nodes[0].children] == [False, False]

    def test_empty_list_removed(self) -> None:
        """Test that a list with no children disappears."""
        nodes = normalize_nodes([paragraph("a"), Element("bulleted-list", [])])
        assert _types(nodes) == ["paragraph"]


@pytest.mark.unit
class TestTableRules:
    """Tests for table structure repairs."""

    def test_orphan_cell_wrapped_in_row_and_table(self) -> None:
        """Test that a top-level table-cell gets a row and a table."""
        nodes = normalize_nodes([element("table-cell", "x")])
        assert nodes[0].type == "table"
        assert nodes[0].children[0].type == "table-row"
        assert nodes[0].children[0].children[0].type == "table-cell"

    def test_short_rows_padded(self) -> None:
        """Test that every row gets as many cells as the widest row."""
        table = element(
            "table",
            element("table-row", element("table-cell", "a"), element("table-cell", "b"), element("table-cell", "c")),
            element("table-row", element("table-cell", "d")),
        )
        nodes = normalize_nodes([table])
        assert [len(row.children) for row in nodes[0].children] == [3, 3]

    def test_padded_header_cells_are_bold(self) -> None:
        """Test that padding a bold header row adds bold cells."""
        table = element(
            "table",
            element("table-row", element("table-cell", text("h", bold=True))),
            element("table-row", element("table-cell", "a"), element("table-cell", "b")),
        )
        nodes = normalize_nodes([table])
        header = nodes[0].children[0]
        assert header.children[1].children[0].bold is True

    def test_empty_table_removed(self) -> None:
        """Test that a table with no rows disappears."""
        nodes = normalize_nodes([paragraph("a"), Element("table", [])])
        assert _types(nodes) == ["paragraph"]


@pytest.mark.unit
class TestContentRules:
    """Tests for mixed content, inlines and text leaves."""

    def test_top_level_text_wrapped_in_paragraph(self) -> None:
        """Test that bare text at the top level becomes a paragraph."""
        nodes = normalize_nodes([Text("loose"), paragraph("block")])
        assert _types(nodes) == ["paragraph", "paragraph"]
        assert node_string(nodes[0]) == "loose"

    def test_mixed_children_in_quote(self) -> None:
        """Test that an inline run beside a block is wrapped."""
        nodes = normalize_nodes([element("quote", "intro", paragraph("body"))])
        assert _types(nodes[0].children) == ["paragraph", "paragraph"]

    def test_blank_link_removed(self) -> None:
        """Test that a link with only whitespace is removed."""
        nodes = normalize_nodes([paragraph("a", element("link", " ", url="u"), "b")])
        assert _types(nodes[0].children) == ["text"]
        assert node_string(nodes[0]) == "ab"

    def test_block_hoisted_out_of_link(self) -> None:
        """Test that a paragraph inside a link moves after the enclosing block."""
        link = element("link", paragraph("inner"), url="https://example.com/page")
        nodes = normalize_nodes([paragraph("a", link, "b")])
        assert [node_string(node) for node in nodes] == ["apage", "inner", "b"]
        assert _types(nodes) == ["paragraph", "paragraph", "paragraph"]

    def test_inserted_and_deleted_keeps_inserted(self) -> None:
        """Test that a leaf cannot be both inserted and deleted."""
        nodes = normalize_nodes([paragraph(text("x", inserted=True, deleted=True))])
        leaf = nodes[0].children[0]
        assert leaf.inserted and not leaf.deleted

    def test_adjacent_texts_with_same_marks_merged(self) -> None:
        """Test merging of equally marked leaves."""
        nodes = normalize_nodes([paragraph(text("a", bold=True), text("b", bold=True), text("c"))])
        assert [leaf.text for leaf in nodes[0].children] == ["ab", "c"]

    def test_typeless_top_level_element_becomes_paragraph(self) -> None:
        """Test that a typeless top-level element is typed."""
        nodes = normalize_nodes([Element(None, [Text("x")])])
        assert nodes[0].type == "paragraph"

    def test_empty_document_gets_paragraph(self) -> None:
        """Test that an empty document gets one empty paragraph."""
        doc = normalize_document(Document())
        assert _types(doc.children) == ["paragraph"]
        assert node_string(doc) == ""

    def test_childless_block_gets_empty_text(self) -> None:
        """Test that a childless block gets an empty leaf."""
        nodes = normalize_nodes([Element("heading-one", [])])
        assert nodes[0].children == [Text()]


@pytest.mark.unit
class TestEngine:
    """Tests for engine behavior."""

    def test_normalized_tree_needs_no_repairs(self, sample_document: Document) -> None:
        """Test that an already-valid tree is left alone."""
        assert NormalizationEngine().normalize(sample_document) == 0

    def test_repairs_are_counted(self) -> None:
        """Test that the engine reports how many repairs it made."""
        doc = Document(children=[element("list-item", "a")])
        assert NormalizationEngine().normalize(doc) >= 1

    def test_max_passes_exceeded_raises(self) -> None:
        """Test that running out of passes raises NormalizationError."""
        doc = Document(children=[element("table-cell", "a"), element("list-item", "b")])
        engine = NormalizationEngine(NormalizationOptions(max_passes=1))
        with pytest.raises(NormalizationError):
            engine.normalize(doc)

    def test_invalid_max_passes(self) -> None:
        """Test the options range check."""
        with pytest.raises(ValueError):
            NormalizationOptions(max_passes=0)

    def test_link_label(self) -> None:
        """Test the label derived from a link target."""
        assert link_label("https://example.com/docs/") == "docs"
        assert link_label("") == "link"
        assert len(link_label("https://example.com/" + "x" * 80)) == 52


# ----------------------------------------------------------------------------
# Property tests
# ----------------------------------------------------------------------------

_ELEMENT_TYPES = [
    None,
    "paragraph",
    "heading-one",
    "quote",
    "code",
    "link",
    "image",
    "thematic-break",
    "bulleted-list",
    "task-list",
    "numbered-list",
    "list-item",
    "table",
    "table-row",
    "table-cell",
]

_texts = st.builds(
    Text,
    st.text(alphabet="ab \n", max_size=4),
    bold=st.booleans(),
    italic=st.booleans(),
    inserted=st.booleans(),
    deleted=st.booleans(),
)


def _elements(children: st.SearchStrategy) -> st.SearchStrategy:
    return st.builds(
        lambda type_, kids, checked: Element(
            type_,
            kids,
            url="https://example.com/x" if type_ in ("link", "image") else None,
            checked=checked if type_ == "list-item" else None,
        ),
        st.sampled_from(_ELEMENT_TYPES),
        st.lists(children, max_size=4),
        st.sampled_from([None, True, False]),
    )


_nodes = st.recursive(_texts, _elements, max_leaves=12)
_documents = st.builds(lambda children: Document(children=children), st.lists(_nodes, max_size=4))


def _is_flow(node: Node) -> bool:
    return isinstance(node, Text) or is_inline(node)


@pytest.mark.unit
@pytest.mark.slow
class TestNormalizationProperties:
    """Property tests on generated trees."""

    @given(_documents)
    @settings(suppress_health_check=[HealthCheck.too_slow], deadline=None)
    def test_normalization_is_idempotent(self, doc: Document) -> None:
        """Property: a normalized tree needs no further repairs."""
        NormalizationEngine().normalize(doc)
        assert NormalizationEngine().normalize(doc) == 0

    @given(_documents)
    @settings(suppress_health_check=[HealthCheck.too_slow], deadline=None)
    def test_no_mixed_children(self, doc: Document) -> None:
        """Property: no parent holds both blocks and inline content."""
        NormalizationEngine().normalize(doc)
        assert doc.children
        assert all(is_block(child) for child in doc.children)
        for node, _path in iter_nodes(doc):
            if isinstance(node, Element):
                has_block = any(is_block(child) for child in node.children)
                has_flow = any(_is_flow(child) for child in node.children)
                assert not (has_block and has_flow)

    @given(_documents)
    @settings(suppress_health_check=[HealthCheck.too_slow], deadline=None)
    def test_lists_are_typed(self, doc: Document) -> None:
        """Property: list items live in lists, and checklist items are checked or not."""
        NormalizationEngine().normalize(doc)
        for node, _path in iter_nodes(doc):
            if not isinstance(node, (Document, Element)):
                continue
            for child in node.children:
                if isinstance(child, Element) and child.type == "list-item":
                    assert isinstance(node, Element) and node.type in LIST_TYPES
            if isinstance(node, Element) and node.type in LIST_TYPES:
                assert node.children
                for child in node.children:
                    assert isinstance(child, Element) and child.type == "list-item"
                    if node.type in CHECKLIST_TYPES:
                        assert child.checked is not None

    @given(_documents)
    @settings(suppress_health_check=[HealthCheck.too_slow], deadline=None)
    def test_tables_are_regular(self, doc: Document) -> None:
        """Property: cells sit in rows, rows in tables, and rows have equal length."""
        NormalizationEngine().normalize(doc)
        for node, _path in iter_nodes(doc):
            if not isinstance(node, (Document, Element)):
                continue
            parent_type = node.type if isinstance(node, Element) else None
            for child in node.children:
                if isinstance(child, Element) and child.type == "table-cell":
                    assert parent_type == "table-row"
                if isinstance(child, Element) and child.type == "table-row":
                    assert parent_type == "table"
            if parent_type == "table":
                assert all(isinstance(row, Element) and row.type == "table-row" for row in node.children)
                assert len({len(row.children) for row in node.children}) == 1

    @given(_documents)
    @settings(suppress_health_check=[HealthCheck.too_slow], deadline=None)
    def test_no_leaf_both_inserted_and_deleted(self, doc: Document) -> None:
        """Property: edit marks never conflict after normalization."""
        NormalizationEngine().normalize(doc)
        for node, _path in iter_nodes(doc):
            if isinstance(node, Text):
                assert not (node.inserted and node.deleted)
