#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_ast.py
"""Unit tests for document tree nodes, paths and primitive transforms.

Tests cover:
- Block, inline and void classification
- Text content, blankness and emptiness
- Path navigation and caret points
- Primitive in-place transforms

"""

import pytest

from richnote.ast import (
    Document,
    Element,
    Point,
    Range,
    Text,
    common_path,
    element,
    end_point,
    get_node,
    get_parent,
    is_blank,
    is_block,
    is_empty,
    is_inline,
    is_void,
    iter_nodes,
    node_string,
    paragraph,
    start_point,
    text,
)
from richnote.ast.transforms import (
    insert_nodes,
    lift_node,
    remove_node,
    set_properties,
    split_children,
    split_node_at_point,
    unset_property,
    unwrap_node,
    wrap_range,
)
from richnote.ast.visitors import extract_nodes
from richnote.exceptions import ValidationError


@pytest.mark.unit
class TestClassification:
    """Tests for node classification."""

    def test_link_is_inline(self) -> None:
        """Test that links are inline and not blocks."""
        link = element("link", "docs", url="https://example.com")
        assert is_inline(link)
        assert not is_block(link)

    def test_image_is_void_block(self) -> None:
        """Test that images are void blocks."""
        image = element("image", "alt", url="data:image/png;base64,AAAA")
        assert is_block(image)
        assert is_void(image)

    def test_typeless_element_is_block(self) -> None:
        """Test that an element without a type counts as a block."""
        assert is_block(Element(None, [Text("x")]))

    def test_text_is_neither(self) -> None:
        """Test that text leaves are neither blocks nor inline elements."""
        leaf = Text("x")
        assert not is_block(leaf)
        assert not is_inline(leaf)

    def test_marks_reports_active_marks_only(self) -> None:
        """Test that marks() lists only the marks that are set."""
        assert text("x", bold=True, code=True).marks() == {"bold": True, "code": True}
        assert Text("x").marks() == {}


@pytest.mark.unit
class TestTextContent:
    """Tests for node_string, is_blank and is_empty."""

    def test_node_string_concatenates_leaves(self) -> None:
        """Test that text is joined without separators."""
        doc = Document(children=[paragraph("one ", element("link", "two", url="u")), paragraph("three")])
        assert node_string(doc) == "one twothree"

    def test_whitespace_paragraph_is_blank_but_not_empty(self) -> None:
        """Test the difference between blank and empty."""
        node = paragraph("  ")
        assert is_blank(node)
        assert not is_empty(node)

    def test_images_and_rules_are_never_blank(self) -> None:
        """Test that void elements are not blank even without text."""
        assert not is_blank(element("image", "", url="x"))
        assert not is_blank(element("thematic-break", ""))
        assert not is_empty(element("thematic-break", ""))

    def test_childless_element_is_blank(self) -> None:
        """Test that an element with no children is blank."""
        assert is_blank(Element("paragraph"))


@pytest.mark.unit
class TestPaths:
    """Tests for path navigation."""

    def test_get_node_and_parent(self, sample_document: Document) -> None:
        """Test addressing a nested node."""
        item = get_node(sample_document, (2, 1))
        assert isinstance(item, Element) and item.type == "list-item"
        assert get_parent(sample_document, (2, 1)).type == "bulleted-list"

    def test_get_node_out_of_range(self, sample_document: Document) -> None:
        """Test that a bad path raises ValidationError."""
        with pytest.raises(ValidationError):
            get_node(sample_document, (9,))

    def test_start_and_end_points(self, sample_document: Document) -> None:
        """Test the first and last caret positions of a document."""
        assert start_point(sample_document) == Point((0, 0), 0)
        assert end_point(sample_document) == Point((3, 1, 1, 0), 1)

    def test_common_path(self) -> None:
        """Test the shared prefix of two paths."""
        assert common_path((1, 2, 3), (1, 2, 5)) == (1, 2)
        assert common_path((0,), (1,)) == ()

    def test_range_start_end_ordering(self) -> None:
        """Test that a backward selection reports start before end."""
        selection = Range(Point((1, 0), 2), Point((0, 0), 1))
        assert selection.start == Point((0, 0), 1)
        assert selection.end == Point((1, 0), 2)
        assert not selection.is_collapsed

    def test_iter_nodes_post_order_visits_children_first(self) -> None:
        """Test post-order traversal."""
        doc = Document(children=[paragraph("a")])
        order = [path for _, path in iter_nodes(doc, "post")]
        assert order == [(0, 0), (0,), ()]


@pytest.mark.unit
class TestPrimitiveTransforms:
    """Tests for in-place tree mutations."""

    def test_insert_and_remove(self) -> None:
        """Test inserting and removing top-level nodes."""
        doc = Document(children=[paragraph("a")])
        insert_nodes(doc, (1,), [paragraph("b"), paragraph("c")])
        assert [node_string(n) for n in doc.children] == ["a", "b", "c"]
        removed = remove_node(doc, (1,))
        assert node_string(removed) == "b"

    def test_insert_past_end_raises(self) -> None:
        """Test that inserting beyond the end is rejected."""
        doc = Document(children=[paragraph("a")])
        with pytest.raises(ValidationError):
            insert_nodes(doc, (5,), [paragraph("b")])

    def test_wrap_range_and_unwrap(self) -> None:
        """Test wrapping two children and unwrapping them again."""
        doc = Document(children=[paragraph("a"), paragraph("b"), paragraph("c")])
        wrap_range(doc, (), 0, 2, Element("quote"))
        assert doc.children[0].type == "quote"
        assert len(doc.children) == 2
        assert unwrap_node(doc, (0,)) == 2
        assert len(doc.children) == 3

    def test_set_and_unset_properties(self) -> None:
        """Test setting element and text properties."""
        doc = Document(children=[paragraph("a")])
        set_properties(doc, (0, 0), bold=True)
        assert doc.children[0].children[0].bold
        unset_property(doc, (0, 0), "bold")
        assert not doc.children[0].children[0].bold
        with pytest.raises(ValidationError):
            set_properties(doc, (0,), colour="red")

    def test_split_children(self) -> None:
        """Test splitting an element's children into two siblings."""
        doc = Document(children=[element("quote", paragraph("a"), paragraph("b"))])
        right = split_children(doc, (0,), 1)
        assert right == (1,)
        assert [node_string(n) for n in doc.children] == ["a", "b"]
        assert doc.children[1].type == "quote"

    def test_lift_middle_child_splits_parent(self) -> None:
        """Test lifting a middle child out of its parent."""
        doc = Document(children=[element("quote", paragraph("a"), paragraph("b"), paragraph("c"))])
        new_path = lift_node(doc, (0, 1))
        assert new_path == (1,)
        assert [n.type for n in doc.children] == ["quote", "paragraph", "quote"]

    def test_lift_only_child_replaces_parent(self) -> None:
        """Test lifting the only child of an element."""
        doc = Document(children=[element("quote", paragraph("a"))])
        assert lift_node(doc, (0, 0)) == (0,)
        assert doc.children[0].type == "paragraph"

    def test_split_node_at_point_keeps_marks_and_links(self) -> None:
        """Test that splitting inside a link splits the link too."""
        doc = Document(children=[paragraph("x", element("link", text("abcd", bold=True), url="u"))])
        right_path = split_node_at_point(doc, (0,), Point((0, 1, 0), 2))
        left, right = doc.children[0], doc.children[right_path[0]]
        assert node_string(left) == "xab"
        assert node_string(right) == "cd"
        assert right.children[0].type == "link"
        assert right.children[0].children[0].bold

    def test_split_outside_block_raises(self) -> None:
        """Test that a point outside the block is rejected."""
        doc = Document(children=[paragraph("a"), paragraph("b")])
        with pytest.raises(ValidationError):
            split_node_at_point(doc, (0,), Point((1, 0), 0))


@pytest.mark.unit
class TestVisitors:
    """Tests for visitor-based extraction."""

    def test_extract_nodes_by_predicate(self, sample_document: Document) -> None:
        """Test collecting every list-item."""
        items = extract_nodes(sample_document, lambda n: isinstance(n, Element) and n.type == "list-item")
        assert [node_string(n) for n in items] == ["milk", "eggs"]
