#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_html_parser.py
"""Unit tests for the HTML to tree parser.

Tests cover:
- Block tags, headings and text marks
- Lists and checklists
- Links, images and object URLs
- Tables with captions
- Document titles, skipped tags and whitespace
- Option and input validation

"""

import pytest

from richnote.ast import Element, Text, node_string
from richnote.exceptions import DependencyError, InvalidOptionsError, ValidationError
from richnote.options import HtmlParserOptions, MarkdownParserOptions
from richnote.parsers.html import HtmlToTreeConverter, deserialize_html


class _RecordingSubstitutions:
    def __init__(self) -> None:
        self.urls: list[str] = []

    def add(self, url: str) -> None:
        self.urls.append(url)


def _types(nodes: list) -> list:
    return [node.type if isinstance(node, Element) else "text" for node in nodes]


@pytest.mark.unit
class TestBlocksAndMarks:
    """Tests for block tags and text marks."""

    def test_paragraph_with_bold(self) -> None:
        """Test a paragraph holding plain and bold text."""
        nodes = deserialize_html("<p>Hello <b>world</b></p>")
        assert nodes == [Element("paragraph", [Text("Hello "), Text("world", bold=True)])]

    def test_nested_marks_accumulate(self) -> None:
        """Test that nested mark tags combine."""
        nodes = deserialize_html("<p><strong><em>x</em></strong></p>")
        leaf = nodes[0].children[0]
        assert leaf.bold and leaf.italic

    def test_underline_and_strikethrough(self) -> None:
        """Test the u and s tags."""
        nodes = deserialize_html("<p><u>a</u><s>b</s></p>")
        assert nodes[0].children[0].underline
        assert nodes[0].children[1].strikethrough

    def test_low_level_headings_collapse(self) -> None:
        """Test that h4 to h6 become the smallest heading."""
        nodes = deserialize_html("<h2>a</h2><h5>b</h5>")
        assert _types(nodes) == ["heading-two", "heading-three"]

    def test_empty_paragraph_gets_empty_text(self) -> None:
        """Test that an empty tag still holds one leaf."""
        assert deserialize_html("<p></p>") == [Element("paragraph", [Text("")])]

    def test_line_break(self) -> None:
        """Test that br becomes a newline leaf."""
        nodes = deserialize_html("<p>a<br>b</p>")
        assert node_string(nodes[0]) == "a\nb"

    def test_pre_keeps_whitespace(self) -> None:
        """Test that whitespace inside pre is preserved."""
        nodes = deserialize_html("<pre><code>a  b\n c</code></pre>")
        assert nodes == [Element("code", [Text("a  b\n c")])]

    def test_whitespace_collapsed(self) -> None:
        """Test that whitespace runs collapse outside pre."""
        nodes = deserialize_html("<p>a \n   b</p>")
        assert node_string(nodes[0]) == "a b"

    def test_whitespace_kept_when_collapse_disabled(self) -> None:
        """Test the collapse_whitespace option."""
        parser = HtmlToTreeConverter(HtmlParserOptions(collapse_whitespace=False))
        nodes = parser.convert_fragment("<p>a   b</p>")
        assert node_string(nodes[0]) == "a   b"

    def test_script_and_comments_skipped(self) -> None:
        """Test that scripts, styles and comments produce nothing."""
        nodes = deserialize_html("<script>alert(1)</script><!-- note --><p>kept</p><style>p {}</style>")
        assert _types(nodes) == ["paragraph"]
        assert node_string(nodes[0]) == "kept"

    def test_unknown_wrapper_with_mixed_children(self) -> None:
        """Test that loose text beside blocks is wrapped and typed on normalization."""
        doc = HtmlToTreeConverter().convert_to_tree("<div>loose<p>para</p></div>")
        assert _types(doc.children) == ["paragraph", "paragraph"]
        assert [node_string(node) for node in doc.children] == ["loose", "para"]

    def test_failing_subtree_keeps_its_text(self, monkeypatch) -> None:
        """Test that a tag that fails to convert degrades to its text."""
        convert_tag = HtmlToTreeConverter._convert_tag

        def failing_for_blockquote(self, node, name, marks, state):
            if name == "blockquote":
                raise ValueError("broken subtree")
            return convert_tag(self, node, name, marks, state)

        monkeypatch.setattr(HtmlToTreeConverter, "_convert_tag", failing_for_blockquote)
        doc = HtmlToTreeConverter().convert_to_tree("<p>ok</p><blockquote>kept <b>text</b></blockquote>")
        assert "quote" not in _types(doc.children)
        assert [node_string(node) for node in doc.children] == ["ok", "kept text"]


@pytest.mark.unit
class TestLists:
    """Tests for ordinary lists and checklists."""

    def test_bulleted_list(self) -> None:
        """Test an unordered list."""
        nodes = deserialize_html("<ul><li>a</li><li>b</li></ul>")
        assert nodes[0].type == "bulleted-list"
        assert [node_string(item) for item in nodes[0].children] == ["a", "b"]
        assert nodes[0].children[0].checked is None

    def test_checkbox_list_becomes_task_list(self) -> None:
        """Test that a checkbox item turns the list into a checklist."""
        html = '<ul><li><input type="checkbox" checked>Milk</li><li><input type="checkbox">Eggs</li></ul>'
        nodes = deserialize_html(html)
        assert nodes[0].type == "task-list"
        assert [item.checked for item in nodes[0].children] == [True, False]
        assert [node_string(item) for item in nodes[0].children] == ["Milk", "Eggs"]

    def test_ordered_checkbox_list_becomes_sequence_list(self) -> None:
        """Test that an ordered checklist keeps its order."""
        nodes = deserialize_html('<ol><li><input type="checkbox">one</li></ol>')
        assert nodes[0].type == "sequence-list"


@pytest.mark.unit
class TestLinksAndImages:
    """Tests for links and images."""

    def test_link_url_decoded(self) -> None:
        """Test that the href is percent-decoded."""
        nodes = deserialize_html('<p><a href="https://example.com/a%20b" title="Docs">x</a></p>')
        link = nodes[0].children[0]
        assert link.type == "link"
        assert link.url == "https://example.com/a b"
        assert link.title == "Docs"

    def test_undefined_link_title_dropped(self) -> None:
        """Test that a literal 'undefined' title is not kept."""
        nodes = deserialize_html('<p><a href="u" title="undefined">x</a></p>')
        assert nodes[0].children[0].title is None

    def test_link_without_href(self) -> None:
        """Test that a missing href becomes an empty URL."""
        nodes = deserialize_html("<p><a>x</a></p>")
        assert nodes[0].children[0].url == ""

    def test_image(self) -> None:
        """Test that img becomes an image element with its alt text."""
        nodes = deserialize_html('<img src="pic.png" alt="Pic">')
        assert nodes == [Element("image", [Text("Pic")], url="pic.png", title="")]

    def test_image_without_src_dropped(self) -> None:
        """Test that an img without src produces nothing."""
        assert deserialize_html('<p>a</p><img alt="gone">') == [Element("paragraph", [Text("a")])]

    def test_object_url_registered(self) -> None:
        """Test that blob: image sources are handed to the substitution registry."""
        substitutions = _RecordingSubstitutions()
        deserialize_html('<img src="blob:richnote/1234" alt="">', substitutions)
        assert substitutions.urls == ["blob:richnote/1234"]

    def test_data_url_not_registered(self) -> None:
        """Test that ordinary image sources are not registered."""
        substitutions = _RecordingSubstitutions()
        deserialize_html('<img src="data:image/png;base64,AAAA" alt="">', substitutions)
        assert substitutions.urls == []


@pytest.mark.unit
class TestTables:
    """Tests for tables."""

    def test_table_cells_and_header(self) -> None:
        """Test that th cells are bold table-cells."""
        nodes = deserialize_html("<table><tr><th>Item</th></tr><tr><td>milk</td></tr></table>")
        table = nodes[0]
        assert table.type == "table"
        header_cell = table.children[0].children[0]
        assert header_cell.type == "table-cell"
        assert header_cell.children[0] == Text("Item", bold=True)

    def test_caption_becomes_paragraph_before_table(self) -> None:
        """Test that a caption is moved out in front of its table."""
        nodes = deserialize_html("<table><caption>Prices</caption><tr><td>milk</td></tr></table>")
        assert _types(nodes) == ["paragraph", "table"]
        assert nodes[0].children[0] == Text("Prices", bold=True)


@pytest.mark.unit
class TestDocumentTitle:
    """Tests for the title_as_heading behavior."""

    def test_title_prepended_without_h1(self) -> None:
        """Test that the page title becomes a level-one heading."""
        nodes = deserialize_html("<html><head><title>Trip</title></head><body><p>x</p></body></html>")
        assert _types(nodes) == ["heading-one", "paragraph"]
        assert node_string(nodes[0]) == "Trip"

    def test_title_ignored_with_h1(self) -> None:
        """Test that an existing h1 wins over the page title."""
        nodes = deserialize_html("<html><head><title>Trip</title></head><body><h1>Plan</h1></body></html>")
        assert [node_string(node) for node in nodes] == ["Plan"]

    def test_title_as_heading_disabled(self) -> None:
        """Test turning the title heading off."""
        parser = HtmlToTreeConverter(HtmlParserOptions(title_as_heading=False))
        nodes = parser.convert_fragment("<html><head><title>Trip</title></head><body><p>x</p></body></html>")
        assert _types(nodes) == ["paragraph"]


@pytest.mark.unit
class TestValidation:
    """Tests for option and input checks."""

    def test_wrong_options_type(self) -> None:
        """Test that Markdown options are rejected by the HTML parser."""
        with pytest.raises(InvalidOptionsError):
            HtmlToTreeConverter(MarkdownParserOptions())

    def test_non_string_input(self) -> None:
        """Test that bytes input is rejected."""
        with pytest.raises(ValidationError):
            HtmlToTreeConverter().convert_fragment(b"<p>x</p>")  # type: ignore[arg-type]

    def test_unknown_tree_builder(self) -> None:
        """Test that an unavailable BeautifulSoup builder raises DependencyError."""
        parser = HtmlToTreeConverter(HtmlParserOptions(html_parser="no-such-builder"))
        with pytest.raises(DependencyError):
            parser.convert_fragment("<p>x</p>")

    def test_empty_parser_name(self) -> None:
        """Test the options check for an empty builder name."""
        with pytest.raises(ValueError):
            HtmlParserOptions(html_parser="")
