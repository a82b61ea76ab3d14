#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_html_renderer.py
"""Unit tests for HTML rendering."""

import io

import pytest

from richnote.ast import Document, Element, Text, element, paragraph, text
from richnote.exceptions import InvalidOptionsError, RenderingError
from richnote.options import HtmlRendererOptions, MarkdownRendererOptions
from richnote.renderers.html import HtmlRenderer, serialize_html


@pytest.mark.unit
class TestHtmlRenderer:
    """Tests for HtmlRenderer."""

    def test_paragraph_with_marks(self) -> None:
        """Test nesting of mark tags."""
        html = serialize_html([paragraph("a ", text("b", bold=True, italic=True))])
        assert html == "<p>a <em><strong>b</strong></em></p>"

    def test_text_is_escaped(self) -> None:
        """Test that markup characters in text are escaped."""
        assert serialize_html([paragraph("<b>&")]) == "<p>&lt;b&gt;&amp;</p>"

    def test_headings_and_quote(self) -> None:
        """Test simple block tags."""
        nodes = [element("heading-one", "T"), element("quote", paragraph("q"))]
        assert serialize_html(nodes) == "<h1>T</h1><blockquote><p>q</p></blockquote>"

    def test_newline_becomes_break_tag(self) -> None:
        """Test that newlines outside code blocks become line breaks."""
        assert serialize_html([paragraph("a\nb")]) == "<p>a<br />b</p>"

    def test_custom_break_tag(self) -> None:
        """Test the break_tag option."""
        renderer = HtmlRenderer(HtmlRendererOptions(break_tag="<br>"))
        assert renderer.render_to_string([paragraph("a\nb")]) == "<p>a<br>b</p>"

    def test_code_block_keeps_newlines(self) -> None:
        """Test that code blocks are rendered as pre and code."""
        assert serialize_html([element("code", "a\nb")]) == "<pre><code>a\nb</code></pre>"

    def test_checklist(self) -> None:
        """Test checkboxes in checklist items."""
        nodes = [element("task-list", element("list-item", "a", checked=True), element("list-item", "b", checked=False))]
        assert serialize_html(nodes) == (
            '<ul><li><input type="checkbox" checked/>a</li><li><input type="checkbox"/>b</li></ul>'
        )

    def test_numbered_list(self) -> None:
        """Test an ordered list without checkboxes."""
        assert serialize_html([element("numbered-list", element("list-item", "a"))]) == "<ol><li>a</li></ol>"

    def test_link_is_encoded(self) -> None:
        """Test that link targets are percent-encoded and titles kept."""
        nodes = [paragraph(element("link", "x", url="https://example.com/a b", title="T"))]
        assert serialize_html(nodes) == '<p><a href="https://example.com/a%20b" title="T">x</a></p>'

    def test_table_with_and_without_body(self) -> None:
        """Test the table_body option."""
        table = element("table", element("table-row", element("table-cell", "a")))
        assert serialize_html([table]) == "<table><tbody><tr><td>a</td></tr></tbody></table>"
        renderer = HtmlRenderer(HtmlRendererOptions(table_body=False))
        assert renderer.render_to_string([table]) == "<table><tr><td>a</td></tr></table>"

    def test_thematic_break(self) -> None:
        """Test a horizontal rule."""
        assert serialize_html([element("thematic-break", "")]) == "<hr />"

    def test_image(self) -> None:
        """Test an image with alt text."""
        nodes = [element("image", "A cat", url="cat.png", title="")]
        assert serialize_html(nodes) == '<img src="cat.png" alt="A cat">'

    def test_object_url_image_substituted(self) -> None:
        """Test that blob: images use their data URL substitution."""
        nodes = [element("image", "pic", url="blob:richnote/1", title="")]
        html = serialize_html(nodes, {"blob:richnote/1": "data:image/png;base64,AAAA"})
        assert html == '<img src="data:image/png;base64,AAAA" alt="pic">'

    def test_object_url_image_without_substitution(self) -> None:
        """Test that an unresolved blob: image is replaced by its alt text."""
        nodes = [element("image", "pic", url="blob:richnote/1", title="")]
        assert serialize_html(nodes) == "pic"

    def test_typeless_element_renders_children(self) -> None:
        """Test that a typeless element leaves no tag."""
        assert serialize_html([Element(None, [Text("x")])]) == "x"

    def test_document_input(self, sample_document: Document) -> None:
        """Test rendering a whole Document."""
        html = HtmlRenderer().render_to_string(sample_document)
        assert html.startswith("<h1>Groceries</h1><p>Buy <strong>fresh</strong> food</p><ul>")
        assert html.endswith("</table>")

    def test_render_to_stream(self) -> None:
        """Test writing output to a text stream."""
        stream = io.StringIO()
        HtmlRenderer().render([paragraph("a")], stream)
        assert stream.getvalue() == "<p>a</p>"

    def test_wrong_options_type(self) -> None:
        """Test that Markdown options are rejected."""
        with pytest.raises(InvalidOptionsError):
            HtmlRenderer(MarkdownRendererOptions())

    def test_broken_node_degrades_to_text(self) -> None:
        """Test that a node that fails to render is emitted as its text."""
        nodes = [paragraph(element("link", "x", url=123))]
        assert serialize_html(nodes) == "<p>x</p>"

    def test_broken_node_raises_when_strict(self) -> None:
        """Test the fail_on_resource_errors option."""
        renderer = HtmlRenderer(HtmlRendererOptions(fail_on_resource_errors=True))
        with pytest.raises(RenderingError):
            renderer.render_to_string([paragraph(element("link", "x", url=123))])
