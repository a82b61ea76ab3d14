#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/renderers/markdown.py
"""Markdown rendering from the document tree.

This module provides the MarkdownRenderer class which converts document
tree nodes to CommonMark text. It is used when a rich-text note is shared
or converted to a Markdown note.

Every visit method returns the Markdown for its node. Block nodes return
one or more lines without a trailing newline; the caller joins sibling
blocks and applies prefixes (quote markers, list indentation).

"""

from __future__ import annotations

from richnote.ast import Document, Element, Node, Text, has_blocks, node_string
from richnote.ast.visitors import NodeVisitor
from richnote.constants import CHECKLIST_TYPES
from richnote.options.markdown import MarkdownRendererOptions
from richnote.renderers.base import BaseRenderer, RenderInput

_HEADING_PREFIXES: dict[str, str] = {
    "heading-one": "# ",
    "heading-two": "## ",
    "heading-three": "### ",
}


def _prefix_lines(prefix: str, text: str, rest: str | None = None) -> str:
    """Prefix the first line with ``prefix`` and the others with ``rest`` (default ``prefix``)."""
    rest = prefix if rest is None else rest
    lines = text.split("\n")
    return "\n".join([prefix + lines[0], *((rest + line) if line else rest.rstrip() for line in lines[1:])])


class MarkdownRenderer(NodeVisitor, BaseRenderer):
    """Render document tree nodes to Markdown text.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Markdown formatting options

    Examples
    --------
        >>> from richnote.ast import element, text
        >>> MarkdownRenderer().render_to_string([element("heading-one", "Title"), element("paragraph", text("x", bold=True))])
        '# Title\\n\\n**x**'

    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        """Initialize the Markdown renderer with options."""
        BaseRenderer._validate_options_type(options, MarkdownRendererOptions, "markdown")
        options = options or MarkdownRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MarkdownRendererOptions = options
        self._in_code_block = False

    def render_to_string(self, doc: RenderInput) -> str:
        """Render a document or list of top-level nodes to Markdown.

        Parameters
        ----------
        doc : Document or sequence of Node
            Tree to render

        Returns
        -------
        str
            Markdown text, blocks separated by blank lines

        """
        self._in_code_block = False
        return self._render_blocks(self._top_level(doc), "\n\n")

    def _render_blocks(self, nodes: list[Node], separator: str) -> str:
        rendered = (node.accept(self) for node in nodes)
        return separator.join(block for block in rendered if block is not None)

    def _render_inlines(self, node: Element) -> str:
        return "".join(child.accept(self) for child in node.children)

    def _render_content(self, node: Element, separator: str = "\n\n") -> str:
        if has_blocks(node):
            return self._render_blocks(node.children, separator)
        return self._render_inlines(node)

    def visit_document(self, node: Document) -> str:
        """Render the top-level blocks of a Document."""
        return self._render_blocks(node.children, "\n\n")

    def visit_text(self, node: Text) -> str:
        """Render a text leaf with emphasis markup."""
        if self._in_code_block:
            return node.text
        if node.code:
            fence = "``" if "`" in node.text else "`"
            return f"{fence}{node.text}{fence}"

        value = node.text
        if node.bold:
            value = f"**{value}**"
        if node.italic:
            value = f"*{value}*"
        if node.strikethrough:
            value = f"~~{value}~~"
        return value.replace("\n", "  \n")

    def visit_element(self, node: Element) -> str:
        """Render an element according to its type."""
        type_ = node.type or ""

        if type_ in _HEADING_PREFIXES:
            return _prefix_lines(_HEADING_PREFIXES[type_], self._render_inlines(node), "")
        if type_ == "quote":
            return _prefix_lines("> ", self._render_content(node))
        if type_ == "code":
            return self._render_code_block(node)
        if type_ == "thematic-break":
            return self.options.thematic_break
        if type_ == "link":
            title = f' "{node.title}"' if node.title else ""
            return f"[{self._render_inlines(node)}]({node.url or ''}{title})"
        if type_ == "image":
            title = f' "{node.title}"' if node.title else ""
            return f"![{node_string(node)}]({node.url or ''}{title})"
        if type_ in ("bulleted-list", "numbered-list", "task-list", "sequence-list"):
            return self._render_list(node)
        if type_ == "list-item":
            # outside a list
            return self._render_list_item(node, f"{self.options.bullet} ")
        if type_ == "table":
            return self._render_table(node)
        if type_ in ("table-row", "table-cell"):
            return self._render_content(node, " ")

        # paragraphs, typeless elements and unknown types
        return self._render_content(node)

    def _render_code_block(self, node: Element) -> str:
        self._in_code_block = True
        try:
            body = self._render_content(node, "\n")
            return f"```\n{body}\n```"
        finally:
            self._in_code_block = False

    def _render_list(self, node: Element) -> str:
        ordered = node.type in ("numbered-list", "sequence-list")
        items = []
        for index, child in enumerate(node.children):
            marker = f"{index + 1}. " if ordered else f"{self.options.bullet} "
            if isinstance(child, Element) and child.type == "list-item":
                items.append(self._render_list_item(child, marker, node.type in CHECKLIST_TYPES))
            else:
                items.append(_prefix_lines(marker, child.accept(self), " " * self.options.list_indent))
        return "\n".join(items)

    def _render_list_item(self, node: Element, marker: str, checklist: bool = False) -> str:
        if checklist or node.has_checked:
            marker += "[x] " if node.checked else "[ ] "
        body = self._render_content(node, "\n")
        return _prefix_lines(marker, body, " " * self.options.list_indent)

    def _render_table(self, node: Element) -> str:
        lines = []
        for index, row in enumerate(node.children):
            cells = row.children if isinstance(row, Element) else [row]
            rendered = [cell.accept(self).replace("\n", " ") for cell in cells]
            lines.append("| " + " | ".join(rendered) + " |")
            if index == 0:
                lines.append("|" + " --- |" * len(cells))
        return "\n".join(lines)


def serialize_markdown(nodes: RenderInput) -> str:
    """Render nodes to Markdown with default options.

    Parameters
    ----------
    nodes : Document or sequence of Node
        Tree to render

    Returns
    -------
    str
        Markdown text

    """
    return MarkdownRenderer().render_to_string(nodes)
