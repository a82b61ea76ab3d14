#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/renderers/html.py
"""HTML rendering from the document tree.

This module provides the HtmlRenderer class which converts document tree
nodes to the HTML fragment stored as a rich-text note's content. The output
uses a small, fixed vocabulary so that parsing it back yields the same tree.

"""

from __future__ import annotations

import logging
from html import escape
from typing import Mapping, Optional

from richnote.ast import Document, Element, Node, Text, node_string
from richnote.ast.visitors import NodeVisitor
from richnote.constants import MARK_SERIALIZATION_ORDER, OBJECT_URL_SCHEME
from richnote.exceptions import RenderingError
from richnote.options.html import HtmlRendererOptions
from richnote.renderers.base import BaseRenderer, RenderInput
from richnote.utils.uri import encode_uri

logger = logging.getLogger(__name__)

# Element types that map onto a single wrapping tag
_SIMPLE_TAGS: dict[str, str] = {
    "paragraph": "p",
    "heading-one": "h1",
    "heading-two": "h2",
    "heading-three": "h3",
    "quote": "blockquote",
    "bulleted-list": "ul",
    "task-list": "ul",
    "numbered-list": "ol",
    "sequence-list": "ol",
    "table-row": "tr",
    "table-cell": "td",
}


class HtmlRenderer(NodeVisitor, BaseRenderer):
    """Render document tree nodes to an HTML fragment.

    Parameters
    ----------
    options : HtmlRendererOptions or None, default = None
        HTML rendering options

    Examples
    --------
        >>> from richnote.ast import paragraph, text
        >>> HtmlRenderer().render_to_string([paragraph("Hi ", text("there", bold=True))])
        '<p>Hi <strong>there</strong></p>'

    """

    def __init__(self, options: HtmlRendererOptions | None = None):
        """Initialize the HTML renderer with options."""
        BaseRenderer._validate_options_type(options, HtmlRendererOptions, "html")
        options = options or HtmlRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: HtmlRendererOptions = options
        self._in_code_block = False
        self._substitutions: Mapping[str, str] = {}

    def render_to_string(self, doc: RenderInput, substitutions: Optional[Mapping[str, str]] = None) -> str:
        """Render a document or list of top-level nodes to HTML.

        Parameters
        ----------
        doc : Document or sequence of Node
            Tree to render
        substitutions : mapping of str to str, optional
            Object URL to data URL, for images inserted from pasted files

        Returns
        -------
        str
            HTML fragment

        """
        self._in_code_block = False
        self._substitutions = substitutions or {}
        return "".join(self._render(node) for node in self._top_level(doc))

    def _render(self, node: Node) -> str:
        try:
            return node.accept(self)
        except RenderingError:
            raise
        except Exception as e:
            node_type = getattr(node, "type", "text")
            if self.options.fail_on_resource_errors:
                raise RenderingError(
                    f"Failed to render {node_type} node: {e!r}",
                    rendering_stage="rendering",
                    original_error=e,
                ) from e
            logger.exception("Failed to render %s node, emitting its text", node_type)
            return escape(node_string(node))

    def _render_children(self, node: Element | Document) -> str:
        return "".join(self._render(child) for child in node.children)

    def visit_document(self, node: Document) -> str:
        """Render the children of a Document."""
        return self._render_children(node)

    def visit_text(self, node: Text) -> str:
        """Render a text leaf, wrapping it in one tag per mark."""
        html = escape(node.text)
        for mark, tag in MARK_SERIALIZATION_ORDER:
            if getattr(node, mark):
                html = f"<{tag}>{html}</{tag}>"
        if not self._in_code_block:
            html = html.replace("\n", self.options.break_tag)
        return html

    def visit_element(self, node: Element) -> str:
        """Render an element according to its type."""
        if node.type == "code":
            return self._render_code_block(node)
        if node.type == "image":
            return self._render_image(node)

        children = self._render_children(node)
        tag = _SIMPLE_TAGS.get(node.type or "")
        if tag:
            return f"<{tag}>{children}</{tag}>"

        if node.type == "list-item":
            if node.has_checked:
                checkbox = '<input type="checkbox" checked/>' if node.checked else '<input type="checkbox"/>'
                return f"<li>{checkbox}{children}</li>"
            return f"<li>{children}</li>"
        if node.type == "thematic-break":
            return "<hr />"
        if node.type == "link":
            title_attr = f' title="{escape(node.title)}"' if node.title else ""
            return f'<a href="{escape(encode_uri(node.url or ""))}"{title_attr}>{children}</a>'
        if node.type == "table":
            if self.options.table_body:
                return f"<table><tbody>{children}</tbody></table>"
            return f"<table>{children}</table>"

        # typeless and unknown elements
        return children

    def _render_code_block(self, node: Element) -> str:
        self._in_code_block = True
        try:
            return f"<pre><code>{self._render_children(node)}</code></pre>"
        finally:
            self._in_code_block = False

    def _render_image(self, node: Element) -> str:
        alt = node_string(node)
        url = node.url or ""
        if url.startswith(OBJECT_URL_SCHEME):
            substituted = self._substitutions.get(url)
            if not substituted:
                logger.warning("No substitution for %r (%s)", alt, url)
                return escape(alt)
            url = substituted
        title_attr = f' title="{escape(node.title)}"' if node.title else ""
        return f'<img src="{escape(encode_uri(url))}" alt="{escape(alt)}"{title_attr}>'


def serialize_html(nodes: RenderInput, substitutions: Optional[Mapping[str, str]] = None) -> str:
    """Render nodes to HTML with default options.

    Parameters
    ----------
    nodes : Document or sequence of Node
        Tree to render
    substitutions : mapping of str to str, optional
        Object URL to data URL

    Returns
    -------
    str
        HTML fragment

    """
    return HtmlRenderer().render_to_string(nodes, substitutions)
