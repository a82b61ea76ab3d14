#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/renderers/plaintext.py
"""Plain text rendering from the document tree.

Nesting and formatting are dropped: every lowest block (a block holding no
other blocks) becomes one line. Images are replaced by a textual label.

"""

from __future__ import annotations

import re
from typing import Iterator

from richnote.ast import Document, Element, Node, Text, is_block, node_string
from richnote.ast.visitors import NodeVisitor
from richnote.options.base import BaseRendererOptions
from richnote.renderers.base import BaseRenderer, RenderInput

_LAST_SEGMENT_RE = re.compile(r"/([^/]+)$")
IMAGE_PLACEHOLDER = "☹︎"


def image_label(node: Element) -> str:
    """Return the alt text, title, last URL segment or a placeholder for an image."""
    match = _LAST_SEGMENT_RE.search(node.url or "")
    return node_string(node) or node.title or (match.group(1) if match else "") or IMAGE_PLACEHOLDER


class PlainTextRenderer(NodeVisitor, BaseRenderer):
    """Render document tree nodes to plain text, one line per lowest block.

    Examples
    --------
        >>> from richnote.ast import element, text
        >>> PlainTextRenderer().render_to_string([
        ...     element("heading-one", text("Title", bold=True)),
        ...     element("bulleted-list", element("list-item", "one"), element("list-item", "two")),
        ... ])
        'Title\\none\\ntwo'

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        BaseRenderer.__init__(self, options)

    def render_to_string(self, doc: RenderInput) -> str:
        """Render a document or list of top-level nodes to plain text."""
        return "\n".join(self._lines(self._top_level(doc)))

    def _lines(self, nodes: list[Node]) -> Iterator[str]:
        run: list[Node] = []
        for node in nodes:
            if is_block(node):
                if run:
                    yield "".join(child.accept(self) for child in run)
                    run = []
                yield from node.accept(self)
            else:
                run.append(node)
        if run:
            yield "".join(child.accept(self) for child in run)

    def visit_document(self, node: Document) -> list[str]:
        """Return one line per lowest block of the document."""
        return list(self._lines(node.children))

    def visit_element(self, node: Element) -> list[str] | str:
        """Return the lines of a block, or the text of an inline element."""
        if node.type == "image":
            return [image_label(node)]
        if not is_block(node):
            return "".join(child.accept(self) for child in node.children)
        if any(is_block(child) for child in node.children):
            return list(self._lines(node.children))
        return ["".join(child.accept(self) for child in node.children)]

    def visit_text(self, node: Text) -> str:
        """Return the text without marks."""
        return node.text


def coerce_to_plain_text(nodes: RenderInput) -> list[Element]:
    """Flatten nodes to one unmarked paragraph per lowest block.

    Parameters
    ----------
    nodes : Document or sequence of Node
        Tree to flatten

    Returns
    -------
    list of Element
        Paragraphs holding a single unmarked text leaf each

    """
    renderer = PlainTextRenderer()
    return [Element("paragraph", [Text(line)]) for line in renderer._lines(renderer._top_level(nodes))]
