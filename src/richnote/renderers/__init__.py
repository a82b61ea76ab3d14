#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/renderers/__init__.py
"""Renderers turning document trees into HTML, Markdown or plain text."""

from richnote.renderers.base import BaseRenderer
from richnote.renderers.html import HtmlRenderer, serialize_html
from richnote.renderers.markdown import MarkdownRenderer, serialize_markdown
from richnote.renderers.plaintext import PlainTextRenderer, coerce_to_plain_text

__all__ = [
    "BaseRenderer",
    "HtmlRenderer",
    "MarkdownRenderer",
    "PlainTextRenderer",
    "serialize_html",
    "serialize_markdown",
    "coerce_to_plain_text",
]
