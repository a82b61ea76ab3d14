#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/parsers/__init__.py
"""Markup parsers producing document trees.

- html: BeautifulSoup-based HTML converter
- markdown: mistune-based Markdown converter
"""

from richnote.parsers.base import BaseParser
from richnote.parsers.html import HtmlToTreeConverter, deserialize_html
from richnote.parsers.markdown import MarkdownToTreeConverter, deserialize_markdown

__all__ = [
    "BaseParser",
    "HtmlToTreeConverter",
    "MarkdownToTreeConverter",
    "deserialize_html",
    "deserialize_markdown",
]
