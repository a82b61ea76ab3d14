#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for richnote components.

Each parser, renderer and service has its own frozen Options dataclass.
Use ``create_updated`` to derive a modified copy.
"""

from __future__ import annotations

from richnote.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from richnote.options.html import HtmlParserOptions, HtmlRendererOptions
from richnote.options.ingestion import IngestionOptions
from richnote.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from richnote.options.normalization import NormalizationOptions
from richnote.options.sanitize import SanitizeOptions

__all__ = [
    "CloneFrozenMixin",
    "BaseParserOptions",
    "BaseRendererOptions",
    "HtmlParserOptions",
    "HtmlRendererOptions",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "NormalizationOptions",
    "SanitizeOptions",
    "IngestionOptions",
]
