#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/utils/__init__.py
"""Utility modules for the richnote package.

This package contains helpers for MIME types, dates, search words, Markdown
detection, image conversion, HTML sanitization and dependency checks.
"""

from richnote.utils.dates import normalize_date
from richnote.utils.markdown_detect import is_likely_markdown
from richnote.utils.mime import has_tags_like_html, target_format
from richnote.utils.words import parse_words

__all__ = [
    "normalize_date",
    "is_likely_markdown",
    "has_tags_like_html",
    "target_format",
    "parse_words",
]
