#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/utils/markdown_detect.py
"""Heuristic detection of Markdown in plain text."""

from __future__ import annotations

import re

_STRONG_RE = re.compile(r"(^|\s)(__|\*\*)(?=\S).+(\2(\s|$))")
_EMPHASIS_OR_CODE_RE = re.compile(r"(^|\s)([_*`])(?!\2).+(\2(\s|$))")
_HTTP_LINK_RE = re.compile(r"\[[^\]]+]\(https?://\S+\)")
_FENCED_CODE_RE = re.compile(r"(^|\n)\s{0,3}```(.*\n)+\s?```")
_HEADING_RE = re.compile(r"(^|\n)\s{0,3}#{2,6}\s")
_BLOCK_QUOTE_RE = re.compile(r"(^|\n)\s{0,3}>")
_ANY_LINK_RE = re.compile(r"\[[^\]]+]\([^)]+\)")

# A single "1." or "*" line is common in plain prose, so list markers need two
# matching lines of the same kind.
_LIST_ITEM_RES = tuple(
    re.compile(pattern, re.MULTILINE)
    for pattern in (
        r"^\s{0,3}\d\.[ \t\u00a0]+\S",
        r"^\s{0,3}\d\)[ \t\u00a0]+\S",
        r"^\s{0,3}\*[ \t\u00a0]+\S",
        r"^\s{0,3}\+[ \t\u00a0]+\S",
        r"^\s{0,3}-[ \t\u00a0]+\S",
    )
)


def _has_two_matches(pattern: re.Pattern[str], text: str) -> bool:
    matches = pattern.finditer(text)
    return next(matches, None) is not None and next(matches, None) is not None


def is_likely_markdown(text: str) -> bool:
    """Guess whether plain text was written as Markdown.

    Parameters
    ----------
    text : str
        Text to inspect

    Returns
    -------
    bool
        True on the first Markdown construct found

    Examples
    --------
        >>> is_likely_markdown("Some **bold** claim")
        True
        >>> is_likely_markdown("Call me at 5 pm")
        False

    """
    if _STRONG_RE.search(text) or _EMPHASIS_OR_CODE_RE.search(text):
        return True
    if _HTTP_LINK_RE.search(text) or _FENCED_CODE_RE.search(text):
        return True
    if _HEADING_RE.search(text) or _BLOCK_QUOTE_RE.search(text):
        return True
    if any(_has_two_matches(pattern, text) for pattern in _LIST_ITEM_RES):
        return True
    return _ANY_LINK_RE.search(text) is not None
