#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/utils/words.py
"""Search-word extraction from note text."""

from __future__ import annotations

import html
import re
import unicodedata
from typing import Iterable

from richnote.constants import WORD_LENGTH_MAX

# Word characters joined by hyphens, apostrophes, dots, no-break spaces or carets
_WORD_RE = re.compile(r"\w+(?:[-\u2010\u2011\u00ad'\u2019\u02bc.\u00a0\u202f\u2007^]*\w+)*")
_EDGE_PUNCTUATION_RE = re.compile(r"^[-\u2010\u2011\u00ad_\u00a0'.^]+|[-\u2010\u2011\u00ad_\u00a0'.^]+$")
_INNER_SEPARATOR_RE = re.compile(r"[-\u2010\u2011\u00ad_\u00a0\u202f\u2007^]")
_NUMERIC_RE = re.compile(r"^[\d.]+$")
_DOT_RUN_RE = re.compile(r"\.{3,}")


def remove_diacritics(text: str) -> str:
    """Strip combining marks, e.g. ``"Crème brûlée"`` becomes ``"Creme brulee"``."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def normalize_word(word: str) -> str:
    """Upper-case a word and remove separators and stray punctuation.

    Dots survive only inside numbers, where runs of three or more collapse to
    two. The result is at most ``WORD_LENGTH_MAX`` characters.
    """
    word = _EDGE_PUNCTUATION_RE.sub("", word.upper())
    word = _INNER_SEPARATOR_RE.sub("", word)
    if _NUMERIC_RE.match(word):
        word = _DOT_RUN_RE.sub("..", word)
    else:
        word = word.replace(".", "")
    return word[:WORD_LENGTH_MAX]


def parse_words(text: str) -> set[str]:
    """Return the set of normalized search words in ``text``.

    Examples
    --------
        >>> sorted(parse_words("Crème brûlée &amp; co-op"))
        ['BRULEE', 'COOP', 'CREME']

    """
    words = set()
    for match in _WORD_RE.finditer(html.unescape(text)):
        word = normalize_word(remove_diacritics(match.group(0)))
        if word:
            words.add(word)
    return words


def remove_prefix_words(words: Iterable[str]) -> set[str]:
    """Drop every word that is a prefix of another word in the set."""
    unique = set(words)
    return {word for word in unique if not any(other != word and other.startswith(word) for other in unique)}
