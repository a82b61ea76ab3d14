#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/utils/uri.py
"""Whole-URI percent encoding and decoding.

Unlike :func:`urllib.parse.quote`, these helpers treat their argument as a
complete URI: characters that delimit URI components are never encoded and
their escapes are never decoded.
"""

from __future__ import annotations

import re
from urllib.parse import quote

# Characters left alone when encoding a complete URI
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"
# Escapes of these characters are kept when decoding
_RESERVED = frozenset(";/?:@&=+$,#")
_ESCAPE_RUN_RE = re.compile(r"(?:%[0-9A-Fa-f]{2})+")


def encode_uri(uri: str) -> str:
    """Percent-encode everything except URI syntax and unreserved characters.

    Examples
    --------
        >>> encode_uri("https://example.com/a b?q=ü")
        'https://example.com/a%20b?q=%C3%BC'

    """
    return quote(uri, safe=_URI_SAFE)


def _decode_run(match: re.Match[str]) -> str:
    escapes = re.findall(r"%[0-9A-Fa-f]{2}", match.group(0))
    out: list[str] = []
    index = 0
    while index < len(escapes):
        lead = int(escapes[index][1:], 16)
        if lead < 0x80:
            char = chr(lead)
            out.append(escapes[index] if char in _RESERVED else char)
            index += 1
            continue
        if lead >= 0xF0:
            width = 4
        elif lead >= 0xE0:
            width = 3
        elif lead >= 0xC0:
            width = 2
        else:
            raise ValueError(f"Malformed URI escape sequence {escapes[index]}")
        group = escapes[index : index + width]
        if len(group) < width:
            raise ValueError(f"Truncated URI escape sequence {''.join(group)}")
        out.append(bytes(int(escape[1:], 16) for escape in group).decode("utf-8"))
        index += width
    return "".join(out)


def decode_uri(uri: str) -> str:
    """Decode percent escapes, keeping escapes of URI delimiters.

    Raises
    ------
    ValueError
        If an escape sequence is not valid UTF-8

    Examples
    --------
        >>> decode_uri("https://example.com/a%20b%2Fc")
        'https://example.com/a b%2Fc'

    """
    return _ESCAPE_RUN_RE.sub(_decode_run, uri)
