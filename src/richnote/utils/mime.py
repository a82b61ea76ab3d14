#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/utils/mime.py
"""MIME type helpers for notes, pasted data and imported files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from richnote.constants import (
    ALLOWED_EXTENSIONS,
    ALLOWED_NON_TEXT_MIME_TYPES,
    HTML_LIKE_MIME_TYPES,
    NOT_IMPORTABLE_MESSAGE,
    UNSUPPORTED_TEXT_SUBTYPES,
    TargetFormat,
)
from richnote.utils.markdown_detect import is_likely_markdown

if TYPE_CHECKING:
    from richnote.ingestion import SourceFile

logger = logging.getLogger(__name__)


def base_mime_type(mime_type: Optional[str]) -> str:
    """Return the MIME type without parameters, e.g. ``text/html`` for ``text/html;hint=SEMANTIC``."""
    return (mime_type or "").split(";")[0].strip()


def extract_subtype(mime_type: Optional[str]) -> str:
    """Return the subtype without parameters, e.g. ``markdown`` for ``text/markdown;hint=COMMONMARK``."""
    base = base_mime_type(mime_type)
    return base.split("/", 1)[1].strip() if "/" in base else ""


def extract_extension(file_name: Optional[str]) -> str:
    """Return the lower-cased last extension of a file name including the dot, or ``""``."""
    name = (file_name or "").rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot <= 0:
        return ""
    return name[dot:].lower()


def has_tags_like_html(mime_type: Optional[str]) -> bool:
    """Check whether content of this MIME type is markup that should be sanitized.

    Parameters
    ----------
    mime_type : str or None
        MIME type, parameters after ``;`` are ignored

    Returns
    -------
    bool
        True for HTML, XHTML, MathML, SVG and XML

    """
    return base_mime_type(mime_type) in HTML_LIKE_MIME_TYPES


def target_format(subtype: Optional[str]) -> TargetFormat:
    """Classify a note subtype as a rich, Markdown or plain editing target.

    Examples
    --------
        >>> target_format("html;hint=SEMANTIC")
        'rich'
        >>> target_format("markdown;hint=COMMONMARK")
        'markdown'
        >>> target_format("plain")
        'plain'

    """
    subtype = subtype or ""
    if subtype.startswith("html"):
        return "rich"
    if subtype.startswith("markdown"):
        return "markdown"
    return "plain"


@dataclass(frozen=True)
class ParseTypeInfo:
    """How an imported file should be parsed.

    Parameters
    ----------
    parse_type : str
        MIME type to parse as, e.g. ``text/html`` or ``image/png``
    is_markdown : bool, default False
        A ``text/plain`` file whose content looks like Markdown
    message : str or None, default None
        Set when the file is not importable

    """

    parse_type: str
    is_markdown: bool = False
    message: Optional[str] = None

    @property
    def importable(self) -> bool:
        """Whether the file can be imported."""
        return self.message is None


async def determine_parse_type(file: "SourceFile") -> ParseTypeInfo:
    """Decide how to parse a pasted or dropped file.

    Parameters
    ----------
    file : SourceFile
        File with a name and (possibly empty) MIME type

    Returns
    -------
    ParseTypeInfo
        Parse type, Markdown flag and, for unimportable files, a message

    Raises
    ------
    FileReadError
        If a plain-text file has to be read and the read fails

    """
    mime_type = file.type or ""
    extension = extract_extension(file.name)

    if mime_type.startswith("image/"):
        return ParseTypeInfo(mime_type)
    if has_tags_like_html(mime_type):
        return ParseTypeInfo("text/html")
    if (
        not mime_type.startswith("text")
        and mime_type not in ALLOWED_NON_TEXT_MIME_TYPES
        and not (not mime_type and extension in ALLOWED_EXTENSIONS)
    ):
        logger.warning("Not importable: %r (%s)", file.name, mime_type)
        return ParseTypeInfo(mime_type, message=NOT_IMPORTABLE_MESSAGE)

    subtype = extract_subtype(mime_type)
    if subtype == "markdown":
        return ParseTypeInfo("text/markdown")
    if subtype == "plain":
        text = await file.read_text()
        return ParseTypeInfo("text/plain", is_markdown=is_likely_markdown(text))
    if subtype in UNSUPPORTED_TEXT_SUBTYPES:
        logger.warning("Not importable: %r (%s)", file.name, mime_type)
        return ParseTypeInfo(mime_type, message=NOT_IMPORTABLE_MESSAGE)
    return ParseTypeInfo("text/" + (subtype or extension[1:] or "plain"))
