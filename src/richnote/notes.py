#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/notes.py
"""Conversion between stored note records and editable document trees.

A stored note holds its content as a string with a MIME type. While it is
edited the content is a list of document tree nodes with a content subtype
(:class:`NodeNote`). :func:`serialize_note` turns the nodes back into a
string and computes the title and search words; :func:`deserialize_note`
goes the other way.

This module also produces the Markdown used when a note is shared and the
file used when a note is exported.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from richnote.ast.nodes import Element, Node, Text, has_inlines, node_string
from richnote.ast.paths import iter_nodes
from richnote.constants import (
    CONTENT_MAX,
    DEFAULT_EXPORT_NAME,
    DEFAULT_MARKDOWN_SUBTYPE,
    DEFAULT_RICH_SUBTYPE,
    EXPORT_NAME_MAX,
    LIST_ITEM_TITLE_PREFIX,
    SUBTYPE_EXTENSIONS,
    TITLE_MAX,
)
from richnote.exceptions import ValidationError
from richnote.parsers.html import deserialize_html
from richnote.renderers.html import serialize_html
from richnote.renderers.markdown import serialize_markdown
from richnote.url_substitutions import UrlSubstitutions
from richnote.utils.dates import normalize_date
from richnote.utils.html_sanitizer import raw_field
from richnote.utils.mime import extract_subtype, has_tags_like_html
from richnote.utils.words import parse_words, remove_prefix_words

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"</?[a-zA-Z][^<>]*>")
_MARKDOWN_MARKUP_RE = re.compile(r"={3,}|-{3,}|\*|_|^\s{0,3}#+|^\s{0,3}>|`+|!\[|~|\|", re.MULTILINE)
_LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")
_FILE_NAME_RE = re.compile(r"[<>{}\\/^•]")
_MIME_TYPE_RE = re.compile(r"^([A-Za-z]+/([-\w.+]+))")

_TITLE_BUCKETS = ("heading-one", "heading-two", "heading-three", "paragraph", "other")
_TITLES_PER_BUCKET = 2


@dataclass
class NodeNote:
    """A note being edited: content as document tree nodes.

    Parameters
    ----------
    id : str
        Note identifier
    subtype : str
        Content subtype, e.g. ``html;hint=SEMANTIC``, ``markdown;hint=COMMONMARK``
        or ``""`` for plain text
    nodes : list of Node
        Top-level nodes
    date : datetime
        Date the note was last edited
    is_locked : bool, default False
        Whether the note is protected from editing

    """

    id: str
    subtype: str
    nodes: list[Node]
    date: dt.datetime
    is_locked: bool = False


@dataclass
class SerializedNote:
    """A note ready to store: content as a string, with title and search words."""

    id: str
    mime_type: str
    title: str
    content: str
    date: dt.datetime
    is_locked: bool = False
    words: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready record."""
        return {
            "id": self.id,
            "mimeType": self.mime_type,
            "title": self.title,
            "content": self.content,
            "date": self.date.isoformat(),
            "isLocked": self.is_locked,
            "words": self.words,
        }


@dataclass(frozen=True)
class ExportedFile:
    """A note packaged as a file."""

    name: str
    content: str
    mime_type: str


def shorten_title(title: Optional[str], max_length: int = 27) -> str:
    """Return the first line of a title, cut at a word boundary near ``max_length``."""
    first_line = _LINE_BREAK_RE.split((title or "").strip())[0]
    if len(first_line) <= max_length:
        return first_line
    cut = first_line.rfind(" ", 0, max_length)
    return first_line[: cut if cut > 0 else max_length] + "…"


def deserialize_note(raw: Any) -> NodeNote:
    """Convert a stored note record to an editable :class:`NodeNote`.

    Parameters
    ----------
    raw : mapping or object
        Record with ``id``, ``content``, ``date`` (or ``last_edited``),
        ``mime_type`` (or ``mimeType``) and ``is_locked`` (or ``isLocked``)

    Returns
    -------
    NodeNote
        The note with parsed content

    Raises
    ------
    ValidationError
        If the MIME type is neither markup nor text

    """
    mime_type = raw_field(raw, "mime_type", "mimeType") or ""
    content = raw_field(raw, "content") or ""

    if has_tags_like_html(mime_type):
        subtype = DEFAULT_RICH_SUBTYPE
        nodes = deserialize_html(content)
    elif not mime_type or mime_type.startswith("text/"):
        subtype = extract_subtype(mime_type)
        if subtype.startswith("markdown"):
            subtype = DEFAULT_MARKDOWN_SUBTYPE
        nodes = [Element("paragraph", [Text(line)]) for line in content.split("\n")]
    else:
        raise ValidationError(
            f"Can't handle “{mime_type}” note",
            parameter_name="mime_type",
            parameter_value=mime_type,
        )

    date = raw_field(raw, "date", "last_edited", "lastEdited")
    return NodeNote(
        id=raw_field(raw, "id"),
        subtype=subtype,
        nodes=nodes,
        date=normalize_date(date),
        is_locked=bool(raw_field(raw, "is_locked", "isLocked")),
    )


async def serialize_note(node_note: NodeNote, substitutions: Optional[UrlSubstitutions] = None) -> SerializedNote:
    """Convert an edited note to a storable :class:`SerializedNote`.

    Parameters
    ----------
    node_note : NodeNote
        Note to serialize
    substitutions : UrlSubstitutions, optional
        Pending ``blob:`` URL resolutions; awaited before rendering HTML

    Returns
    -------
    SerializedNote
        Content, title and search words

    Raises
    ------
    ValidationError
        If the content is too long to store

    """
    subtype = node_note.subtype or ""
    mime_type = f"text/{subtype}" if subtype else ""

    if subtype.startswith("html"):
        urls = await substitutions.current() if substitutions is not None else {}
        title, content, words = _serialize_html(node_note.nodes, urls)
    else:
        title, content, words = _serialize_text(node_note.nodes, subtype.startswith("markdown"))

    limit = CONTENT_MAX if subtype.startswith(("html", "markdown")) else CONTENT_MAX // 10
    if len(content) > limit:
        raise ValidationError(
            f"“{shorten_title(title)}” is too long: {len(content)} characters",
            parameter_name="content",
            parameter_value=len(content),
        )

    return SerializedNote(
        id=node_note.id,
        mime_type=mime_type,
        title=title,
        content=content,
        date=node_note.date,
        is_locked=node_note.is_locked,
        words=sorted(remove_prefix_words(words)),
    )


def _serialize_html(nodes: list[Node], urls: dict[str, str]) -> tuple[str, str, set[str]]:
    content = serialize_html(nodes, urls)

    titles: dict[str, list[str]] = {bucket: [] for bucket in _TITLE_BUCKETS}
    words: set[str] = set()
    for top in nodes:
        for element, _path in iter_nodes(top):
            if not isinstance(element, Element) or not has_inlines(element):
                continue
            text = node_string(element).strip()
            if not text:
                continue
            if element.type in titles:
                bucket = element.type
            else:
                bucket = "other"
                if element.type == "list-item":
                    text = LIST_ITEM_TITLE_PREFIX + text
            if len(titles[bucket]) < _TITLES_PER_BUCKET:
                titles[bucket].append(text)
            words |= parse_words(text)

    relevant = next((titles[bucket] for bucket in _TITLE_BUCKETS if titles[bucket]), [])
    title = "\n".join(relevant)[:TITLE_MAX]

    if not title:
        incipit = content.strip()[:TITLE_MAX]
        if not _TAG_RE.search(incipit):
            title = incipit
    return title, content, words


def _serialize_text(nodes: list[Node], is_markdown: bool) -> tuple[str, str, set[str]]:
    title_lines: list[str] = []
    for node in nodes:
        if len(title_lines) >= 2:
            break
        for line in node_string(node).split("\n"):
            if is_markdown:
                line = _MARKDOWN_MARKUP_RE.sub("", line)
            line = line.strip()
            if line:
                title_lines.append(line)
    title = "\n".join(title_lines[:2])[:TITLE_MAX]

    content = "\n".join(node_string(node) for node in nodes)

    words: set[str] = set()
    for node in nodes:
        words |= parse_words(node_string(node))
    return title, content, words


def sharing_content(note: Any) -> str:
    """Return the text to share for a stored note: Markdown for markup notes, else the content.

    Raises
    ------
    ValidationError
        If the note is neither markup nor text

    """
    mime_type = raw_field(note, "mime_type", "mimeType") or ""
    content = raw_field(note, "content") or ""
    if has_tags_like_html(mime_type):
        return serialize_markdown(deserialize_html(content))
    if not mime_type or mime_type.startswith("text/"):
        return content
    logger.error("Can't share %s note “%s”", mime_type, shorten_title(raw_field(note, "title")))
    raise ValidationError(f"Can't share “{mime_type}” note", parameter_name="mime_type", parameter_value=mime_type)


def file_extension(subtype: str) -> str:
    """Return the file extension for a MIME subtype.

    Examples
    --------
        >>> file_extension("markdown"), file_extension("x-python"), file_extension("vnd.foo"), file_extension("csv")
        ('.md', '.python', '.foo', '.csv')

    """
    if subtype in SUBTYPE_EXTENSIONS:
        return SUBTYPE_EXTENSIONS[subtype]
    if subtype.startswith("x-"):
        return "." + subtype[2:]
    if subtype.startswith("vnd."):
        return "." + subtype[4:]
    return "." + subtype


def wrap_in_file(note: Any) -> ExportedFile:
    """Package a stored note as a file named after its title.

    Parameters
    ----------
    note : mapping or object
        Record with ``title``, ``content`` and ``mime_type`` (or ``mimeType``)

    Returns
    -------
    ExportedFile
        File name with extension, content and MIME type

    """
    match = _MIME_TYPE_RE.match(raw_field(note, "mime_type", "mimeType") or "")
    file_type = match.group(1) if match else "text/plain"
    subtype = match.group(2) if match else "plain"

    title = raw_field(note, "title") or ""
    first_line = _LINE_BREAK_RE.split(title)[0]
    base_name = _FILE_NAME_RE.sub(" ", first_line).strip()[:EXPORT_NAME_MAX] or DEFAULT_EXPORT_NAME
    return ExportedFile(name=base_name + file_extension(subtype), content=raw_field(note, "content") or "", mime_type=file_type)
