#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/utils/html_sanitizer.py
"""HTML sanitization and title extraction for stored notes.

Markup from outside (imports, sync, pasted files) is reduced to a semantic
subset plus SVG before it is stored. The sanitizer runs in three steps:

1. BeautifulSoup removes elements whose content is not text (scripts,
   styles, navigation, form controls).
2. bleach filters tags, attributes, URL protocols and inline CSS against
   the allow-lists in :mod:`richnote.constants`.
3. A token filter running inside the same bleach pass renames legacy tags,
   makes wide SVG images responsive and collects candidate title texts.

"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from html import unescape
from typing import Any, Callable, Iterator, Mapping, Optional

from richnote.constants import (
    CSS_PROPERTIES,
    DEPS_SANITIZER,
    LIST_ITEM_TITLE_PREFIX,
    NON_TEXT_TAGS,
    SANITIZER_ATTRIBUTES,
    SANITIZER_PROTOCOLS,
    SANITIZER_TAG_RENAMES,
    SEMANTIC_TAGS,
    SVG_FULL_WIDTH_MIN_PX,
    SVG_TAGS,
    TITLE_HEADING_TAGS,
    TITLE_HIGH_VALUE_TAGS,
    TITLE_LOW_VALUE_TAGS,
    TITLE_ORDINARY_TAGS,
)
from richnote.exceptions import ValidationError
from richnote.options.sanitize import SanitizeOptions
from richnote.utils.dates import normalize_date
from richnote.utils.decorators import requires_dependencies
from richnote.utils.mime import has_tags_like_html

logger = logging.getLogger(__name__)

TextFilter = Callable[[str], Any]

_SVG_WIDTH_RE = re.compile(r"\d(px)?\s*$")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")
_SVG_ASPECT = "xMidYMid meet"


@dataclass(frozen=True)
class SanitizedHtml:
    """Sanitized markup and the title extracted from it."""

    content: str
    title: str


@dataclass(frozen=True)
class SanitizedNote:
    """A note record with sanitized content.

    Parameters
    ----------
    id : str
        UUID of the note
    content : str
        Sanitized markup, or the original text for non-markup notes
    title : str
        Caller-supplied or extracted title
    date : datetime
        Last-modified date
    mime_type : str or None
        MIME type of the content

    """

    id: str
    content: str
    title: str
    date: datetime
    mime_type: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the record with camel-case keys, as stored."""
        return {
            "id": self.id,
            "content": self.content,
            "title": self.title,
            "date": self.date.isoformat(),
            "mimeType": self.mime_type,
        }


def _attribute_allowed(tag: str, name: str, value: str) -> bool:
    """Check an attribute against the per-tag and global allow-lists.

    Entries ending in ``*`` allow every attribute with that prefix.
    """
    for allowed in (*SANITIZER_ATTRIBUTES.get(tag, ()), *SANITIZER_ATTRIBUTES["*"]):
        if allowed.endswith("*"):
            if name.startswith(allowed[:-1]):
                return True
        elif name == allowed:
            return True
    return False


@dataclass
class _TitleBuckets:
    """Candidate title texts, grouped by how likely they are to be a title."""

    limit: int
    headings: dict[str, list[str]] = field(default_factory=lambda: {tag: [] for tag in TITLE_HEADING_TAGS})
    high: list[str] = field(default_factory=list)
    ordinary: list[str] = field(default_factory=list)
    low: list[str] = field(default_factory=list)

    def _bucket_for(self, tag: str) -> Optional[list[str]]:
        if tag in self.headings:
            return self.headings[tag]
        if tag in TITLE_HIGH_VALUE_TAGS:
            return self.high
        if tag in TITLE_ORDINARY_TAGS:
            return self.ordinary
        if tag in TITLE_LOW_VALUE_TAGS:
            return self.low
        return None

    def file(self, tag: str, text: str) -> None:
        bucket = self._bucket_for(tag)
        text = text.strip()
        if bucket is None or not text or len(bucket) >= self.limit:
            return
        if tag == "li":
            text = LIST_ITEM_TITLE_PREFIX + text
        bucket.append(text)

    def file_ordinary(self, text: Optional[str]) -> None:
        text = (text or "").strip()
        if text and len(self.ordinary) < self.limit:
            self.ordinary.append(text)

    def title(self, max_length: int) -> str:
        for bucket in (*self.headings.values(), self.high, self.ordinary, self.low):
            if bucket:
                return "\n".join(bucket)[:max_length]
        return ""


class TitleExtractionFilter:
    """Token filter that renames tags, sizes SVG and collects title texts.

    bleach runs the filter over the already-sanitized token stream, so only
    retained tags, attributes and text are seen. The filter has the same
    interface as an html5lib tree-walker filter: it wraps a token source and
    is itself iterable.

    Parameters
    ----------
    source : iterable of dict
        Token stream from the sanitizer
    buckets : _TitleBuckets
        Collector for candidate title texts
    options : SanitizeOptions
        Renaming and SVG sizing switches
    text_filter : callable, optional
        Called with every retained text run and image alt text

    """

    def __init__(
        self,
        source: Any,
        buckets: _TitleBuckets,
        options: SanitizeOptions,
        text_filter: Optional[TextFilter] = None,
    ):
        self.source = source
        self.buckets = buckets
        self.options = options
        self.text_filter = text_filter
        self.saw_tag = False
        self._open: list[tuple[str, list[str]]] = []

    def __getattr__(self, name: str) -> Any:
        return getattr(self.source, name)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        for token in self.source:
            token_type = token["type"]
            if token_type == "StartTag":
                self.saw_tag = True
                self._open.append((token["name"], []))
                self._transform(token)
            elif token_type == "EmptyTag":
                self.saw_tag = True
                self._empty_tag(token)
                self._transform(token)
            elif token_type == "EndTag":
                self._close(token["name"])
                self._transform(token)
            elif token_type in ("Characters", "SpaceCharacters"):
                if token_type == "Characters" and self.text_filter is not None:
                    self.text_filter(token["data"])
                for _name, buffer in self._open:
                    buffer.append(token["data"])
            yield token

    def _close(self, name: str) -> None:
        while self._open:
            open_name, buffer = self._open.pop()
            self.buckets.file(open_name, "".join(buffer))
            if open_name == name:
                break

    def _empty_tag(self, token: dict[str, Any]) -> None:
        if token["name"] != "img":
            return
        data = token.get("data") or {}
        alt = data.get((None, "alt"))
        if alt and self.text_filter is not None:
            self.text_filter(alt)
        self.buckets.file_ordinary(alt)
        self.buckets.file_ordinary(data.get((None, "title")))

    def _transform(self, token: dict[str, Any]) -> None:
        name = token["name"]
        if self.options.rename_tags and name in SANITIZER_TAG_RENAMES:
            token["name"] = SANITIZER_TAG_RENAMES[name]
        if name == "svg" and token["type"] != "EndTag" and self.options.size_svg:
            token["data"] = size_svg_attributes(token.get("data") or {})


def size_svg_attributes(attrs: dict[Any, str]) -> dict[Any, str]:
    """Adjust the sizing attributes of an ``<svg>`` start tag.

    Without a ``viewBox``, a missing width defaults to ``100%`` and a missing
    height to ``50vw``. A width of at least 320 pixels becomes ``100%`` and
    the height is dropped. Either way ``preserveAspectRatio`` is set so the
    drawing scales without distortion.

    Parameters
    ----------
    attrs : dict
        Attributes keyed by ``(namespace, name)``

    Returns
    -------
    dict
        The adjusted attributes

    """
    width, height = (None, "width"), (None, "height")
    aspect = (None, "preserveAspectRatio")
    attrs = dict(attrs)

    if (None, "viewBox") not in attrs:
        attrs.setdefault(width, "100%")
        attrs.setdefault(height, "50vw")
        attrs[aspect] = _SVG_ASPECT

    value = attrs.get(width)
    if isinstance(value, str) and _SVG_WIDTH_RE.search(value):
        match = _LEADING_INT_RE.match(value)
        if match and int(match.group(1)) >= SVG_FULL_WIDTH_MIN_PX:
            attrs[width] = "100%"
            attrs.pop(height, None)
            attrs[aspect] = _SVG_ASPECT
    return attrs


def _remove_non_text_tags(html: str) -> str:
    from bs4 import BeautifulSoup

    soup = BeautifulSoup(html, "html.parser")
    removed = 0
    for tag in soup.find_all(list(NON_TEXT_TAGS)):
        tag.decompose()
        removed += 1
    if removed:
        logger.debug("Removed %d non-text elements", removed)
        return str(soup)
    return html


@requires_dependencies("sanitizer", DEPS_SANITIZER)
def sanitize_html(
    html: str,
    text_filter: Optional[TextFilter] = None,
    options: Optional[SanitizeOptions] = None,
) -> SanitizedHtml:
    """Reduce markup to the allowed subset and extract a title.

    Parameters
    ----------
    html : str
        Markup to sanitize
    text_filter : callable, optional
        Called with every retained text run and image alt text, e.g. to
        collect search words
    options : SanitizeOptions, optional
        Title limits and tag transformations

    Returns
    -------
    SanitizedHtml
        Sanitized markup and title

    Examples
    --------
        >>> result = sanitize_html("<h4>Plan</h4><script>alert(1)</script><p onclick='x()'>Step one</p>")
        >>> result.content
        '<h3>Plan</h3><p>Step one</p>'
        >>> result.title
        'Plan'

    """
    import bleach
    from bleach.css_sanitizer import CSSSanitizer

    options = options or SanitizeOptions()
    buckets = _TitleBuckets(limit=options.bucket_limit)
    filters: list[TitleExtractionFilter] = []

    def make_filter(source: Any) -> TitleExtractionFilter:
        title_filter = TitleExtractionFilter(source, buckets, options, text_filter)
        filters.append(title_filter)
        return title_filter

    cleaner = bleach.Cleaner(
        tags=frozenset(SEMANTIC_TAGS) | frozenset(SVG_TAGS),
        attributes=_attribute_allowed,
        protocols=frozenset(SANITIZER_PROTOCOLS),
        strip=True,
        strip_comments=True,
        css_sanitizer=CSSSanitizer(
            allowed_css_properties=frozenset(CSS_PROPERTIES),
            allowed_svg_properties=frozenset(CSS_PROPERTIES),
        ),
        filters=[make_filter],
    )
    content = cleaner.clean(_remove_non_text_tags(html))

    title = buckets.title(options.title_max)
    if not any(title_filter.saw_tag for title_filter in filters):
        title = unescape(content).strip()[: options.title_max]
    return SanitizedHtml(content=content, title=title)


def raw_field(raw: Any, *names: str) -> Any:
    """Return the first of ``names`` present as a key or attribute of ``raw``, or None."""
    for name in names:
        if isinstance(raw, Mapping):
            if name in raw:
                return raw[name]
        elif hasattr(raw, name):
            return getattr(raw, name)
    return None


def _valid_uuid(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    try:
        uuid.UUID(value)
    except ValueError:
        return None
    return value


def sanitize_note(
    raw: Any,
    text_filter: Optional[TextFilter] = None,
    options: Optional[SanitizeOptions] = None,
) -> SanitizedNote:
    """Sanitize a note record from an untrusted source.

    Parameters
    ----------
    raw : mapping or object
        Record with ``id``, ``content``, ``title``, ``date`` and
        ``mime_type`` (or ``mimeType``)
    text_filter : callable, optional
        Called with retained text, see :func:`sanitize_html`
    options : SanitizeOptions, optional
        Title limits and tag transformations

    Returns
    -------
    SanitizedNote
        The sanitized record

    Raises
    ------
    ValidationError
        If ``content`` is not a string

    """
    options = options or SanitizeOptions()
    content = raw_field(raw, "content")
    if not isinstance(content, str):
        raise ValidationError(
            "content field must be a string",
            parameter_name="content",
            parameter_value=type(content).__name__,
        )

    note_id = _valid_uuid(raw_field(raw, "id"))
    if note_id is None:
        note_id = str(uuid.uuid4())
        logger.debug("Assigned new id %s", note_id)

    mime_type = raw_field(raw, "mime_type", "mimeType")
    caller_title = raw_field(raw, "title")
    caller_title = caller_title if isinstance(caller_title, str) else None

    if has_tags_like_html(mime_type):
        sanitized = sanitize_html(content, text_filter, options)
        content = sanitized.content
        title = caller_title if caller_title and caller_title.strip() else sanitized.title
    else:
        if text_filter is not None:
            text_filter(content)
        title = caller_title if caller_title else content[: options.title_max].strip()

    return SanitizedNote(
        id=note_id,
        content=content,
        title=title,
        date=normalize_date(raw_field(raw, "date")),
        mime_type=mime_type,
    )
