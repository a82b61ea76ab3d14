#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/ingestion.py
"""Paste and drop handling.

A :class:`DataTransfer` carries the representations offered by the source
application (``text/html``, ``text/uri-list``, ``text/plain``) and any files.
:class:`IngestionDispatcher` picks one representation, converts it for the
target note format and returns the resulting insertions, which
:meth:`IngestionDispatcher.insert_data` applies to an :class:`Editor`.

Examples
--------
    >>> import asyncio
    >>> editor = Editor([paragraph("")])
    >>> transfer = DataTransfer({"text/uri-list": "# Docs\\nhttps://example.com/docs"})
    >>> asyncio.run(IngestionDispatcher(editor.subtype).insert_data(editor, transfer))

"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Union

from richnote.ast.nodes import Element, Node, Text
from richnote.constants import PASTE_FAILURE_MESSAGE, NoticeSeverity, TargetFormat
from richnote.editor import Editor, Notice
from richnote.exceptions import FileReadError, RichNoteError
from richnote.options.ingestion import IngestionOptions
from richnote.parsers.html import deserialize_html
from richnote.parsers.markdown import deserialize_markdown
from richnote.renderers.markdown import serialize_markdown
from richnote.renderers.plaintext import coerce_to_plain_text
from richnote.url_substitutions import UrlSubstitutions
from richnote.utils.html_sanitizer import sanitize_html
from richnote.utils.images import image_file_to_data_url
from richnote.utils.markdown_detect import is_likely_markdown
from richnote.utils.mime import determine_parse_type, target_format

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")
_COMMENT_RE = re.compile(r"#\s*(.*)")


def file_failure_message(name: str) -> str:
    """Return the message shown when a file can't be read."""
    return f"Can you open “{name}” in another app and copy?"


@dataclass
class SourceFile:
    """A pasted or dropped file, held in memory or read from disk.

    Parameters
    ----------
    name : str
        File name, used for the alt text of images and in messages
    type : str, default ""
        Declared MIME type; may be empty
    data : bytes, optional
        File content
    path : str or Path, optional
        Where to read the content when ``data`` is not given
    last_modified : float, optional
        Modification time in milliseconds since the epoch

    """

    name: str
    type: str = ""
    data: Optional[bytes] = None
    path: Optional[Union[str, Path]] = None
    last_modified: Optional[float] = None

    @classmethod
    def from_path(cls, path: Union[str, Path], mime_type: str = "") -> "SourceFile":
        """Create a file backed by ``path``."""
        path = Path(path)
        return cls(name=path.name, type=mime_type, path=path)

    async def read_bytes(self) -> bytes:
        """Return the file content.

        Raises
        ------
        FileReadError
            If the file has neither data nor a readable path

        """
        if self.data is not None:
            return self.data
        if self.path is None:
            raise FileReadError(f"No content for file '{self.name}'", file_name=self.name)
        try:
            return await asyncio.to_thread(Path(self.path).read_bytes)
        except OSError as e:
            raise FileReadError(f"Failed to read '{self.name}': {e}", file_name=self.name, original_error=e) from e

    async def read_text(self) -> str:
        """Return the file content decoded as UTF-8; undecodable bytes are replaced."""
        return (await self.read_bytes()).decode("utf-8", errors="replace")


@dataclass
class DataTransfer:
    """Clipboard or drag-and-drop payload.

    Parameters
    ----------
    items : dict of str to str
        Text representations keyed by MIME type
    files : list of SourceFile
        Files, in the order they were offered

    """

    items: dict[str, str] = field(default_factory=dict)
    files: list[SourceFile] = field(default_factory=list)

    @property
    def types(self) -> list[str]:
        """MIME types of the text representations."""
        return list(self.items)

    def get_data(self, mime_type: str) -> str:
        """Return the representation for ``mime_type``, or ``""``."""
        return self.items.get(mime_type, "")


@dataclass
class Insertion:
    """One insertion into the editor: either nodes or text."""

    nodes: Optional[list[Node]] = None
    text: Optional[str] = None

    def apply(self, editor: Editor) -> None:
        """Insert into ``editor`` at its selection."""
        if self.nodes is not None:
            editor.insert_fragment(self.nodes)
        elif self.text is not None:
            editor.insert_text(self.text)


@dataclass
class IngestionResult:
    """Insertions to apply, in order, and notices for the user."""

    insertions: list[Insertion] = field(default_factory=list)
    notices: list[Notice] = field(default_factory=list)

    def add_nodes(self, nodes: list[Node]) -> None:
        self.insertions.append(Insertion(nodes=nodes))

    def add_text(self, text: str) -> None:
        self.insertions.append(Insertion(text=text))

    def notify(self, message: str, severity: NoticeSeverity = "info") -> None:
        self.notices.append(Notice(message, severity))


def parse_uri_list(uri_list: str) -> list[tuple[str, str]]:
    """Split a ``text/uri-list`` payload into ``(label, url)`` pairs.

    A ``#`` line labels the next URL; without a label the URL labels itself.

    Examples
    --------
        >>> parse_uri_list("# Example\\r\\nhttps://example.com\\nhttps://example.org")
        [('Example', 'https://example.com'), ('https://example.org', 'https://example.org')]

    """
    links: list[tuple[str, str]] = []
    comment = ""
    for line in _LINE_BREAK_RE.split(uri_list):
        if line.startswith("#"):
            match = _COMMENT_RE.match(line)
            comment = match.group(1) if match else ""
        elif line.strip():
            url = line.strip()
            links.append((comment or url, url))
            comment = ""
        else:
            comment = ""
    return links


Handler = Callable[[IngestionResult, str], None]


class IngestionDispatcher:
    """Convert pasted or dropped data for a note's content subtype.

    Parameters
    ----------
    target_subtype : str
        Subtype of the receiving note; ``html…`` is rich text, ``markdown…``
        is Markdown and anything else is plain text
    options : IngestionOptions, optional
        Image conversion limits
    substitutions : UrlSubstitutions, optional
        Registry for ``blob:`` image sources in pasted HTML

    """

    def __init__(
        self,
        target_subtype: str,
        options: Optional[IngestionOptions] = None,
        substitutions: Optional[UrlSubstitutions] = None,
    ):
        self.target_subtype = target_subtype
        self.target: TargetFormat = target_format(target_subtype)
        self.options = options or IngestionOptions()
        self.substitutions = substitutions

        handlers: dict[TargetFormat, tuple[Handler, Handler, Handler]] = {
            "rich": (self._html_to_rich_text, self._uri_list_to_rich_text, self._markdown_to_rich_text),
            "markdown": (self._html_to_markdown, self._uri_list_to_markdown, self._text),
            "plain": (self._html_to_plain_text, self._text, self._text),
        }
        self._paste_html, self._paste_uri_list, self._paste_markdown = handlers[self.target]

    async def process(self, data_transfer: DataTransfer) -> IngestionResult:
        """Convert the best representation in ``data_transfer``.

        Parameters
        ----------
        data_transfer : DataTransfer
            Clipboard or drop payload

        Returns
        -------
        IngestionResult
            Insertions and notices

        """
        result = IngestionResult()
        types = data_transfer.types

        if "text/html" in types and self.target != "plain":
            self._paste_html(result, data_transfer.get_data("text/html"))
        elif "text/uri-list" in types:
            self._paste_uri_list(result, data_transfer.get_data("text/uri-list"))
        elif "text/plain" in types:
            text = data_transfer.get_data("text/plain")
            if is_likely_markdown(text):
                self._paste_markdown(result, text)
            else:
                self._text(result, text)
        elif data_transfer.files:
            for file in data_transfer.files:
                await self._process_file(result, file)
        else:
            logger.warning("Nothing usable in data transfer with types %s", types)
            result.notify(PASTE_FAILURE_MESSAGE, "warning")
        return result

    async def insert_data(self, editor: Editor, data_transfer: DataTransfer) -> None:
        """Process ``data_transfer`` and apply the result to ``editor``."""
        result = await self.process(data_transfer)
        for insertion in result.insertions:
            insertion.apply(editor)
        editor.notices.extend(result.notices)

    async def _process_file(self, result: IngestionResult, file: SourceFile) -> None:
        try:
            info = await determine_parse_type(file)
            parse_type = "text/markdown" if info.is_markdown else info.parse_type

            if parse_type.startswith("image/"):
                await self._paste_image_file(result, file)
            elif info.importable:
                text = await file.read_text()
                if parse_type == "text/html":
                    self._paste_html(result, text)
                elif parse_type == "text/uri-list":
                    self._paste_uri_list(result, text)
                elif parse_type == "text/markdown":
                    self._paste_markdown(result, text)
                else:
                    self._text(result, text)
            else:
                logger.warning("Not pasteable: %s %s %s", file.name, file.type, info.message)
                result.notify(file_failure_message(file.name), "warning")
        except (OSError, UnicodeError, ValueError, RichNoteError) as e:
            # Pillow's UnidentifiedImageError is an OSError
            logger.error("While pasting file %s: %s", file.name, e)
            self._failure(result, file_failure_message(file.name))
            result.notify(file_failure_message(file.name), "error")

    def _failure(self, result: IngestionResult, message: str) -> None:
        # the caret must end up outside the message for the next file
        if self.target == "rich":
            result.add_nodes([Element("quote", [Text(message)]), Element("paragraph", [Text()])])
        elif self.target == "markdown":
            result.add_text(f"> {message}\n")
        else:
            result.add_text(message + "\n")

    # ------------------------------------------------------------------
    # Rich text
    # ------------------------------------------------------------------

    def _html_to_rich_text(self, result: IngestionResult, html: str) -> None:
        sanitized = sanitize_html(html)
        result.add_nodes(deserialize_html(sanitized.content, self.substitutions))

    def _uri_list_to_rich_text(self, result: IngestionResult, uri_list: str) -> None:
        links: list[Node] = [Element("link", [Text(label)], url=url, title="") for label, url in parse_uri_list(uri_list)]
        logger.info("URI list -> %d link element(s)", len(links))
        result.add_nodes(links)

    def _markdown_to_rich_text(self, result: IngestionResult, text: str) -> None:
        result.add_nodes(deserialize_markdown(text))

    # ------------------------------------------------------------------
    # Markdown
    # ------------------------------------------------------------------

    def _html_to_markdown(self, result: IngestionResult, html: str) -> None:
        sanitized = sanitize_html(html)
        markdown = serialize_markdown(deserialize_html(sanitized.content, self.substitutions))
        lines = markdown.split("\n")
        if len(lines) == 1:
            result.add_nodes([Text(lines[0])])
        else:
            result.add_nodes([Element("paragraph", [Text(line)]) for line in lines])

    def _uri_list_to_markdown(self, result: IngestionResult, uri_list: str) -> None:
        result.add_text("".join(f"[{label}]({url})" for label, url in parse_uri_list(uri_list)))

    # ------------------------------------------------------------------
    # Plain text
    # ------------------------------------------------------------------

    def _html_to_plain_text(self, result: IngestionResult, html: str) -> None:
        sanitized = sanitize_html(html)
        nodes: list[Node] = list(coerce_to_plain_text(deserialize_html(sanitized.content)))
        result.add_nodes(nodes)

    def _text(self, result: IngestionResult, text: str) -> None:
        result.add_text(text)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def _paste_image_file(self, result: IngestionResult, file: SourceFile) -> None:
        converted = await image_file_to_data_url(file, self.options)
        logger.info("%s %s -> %s image", file.name, file.type, self.target)
        if self.target == "rich":
            result.add_nodes(
                [
                    Element("paragraph", [Text()]),
                    Element("image", [Text(converted.alt)], url=converted.data_url, title=""),
                    Element("paragraph", [Text()]),
                ]
            )
        elif self.target == "markdown":
            result.add_text(f'![{converted.alt}]({converted.data_url} "")')
        else:
            result.add_text(converted.alt)


async def insert_data(editor: Editor, data_transfer: DataTransfer, **kwargs: Any) -> None:
    """Paste ``data_transfer`` into ``editor`` using the editor's subtype."""
    await IngestionDispatcher(editor.subtype, **kwargs).insert_data(editor, data_transfer)
