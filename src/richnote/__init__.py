"""richnote - rich-text note content: parsing, normalization, sanitization and export.

richnote keeps the content of a note as a tree of blocks, inlines and
marked text, and converts it to and from the formats a note is stored,
pasted or shared in.

Key Features
------------
- HTML and Markdown parsing into a normalized document tree
- HTML, Markdown and plain text rendering
- Normalization rules that keep lists, tables and blocks well formed
- Editing operations with caret handling
- HTML sanitization with title extraction
- Paste and drop ingestion for rich, Markdown and plain targets
- Image files converted to data URLs of bounded size

Examples
--------
    >>> from richnote import Editor, deserialize_html, serialize_markdown
    >>> editor = Editor(deserialize_html("<h1>Trip</h1><ul><li>tickets</li></ul>"))
    >>> serialize_markdown(editor.children)
    '# Trip\\n\\n* tickets'

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "richnote requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from richnote.ast import Document, Element, Node, Text
from richnote.editor import Editor, Notice
from richnote.exceptions import (
    DependencyError,
    FileReadError,
    IngestionError,
    InvalidOptionsError,
    NormalizationError,
    ParsingError,
    RenderingError,
    RichNoteError,
    ValidationError,
)
from richnote.ingestion import DataTransfer, IngestionDispatcher, IngestionResult, SourceFile
from richnote.notes import NodeNote, SerializedNote, deserialize_note, serialize_note, sharing_content, wrap_in_file
from richnote.parsers import deserialize_html, deserialize_markdown
from richnote.renderers import coerce_to_plain_text, serialize_html, serialize_markdown
from richnote.transforms import NormalizationEngine
from richnote.url_substitutions import ObjectUrlStore, UrlSubstitutions
from richnote.utils.html_sanitizer import sanitize_html, sanitize_note

__all__ = [
    "__version__",
    "Document",
    "Element",
    "Node",
    "Text",
    "Editor",
    "Notice",
    "NormalizationEngine",
    "deserialize_html",
    "deserialize_markdown",
    "serialize_html",
    "serialize_markdown",
    "coerce_to_plain_text",
    "sanitize_html",
    "sanitize_note",
    "DataTransfer",
    "SourceFile",
    "IngestionDispatcher",
    "IngestionResult",
    "ObjectUrlStore",
    "UrlSubstitutions",
    "NodeNote",
    "SerializedNote",
    "deserialize_note",
    "serialize_note",
    "sharing_content",
    "wrap_in_file",
    "RichNoteError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "RenderingError",
    "NormalizationError",
    "IngestionError",
    "FileReadError",
    "DependencyError",
]
