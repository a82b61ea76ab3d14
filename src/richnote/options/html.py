#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for HTML parsing and rendering."""

from __future__ import annotations

from dataclasses import dataclass, field

from richnote.constants import DEFAULT_HTML_PARSER
from richnote.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class HtmlRendererOptions(BaseRendererOptions):
    """Configuration options for serializing document trees to HTML.

    Parameters
    ----------
    table_body : bool, default True
        Wrap table rows in ``<tbody>``
    break_tag : str, default "<br />"
        Markup emitted for a newline inside text outside code blocks

    """

    table_body: bool = field(
        default=True,
        metadata={"help": "Wrap table rows in <tbody>", "importance": "advanced"},
    )
    break_tag: str = field(
        default="<br />",
        metadata={"help": "Markup emitted for a newline outside code blocks", "importance": "advanced"},
    )


@dataclass(frozen=True)
class HtmlParserOptions(BaseParserOptions):
    """Configuration options for deserializing HTML into a document tree.

    Parameters
    ----------
    html_parser : str, default "html.parser"
        BeautifulSoup tree builder name ("html.parser", "lxml", "html5lib")
    title_as_heading : bool, default True
        Prepend a non-blank ``<title>`` as a level-one heading when the
        markup has no non-blank ``<h1>``
    collapse_whitespace : bool, default True
        Collapse whitespace runs outside ``<pre>`` to a single space

    """

    html_parser: str = field(
        default=DEFAULT_HTML_PARSER,
        metadata={"help": "BeautifulSoup parser to use", "importance": "advanced"},
    )
    title_as_heading: bool = field(
        default=True,
        metadata={"help": "Use <title> as a level-one heading when no <h1> has text", "importance": "core"},
    )
    collapse_whitespace: bool = field(
        default=True,
        metadata={"help": "Collapse whitespace outside <pre>", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate the parser name.

        Raises
        ------
        ValueError
            If html_parser is empty.

        """
        if not self.html_parser:
            raise ValueError("html_parser must be a non-empty parser name")
