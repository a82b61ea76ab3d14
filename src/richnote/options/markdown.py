#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for Markdown parsing and rendering."""

from __future__ import annotations

from dataclasses import dataclass, field

from richnote.constants import (
    DEFAULT_LIST_INDENT,
    DEFAULT_MARKDOWN_PLUGINS,
    DEFAULT_SUPERSCRIPT_REPLACEMENTS,
    DEFAULT_THEMATIC_BREAK,
)
from richnote.options.base import BaseParserOptions, BaseRendererOptions

_KNOWN_PLUGINS = frozenset({"strikethrough", "table", "task_lists"})


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for Markdown-to-tree conversion.

    Parameters
    ----------
    plugins : tuple of str, default ("strikethrough", "table", "task_lists")
        mistune plugins to enable
    superscript_replacements : bool, default True
        Turn ``x^2`` into ``x²`` in text runs

    """

    plugins: tuple[str, ...] = field(
        default=DEFAULT_MARKDOWN_PLUGINS,
        metadata={"help": "mistune plugins to enable", "importance": "advanced"},
    )
    superscript_replacements: bool = field(
        default=DEFAULT_SUPERSCRIPT_REPLACEMENTS,
        metadata={"help": "Replace a letter followed by ^digit with a superscript digit", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate plugin names.

        Raises
        ------
        ValueError
            If an unknown plugin is named.

        """
        unknown = set(self.plugins) - _KNOWN_PLUGINS
        if unknown:
            raise ValueError(f"Unknown Markdown plugins: {', '.join(sorted(unknown))}")


@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    """Configuration options for tree-to-Markdown rendering.

    Parameters
    ----------
    bullet : str, default "*"
        Bullet character for unordered lists
    list_indent : int, default 4
        Spaces used to indent nested list content
    thematic_break : str, default 30 dashes
        Text emitted for a thematic break

    """

    bullet: str = field(
        default="*",
        metadata={"help": "Bullet character for unordered lists", "importance": "core"},
    )
    list_indent: int = field(
        default=DEFAULT_LIST_INDENT,
        metadata={"help": "Spaces used to indent nested list content", "importance": "advanced"},
    )
    thematic_break: str = field(
        default=DEFAULT_THEMATIC_BREAK,
        metadata={"help": "Text emitted for a thematic break", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate ranges.

        Raises
        ------
        ValueError
            If the bullet or indent is invalid.

        """
        if self.bullet not in ("*", "-", "+"):
            raise ValueError(f"bullet must be one of '*', '-', '+', got {self.bullet!r}")
        if self.list_indent < 1:
            raise ValueError(f"list_indent must be positive, got {self.list_indent}")
