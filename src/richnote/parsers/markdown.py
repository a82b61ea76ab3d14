#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/parsers/markdown.py
"""Markdown to document tree converter.

This module parses Markdown with mistune and builds document tree nodes
from its token stream. Inline formatting becomes marks on text leaves;
block HTML is handed to the HTML converter.

"""

from __future__ import annotations

import logging
import re
from typing import Any

from richnote.ast import Element, Node, Text
from richnote.constants import DEPS_HTML, DEPS_MARKDOWN, HEADING_TAG_TYPES
from richnote.exceptions import ParsingError
from richnote.options.markdown import MarkdownParserOptions
from richnote.parsers.base import BaseParser
from richnote.parsers.html import HtmlToTreeConverter
from richnote.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

_SUPERSCRIPT_RE = re.compile(r"([A-Za-z])\^([0-9])(?![0-9A-Za-z])")
_SUPERSCRIPT_DIGITS = "⁰¹²³⁴⁵⁶⁷⁸⁹"

# Inline HTML that stands for a line break
_BREAK_HTML = frozenset({"<br>", "<br/>", "<br />", "<p>", "</p>", "<div>", "</div>", "<blockquote>", "</blockquote>"})
# Inline HTML that switches a mark on or off
_TOGGLE_HTML: dict[str, tuple[str, bool]] = {
    "<i>": ("italic", True),
    "<em>": ("italic", True),
    "</i>": ("italic", False),
    "</em>": ("italic", False),
    "<b>": ("bold", True),
    "<strong>": ("bold", True),
    "</b>": ("bold", False),
    "</strong>": ("bold", False),
}


def superscript_replacements(value: str) -> str:
    """Replace a letter followed by ``^`` and a digit with the letter and a superscript digit.

    Examples
    --------
        >>> superscript_replacements("E = mc^2")
        'E = mc²'
        >>> superscript_replacements("x^23")
        'x^23'

    """
    return _SUPERSCRIPT_RE.sub(lambda m: m.group(1) + _SUPERSCRIPT_DIGITS[int(m.group(2))], value)


class MarkdownToTreeConverter(BaseParser):
    """Convert Markdown to document tree nodes.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parsing options

    Examples
    --------
        >>> MarkdownToTreeConverter().convert_to_tree("# Title\\n\\n* one\\n* two")
        Document(children=[Element(type='heading-one', ...), Element(type='bulleted-list', ...)], ...)

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        BaseParser._validate_options_type(options, MarkdownParserOptions, "markdown")
        options = options or MarkdownParserOptions()
        super().__init__(options)
        self.options: MarkdownParserOptions = options
        self._html_marks: dict[str, bool] = {}

    @requires_dependencies("markdown", DEPS_MARKDOWN + DEPS_HTML)
    def convert_fragment(self, text: str) -> list[Node]:
        """Parse Markdown into raw, un-normalized top-level nodes.

        Parameters
        ----------
        text : str
            Markdown source

        Returns
        -------
        list of Node
            Parsed nodes

        Raises
        ------
        ValidationError
            If ``text`` is not a string
        ParsingError
            If mistune fails on the source

        """
        markdown_text = self._validate_input(text)

        import mistune

        markdown = mistune.create_markdown(renderer=None, plugins=list(self.options.plugins))
        try:
            tokens, _state = markdown.parse(markdown_text)
        except Exception as e:
            raise ParsingError(f"Failed to parse Markdown: {e}", parsing_stage="tokenizing", original_error=e) from e

        self._html_marks = {}
        return self._process_tokens(tokens if isinstance(tokens, list) else [])

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            nodes.extend(self._process_token(token))
        return nodes

    def _process_token(self, token: dict[str, Any]) -> list[Node]:
        token_type = token.get("type", "")

        if token_type == "heading":
            level = token.get("attrs", {}).get("level", 1)
            type_ = HEADING_TAG_TYPES.get(f"h{min(max(level, 1), 6)}", "heading-three")
            return [Element(type_, self._process_inline_tokens(token.get("children", [])) or [Text()])]
        if token_type in ("paragraph", "block_text"):
            return self._split_images("paragraph", self._process_inline_tokens(token.get("children", [])))
        if token_type == "block_quote":
            return [Element("quote", self._process_tokens(token.get("children", [])) or [Text()])]
        if token_type == "block_code":
            return [Element("code", [Text(token.get("raw", "").rstrip())])]
        if token_type == "thematic_break":
            return [Element("thematic-break", [Text()])]
        if token_type == "list":
            return [self._process_list(token)]
        if token_type == "table":
            return [self._process_table(token)]
        if token_type == "block_html":
            return HtmlToTreeConverter().convert_fragment(token.get("raw", ""))
        if token_type != "blank_line":
            logger.debug("Ignoring Markdown token %s", token_type)
        return []

    @staticmethod
    def _split_images(type_: str, inlines: list[Node]) -> list[Node]:
        """Split a run of inlines into blocks of ``type_`` separated by image blocks."""
        blocks: list[Node] = []
        run: list[Node] = []
        for node in inlines:
            if isinstance(node, Element) and node.type == "image":
                if run:
                    blocks.append(Element(type_, run))
                    run = []
                blocks.append(node)
            else:
                run.append(node)
        if run or not blocks:
            blocks.append(Element(type_, run or [Text()]))
        return blocks

    def _process_list(self, token: dict[str, Any]) -> Element:
        ordered = token.get("attrs", {}).get("ordered", False)
        items = [child for child in token.get("children", []) if isinstance(child, dict)]
        is_checklist = any(item.get("type") == "task_list_item" for item in items)

        if is_checklist:
            type_ = "sequence-list" if ordered else "task-list"
        else:
            type_ = "numbered-list" if ordered else "bulleted-list"

        children: list[Node] = []
        for item in items:
            content = self._process_tokens(item.get("children", [])) or [Text()]
            checked = bool(item.get("attrs", {}).get("checked")) if is_checklist else None
            children.append(Element("list-item", content, checked=checked))
        return Element(type_, children or [Element("list-item", [Text()])])

    def _process_table(self, token: dict[str, Any]) -> Element:
        rows: list[Node] = []
        for part in token.get("children", []):
            part_type = part.get("type", "")
            if part_type == "table_head":
                cells = [self._process_cell(cell, bold=True) for cell in part.get("children", [])]
                rows.append(Element("table-row", cells))
            elif part_type == "table_body":
                for row in part.get("children", []):
                    cells = [self._process_cell(cell) for cell in row.get("children", [])]
                    rows.append(Element("table-row", cells))
        return Element("table", rows)

    def _process_cell(self, token: dict[str, Any], bold: bool = False) -> Element:
        marks = {"bold": True} if bold else {}
        return Element("table-cell", self._process_inline_tokens(token.get("children", []), marks) or [Text(**marks)])

    # ------------------------------------------------------------------
    # Inlines
    # ------------------------------------------------------------------

    def _active_marks(self, marks: dict[str, bool]) -> dict[str, bool]:
        return {**marks, **{name: True for name, on in self._html_marks.items() if on}}

    def _process_inline_tokens(self, tokens: list[dict[str, Any]], marks: dict[str, bool] | None = None) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            nodes.extend(self._process_inline_token(token, marks or {}))
        return nodes

    def _process_inline_token(self, token: dict[str, Any], marks: dict[str, bool]) -> list[Node]:
        token_type = token.get("type", "")
        children = token.get("children", [])

        if token_type == "text":
            value = token.get("raw", "")
            if self.options.superscript_replacements:
                value = superscript_replacements(value)
            return [Text(value, **self._active_marks(marks))]
        if token_type == "emphasis":
            return self._process_inline_tokens(children, {**marks, "italic": True})
        if token_type == "strong":
            return self._process_inline_tokens(children, {**marks, "bold": True})
        if token_type == "strikethrough":
            return self._process_inline_tokens(children, {**marks, "strikethrough": True})
        if token_type == "codespan":
            return [Text(token.get("raw", ""), **{**self._active_marks(marks), "code": True})]
        if token_type == "softbreak":
            return [Text(" ", **self._active_marks(marks))]
        if token_type == "linebreak":
            return [Text("\n", **self._active_marks(marks))]
        if token_type == "link":
            attrs = token.get("attrs", {})
            content = self._process_inline_tokens(children, marks) or [Text(**self._active_marks(marks))]
            return [Element("link", content, url=attrs.get("url", ""), title=attrs.get("title") or None)]
        if token_type == "image":
            attrs = token.get("attrs", {})
            alt = "".join(node.text for node in self._process_inline_tokens(children) if isinstance(node, Text))
            return [
                Element(
                    "image",
                    [Text(alt, **self._active_marks(marks))],
                    url=attrs.get("url", ""),
                    title=attrs.get("title") or "",
                )
            ]
        if token_type == "inline_html":
            return self._process_inline_html(token.get("raw", ""), marks)

        logger.debug("Ignoring Markdown inline token %s", token_type)
        return []

    def _process_inline_html(self, raw: str, marks: dict[str, bool]) -> list[Node]:
        tag = raw.strip().lower()
        if tag in _BREAK_HTML:
            return [Text("\n", **self._active_marks(marks))]
        if tag in _TOGGLE_HTML:
            name, on = _TOGGLE_HTML[tag]
            self._html_marks[name] = on
            return []

        from bs4 import BeautifulSoup

        value = BeautifulSoup(raw, "html.parser").get_text().strip()
        return [Text(value, **self._active_marks(marks))] if value else []


def deserialize_markdown(text: str) -> list[Node]:
    """Parse Markdown into raw document tree nodes with default options.

    Parameters
    ----------
    text : str
        Markdown source

    Returns
    -------
    list of Node
        Un-normalized top-level nodes

    """
    return MarkdownToTreeConverter().convert_fragment(text)
