#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/parsers/html.py
"""HTML to document tree converter.

This module walks a BeautifulSoup tree and builds document tree nodes.
Formatting tags become marks on the text beneath them; structural tags become
elements. Tags the tree has no vocabulary for (``div``, ``span``, ``section``,
...) contribute their children in place.

Walk state (active marks, whether text is inside a code block, whether the
enclosing list is a checklist, and the pending table caption) is kept on
stacks that are restored when each tag is left, even when converting the tag
failed.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from richnote.ast import Element, Node, Text, is_element, is_inline, is_text
from richnote.constants import (
    DEPS_HTML,
    ELEMENT_TAG_TYPES,
    OBJECT_URL_SCHEME,
    SKIPPED_TAGS,
    TEXT_TAG_MARKS,
)
from richnote.exceptions import DependencyError
from richnote.options.html import HtmlParserOptions
from richnote.parsers.base import BaseParser
from richnote.utils.decorators import requires_dependencies
from richnote.utils.uri import decode_uri

if TYPE_CHECKING:
    from richnote.url_substitutions import UrlSubstitutions

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")

# Tags whose children are returned as-is, without an empty-text filler
_ROOT_TAGS = frozenset({"[document]", "html", "body"})


@dataclass
class _WalkState:
    """Mutable state for a single ``convert_fragment`` call."""

    marks: list[dict[str, bool]] = field(default_factory=lambda: [{}])
    code_blocks: list[bool] = field(default_factory=lambda: [False])
    checklists: list[bool] = field(default_factory=list)
    captions: list[Optional[list[Node]]] = field(default_factory=list)
    has_h1: bool = False


def _first_child(tag: Any) -> Any:
    return tag.contents[0] if tag.contents else None


def _is_checkbox(node: Any) -> bool:
    from bs4.element import Tag

    return isinstance(node, Tag) and node.name == "input" and (node.get("type") or "").lower() == "checkbox"


def _wrap_leaf(node: Node) -> Node:
    if is_text(node) or is_inline(node):
        return Element(children=[node])
    return node


class HtmlToTreeConverter(BaseParser):
    """Convert HTML to document tree nodes.

    Parameters
    ----------
    options : HtmlParserOptions or None, default = None
        Parsing options
    substitutions : UrlSubstitutions or None, default = None
        Registry that ``blob:`` image sources are added to, so they can be
        resolved to data URLs when the note is saved

    Examples
    --------
        >>> converter = HtmlToTreeConverter()
        >>> converter.convert_fragment("<p>Hello <b>world</b></p>")
        [Element(type='paragraph', children=[Text(text='Hello '), Text(text='world', bold=True)], ...)]

    """

    def __init__(
        self,
        options: HtmlParserOptions | None = None,
        substitutions: Optional["UrlSubstitutions"] = None,
    ):
        BaseParser._validate_options_type(options, HtmlParserOptions, "html")
        options = options or HtmlParserOptions()
        super().__init__(options)
        self.options: HtmlParserOptions = options
        self.substitutions = substitutions

    @requires_dependencies("html", DEPS_HTML)
    def convert_fragment(self, text: str) -> list[Node]:
        """Parse HTML into raw, un-normalized top-level nodes.

        Parameters
        ----------
        text : str
            HTML document or fragment

        Returns
        -------
        list of Node
            Parsed nodes

        Raises
        ------
        ValidationError
            If ``text`` is not a string
        DependencyError
            If the configured BeautifulSoup parser is not installed

        """
        html = self._validate_input(text)

        from bs4 import BeautifulSoup
        from bs4.exceptions import FeatureNotFound

        try:
            soup = BeautifulSoup(html, self.options.html_parser)
        except FeatureNotFound as e:
            raise DependencyError(
                converter_name="html",
                missing_packages=[(self.options.html_parser, "")],
                message=f"Selected HtmlParserOptions.html_parser not found: {e}.",
            ) from e

        state = _WalkState()
        nodes = self._walk(soup, state)

        if not state.has_h1 and self.options.title_as_heading:
            title = self._document_title(soup)
            if title:
                nodes.insert(0, Element("heading-one", [Text(title)]))
        return nodes

    @staticmethod
    def _document_title(soup: Any) -> str:
        for tag in soup.find_all("title"):
            if tag.find_parent("svg") is None:
                title = tag.get_text().strip()
                if title:
                    return title
        return ""

    def _walk(self, node: Any, state: _WalkState) -> list[Node]:
        """Convert one BeautifulSoup node, and its subtree, to tree nodes."""
        from bs4.element import CData, NavigableString, PreformattedString, Tag, TemplateString

        marks = state.marks[-1]

        if isinstance(node, NavigableString):
            # comments, doctypes and processing instructions
            if isinstance(node, (PreformattedString, TemplateString)) and not isinstance(node, CData):
                return []
            value = str(node)
            if self.options.collapse_whitespace and not state.code_blocks[-1]:
                value = _WHITESPACE_RE.sub(" ", value)
            return [Text(value, **marks)]

        if not isinstance(node, Tag):
            return []

        name = node.name
        if name == "br":
            return [Text("\n")]
        if name in SKIPPED_TAGS or name == "head":
            return []
        if name == "title" and node.find_parent("svg") is None:
            return []

        self._enter(node, name, state)
        try:
            return self._convert_tag(node, name, marks, state)
        except Exception as e:
            logger.warning("Failed to convert <%s>, keeping its text: %s", name, e)
            return [Text(node.get_text())]
        finally:
            self._leave(name, state)

    @staticmethod
    def _enter(node: Any, name: str, state: _WalkState) -> None:
        mark = TEXT_TAG_MARKS.get(name)
        if mark:
            state.marks.append({**state.marks[-1], mark: True})

        if name == "pre":
            state.code_blocks.append(True)
        elif name in ("ul", "ol"):
            state.checklists.append(False)
        elif name == "li":
            if state.checklists and _is_checkbox(_first_child(node)):
                state.checklists[-1] = True
        elif name == "table":
            state.captions.append(None)

    @staticmethod
    def _leave(name: str, state: _WalkState) -> None:
        if name == "table":
            state.captions.pop()
        elif name in ("ul", "ol"):
            state.checklists.pop()
        elif name == "pre":
            state.code_blocks.pop()

        if name in TEXT_TAG_MARKS:
            state.marks.pop()

    def _convert_tag(self, node: Any, name: str, marks: dict[str, bool], state: _WalkState) -> list[Node]:
        from bs4.element import Tag

        if name == "img" and not node.get("src"):
            return []
        if name == "h1" and node.get_text().strip():
            state.has_h1 = True

        first = _first_child(node)
        parent = node
        if name == "pre" and isinstance(first, Tag) and first.name == "code":
            parent = first

        children = [converted for child in parent.contents for converted in self._walk(child, state)]

        if any(is_element(child) and not is_inline(child) for child in children):
            children = [
                _wrap_leaf(child) for child in children if not (is_text(child) and not child.text.strip())
            ]

        if name in _ROOT_TAGS:
            return children

        if not children:
            children = [Text("", **marks)]

        if name == "caption":
            if state.captions:
                state.captions[-1] = children
            else:
                logger.warning("Dropping <caption> outside a table")
            return []

        type_ = ELEMENT_TAG_TYPES.get(name)
        if type_ is None:
            return children

        if name == "li" and ((state.checklists and state.checklists[-1]) or _is_checkbox(first)):
            return [Element(type_, children, checked=isinstance(first, Tag) and first.has_attr("checked"))]
        if name in ("ul", "ol") and state.checklists[-1]:
            type_ = "task-list" if name == "ul" else "sequence-list"
        elif name == "img":
            return [self._image_element(node, marks)]
        elif name == "a":
            return [self._link_element(node, children)]
        elif name == "table":
            caption = state.captions[-1]
            table = Element(type_, children)
            if caption:
                return [Element("paragraph", caption), table]
            return [table]

        return [Element(type_, children)]

    def _image_element(self, node: Any, marks: dict[str, bool]) -> Element:
        url = decode_uri(node.get("src") or "")
        if url.startswith(OBJECT_URL_SCHEME):
            if self.substitutions is not None:
                self.substitutions.add(url)
            else:
                logger.debug("No substitution registry for %s", url)
        return Element(
            "image",
            [Text(node.get("alt") or "", **marks)],
            url=url,
            title=node.get("title") or "",
        )

    @staticmethod
    def _link_element(node: Any, children: list[Node]) -> Element:
        title = node.get("title")
        return Element(
            "link",
            children,
            url=decode_uri(node.get("href") or ""),
            title=title if title and title != "undefined" else None,
        )


def deserialize_html(html: str, substitutions: Optional["UrlSubstitutions"] = None) -> list[Node]:
    """Parse HTML into raw document tree nodes with default options.

    Parameters
    ----------
    html : str
        HTML document or fragment
    substitutions : UrlSubstitutions, optional
        Registry for ``blob:`` image sources

    Returns
    -------
    list of Node
        Un-normalized top-level nodes

    """
    return HtmlToTreeConverter(substitutions=substitutions).convert_fragment(html)
