#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/parsers/base.py
"""Base classes for markup parsers.

A parser turns a markup string into document tree nodes. ``convert_fragment``
returns the raw nodes exactly as the markup describes them;
``convert_to_tree`` wraps them in a Document and, unless disabled in the
options, normalizes the result.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from richnote.ast import Document, Node
from richnote.exceptions import InvalidOptionsError, ValidationError
from richnote.options.base import BaseParserOptions
from richnote.transforms.normalization import NormalizationEngine

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """Abstract base class for all markup parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Format-specific parsing options

    Examples
    --------
    Creating a custom parser:

        >>> class ShoutParser(BaseParser):
        ...     def convert_fragment(self, text):
        ...         return [paragraph(text.upper())]

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options: BaseParserOptions = options or BaseParserOptions()

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Parameters
        ----------
        options : BaseParserOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def _validate_input(text: Any) -> str:
        if not isinstance(text, str):
            raise ValidationError(
                f"Markup must be a string, got {type(text).__name__}",
                parameter_name="text",
                parameter_value=type(text).__name__,
            )
        return text

    @abstractmethod
    def convert_fragment(self, text: str) -> list[Node]:
        """Parse markup into raw, un-normalized top-level nodes.

        Parameters
        ----------
        text : str
            Markup to parse

        Returns
        -------
        list of Node
            Parsed nodes

        Raises
        ------
        ValidationError
            If ``text`` is not a string

        """
        pass

    def convert_to_tree(self, text: str) -> Document:
        """Parse markup into a Document, normalized unless disabled in the options."""
        document = Document(children=self.convert_fragment(text))
        if self.options.normalize:
            NormalizationEngine().normalize(document)
        return document
