#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Base classes for parser and renderer options.

This module defines the foundation classes for all options used throughout
the richnote codecs, the normalization engine and the ingestion dispatcher.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from richnote.constants import DEFAULT_NORMALIZE_ON_PARSE


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for all renderer options.

    Renderers convert document trees into output strings (HTML, Markdown,
    plain text).

    Parameters
    ----------
    fail_on_resource_errors : bool, default=False
        Whether to raise RenderingError when a node cannot be rendered.
        If False (default), a warning is logged and the node's plain text is
        emitted instead.

    """

    fail_on_resource_errors: bool = field(
        default=False,
        metadata={
            "help": "Raise RenderingError when a node fails to render instead of degrading to its text",
            "importance": "advanced",
        },
    )


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for all parser options.

    Parsers convert markup into document trees.

    Parameters
    ----------
    normalize : bool, default=True
        Whether ``convert_to_tree`` runs the normalization engine on its result

    """

    normalize: bool = field(
        default=DEFAULT_NORMALIZE_ON_PARSE,
        metadata={"help": "Normalize the parsed tree before returning it", "importance": "core"},
    )
