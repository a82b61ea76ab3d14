#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for note sanitization."""

from __future__ import annotations

from dataclasses import dataclass, field

from richnote.constants import TITLE_BUCKET_LIMIT, TITLE_MAX
from richnote.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class SanitizeOptions(CloneFrozenMixin):
    """Configuration options for the HTML sanitizer and title extraction.

    Parameters
    ----------
    title_max : int, default 400
        Maximum length of an extracted title
    bucket_limit : int, default 2
        Maximum number of texts kept per title bucket
    size_svg : bool, default True
        Adjust width, height and preserveAspectRatio of ``<svg>`` elements
    rename_tags : bool, default True
        Map h4-h6 to h3, i to em, b to strong, article and textarea to div

    """

    title_max: int = field(
        default=TITLE_MAX,
        metadata={"help": "Maximum length of an extracted title", "importance": "core"},
    )
    bucket_limit: int = field(
        default=TITLE_BUCKET_LIMIT,
        metadata={"help": "Texts kept per title bucket", "importance": "advanced"},
    )
    size_svg: bool = field(
        default=True,
        metadata={"help": "Make wide SVG images responsive", "importance": "advanced"},
    )
    rename_tags: bool = field(
        default=True,
        metadata={"help": "Rename legacy and out-of-vocabulary tags", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If any limit is not positive.

        """
        if self.title_max <= 0:
            raise ValueError(f"title_max must be positive, got {self.title_max}")
        if self.bucket_limit <= 0:
            raise ValueError(f"bucket_limit must be positive, got {self.bucket_limit}")
