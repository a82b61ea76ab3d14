#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for paste and drop ingestion and image conversion."""

from __future__ import annotations

from dataclasses import dataclass, field

from richnote.constants import DEFAULT_JPEG_QUALITY, MAX_IMAGE_BYTES, MAX_IMAGE_DIMENSION
from richnote.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class IngestionOptions(CloneFrozenMixin):
    """Configuration options for the ingestion dispatcher.

    Parameters
    ----------
    max_image_bytes : int, default 200000
        Images larger than this are downscaled and re-encoded as JPEG
    max_image_dimension : int, default 1280
        Images wider or taller than this are downscaled
    jpeg_quality : int, default 40
        JPEG quality used when re-encoding

    """

    max_image_bytes: int = field(
        default=MAX_IMAGE_BYTES,
        metadata={"help": "Re-encode images larger than this many bytes", "importance": "core"},
    )
    max_image_dimension: int = field(
        default=MAX_IMAGE_DIMENSION,
        metadata={"help": "Downscale images wider or taller than this", "importance": "core"},
    )
    jpeg_quality: int = field(
        default=DEFAULT_JPEG_QUALITY,
        metadata={"help": "JPEG quality for re-encoded images (1-95)", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.max_image_bytes <= 0:
            raise ValueError(f"max_image_bytes must be positive, got {self.max_image_bytes}")
        if self.max_image_dimension <= 0:
            raise ValueError(f"max_image_dimension must be positive, got {self.max_image_dimension}")
        if not 1 <= self.jpeg_quality <= 95:
            raise ValueError(f"jpeg_quality must be between 1 and 95, got {self.jpeg_quality}")
