#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/utils/images.py
"""Conversion of image files to data URLs small enough to store in a note.

Large, oversized or hard-to-display images are downscaled to fit within
``max_image_dimension`` and re-encoded as low-quality JPEG with transparency
flattened onto white. Small SVG files are kept as vector data.
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from richnote.constants import DEPS_IMAGES, REENCODED_IMAGE_TYPES, SVG_PASSTHROUGH_FACTOR
from richnote.options.ingestion import IngestionOptions
from richnote.utils.decorators import requires_dependencies

if TYPE_CHECKING:
    from richnote.ingestion import SourceFile

logger = logging.getLogger(__name__)

# Formats without an alpha channel; everything else may be transparent.
_OPAQUE_TYPES = frozenset({"image/jpeg", "image/bmp"})


@dataclass(frozen=True)
class ImageDataUrl:
    """A ``data:`` URL and the alt text derived from the file name."""

    data_url: str
    alt: str


def alt_from_file_name(name: Optional[str]) -> str:
    """Return the file name without its last extension, e.g. ``"beach"`` for ``"beach.jpg"``."""
    if not name:
        return ""
    dot = name.rfind(".")
    if 0 < dot < len(name) - 1:
        return name[:dot]
    return name


def encode_data_url(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 ``data:`` URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def _fit_within(width: int, height: int, limit: int) -> tuple[int, int]:
    if width >= height:
        new_width = min(limit, width)
        return new_width, max(1, round(height / width * new_width))
    new_height = min(limit, height)
    return max(1, round(width / height * new_height)), new_height


@requires_dependencies("images", DEPS_IMAGES)
def convert_image_bytes(
    data: bytes,
    mime_type: str,
    name: Optional[str] = None,
    options: Optional[IngestionOptions] = None,
) -> ImageDataUrl:
    """Convert image bytes to a data URL, re-encoding when necessary.

    Parameters
    ----------
    data : bytes
        Encoded image
    mime_type : str
        Declared MIME type of the image
    name : str, optional
        File name, used for the alt text
    options : IngestionOptions, optional
        Size limits and JPEG quality

    Returns
    -------
    ImageDataUrl
        The data URL and alt text

    Raises
    ------
    PIL.UnidentifiedImageError
        If the bytes are not an image Pillow can decode

    """
    from PIL import Image

    options = options or IngestionOptions()
    alt = alt_from_file_name(name)
    size = len(data)

    if mime_type == "image/svg+xml" and size < options.max_image_bytes * SVG_PASSTHROUGH_FACTOR:
        return ImageDataUrl(encode_data_url(data, mime_type), alt)

    with Image.open(io.BytesIO(data)) as image:
        width, height = image.size
        limit = options.max_image_dimension
        needs_reencode = (
            width > limit
            or height > limit
            or size > options.max_image_bytes
            or mime_type in REENCODED_IMAGE_TYPES
        )
        if not needs_reencode:
            return ImageDataUrl(encode_data_url(data, mime_type or Image.MIME.get(image.format or "", "")), alt)

        new_size = _fit_within(width, height, limit)
        logger.info("Resizing %s from %dx%d to %dx%d", name or "image", width, height, *new_size)
        resized = image.convert("RGBA").resize(new_size, Image.Resampling.LANCZOS)
        canvas = Image.new("RGB", new_size, "white")
        if mime_type in _OPAQUE_TYPES:
            canvas.paste(resized.convert("RGB"))
        else:
            canvas.paste(resized, mask=resized.getchannel("A"))
        buffer = io.BytesIO()
        canvas.save(buffer, format="JPEG", quality=options.jpeg_quality)
    return ImageDataUrl(encode_data_url(buffer.getvalue(), "image/jpeg"), alt)


async def image_file_to_data_url(file: "SourceFile", options: Optional[IngestionOptions] = None) -> ImageDataUrl:
    """Read an image file and convert it to a data URL.

    Decoding and re-encoding run in a worker thread.

    Parameters
    ----------
    file : SourceFile
        Image file to convert
    options : IngestionOptions, optional
        Size limits and JPEG quality

    Returns
    -------
    ImageDataUrl
        The data URL and the alt text derived from the file name

    """
    data = await file.read_bytes()
    return await asyncio.to_thread(convert_image_bytes, data, file.type, file.name, options)
