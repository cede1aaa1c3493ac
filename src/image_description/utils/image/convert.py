"""
Image format conversion utilities

Normalizes formats that vision APIs reject (GIF, WebP, BMP, TIFF, ...) into
PNG using Pillow.
"""

from __future__ import annotations

import io
from typing import Union
from pathlib import Path

from loguru import logger
from PIL import Image, UnidentifiedImageError

from image_description.errors import ConversionError


# MIME types every provider accepts as-is
PASSTHROUGH_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png"})

# Pillow save modes per target format
_SAVE_MODES = {
    "PNG": ("1", "L", "LA", "I", "P", "RGB", "RGBA"),
    "JPEG": ("L", "RGB", "CMYK"),
}


def needs_conversion(mime_type: str) -> bool:
    """Check whether an image must be converted before it is sent to a provider"""
    return mime_type.lower() not in PASSTHROUGH_MIME_TYPES


def convert_image_file(data: bytes, output_path: Union[str, Path], fmt: str = "png") -> None:
    """
    Convert image bytes to another format and write them to a file.

    Only the first frame of animated images is kept.

    Args:
        data: Source image bytes (any format Pillow can read)
        output_path: Destination file path
        fmt: Target format name (png, jpeg, ...)

    Raises:
        ConversionError: Source is not a readable image or cannot be written
    """
    target = fmt.upper()
    if target == "JPG":
        target = "JPEG"

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.seek(0)
            allowed_modes = _SAVE_MODES.get(target)
            if allowed_modes and img.mode not in allowed_modes:
                converted = img.convert("RGBA" if target == "PNG" else "RGB")
            else:
                converted = img.copy()
        converted.save(output_path, format=target)
    except (UnidentifiedImageError, OSError, ValueError, EOFError) as e:
        logger.error(f"Image conversion to {target} failed: {e}")
        raise ConversionError(f"Failed to convert image to {fmt}: {e}") from e

    logger.debug(f"Converted image to {target}: {output_path}")
