"""Image format helpers"""

from image_description.utils.image.convert import (
    PASSTHROUGH_MIME_TYPES,
    convert_image_file,
    needs_conversion,
)

__all__ = [
    "PASSTHROUGH_MIME_TYPES",
    "convert_image_file",
    "needs_conversion",
]
