"""
Vision module - data structures and the describer interface

This module provides:
- ImagePayload: Image bytes plus MIME type, ready for a provider
- DescriptionResult: Title and description produced by a provider
- parse_image_response: Split a "title\\ndescription" text blob
- VisionDescriber: Base class for vision describers (inherits BaseProvider)
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, Dict
import base64

from image_description.providers.base import BaseProvider


IMAGE_DESCRIPTION_PROMPT = (
    "Describe this image and give it a title. The first line should be the title, "
    "and then a line break, then a detailed description of the image. "
    "Respond with the format 'title\\ndescription'"
)

DEFAULT_MIME_TYPE = "image/jpeg"

# Non-IANA spellings produced by extension-based MIME guessing
_MIME_ALIASES = {
    "image/jpg": "image/jpeg",
}


@dataclass
class ImagePayload:
    """
    Image bytes resolved from an image reference.

    Attributes:
        data: Raw image bytes
        mime_type: MIME type of the image (image/*)
    """
    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE

    @property
    def media_type(self) -> str:
        """MIME type in the canonical form remote APIs accept"""
        return _MIME_ALIASES.get(self.mime_type, self.mime_type)

    def to_base64(self) -> str:
        """
        Convert image to base64 string.

        Returns:
            Base64 encoded image string
        """
        return base64.b64encode(self.data).decode("utf-8")

    def to_data_url(self) -> str:
        """
        Convert image to data URL format.

        Returns:
            Data URL string (data:image/jpeg;base64,...)
        """
        return f"data:{self.mime_type};base64,{self.to_base64()}"

    def __str__(self) -> str:
        return f"ImagePayload({self.mime_type}, {len(self.data)} bytes)"


@dataclass
class DescriptionResult:
    """Short title and detailed description of an image"""
    title: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "description": self.description}


def parse_image_response(text: str) -> DescriptionResult:
    """
    Split a provider's text answer into title and description.

    The first line is the title, everything after the first newline is the
    description.

    Example:
        >>> parse_image_response("Title\\nLine1\\nLine2")
        DescriptionResult(title='Title', description='Line1\\nLine2')
    """
    title, *description_parts = text.split("\n")
    return DescriptionResult(title=title, description="\n".join(description_parts))


class VisionDescriber(BaseProvider):
    """
    Vision describer base class.

    Inherits from BaseProvider to integrate with ProviderFactory.
    Converts image bytes to a title and description.

    Default BaseProvider properties:
    - is_local: False (typically cloud API)
    - is_stateful: False (stateless)
    - category: "vlm"
    """

    # ============ BaseProvider implementations ============

    @property
    def is_local(self) -> bool:
        """VLM providers are typically remote (cloud API)."""
        return False

    @property
    def is_stateful(self) -> bool:
        """VLM providers are stateless."""
        return False

    @property
    def category(self) -> str:
        """Provider category."""
        return "vlm"

    @classmethod
    def get_config_schema(cls) -> Dict[str, Any]:
        """
        Return configuration schema.

        Subclasses should override this to provide their specific schema.
        """
        return {}

    async def initialize(self) -> None:
        """
        Initialize the provider.

        Default implementation does nothing; remote APIs need no setup.
        """
        pass

    async def cleanup(self) -> None:
        """
        Cleanup provider resources.

        Default implementation does nothing.
        """
        pass

    # ============ VisionDescriber specific ============

    @abstractmethod
    async def describe_image(self, payload: ImagePayload) -> DescriptionResult:
        """
        Describe an image.

        Args:
            payload: Image bytes and MIME type

        Returns:
            Title and detailed description

        Raises:
            ProviderCallError: Network failure, non-success status or
                malformed response
        """
        pass
