"""
image-description - Image title and description for agent runtimes

Given a file path or URL, produces a short title and a detailed description
using one of five vision backends:
- Local: Florence-2 (in-process)
- Anthropic, OpenAI, Groq, Google Gemini (remote APIs)

Usage:
    from image_description import ImageDescriptionService

    service = ImageDescriptionService()
    result = await service.describe_image("https://example.com/cat.png")
    print(result.title, result.description)
"""

__version__ = "0.1.0"

# Configure logger on import (auto-configuration in utils.logger_config)
import image_description.utils.logger_config  # noqa: F401

from image_description.errors import (
    ImageDescriptionError,
    FetchError,
    EmptyDataError,
    ConversionError,
    ProviderInitError,
    ProviderCallError,
)
from image_description.config import DescriptionConfig, VisionProvider, load_config
from image_description.providers.vision import DescriptionResult, ImagePayload
from image_description.loader import ImageLoader
from image_description.service import ImageDescriptionService, ServiceType

__all__ = [
    # Version
    "__version__",
    # Errors
    "ImageDescriptionError",
    "FetchError",
    "EmptyDataError",
    "ConversionError",
    "ProviderInitError",
    "ProviderCallError",
    # Config
    "DescriptionConfig",
    "VisionProvider",
    "load_config",
    # Data
    "DescriptionResult",
    "ImagePayload",
    # Core classes
    "ImageLoader",
    "ImageDescriptionService",
    "ServiceType",
]
