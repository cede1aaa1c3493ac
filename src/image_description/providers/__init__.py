"""
Provider interfaces and implementations

This package contains:
1. The vision describer interface and data types (base.py, vision.py)
2. Describer implementations (vision_describers/)
3. Provider registry, factory and backend selection

Usage:
    from image_description.providers import create_vision_describer

    describer = create_vision_describer(config)
    await describer.initialize()
    result = await describer.describe_image(payload)
"""

from image_description.providers.base import BaseProvider
from image_description.providers.vision import (
    IMAGE_DESCRIPTION_PROMPT,
    DescriptionResult,
    ImagePayload,
    VisionDescriber,
    parse_image_response,
)
from image_description.providers.registry import ProviderRegistry, register_provider
from image_description.providers.factory import ProviderFactory
from image_description.providers.vision_describers import (
    RemoteVisionDescriber,
    LocalFlorenceVLM,
    AnthropicVLM,
    OpenAICompatibleVLM,
    GroqVLM,
    GoogleGeminiVLM,
)
from image_description.providers.selector import (
    REGISTERED_NAMES,
    create_vision_describer,
    select_vision_provider,
)

__all__ = [
    # Interfaces
    "BaseProvider",
    "VisionDescriber",
    "RemoteVisionDescriber",
    "ImagePayload",
    "DescriptionResult",
    "parse_image_response",
    "IMAGE_DESCRIPTION_PROMPT",
    # Registry and Factory
    "ProviderRegistry",
    "register_provider",
    "ProviderFactory",
    # Describers
    "LocalFlorenceVLM",
    "AnthropicVLM",
    "OpenAICompatibleVLM",
    "GroqVLM",
    "GoogleGeminiVLM",
    # Selection
    "REGISTERED_NAMES",
    "create_vision_describer",
    "select_vision_provider",
]
