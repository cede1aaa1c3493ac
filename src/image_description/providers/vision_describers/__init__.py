"""
Vision describers - implementations for image description

Available describers:
- LocalFlorenceVLM: Florence-2 in-process inference (florence2-vlm-local)
- AnthropicVLM: Claude messages API (anthropic-vlm-remote)
- OpenAICompatibleVLM: OpenAI chat/completions (openai-vlm-remote)
- GroqVLM: Groq OpenAI-compatible endpoint (groq-vlm-remote)
- GoogleGeminiVLM: Gemini generateContent (google-vlm-remote)

Importing this package registers every describer with ProviderRegistry.
The local describer imports torch/transformers only when initialized.
"""

from image_description.providers.vision import VisionDescriber
from image_description.providers.vision_describers.base import RemoteVisionDescriber, VisionRequest
from image_description.providers.vision_describers.local_florence import LocalFlorenceVLM
from image_description.providers.vision_describers.anthropic import AnthropicVLM
from image_description.providers.vision_describers.openai_compatible import OpenAICompatibleVLM, GroqVLM
from image_description.providers.vision_describers.google import GoogleGeminiVLM

__all__ = [
    "VisionDescriber",
    "RemoteVisionDescriber",
    "VisionRequest",
    "LocalFlorenceVLM",
    "AnthropicVLM",
    "OpenAICompatibleVLM",
    "GroqVLM",
    "GoogleGeminiVLM",
]
