"""
OpenAI-compatible VLM vision describers

Uses the OpenAI chat/completions API format for vision language models:
- OpenAI GPT-4o, GPT-4o-mini
- Groq (OpenAI-compatible endpoint, Llama vision models)

Image format: base64 data URL (data:image/jpeg;base64,...)
API format: /chat/completions with image_url content type
"""

from typing import Any, Dict

from image_description.providers.registry import register_provider
from image_description.providers.vision import ImagePayload
from image_description.providers.vision_describers.base import RemoteVisionDescriber, VisionRequest


@register_provider("openai-vlm-remote")
class OpenAICompatibleVLM(RemoteVisionDescriber):
    """
    OpenAI-compatible VLM vision describer.

    Uses OpenAI chat/completions API format with image_url content type.
    Image is converted to base64 data URL format.
    """

    PROVIDER_LABEL = "OpenAI"
    API_KEY_SETTING = "OPENAI_API_KEY"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_MAX_TOKENS = 500

    def build_request(self, payload: ImagePayload) -> VisionRequest:
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": self.base_prompt},
                    {
                        "type": "image_url",
                        "image_url": {"url": payload.to_data_url()}
                    }
                ]
            }
        ]
        return VisionRequest(
            url=f"{self.base_url}/chat/completions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "model": self.model,
                "messages": messages,
                "max_tokens": self.max_tokens,
            },
        )

    def extract_text(self, data: Dict[str, Any]) -> str:
        return data["choices"][0]["message"]["content"]


@register_provider("groq-vlm-remote")
class GroqVLM(OpenAICompatibleVLM):
    """
    Groq vision describer.

    Same request shape as OpenAI, served from Groq's OpenAI-compatible endpoint.
    """

    PROVIDER_LABEL = "Groq"
    API_KEY_SETTING = "GROQ_API_KEY"
    DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
    DEFAULT_MODEL = "llama-3.2-90b-vision-preview"
    DEFAULT_MAX_TOKENS = 1024
