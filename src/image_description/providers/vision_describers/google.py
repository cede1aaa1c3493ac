"""
Google Gemini vision describer

Image format: inline_data with base64 bytes
API format: /v1/models/{model}:generateContent, API key as query parameter
"""

from typing import Any, Dict

from image_description.providers.registry import register_provider
from image_description.providers.vision import ImagePayload
from image_description.providers.vision_describers.base import RemoteVisionDescriber, VisionRequest


@register_provider("google-vlm-remote")
class GoogleGeminiVLM(RemoteVisionDescriber):
    """Gemini vision describer using the generateContent endpoint."""

    PROVIDER_LABEL = "Google Gemini"
    API_KEY_SETTING = "GOOGLE_GENERATIVE_AI_API_KEY"
    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
    DEFAULT_MODEL = "gemini-1.5-pro"

    def build_request(self, payload: ImagePayload) -> VisionRequest:
        return VisionRequest(
            url=f"{self.base_url}/v1/models/{self.model}:generateContent",
            params={"key": self.api_key},
            json={
                "contents": [
                    {
                        "parts": [
                            {"text": self.base_prompt},
                            {
                                "inline_data": {
                                    "mime_type": payload.media_type,
                                    "data": payload.to_base64(),
                                }
                            },
                        ]
                    }
                ]
            },
        )

    def extract_text(self, data: Dict[str, Any]) -> str:
        return data["candidates"][0]["content"]["parts"][0]["text"]
