"""
Anthropic vision describer

Image format: base64 source block with media_type
API format: /messages with text + image content array
"""

from typing import Any, Dict

from image_description.providers.registry import register_provider
from image_description.providers.vision import ImagePayload
from image_description.providers.vision_describers.base import RemoteVisionDescriber, VisionRequest


ANTHROPIC_VERSION = "2023-06-01"


@register_provider("anthropic-vlm-remote")
class AnthropicVLM(RemoteVisionDescriber):
    """Claude vision describer using the Anthropic messages API."""

    PROVIDER_LABEL = "Anthropic"
    API_KEY_SETTING = "ANTHROPIC_API_KEY"
    DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
    DEFAULT_MODEL = "claude-3-haiku-20240307"
    DEFAULT_MAX_TOKENS = 1024

    def build_request(self, payload: ImagePayload) -> VisionRequest:
        content = [
            {"type": "text", "text": self.base_prompt},
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": payload.media_type,
                    "data": payload.to_base64(),
                },
            },
        ]
        return VisionRequest(
            url=f"{self.base_url}/messages",
            headers={
                "x-api-key": self.api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            json={
                "model": self.model,
                "max_tokens": self.max_tokens,
                "messages": [{"role": "user", "content": content}],
            },
        )

    def extract_text(self, data: Dict[str, Any]) -> str:
        # First text block; tool_use or thinking blocks may precede it
        for block in data["content"]:
            if block.get("type", "text") == "text":
                return block["text"]
        raise KeyError("no text block in content")
