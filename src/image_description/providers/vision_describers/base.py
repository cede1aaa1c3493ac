"""
Remote vision describer base class

Shared request/response handling for HTTP vision APIs. Subclasses only
describe the request shape and where the answer text lives in the response.
"""

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from image_description.errors import ProviderCallError
from image_description.providers.vision import (
    IMAGE_DESCRIPTION_PROMPT,
    DescriptionResult,
    ImagePayload,
    VisionDescriber,
    parse_image_response,
)


@dataclass
class VisionRequest:
    """HTTP request for a single image description call"""
    url: str
    json: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Dict[str, str]] = None


def handle_api_error(response: httpx.Response, provider: str, name: Optional[str] = None):
    """
    Log a failed API response body and raise ProviderCallError.

    Args:
        response: Non-success HTTP response
        provider: Human-readable provider label for the log line
        name: Registered provider name carried on the error
    """
    logger.bind(component=name or provider).error(
        f"{provider} API error: {response.status_code} - {response.text}"
    )
    raise ProviderCallError(
        f"HTTP error! status: {response.status_code}",
        provider=name or provider,
        status_code=response.status_code,
    )


class RemoteVisionDescriber(VisionDescriber):
    """
    Base class for describers backed by a remote HTTP API.

    Subclasses set the class defaults and implement build_request() and
    extract_text(). One POST per call, no retries.
    """

    PROVIDER_LABEL = "Remote"
    API_KEY_SETTING = ""
    DEFAULT_BASE_URL = ""
    DEFAULT_MODEL = ""
    DEFAULT_MAX_TOKENS = 1024

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        base_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        name: Optional[str] = None,
    ):
        """
        Initialize remote describer.

        Args:
            api_key: API key, read when a request is made
            model: Model identifier (default: provider-specific)
            base_url: API base URL (default: provider-specific)
            base_prompt: Prompt sent with the image
            max_tokens: Maximum tokens for response
            timeout: Request timeout in seconds
            transport: Custom httpx transport (proxies, tests)
            name: Provider name for logging
        """
        super().__init__(name=name)
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.base_prompt = base_prompt or IMAGE_DESCRIPTION_PROMPT
        self.max_tokens = max_tokens or self.DEFAULT_MAX_TOKENS
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def get_config_schema(cls) -> Dict[str, Any]:
        """Return configuration schema for this provider."""
        return {
            "api_key": {
                "type": "string",
                "required": False,
                "description": f"API key ({cls.API_KEY_SETTING})"
            },
            "model": {
                "type": "string",
                "required": False,
                "default": cls.DEFAULT_MODEL,
                "description": "Model name"
            },
            "base_url": {
                "type": "string",
                "required": False,
                "default": cls.DEFAULT_BASE_URL,
                "description": "API base URL"
            },
            "base_prompt": {
                "type": "string",
                "required": False,
                "description": "Custom prompt for image description"
            },
            "max_tokens": {
                "type": "int",
                "required": False,
                "default": cls.DEFAULT_MAX_TOKENS,
                "description": "Maximum tokens for response"
            },
            "timeout": {
                "type": "float",
                "required": False,
                "default": 30.0,
                "description": "Request timeout in seconds"
            },
        }

    @abstractmethod
    def build_request(self, payload: ImagePayload) -> VisionRequest:
        """Build the provider-specific request for an image"""
        pass

    @abstractmethod
    def extract_text(self, data: Dict[str, Any]) -> str:
        """Pull the answer text out of a decoded response body"""
        pass

    async def describe_image(self, payload: ImagePayload) -> DescriptionResult:
        """
        Describe image through the remote API.

        Args:
            payload: Image bytes and MIME type

        Returns:
            Title (first line of the answer) and description (the rest)
        """
        if not self.api_key:
            self.logger.error(f"{self.API_KEY_SETTING} is not set")
            raise ProviderCallError(f"{self.API_KEY_SETTING} is not set", provider=self.name)

        request = self.build_request(payload)
        data = await self._post_json(request)

        try:
            text = self.extract_text(data)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            self.logger.error(f"Unexpected {self.PROVIDER_LABEL} response shape: {e!r}")
            raise ProviderCallError(
                f"Malformed {self.PROVIDER_LABEL} response", provider=self.name
            ) from e

        if not isinstance(text, str):
            raise ProviderCallError(
                f"Malformed {self.PROVIDER_LABEL} response: answer is not text",
                provider=self.name,
            )

        self.logger.debug(f"VLM response: {text[:100]}...")
        return parse_image_response(text)

    async def _post_json(self, request: VisionRequest) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    request.url,
                    headers={"Content-Type": "application/json", **request.headers},
                    params=request.params,
                    json=request.json,
                )
        except httpx.HTTPError as e:
            self.logger.error(f"{self.PROVIDER_LABEL} request failed: {e}")
            raise ProviderCallError(
                f"{self.PROVIDER_LABEL} request failed: {e}", provider=self.name
            ) from e

        if not response.is_success:
            handle_api_error(response, self.PROVIDER_LABEL, self.name)

        try:
            return response.json()
        except ValueError as e:
            self.logger.error(f"{self.PROVIDER_LABEL} returned invalid JSON: {e}")
            raise ProviderCallError(
                f"Malformed {self.PROVIDER_LABEL} response", provider=self.name
            ) from e
