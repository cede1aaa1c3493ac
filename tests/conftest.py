"""
Pytest fixtures for testing
"""

import io
import json
from typing import Callable, Dict, List

import httpx
import pytest
from PIL import Image

from image_description.config import DescriptionConfig


def make_image_bytes(fmt: str, size=(8, 6), color=(200, 30, 30)) -> bytes:
    """Encode a small solid-colour image in the given Pillow format"""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes("JPEG")


@pytest.fixture
def gif_bytes():
    return make_image_bytes("GIF")


@pytest.fixture
def bmp_bytes():
    return make_image_bytes("BMP")


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served"""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def last_json(self) -> Dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def json_transport():
    """Factory: transport answering every request with a JSON body"""
    def factory(body: Dict, status_code: int = 200) -> RecordingTransport:
        return RecordingTransport(lambda request: httpx.Response(status_code, json=body))
    return factory


@pytest.fixture
def sample_config():
    """Configuration with every credential set"""
    return DescriptionConfig(
        credentials={
            "anthropic_api_key": "test-anthropic-key",
            "openai_api_key": "test-openai-key",
            "groq_api_key": "test-groq-key",
            "google_api_key": "test-google-key",
        }
    )
