"""
Image loader

Resolves an image reference (filesystem path or URL) to bytes plus a MIME
type, converting formats providers do not accept into PNG.
"""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Optional

import httpx
from loguru import logger

from image_description.errors import EmptyDataError, FetchError
from image_description.providers.vision import DEFAULT_MIME_TYPE, ImagePayload
from image_description.utils.image.convert import convert_image_file, needs_conversion


def mime_type_from_path(path: str) -> str:
    """Guess an image MIME type from a file extension (image/<ext>)"""
    ext = Path(path).suffix[1:].lower()
    return f"image/{ext}" if ext else DEFAULT_MIME_TYPE


def mime_type_from_header(content_type: Optional[str]) -> str:
    """Extract the MIME type from a content-type header, dropping parameters"""
    if not content_type:
        return DEFAULT_MIME_TYPE
    mime_type = content_type.split(";", 1)[0].strip().lower()
    return mime_type or DEFAULT_MIME_TYPE


class ImageLoader:
    """
    Loads images from disk or over HTTP.

    Each load is independent; the only resource held is a temporary file
    during format conversion, which is always removed.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        temp_dir: Optional[str] = None,
    ):
        """
        Initialize image loader.

        Args:
            timeout: HTTP timeout in seconds for URL references
            transport: Custom httpx transport (proxies, tests)
            temp_dir: Directory for conversion scratch files (default: system temp)
        """
        self.timeout = timeout
        self.transport = transport
        self.temp_dir = temp_dir
        self.logger = logger.bind(component="ImageLoader")

    async def load(self, ref: str) -> ImagePayload:
        """
        Load an image and normalize its format.

        Args:
            ref: Existing file path or URL

        Returns:
            Non-empty payload in JPEG or PNG format

        Raises:
            FetchError: Path does not exist and the URL cannot be fetched
            ConversionError: Format conversion failed
            EmptyDataError: Image resolved to zero bytes
        """
        payload = await self.fetch(ref)

        if needs_conversion(payload.mime_type):
            self.logger.debug(f"Converting {payload.mime_type} image to png")
            payload = await self.convert(payload.data, "png")

        if not payload.data:
            self.logger.error(f"Image is empty: {ref}")
            raise EmptyDataError("Failed to fetch image data")

        return payload

    async def fetch(self, ref: str) -> ImagePayload:
        """
        Read image bytes without any conversion.

        Args:
            ref: Existing file path or URL

        Returns:
            Payload with MIME type from the extension or content-type header
        """
        if os.path.isfile(ref):
            data = await asyncio.to_thread(Path(ref).read_bytes)
            return ImagePayload(data=data, mime_type=mime_type_from_path(ref))

        return await self._fetch_url(ref)

    async def _fetch_url(self, url: str) -> ImagePayload:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.error(f"Failed to fetch image {url}: {e}")
            raise FetchError(f"Failed to fetch image: {e}") from e

        if not response.is_success:
            self.logger.error(f"Failed to fetch image {url}: {response.status_code} {response.reason_phrase}")
            raise FetchError(
                f"Failed to fetch image: {response.reason_phrase}",
                status_code=response.status_code,
            )

        return ImagePayload(
            data=response.content,
            mime_type=mime_type_from_header(response.headers.get("content-type")),
        )

    async def convert(self, data: bytes, fmt: str = "png") -> ImagePayload:
        """
        Convert image bytes through a temporary file.

        The temporary file is deleted on every exit path.

        Args:
            data: Source image bytes
            fmt: Target format

        Returns:
            Payload read back from the converted file
        """
        fd, temp_path = tempfile.mkstemp(prefix="tmp_img_", suffix=f".{fmt}", dir=self.temp_dir)
        os.close(fd)
        try:
            await asyncio.to_thread(convert_image_file, data, temp_path, fmt)
            return await self.fetch(temp_path)
        finally:
            try:
                os.unlink(temp_path)
            except FileNotFoundError:
                pass
