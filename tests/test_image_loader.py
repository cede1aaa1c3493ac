"""
Unit tests for ImageLoader
"""

import httpx
import pytest

from image_description.errors import ConversionError, EmptyDataError, FetchError
from image_description.loader import ImageLoader, mime_type_from_header, mime_type_from_path
from tests.conftest import RecordingTransport, make_image_bytes


def test_mime_type_from_path():
    assert mime_type_from_path("/tmp/photo.PNG") == "image/png"
    assert mime_type_from_path("/tmp/photo.jpg") == "image/jpg"
    assert mime_type_from_path("/tmp/photo") == "image/jpeg"


def test_mime_type_from_header():
    assert mime_type_from_header("image/webp") == "image/webp"
    assert mime_type_from_header("image/png; charset=binary") == "image/png"
    assert mime_type_from_header(None) == "image/jpeg"
    assert mime_type_from_header("") == "image/jpeg"


@pytest.mark.asyncio
@pytest.mark.parametrize("filename, fixture_name, mime_type", [
    ("photo.jpeg", "jpeg_bytes", "image/jpeg"),
    ("photo.jpg", "jpeg_bytes", "image/jpg"),
    ("photo.png", "png_bytes", "image/png"),
])
async def test_supported_files_pass_through(tmp_path, request, filename, fixture_name, mime_type):
    """JPEG/PNG files are returned unmodified with their MIME type"""
    data = request.getfixturevalue(fixture_name)
    path = tmp_path / filename
    path.write_bytes(data)

    payload = await ImageLoader().load(str(path))

    assert payload.data == data
    assert payload.mime_type == mime_type


@pytest.mark.asyncio
@pytest.mark.parametrize("filename, fixture_name", [
    ("anim.gif", "gif_bytes"),
    ("scan.bmp", "bmp_bytes"),
])
async def test_other_formats_converted_to_png(tmp_path, request, filename, fixture_name):
    """Non JPEG/PNG files are converted and the scratch file removed"""
    source = tmp_path / filename
    source.write_bytes(request.getfixturevalue(fixture_name))
    scratch = tmp_path / "scratch"
    scratch.mkdir()

    payload = await ImageLoader(temp_dir=str(scratch)).load(str(source))

    assert payload.mime_type == "image/png"
    assert payload.data.startswith(b"\x89PNG\r\n\x1a\n")
    assert list(scratch.iterdir()) == []


@pytest.mark.asyncio
async def test_failed_conversion_removes_temp_file(tmp_path):
    """Conversion errors propagate and leave no scratch file behind"""
    source = tmp_path / "broken.gif"
    source.write_bytes(b"definitely not an image")
    scratch = tmp_path / "scratch"
    scratch.mkdir()

    with pytest.raises(ConversionError):
        await ImageLoader(temp_dir=str(scratch)).load(str(source))

    assert list(scratch.iterdir()) == []


@pytest.mark.asyncio
async def test_url_uses_content_type(png_bytes):
    transport = RecordingTransport(
        lambda request: httpx.Response(200, content=png_bytes, headers={"content-type": "image/png"})
    )

    payload = await ImageLoader(transport=transport).load("https://example.com/image")

    assert payload.data == png_bytes
    assert payload.mime_type == "image/png"
    assert str(transport.requests[0].url) == "https://example.com/image"


@pytest.mark.asyncio
async def test_url_without_content_type_defaults_to_jpeg(jpeg_bytes):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=jpeg_bytes))

    payload = await ImageLoader(transport=transport).load("https://example.com/image")

    assert payload.mime_type == "image/jpeg"


@pytest.mark.asyncio
async def test_url_webp_is_converted(tmp_path):
    webp = make_image_bytes("WEBP")
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, content=webp, headers={"content-type": "image/webp"})
    )

    payload = await ImageLoader(transport=transport, temp_dir=str(tmp_path)).load("https://example.com/a.webp")

    assert payload.mime_type == "image/png"
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_url_error_status_raises_fetch_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(404))

    with pytest.raises(FetchError) as exc_info:
        await ImageLoader(transport=transport).load("https://example.com/missing.png")

    assert exc_info.value.status_code == 404
    assert "Not Found" in str(exc_info.value)


@pytest.mark.asyncio
async def test_unreachable_url_raises_fetch_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError):
        await ImageLoader(transport=httpx.MockTransport(refuse)).load("https://unreachable.invalid/a.png")


@pytest.mark.asyncio
async def test_nonexistent_path_raises_fetch_error(tmp_path):
    with pytest.raises(FetchError):
        await ImageLoader().load(str(tmp_path / "does-not-exist.png"))


@pytest.mark.asyncio
async def test_empty_file_raises_empty_data_error(tmp_path):
    """Empty JPEG skips conversion but fails the length check"""
    path = tmp_path / "empty.jpg"
    path.write_bytes(b"")

    with pytest.raises(EmptyDataError):
        await ImageLoader().load(str(path))


@pytest.mark.asyncio
async def test_empty_response_raises_empty_data_error():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, content=b"", headers={"content-type": "image/png"})
    )

    with pytest.raises(EmptyDataError):
        await ImageLoader(transport=transport).load("https://example.com/empty.png")
