"""Tests for remote image downloads (pixelroom/utils/http.py)."""

import httpx
import pytest

from pixelroom.errors import ImageFetchError
from pixelroom.utils.http import (
    download_images_lenient,
    extension_for_content_type,
    fetch_image,
)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.parametrize(
    "content_type, extension",
    [
        ("image/png", "png"),
        ("image/webp", "webp"),
        ("image/jpeg", "jpg"),
        ("image/gif", "jpg"),
        ("image/png; charset=binary", "png"),
    ],
)
def test_extension_for_content_type(content_type, extension):
    assert extension_for_content_type(content_type) == extension


class TestFetchImage:
    @pytest.mark.asyncio
    async def test_success_keeps_bytes_and_type(self):
        async with _client(
            lambda r: httpx.Response(200, content=b"\x89PNG", headers={"content-type": "image/png"})
        ) as client:
            image = await fetch_image(client, "https://cdn.example.com/a.png")
        assert image.data == b"\x89PNG"
        assert image.content_type == "image/png"
        assert image.extension == "png"

    @pytest.mark.asyncio
    async def test_missing_content_type_defaults_to_jpeg(self):
        async with _client(lambda r: httpx.Response(200, content=b"raw")) as client:
            image = await fetch_image(client, "https://cdn.example.com/a")
        assert image.content_type == "image/jpeg"
        assert image.extension == "jpg"

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        async with _client(lambda r: httpx.Response(404)) as client:
            with pytest.raises(ImageFetchError) as exc_info:
                await fetch_image(client, "https://cdn.example.com/gone.png")
        assert exc_info.value.status_code == 404
        assert "HTTP 404" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_generic_content_type_accepted_as_jpeg(self):
        async with _client(
            lambda r: httpx.Response(200, content=b"raw", headers={"content-type": "application/octet-stream"})
        ) as client:
            image = await fetch_image(client, "https://bucket.example.com/photo")
        assert image.data == b"raw"
        assert image.content_type == "image/jpeg"
        assert image.as_upload("ref-0") == ("ref-0.jpg", b"raw", "image/jpeg")

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        async with _client(handler) as client:
            with pytest.raises(ImageFetchError, match="Timeout"):
                await fetch_image(client, "https://cdn.example.com/slow.png")

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(ImageFetchError, match="Network error"):
                await fetch_image(client, "https://cdn.example.com/down.png")


@pytest.mark.asyncio
async def test_lenient_download_skips_failures():
    def handler(request):
        if request.url.path == "/bad.png":
            return httpx.Response(500)
        return httpx.Response(200, content=request.url.path.encode(), headers={"content-type": "image/png"})

    urls = ["https://cdn.example.com/one.png", "https://cdn.example.com/bad.png", "https://cdn.example.com/two.png"]
    async with _client(handler) as client:
        images = await download_images_lenient(urls, client=client)
    assert [img.data for img in images] == [b"/one.png", b"/two.png"]


@pytest.mark.asyncio
async def test_lenient_download_empty():
    assert await download_images_lenient([]) == []
