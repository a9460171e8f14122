"""Remote image downloads for reference photos and product shots.

Returns raw bytes plus an image content type: the reported one, or JPEG when
the server only sends a generic type. Nothing is re-encoded here; the content
type only decides the mime and filename extension used when the bytes are
uploaded to the image-edit API. Any non-error response is kept.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog

from pixelroom.config import settings
from pixelroom.errors import ImageFetchError
from pixelroom.utils.fanout import gather_successes

logger = structlog.get_logger()

DEFAULT_CONTENT_TYPE = "image/jpeg"


@dataclass(frozen=True)
class FetchedImage:
    url: str
    data: bytes
    content_type: str

    @property
    def extension(self) -> str:
        return extension_for_content_type(self.content_type)

    def as_upload(self, stem: str) -> tuple[str, bytes, str]:
        """(filename, content, mime) tuple accepted by the OpenAI SDK."""
        return (f"{stem}.{self.extension}", self.data, self.content_type)


def extension_for_content_type(content_type: str) -> str:
    if "png" in content_type:
        return "png"
    if "webp" in content_type:
        return "webp"
    return "jpg"


async def fetch_image(client: httpx.AsyncClient, url: str) -> FetchedImage:
    """Fetch a single image using the given HTTP client."""
    try:
        response = await client.get(url, timeout=settings.fetch_timeout_seconds)
    except httpx.TimeoutException as exc:
        raise ImageFetchError(url, "Timeout downloading image") from exc
    except httpx.RequestError as exc:
        raise ImageFetchError(url, f"Network error downloading image ({type(exc).__name__})") from exc

    if response.status_code >= 400:
        raise ImageFetchError(
            url,
            f"HTTP {response.status_code} downloading image",
            status_code=response.status_code,
        )

    reported = response.headers.get("content-type", "")
    # Generic types (octet-stream from CDNs and buckets) upload as JPEG
    content_type = reported if reported.startswith("image/") else DEFAULT_CONTENT_TYPE
    if reported and content_type != reported:
        logger.debug("image_content_type_defaulted", url=url[:100], reported=reported)

    return FetchedImage(url=url, data=response.content, content_type=content_type)


async def download_image(url: str, client: httpx.AsyncClient | None = None) -> FetchedImage:
    """Download one image, opening a short-lived client unless one is given."""
    if client is not None:
        return await fetch_image(client, url)
    async with httpx.AsyncClient(follow_redirects=True) as owned:
        return await fetch_image(owned, url)


async def download_images_lenient(
    urls: list[str],
    client: httpx.AsyncClient | None = None,
) -> list[FetchedImage]:
    """Download several images, skipping any that fail.

    Order of the successful downloads follows ``urls``.
    """
    if not urls:
        return []

    async def _fetch_all(http: httpx.AsyncClient) -> list[FetchedImage]:
        return await gather_successes(
            urls,
            lambda url: fetch_image(http, url),
            label="reference_fetch",
            limit=len(urls),
        )

    if client is not None:
        return await _fetch_all(client)
    async with httpx.AsyncClient(follow_redirects=True) as owned:
        return await _fetch_all(owned)
