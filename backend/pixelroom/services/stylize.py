"""Product photo -> transparent isometric pixel-art sprite."""

from __future__ import annotations

import httpx
import structlog

from pixelroom.errors import ImageFetchError, PipelineError
from pixelroom.utils.http import download_image
from pixelroom.utils.image import GeneratedImage
from pixelroom.utils.openai_images import edit_image, resolve_image_model

logger = structlog.get_logger()

SPRITE_PROMPT = (
    "Convert this product into a clean isometric pixel-art sprite with transparent "
    "background, consistent with retro game style."
)
SPRITE_SIZE = "1024x1024"


async def stylize_product(
    product_url: str,
    *,
    model: str | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> GeneratedImage:
    """Stylize one product image. No fallback sprite is ever substituted."""
    try:
        product = await download_image(product_url, client=http_client)
    except ImageFetchError as exc:
        logger.warning("product_fetch_failed", url=product_url[:100], reason=exc.reason)
        raise PipelineError("product_fetch_failed", str(exc), status_code=502) from exc

    data = await edit_image(
        [product],
        SPRITE_PROMPT,
        model=resolve_image_model(model),
        size=SPRITE_SIZE,
        background="transparent",
        file_stem="product",
    )
    if data is None:
        raise PipelineError("no_sprite_image", "Image edit returned no sprite", status_code=502, retryable=True)
    return GeneratedImage(data)
