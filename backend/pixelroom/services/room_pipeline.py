"""One-shot room composition: base image, sprites, then composite.

Phases run strictly in order. Stylization of the first four product URLs
goes through the partial-success fan-out, so a failed product only means
one sprite fewer in the final image.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from pixelroom.config import settings
from pixelroom.services.base_room import generate_base_room, with_palette
from pixelroom.services.compose import COMPOSITION_ANCHORS, compose_room
from pixelroom.services.stylize import stylize_product
from pixelroom.utils.fanout import gather_successes
from pixelroom.utils.image import GeneratedImage

logger = structlog.get_logger()


async def stylize_products(product_urls: Sequence[str]) -> list[GeneratedImage]:
    """Stylize up to four products, keeping whichever succeed."""
    urls = list(product_urls)[: len(COMPOSITION_ANCHORS)]
    return await gather_successes(
        urls,
        stylize_product,
        label="sprite_stylize",
        limit=settings.stylize_concurrency,
    )


async def compose_room_from_products(
    prompt: str,
    product_urls: Sequence[str],
    *,
    palette_hint: str | None = None,
    size: str = "1024x1024",
) -> GeneratedImage:
    base = await generate_base_room(with_palette(prompt, palette_hint), size=size)
    sprites = await stylize_products(product_urls)
    logger.info(
        "compose_room_sprites_ready",
        requested=min(len(product_urls), len(COMPOSITION_ANCHORS)),
        stylized=len(sprites),
    )
    final = await asyncio.to_thread(compose_room, base.data, [s.data for s in sprites])
    return GeneratedImage(final)
