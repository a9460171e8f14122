"""Base room image generation.

Primary strategy: image edit seeded with up to ``max_reference_images``
reference photos. Fallback strategy: plain text-to-image generate with the
same prompt. The fallback runs only for the reasons in ``FallbackReason``.
An edit call that succeeds without returning image data is a hard failure,
not a fallback trigger.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

import httpx
import structlog

from pixelroom.config import settings
from pixelroom.errors import PipelineError
from pixelroom.utils.http import download_images_lenient
from pixelroom.utils.image import GeneratedImage
from pixelroom.utils.openai_images import edit_image, generate_image, resolve_image_model

logger = structlog.get_logger()

DEFAULT_SIZE = "1024x1024"


class FallbackReason(StrEnum):
    NO_REFERENCES = "no_references"
    NO_REFERENCES_FETCHED = "no_references_fetched"
    EDIT_FAILED = "edit_failed"


def combine_prompt(prompt: str, negative_prompt: str | None = None) -> str:
    if negative_prompt:
        return f"{prompt}\nAvoid: {negative_prompt}"
    return prompt


def with_palette(prompt: str, palette_hint: str | None) -> str:
    if palette_hint:
        return f"{prompt} (palette: {palette_hint})"
    return prompt


async def generate_base_room(
    prompt: str,
    *,
    negative_prompt: str | None = None,
    reference_urls: Sequence[str] = (),
    size: str = DEFAULT_SIZE,
    model: str | None = None,
    missing_image_code: str = "no_base_image",
    http_client: httpx.AsyncClient | None = None,
) -> GeneratedImage:
    """Produce one base room PNG.

    Raises PipelineError(``missing_image_code``, status 502) when the
    backend answers without image data. SDK errors from the generate call
    propagate unchanged.
    """
    model_name = resolve_image_model(model)
    full_prompt = combine_prompt(prompt, negative_prompt)
    refs = list(reference_urls)[: settings.max_reference_images]

    if not refs:
        reason = FallbackReason.NO_REFERENCES
    else:
        fetched = await download_images_lenient(refs, client=http_client)
        logger.info("reference_images_fetched", requested=len(refs), fetched=len(fetched))
        if not fetched:
            reason = FallbackReason.NO_REFERENCES_FETCHED
        else:
            try:
                data = await edit_image(fetched, full_prompt, model=model_name, size=size)
            except Exception as exc:
                logger.warning(
                    "base_room_edit_failed",
                    error_type=type(exc).__name__,
                    error=str(exc)[:200],
                )
                reason = FallbackReason.EDIT_FAILED
            else:
                if data is None:
                    raise PipelineError(
                        missing_image_code,
                        "Image edit returned no image",
                        status_code=502,
                        retryable=True,
                    )
                return GeneratedImage(data)

    logger.info("base_room_fallback", reason=str(reason), model=model_name, size=size)
    data = await generate_image(full_prompt, model=model_name, size=size)
    if data is None:
        raise PipelineError(
            missing_image_code,
            "Image generation returned no image",
            status_code=502,
            retryable=True,
        )
    return GeneratedImage(data)
