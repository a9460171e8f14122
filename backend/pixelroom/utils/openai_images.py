"""OpenAI Images API wrapper (text-to-image generate and multi-image edit).

Both calls return decoded PNG bytes, or None when the response carries no
``b64_json`` payload. Each caller decides what a missing image means.
"""

from __future__ import annotations

import base64
from collections.abc import Sequence

import openai
import structlog

from pixelroom.config import settings
from pixelroom.utils.http import FetchedImage

logger = structlog.get_logger()

OPENAI_MODEL_PREFIX = "openai:"


def get_client() -> openai.AsyncOpenAI:
    return openai.AsyncOpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.image_timeout_seconds,
    )


def resolve_image_model(model: str | None = None) -> str:
    """Strip the ``openai:`` routing prefix; empty names use the configured model."""
    name = (model or settings.image_model).strip()
    if name.startswith(OPENAI_MODEL_PREFIX):
        name = name[len(OPENAI_MODEL_PREFIX) :].strip()
    return name or "gpt-image-1"


def _first_image(response: object) -> bytes | None:
    data = getattr(response, "data", None)
    if not data:
        return None
    b64 = getattr(data[0], "b64_json", None)
    if not b64:
        return None
    return base64.b64decode(b64)


async def generate_image(prompt: str, *, model: str, size: str) -> bytes | None:
    logger.info("image_generate_start", model=model, size=size, prompt_chars=len(prompt))
    response = await get_client().images.generate(model=model, prompt=prompt, size=size)
    return _first_image(response)


async def edit_image(
    images: Sequence[FetchedImage],
    prompt: str,
    *,
    model: str,
    size: str,
    background: str | None = None,
    file_stem: str = "ref",
) -> bytes | None:
    uploads = [img.as_upload(f"{file_stem}-{i}") for i, img in enumerate(images)]
    kwargs: dict = {"model": model, "image": uploads, "prompt": prompt, "size": size}
    if background is not None:
        kwargs["background"] = background
    logger.info("image_edit_start", model=model, size=size, num_images=len(uploads))
    response = await get_client().images.edit(**kwargs)
    return _first_image(response)
