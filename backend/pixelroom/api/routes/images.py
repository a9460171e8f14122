"""Image pipeline endpoints.

Phased flow for client-visible progress: ``/base-room`` -> N x
``/stylize-product`` -> ``/compose-final``. ``/compose-room`` runs all three
phases in one request; ``/generate-room`` is the single-shot generator with
optional reference images.
"""

from __future__ import annotations

import asyncio
import secrets

import structlog
from fastapi import APIRouter

from pixelroom.api.errors import error_response, from_pipeline_error
from pixelroom.errors import PipelineError
from pixelroom.models.contracts import (
    BaseRoomRequest,
    BaseRoomResponse,
    ComposeFinalRequest,
    ComposeRoomRequest,
    ErrorResponse,
    GenerateRoomRequest,
    GenerateRoomResponse,
    ImageUrlResponse,
    StylizeProductRequest,
    StylizeProductResponse,
)
from pixelroom.services.base_room import generate_base_room, with_palette
from pixelroom.services.compose import compose_room
from pixelroom.services.room_pipeline import compose_room_from_products
from pixelroom.services.stylize import stylize_product
from pixelroom.utils.image import GeneratedImage, decode_image_payload

logger = structlog.get_logger()

router = APIRouter(tags=["images"])

MAX_SEED = 10_000_000

_ERRORS = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}


def _failure(code: str, exc: Exception):
    """Wrap an unexpected failure under the endpoint's own error tag."""
    message = exc.message if isinstance(exc, PipelineError) else str(exc)
    return error_response(500, code, message, retryable=True)


@router.post("/generate-room", response_model=GenerateRoomResponse, responses=_ERRORS)
async def generate_room(body: GenerateRoomRequest):
    """Generate a room image, seeded by reference images when given."""
    if not body.prompt:
        return error_response(400, "prompt is required")

    seed = body.seed if body.seed is not None else secrets.randbelow(MAX_SEED)
    logger.info(
        "generate_room_start",
        seed=seed,
        num_references=len(body.image_urls),
        num_boxes=len(body.boxes or []),
        steps=body.steps,
        guidance=body.guidance,
    )
    try:
        image = await generate_base_room(
            body.prompt,
            negative_prompt=body.negative_prompt,
            reference_urls=body.image_urls,
            model=body.model,
            missing_image_code="no_image_returned",
        )
    except PipelineError as exc:
        return from_pipeline_error(exc)
    except Exception as exc:
        logger.error("generate_room_failed", error_type=type(exc).__name__, error=str(exc)[:200])
        return _failure("generation_failed", exc)

    return GenerateRoomResponse(image_url=image.to_data_uri(), seed=seed)


@router.post("/base-room", response_model=BaseRoomResponse, responses=_ERRORS)
async def base_room(body: BaseRoomRequest):
    if not body.prompt:
        return error_response(400, "invalid_payload", "prompt is required")
    try:
        image = await generate_base_room(with_palette(body.prompt, body.palette_hint), size=body.size)
    except Exception as exc:
        logger.error("base_room_failed", error_type=type(exc).__name__, error=str(exc)[:200])
        return _failure("base_failed", exc)
    return BaseRoomResponse(base_b64=image.to_b64())


@router.post("/stylize-product", response_model=StylizeProductResponse, responses=_ERRORS)
async def stylize(body: StylizeProductRequest):
    if not body.url:
        return error_response(400, "invalid_payload", "url is required")
    try:
        sprite = await stylize_product(body.url)
    except Exception as exc:
        logger.error("stylize_product_failed", error_type=type(exc).__name__, error=str(exc)[:200])
        return _failure("stylize_failed", exc)
    return StylizeProductResponse(sprite_b64=sprite.to_b64())


@router.post("/compose-final", response_model=ImageUrlResponse, responses=_ERRORS)
async def compose_final(body: ComposeFinalRequest):
    """Composite already-stylized sprites onto a base image."""
    if not body.base_b64 or body.sprite_b64s is None:
        return error_response(400, "invalid_payload", "baseB64 and spriteB64s are required")
    try:
        base = decode_image_payload(body.base_b64)
        sprites = [decode_image_payload(s) for s in body.sprite_b64s]
    except ValueError as exc:
        return error_response(400, "invalid_payload", str(exc))

    try:
        final = await asyncio.to_thread(compose_room, base, sprites)
    except Exception as exc:
        logger.error("compose_final_failed", error_type=type(exc).__name__, error=str(exc)[:200])
        return _failure("compose_failed", exc)
    return ImageUrlResponse(image_url=GeneratedImage(final).to_data_uri())


@router.post("/compose-room", response_model=ImageUrlResponse, responses=_ERRORS)
async def compose_room_one_shot(body: ComposeRoomRequest):
    if not body.prompt or body.product_urls is None:
        return error_response(400, "invalid_payload", "prompt and productUrls are required")
    try:
        final = await compose_room_from_products(
            body.prompt,
            body.product_urls,
            palette_hint=body.palette_hint,
            size=body.size,
        )
    except Exception as exc:
        logger.error("compose_room_failed", error_type=type(exc).__name__, error=str(exc)[:200])
        return _failure("compose_failed", exc)
    return ImageUrlResponse(image_url=final.to_data_uri())
