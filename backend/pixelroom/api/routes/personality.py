"""Survey-driven endpoints: personality + products, room prompt, hotspots."""

from __future__ import annotations

from fastapi import APIRouter

from pixelroom.api.errors import from_pipeline_error
from pixelroom.errors import PipelineError
from pixelroom.models.contracts import (
    ErrorResponse,
    HotspotsResponse,
    PersonalityProductsRequest,
    PersonalityProductsResponse,
    RoomPromptRequest,
    RoomPromptResponse,
)
from pixelroom.services.personality import infer_personality
from pixelroom.services.room_prompt import hotspot_boxes, room_prompt_for

router = APIRouter(tags=["personality"])


@router.post(
    "/personality-products",
    response_model=PersonalityProductsResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def personality_products(body: PersonalityProductsRequest):
    """Infer a personality profile and exactly six product ideas."""
    try:
        return await infer_personality(body.user_answers)
    except PipelineError as exc:
        return from_pipeline_error(exc)


@router.post("/room-prompt", response_model=RoomPromptResponse)
async def room_prompt(body: RoomPromptRequest):
    return room_prompt_for(body.user_answers, body.product_texts)


@router.get("/hotspots", response_model=HotspotsResponse)
async def hotspots(seed: int | None = None):
    return HotspotsResponse(boxes=hotspot_boxes(seed))
