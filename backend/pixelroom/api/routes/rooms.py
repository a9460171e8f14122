"""Saved rooms: create, fetch, share."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from pixelroom.api.errors import error_response, from_pipeline_error
from pixelroom.errors import PipelineError
from pixelroom.models.contracts import (
    CreateRoomRequest,
    CreateRoomResponse,
    ErrorResponse,
    RoomRecord,
    ShareRoomResponse,
)
from pixelroom.services.room_store import RoomStore

router = APIRouter(tags=["rooms"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


def get_room_store(request: Request) -> RoomStore:
    return request.app.state.room_store


@router.post("/rooms", response_model=CreateRoomResponse, responses={400: {"model": ErrorResponse}})
async def create_room(body: CreateRoomRequest, store: RoomStore = Depends(get_room_store)):
    try:
        room_id = await store.create(
            seed=body.seed,
            image_url=body.image_url,
            boxes=body.boxes,
            product_ids=body.product_ids,
            personality_type=body.personality_type,
            theme=body.theme,
        )
    except PipelineError as exc:
        return from_pipeline_error(exc)
    return CreateRoomResponse(room_id=room_id)


@router.get(
    "/rooms/{room_id}",
    response_model=RoomRecord,
    response_model_exclude_none=True,
    responses=_NOT_FOUND,
)
async def get_room(room_id: str, store: RoomStore = Depends(get_room_store)):
    room = store.get(room_id)
    if room is None:
        return error_response(404, "not_found")
    return room


@router.post("/rooms/{room_id}/share", response_model=ShareRoomResponse, responses=_NOT_FOUND)
async def share_room(room_id: str, store: RoomStore = Depends(get_room_store)):
    token = store.issue_share_token(room_id)
    if token is None:
        return error_response(404, "not_found")
    return ShareRoomResponse(share_token=token)
