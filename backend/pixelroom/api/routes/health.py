"""Liveness endpoint. Makes no outbound calls."""

from __future__ import annotations

from fastapi import APIRouter

from pixelroom import __version__
from pixelroom.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    return {
        "ok": True,
        "version": __version__,
        "environment": settings.environment,
    }
