"""Shared fixtures: an in-process ASGI client and a fresh room store per test."""

import httpx
import pytest

from pixelroom.main import app
from pixelroom.services.room_store import RoomStore


@pytest.fixture(autouse=True)
def fresh_room_store():
    """Each test sees an empty in-memory room store."""
    store = RoomStore()
    app.state.room_store = store
    yield store


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
