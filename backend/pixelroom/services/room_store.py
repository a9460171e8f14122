"""In-memory store of generated room records.

Records live for the lifetime of the process; there is no eviction and no
update operation. Writes go through an asyncio lock so concurrent
``create`` calls never interleave on the map; reads take no lock.
"""

from __future__ import annotations

import asyncio
import secrets
import string
import time
from collections.abc import Callable
from typing import Any

import structlog

from pixelroom.errors import invalid_payload
from pixelroom.models.contracts import NormalizedBox, RoomRecord

logger = structlog.get_logger()

ROOM_ID_LENGTH = 8
_ID_ALPHABET = string.ascii_lowercase + string.digits


def random_room_id() -> str:
    # No collision check
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(ROOM_ID_LENGTH))


def _now_ms() -> int:
    return int(time.time() * 1000)


class RoomStore:
    def __init__(
        self,
        id_factory: Callable[[], str] = random_room_id,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._rooms: dict[str, RoomRecord] = {}
        self._lock = asyncio.Lock()
        self._id_factory = id_factory
        self._clock = clock

    def __len__(self) -> int:
        return len(self._rooms)

    async def create(
        self,
        *,
        seed: Any,
        image_url: str | None,
        boxes: list[NormalizedBox] | None = None,
        product_ids: list[str] | None = None,
        personality_type: str | None = None,
        theme: Any = None,
    ) -> str:
        """Store a new room record and return its id.

        Raises PipelineError(invalid_payload) unless ``seed`` is an integer
        and ``image_url`` is non-empty.
        """
        if not image_url or not isinstance(seed, int) or isinstance(seed, bool):
            raise invalid_payload("seed and imageUrl are required")

        async with self._lock:
            room_id = self._id_factory()
            self._rooms[room_id] = RoomRecord(
                id=room_id,
                seed=seed,
                image_url=image_url,
                boxes=boxes,
                product_ids=product_ids,
                personality_type=personality_type,
                theme=theme,
                created_at=self._clock(),
            )
        logger.info("room_created", room_id=room_id, seed=seed)
        return room_id

    def get(self, room_id: str) -> RoomRecord | None:
        return self._rooms.get(room_id)

    def issue_share_token(self, room_id: str) -> str | None:
        """Share token for a room; currently the room id itself."""
        room = self._rooms.get(room_id)
        if room is None:
            return None
        return room.id
