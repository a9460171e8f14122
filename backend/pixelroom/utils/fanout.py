"""Bounded partial-success fan-out.

Runs one independent attempt per item, at most ``limit`` at a time, and
keeps only the successes. A failed item is logged and dropped; it never
aborts its siblings.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")
R = TypeVar("R")

_FAILED = object()


async def gather_successes(
    items: Sequence[T],
    attempt: Callable[[T], Awaitable[R]],
    *,
    label: str,
    limit: int = 1,
) -> list[R]:
    """Attempt every item and return the successful results in input order.

    ``limit=1`` runs the attempts one after another. Cancellation is not
    caught, so cancelling the caller still cancels the whole batch.
    """
    if not items:
        return []
    semaphore = asyncio.Semaphore(max(1, limit))

    async def _run(index: int, item: T) -> object:
        async with semaphore:
            try:
                return await attempt(item)
            except Exception as exc:
                logger.warning(
                    f"{label}_failed",
                    index=index,
                    error_type=type(exc).__name__,
                    error=str(exc)[:200],
                )
                return _FAILED

    results = await asyncio.gather(*(_run(i, item) for i, item in enumerate(items)))
    successes: list[R] = [r for r in results if r is not _FAILED]  # type: ignore[misc]
    if len(successes) < len(items):
        logger.info(
            f"{label}_partial",
            attempted=len(items),
            succeeded=len(successes),
        )
    return successes
