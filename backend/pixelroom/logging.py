"""structlog configuration for the API process.

Image payloads move through the pipeline as base64 and data URIs, so a
processor collapses any such value before it reaches a renderer.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog
from structlog.typing import EventDict, Processor

from pixelroom.config import settings

MAX_LOG_VALUE_CHARS = 2000


def shorten_payloads(_logger: Any, _method: str, event_dict: EventDict) -> EventDict:
    """Replace data URIs and oversized strings with a length marker."""
    for key, value in event_dict.items():
        if key == "event" or not isinstance(value, str):
            continue
        if value.startswith("data:"):
            media = value.partition(";")[0].removeprefix("data:") or "unknown"
            event_dict[key] = f"<data uri {media}, {len(value)} chars>"
        elif len(value) > MAX_LOG_VALUE_CHARS:
            event_dict[key] = f"{value[:200]}...<{len(value)} chars>"
    return event_dict


class _MirroredStream:
    """stdout-like stream that also appends every line to a mirror file.

    The mirror is best effort: once a write or flush on it fails it is
    dropped and output continues on the primary stream alone.
    """

    def __init__(self, primary: IO[str], mirror: IO[str] | None) -> None:
        self._primary = primary
        self._mirror = mirror

    @property
    def mirroring(self) -> bool:
        return self._mirror is not None

    def _drop_mirror(self, action: str) -> None:
        self._mirror = None
        print(f"WARNING: Log file {action} failed. File logging disabled.", file=sys.stderr)

    def write(self, data: str) -> None:
        self._primary.write(data)
        if self._mirror is None:
            return
        try:
            self._mirror.write(data)
            self._mirror.flush()
        except (OSError, ValueError):
            self._drop_mirror("write")

    def flush(self) -> None:
        self._primary.flush()
        if self._mirror is None:
            return
        try:
            self._mirror.flush()
        except (OSError, ValueError):
            self._drop_mirror("flush")


def open_log_mirror(path: str) -> IO[str] | None:
    try:
        return open(path, "a")  # noqa: SIM115
    except OSError as exc:
        # structlog is not configured yet at this point
        print(f"WARNING: Could not open log file {path!r}: {exc}. Logging to stdout only.", file=sys.stderr)
        return None


def _renderer(environment: str) -> Processor:
    if environment == "development":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def configure_logging() -> None:
    """Console renderer in development, JSON lines everywhere else."""
    level = logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)

    logger_factory = structlog.PrintLoggerFactory()
    if settings.log_file:
        stream = _MirroredStream(sys.stdout, open_log_mirror(settings.log_file))
        logger_factory = structlog.PrintLoggerFactory(file=stream)  # type: ignore[arg-type]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            shorten_payloads,
            _renderer(settings.environment),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )
