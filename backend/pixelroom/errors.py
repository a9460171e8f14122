"""Pipeline error types.

Services raise these; route handlers turn them into the ErrorResponse JSON
shape. Nothing in the pipeline retries automatically, so ``retryable`` is a
hint for the caller only.
"""

from __future__ import annotations


class PipelineError(Exception):
    """A terminal pipeline failure with a stable, machine-readable tag."""

    def __init__(
        self,
        code: str,
        message: str = "",
        *,
        status_code: int = 500,
        retryable: bool = False,
        raw_response: str | None = None,
    ) -> None:
        super().__init__(message or code)
        self.code = code
        self.message = message or code
        self.status_code = status_code
        self.retryable = retryable
        self.raw_response = raw_response


def invalid_payload(message: str) -> PipelineError:
    return PipelineError("invalid_payload", message, status_code=400)


class ImageFetchError(Exception):
    """A remote image could not be downloaded (timeout, network error, HTTP >= 400)."""

    def __init__(self, url: str, reason: str, *, status_code: int | None = None) -> None:
        super().__init__(f"{reason}: {url[:100]}")
        self.url = url
        self.reason = reason
        self.status_code = status_code
