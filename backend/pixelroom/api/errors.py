from __future__ import annotations

from fastapi.responses import JSONResponse

from pixelroom.errors import PipelineError
from pixelroom.models.contracts import ErrorResponse


def error_response(
    status: int,
    code: str,
    message: str | None = None,
    *,
    retryable: bool = False,
    raw_response: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=code, message=message, retryable=retryable, raw_response=raw_response)
    return JSONResponse(
        status_code=status,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def from_pipeline_error(exc: PipelineError) -> JSONResponse:
    return error_response(
        exc.status_code,
        exc.code,
        exc.message,
        retryable=exc.retryable,
        raw_response=exc.raw_response,
    )
