import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pixelroom import __version__
from pixelroom.api.errors import error_response
from pixelroom.api.routes import health, images, personality, questions, rooms
from pixelroom.config import settings
from pixelroom.logging import configure_logging
from pixelroom.services.room_store import RoomStore

configure_logging()

logger = structlog.get_logger()


def _with_request_id(request: Request, response: JSONResponse) -> JSONResponse:
    response.headers["X-Request-ID"] = getattr(
        request.state, "request_id", request.headers.get("X-Request-ID", "")
    )
    return response


def create_app() -> FastAPI:
    app = FastAPI(
        title="Pixelroom API",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
    )
    app.state.room_store = RoomStore()

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Bind a request ID into the log context and echo it back as X-Request-ID."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id, path=request.url.path)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Malformed request bodies are client input errors: 400 invalid_payload."""
        messages = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err["loc"])
            messages.append(f"{loc}: {err['msg']}")
        return _with_request_id(request, error_response(400, "invalid_payload", "; ".join(messages)))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        return _with_request_id(
            request,
            error_response(500, "internal_error", "An unexpected error occurred", retryable=True),
        )

    app.include_router(health.router)
    for module in (personality, images, rooms, questions):
        app.include_router(module.router, prefix="/api")
    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("pixelroom.main:app", host="0.0.0.0", port=settings.port)
