"""Global exception handlers.

Every error body has the shape ``{"error": "<message>"}``.  Unexpected
exceptions are logged with their traceback and answered with a generic
message; internals never reach the client.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from supportchat.core.errors import MessageValidationError, NotFoundError
from supportchat.core.llm.errors import UnsupportedProvider

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."
INVALID_REQUEST_MESSAGE = "Invalid request"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def first_validation_message(exc: RequestValidationError) -> str:
    """Message of the first violated field, without pydantic's prefixes."""
    errors = exc.errors()
    if not errors:
        return INVALID_REQUEST_MESSAGE
    first = errors[0]
    ctx_error = (first.get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    return str(first.get("msg") or INVALID_REQUEST_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on ``app``."""

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(404, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error(400, first_validation_message(exc))

    @app.exception_handler(MessageValidationError)
    async def handle_message_validation(
        request: Request, exc: MessageValidationError
    ) -> JSONResponse:
        return _error(400, exc.message)

    @app.exception_handler(UnsupportedProvider)
    async def handle_unsupported_provider(
        request: Request, exc: UnsupportedProvider
    ) -> JSONResponse:
        logger.error("LLM provider not supported: %s", exc)
        return _error(500, UNEXPECTED_ERROR_MESSAGE)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s", request.method, request.url.path
        )
        return _error(500, UNEXPECTED_ERROR_MESSAGE)
