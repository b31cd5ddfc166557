"""Error handling utilities and custom exceptions."""

from __future__ import annotations

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config.app_config import get_app_config


class ChatError(Exception):
    """Exception raised when a chat operation fails.

    Subclasses set ``status_code`` so the HTTP layer can render them
    without knowing each type.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ChatValidationError(ChatError):
    """The request carries neither text nor a usable attachment."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(ChatError):
    """The upstream provider rejected the configured API key."""

    status_code = status.HTTP_401_UNAUTHORIZED


async def chat_exception_handler(request: Request, exc: ChatError) -> JSONResponse:
    """Convert a ChatError into a JSON error response."""
    logger.error("{} on {}: {}", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
    )


_HTTP_ERROR_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Endpoint not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
}


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (404, 405, ...) as ``{"error": ...}``."""
    message = _HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log everything, leak details only in development."""
    logger.opt(exception=exc).error("Unhandled error on {}", request.url.path)
    content: dict[str, str] = {"error": "Internal server error"}
    if get_app_config().is_development:
        content["details"] = str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
    )
