"""Error taxonomy for the chat endpoint and its JSON rendering."""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException


class ChatError(Exception):
    """Base class for failures that end the current chat request.

    Subclasses pin the HTTP status and the default ``error`` text.  ``detail``
    and ``raw`` are optional diagnostics copied into the response body.
    """

    status_code: int = 500
    error: str = "Server error"

    def __init__(
        self,
        error: str | None = None,
        *,
        detail: str | None = None,
        raw: str | None = None,
    ) -> None:
        self.error = error or self.error
        self.detail = detail
        self.raw = raw
        super().__init__(self.error if detail is None else f"{self.error}: {detail}")

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.detail is not None:
            payload["detail"] = self.detail
        if self.raw is not None:
            payload["raw"] = self.raw
        return payload


class ConfigurationError(ChatError):
    """The completion-service credential is missing."""

    error = "Server configuration error"


class InvalidRequestError(ChatError):
    status_code = 400
    error = "Invalid request"


class MethodNotAllowedError(ChatError):
    status_code = 405
    error = "Only POST method allowed"


class RateLimitError(ChatError):
    status_code = 429
    error = "Too many requests - slow down a bit."


class UpstreamError(ChatError):
    """The completion service call itself failed."""

    error = "Completion service error"


class ModelOutputError(ChatError):
    """The model answered, but not with a usable JSON object."""

    error = "Failed to parse model output"


async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    """Render a ChatError as its JSON error body."""
    if exc.status_code >= 500:
        logger.error("{} {} failed: {}", request.method, request.url.path, exc)
    else:
        logger.info("{} {} rejected ({}): {}", request.method, request.url.path, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors (404, 405) in the same shape as ChatError.

    A 405 from the router means a method other than POST/OPTIONS hit a chat
    route.
    """
    if exc.status_code == 405:
        payload = MethodNotAllowedError().to_payload()
    else:
        payload = {"error": str(exc.detail)}
    logger.info("{} {} rejected ({})", request.method, request.url.path, exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)
