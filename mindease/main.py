"""FastAPI application entry point.

This module initialises the FastAPI app, configures logging and
registers API routes.  The ``uvicorn`` ASGI server can point to
``mindease.main:app`` to serve the application, or run ``mindease serve``.
"""

from fastapi import FastAPI, Request
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config.app_config import AppConfig, get_app_config
from .controllers.chat_controller import CORS_HEADERS, router as chat_router
from .services.chat_service import ChatService, get_chat_service
from .utils.error_handler import ChatError, chat_error_handler, http_exception_handler
from .utils.logger import setup_logging


def create_app(
    chat_service: ChatService | None = None,
    app_config: AppConfig | None = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    chat_service: ChatService, optional
        The service handling ``/api/chat``.  Built from environment
        configuration when omitted; tests pass one wired to stubs.
    app_config: AppConfig, optional
        Application settings used for logging.
    """
    app_config = app_config or get_app_config()
    setup_logging(app_config)

    app = FastAPI(title="MindEase API", version="0.1.0")
    app.state.chat_service = chat_service or get_chat_service()

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        """Attach the fixed CORS headers to every /api response, errors included."""
        response = await call_next(request)
        if request.url.path.startswith("/api/"):
            response.headers.update(CORS_HEADERS)
        return response

    app.add_exception_handler(ChatError, chat_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(chat_router)

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        logger.debug("Health check invoked")
        return {"status": "ok"}

    return app


# Create an application instance for ASGI servers
app = create_app()
