"""Controllers for the chat endpoint."""

from fastapi import APIRouter, Depends, Request, Response, status
from loguru import logger

from ..models.chat_response import ChatResponse, ErrorResponse
from ..services.chat_service import ChatService
from ..utils.error_handler import ChatError

router = APIRouter(prefix="/api", tags=["Chat"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

FALLBACK_CLIENT_ID = "local"


def chat_service_dependency(request: Request) -> ChatService:
    """Return the ChatService attached to the running application."""
    return request.app.state.chat_service


def client_identifier(request: Request) -> str:
    """Identify the caller for rate limiting.

    Uses the first address in ``X-Forwarded-For`` when present, then the
    socket peer address, then a constant.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return FALLBACK_CLIENT_ID


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def chat_endpoint(
    request: Request,
    service: ChatService = Depends(chat_service_dependency),
) -> ChatResponse:
    """Accept a chat message and return the assistant's structured reply.

    The body is read raw rather than through a Pydantic parameter so that
    malformed input yields a 400 with the same error shape as every other
    failure, instead of FastAPI's 422.
    """
    client_id = client_identifier(request)
    try:
        body = await request.body()
        logger.debug("Received chat request from client={}", client_id)
        return await service.chat(body, client_id)
    except ChatError:
        raise
    except Exception as exc:
        logger.exception("Unhandled exception during chat processing")
        raise ChatError(detail=str(exc) or type(exc).__name__) from exc


@router.options("/chat", status_code=status.HTTP_200_OK, include_in_schema=False)
async def chat_preflight() -> Response:
    """Answer every preflight with an empty body; CORS headers are added by the app."""
    return Response(status_code=status.HTTP_200_OK)
