"""Orchestration service for a single chat turn.

The ChatService validates the request body, applies the rate limit,
builds the prompt, asks the completion service for a JSON reply and
sanitizes the result.  Every failure is raised as a :class:`ChatError`
subclass so the controller can stay thin.
"""

from __future__ import annotations

import json
from functools import lru_cache

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate
from loguru import logger
from pydantic import ValidationError

from ..config.app_config import AppConfig, get_app_config
from ..config.llm_config import LlmConfig, get_llm_config
from ..models.chat_request import ChatRequest
from ..models.chat_response import ChatResponse
from ..prompts import SYSTEM_PROMPT, USER_PROMPT
from ..utils.error_handler import (
    ConfigurationError,
    InvalidRequestError,
    ModelOutputError,
    RateLimitError,
    UpstreamError,
)
from ..utils.structured_output import parse_model_output, sanitize_model_output
from .llm_service import CompletionClient, build_completion_client
from .rate_limiter import FixedWindowRateLimiter, RateLimiter


class ChatService:
    """Coordinates validation, throttling and the completion call.

    Both collaborators are injected.  ``completion_client`` may be ``None``
    when no credential is configured; each request then fails with a
    :class:`ConfigurationError` instead of the process refusing to start.
    """

    def __init__(
        self,
        completion_client: CompletionClient | None,
        rate_limiter: RateLimiter,
    ) -> None:
        self.completion_client = completion_client
        self.rate_limiter = rate_limiter
        # The system prompt contains literal braces, so it is passed as a
        # variable rather than embedded in the template.
        self._prompt_template = ChatPromptTemplate.from_messages(
            [
                ("system", "{system_prompt}"),
                ("human", USER_PROMPT),
            ]
        )

    @classmethod
    def from_config(
        cls,
        llm_config: LlmConfig | None = None,
        app_config: AppConfig | None = None,
    ) -> "ChatService":
        """Build a service with the OpenAI client and an in-memory rate limiter."""
        app_config = app_config or get_app_config()
        return cls(
            completion_client=build_completion_client(llm_config or get_llm_config()),
            rate_limiter=FixedWindowRateLimiter(
                max_requests=app_config.rate_limit_max_requests,
                window_seconds=app_config.rate_limit_window_seconds,
            ),
        )

    async def chat(self, body: bytes | str | None, client_id: str) -> ChatResponse:
        """Handle one chat request end to end.

        Parameters
        ----------
        body: bytes | str | None
            The raw request body.  An empty body is treated as ``{}``.
        client_id: str
            Identifier used for rate limiting (usually the client IP).

        Returns
        -------
        ChatResponse
            The sanitized reply.

        Raises
        ------
        ChatError
            ConfigurationError, InvalidRequestError, RateLimitError,
            UpstreamError or ModelOutputError.
        """
        if self.completion_client is None:
            raise ConfigurationError(
                detail="OpenAI API key is not set. Please configure OPENAI_API_KEY environment variable."
            )

        chat_request = self.parse_request(body)

        if not self.rate_limiter.check(client_id):
            raise RateLimitError()

        logger.info("Chat request from client={} ({} chars)", client_id, len(chat_request.message))
        messages = self.build_messages(chat_request.message)

        try:
            text = await self.completion_client.complete(messages)
        except Exception as exc:
            logger.exception("Completion service call failed")
            detail = str(exc) or "Failed to get response from completion service"
            raise UpstreamError(detail=detail) from exc

        text = (text or "").strip()
        if not text:
            raise ModelOutputError("No response from model")

        response = sanitize_model_output(parse_model_output(text))
        logger.info(
            "Reply ready for client={} (mood={}, resources={}, action={})",
            client_id,
            response.mood.value,
            len(response.resources),
            response.action,
        )
        return response

    @staticmethod
    def parse_request(body: bytes | str | None) -> ChatRequest:
        """Decode and validate a raw request body."""
        payload: object = {}
        if body:
            payload = body
            # A JSON-encoded string body is decoded a second time
            for _ in range(2):
                if not isinstance(payload, (bytes, str)):
                    break
                try:
                    payload = json.loads(payload)
                except ValueError as exc:
                    raise InvalidRequestError("Invalid JSON in request body") from exc

        if not isinstance(payload, dict):
            raise InvalidRequestError("Request body must be a JSON object")

        try:
            return ChatRequest.model_validate(payload)
        except ValidationError as exc:
            raise InvalidRequestError("Message required and must be a non-empty string") from exc

    def build_messages(self, message: str) -> list[BaseMessage]:
        """Return the fixed system + user prompt for ``message``."""
        return self._prompt_template.format_messages(
            system_prompt=SYSTEM_PROMPT,
            message=message,
        )


@lru_cache()
def get_chat_service() -> ChatService:
    """Return a cached ChatService built from environment configuration."""
    return ChatService.from_config()
