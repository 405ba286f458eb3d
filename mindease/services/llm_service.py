"""Service encapsulating interactions with the completion service.

Uses LangChain's ChatOpenAI integration to call an OpenAI-compatible
chat completions endpoint in JSON mode.  The chat service depends only
on the :class:`CompletionClient` protocol so tests can substitute a stub.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from langchain_core.messages import BaseMessage
from langchain_openai import ChatOpenAI
from loguru import logger

from ..config.llm_config import LlmConfig, get_llm_config

JSON_RESPONSE_FORMAT = {"type": "json_object"}


class CompletionClient(Protocol):
    """Anything that turns a prompt into the model's raw text output."""

    async def complete(self, messages: Sequence[BaseMessage]) -> str:
        ...


class LLMService:
    """Completion client backed by :class:`~langchain_openai.ChatOpenAI`.

    The model is bound to ``response_format={"type": "json_object"}`` so
    providers that support JSON mode return a bare object.  The prompt must
    still ask for JSON explicitly, which the system prompt does.
    """

    def __init__(self, llm_config: LlmConfig | None = None) -> None:
        """Initialise the service from the provided configuration.

        Parameters
        ----------
        llm_config: LlmConfig, optional
            API credentials, base URL, model name and tuning parameters.
            Loaded from environment variables via :func:`get_llm_config`
            when omitted.
        """
        self.llm_config = llm_config or get_llm_config()

        llm_kwargs: dict[str, object] = {
            "api_key": self.llm_config.api_key,
            "model": self.llm_config.model,
            "temperature": self.llm_config.temperature,
        }
        if self.llm_config.base_url:
            llm_kwargs["base_url"] = self.llm_config.base_url
        if self.llm_config.max_tokens:
            llm_kwargs["max_tokens"] = self.llm_config.max_tokens
        if self.llm_config.timeout:
            llm_kwargs["timeout"] = self.llm_config.timeout

        self.llm = ChatOpenAI(**llm_kwargs)
        self._json_llm = self.llm.bind(response_format=JSON_RESPONSE_FORMAT)

    async def complete(self, messages: Sequence[BaseMessage]) -> str:
        """Send ``messages`` and return the text content of the first choice.

        Non-text content (e.g. a list of content blocks) is reduced to its
        text parts.  Provider exceptions propagate unchanged.
        """
        logger.debug("Requesting completion from model={}", self.llm_config.model)
        result = await self._json_llm.ainvoke(list(messages))
        content = getattr(result, "content", None)
        if isinstance(content, list):
            content = "".join(
                part if isinstance(part, str) else str(part.get("text", ""))
                for part in content
                if isinstance(part, (str, dict))
            )
        return content if isinstance(content, str) else ""


def build_completion_client(llm_config: LlmConfig | None = None) -> CompletionClient | None:
    """Return an :class:`LLMService`, or ``None`` when no API key is configured."""
    llm_config = llm_config or get_llm_config()
    if not llm_config.has_credentials:
        logger.warning("OPENAI_API_KEY is not configured; chat requests will fail")
        return None
    return LLMService(llm_config)
