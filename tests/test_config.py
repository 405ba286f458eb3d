from __future__ import annotations

import pytest
from langchain_core.messages import AIMessage, HumanMessage
from pydantic import ValidationError

from mindease.config.app_config import AppConfig
from mindease.config.llm_config import LlmConfig
from mindease.services.chat_service import ChatService
from mindease.services.llm_service import JSON_RESPONSE_FORMAT, LLMService, build_completion_client


def test_llm_config_reads_openai_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("OPENAI_MAX_TOKENS", "256")

    config = LlmConfig()

    assert config.api_key == "sk-test"
    assert config.model == "gpt-4o-mini"
    assert config.max_tokens == 256
    assert config.has_credentials is True


def test_blank_api_key_counts_as_missing() -> None:
    config = LlmConfig(api_key="   ")

    assert config.api_key is None
    assert build_completion_client(config) is None


def test_llm_config_rejects_out_of_range_temperature() -> None:
    with pytest.raises(ValidationError):
        LlmConfig(api_key="sk-test", temperature=3.5)


def test_app_config_rate_limit_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "3")
    monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "10")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = AppConfig()

    assert config.rate_limit_max_requests == 3
    assert config.rate_limit_window_seconds == 10.0
    assert config.log_level == "DEBUG"

    service = ChatService.from_config(LlmConfig(api_key=None), config)
    assert service.completion_client is None
    assert service.rate_limiter.max_requests == 3
    assert service.rate_limiter.window_seconds == 10.0


def test_app_config_rejects_unknown_environment() -> None:
    with pytest.raises(ValidationError):
        AppConfig(app_env="qa")


def test_build_completion_client_uses_json_mode() -> None:
    client = build_completion_client(LlmConfig(api_key="sk-test", model="gpt-3.5-turbo"))

    assert isinstance(client, LLMService)
    assert client.llm.model_name == "gpt-3.5-turbo"
    assert client.llm.max_tokens == 400
    assert client._json_llm.kwargs["response_format"] == JSON_RESPONSE_FORMAT


async def test_llm_service_returns_text_content() -> None:
    service = LLMService(LlmConfig(api_key="sk-test"))

    class FakeRunnable:
        def __init__(self, content: object) -> None:
            self.content = content
            self.received = None

        async def ainvoke(self, messages):
            self.received = messages
            return AIMessage(content=self.content)

    service._json_llm = FakeRunnable('{"reply": "hi"}')
    assert await service.complete([HumanMessage(content="hello")]) == '{"reply": "hi"}'
    assert service._json_llm.received == [HumanMessage(content="hello")]

    service._json_llm = FakeRunnable([{"type": "text", "text": '{"reply":'}, ' "hi"}'])
    assert await service.complete([HumanMessage(content="hello")]) == '{"reply": "hi"}'
