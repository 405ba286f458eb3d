from __future__ import annotations

from typing import Sequence

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import BaseMessage

from mindease.main import create_app
from mindease.services.chat_service import ChatService
from mindease.services.rate_limiter import FixedWindowRateLimiter


class StubCompletionClient:
    """Completion client returning canned output and recording prompts."""

    def __init__(self, output: str = '{"reply": "I hear you."}', error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.calls: list[list[BaseMessage]] = []

    async def complete(self, messages: Sequence[BaseMessage]) -> str:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.output


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def completion() -> StubCompletionClient:
    return StubCompletionClient()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter(clock: FakeClock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(max_requests=8, window_seconds=60.0, clock=clock)


@pytest.fixture
def chat_service(completion: StubCompletionClient, rate_limiter: FixedWindowRateLimiter) -> ChatService:
    return ChatService(completion_client=completion, rate_limiter=rate_limiter)


@pytest.fixture
def client(chat_service: ChatService) -> TestClient:
    return TestClient(create_app(chat_service))
