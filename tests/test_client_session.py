"""
Tests for the terminal client's session, transcript and HTTP layer.
"""

import asyncio
import json

import httpx

from mindease.client.api_client import ChatApiClient
from mindease.client.session import (
    BREATHING_PROMPT,
    ERROR_PREFIX,
    JOURNAL_PROMPT,
    QUICK_ACTION_TEXT,
    REPLY_FALLBACK,
    THINKING_TEXT,
    WELCOME_MESSAGE,
    ChatSession,
)
from mindease.client.transcript import ResourceLink, Transcript, TranscriptEvent, mood_color

REPLY = {
    "reply": "Let's slow down together.",
    "mood": "anxious",
    "tone": "calming",
    "resources": [{"title": "Breathing guide", "url": "https://example.com/breathe"}],
    "action": "breathing_exercise",
}


def make_session(handler, events=None) -> ChatSession:
    listener = (lambda event, payload: events.append((event, payload))) if events is not None else None
    api = ChatApiClient("http://mindease.test", transport=httpx.MockTransport(handler))
    return ChatSession(api, Transcript(listener))


def texts(session: ChatSession) -> list[str]:
    return [bubble.text for bubble in session.transcript.bubbles]


class TestChatSession:
    """Rendering of successful and failed sends."""

    async def test_successful_send_renders_reply_resources_and_action(self) -> None:
        sent = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(json.loads(request.content))
            assert request.url.path == "/api/chat"
            return httpx.Response(200, json=REPLY)

        events = []
        session = make_session(handler, events)

        result = await session.send("I'm anxious")

        assert result == REPLY
        assert sent == [{"message": "I'm anxious"}]
        assert texts(session) == [
            "I'm anxious",
            REPLY["reply"],
            QUICK_ACTION_TEXT["breathing_exercise"],
        ]
        bot = session.transcript.bubbles[1]
        assert bot.label == "MindEase"
        assert bot.mood == "anxious"
        assert session.transcript.resources == [
            ResourceLink(title="Breathing guide", href="https://example.com/breathe")
        ]

        # The thinking placeholder was shown and then removed
        placeholder_events = [(e, p) for e, p in events if getattr(p, "pending", False)]
        assert [e for e, _ in placeholder_events] == [TranscriptEvent.APPEND, TranscriptEvent.REMOVE]
        assert placeholder_events[0][1].text == THINKING_TEXT
        assert not session.is_sending

    async def test_unknown_action_and_missing_reply(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"action": "dance_it_out", "resources": ["junk", {"url": "https://x.org"}]})

        session = make_session(handler)

        await session.send("hello")

        assert texts(session) == ["hello", REPLY_FALLBACK]
        assert session.transcript.bubbles[1].mood is None
        assert session.transcript.resources == [ResourceLink(title="https://x.org", href="https://x.org")]

    async def test_server_error_renders_error_bubble(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, json={"error": "Too many requests - slow down a bit."})

        session = make_session(handler)

        assert await session.send("hello") is None

        assert texts(session) == ["hello", f"{ERROR_PREFIX}Too many requests - slow down a bit."]
        assert session.transcript.bubbles[-1].mood == "neutral"
        assert not any(bubble.pending for bubble in session.transcript.bubbles)

    async def test_error_without_json_body_uses_status_line(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad gateway")

        session = make_session(handler)
        await session.send("hello")

        assert texts(session)[-1] == f"{ERROR_PREFIX}HTTP 502: Bad Gateway"

    async def test_invalid_json_and_non_object_replies(self) -> None:
        bodies = iter([b"<html>", b"[1, 2]"])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=next(bodies))

        session = make_session(handler)
        await session.send("one")
        await session.send("two")

        assert texts(session) == [
            "one",
            f"{ERROR_PREFIX}Invalid JSON response from server",
            "two",
            f"{ERROR_PREFIX}Invalid response format from server",
        ]

    async def test_network_error_renders_error_bubble(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        session = make_session(handler)
        await session.send("hello")

        assert texts(session)[-1] == f"{ERROR_PREFIX}Connection refused"
        assert not session.is_sending

    async def test_overlapping_send_is_dropped(self) -> None:
        release = asyncio.Event()
        calls = []

        async def handler(request: httpx.Request) -> httpx.Response:
            calls.append(json.loads(request.content)["message"])
            await release.wait()
            return httpx.Response(200, json={"reply": "done"})

        session = make_session(handler)

        first = asyncio.create_task(session.send("first"))
        await asyncio.sleep(0.01)
        assert session.is_sending

        assert await session.send("second") is None

        release.set()
        assert (await first) == {"reply": "done"}
        assert calls == ["first"]
        assert texts(session) == ["first", "done"]

        # The guard is released once the first request completes
        await session.send("third")
        assert calls == ["first", "third"]

    async def test_blank_input_is_ignored(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        session = make_session(handler)

        assert await session.send("   ") is None
        assert texts(session) == []


class TestAffordances:
    """Welcome bubble, shortcuts and clearing."""

    async def test_shortcuts_send_canned_prompts(self) -> None:
        sent = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(json.loads(request.content)["message"])
            return httpx.Response(200, json={"reply": "ok", "action": "journal_prompt"})

        session = make_session(handler)

        await session.breathing_exercise()
        await session.journal_prompt()

        assert sent == [BREATHING_PROMPT, JOURNAL_PROMPT]
        assert texts(session)[-1] == QUICK_ACTION_TEXT["journal_prompt"]

    async def test_welcome_and_clear(self) -> None:
        events = []
        session = make_session(lambda request: httpx.Response(200, json=REPLY), events)

        session.welcome()
        await session.send("hi")
        assert session.transcript.bubbles[0].text == WELCOME_MESSAGE
        assert session.transcript.bubbles[0].mood == "calm"

        session.clear()

        assert session.transcript.bubbles == []
        assert session.transcript.resources == []
        assert events[-1] == (TranscriptEvent.CLEAR, None)

    def test_hotline_action_and_mood_colors(self) -> None:
        session = ChatSession(ChatApiClient("http://mindease.test"))

        session.show_quick_action("call_hotline")
        session.show_quick_action(None)

        assert texts(session) == [QUICK_ACTION_TEXT["call_hotline"]]
        assert mood_color("urgent") == "bright_red"
        assert mood_color("unknown") == mood_color("neutral")
        assert mood_color(None) == mood_color("neutral")
