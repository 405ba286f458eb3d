"""Chat session driving the transcript from user input.

A session allows one request in flight at a time: a send issued while
another is outstanding is dropped, not queued.
"""

from __future__ import annotations

from typing import Any, Optional

from loguru import logger

from ..models.enums import QuickAction
from .api_client import ChatApiClient, ChatClientError
from .transcript import Bubble, Transcript

WELCOME_MESSAGE = (
    "Hi - I'm MindEase. I'm here to listen and offer calming tips. "
    "Tell me how you are feeling."
)
THINKING_TEXT = "Thinking..."
REPLY_FALLBACK = "Sorry, I couldn't compose a reply."
ERROR_PREFIX = "⚠️ Error: "

BREATHING_PROMPT = "I need a short guided breathing exercise."
JOURNAL_PROMPT = "Give me a quick journaling prompt to reflect on my day."

QUICK_ACTION_TEXT = {
    QuickAction.BREATHING_EXERCISE.value: (
        "Try this: 4-4-4 breathing for 3 minutes. "
        "Breathe in 4s - hold 4s - out 4s. Repeat slowly."
    ),
    QuickAction.CALL_HOTLINE.value: (
        "It sounds urgent. If you are in immediate danger "
        "call your local emergency number now."
    ),
    QuickAction.JOURNAL_PROMPT.value: (
        "Try writing 3 things you are grateful for right now. Keep it simple."
    ),
}


class ChatSession:
    def __init__(self, api: ChatApiClient, transcript: Optional[Transcript] = None) -> None:
        self.api = api
        self.transcript = transcript or Transcript()
        self._sending = False

    @property
    def is_sending(self) -> bool:
        return self._sending

    def welcome(self) -> None:
        self._append_bot_action(WELCOME_MESSAGE)

    async def send(self, message: str) -> Optional[dict[str, Any]]:
        """Send ``message`` and render the outcome into the transcript.

        Returns the reply payload, or ``None`` when the message was blank,
        dropped by the single-flight guard, or failed.  Failures are
        rendered as an error bubble rather than raised.
        """
        if not message or not message.strip():
            return None
        if self._sending:
            logger.debug("Request already in progress; dropping message")
            return None

        self._sending = True
        try:
            self.transcript.append(Bubble("user", message))
            placeholder = self.transcript.append(Bubble("bot", THINKING_TEXT, pending=True))

            try:
                data = await self.api.send(message)
            except ChatClientError as exc:
                logger.debug("Chat request failed: {}", exc)
                self.transcript.remove(placeholder)
                self.transcript.append(Bubble("bot", f"{ERROR_PREFIX}{exc}", mood="neutral"))
                return None

            self.transcript.remove(placeholder)
            self.transcript.append(
                Bubble("bot", str(data.get("reply") or REPLY_FALLBACK), mood=_mood_tag(data.get("mood")))
            )
            self.transcript.show_resources(data.get("resources") or [])
            if data.get("action"):
                self.show_quick_action(data["action"])
            return data
        finally:
            self._sending = False

    def show_quick_action(self, action: Any) -> None:
        """Render the canned follow-up for ``action``; unknown actions render nothing."""
        text = QUICK_ACTION_TEXT.get(action) if isinstance(action, str) else None
        if text:
            self._append_bot_action(text)

    async def breathing_exercise(self) -> Optional[dict[str, Any]]:
        return await self.send(BREATHING_PROMPT)

    async def journal_prompt(self) -> Optional[dict[str, Any]]:
        return await self.send(JOURNAL_PROMPT)

    def clear(self) -> None:
        self.transcript.clear()

    def _append_bot_action(self, text: str) -> None:
        self.transcript.append(Bubble("bot", text, mood="calm"))


def _mood_tag(mood: Any) -> Optional[str]:
    return mood if isinstance(mood, str) and mood else None
