"""In-memory model of the chat window.

A :class:`Transcript` holds the message bubbles and the resource list
shown beside them.  Renderers subscribe with a listener callback and
redraw on each :class:`TranscriptEvent`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

USER_LABEL = "You"
BOT_LABEL = "MindEase"

# Terminal colours for the mood tag of each bubble
MOOD_COLORS = {
    "calm": "green",
    "sad": "blue",
    "anxious": "yellow",
    "angry": "red",
    "neutral": "bright_black",
    "confused": "magenta",
    "urgent": "bright_red",
}
DEFAULT_MOOD_COLOR = MOOD_COLORS["neutral"]


def mood_color(mood: Optional[str]) -> str:
    return MOOD_COLORS.get(mood or "", DEFAULT_MOOD_COLOR)


@dataclass
class Bubble:
    who: str
    text: str
    mood: Optional[str] = None
    pending: bool = False

    @property
    def label(self) -> str:
        return USER_LABEL if self.who == "user" else BOT_LABEL


@dataclass(frozen=True)
class ResourceLink:
    title: str
    href: str

    @classmethod
    def from_payload(cls, item: Any) -> Optional["ResourceLink"]:
        """Build a link from one entry of a reply's ``resources``; skip non-objects."""
        if not isinstance(item, dict):
            return None
        url = item.get("url")
        return cls(
            title=str(item.get("title") or url or "Resource"),
            href=str(url or "#"),
        )


class TranscriptEvent(str, Enum):
    APPEND = "append"
    REMOVE = "remove"
    CLEAR = "clear"
    RESOURCES = "resources"


Listener = Callable[[TranscriptEvent, Any], None]


class Transcript:
    def __init__(self, listener: Optional[Listener] = None) -> None:
        self.bubbles: list[Bubble] = []
        self.resources: list[ResourceLink] = []
        self._listener = listener

    def append(self, bubble: Bubble) -> Bubble:
        self.bubbles.append(bubble)
        self._notify(TranscriptEvent.APPEND, bubble)
        return bubble

    def remove(self, bubble: Bubble) -> None:
        """Remove ``bubble`` if it is still shown (it may have been cleared)."""
        for index, shown in enumerate(self.bubbles):
            if shown is bubble:
                del self.bubbles[index]
                self._notify(TranscriptEvent.REMOVE, bubble)
                return

    def show_resources(self, items: Any) -> None:
        """Replace the resource list with the valid entries of ``items``."""
        links: list[ResourceLink] = []
        if isinstance(items, list):
            for item in items:
                link = ResourceLink.from_payload(item)
                if link is not None:
                    links.append(link)
        self.resources = links
        self._notify(TranscriptEvent.RESOURCES, links)

    def clear(self) -> None:
        self.bubbles.clear()
        self.resources = []
        self._notify(TranscriptEvent.CLEAR, None)

    def _notify(self, event: TranscriptEvent, payload: Any) -> None:
        if self._listener is not None:
            self._listener(event, payload)
