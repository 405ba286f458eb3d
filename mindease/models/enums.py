"""Enumerations used across models."""

from enum import Enum


class Mood(str, Enum):
    """Mood the model detected in the user's message.

    ``URGENT`` signals a possible crisis; replies tagged with it are expected
    to carry hotline resources.
    """

    CALM = "calm"
    SAD = "sad"
    ANXIOUS = "anxious"
    ANGRY = "angry"
    NEUTRAL = "neutral"
    CONFUSED = "confused"
    URGENT = "urgent"


class Tone(str, Enum):
    """Register the reply was written in."""

    CALMING = "calming"
    ENCOURAGING = "encouraging"
    INFORMATIONAL = "informational"
    REFLECTIVE = "reflective"


class QuickAction(str, Enum):
    """Follow-up actions the client knows how to render.

    The ``action`` field of a reply is an open string; values outside this
    enum are passed through by the server and ignored by the client.
    """

    BREATHING_EXERCISE = "breathing_exercise"
    CALL_HOTLINE = "call_hotline"
    JOURNAL_PROMPT = "journal_prompt"
