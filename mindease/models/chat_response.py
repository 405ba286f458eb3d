"""Response models for the chat API."""

from pydantic import BaseModel, Field

from .enums import Mood, Tone

MAX_RESOURCES = 3


class Resource(BaseModel):
    """A link the assistant recommends alongside its reply."""

    title: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    """The sanitized, structured reply returned on success."""

    reply: str = Field(..., min_length=1, description="Empathetic reply text.")
    mood: Mood = Field(default=Mood.NEUTRAL, description="Mood detected in the user's message.")
    tone: Tone = Field(default=Tone.INFORMATIONAL, description="Tone of the reply.")
    resources: list[Resource] = Field(
        default_factory=list,
        max_length=MAX_RESOURCES,
        description="Up to three helpful links.",
    )
    action: str | None = Field(
        default=None,
        description="Optional quick action such as 'breathing_exercise'.",
    )


class ErrorResponse(BaseModel):
    """Body of every non-2xx response from the chat endpoint."""

    error: str
    detail: str | None = None
    raw: str | None = Field(
        default=None,
        description="Leading excerpt of unparseable model output.",
    )
