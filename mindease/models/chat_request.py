"""Request model for the chat API."""

from pydantic import BaseModel, Field, StrictStr, field_validator


class ChatRequest(BaseModel):
    """Represents a request payload for a chat message.

    ``message`` must be a JSON string with at least one non-whitespace
    character; it is stored trimmed.  Unknown keys are ignored.
    """

    message: StrictStr = Field(..., description="The user's message content.")

    @field_validator("message")
    @classmethod
    def _strip_message(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("message must not be blank")
        return stripped
