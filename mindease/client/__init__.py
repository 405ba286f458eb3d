"""Terminal client for the MindEase chat endpoint."""

from .api_client import ChatApiClient, ChatClientError  # noqa: F401
from .session import ChatSession  # noqa: F401
from .transcript import Bubble, ResourceLink, Transcript, TranscriptEvent  # noqa: F401
