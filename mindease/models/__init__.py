"""Expose commonly used model classes at the package level.

Importing these classes here allows consumers to write concise imports like::

    from mindease.models import ChatRequest, ChatResponse, Mood
"""

from .chat_request import ChatRequest  # noqa: F401
from .chat_response import ChatResponse, ErrorResponse, Resource  # noqa: F401
from .enums import Mood, QuickAction, Tone  # noqa: F401
