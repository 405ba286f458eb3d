"""Prompt templates for the chat completion."""

from .system import SYSTEM_PROMPT, USER_PROMPT  # noqa: F401
