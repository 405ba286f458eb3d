"""Utilities for turning raw model output into a :class:`ChatResponse`.

Model output is untrusted.  Parsing is strict JSON first, then a single
best-effort fallback that decodes the outermost brace-delimited substring
(models sometimes wrap the object in prose).  Sanitizing fills defaults so
the client can rely on every field being present and well-typed.
"""

from __future__ import annotations

import json
import re
from typing import Any

from loguru import logger

from ..models.chat_response import MAX_RESOURCES, ChatResponse, Resource
from ..models.enums import Mood, Tone
from .error_handler import ModelOutputError

RAW_EXCERPT_LENGTH = 200

_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)


def parse_model_output(text: str) -> object:
    """Decode ``text`` as JSON, falling back to its first ``{`` .. last ``}`` span.

    Raises
    ------
    ModelOutputError
        If neither the whole text nor the extracted span is valid JSON.  The
        error carries the first 200 characters of ``text`` as ``raw``.
    """
    try:
        return json.loads(text)
    except ValueError:
        pass

    match = _OBJECT_PATTERN.search(text)
    if match is not None:
        try:
            parsed = json.loads(match.group(0))
        except ValueError:
            pass
        else:
            logger.debug("Recovered JSON object embedded in model output")
            return parsed

    raise ModelOutputError(raw=text[:RAW_EXCERPT_LENGTH])


def sanitize_model_output(parsed: object) -> ChatResponse:
    """Coerce a decoded payload into a valid :class:`ChatResponse`.

    Raises
    ------
    ModelOutputError
        If the payload has no usable ``reply`` text.
    """
    data: dict[str, Any] = parsed if isinstance(parsed, dict) else {}

    reply = _as_text(data.get("reply"))
    if not reply:
        raise ModelOutputError("Empty response from model")

    return ChatResponse(
        reply=reply,
        mood=_coerce_enum(Mood, data.get("mood"), Mood.NEUTRAL),
        tone=_coerce_enum(Tone, data.get("tone"), Tone.INFORMATIONAL),
        resources=_sanitize_resources(data.get("resources")),
        action=_as_text(data.get("action")) or None,
    )


def _as_text(value: object) -> str:
    """Return ``value`` as trimmed text; falsy values (None, 0, "", empty containers) become ``""``."""
    if not value:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value).strip()
    return str(value).strip()


def _coerce_enum(enum_cls: type, value: object, default: Any) -> Any:
    text = _as_text(value).lower()
    try:
        return enum_cls(text)
    except ValueError:
        if text:
            logger.debug("Unknown {} value {!r}; using {}", enum_cls.__name__, text, default.value)
        return default


def _sanitize_resources(value: object) -> list[Resource]:
    if not isinstance(value, list):
        return []

    resources: list[Resource] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        url = _as_text(item.get("url"))
        title = _as_text(item.get("title")) or url or "Resource"
        resources.append(Resource(title=title, url=url or "#"))
        if len(resources) == MAX_RESOURCES:
            break
    return resources
