"""HTTP client for the ``/api/chat`` endpoint using httpx."""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_BASE_URL = "http://localhost:8000"
CHAT_PATH = "/api/chat"


class ChatClientError(Exception):
    """Raised when a chat request cannot produce a usable reply.

    The message is suitable for showing to the user as-is.
    """


class ChatApiClient:
    """Thin async wrapper around an :class:`httpx.AsyncClient`.

    No timeout is imposed by default; the server decides how long a
    completion may take.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "ChatApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send(self, message: str) -> dict[str, Any]:
        """POST ``message`` and return the decoded reply object.

        Raises
        ------
        ChatClientError
            On network failure, a non-2xx status, or a body that is not a
            JSON object.
        """
        try:
            response = await self._client.post(CHAT_PATH, json={"message": message})
        except httpx.HTTPError as exc:
            raise ChatClientError(str(exc) or "Network error") from exc

        if not response.is_success:
            raise ChatClientError(_error_message(response))

        try:
            data = response.json()
        except ValueError as exc:
            raise ChatClientError("Invalid JSON response from server") from exc

        if not isinstance(data, dict):
            raise ChatClientError("Invalid response format from server")
        return data


def _error_message(response: httpx.Response) -> str:
    """Pick the most useful message out of an error response."""
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        message = data.get("error") or data.get("message")
        if message:
            return str(message)
    return f"HTTP {response.status_code}: {response.reason_phrase}"
