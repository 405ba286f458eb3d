"""
Command-line interface for MindEase: run the API or chat with it.
"""

import asyncio
from collections.abc import Coroutine
from typing import Any, Optional

import typer

from ..config.app_config import get_app_config
from ..utils.logger import setup_logging
from .api_client import DEFAULT_BASE_URL, ChatApiClient
from .session import ChatSession
from .transcript import Bubble, ResourceLink, Transcript, TranscriptEvent, mood_color

app = typer.Typer(help="MindEase chat tools")

HELP_TEXT = "Commands: /breathe, /journal, /clear, /quit"


# MARK: - Rendering


class TerminalRenderer:
    """Transcript listener that prints bubbles as they are added."""

    def __init__(self) -> None:
        self._pending_width = 0

    def __call__(self, event: TranscriptEvent, payload: Any) -> None:
        if event is TranscriptEvent.APPEND:
            self._print_bubble(payload)
        elif event is TranscriptEvent.REMOVE and payload.pending:
            self._erase_pending()
        elif event is TranscriptEvent.RESOURCES:
            self._print_resources(payload)
        elif event is TranscriptEvent.CLEAR:
            typer.clear()

    def _print_bubble(self, bubble: Bubble) -> None:
        if bubble.pending:
            line = f"{bubble.label}: {bubble.text}"
            self._pending_width = len(line)
            typer.secho(line, dim=True, nl=False)
            return

        prefix = typer.style(f"{bubble.label}:", bold=True)
        if bubble.mood:
            tag = typer.style(f"[{bubble.mood.upper()}]", fg=mood_color(bubble.mood))
            prefix = f"{prefix} {tag}"
        typer.echo(f"{prefix} {bubble.text}")

    def _erase_pending(self) -> None:
        typer.echo("\r" + " " * self._pending_width + "\r", nl=False)
        self._pending_width = 0

    def _print_resources(self, links: list[ResourceLink]) -> None:
        if not links:
            return
        typer.secho("Resources:", bold=True)
        for link in links:
            typer.echo(f"  - {link.title} <{link.href}>")


# MARK: - Commands


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind (default: APP_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind (default: APP_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the MindEase API server."""
    import uvicorn

    app_config = get_app_config()
    uvicorn.run(
        "mindease.main:app",
        host=host or app_config.app_host,
        port=port or app_config.app_port,
        reload=reload,
        log_level="info",
    )


@app.command()
def chat(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the MindEase service"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
) -> None:
    """Start an interactive chat session."""
    setup_logging(level="DEBUG" if verbose else "WARNING")

    async def _chat() -> None:
        async with _build_api(base_url) as api:
            session = ChatSession(api, Transcript(TerminalRenderer()))
            session.welcome()
            typer.secho(HELP_TEXT, dim=True)
            while True:
                try:
                    line = await asyncio.to_thread(
                        typer.prompt, "", default="", show_default=False, prompt_suffix="> "
                    )
                except typer.Abort:
                    typer.echo()
                    return

                command = line.strip().lower()
                if command in ("/quit", "/exit"):
                    return
                if command == "/clear":
                    session.clear()
                elif command == "/breathe":
                    await session.breathing_exercise()
                elif command == "/journal":
                    await session.journal_prompt()
                elif command == "/help":
                    typer.secho(HELP_TEXT, dim=True)
                else:
                    await session.send(line.strip())

    _run_with_error_handling(_chat())


@app.command()
def ask(
    message: str = typer.Argument(..., help="The message to send"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the MindEase service"
    ),
) -> None:
    """Send a single message and print the reply."""
    setup_logging(level="WARNING")

    async def _ask() -> bool:
        async with _build_api(base_url) as api:
            session = ChatSession(api, Transcript(TerminalRenderer()))
            return await session.send(message) is not None

    if not _run_with_error_handling(_ask()):
        raise typer.Exit(1)


# MARK: - Private Helpers


def _build_api(base_url: str) -> ChatApiClient:
    return ChatApiClient(base_url)


def _run_with_error_handling(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run an async coroutine, exiting cleanly on Ctrl+C.

    Request failures never reach here; the session renders them as error
    bubbles.
    """
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        typer.echo("\nStopped")
        raise typer.Exit(0)


if __name__ == "__main__":
    app()
