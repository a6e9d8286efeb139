"""Provider factory functions for CLI.

Centralizes creation of the configuration, client and controller from
environment variables and command-line overrides. Hides configuration
details from command implementations.
"""

from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ..chat import ChatConfig, HTTPStreamingClient, SessionController
from ..chat.errors import ChatError, ConfigurationError

# Default console for output
_console = Console()


def get_config(console: Console | None = None, **overrides: Any) -> ChatConfig:
    """Build the chat configuration from the environment and CLI options.

    Args:
        console: Optional Rich console for output
        **overrides: Option values; None means "not given"

    Returns:
        ChatConfig (required fields may still be missing)

    Raises:
        SystemExit: If a value cannot be parsed or is out of range

    Environment variables:
        LLM_ENDPOINT, LLM_MODEL, LLM_TEMPERATURE, LLM_HISTORY_SIZE,
        LLM_CONNECT_TIMEOUT, LLM_READ_TIMEOUT (see llmterm.chat.config)
    """
    con = console or _console
    try:
        return ChatConfig.from_env(**overrides)
    except (ValueError, ValidationError) as e:
        con.print(f"[red]Error: invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


def require_config(console: Console | None = None, **overrides: Any) -> ChatConfig:
    """Get the configuration, exiting if a required field is missing.

    Raises:
        SystemExit: If LLM_ENDPOINT or LLM_MODEL is not set
    """
    con = console or _console
    config = get_config(con, **overrides)
    try:
        config.resolve()
    except ConfigurationError as e:
        con.print(f"[red]Configuration Error: {escape(str(e))}[/red]")
        con.print("[yellow]Please set the required environment variables in your .env file.[/yellow]")
        raise typer.Exit(code=1)
    return config


class ConsoleRenderSink:
    """RenderSink that writes a turn straight to a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or _console
        self.failed = False

    def append_text(self, text: str) -> None:
        self.console.print(text, end="", markup=False, highlight=False, soft_wrap=True)

    def notify_configuration_error(self, error: ConfigurationError) -> None:
        self.failed = True
        self.console.print(f"[red]Configuration Error: {escape(str(error))}[/red]")

    def notify_cancelled(self) -> None:
        self.console.print("\n[yellow]Response cancelled by user[/yellow]")

    def notify_error(self, error: ChatError) -> None:
        self.failed = True
        self.console.print(f"\n[red]Error: {escape(str(error))}[/red]")


def create_session(
    config: ChatConfig,
    console: Console | None = None,
) -> tuple[SessionController, HTTPStreamingClient, ConsoleRenderSink]:
    """Create a controller wired to an HTTP client and a console sink.

    The caller owns the returned client and must close it.
    """
    client = HTTPStreamingClient(config)
    sink = ConsoleRenderSink(console)
    return SessionController(config, client, sink), client, sink
