"""Main CLI application using Typer."""
import asyncio
import contextlib
import signal

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ..chat.telemetry import ModelMetrics
from .providers import create_session, get_config, require_config

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="llmterm",
    help="Terminal chat client for streaming language-model endpoints",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

ENDPOINT_HELP = "Chat endpoint URL (overrides LLM_ENDPOINT)"
MODEL_HELP = "Model identifier (overrides LLM_MODEL)"
TEMPERATURE_HELP = "Sampling temperature (overrides LLM_TEMPERATURE)"


@app.command(name="tui")
def tui_command(
    endpoint: str | None = typer.Option(None, "--endpoint", "-e", help=ENDPOINT_HELP),
    model: str | None = typer.Option(None, "--model", "-m", help=MODEL_HELP),
    temperature: float | None = typer.Option(None, "--temperature", "-t", help=TEMPERATURE_HELP),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive chat interface."""
    config = get_config(console, endpoint=endpoint, model=model, temperature=temperature)

    async def _tui():
        from ..ui import run_textual_tui

        await run_textual_tui(config=config, log_level=log_level)

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass
    console.print("[dim]Goodbye![/dim]")


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Message to send"),
    endpoint: str | None = typer.Option(None, "--endpoint", "-e", help=ENDPOINT_HELP),
    model: str | None = typer.Option(None, "--model", "-m", help=MODEL_HELP),
    temperature: float | None = typer.Option(None, "--temperature", "-t", help=TEMPERATURE_HELP),
    stats: bool = typer.Option(
        False,
        "--stats",
        "-s",
        help="Print token throughput after the response"
    ),
):
    """Send a single message and stream the reply. Ctrl+C cancels the response."""
    if not prompt.strip():
        console.print("[red]Error: prompt must not be empty[/red]")
        raise typer.Exit(code=1)

    config = require_config(console, endpoint=endpoint, model=model, temperature=temperature)
    metrics = ModelMetrics()

    async def _ask() -> bool:
        controller, client, sink = create_session(config, console)
        loop = asyncio.get_running_loop()
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(signal.SIGINT, controller.cancel)
        try:
            await controller.submit(prompt, on_fragment=metrics.update)
            console.print()
        finally:
            with contextlib.suppress(NotImplementedError):
                loop.remove_signal_handler(signal.SIGINT)
            await client.close()
        return not sink.failed

    ok = asyncio.run(_ask())

    if stats and metrics.turns:
        console.print(f"[dim]{metrics.summary()}[/dim]")
    if not ok:
        raise typer.Exit(code=1)


@app.command(name="config")
def show_config(
    endpoint: str | None = typer.Option(None, "--endpoint", "-e", help=ENDPOINT_HELP),
    model: str | None = typer.Option(None, "--model", "-m", help=MODEL_HELP),
):
    """Show the resolved configuration."""
    config = get_config(console, endpoint=endpoint, model=model)

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="bold cyan", width=16)
    table.add_column("Value")

    table.add_row("Endpoint", config.endpoint or "[red]NOT SET[/red]")
    table.add_row("Model", config.model or "[red]NOT SET[/red]")
    table.add_row("Temperature", f"{config.temperature:g}")
    table.add_row("History size", str(config.max_history))
    table.add_row("Connect timeout", f"{config.connect_timeout:g}s")
    read_timeout = f"{config.read_timeout:g}s" if config.read_timeout is not None else "none"
    table.add_row("Read timeout", read_timeout)

    console.print(table)

    if not config.endpoint or not config.model:
        console.print("[yellow]![/yellow] Set LLM_ENDPOINT and LLM_MODEL to start chatting")
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
