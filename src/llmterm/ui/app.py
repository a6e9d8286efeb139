"""Main Textual TUI application.

Orchestrates the UI components: routes user actions through the mode state
machine, runs each turn of the session controller as a background worker,
and turns controller callbacks into widget updates.
"""

import asyncio
import contextlib
import dataclasses
from typing import Any

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header

from ..chat.client import HTTPStreamingClient, StreamingClient
from ..chat.config import ChatConfig
from ..chat.models import ResponseFragment
from ..chat.session import SessionController
from ..chat.telemetry import ModelMetrics
from .callbacks import TUIRenderSink
from .config import NOTIFY_SHORT, SCROLL_LINE_STEP, SPINNER_INTERVAL, LogLevel
from .modes import Mode, ModeStateMachine
from .styles import APP_CSS
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    KeyHints,
    MetricsPanel,
    ModeIndicator,
)

# Textual action name -> state machine action
_ACTION_GATES = {
    "cancel_response": "cancel",
    "enter_input": "enter_input",
    "exit_input": "exit_input",
    "quit_chat": "quit",
    "scroll_down": "scroll",
    "scroll_up": "scroll",
    "scroll_top": "scroll",
    "scroll_bottom": "scroll",
    "half_page_down": "scroll",
    "half_page_up": "scroll",
}


class ChatTextualApp(App):
    """Textual TUI for streaming chat."""

    CSS = APP_CSS
    TITLE = "llmterm"

    BINDINGS = [
        Binding("ctrl+c", "cancel_response", "Cancel", priority=True),
        Binding("escape", "exit_input", "Normal mode"),
        Binding("i", "enter_input", "Input mode"),
        Binding("q", "quit_chat", "Quit"),
        Binding("j", "scroll_down", "Down", show=False),
        Binding("k", "scroll_up", "Up", show=False),
        Binding("g", "scroll_top", "Top", show=False),
        Binding("G", "scroll_bottom", "Bottom", show=False),
        Binding("ctrl+d", "half_page_down", "Half page down", show=False),
        Binding("ctrl+u", "half_page_up", "Half page up", show=False),
        Binding("ctrl+t", "toggle_debug", "Trace log"),
        Binding("ctrl+y", "copy_last_response", "Copy response"),
    ]

    def __init__(
        self,
        config: ChatConfig,
        client: StreamingClient | None = None,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._config = config
        self._client = client or HTTPStreamingClient(config)
        self._log_level = log_level
        self._sink = TUIRenderSink(self)
        self._controller = SessionController(config, self._client, self._sink)
        self._metrics = ModelMetrics()
        self._mode_machine = ModeStateMachine(
            on_submit=self._start_turn,
            on_cancel=self._cancel_turn,
            on_change=self._on_mode_change,
        )
        self._spinner_timer: Any | None = None

    @property
    def controller(self) -> SessionController:
        return self._controller

    @property
    def mode(self) -> Mode:
        return self._mode_machine.mode

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal(id="main-row"):
            yield ChatHistoryWidget(id="chat-history")
            yield MetricsPanel(id="metrics")

        yield DebugPanel(id="debug-panel")

        with Horizontal(id="input-row"):
            yield ChatInputBar(id="chat-input-bar")
            yield ModeIndicator(id="mode-indicator")

        yield KeyHints(id="key-hints")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.theme = "catppuccin-mocha"

        if self._log_level is not None:
            log_panel = self.query_one("#debug-panel", DebugPanel)
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.log_message("TUI", f"Log panel enabled with level: {self._log_level.upper()}", LogLevel.INFO)

        self._controller.set_debug_callback(self._sink.debug_callback)
        if isinstance(self._client, HTTPStreamingClient):
            self._client.set_debug_callback(self._sink.debug_callback)

        self.sub_title = f"{self._config.model or 'no model'} | {self._config.endpoint or 'no endpoint'}"
        self.query_one("#metrics", MetricsPanel).set_model(self._config.model or "")

        self._spinner_timer = self.set_interval(SPINNER_INTERVAL, self._advance_spinner, pause=True)
        self._on_mode_change(self._mode_machine.mode, self._mode_machine.mode)

    def on_unmount(self) -> None:
        """Cancel any running turn when the app exits."""
        self._controller.cancel()

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Gate key bindings by the current mode."""
        gate = _ACTION_GATES.get(action)
        if gate is None:
            return True
        return self._mode_machine.allows(gate)

    # Mode machine callbacks

    def _on_mode_change(self, old: Mode, new: Mode) -> None:
        self.query_one("#mode-indicator", ModeIndicator).set_mode(new)
        self.query_one("#key-hints", KeyHints).show_mode(new)
        self.query_one("#chat-input-bar", ChatInputBar).set_enabled(new is Mode.INPUT)
        if new is not Mode.INPUT:
            self.set_focus(None)
        if self._spinner_timer is not None:
            if new is Mode.RESPONDING:
                self._spinner_timer.resume()
            else:
                self._spinner_timer.pause()
        self.refresh_bindings()

    def _start_turn(self, text: str) -> None:
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        chat.auto_scroll = True
        chat.add_message("user", text)
        chat.begin_response()
        self._run_turn(text)

    def _cancel_turn(self) -> None:
        if self._controller.cancel():
            self._sink.debug_callback("info", "TUI", "Cancel requested by user")

    def _advance_spinner(self) -> None:
        self.query_one("#mode-indicator", ModeIndicator).advance()

    # Turn execution

    @work(exclusive=True, group="chat")
    async def _run_turn(self, text: str) -> None:
        """Run one controller turn as a background async worker."""
        accepted = await self._controller.submit(
            text,
            on_fragment=self._handle_fragment,
            on_complete=self._handle_complete,
        )
        if not accepted:
            self._sink.debug_callback("warning", "TUI", "Turn rejected: a response is already streaming")
            self._sink.dispatch(self._finish_turn)

    def _handle_fragment(self, fragment: ResponseFragment) -> None:
        if self._metrics.update(fragment):
            snapshot = dataclasses.replace(self._metrics)
            self._sink.dispatch(self.query_one("#metrics", MetricsPanel).show_metrics, snapshot)

    def _handle_complete(self) -> None:
        self._sink.dispatch(self._finish_turn)

    def _finish_turn(self) -> None:
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        chat.end_response()
        self._mode_machine.complete()
        chat.scroll_bottom()

    # Events and actions

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        self._mode_machine.submit(event.value)

    def action_cancel_response(self) -> None:
        self._mode_machine.request_cancel()

    def action_quit_chat(self) -> None:
        self.exit()

    def action_enter_input(self) -> None:
        self._mode_machine.enter_input()

    def action_exit_input(self) -> None:
        self._mode_machine.exit_input()

    def action_scroll_down(self) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).scroll_lines(SCROLL_LINE_STEP)

    def action_scroll_up(self) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).scroll_lines(-SCROLL_LINE_STEP)

    def action_scroll_top(self) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).scroll_top()

    def action_scroll_bottom(self) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).scroll_bottom()

    def action_half_page_down(self) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).scroll_half_page(down=True)

    def action_half_page_up(self) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).scroll_half_page(down=False)

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=NOTIFY_SHORT)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied", timeout=NOTIFY_SHORT)
        else:
            self.notify("No response to copy", severity="warning", timeout=NOTIFY_SHORT)


async def run_textual_tui(
    config: ChatConfig,
    log_level: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        config: Chat configuration (missing fields are reported in the chat view)
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    client = HTTPStreamingClient(config)
    app = ChatTextualApp(config=config, client=client, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(RuntimeError):
            await client.close()
