"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history management
- Streaming chat rendering and auto-scroll
- Metrics, mode and key hint display
- Trace log rendering
"""

from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click, MouseScrollDown, MouseScrollUp
from textual.message import Message
from textual.widgets import Input, RichLog, Static

from ..chat.telemetry import ModelMetrics
from .config import ASSISTANT_LABEL, SPINNER_FRAMES, USER_LABEL, LogLevel
from .models import ChatEntry
from .modes import KEY_BINDINGS, Mode


class HistoryInput(Input):
    """Input widget with command history support.

    Use Up/Down arrow keys to navigate through history.
    Multi-line pastes are converted to single line (newlines become spaces).
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._current_input: str = ""

    def _on_paste(self, event) -> None:
        """Handle paste events - convert newlines to spaces for single-line input."""
        from textual.events import Paste

        if isinstance(event, Paste) and event.text:
            clean_text = " ".join(event.text.split())
            self.insert_text_at_cursor(clean_text)
            event.prevent_default()
            event.stop()

    def _on_key(self, event) -> None:
        """Handle key events for history navigation."""
        if event.key == "up":
            if self._history:
                if self._history_index == -1:
                    self._current_input = self.value
                    self._history_index = len(self._history) - 1
                elif self._history_index > 0:
                    self._history_index -= 1
                self.value = self._history[self._history_index]
                self.cursor_position = len(self.value)
            event.prevent_default()
            event.stop()
        elif event.key == "down":
            if self._history_index != -1:
                if self._history_index < len(self._history) - 1:
                    self._history_index += 1
                    self.value = self._history[self._history_index]
                else:
                    self._history_index = -1
                    self.value = self._current_input
                self.cursor_position = len(self.value)
            event.prevent_default()
            event.stop()

    def add_to_history(self, command: str) -> None:
        """Add a command to history."""
        if command and (not self._history or self._history[-1] != command):
            self._history.append(command)
        self._history_index = -1
        self._current_input = ""


class ChatInputBar(Horizontal):
    """Single-line message input. Enter submits."""

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def compose(self):
        yield Static("> ", id="input-prompt")
        yield HistoryInput(id="chat-input", placeholder="Type a message and press Enter")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        text_input = self.query_one("#chat-input", HistoryInput)
        value = event.value.strip()
        if not value:
            return
        text_input.add_to_history(value)
        text_input.value = ""
        self.post_message(self.Submitted(value))

    def set_enabled(self, enabled: bool) -> None:
        """Enable and focus the input, or disable it so keys reach the app."""
        text_input = self.query_one("#chat-input", HistoryInput)
        text_input.disabled = not enabled
        if enabled:
            text_input.focus()


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat transcript with a live streaming reply.

    Follows new output while auto_scroll is on. Manual scrolling turns it
    off; scroll_bottom() or a new submission turns it back on.
    """

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._entries: list[ChatEntry] = []
        self._live_entry: ChatEntry | None = None
        self._live_body: Static | None = None
        self.auto_scroll = True

    @property
    def entries(self) -> list[ChatEntry]:
        return list(self._entries)

    def add_message(self, role: str, content: str) -> None:
        """Add a complete message to the chat view."""
        entry = ChatEntry(role=role, content=content)
        self._entries.append(entry)
        self._mount_entry(entry)
        self._after_change()

    def begin_response(self) -> None:
        """Start a live assistant entry that receives streamed text."""
        entry = ChatEntry(role="assistant", complete=False)
        self._entries.append(entry)
        self._live_entry = entry
        self._live_body = self._mount_entry(entry)
        self._after_change()

    def append_response(self, text: str) -> None:
        """Append streamed text to the live entry."""
        if self._live_entry is None:
            self.begin_response()
        assert self._live_entry is not None and self._live_body is not None
        self._live_entry.append(text)
        self._live_body.update(Text(self._live_entry.content))
        self._after_change()

    def end_response(self) -> None:
        """Finalize the live entry, removing it if nothing was streamed."""
        entry = self._live_entry
        if entry is None:
            return
        entry.complete = True
        if not entry.content and self._live_body is not None and self._live_body.parent is not None:
            self._live_body.parent.remove()
            self._entries.remove(entry)
        self._live_entry = None
        self._live_body = None
        self._after_change()

    def add_notice(self, markup: str) -> None:
        """Add a status line (cancellation, errors) using Rich markup."""
        self._entries.append(ChatEntry(role="notice", content=markup))
        self.mount(Static(markup, classes="chat-notice"))
        self._after_change()

    def get_last_response(self) -> str | None:
        """Get the last complete assistant response."""
        for entry in reversed(self._entries):
            if entry.role == "assistant" and entry.complete:
                return entry.content
        return None

    def _mount_entry(self, entry: ChatEntry) -> Static:
        if entry.role == "user":
            label = f"[bold yellow]{USER_LABEL}:[/]"
            css_class = "user-message"
        else:
            label = f"[bold green]{ASSISTANT_LABEL}:[/]"
            css_class = "assistant-message"

        timestamp = entry.timestamp.strftime("%H:%M:%S")
        body = Static(Text(entry.content), classes="message-content")
        header = Static(f"{label} [dim]{timestamp}[/]", classes="message-header")
        self.mount(Vertical(header, body, classes=f"chat-message {css_class}"))
        return body

    def _after_change(self) -> None:
        count = sum(1 for entry in self._entries if entry.role != "notice")
        self.border_subtitle = f"{count} messages"
        if self.auto_scroll:
            self.scroll_end(animate=False)

    def on_mouse_scroll_up(self, event: MouseScrollUp) -> None:
        self.auto_scroll = False

    def on_mouse_scroll_down(self, event: MouseScrollDown) -> None:
        self.auto_scroll = False

    def scroll_lines(self, lines: int) -> None:
        """Scroll by a number of lines (negative scrolls up)."""
        self.auto_scroll = False
        self.scroll_relative(y=lines, animate=False)

    def scroll_half_page(self, down: bool = True) -> None:
        half = max(1, self.size.height // 2)
        self.scroll_lines(half if down else -half)

    def scroll_top(self) -> None:
        self.auto_scroll = False
        self.scroll_home(animate=False)

    def scroll_bottom(self) -> None:
        self.auto_scroll = True
        self.scroll_end(animate=False)


class MetricsPanel(Static):
    """Panel showing the active model and its throughput."""

    BORDER_TITLE = "Model"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._metrics = ModelMetrics()

    def on_mount(self) -> None:
        self._update_display()

    def set_model(self, model: str) -> None:
        """Show the configured model before any response arrives."""
        if not self._metrics.model:
            self._metrics.model = model
        self._update_display()

    def show_metrics(self, metrics: ModelMetrics) -> None:
        self._metrics = metrics
        self._update_display()

    def _update_display(self) -> None:
        m = self._metrics
        lines = [
            f"[bold cyan]Model:[/] {m.model or 'unknown'}",
            f"[bold yellow]Speed:[/] {m.tokens_per_second:.1f} tok/s",
            f"[bold magenta]Tokens:[/] {m.prompt_tokens + m.completion_tokens:,} "
            f"[dim]({m.prompt_tokens:,}/{m.completion_tokens:,})[/]",
            f"[bold green]Turns:[/] {m.turns}",
        ]
        self.update("\n".join(lines))

    def get_plain_text(self) -> str:
        """Get metrics as plain text for clipboard."""
        return self._metrics.summary()

    def on_click(self, event: Click) -> None:
        event.stop()
        self.app.copy_to_clipboard(self.get_plain_text())
        self.app.notify("Metrics copied", timeout=2)


class ModeIndicator(Static):
    """Shows the current mode, with a spinner while responding."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._mode = Mode.INPUT
        self._frame = 0

    def on_mount(self) -> None:
        self._update_display()

    def set_mode(self, mode: Mode) -> None:
        self._mode = mode
        self._frame = 0
        self._update_display()

    def advance(self) -> None:
        """Step the spinner (called from a timer)."""
        self._frame = (self._frame + 1) % len(SPINNER_FRAMES)
        if self._mode is Mode.RESPONDING:
            self._update_display()

    def _update_display(self) -> None:
        if self._mode is Mode.RESPONDING:
            self.update(f"[yellow]AI responding {SPINNER_FRAMES[self._frame]}[/]")
        elif self._mode is Mode.NORMAL:
            self.update("[yellow]NORMAL MODE[/]")
        else:
            self.update("[yellow]INPUT MODE[/]")


class KeyHints(Static):
    """Grid of key bindings for the current mode."""

    BINDS_PER_ROW = 2

    def show_mode(self, mode: Mode) -> None:
        binds = KEY_BINDINGS[mode]
        key_width = max(len(key) for key, _ in binds)
        desc_width = max(len(desc) for _, desc in binds)

        rows = []
        for i in range(0, len(binds), self.BINDS_PER_ROW):
            cells = [
                f"[green]{key:<{key_width}}[/]: {desc:<{desc_width}}"
                for key, desc in binds[i:i + self.BINDS_PER_ROW]
            ]
            rows.append("        ".join(cells))
        self.update("\n".join(rows))


class DebugPanel(RichLog):
    """Trace panel for real-time session logging with level filtering.

    Hidden by default, shown with --log-level or toggled with Ctrl+T.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Session": "green",
        "HTTP": "magenta",
    }

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log_message(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Add an entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime("%H:%M:%S")
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        line = Text.from_markup(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}]\\[{component}][/] "
        )
        line.append(message)
        self.write(line)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
