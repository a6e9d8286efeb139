"""Render sink connecting the session controller to the TUI.

Hides the details of how the TUI receives updates from a turn. Every
update is marshalled onto the app thread, so the controller never touches
widgets directly.
"""

import threading
from typing import TYPE_CHECKING, Any

from rich.markup import escape

from ..chat.errors import ChatError, ConfigurationError
from .config import CONFIG_ERROR_HINT, NOTIFY_LONG, NOTIFY_SHORT, LogLevel

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import ChatHistoryWidget


class TUIRenderSink:
    """RenderSink implementation writing into the chat view.

    Uses call_from_thread when invoked off the app thread.
    """

    def __init__(self, app: "App") -> None:
        self.app = app

    def dispatch(self, func: Any, *args: Any, **kwargs: Any) -> None:
        """Run func on the app thread."""
        if self.app._thread_id != threading.get_ident():
            self.app.call_from_thread(func, *args, **kwargs)
        else:
            func(*args, **kwargs)

    def _chat(self) -> "ChatHistoryWidget":
        from .widgets import ChatHistoryWidget
        return self.app.query_one("#chat-history", ChatHistoryWidget)

    def append_text(self, text: str) -> None:
        self.dispatch(lambda: self._chat().append_response(text))

    def notify_configuration_error(self, error: ConfigurationError) -> None:
        def _show() -> None:
            self._chat().add_notice(
                f"[red]Configuration Error: {escape(str(error))}[/]\n[yellow]{CONFIG_ERROR_HINT}[/]"
            )
            self.app.notify("Configuration error", severity="error", timeout=NOTIFY_LONG)
        self.dispatch(_show)

    def notify_cancelled(self) -> None:
        def _show() -> None:
            self._chat().add_notice("[yellow]Response cancelled by user[/]")
            self.app.notify("Cancelled", severity="warning", timeout=NOTIFY_SHORT)
        self.dispatch(_show)

    def notify_error(self, error: ChatError) -> None:
        def _show() -> None:
            self._chat().add_notice(f"[red]Error: {escape(str(error))}[/]")
            self.app.notify(f"Error: {str(error)[:50]}", severity="error", timeout=NOTIFY_LONG)
        self.dispatch(_show)

    def debug_callback(self, level: str, component: str, message: str) -> None:
        """Route trace messages from the controller and client to the log panel."""
        from .widgets import DebugPanel

        def _write() -> None:
            panel: DebugPanel = self.app.query_one("#debug-panel", DebugPanel)
            panel.log_message(component, message, LogLevel.from_string(level))
        self.dispatch(_write)
