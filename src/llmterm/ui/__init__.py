"""Terminal UI module for llmterm.

Provides a Textual-based TUI around the chat session controller.

Module structure (each module hides a design decision):
- modes.py: Which user actions are accepted in which mode
- models.py: Rendered chat entries
- widgets.py: Custom widgets (input history, streaming chat, metrics, trace log)
- styles.py: CSS styling (layout decisions)
- callbacks.py: Render sink (how the TUI receives turn output)
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatTextualApp, run_textual_tui
from .callbacks import TUIRenderSink
from .config import LogLevel
from .models import ChatEntry
from .modes import KEY_BINDINGS, Mode, ModeStateMachine
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, MetricsPanel

__all__ = [
    "ChatEntry",
    "ChatHistoryWidget",
    "ChatInputBar",
    "ChatTextualApp",
    "DebugPanel",
    "KEY_BINDINGS",
    "LogLevel",
    "MetricsPanel",
    "Mode",
    "ModeStateMachine",
    "TUIRenderSink",
    "run_textual_tui",
]
