"""
llmterm: an interactive terminal chat client for streaming language-model endpoints.

Each module hides a specific design decision: the chat package owns the
conversation and the transport, the ui package owns presentation.
"""

__version__ = "0.1.0"

from .chat import (
    ChatConfig,
    HTTPStreamingClient,
    Message,
    ResponseFragment,
    SessionController,
    Transcript,
)

__all__ = [
    "ChatConfig",
    "HTTPStreamingClient",
    "Message",
    "ResponseFragment",
    "SessionController",
    "Transcript",
]
