"""Chat core: transcript, streaming client and session controller.

Module structure (each module hides a design decision):
- models.py: Wire and transcript data shapes
- errors.py: Failure taxonomy of a turn
- config.py: Where connection settings come from
- transcript.py: History storage and trimming
- client.py: Transport and stream decoding
- session.py: Turn orchestration, cancellation and callbacks
- telemetry.py: Throughput derivation
"""

from .client import HTTPStreamingClient, StreamingClient, decode_fragment
from .config import ChatConfig, ResolvedConfig
from .errors import (
    ChatError,
    ConfigurationError,
    DecodeError,
    StreamCancelled,
    TransportError,
)
from .models import ChatRequest, Message, ResponseFragment, Role
from .session import CancellationToken, RenderSink, SessionController, SessionState
from .telemetry import ModelMetrics, tokens_per_second
from .transcript import Transcript

__all__ = [
    "CancellationToken",
    "ChatConfig",
    "ChatError",
    "ChatRequest",
    "ConfigurationError",
    "DecodeError",
    "HTTPStreamingClient",
    "Message",
    "ModelMetrics",
    "RenderSink",
    "ResolvedConfig",
    "ResponseFragment",
    "Role",
    "SessionController",
    "SessionState",
    "StreamCancelled",
    "StreamingClient",
    "Transcript",
    "TransportError",
    "decode_fragment",
    "tokens_per_second",
]
