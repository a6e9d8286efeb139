"""Streaming session controller.

Owns one conversation's transcript, runs one turn at a time against a
StreamingClient and reports progress to a render sink.

Hidden design decisions:
- At-most-one active stream, enforced by a lock rather than a queue
- Per-turn cancellation tokens, polled once per fragment and also wired to
  cancel the task reading the stream so a blocked read is released
- Partial replies are discarded on cancellation or error
- The completion callback runs from a finally block, once per turn
"""

import asyncio
import contextlib
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from .client import StreamingClient
from .config import ChatConfig
from .errors import ChatError, ConfigurationError, StreamCancelled
from .models import ChatRequest, Message, ResponseFragment, Role
from .transcript import Transcript

FragmentCallback = Callable[[ResponseFragment], None]
CompleteCallback = Callable[[], None]


class RenderSink(Protocol):
    """Presentation-layer destination for turn output and notifications."""

    def append_text(self, text: str) -> None:
        """Append streamed assistant text."""

    def notify_configuration_error(self, error: ConfigurationError) -> None:
        """Report that required settings are missing."""

    def notify_cancelled(self) -> None:
        """Report that the user cancelled the response."""

    def notify_error(self, error: ChatError) -> None:
        """Report a transport or decode failure."""


class CancellationToken:
    """One-shot, thread-safe cancellation signal for a single turn."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """Signal the token. Returns False if it was already signalled."""
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
        return True

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run callback when the token fires (immediately if it already has)."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()


@dataclass
class SessionState:
    """Streaming flag and the token of the active turn."""

    is_streaming: bool = False
    cancel_token: CancellationToken | None = None


class SessionController:
    """Drives chat turns for one conversation.

    Usage:
        controller = SessionController(config, client, sink)
        await controller.submit("Hello", on_fragment=..., on_complete=...)
        controller.cancel()  # from any thread, while a turn is running
    """

    def __init__(
        self,
        config: ChatConfig,
        client: StreamingClient,
        sink: RenderSink,
        transcript: Transcript | None = None,
    ):
        self._config = config
        self._client = client
        self._sink = sink
        self._transcript = transcript if transcript is not None else Transcript(config.max_history)
        self._lock = threading.Lock()
        self._state = SessionState()
        self._debug_callback: Any | None = None

    @property
    def is_streaming(self) -> bool:
        with self._lock:
            return self._state.is_streaming

    @property
    def transcript(self) -> tuple[Message, ...]:
        """Read-only view of the conversation so far."""
        return self._transcript.snapshot()

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for turn tracing.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Session", message)

    async def submit(
        self,
        text: str,
        on_fragment: FragmentCallback | None = None,
        on_complete: CompleteCallback | None = None,
    ) -> bool:
        """Run one turn for a user message.

        Args:
            text: The user's message (must be non-empty)
            on_fragment: Called with every raw fragment, for telemetry
            on_complete: Called exactly once when the turn ends, whatever
                the outcome

        Returns:
            False if another turn is active (nothing happens), True otherwise

        Raises:
            ValueError: If text is empty
        """
        if not text or not text.strip():
            raise ValueError("Message text must not be empty")

        with self._lock:
            if self._state.is_streaming:
                self._debug("warning", "Submit ignored: a response is already streaming")
                return False
            token = CancellationToken()
            self._state = SessionState(is_streaming=True, cancel_token=token)

        try:
            await self._run_turn(text, token, on_fragment)
        finally:
            with self._lock:
                if self._state.cancel_token is token:
                    self._state.is_streaming = False
            if on_complete is not None:
                on_complete()
        return True

    def cancel(self) -> bool:
        """Cancel the active turn, if any.

        Returns:
            True if a turn was signalled, False if nothing was streaming
        """
        with self._lock:
            if not self._state.is_streaming or self._state.cancel_token is None:
                return False
            self._state.is_streaming = False
            self._state.cancel_token.cancel()
        self._debug("info", "Cancellation requested")
        return True

    async def _run_turn(
        self,
        text: str,
        token: CancellationToken,
        on_fragment: FragmentCallback | None,
    ) -> None:
        self._transcript.append(Message(role=Role.USER, content=text))

        try:
            settings = self._config.resolve()
        except ConfigurationError as e:
            self._debug("error", str(e))
            self._sink.notify_configuration_error(e)
            return

        request = ChatRequest(
            model=settings.model,
            temperature=self._config.temperature,
            messages=self._transcript.snapshot(),
        )
        self._debug("info", f"Turn started: model={request.model}, {len(request.messages)} messages")

        try:
            reply = await self._consume(request, token, on_fragment)
        except StreamCancelled:
            self._debug("info", "Turn cancelled, partial reply discarded")
            self._sink.notify_cancelled()
            return
        except ConfigurationError as e:
            self._debug("error", str(e))
            self._sink.notify_configuration_error(e)
            return
        except ChatError as e:
            self._debug("error", f"{type(e).__name__}: {e}")
            self._sink.notify_error(e)
            return

        self._transcript.append(Message(role=Role.ASSISTANT, content=reply))
        self._debug("info", f"Turn complete: {len(reply)} chars, transcript has {len(self._transcript)} messages")

    async def _consume(
        self,
        request: ChatRequest,
        token: CancellationToken,
        on_fragment: FragmentCallback | None,
    ) -> str:
        """Read the stream in a child task that the token can cancel."""
        loop = asyncio.get_running_loop()
        reader = asyncio.ensure_future(self._read_stream(request, token, on_fragment))

        def _abort_reader() -> None:
            if not reader.done():
                loop.call_soon_threadsafe(reader.cancel)

        token.add_callback(_abort_reader)

        try:
            await asyncio.wait({reader})
        except asyncio.CancelledError:
            # Let the reader release the stream before the turn finalizer runs
            reader.cancel()
            await asyncio.wait({reader})
            raise

        if reader.cancelled():
            raise StreamCancelled()
        reply = reader.result()
        # cancel() may land after the last fragment was read
        if token.cancelled:
            raise StreamCancelled()
        return reply

    async def _read_stream(
        self,
        request: ChatRequest,
        token: CancellationToken,
        on_fragment: FragmentCallback | None,
    ) -> str:
        if token.cancelled:
            raise StreamCancelled()

        parts: list[str] = []
        stream = self._client.stream(request)
        async with contextlib.aclosing(stream):
            async for fragment in stream:
                if token.cancelled:
                    raise StreamCancelled()
                if fragment.content:
                    parts.append(fragment.content)
                    self._sink.append_text(fragment.content)
                if on_fragment is not None:
                    on_fragment(fragment)
                if fragment.done:
                    break
        return "".join(parts)
