"""Bounded conversation transcript.

Hides how history is stored and trimmed. Only the session controller
appends; everyone else reads snapshots.
"""

from collections import deque
from collections.abc import Iterator

from .models import Message

DEFAULT_MAX_HISTORY = 100


class Transcript:
    """Append-only, size-bounded ordered log of messages.

    When the bound is exceeded the oldest messages are evicted, the relative
    order of the remaining ones is preserved.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_HISTORY):
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self._messages: deque[Message] = deque(maxlen=max_size)

    @property
    def max_size(self) -> int:
        return self._messages.maxlen or 0

    def append(self, message: Message) -> None:
        """Add a message at the end, dropping from the front if full."""
        self._messages.append(message)

    def snapshot(self) -> tuple[Message, ...]:
        """Return an immutable copy safe to serialize into a request."""
        return tuple(self._messages)

    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())
