"""Display-side data models for the TUI.

Hides how rendered chat entries are represented, separately from the
transcript messages that are sent to the model.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ChatEntry:
    """One rendered entry of the chat view."""

    role: str  # "user", "assistant" or "notice"
    content: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    complete: bool = True

    def append(self, text: str) -> None:
        self.content += text
