"""Error taxonomy for a chat turn.

Every error here is caught at the turn boundary by the session controller
and converted into a render sink notification.
"""


class ChatError(Exception):
    """Base class for errors raised while running a chat turn."""


class ConfigurationError(ChatError):
    """Required connection settings are missing."""

    def __init__(self, missing: list[str], message: str | None = None):
        self.missing = list(missing)
        if message is None:
            names = ", ".join(self.missing)
            message = f"Missing required configuration: {names}"
        super().__init__(message)


class TransportError(ChatError):
    """The request could not be sent or the response could not be read."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class DecodeError(ChatError):
    """A unit of the response stream is not a valid fragment."""

    def __init__(self, message: str, line: str = ""):
        self.line = line
        super().__init__(message)


class StreamCancelled(ChatError):
    """The user cancelled the turn. Not a failure."""
