"""UI configuration constants.

Centralizes magic numbers and display settings for the UI module.
"""


class LogLevel:
    """Trace panel levels with numeric values for comparison.

    DEBUG < INFO < WARNING < ERROR; a lower threshold shows more messages.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the display name for a level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert a level name to its value. Unknown names map to DEBUG."""
        for value, name in cls._names.items():
            if name == level_str.upper():
                return value
        return cls.DEBUG


# Responding indicator
SPINNER_FRAMES = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]
SPINNER_INTERVAL = 0.1  # Seconds between spinner frames

# Scrolling
SCROLL_LINE_STEP = 1

# Toast durations in seconds
NOTIFY_SHORT = 2
NOTIFY_LONG = 5

# Chat labels
USER_LABEL = "You"
ASSISTANT_LABEL = "AI"

CONFIG_ERROR_HINT = "Please set LLM_ENDPOINT and LLM_MODEL in your environment or .env file."
