"""Chat configuration.

Centralizes where connection settings come from. The configuration is an
explicit object handed to the controller and client; missing required
fields surface as ConfigurationError when a turn resolves it.

Environment variables:
    LLM_ENDPOINT: Chat endpoint URL (required), e.g. http://localhost:11434/api/chat
    LLM_MODEL: Model identifier (required)
    LLM_TEMPERATURE: Sampling temperature (default: 1.0)
    LLM_HISTORY_SIZE: Maximum messages kept in the transcript (default: 100)
    LLM_CONNECT_TIMEOUT: Seconds to wait for a connection (default: 10)
    LLM_READ_TIMEOUT: Seconds to wait between stream chunks (default: no limit)
"""

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError
from .transcript import DEFAULT_MAX_HISTORY

DEFAULT_TEMPERATURE = 1.0
DEFAULT_CONNECT_TIMEOUT = 10.0


class ResolvedConfig(BaseModel):
    """Connection settings with every required field present."""

    model_config = ConfigDict(frozen=True)

    endpoint: str
    model: str


class ChatConfig(BaseModel):
    """Settings for the chat session and its streaming client."""

    model_config = ConfigDict(frozen=True)

    endpoint: str | None = Field(default=None, description="Chat endpoint URL")
    model: str | None = Field(default=None, description="Model identifier")
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_history: int = Field(default=DEFAULT_MAX_HISTORY, ge=1)
    connect_timeout: float = Field(default=DEFAULT_CONNECT_TIMEOUT, gt=0)
    read_timeout: float | None = Field(
        default=None,
        description="Seconds between stream chunks before giving up (None waits forever)"
    )

    @classmethod
    def from_env(cls, **overrides: Any) -> "ChatConfig":
        """Build a configuration from environment variables.

        Args:
            **overrides: Values that take precedence over the environment.
                None values are ignored so unset CLI options fall through.

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        values: dict[str, Any] = {
            "endpoint": os.getenv("LLM_ENDPOINT") or None,
            "model": os.getenv("LLM_MODEL") or None,
        }

        temperature = os.getenv("LLM_TEMPERATURE")
        if temperature:
            values["temperature"] = float(temperature)

        history = os.getenv("LLM_HISTORY_SIZE")
        if history:
            values["max_history"] = int(history)

        connect_timeout = os.getenv("LLM_CONNECT_TIMEOUT")
        if connect_timeout:
            values["connect_timeout"] = float(connect_timeout)

        read_timeout = os.getenv("LLM_READ_TIMEOUT")
        if read_timeout:
            values["read_timeout"] = float(read_timeout)

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def resolve(self) -> ResolvedConfig:
        """Return the required connection settings.

        Raises:
            ConfigurationError: If the endpoint or model is not set
        """
        missing = []
        if not self.endpoint:
            missing.append("LLM_ENDPOINT")
        if not self.model:
            missing.append("LLM_MODEL")
        if missing:
            raise ConfigurationError(missing)
        return ResolvedConfig(endpoint=self.endpoint, model=self.model)
