"""Streaming chat client.

This module hides the transport: how a request is posted, how the
newline-delimited JSON response is read and decoded into fragments, and
how the connection is released on every exit path.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

import httpx
from pydantic import ValidationError

from .config import ChatConfig
from .errors import ConfigurationError, DecodeError, TransportError
from .models import ChatRequest, ResponseFragment


def decode_fragment(line: str) -> ResponseFragment:
    """Decode one stream line into a fragment.

    Raises:
        DecodeError: If the line is not a JSON object with the fragment shape
    """
    try:
        return ResponseFragment.model_validate_json(line)
    except ValidationError as e:
        preview = line if len(line) <= 80 else line[:80] + "..."
        raise DecodeError(f"Malformed stream unit: {preview}", line=line) from e


class StreamingClient(ABC):
    """Abstract client that turns a ChatRequest into a stream of fragments.

    Each call to stream() opens a new exchange; a stream cannot be resumed.

    Supports async context manager protocol for resource cleanup:
        async with client:
            async for fragment in client.stream(request):
                ...
    """

    @abstractmethod
    def stream(self, request: ChatRequest) -> AsyncIterator[ResponseFragment]:
        """Open an exchange and yield fragments in arrival order.

        Raises:
            ConfigurationError: If connection settings are missing
            TransportError: If the request cannot be sent or read
            DecodeError: If a stream unit cannot be decoded
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "StreamingClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


class HTTPStreamingClient(StreamingClient):
    """Streams chat responses from an NDJSON chat endpoint over HTTP.

    Hidden design decisions:
    - httpx client setup and timeouts
    - Request body format
    - Line framing and fragment decoding
    - Mapping of transport failures onto TransportError
    """

    def __init__(
        self,
        config: ChatConfig,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            config: Chat configuration (endpoint and timeouts are used)
            http_client: Optional pre-built httpx client. Injected clients are
                not closed by close().
        """
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.read_timeout, connect=config.connect_timeout)
        )
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set the callback(level, component, message) used for trace logging."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "HTTP", message)

    async def stream(self, request: ChatRequest) -> AsyncIterator[ResponseFragment]:
        endpoint = self._config.endpoint
        missing = []
        if not endpoint:
            missing.append("LLM_ENDPOINT")
        if not request.model:
            missing.append("LLM_MODEL")
        if missing:
            raise ConfigurationError(missing)

        self._debug("debug", f"POST {endpoint} model={request.model} messages={len(request.messages)}")

        try:
            async with self._client.stream("POST", endpoint, json=request.to_payload()) as response:
                self._debug("debug", f"Response status {response.status_code}")
                if response.is_error:
                    body = (await response.aread()).decode(errors="ignore").strip()
                    raise TransportError(
                        f"HTTP {response.status_code}: {body[:200] or response.reason_phrase}",
                        status_code=response.status_code,
                    )

                async for line in response.aiter_lines():
                    line = line.strip()
                    if not line:
                        continue
                    fragment = decode_fragment(line)
                    yield fragment
                    if fragment.done:
                        self._debug("debug", f"Stream done: {fragment.done_reason or 'unspecified'}")
                        return
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        self._debug("debug", "Stream ended without a final fragment")

    async def close(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()
