"""Pytest configuration and shared fixtures."""
import asyncio
import os

import pytest

from llmterm.chat import ChatConfig, ResponseFragment, StreamingClient


class RecordingSink:
    """RenderSink that records every call for assertions."""

    def __init__(self):
        self.text: list[str] = []
        self.config_errors: list[Exception] = []
        self.errors: list[Exception] = []
        self.cancelled = 0

    def append_text(self, text):
        self.text.append(text)

    def notify_configuration_error(self, error):
        self.config_errors.append(error)

    def notify_cancelled(self):
        self.cancelled += 1

    def notify_error(self, error):
        self.errors.append(error)

    @property
    def rendered(self) -> str:
        return "".join(self.text)


class ScriptedClient(StreamingClient):
    """Streaming client that replays a fixed script.

    Script items are ResponseFragments, or exceptions which are raised at
    that point. With block_after set, the stream waits forever once that
    many items have been delivered (simulating a stalled read).
    """

    def __init__(self, script=None, block_after: int | None = None):
        self.script = list(script or [])
        self.block_after = block_after
        self.requests = []
        self.opened = asyncio.Event()
        self.closed = 0

    async def stream(self, request):
        self.requests.append(request)
        self.opened.set()
        try:
            for index, item in enumerate(self.script):
                if self.block_after is not None and index >= self.block_after:
                    await asyncio.Event().wait()
                if isinstance(item, Exception):
                    raise item
                yield item
            if self.block_after is not None and self.block_after >= len(self.script):
                await asyncio.Event().wait()
        finally:
            self.closed += 1

    async def close(self):
        pass


def fragment(content: str = "", done: bool = False, **kwargs) -> ResponseFragment:
    """Build a fragment the way the endpoint would send it."""
    return ResponseFragment.model_validate({
        "model": kwargs.pop("model", "llama3"),
        "message": {"role": "assistant", "content": content},
        "done": done,
        **kwargs,
    })


@pytest.fixture
def config():
    """A complete configuration pointing at a fake endpoint."""
    return ChatConfig(endpoint="http://llm.test/api/chat", model="llama3")


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove LLM_* variables so tests see a known environment."""
    for key in list(os.environ):
        if key.startswith("LLM_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
