"""Tests for the Textual app, driven through Textual's pilot."""
import pytest
from conftest import ScriptedClient, fragment

from llmterm.chat import ChatConfig
from llmterm.ui import ChatTextualApp, Mode
from llmterm.ui.widgets import ChatHistoryWidget


def _hello_client() -> ScriptedClient:
    return ScriptedClient([
        fragment("Hel"),
        fragment("lo"),
        fragment(done=True, prompt_eval_count=5, eval_count=3, total_duration=2_000_000_000),
    ])


class TestChatTextualApp:
    """End-to-end turns through the TUI."""

    @pytest.mark.asyncio
    async def test_submit_streams_reply_and_returns_to_input(self, config):
        """Test a full turn from the input bar back to Input mode."""
        app = ChatTextualApp(config=config, client=_hello_client())

        async with app.run_test() as pilot:
            assert app.mode is Mode.INPUT
            await pilot.press("h", "i")
            await pilot.press("enter")
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert app.mode is Mode.INPUT
            assert [m.content for m in app.controller.transcript] == ["hi", "Hello"]
            chat = app.query_one("#chat-history", ChatHistoryWidget)
            assert chat.get_last_response() == "Hello"

    @pytest.mark.asyncio
    async def test_escape_enters_normal_mode_and_i_returns(self, config):
        """Test switching between Input and Normal mode with keys."""
        app = ChatTextualApp(config=config, client=_hello_client())

        async with app.run_test() as pilot:
            await pilot.press("escape")
            assert app.mode is Mode.NORMAL

            await pilot.press("i")
            assert app.mode is Mode.INPUT

    @pytest.mark.asyncio
    async def test_missing_configuration_is_shown_in_chat(self):
        """Test that a configuration error appears as a chat notice."""
        client = _hello_client()
        app = ChatTextualApp(config=ChatConfig(), client=client)

        async with app.run_test() as pilot:
            await pilot.press("h", "i", "enter")
            await app.workers.wait_for_complete()
            await pilot.pause()

            chat = app.query_one("#chat-history", ChatHistoryWidget)
            notices = [e.content for e in chat.entries if e.role == "notice"]
            assert any("LLM_ENDPOINT" in notice for notice in notices)
            assert app.mode is Mode.INPUT
            assert client.requests == []

    @pytest.mark.asyncio
    async def test_ctrl_c_cancels_response_and_returns_to_input(self, config):
        """Test that Ctrl+C stops a stalled reply, shows a notice and drops the partial text."""
        client = ScriptedClient([fragment("Hel")], block_after=1)
        app = ChatTextualApp(config=config, client=client)

        async with app.run_test() as pilot:
            await pilot.press("h", "i", "enter")
            await client.opened.wait()
            await pilot.pause()
            assert app.mode is Mode.RESPONDING
            assert app.controller.is_streaming

            await pilot.press("ctrl+c")
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert app.mode is Mode.INPUT
            assert [m.content for m in app.controller.transcript] == ["hi"]
            chat = app.query_one("#chat-history", ChatHistoryWidget)
            notices = [e.content for e in chat.entries if e.role == "notice"]
            assert any("Response cancelled by user" in notice for notice in notices)
            assert client.closed == 1
