"""Tests for the command-line interface."""
import asyncio
import signal

import pytest
from conftest import ScriptedClient, fragment
from typer.testing import CliRunner

from llmterm.chat import TransportError
from llmterm.cli import providers
from llmterm.cli.app import app

runner = CliRunner()


class InterruptedClient(ScriptedClient):
    """Sends one fragment, raises SIGINT in this process, then stalls."""

    async def stream(self, request):
        self.requests.append(request)
        try:
            yield fragment("Hel")
            signal.raise_signal(signal.SIGINT)
            await asyncio.Event().wait()
        finally:
            self.closed += 1


@pytest.fixture
def scripted(monkeypatch):
    """Replace the HTTP client the CLI builds with a scripted one."""
    client = ScriptedClient()
    monkeypatch.setattr(providers, "HTTPStreamingClient", lambda config: client)
    return client


@pytest.fixture
def configured_env(clean_env):
    clean_env.setenv("LLM_ENDPOINT", "http://llm.test/api/chat")
    clean_env.setenv("LLM_MODEL", "llama3")
    return clean_env


class TestConfigCommand:
    """Tests for `llmterm config`."""

    def test_shows_resolved_settings(self, configured_env):
        """Test that the config command prints the endpoint and model."""
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "http://llm.test/api/chat" in result.output
        assert "llama3" in result.output

    def test_missing_settings_exit_with_error(self, clean_env):
        """Test that an incomplete configuration exits with code 1."""
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 1
        assert "NOT SET" in result.output

    def test_invalid_number_exits_with_error(self, configured_env):
        """Test that an unparseable numeric variable is reported."""
        configured_env.setenv("LLM_HISTORY_SIZE", "lots")

        result = runner.invoke(app, ["config"])

        assert result.exit_code == 1
        assert "invalid configuration" in result.output


class TestAskCommand:
    """Tests for `llmterm ask`."""

    def test_streams_reply(self, configured_env, scripted):
        """Test that ask streams the reply to stdout."""
        scripted.script = [fragment("Hel"), fragment("lo"), fragment(done=True)]

        result = runner.invoke(app, ["ask", "Hi"])

        assert result.exit_code == 0
        assert "Hello" in result.output
        assert scripted.requests[0].messages[0].content == "Hi"

    def test_stats_flag_prints_throughput(self, configured_env, scripted):
        """Test that --stats prints the token throughput summary."""
        scripted.script = [
            fragment("Hi"),
            fragment(done=True, prompt_eval_count=5, eval_count=3, total_duration=2_000_000_000),
        ]

        result = runner.invoke(app, ["ask", "Hi", "--stats"])

        assert result.exit_code == 0
        assert "4.0 tok/s" in result.output

    def test_option_overrides_environment(self, configured_env, scripted):
        """Test that --model takes precedence over LLM_MODEL."""
        scripted.script = [fragment(done=True)]

        result = runner.invoke(app, ["ask", "Hi", "--model", "mistral"])

        assert result.exit_code == 0
        assert scripted.requests[0].model == "mistral"

    def test_missing_configuration_exits(self, clean_env, scripted):
        """Test that ask refuses to run without endpoint and model."""
        result = runner.invoke(app, ["ask", "Hi"])

        assert result.exit_code == 1
        assert "Configuration Error" in result.output
        assert scripted.requests == []

    def test_transport_failure_exits(self, configured_env, scripted):
        """Test that a transport failure is printed and exits with code 1."""
        scripted.script = [TransportError("connection refused")]

        result = runner.invoke(app, ["ask", "Hi"])

        assert result.exit_code == 1
        assert "connection refused" in result.output

    def test_empty_prompt_exits(self, configured_env):
        """Test that a blank prompt is rejected."""
        result = runner.invoke(app, ["ask", "  "])

        assert result.exit_code == 1

    def test_sigint_cancels_response(self, configured_env, monkeypatch):
        """Test that Ctrl+C during ask cancels the turn instead of killing the process."""
        client = InterruptedClient()
        monkeypatch.setattr(providers, "HTTPStreamingClient", lambda config: client)

        result = runner.invoke(app, ["ask", "Hi"])

        assert result.exit_code == 0
        assert "Response cancelled by user" in result.output
        assert client.closed == 1
