"""Tests for the interaction mode state machine."""
import pytest

from llmterm.ui.modes import KEY_BINDINGS, Mode, ModeStateMachine


class Recorder:
    def __init__(self):
        self.submitted: list[str] = []
        self.cancels = 0
        self.changes: list[tuple[Mode, Mode]] = []

    def machine(self, initial: Mode = Mode.INPUT) -> ModeStateMachine:
        return ModeStateMachine(
            on_submit=self.submitted.append,
            on_cancel=self._cancel,
            on_change=lambda old, new: self.changes.append((old, new)),
            initial=initial,
        )

    def _cancel(self):
        self.cancels += 1


@pytest.fixture
def recorder():
    return Recorder()


class TestTransitions:
    """Legal transitions between modes."""

    def test_starts_in_input_mode(self, recorder):
        """Test that the machine starts in Input mode."""
        assert recorder.machine().mode is Mode.INPUT

    def test_submit_enters_responding_then_calls_back(self, recorder):
        """Test that submit switches to Responding and calls on_submit."""
        machine = recorder.machine()

        assert machine.submit("Hello") is True

        assert machine.mode is Mode.RESPONDING
        assert machine.is_responding
        assert recorder.submitted == ["Hello"]
        assert recorder.changes == [(Mode.INPUT, Mode.RESPONDING)]

    def test_complete_returns_to_input(self, recorder):
        """Test that completion returns to Input mode."""
        machine = recorder.machine()
        machine.submit("Hello")

        assert machine.complete() is True
        assert machine.mode is Mode.INPUT

    def test_escape_and_back(self, recorder):
        """Test leaving Input for Normal mode and coming back."""
        machine = recorder.machine()

        assert machine.exit_input() is True
        assert machine.mode is Mode.NORMAL
        assert machine.enter_input() is True
        assert machine.mode is Mode.INPUT
        assert recorder.changes == [(Mode.INPUT, Mode.NORMAL), (Mode.NORMAL, Mode.INPUT)]

    def test_cancel_while_responding_keeps_mode(self, recorder):
        """Test that cancelling calls on_cancel without changing mode."""
        machine = recorder.machine()
        machine.submit("Hello")

        assert machine.request_cancel() is True
        assert recorder.cancels == 1
        assert machine.mode is Mode.RESPONDING


class TestIgnoredActions:
    """Actions outside their mode are ignored without raising."""

    def test_empty_submit_is_ignored(self, recorder):
        """Test that blank text is not submitted."""
        machine = recorder.machine()

        assert machine.submit("   ") is False
        assert machine.mode is Mode.INPUT
        assert recorder.submitted == []

    def test_submit_while_responding_is_ignored(self, recorder):
        """Test that a second submit is ignored while responding."""
        machine = recorder.machine()
        machine.submit("first")

        assert machine.submit("second") is False
        assert recorder.submitted == ["first"]

    def test_submit_in_normal_mode_is_ignored(self, recorder):
        """Test that submit does nothing in Normal mode."""
        machine = recorder.machine(initial=Mode.NORMAL)
        assert machine.submit("Hello") is False
        assert machine.mode is Mode.NORMAL

    @pytest.mark.parametrize("initial", [Mode.NORMAL, Mode.INPUT])
    def test_cancel_outside_responding_is_ignored(self, recorder, initial):
        """Test that cancel does nothing unless responding."""
        machine = recorder.machine(initial=initial)

        assert machine.request_cancel() is False
        assert recorder.cancels == 0

    def test_enter_input_while_responding_is_ignored(self, recorder):
        """Test that mode switches are ignored while responding."""
        machine = recorder.machine()
        machine.submit("Hello")

        assert machine.enter_input() is False
        assert machine.exit_input() is False
        assert machine.mode is Mode.RESPONDING

    def test_complete_outside_responding_is_ignored(self, recorder):
        """Test that complete does nothing outside Responding mode."""
        machine = recorder.machine()
        assert machine.complete() is False
        assert recorder.changes == []

    @pytest.mark.parametrize(
        ("mode", "action", "allowed"),
        [
            (Mode.NORMAL, "scroll", True),
            (Mode.NORMAL, "quit", True),
            (Mode.INPUT, "scroll", False),
            (Mode.INPUT, "quit", False),
            (Mode.RESPONDING, "scroll", True),
            (Mode.RESPONDING, "submit", False),
        ],
    )
    def test_allows(self, recorder, mode, action, allowed):
        """Test the per-mode action table."""
        assert recorder.machine(initial=mode).allows(action) is allowed


class TestKeyBindings:
    """Key hints per mode."""

    def test_every_mode_has_hints(self):
        """Test that every mode has a key hint list."""
        assert set(KEY_BINDINGS) == set(Mode)

    def test_hints_follow_mode(self, recorder):
        """Test that key hints change with the mode."""
        machine = recorder.machine()
        assert ("Enter", "send message") in machine.key_bindings()

        machine.submit("Hello")
        assert ("Ctrl+C", "cancel response") in machine.key_bindings()
