"""Interaction mode state machine.

Hides which user actions are accepted in which mode. The machine knows
nothing about widgets: it calls on_submit/on_cancel and reports transitions
through on_change.

Transitions:
    input      --submit(text)--> responding
    responding --complete()----> input
    normal     --enter_input()-> input
    input      --exit_input()--> normal
Cancellation is accepted only while responding and does not change mode;
the controller's completion callback drives responding -> input.
"""

from collections.abc import Callable
from enum import Enum


class Mode(str, Enum):
    """Interaction modes."""

    NORMAL = "normal"
    INPUT = "input"
    RESPONDING = "responding"


# Actions accepted per mode
ALLOWED_ACTIONS: dict[Mode, frozenset[str]] = {
    Mode.NORMAL: frozenset({"enter_input", "scroll", "quit"}),
    Mode.INPUT: frozenset({"submit", "exit_input"}),
    Mode.RESPONDING: frozenset({"cancel", "complete", "scroll", "quit"}),
}

# Key hints shown for each mode
KEY_BINDINGS: dict[Mode, list[tuple[str, str]]] = {
    Mode.NORMAL: [
        ("q", "quit"),
        ("i", "enter input mode"),
        ("j", "scroll down"),
        ("k", "scroll up"),
        ("g", "scroll to top"),
        ("G", "scroll to bottom"),
        ("Ctrl+D", "scroll down half page"),
        ("Ctrl+U", "scroll up half page"),
    ],
    Mode.INPUT: [
        ("Esc", "enter normal mode"),
        ("Enter", "send message"),
    ],
    Mode.RESPONDING: [
        ("q", "quit"),
        ("Ctrl+C", "cancel response"),
        ("j", "scroll down"),
        ("k", "scroll up"),
        ("g", "scroll to top"),
        ("G", "scroll to bottom"),
        ("Ctrl+D", "scroll down half page"),
        ("Ctrl+U", "scroll up half page"),
    ],
}


class ModeStateMachine:
    """Finite-state machine gating user actions by mode.

    Actions that are not legal in the current mode are ignored and return
    False; they never raise.
    """

    def __init__(
        self,
        on_submit: Callable[[str], None],
        on_cancel: Callable[[], None],
        on_change: Callable[[Mode, Mode], None] | None = None,
        initial: Mode = Mode.INPUT,
    ) -> None:
        self._mode = initial
        self._on_submit = on_submit
        self._on_cancel = on_cancel
        self._on_change = on_change

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def is_responding(self) -> bool:
        return self._mode is Mode.RESPONDING

    def allows(self, action: str) -> bool:
        """Whether action is accepted in the current mode."""
        return action in ALLOWED_ACTIONS[self._mode]

    def key_bindings(self) -> list[tuple[str, str]]:
        return KEY_BINDINGS[self._mode]

    def _transition(self, new_mode: Mode) -> None:
        old_mode = self._mode
        self._mode = new_mode
        if self._on_change is not None and old_mode is not new_mode:
            self._on_change(old_mode, new_mode)

    def submit(self, text: str) -> bool:
        """Start a response for text (input -> responding)."""
        if not self.allows("submit") or not text or not text.strip():
            return False
        self._transition(Mode.RESPONDING)
        self._on_submit(text)
        return True

    def complete(self) -> bool:
        """The response finished, was cancelled or failed (responding -> input)."""
        if not self.allows("complete"):
            return False
        self._transition(Mode.INPUT)
        return True

    def enter_input(self) -> bool:
        if not self.allows("enter_input"):
            return False
        self._transition(Mode.INPUT)
        return True

    def exit_input(self) -> bool:
        if not self.allows("exit_input"):
            return False
        self._transition(Mode.NORMAL)
        return True

    def request_cancel(self) -> bool:
        """Ask for the active response to stop. Mode is left unchanged."""
        if not self.allows("cancel"):
            return False
        self._on_cancel()
        return True
