"""Idle/awaiting state machine guarding the single in-flight request."""

from __future__ import annotations

from enum import Enum


class ConversationState(str, Enum):
    """Finite state machine for the pending completion request."""

    IDLE = "IDLE"
    AWAITING = "AWAITING"


class StateManager:
    """Manage transitions between IDLE and AWAITING.

    Transitions are synchronous: on a single asyncio loop a check-and-set
    that never awaits cannot interleave with another coroutine, so two
    submissions scheduled back to back can never both enter AWAITING.
    """

    def __init__(self) -> None:
        self._state = ConversationState.IDLE

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def is_awaiting(self) -> bool:
        return self._state == ConversationState.AWAITING

    def transition_if(
        self,
        expected_state: ConversationState,
        new_state: ConversationState,
    ) -> bool:
        """Transition only when current state matches expected state."""
        if self._state != expected_state:
            return False
        self._state = new_state
        return True

    def try_begin(self) -> bool:
        """IDLE -> AWAITING; False when a request is already pending."""
        return self.transition_if(ConversationState.IDLE, ConversationState.AWAITING)

    def finish(self) -> None:
        """Return to IDLE once the pending request has settled."""
        self._state = ConversationState.IDLE
