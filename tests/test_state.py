"""Tests for the idle/awaiting request state machine."""

from __future__ import annotations

import unittest

from syncai_chat.state import ConversationState, StateManager


class StateManagerTests(unittest.TestCase):
    """Validate guarded transitions."""

    def test_initial_state_is_idle(self) -> None:
        manager = StateManager()
        self.assertEqual(manager.state, ConversationState.IDLE)
        self.assertFalse(manager.is_awaiting)

    def test_try_begin_only_succeeds_once(self) -> None:
        manager = StateManager()
        self.assertTrue(manager.try_begin())
        self.assertTrue(manager.is_awaiting)
        self.assertFalse(manager.try_begin())

        manager.finish()
        self.assertEqual(manager.state, ConversationState.IDLE)
        self.assertTrue(manager.try_begin())

    def test_transition_if_requires_expected_state(self) -> None:
        manager = StateManager()
        self.assertFalse(
            manager.transition_if(ConversationState.AWAITING, ConversationState.IDLE)
        )
        self.assertTrue(
            manager.transition_if(ConversationState.IDLE, ConversationState.AWAITING)
        )
        self.assertEqual(manager.state, ConversationState.AWAITING)

    def test_state_values_are_strings(self) -> None:
        self.assertEqual(ConversationState.AWAITING, "AWAITING")


if __name__ == "__main__":
    unittest.main()
