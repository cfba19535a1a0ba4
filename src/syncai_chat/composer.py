"""Draft input state and submission gating for the message composer."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from .conversation import ConversationStore


class Composer:
    """Hold the draft text and forward it to the conversation store."""

    def __init__(self, store: ConversationStore) -> None:
        self.store = store
        self.draft = ""
        self._focus_callback: Callable[[], None] | None = None

    def on_focus_requested(self, callback: Callable[[], None]) -> None:
        """Register the callback that moves keyboard focus to the input."""
        self._focus_callback = callback

    @property
    def can_submit(self) -> bool:
        return not self.store.pending and bool(self.draft.strip())

    def set_draft(self, text: str) -> None:
        self.draft = text

    def on_example_selected(self, text: str) -> None:
        """Fill the draft with a starter prompt and focus the input."""
        self.draft = text
        if self._focus_callback is not None:
            self._focus_callback()

    def on_submit_pressed(self) -> asyncio.Task[None] | None:
        """Submit the draft; the draft is cleared only when the store accepts it."""
        if not self.can_submit:
            return None
        task = self.store.submit(self.draft)
        if task is not None:
            self.draft = ""
        return task
