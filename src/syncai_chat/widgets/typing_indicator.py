"""Animated "model is typing" indicator shown while a request is pending."""

from __future__ import annotations

import asyncio
from typing import Any

from textual.widgets import Static

_ANIMATION_FRAMES: tuple[str, ...] = (
    "●··",
    "·●·",
    "··●",
    "·●·",
)


class TypingIndicator(Static):
    """Bouncing dots rendered at the end of the transcript."""

    DEFAULT_CSS = """
    TypingIndicator {
        height: 1;
        width: auto;
        margin: 1 0;
        padding: 0 2;
        color: $text-muted;
        display: none;
    }
    TypingIndicator.-active {
        display: block;
    }
    """

    def __init__(self, label: str = "Model is typing", **kwargs: Any) -> None:
        super().__init__("", **kwargs)
        self.label = label
        self._animation_task: asyncio.Task[None] | None = None

    @property
    def active(self) -> bool:
        return self.has_class("-active")

    def start(self) -> None:
        """Show the indicator and begin animating."""
        if self.active:
            return
        self.add_class("-active")
        self._animation_task = asyncio.create_task(self._run_animation())

    def stop(self) -> None:
        """Hide the indicator and stop the animation."""
        self.remove_class("-active")
        task = self._animation_task
        self._animation_task = None
        if task is not None and not task.done():
            task.cancel()
        self.update("")

    async def _run_animation(self) -> None:
        frame_index = 0
        while True:
            frame = _ANIMATION_FRAMES[frame_index % len(_ANIMATION_FRAMES)]
            self.update(f"{frame}  {self.label}")
            frame_index += 1
            await asyncio.sleep(0.12)

    def on_unmount(self) -> None:
        self.stop()
