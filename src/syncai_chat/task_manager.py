"""Lifecycle tracking for the app's asyncio background tasks."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

LOGGER = logging.getLogger(__name__)


class TaskManager:
    """Track named background tasks so they can be cancelled at session end."""

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[Any]] = {}

    def add(self, task: asyncio.Task[Any], name: str) -> None:
        """Register ``task`` under ``name``; it is forgotten once it finishes.

        A task registered under a name already in use replaces the previous
        entry without cancelling it.
        """
        self._tasks[name] = task
        task.add_done_callback(lambda done, key=name: self._forget(key, done))

    def _forget(self, name: str, task: asyncio.Task[Any]) -> None:
        if self._tasks.get(name) is task:
            del self._tasks[name]
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.warning(
                "task.exception",
                extra={
                    "event": "task.exception",
                    "task": name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )

    def __len__(self) -> int:
        return len(self._tasks)

    async def cancel_all(self) -> None:
        """Cancel every tracked task and wait for all of them."""
        pending = [task for task in self._tasks.values() if not task.done()]
        self._tasks.clear()
        for task in pending:
            task.cancel()
        for task in pending:
            try:
                await task
            except asyncio.CancelledError:
                pass
