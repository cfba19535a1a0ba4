"""Append-only conversation transcript and the single in-flight request guard."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Literal

from .completion import CompletionClient
from .exceptions import CompletionTimeoutError
from .state import StateManager
from .task_manager import TaskManager

LOGGER = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Maaf, terjadi kesalahan. Coba lagi ya."
COMPLETION_TASK_NAME = "completion"


class Role(str, Enum):
    """Speaker of a transcript turn."""

    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class Turn:
    """One immutable message in the transcript."""

    role: Role
    content: str
    is_error: bool = False


@dataclass(frozen=True)
class StoreChange:
    """Notification delivered to observers after every store mutation."""

    kind: Literal["turn_appended", "pending_changed"]
    turn: Turn | None = None
    pending: bool = False


Listener = Callable[[StoreChange], None]


class ConversationStore:
    """Own the ordered transcript and the pending flag.

    ``submit`` is the only way out of the idle state; settling the
    completion call (success, failure, or timeout) is the only way back.
    Every accepted user turn is followed by exactly one model turn.
    """

    def __init__(
        self,
        client: CompletionClient,
        *,
        error_message: str = DEFAULT_ERROR_MESSAGE,
        timeout_seconds: float | None = 60.0,
        task_manager: TaskManager | None = None,
    ) -> None:
        self.client = client
        self.error_message = error_message
        self.timeout_seconds = timeout_seconds
        self._tasks = task_manager or TaskManager()
        self._state = StateManager()
        self._turns: list[Turn] = []
        self._listeners: list[Listener] = []

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def turn_count(self) -> int:
        return len(self._turns)

    @property
    def is_empty(self) -> bool:
        return not self._turns

    @property
    def last_turn(self) -> Turn | None:
        return self._turns[-1] if self._turns else None

    @property
    def pending(self) -> bool:
        return self._state.is_awaiting

    def subscribe(self, listener: Listener) -> None:
        """Register an observer called after each mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self, change: StoreChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                LOGGER.exception(
                    "conversation.listener.failed",
                    extra={"event": "conversation.listener.failed", "kind": change.kind},
                )

    def _append(self, turn: Turn) -> None:
        self._turns.append(turn)
        self._notify(StoreChange(kind="turn_appended", turn=turn, pending=self.pending))

    def _settle(self) -> None:
        self._state.finish()
        self._notify(StoreChange(kind="pending_changed", pending=False))

    def submit(self, text: str) -> asyncio.Task[None] | None:
        """Append a user turn and start the completion call.

        Returns the background task, or ``None`` when the submission is
        dropped (blank text, or a request is already pending). Raises
        ``RuntimeError`` without a running event loop, leaving the store
        unchanged.
        """
        prompt = text.strip()
        if not prompt:
            return None
        if not self._state.try_begin():
            LOGGER.info(
                "conversation.submit.dropped",
                extra={"event": "conversation.submit.dropped", "reason": "pending"},
            )
            return None

        # The task only runs once the caller yields.
        completion = self._complete(prompt)
        try:
            task = asyncio.create_task(completion)
        except RuntimeError:
            completion.close()
            self._state.finish()
            raise
        self._tasks.add(task, name=COMPLETION_TASK_NAME)

        self._append(Turn(role=Role.USER, content=prompt))
        self._notify(StoreChange(kind="pending_changed", pending=True))
        LOGGER.info(
            "conversation.submit.accepted",
            extra={
                "event": "conversation.submit.accepted",
                "turn_index": len(self._turns) - 1,
                "prompt_chars": len(prompt),
            },
        )
        return task

    def retry_last(self) -> asyncio.Task[None] | None:
        """Resubmit the latest user prompt when its answer was the error turn."""
        last = self.last_turn
        if self.pending or last is None or not last.is_error:
            return None
        for turn in reversed(self._turns):
            if turn.role is Role.USER:
                return self.submit(turn.content)
        return None

    async def _complete(self, prompt: str) -> None:
        try:
            if self.timeout_seconds is None:
                answer = await self.client.generate(prompt)
            else:
                try:
                    answer = await asyncio.wait_for(
                        self.client.generate(prompt), timeout=self.timeout_seconds
                    )
                except asyncio.TimeoutError as exc:
                    raise CompletionTimeoutError(
                        f"No answer within {self.timeout_seconds} seconds."
                    ) from exc
        except asyncio.CancelledError:
            LOGGER.info(
                "conversation.completion.cancelled",
                extra={"event": "conversation.completion.cancelled"},
            )
            self._settle()
            raise
        except Exception as exc:
            LOGGER.error(
                "conversation.completion.failed",
                extra={
                    "event": "conversation.completion.failed",
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            self._append(Turn(role=Role.MODEL, content=self.error_message, is_error=True))
            self._settle()
            return

        self._append(Turn(role=Role.MODEL, content=answer))
        self._settle()
        LOGGER.info(
            "conversation.completion.done",
            extra={
                "event": "conversation.completion.done",
                "turn_count": len(self._turns),
            },
        )

    async def close(self) -> None:
        """Cancel any in-flight request at session end."""
        LOGGER.info(
            "conversation.closed",
            extra={"event": "conversation.closed", "in_flight": len(self._tasks)},
        )
        await self._tasks.cancel_all()
        # A task cancelled before its first step never reaches its handler.
        if self.pending:
            self._settle()
