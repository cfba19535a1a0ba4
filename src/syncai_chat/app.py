"""Main Textual application for chatting with the hosted Gemini model."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
import sys
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Button, Footer, Header, Input

from .completion import (
    CompletionClient,
    UnavailableCompletionClient,
    build_completion_client,
)
from .composer import Composer
from .config import load_config
from .conversation import ConversationStore, Role, StoreChange
from .exceptions import MissingAPIKeyError
from .logging_utils import configure_logging
from .widgets.conversation import ConversationView, ScrollDownButton
from .widgets.empty_state import EmptyState
from .widgets.input_box import InputBox
from .widgets.message import format_timestamp
from .widgets.status_bar import StatusBar

LOGGER = logging.getLogger(__name__)


class SyncAIChatApp(App[None]):
    """Chat-bubble TUI that forwards each prompt to a hosted model."""

    CSS = """
    Screen {
        layout: vertical;
        background: $background;
    }

    #app-root {
        layout: vertical;
        width: 100%;
        height: 1fr;
    }

    #conversation {
        height: 1fr;
        padding: 0 1;
    }

    InputBox {
        height: auto;
        padding: 0 1;
        border-top: solid $panel;
        background: $surface;
    }

    #status_bar {
        height: auto;
        padding: 0 1;
        background: $surface;
    }
    """

    DEFAULT_ACTION_DESCRIPTIONS: dict[str, str] = {
        "send_message": "Send",
        "quit": "Quit",
        "scroll_up": "Scroll Up",
        "scroll_down": "Scroll Down",
        "scroll_to_bottom": "Bottom",
        "retry_last": "Retry",
        "copy_last_message": "Copy Last",
    }

    def __init__(
        self,
        *,
        config_path: Path | None = None,
        model_override: str | None = None,
        client: CompletionClient | None = None,
    ) -> None:
        self.config = load_config(config_path)
        if model_override and model_override.strip():
            self.config["completion"]["model"] = model_override.strip()
        configure_logging(self.config["logging"])
        LOGGER.info(
            "app.python",
            extra={
                "event": "app.python",
                "executable": sys.executable,
                "version": sys.version.split()[0],
            },
        )

        completion_cfg = self.config["completion"]
        self._startup_warning = ""
        if client is None:
            try:
                client = build_completion_client(completion_cfg)
            except MissingAPIKeyError as exc:
                LOGGER.warning(
                    "app.completion.unavailable",
                    extra={"event": "app.completion.unavailable", "reason": str(exc)},
                )
                self._startup_warning = str(exc)
                client = UnavailableCompletionClient(
                    str(exc), model=str(completion_cfg["model"])
                )
        self.store = ConversationStore(
            client,
            error_message=str(completion_cfg["error_message"]),
            timeout_seconds=float(completion_cfg["timeout_seconds"]),
        )
        self.composer = Composer(self.store)
        self.pending_request: asyncio.Task[None] | None = None

        # Populated in on_mount() once the DOM exists.
        self._w_input: Input | None = None
        self._w_input_box: InputBox | None = None
        self._w_conversation: ConversationView | None = None
        self._w_scroll_button: ScrollDownButton | None = None
        self._w_status: StatusBar | None = None

        self._binding_specs = self._binding_specs_from_config(self.config)
        super().__init__()

    @classmethod
    def _binding_specs_from_config(
        cls, config: dict[str, dict[str, Any]]
    ) -> list[Binding]:
        keybinds = config.get("keybinds", {})
        bindings: list[Binding] = []
        for action_name, description in cls.DEFAULT_ACTION_DESCRIPTIONS.items():
            binding_key = keybinds.get(action_name)
            if isinstance(binding_key, str) and binding_key.strip():
                bindings.append(
                    Binding(
                        key=binding_key.strip(),
                        action=action_name,
                        description=description,
                        show=action_name != "send_message",
                    )
                )
        return bindings

    @property
    def model_name(self) -> str:
        configured = str(self.config["completion"]["model"])
        return str(getattr(self.store.client, "model", "") or configured)

    def compose(self) -> ComposeResult:
        ui_cfg = self.config["ui"]
        yield Header()
        with Container(id="app-root"):
            with ConversationView(
                tolerance=float(ui_cfg["scroll_tolerance"]), id="conversation"
            ):
                yield EmptyState(
                    list(ui_cfg["example_prompts"]),
                    title=str(self.config["app"]["title"]),
                    id="empty_state",
                )
            yield ScrollDownButton(id="scroll_down_button")
            yield InputBox(disclaimer=str(ui_cfg["disclaimer"]))
            yield StatusBar(id="status_bar")
        yield Footer()

    def on_mount(self) -> None:
        self.title = str(self.config["app"]["title"])
        self.sub_title = str(self.config["app"]["subtitle"])
        for binding in self._binding_specs:
            self.bind(
                binding.key,
                binding.action,
                description=binding.description,
                show=binding.show,
            )

        self._w_input = self.query_one("#message_input", Input)
        self._w_input_box = self.query_one(InputBox)
        self._w_conversation = self.query_one(ConversationView)
        self._w_scroll_button = self.query_one(ScrollDownButton)
        self._w_status = self.query_one(StatusBar)

        self.composer.on_focus_requested(self._focus_input_with_draft)
        self.store.subscribe(self._on_store_change)
        self._update_status_bar()
        self._w_input.focus()
        if self._startup_warning:
            self.notify(self._startup_warning, severity="warning", timeout=8)
        LOGGER.info(
            "app.mounted",
            extra={"event": "app.mounted", "model": self.model_name},
        )

    async def on_unmount(self) -> None:
        """Cancel the in-flight request when the session ends."""
        self.store.unsubscribe(self._on_store_change)
        await self.store.close()

    def _focus_input_with_draft(self) -> None:
        input_widget = self._w_input or self.query_one("#message_input", Input)
        input_widget.value = self.composer.draft
        input_widget.cursor_position = len(input_widget.value)
        input_widget.focus()

    def _timestamp(self) -> str:
        if not bool(self.config["ui"]["show_timestamps"]):
            return ""
        return format_timestamp()

    def _style_bubble(self, bubble: Any, role: Role) -> None:
        """Apply user-configured colours and border to a message bubble."""
        ui_cfg = self.config["ui"]
        if role is Role.USER:
            bubble.styles.background = str(ui_cfg["user_message_color"])
        else:
            bubble.styles.background = str(ui_cfg["model_message_color"])
        bubble.styles.border = ("round", str(ui_cfg["border_color"]))

    def _on_store_change(self, change: StoreChange) -> None:
        """Redraw the parts of the UI affected by a store mutation."""
        conversation = self._w_conversation or self.query_one(ConversationView)
        if change.kind == "turn_appended" and change.turn is not None:
            for empty_state in self.query(EmptyState):
                empty_state.remove()
            bubble = conversation.add_turn(change.turn, timestamp=self._timestamp())
            self._style_bubble(bubble, change.turn.role)
        elif change.kind == "pending_changed":
            indicator = conversation.typing_indicator
            if change.pending:
                indicator.start()
            else:
                indicator.stop()
            input_box = self._w_input_box or self.query_one(InputBox)
            input_box.set_busy(change.pending, self.composer.can_submit)
            if not change.pending:
                self.sub_title = str(self.config["app"]["subtitle"])
                if self._w_input is not None:
                    self._w_input.focus()
        self._update_status_bar()

    def _update_status_bar(self) -> None:
        status_widget = self._w_status or self.query_one(StatusBar)
        status_widget.set_status(
            pending=self.store.pending,
            model=self.model_name,
            turn_count=self.store.turn_count,
        )

    async def send_user_message(self) -> None:
        """Hand the input text to the composer and start the request."""
        input_widget = self._w_input or self.query_one("#message_input", Input)
        self.composer.set_draft(input_widget.value)
        if self.store.pending:
            self.sub_title = "Busy. Wait for the current reply to finish."
            return
        if not self.composer.can_submit:
            self.sub_title = "Cannot send an empty message."
            return
        task = self.composer.on_submit_pressed()
        if task is None:
            return
        input_widget.value = ""
        self.pending_request = task
        self.sub_title = "Waiting for response..."

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "message_input":
            await self.send_user_message()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "message_input":
            return
        self.composer.set_draft(event.value)
        input_box = self._w_input_box or self.query_one(InputBox)
        input_box.set_busy(self.store.pending, self.composer.can_submit)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send_button":
            await self.send_user_message()
        elif event.button.id == "scroll_down_button":
            self.action_scroll_to_bottom()

    def on_empty_state_example_picked(self, event: EmptyState.ExamplePicked) -> None:
        """Fill the composer with a starter prompt (only offered while empty)."""
        if not self.store.is_empty:
            return
        self.composer.on_example_selected(event.text)

    def on_conversation_view_new_content_below(
        self, event: ConversationView.NewContentBelow
    ) -> None:
        button = self._w_scroll_button or self.query_one(ScrollDownButton)
        button.show(event.visible)

    async def action_send_message(self) -> None:
        await self.send_user_message()

    def action_scroll_up(self) -> None:
        conversation = self._w_conversation or self.query_one(ConversationView)
        conversation.scroll_relative(y=-10, animate=False)

    def action_scroll_down(self) -> None:
        conversation = self._w_conversation or self.query_one(ConversationView)
        conversation.scroll_relative(y=10, animate=False)

    def action_scroll_to_bottom(self) -> None:
        conversation = self._w_conversation or self.query_one(ConversationView)
        conversation.scroll_controller.scroll_to_bottom_manual()

    async def action_retry_last(self) -> None:
        """Resubmit the last prompt when its reply was the error message."""
        task = self.store.retry_last()
        if task is None:
            self.sub_title = "Nothing to retry."
            return
        self.pending_request = task
        self.sub_title = "Retrying..."

    async def action_copy_last_message(self) -> None:
        for turn in reversed(self.store.turns):
            if turn.role is Role.MODEL and not turn.is_error:
                self.copy_to_clipboard(turn.content)
                self.sub_title = "Copied latest reply."
                return
        self.sub_title = "No reply available to copy."

    async def action_quit(self) -> None:
        self.exit()
