"""Composer row: message field, send button, and disclaimer line."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label


class InputBox(Vertical):
    """Input region with the message field and send button."""

    DEFAULT_CSS = """
    InputBox #input_row {
        height: auto;
    }
    InputBox #message_input {
        width: 1fr;
    }
    InputBox #send_button {
        margin-left: 1;
        min-width: 10;
    }
    InputBox #disclaimer {
        width: 100%;
        text-align: center;
        color: $text-muted;
    }
    """

    def __init__(self, disclaimer: str = "", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.disclaimer = disclaimer

    def compose(self) -> ComposeResult:
        with Horizontal(id="input_row"):
            yield Input(placeholder="Write your message...", id="message_input")
            yield Button("Send", id="send_button", variant="primary", disabled=True)
        if self.disclaimer:
            yield Label(self.disclaimer, id="disclaimer", markup=False)

    def set_busy(self, busy: bool, can_send: bool) -> None:
        """Disable the field while a request is pending; gate the send button."""
        self.query_one("#message_input", Input).disabled = busy
        self.query_one("#send_button", Button).disabled = busy or not can_send
        self.query_one("#send_button", Button).label = "…" if busy else "Send"
