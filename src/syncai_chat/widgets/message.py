"""Chat bubble widget for one transcript turn."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from ..conversation import Role, Turn
from ..rendering import render_markdown, split_message
from .code_block import CodeBlock

ROLE_LABELS = {Role.USER: "You", Role.MODEL: "SyncAI"}


def format_timestamp(now: datetime | None = None) -> str:
    """Return a short 12-hour clock label such as ``3:45 PM``."""
    now = now or datetime.now()
    hour = now.hour % 12 or 12
    period = "AM" if now.hour < 12 else "PM"
    return f"{hour}:{now.minute:02d} {period}"


class MessageBubble(Vertical):
    """Render a single turn: role header, then markdown prose and code blocks."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
        width: 85%;
        padding: 0 2;
        border: round $panel;
    }
    MessageBubble > .bubble-header {
        color: $text-muted;
        height: 1;
    }
    MessageBubble > .prose-segment {
        height: auto;
    }
    MessageBubble.error > .prose-segment {
        color: $error;
    }
    """

    def __init__(self, turn: Turn, timestamp: str = "", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.turn = turn
        self.timestamp = timestamp
        self.add_class(f"role-{turn.role.value}")
        if turn.is_error:
            self.add_class("error")

    @property
    def role_label(self) -> str:
        return ROLE_LABELS[self.turn.role]

    def header_text(self) -> Text:
        header = Text(self.role_label, style="bold")
        if self.timestamp:
            header.append(f"  {self.timestamp}", style="dim italic")
        return header

    def compose(self) -> ComposeResult:
        yield Static(self.header_text(), classes="bubble-header")
        for content, lang in split_message(self.turn.content):
            if lang is None:
                yield Static(render_markdown(content), classes="prose-segment")
            else:
                yield CodeBlock(code=content, lang=lang)

    def on_code_block_copy_requested(self, event: CodeBlock.CopyRequested) -> None:
        """Copy a code block through the app clipboard."""
        event.stop()
        self.app.copy_to_clipboard(event.code)
        self.app.notify("Code copied to clipboard.", timeout=2)
