"""Status bar showing model, request state, and transcript size."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.widgets import Label, Static


class StatusBar(Static):
    """Render compact runtime status information.

    Segments (left to right):
        ● idle  |  Model: gemini-1.5-flash  |  Turns: 4
    """

    DEFAULT_CSS = """
    StatusBar {
        layout: horizontal;
        height: auto;
    }
    StatusBar Label {
        margin-right: 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Label("● idle", id="status_state")
        yield Label("|", id="status_sep1")
        yield Label("Model: —", id="status_model")
        yield Label("|", id="status_sep2")
        yield Label("Turns: 0", id="status_turns")

    def set_status(self, *, pending: bool, model: str, turn_count: int) -> None:
        """Update all status segment labels."""
        state = "waiting for reply" if pending else "idle"
        self.query_one("#status_state", Label).update(f"● {state}")
        self.query_one("#status_model", Label).update(f"Model: {model}")
        self.query_one("#status_turns", Label).update(f"Turns: {turn_count}")
