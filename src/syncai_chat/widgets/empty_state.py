"""Welcome panel with starter prompts, shown while the transcript is empty."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import Button, Static


class EmptyState(Vertical):
    """Offer a few example prompts the user can pick instead of typing."""

    DEFAULT_CSS = """
    EmptyState {
        height: auto;
        margin: 2 4;
        padding: 1 2;
        border: round $panel;
    }
    EmptyState > #welcome-title {
        text-style: bold;
        text-align: center;
        width: 100%;
    }
    EmptyState > #welcome-tagline {
        color: $text-muted;
        text-align: center;
        width: 100%;
        margin-bottom: 1;
    }
    EmptyState > Button {
        width: 100%;
        margin-top: 1;
    }
    """

    class ExamplePicked(Message):
        """Posted when the user picks one of the starter prompts."""

        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    def __init__(
        self, examples: list[str], title: str = "SyncAI", **kwargs: Any
    ) -> None:
        super().__init__(**kwargs)
        self.examples = list(examples)
        self.app_title = title

    def compose(self) -> ComposeResult:
        yield Static(f"Welcome to {self.app_title}", id="welcome-title", markup=False)
        yield Static(
            "Ask anything - from creative ideas to technical explanations.",
            id="welcome-tagline",
        )
        for index, example in enumerate(self.examples):
            yield Button(f"“{example}”", id=f"example-{index}", classes="example")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if not button_id.startswith("example-"):
            return
        event.stop()
        index = int(button_id.removeprefix("example-"))
        self.post_message(self.ExamplePicked(self.examples[index]))
