"""Fenced code block widget with a copy-to-clipboard button."""

from __future__ import annotations

from typing import Any

from rich.syntax import Syntax
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Label, Static

from ..rendering import CODE_THEME


class CodeBlock(Vertical):
    """Render a syntax-highlighted code block with a copy button in its header."""

    DEFAULT_CSS = """
    CodeBlock {
        height: auto;
        margin: 1 0;
        border: solid $panel;
        background: $surface-darken-1;
    }
    CodeBlock > #code-header {
        height: 1;
        padding: 0 1;
        background: $panel;
    }
    CodeBlock > #code-header > #lang-label {
        width: 1fr;
        color: $text-muted;
    }
    CodeBlock > #code-header > #copy-btn {
        width: auto;
        min-width: 6;
        height: 1;
        border: none;
        background: $panel;
        padding: 0 1;
    }
    CodeBlock > #code-header > #copy-btn:hover {
        background: $accent;
    }
    CodeBlock > #code-body {
        height: auto;
        padding: 0 1;
    }
    """

    class CopyRequested(Message):
        """Posted when the user clicks the copy button."""

        def __init__(self, code: str) -> None:
            super().__init__()
            self.code = code

    def __init__(self, code: str, lang: str = "", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.code = code
        self.lang = lang

    def compose(self) -> ComposeResult:
        with Horizontal(id="code-header"):
            yield Label(self.lang or "code", id="lang-label")
            yield Button("copy", id="copy-btn")
        # Syntax renders the code as plain highlighted text, never as markup.
        yield Static(
            Syntax(
                self.code.rstrip("\n"),
                self.lang or "text",
                theme=CODE_THEME,
                line_numbers=False,
                word_wrap=True,
            ),
            id="code-body",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "copy-btn":
            event.stop()
            self.post_message(self.CopyRequested(self.code))
