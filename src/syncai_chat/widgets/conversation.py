"""Scrollable transcript view with bottom-anchored auto-scroll."""

from __future__ import annotations

from typing import Any

from textual.containers import Horizontal, VerticalScroll
from textual.message import Message
from textual.widgets import Button

from ..conversation import Turn
from ..scroll import AT_BOTTOM_TOLERANCE, ScrollController, ViewportMetrics
from .message import MessageBubble
from .typing_indicator import TypingIndicator


class ConversationView(VerticalScroll):
    """Host message bubbles and keep the newest one in view.

    The view is the :class:`~syncai_chat.scroll.ScrollViewport` its own
    :class:`ScrollController` drives.
    """

    DEFAULT_CSS = """
    ConversationView > .turn-row {
        height: auto;
        margin: 1 0 0 0;
    }
    ConversationView > .turn-row-user {
        align-horizontal: right;
    }
    ConversationView > .turn-row-model {
        align-horizontal: left;
    }
    """

    class NewContentBelow(Message):
        """Posted when the "new content below" affordance should toggle."""

        def __init__(self, visible: bool) -> None:
            super().__init__()
            self.visible = visible

    def __init__(self, tolerance: float = AT_BOTTOM_TOLERANCE, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.scroll_controller = ScrollController(self, tolerance=tolerance)
        self.typing_indicator = TypingIndicator(id="typing_indicator")

    def on_mount(self) -> None:
        self.mount(self.typing_indicator)
        self.watch(self, "scroll_y", self._on_scroll_position_changed, init=False)

    def on_resize(self) -> None:
        self.scroll_controller.on_user_scroll(self.viewport_metrics())

    def _on_scroll_position_changed(self, _old: float, _new: float) -> None:
        self.scroll_controller.on_user_scroll(self.viewport_metrics())

    def viewport_metrics(self) -> ViewportMetrics:
        client_height = self.size.height
        return ViewportMetrics(
            scroll_height=self.max_scroll_y + client_height,
            scroll_top=self.scroll_y,
            client_height=client_height,
        )

    def scroll_to_end(self, animate: bool) -> None:
        self.scroll_end(animate=animate)

    def set_new_content_indicator(self, visible: bool) -> None:
        self.post_message(self.NewContentBelow(visible))

    def add_turn(self, turn: Turn, timestamp: str = "") -> MessageBubble:
        """Mount a bubble for ``turn`` above the typing indicator."""
        bubble = MessageBubble(turn, timestamp=timestamp)
        row = Horizontal(
            bubble, classes=f"turn-row turn-row-{turn.role.value}"
        )
        if self.typing_indicator.is_attached:
            self.mount(row, before=self.typing_indicator)
        else:
            self.mount(row)
        self.scroll_controller.on_content_change()
        return bubble

    def bubbles(self) -> list[MessageBubble]:
        return list(self.query(MessageBubble))


class ScrollDownButton(Button):
    """Affordance that jumps back to the newest message."""

    DEFAULT_CSS = """
    ScrollDownButton {
        width: auto;
        min-width: 16;
        height: 1;
        border: none;
        margin: 0 2;
        display: none;
    }
    ScrollDownButton.-visible {
        display: block;
    }
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__("↓ Scroll down", **kwargs)

    def show(self, visible: bool) -> None:
        self.set_class(visible, "-visible")
