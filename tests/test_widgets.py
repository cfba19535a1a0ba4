"""Widget-level tests run inside a minimal Textual harness."""

from __future__ import annotations

from datetime import datetime
import unittest

from textual.app import App, ComposeResult
from textual.widget import Widget
from textual.widgets import Button, Input

from syncai_chat.conversation import Role, Turn
from syncai_chat.widgets import (
    CodeBlock,
    ConversationView,
    EmptyState,
    InputBox,
    MessageBubble,
    StatusBar,
    TypingIndicator,
)
from syncai_chat.widgets.message import format_timestamp


class _Harness(App[None]):
    def __init__(self, *widgets: Widget) -> None:
        super().__init__()
        self._widgets = widgets
        self.picked: list[str] = []
        self.indicator_events: list[bool] = []
        self.copied: list[str] = []

    def compose(self) -> ComposeResult:
        yield from self._widgets

    def copy_to_clipboard(self, text: str) -> None:
        self.copied.append(text)

    def on_empty_state_example_picked(self, event: EmptyState.ExamplePicked) -> None:
        self.picked.append(event.text)

    def on_conversation_view_new_content_below(
        self, event: ConversationView.NewContentBelow
    ) -> None:
        self.indicator_events.append(event.visible)


class FormatTimestampTests(unittest.TestCase):
    def test_twelve_hour_clock(self) -> None:
        self.assertEqual(format_timestamp(datetime(2024, 5, 1, 15, 45)), "3:45 PM")
        self.assertEqual(format_timestamp(datetime(2024, 5, 1, 0, 5)), "12:05 AM")
        self.assertEqual(format_timestamp(datetime(2024, 5, 1, 12, 0)), "12:00 PM")


class WidgetTests(unittest.IsolatedAsyncioTestCase):
    """Validate bubbles, code blocks, and the composer row."""

    async def test_model_bubble_splits_prose_and_code(self) -> None:
        turn = Turn(Role.MODEL, "Run this:\n```python\nprint('hi')\n```\nThat's it.")
        bubble = MessageBubble(turn, timestamp="3:45 PM")
        app = _Harness(bubble)
        async with app.run_test():
            self.assertTrue(bubble.has_class("role-model"))
            self.assertFalse(bubble.has_class("error"))
            self.assertEqual(bubble.header_text().plain, "SyncAI  3:45 PM")
            blocks = list(bubble.query(CodeBlock))
            self.assertEqual(len(blocks), 1)
            self.assertEqual(blocks[0].lang, "python")
            self.assertEqual(blocks[0].code, "print('hi')\n")
            self.assertEqual(len(bubble.query(".prose-segment")), 2)

    async def test_tilde_fenced_block_gets_copy_button(self) -> None:
        bubble = MessageBubble(Turn(Role.MODEL, "~~~html\n<b>x</b>\n~~~"))
        async with _Harness(bubble).run_test():
            blocks = list(bubble.query(CodeBlock))
            self.assertEqual(len(blocks), 1)
            self.assertEqual(blocks[0].lang, "html")
            self.assertEqual(blocks[0].code, "<b>x</b>\n")

    async def test_error_and_user_bubbles(self) -> None:
        error_bubble = MessageBubble(Turn(Role.MODEL, "oops", is_error=True))
        user_bubble = MessageBubble(Turn(Role.USER, "hi"))
        async with _Harness(error_bubble, user_bubble).run_test():
            self.assertTrue(error_bubble.has_class("error"))
            self.assertTrue(user_bubble.has_class("role-user"))
            self.assertEqual(user_bubble.role_label, "You")
            self.assertEqual(user_bubble.header_text().plain, "You")

    async def test_code_block_copy_button(self) -> None:
        bubble = MessageBubble(Turn(Role.MODEL, "```sh\nls -la\n```"))
        app = _Harness(bubble)
        async with app.run_test() as pilot:
            bubble.query_one("#copy-btn", Button).press()
            await pilot.pause()
            self.assertEqual(app.copied, ["ls -la\n"])

    async def test_empty_state_posts_picked_example(self) -> None:
        empty = EmptyState(["first idea", "second idea"], title="SyncAI")
        app = _Harness(empty)
        async with app.run_test() as pilot:
            self.assertEqual(len(empty.query(Button)), 2)
            empty.query_one("#example-1", Button).press()
            await pilot.pause()
            self.assertEqual(app.picked, ["second idea"])

    async def test_input_box_busy_state(self) -> None:
        box = InputBox(disclaimer="Check important info.")
        async with _Harness(box).run_test():
            send = box.query_one("#send_button", Button)
            field = box.query_one("#message_input", Input)
            self.assertTrue(send.disabled)
            box.set_busy(False, can_send=True)
            self.assertFalse(send.disabled)
            box.set_busy(True, can_send=True)
            self.assertTrue(send.disabled)
            self.assertTrue(field.disabled)
            self.assertEqual(str(send.label), "…")
            box.set_busy(False, can_send=False)
            self.assertTrue(send.disabled)
            self.assertFalse(field.disabled)
            self.assertEqual(len(box.query("#disclaimer")), 1)

    async def test_status_bar_segments(self) -> None:
        bar = StatusBar()
        async with _Harness(bar).run_test():
            bar.set_status(pending=True, model="gemini-1.5-flash", turn_count=3)
            self.assertIn("waiting", str(bar.query_one("#status_state").render()))
            self.assertIn(
                "gemini-1.5-flash", str(bar.query_one("#status_model").render())
            )
            self.assertIn("3", str(bar.query_one("#status_turns").render()))

    async def test_typing_indicator_start_stop(self) -> None:
        indicator = TypingIndicator()
        async with _Harness(indicator).run_test() as pilot:
            self.assertFalse(indicator.active)
            indicator.start()
            await pilot.pause(0.2)
            self.assertTrue(indicator.active)
            indicator.stop()
            self.assertFalse(indicator.active)


class ConversationViewTests(unittest.IsolatedAsyncioTestCase):
    """Validate bubble mounting and the new-content notification."""

    async def test_turns_are_mounted_above_typing_indicator(self) -> None:
        view = ConversationView(id="conversation")
        async with _Harness(view).run_test() as pilot:
            view.add_turn(Turn(Role.USER, "hi"))
            view.add_turn(Turn(Role.MODEL, "hello"))
            await pilot.pause()
            self.assertEqual(
                [bubble.turn.role for bubble in view.bubbles()],
                [Role.USER, Role.MODEL],
            )
            self.assertIs(view.children[-1], view.typing_indicator)
            self.assertTrue(view.children[0].has_class("turn-row-user"))

    async def test_new_content_indicator_is_posted(self) -> None:
        view = ConversationView(id="conversation")
        app = _Harness(view)
        async with app.run_test() as pilot:
            view.set_new_content_indicator(True)
            await pilot.pause()
            self.assertEqual(app.indicator_events[-1], True)

    async def test_new_turn_follows_when_at_bottom(self) -> None:
        view = ConversationView(id="conversation")
        async with _Harness(view).run_test() as pilot:
            for index in range(30):
                view.add_turn(Turn(Role.MODEL, f"message {index}"))
            await pilot.pause()
            self.assertGreater(view.max_scroll_y, 0)
            self.assertEqual(view.scroll_y, view.max_scroll_y)

            view.add_turn(Turn(Role.USER, "one more"))
            await pilot.pause()
            self.assertEqual(view.scroll_y, view.max_scroll_y)

    async def test_reading_position_kept_a_few_rows_up(self) -> None:
        view = ConversationView(id="conversation")
        app = _Harness(view)
        async with app.run_test() as pilot:
            for index in range(30):
                view.add_turn(Turn(Role.MODEL, f"message {index}"))
            await pilot.pause()

            view.scroll_to(y=view.max_scroll_y - 6, animate=False)
            await pilot.pause()
            reading_position = view.scroll_y
            self.assertFalse(view.scroll_controller.at_bottom)

            view.add_turn(Turn(Role.MODEL, "late reply"))
            await pilot.pause()
            self.assertEqual(view.scroll_y, reading_position)
            self.assertEqual(app.indicator_events[-1], True)
            self.assertTrue(view.scroll_controller.has_unseen_content)

    async def test_viewport_metrics_at_rest(self) -> None:
        view = ConversationView(id="conversation")
        async with _Harness(view).run_test():
            metrics = view.viewport_metrics()
            self.assertEqual(metrics.distance_from_bottom(), 0)
            self.assertTrue(view.scroll_controller.at_bottom)


if __name__ == "__main__":
    unittest.main()
