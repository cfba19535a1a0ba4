"""Widget exports for the SyncAI chat UI."""

from .code_block import CodeBlock
from .conversation import ConversationView, ScrollDownButton
from .empty_state import EmptyState
from .input_box import InputBox
from .message import MessageBubble
from .status_bar import StatusBar
from .typing_indicator import TypingIndicator

__all__ = [
    "CodeBlock",
    "ConversationView",
    "EmptyState",
    "InputBox",
    "MessageBubble",
    "ScrollDownButton",
    "StatusBar",
    "TypingIndicator",
]
