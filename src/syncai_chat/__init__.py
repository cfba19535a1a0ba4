"""Top-level package for the SyncAI terminal chat client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import SyncAIChatApp
    from .completion import CompletionClient, GeminiCompletionClient
    from .config import ensure_config_dir, load_config
    from .conversation import ConversationStore, Role, Turn
    from .exceptions import (
        CompletionFailure,
        ConfigValidationError,
        MissingAPIKeyError,
        SyncAIChatError,
    )
    from .scroll import ScrollController

__all__ = [
    "CompletionClient",
    "CompletionFailure",
    "ConfigValidationError",
    "ConversationStore",
    "GeminiCompletionClient",
    "MissingAPIKeyError",
    "Role",
    "ScrollController",
    "SyncAIChatApp",
    "SyncAIChatError",
    "Turn",
    "ensure_config_dir",
    "load_config",
]

_LAZY_EXPORTS: dict[str, str] = {
    "SyncAIChatApp": ".app",
    "CompletionClient": ".completion",
    "GeminiCompletionClient": ".completion",
    "ensure_config_dir": ".config",
    "load_config": ".config",
    "ConversationStore": ".conversation",
    "Role": ".conversation",
    "Turn": ".conversation",
    "CompletionFailure": ".exceptions",
    "ConfigValidationError": ".exceptions",
    "MissingAPIKeyError": ".exceptions",
    "SyncAIChatError": ".exceptions",
    "ScrollController": ".scroll",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols so importing the package does not pull in Textual."""
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)
