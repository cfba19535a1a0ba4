"""Domain exception hierarchy for the SyncAI chat application."""

from __future__ import annotations


class SyncAIChatError(RuntimeError):
    """Base class for all domain-level chat errors."""


class CompletionFailure(SyncAIChatError):
    """Raised when the hosted model cannot produce an answer.

    This is the only failure kind the transcript ever reflects; the
    subclasses below exist for diagnostics and logging.
    """


class CompletionConnectionError(CompletionFailure):
    """Raised when the model endpoint cannot be reached."""


class CompletionAPIError(CompletionFailure):
    """Raised when the model endpoint rejects or fails the request."""


class CompletionResponseError(CompletionFailure):
    """Raised when the endpoint answers without usable text."""


class CompletionTimeoutError(CompletionFailure):
    """Raised when a completion call exceeds its time budget."""


class ConfigValidationError(SyncAIChatError):
    """Raised when configuration cannot be validated safely."""


class MissingAPIKeyError(SyncAIChatError):
    """Raised when the API key environment variable is not set."""
