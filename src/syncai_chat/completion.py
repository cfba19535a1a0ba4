"""Completion client boundary for the hosted Gemini model."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
import os
from typing import Any

from google import genai
from google.genai import errors as genai_errors
import httpx

from .exceptions import (
    CompletionAPIError,
    CompletionConnectionError,
    CompletionFailure,
    CompletionResponseError,
    MissingAPIKeyError,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_API_KEY_ENV = "GEMINI_API_KEY"

_CONNECTIVITY_ERRORS: tuple[type[Exception], ...] = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.NetworkError,
)


class CompletionClient(ABC):
    """Turn a prompt into model text, raising :class:`CompletionFailure` on error."""

    model: str = ""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Return the model's answer to ``prompt``."""


class GeminiCompletionClient(CompletionClient):
    """Stateless single-prompt client backed by the google-genai SDK.

    Each call sends only the given prompt; no conversation history is
    forwarded upstream.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        client: Any | None = None,
    ) -> None:
        self.model = model
        self._client = client if client is not None else genai.Client(api_key=api_key)

    async def generate(self, prompt: str) -> str:
        LOGGER.info(
            "completion.request.start",
            extra={
                "event": "completion.request.start",
                "model": self.model,
                "prompt_chars": len(prompt),
            },
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
            )
        except Exception as exc:
            raise self._map_exception(exc) from exc

        text = self._extract_text(response)
        if not text:
            raise CompletionResponseError(
                f"Model {self.model!r} returned an empty response."
            )
        LOGGER.info(
            "completion.request.done",
            extra={
                "event": "completion.request.done",
                "model": self.model,
                "response_chars": len(text),
            },
        )
        return text

    @staticmethod
    def _extract_text(response: Any) -> str:
        # ``response.text`` raises on some blocked candidates; read parts as a fallback.
        try:
            text = getattr(response, "text", None)
        except (ValueError, AttributeError):
            text = None
        if isinstance(text, str) and text.strip():
            return text

        candidates = getattr(response, "candidates", None) or []
        for candidate in candidates:
            content = getattr(candidate, "content", None)
            parts = getattr(content, "parts", None) or []
            texts = [
                part.text
                for part in parts
                if isinstance(getattr(part, "text", None), str) and part.text
            ]
            if texts:
                return "".join(texts)
        return ""

    def _map_exception(self, exc: Exception) -> CompletionFailure:
        if isinstance(exc, CompletionFailure):
            return exc
        if isinstance(exc, _CONNECTIVITY_ERRORS):
            return CompletionConnectionError(
                f"Unable to reach the Gemini endpoint: {exc}"
            )
        if isinstance(exc, genai_errors.APIError):
            return CompletionAPIError(
                f"Gemini API error {getattr(exc, 'code', '?')}: {exc}"
            )
        return CompletionResponseError(
            f"Unexpected failure from model {self.model!r}: {exc}"
        )


def read_api_key(env_var: str = DEFAULT_API_KEY_ENV) -> str:
    """Read the API key from the environment at startup."""
    value = os.environ.get(env_var, "").strip()
    if not value:
        raise MissingAPIKeyError(
            f"Environment variable {env_var} is not set; export your Gemini API key."
        )
    return value


def build_completion_client(completion_config: dict[str, Any]) -> GeminiCompletionClient:
    """Construct the Gemini client from the ``[completion]`` config section."""
    api_key = read_api_key(str(completion_config.get("api_key_env", DEFAULT_API_KEY_ENV)))
    model = str(completion_config.get("model", DEFAULT_MODEL))
    LOGGER.info(
        "completion.client.created",
        extra={"event": "completion.client.created", "model": model},
    )
    return GeminiCompletionClient(api_key=api_key, model=model)


class UnavailableCompletionClient(CompletionClient):
    """Stand-in used when no client could be built; every call fails.

    Keeps the app usable (and the transcript consistent) when the API key
    is missing: each submission settles into the error turn.
    """

    def __init__(self, reason: str, model: str = DEFAULT_MODEL) -> None:
        self.reason = reason
        self.model = model

    async def generate(self, prompt: str) -> str:
        raise CompletionAPIError(self.reason)
