"""Streaming completion backends for the chat session."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Sequence
import logging
from typing import Any, Protocol

from .exceptions import (
    CompletionConnectionError,
    CompletionModelNotFoundError,
    CompletionStreamingError,
    EditChatError,
)

try:
    import httpx
except ModuleNotFoundError:  # pragma: no cover - optional transport dependency.
    httpx = None  # type: ignore[assignment]

try:
    from ollama import AsyncClient as _AsyncClient
except (
    ModuleNotFoundError
):  # pragma: no cover - exercised only in missing dependency environments.
    _AsyncClient = None  # type: ignore[misc,assignment]

LOGGER = logging.getLogger(__name__)

RoleMessage = dict[str, str]


class CompletionCapability(Protocol):
    """Anything that can stream an assistant turn for an ordered message list."""

    def stream(self, messages: Sequence[RoleMessage]) -> AsyncGenerator[str, None]:
        """Return a lazy, finite async generator of text fragments."""
        ...


class OllamaCompletion:
    """Stream assistant replies from an Ollama host."""

    def __init__(
        self,
        host: str,
        model: str,
        timeout: int = 120,
        client: Any | None = None,
    ) -> None:
        self.host = host
        self.model = model
        self.timeout = timeout

        if client is not None:
            self._client = client
        elif _AsyncClient is not None:
            self._client = _AsyncClient(host=host, timeout=timeout)
        else:
            raise CompletionConnectionError(
                "The ollama package is not installed. Install dependencies with pip install -e ."
            )

    @staticmethod
    def _extract_chunk_text(chunk: Any) -> str | None:
        """Extract streamed token text from an Ollama chunk payload.

        Tries SDK object attribute access first, then falls back to dict paths
        produced by model_dump(). Returns None when the chunk carries no content.
        """
        message_obj = getattr(chunk, "message", None)
        if message_obj is not None and not isinstance(message_obj, dict):
            value = getattr(message_obj, "content", None)
            return value if isinstance(value, str) else None

        if hasattr(chunk, "model_dump"):
            try:
                chunk = chunk.model_dump()
            except Exception:
                return None

        if isinstance(chunk, dict):
            message = chunk.get("message")
            if isinstance(message, dict):
                value = message.get("content")
                return value if isinstance(value, str) else None
        return None

    def _map_exception(self, exc: Exception) -> EditChatError:
        if isinstance(exc, EditChatError):
            return exc

        lower_message = str(exc).lower()

        if httpx is not None and isinstance(
            exc,
            (
                httpx.ConnectError,
                httpx.ConnectTimeout,
                httpx.ReadTimeout,
                httpx.NetworkError,
            ),
        ):
            return CompletionConnectionError(
                f"Unable to connect to Ollama host {self.host}."
            )
        if isinstance(exc, ConnectionError):
            return CompletionConnectionError(
                f"Unable to connect to Ollama host {self.host}."
            )

        if "model" in lower_message and "not found" in lower_message:
            return CompletionModelNotFoundError(
                f"Model {self.model!r} was not found on {self.host}."
            )
        if "404" in lower_message and "model" in lower_message:
            return CompletionModelNotFoundError(
                f"Model {self.model!r} was not found on {self.host}."
            )

        return CompletionStreamingError(
            f"Failed to stream response from Ollama at {self.host}: {exc}"
        )

    async def stream(
        self, messages: Sequence[RoleMessage]
    ) -> AsyncGenerator[str, None]:
        """Stream a single chat turn, yielding content fragments in arrival order."""
        request_messages = [dict(message) for message in messages]
        try:
            response = await self._client.chat(
                model=self.model, messages=request_messages, stream=True
            )
            async for chunk in response:
                text = self._extract_chunk_text(chunk)
                if text is not None:
                    yield text
        except Exception as exc:  # noqa: BLE001 - external API can fail in many ways.
            raise self._map_exception(exc) from exc
