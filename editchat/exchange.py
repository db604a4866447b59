"""Completion exchange: fold a streamed assistant turn into the transcript."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import aclosing
from dataclasses import dataclass
import logging

from .chat import CompletionCapability
from .exceptions import CompletionStreamingError, EditChatError
from .renderer import run_display
from .transcript import Sender, TranscriptStore

LOGGER = logging.getLogger(__name__)

RETRY_LATER_NOTICE = (
    "The assistant could not respond right now. Please try again later."
)


@dataclass(frozen=True)
class ExchangeResult:
    """Outcome of one completion exchange."""

    assistant_id: int | None
    notice_id: int | None
    fragments: int
    error: EditChatError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CompletionExchange:
    """Drive one assistant turn against the full transcript.

    Every fragment is applied to the accumulation target and rendered before
    the next fragment is read, so redraws follow arrival order exactly.
    """

    def __init__(
        self,
        store: TranscriptStore,
        completion: CompletionCapability,
        render: Callable[[], None],
    ) -> None:
        self._store = store
        self._completion = completion
        self._render = render

    def _apply(self, assistant_id: int, accumulated: str) -> None:
        self._store.replace_content(assistant_id, accumulated, mark_edited=False)
        run_display(self._render, event="chat.exchange.render_failed")

    async def run(self) -> ExchangeResult:
        """Request a streamed reply and accumulate it into a new assistant message."""
        request = self._store.as_role_pairs()
        LOGGER.info(
            "chat.exchange.start",
            extra={"event": "chat.exchange.start", "messages": len(request)},
        )

        assistant_id: int | None = None
        fragments = 0
        accumulated = ""
        try:
            async with aclosing(self._completion.stream(request)) as stream:
                # The stream has started once the first fragment (or a clean end) arrives.
                try:
                    first = await anext(stream)
                except StopAsyncIteration:
                    first = None
                assistant_id = self._store.append(Sender.ASSISTANT, "")
                if first is None:
                    return self._completed(assistant_id, fragments)
                accumulated = first
                fragments = 1
                self._apply(assistant_id, accumulated)
                async for fragment in stream:
                    accumulated += fragment
                    fragments += 1
                    self._apply(assistant_id, accumulated)
        except Exception as exc:  # noqa: BLE001 - reported as a transcript notice.
            error = (
                exc
                if isinstance(exc, EditChatError)
                else CompletionStreamingError(str(exc))
            )
            LOGGER.warning(
                "chat.exchange.failed",
                extra={
                    "event": "chat.exchange.failed",
                    "error_type": error.__class__.__name__,
                    "fragments": fragments,
                },
            )
            notice_id = self._store.append(Sender.SYSTEM, RETRY_LATER_NOTICE)
            return ExchangeResult(
                assistant_id=assistant_id,
                notice_id=notice_id,
                fragments=fragments,
                error=error,
            )

        return self._completed(assistant_id, fragments)

    @staticmethod
    def _completed(assistant_id: int, fragments: int) -> ExchangeResult:
        LOGGER.info(
            "chat.exchange.complete",
            extra={
                "event": "chat.exchange.complete",
                "assistant_id": assistant_id,
                "fragments": fragments,
            },
        )
        return ExchangeResult(
            assistant_id=assistant_id, notice_id=None, fragments=fragments
        )
