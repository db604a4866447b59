"""Plain sequential transcript rendering for the terminal."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
import logging
from typing import Any

from rich.console import Console
from rich.text import Text

from .transcript import Message, Sender

HEADER = "=== Chat history ==="
FOOTER = "=" * len(HEADER)
EDITED_MARKER = "(edited)"

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SenderLabels:
    """Human-friendly labels shown for each sender."""

    user: str = "You"
    assistant: str = "Assistant"
    system: str = "System"

    def for_sender(self, sender: Sender) -> str:
        return {
            Sender.USER: self.user,
            Sender.ASSISTANT: self.assistant,
            Sender.SYSTEM: self.system,
        }[sender]


_SENDER_STYLES: Mapping[Sender, str] = {
    Sender.USER: "bold cyan",
    Sender.ASSISTANT: "bold green",
    Sender.SYSTEM: "bold yellow",
}


def _timestamp_prefix(message: Message, show_timestamps: bool) -> str:
    if not show_timestamps:
        return ""
    return f"[{message.timestamp.strftime('%H:%M:%S')}] "


def format_message(
    message: Message,
    labels: SenderLabels | None = None,
    show_timestamps: bool = True,
) -> str:
    """Return the single transcript line for ``message``."""
    labels = labels or SenderLabels()
    line = (
        f"{_timestamp_prefix(message, show_timestamps)}"
        f"{labels.for_sender(message.sender)} (ID: {message.id}): {message.content}"
    )
    if message.edited:
        line = f"{line} {EDITED_MARKER}"
    return line


class TranscriptRenderer:
    """Dump the full transcript to a rich console on every call."""

    def __init__(
        self,
        console: Console | None = None,
        labels: SenderLabels | None = None,
        show_timestamps: bool = True,
        clear_screen: bool = True,
    ) -> None:
        self.console = console or Console(highlight=False)
        self.labels = labels or SenderLabels()
        self.show_timestamps = show_timestamps
        self.clear_screen = clear_screen

    def build_line(self, message: Message) -> Text:
        """Return the styled transcript line, with the sender label highlighted."""
        line = Text(format_message(message, self.labels, self.show_timestamps))
        start = len(_timestamp_prefix(message, self.show_timestamps))
        end = start + len(self.labels.for_sender(message.sender))
        line.stylize(_SENDER_STYLES[message.sender], start, end)
        return line

    def render(self, messages: Iterable[Message]) -> None:
        if self.clear_screen:
            self.console.clear()
        self.console.print(Text(HEADER, style="bold"))
        self.console.print()
        for message in messages:
            self.console.print(self.build_line(message))
        self.console.print()
        self.console.print(Text(FOOTER, style="bold"))
        self.console.print()

    def notify(self, text: str) -> None:
        """Print a one-line notice outside the transcript."""
        self.console.print(Text(text, style="dim"))


def run_display(action: Callable[..., None], *args: Any, event: str) -> bool:
    """Call a redraw or notice callback, logging a failure instead of raising.

    Returns False when ``action`` raised. The transcript is never touched here.
    """
    try:
        action(*args)
    except Exception as exc:  # noqa: BLE001 - logged; the session carries on.
        LOGGER.warning(
            event,
            extra={
                "event": event,
                "error_type": exc.__class__.__name__,
                "error": str(exc),
            },
        )
        return False
    return True
