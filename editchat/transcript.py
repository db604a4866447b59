"""Ordered message history with monotonically increasing ids."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Sender(str, Enum):
    """Author of a transcript message; values double as completion roles."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass
class Message:
    """A single turn in the transcript."""

    id: int
    sender: Sender
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
    edited: bool = False


class TranscriptStore:
    """Own the ordered message list and the id counter.

    The sequence is append-only; the only mutation of an existing message is
    a wholesale content replacement through :meth:`replace_content`.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or datetime.now
        self._messages: list[Message] = []
        self._counter = 0

    @property
    def messages(self) -> tuple[Message, ...]:
        """Return the messages in conversation order."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, sender: Sender | str, content: str) -> int:
        """Append a new message and return its freshly assigned id."""
        normalized_sender = Sender(sender)
        self._counter += 1
        self._messages.append(
            Message(
                id=self._counter,
                sender=normalized_sender,
                content=content,
                timestamp=self._clock(),
            )
        )
        return self._counter

    def find_by_id(self, message_id: int) -> Message | None:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    def find_last_by_sender(self, sender: Sender | str) -> Message | None:
        """Return the most recent message from ``sender``, if any."""
        wanted = Sender(sender)
        for message in reversed(self._messages):
            if message.sender is wanted:
                return message
        return None

    def replace_content(
        self, message_id: int, content: str, *, mark_edited: bool
    ) -> bool:
        """Overwrite a message's content; return False when the id is unknown."""
        message = self.find_by_id(message_id)
        if message is None:
            return False
        message.content = content
        if mark_edited:
            message.edited = True
        return True

    def as_role_pairs(self) -> list[dict[str, str]]:
        """Build the ordered role/content list sent to the completion backend."""
        return [
            {"role": message.sender.value, "content": message.content}
            for message in self._messages
        ]
