"""Pure command parsing helpers for the chat input line."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

EDIT_COMMAND = "/edit"
LIST_COMMAND = "/list"
EDIT_LAST_ARGUMENT = "last"


class CommandKind(str, Enum):
    """What an input line asks the session to do while in chat mode."""

    EDIT = "edit"
    LIST = "list"
    CHAT = "chat"


@dataclass(frozen=True)
class ParsedCommand:
    """Result of interpreting one chat-mode input line."""

    kind: CommandKind
    text: str
    argument: str = ""

    @property
    def targets_last(self) -> bool:
        return self.kind is CommandKind.EDIT and self.argument == EDIT_LAST_ARGUMENT

    def target_id(self) -> int | None:
        """Return the numeric edit target, or None when the argument is not an int."""
        if self.kind is not CommandKind.EDIT:
            return None
        try:
            return int(self.argument)
        except ValueError:
            return None


def parse_line(text: str) -> ParsedCommand:
    """Classify a non-empty input line.

    Commands are case-sensitive. ``/edit`` must be its own token and the
    first following token is its argument. ``/list`` must match the whole line.
    """

    parts = text.split()
    if parts and parts[0] == EDIT_COMMAND:
        argument = parts[1] if len(parts) > 1 else ""
        return ParsedCommand(kind=CommandKind.EDIT, text=text, argument=argument)
    if text == LIST_COMMAND:
        return ParsedCommand(kind=CommandKind.LIST, text=text)
    return ParsedCommand(kind=CommandKind.CHAT, text=text)
