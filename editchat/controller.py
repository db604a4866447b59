"""Session controller: interpret input lines against the chat/edit state machine."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging

from .commands import CommandKind, ParsedCommand, parse_line
from .exchange import CompletionExchange
from .renderer import run_display
from .state import SessionMode, SessionState, enter_edit, exit_edit, initial_state
from .transcript import Sender, TranscriptStore

LOGGER = logging.getLogger(__name__)

CHAT_PROMPT = "Message > "
EDIT_PROMPT = "New content > "

NO_EDITABLE_MESSAGE = "No editable message found."
ID_NOT_FOUND = "Message ID not found."
NON_USER_MESSAGE = "Only your own messages can be edited."
MESSAGE_UPDATED = "Message updated."


class SessionController:
    """Route each input line to a command, an edit, or a new chat turn.

    ``render`` redraws the whole transcript; ``notify`` prints a one-line
    notice that is not part of the transcript.
    """

    def __init__(
        self,
        store: TranscriptStore,
        exchange: CompletionExchange,
        render: Callable[[], None],
        notify: Callable[[str], None],
    ) -> None:
        self._store = store
        self._exchange = exchange
        self._render = render
        self._notify = notify
        self._state = initial_state()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def prompt_text(self) -> str:
        """Return the prompt matching the current mode."""
        return EDIT_PROMPT if self._state.is_editing else CHAT_PROMPT

    def _transition(self, new_state: SessionState) -> None:
        LOGGER.info(
            "session.mode.transition",
            extra={
                "event": "session.mode.transition",
                "from_state": self._state.mode.value,
                "to_state": new_state.mode.value,
                "target_id": new_state.editing_target_id,
            },
        )
        self._state = new_state

    def _redraw(self) -> None:
        run_display(self._render, event="session.render.failed")

    def _tell(self, notice: str) -> None:
        run_display(self._notify, notice, event="session.notify.failed")

    async def handle_line(self, line: str) -> None:
        """Process one input line to completion, including any streamed reply."""
        if not line.strip():
            return
        async with self._lock:
            if self._state.mode is SessionMode.EDIT:
                await self._handle_edit_mode(line)
            else:
                await self._handle_chat_mode(line)

    async def _handle_chat_mode(self, line: str) -> None:
        command = parse_line(line.strip())
        if command.kind is CommandKind.EDIT:
            self._begin_edit(command)
            return
        if command.kind is CommandKind.LIST:
            self._redraw()
            return
        self._store.append(Sender.USER, line)
        await self._exchange.run()
        self._redraw()

    def _begin_edit(self, command: ParsedCommand) -> None:
        if command.targets_last:
            target = self._store.find_last_by_sender(Sender.USER)
            if target is None:
                self._reject(NO_EDITABLE_MESSAGE, command)
                return
        else:
            target_id = command.target_id()
            target = self._store.find_by_id(target_id) if target_id is not None else None
            if target is None:
                self._reject(ID_NOT_FOUND, command)
                return
            if target.sender is not Sender.USER:
                self._reject(NON_USER_MESSAGE, command)
                return

        self._transition(enter_edit(self._state, target.id))
        self._tell(f"Editing message ID {target.id}.")
        self._tell(f"Current content: {target.content}")
        self._tell("Enter the new content:")

    def _reject(self, notice: str, command: ParsedCommand) -> None:
        LOGGER.info(
            "session.edit.rejected",
            extra={
                "event": "session.edit.rejected",
                "argument": command.argument,
                "reason": notice,
            },
        )
        self._tell(notice)

    async def _handle_edit_mode(self, line: str) -> None:
        target_id = self._state.editing_target_id
        if target_id is not None and self._store.replace_content(
            target_id, line, mark_edited=True
        ):
            self._tell(MESSAGE_UPDATED)
            await self._exchange.run()
        else:
            LOGGER.warning(
                "session.edit.target_missing",
                extra={"event": "session.edit.target_missing", "target_id": target_id},
            )
        self._transition(exit_edit(self._state))
        self._redraw()
