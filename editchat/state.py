"""Session mode state and pure transition functions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SessionMode(str, Enum):
    """Input interpretation mode of the session controller."""

    CHAT = "chat"
    EDIT = "edit"


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of the controller mode and its edit target."""

    mode: SessionMode = SessionMode.CHAT
    editing_target_id: int | None = None

    def __post_init__(self) -> None:
        if (self.mode is SessionMode.EDIT) != (self.editing_target_id is not None):
            raise ValueError(
                "editing_target_id must be set exactly when mode is edit."
            )

    @property
    def is_editing(self) -> bool:
        return self.mode is SessionMode.EDIT


def initial_state() -> SessionState:
    """Return the state a new session starts in."""
    return SessionState()


def enter_edit(state: SessionState, target_id: int) -> SessionState:
    """Switch to edit mode targeting ``target_id``."""
    if state.is_editing:
        raise ValueError("Session is already editing a message.")
    return SessionState(mode=SessionMode.EDIT, editing_target_id=target_id)


def exit_edit(state: SessionState) -> SessionState:
    """Return to chat mode, clearing any edit target."""
    if not state.is_editing:
        return state
    return initial_state()
