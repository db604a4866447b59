"""Terminal line sources feeding the session controller."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from .exceptions import LineSourceError


class LineSource(Protocol):
    """Deliver one line of text at a time; ``None`` signals the input closed."""

    async def read_line(self) -> str | None:
        ...


class PromptLineSource:
    """Read lines with prompt_toolkit, redrawing a mode-dependent prompt each time."""

    def __init__(
        self,
        prompt_text: Callable[[], str],
        session: Any | None = None,
    ) -> None:
        self._prompt_text = prompt_text
        self._session = session or PromptSession(
            history=InMemoryHistory(),
            multiline=False,
        )

    async def read_line(self) -> str | None:
        try:
            return await self._session.prompt_async(self._prompt_text())
        except (EOFError, KeyboardInterrupt):
            return None
        except OSError as exc:
            raise LineSourceError(f"Terminal input failed: {exc}") from exc
