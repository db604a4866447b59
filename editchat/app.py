"""Composition root and read/handle/redraw loop for the terminal chat client."""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Console
from rich.text import Text

from .chat import CompletionCapability, OllamaCompletion
from .commands import EDIT_COMMAND, EDIT_LAST_ARGUMENT, LIST_COMMAND
from .config import load_config
from .controller import SessionController
from .exceptions import LineSourceError
from .exchange import CompletionExchange
from .line_source import LineSource, PromptLineSource
from .renderer import SenderLabels, TranscriptRenderer
from .transcript import Sender, TranscriptStore

LOGGER = logging.getLogger(__name__)

FAREWELL = "Ending the chat. Goodbye!"

COMMAND_HELP: tuple[tuple[str, str], ...] = (
    (f"{EDIT_COMMAND} <id>", "Edit one of your messages by ID"),
    (f"{EDIT_COMMAND} {EDIT_LAST_ARGUMENT}", "Edit your most recent message"),
    (LIST_COMMAND, "Show the chat history"),
    ("Ctrl+D", "Quit"),
)


class ChatApp:
    """Wire the transcript, completion backend, controller, and terminal together."""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        completion: CompletionCapability | None = None,
        line_source: LineSource | None = None,
        console: Console | None = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        ollama_cfg = self.config["ollama"]
        ui_cfg = self.config["ui"]

        self.store = TranscriptStore()
        welcome = self.config["session"]["welcome_message"]
        if welcome:
            self.store.append(Sender.SYSTEM, welcome)

        self.renderer = TranscriptRenderer(
            console=console,
            labels=SenderLabels(
                user=ui_cfg["user_label"],
                assistant=ui_cfg["assistant_label"],
                system=ui_cfg["system_label"],
            ),
            show_timestamps=ui_cfg["show_timestamps"],
            clear_screen=ui_cfg["clear_screen"],
        )
        self.completion = completion or OllamaCompletion(
            host=ollama_cfg["host"],
            model=ollama_cfg["model"],
            timeout=ollama_cfg["timeout"],
        )
        self.exchange = CompletionExchange(
            self.store, self.completion, render=self.render
        )
        self.controller = SessionController(
            self.store,
            self.exchange,
            render=self.render,
            notify=self.renderer.notify,
        )
        self.line_source = line_source or PromptLineSource(
            prompt_text=lambda: self.controller.prompt_text
        )

    def render(self) -> None:
        self.renderer.render(self.store.messages)

    def show_banner(self) -> None:
        console = self.renderer.console
        if len(self.store):
            self.render()
        elif self.renderer.clear_screen:
            console.clear()
        console.print(
            Text(f"{self.config['ui']['title']}: starting the chat.", style="bold")
        )
        console.print("Commands:")
        for usage, description in COMMAND_HELP:
            console.print(f"  {usage:<14} {description}", markup=False)

    async def run(self) -> int:
        """Serve input lines until the line source closes; return the exit code."""
        self.show_banner()
        while True:
            try:
                line = await self.line_source.read_line()
            except LineSourceError as exc:
                LOGGER.error(
                    "app.line_source.failed",
                    extra={"event": "app.line_source.failed", "error": str(exc)},
                )
                break
            if line is None:
                break
            await self.controller.handle_line(line)
        self.renderer.console.print(f"\n{FAREWELL}", markup=False)
        return 0
