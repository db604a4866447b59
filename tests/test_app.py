"""Tests for the chat application loop and composition."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
import io
import unittest

from rich.console import Console

from editchat.app import FAREWELL, ChatApp
from editchat.config import DEFAULT_CONFIG
from editchat.exceptions import LineSourceError
from editchat.state import SessionMode
from editchat.transcript import Sender


class EchoCompletion:
    """Stream the last user message back one word at a time."""

    def __init__(self) -> None:
        self.calls = 0

    async def stream(self, messages: Sequence[dict[str, str]]) -> AsyncIterator[str]:
        self.calls += 1
        last_user = [m for m in messages if m["role"] == "user"][-1]["content"]
        for word in f"Echo: {last_user}".split(" "):
            yield word + " "


class ScriptedLineSource:
    """Replay scripted lines, then close; records prompts seen by each read."""

    def __init__(self, lines: list[object], prompt_text=None) -> None:
        self.lines = list(lines)
        self.prompt_text = prompt_text
        self.prompts: list[str] = []

    async def read_line(self) -> str | None:
        if self.prompt_text is not None:
            self.prompts.append(self.prompt_text())
        if not self.lines:
            return None
        line = self.lines.pop(0)
        if isinstance(line, Exception):
            raise line
        return str(line)


def _config(**session: object) -> dict:
    config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    config["ui"]["clear_screen"] = False
    config["session"].update(session)
    return config


def _app(lines: list[object], **session: object) -> tuple[ChatApp, io.StringIO]:
    buffer = io.StringIO()
    app = ChatApp(
        config=_config(**session),
        completion=EchoCompletion(),
        line_source=ScriptedLineSource(lines),
        console=Console(file=buffer, width=120, color_system=None),
    )
    return app, buffer


class ChatAppTests(unittest.IsolatedAsyncioTestCase):
    """Validate the read/handle loop end to end with fakes."""

    async def test_conversation_then_close_returns_zero(self) -> None:
        app, buffer = _app(["hi", "/edit last", "hello", "/list"])

        code = await app.run()

        self.assertEqual(code, 0)
        self.assertEqual(
            [(m.id, m.sender, m.content.strip(), m.edited) for m in app.store.messages],
            [
                (1, Sender.USER, "hello", True),
                (2, Sender.ASSISTANT, "Echo: hi", False),
                (3, Sender.ASSISTANT, "Echo: hello", False),
            ],
        )
        self.assertIs(app.controller.state.mode, SessionMode.CHAT)
        output = buffer.getvalue()
        self.assertIn("/edit last", output)
        self.assertIn("You (ID: 1): hello (edited)", output)
        self.assertTrue(output.rstrip().endswith(FAREWELL))

    async def test_welcome_message_seeds_transcript(self) -> None:
        app, buffer = _app([], welcome_message="Welcome aboard")

        await app.run()

        self.assertEqual(len(app.store), 1)
        self.assertIs(app.store.messages[0].sender, Sender.SYSTEM)
        self.assertIn("System (ID: 1): Welcome aboard", buffer.getvalue())

    async def test_line_source_failure_takes_close_path(self) -> None:
        app, buffer = _app(["hi", LineSourceError("tty gone"), "never read"])

        with self.assertLogs("editchat.app", level="ERROR") as logs:
            code = await app.run()

        self.assertEqual(code, 0)
        self.assertEqual(len(app.store), 2)
        self.assertIn(FAREWELL, buffer.getvalue())
        self.assertTrue(any("app.line_source.failed" in line for line in logs.output))

    async def test_title_is_printed_literally(self) -> None:
        app, buffer = _app([])
        app.config["ui"]["title"] = "chat [/x] [bold]"

        code = await app.run()

        self.assertEqual(code, 0)
        self.assertIn("chat [/x] [bold]: starting the chat.", buffer.getvalue())

    async def test_redraw_failure_still_reaches_farewell(self) -> None:
        app, buffer = _app(["hi", "/list"])

        def broken_render(messages: object) -> None:
            raise RuntimeError("render broke")

        app.renderer.render = broken_render  # type: ignore[method-assign]

        with self.assertLogs("editchat.renderer", level="WARNING"):
            code = await app.run()

        self.assertEqual(code, 0)
        self.assertEqual(app.store.messages[-1].content.strip(), "Echo: hi")
        self.assertTrue(buffer.getvalue().rstrip().endswith(FAREWELL))

    async def test_prompt_follows_mode(self) -> None:
        app, _ = _app([])
        source = ScriptedLineSource(
            ["hi", "/edit 1", "hey"], prompt_text=lambda: app.controller.prompt_text
        )
        app.line_source = source

        await app.run()

        self.assertEqual(
            source.prompts,
            ["Message > ", "Message > ", "New content > ", "Message > "],
        )


if __name__ == "__main__":
    unittest.main()
