"""Asynchronous line prompts for the quiz shell."""

from __future__ import annotations

import asyncio
import threading
from typing import Callable, Protocol

from rich.console import Console
from rich.text import Text

try:
    import readline
except ImportError:  # pragma: no cover - Windows without pyreadline
    readline = None  # type: ignore[assignment]

__all__ = ["Prompt", "ConsolePrompt"]


class Prompt(Protocol):
    """Ask one question and resolve with the trimmed reply."""

    async def ask(self, text: str, *, default: str | None = None) -> str:
        ...


class ConsolePrompt:
    """Read replies from the terminal without blocking the event loop.

    Each read runs on a daemon thread that hands the line back to the loop,
    so an interrupt can end the loop while ``input`` is still blocked. A
    reader left blocked that way can only be abandoned, never joined; check
    :attr:`reading` before a normal interpreter shutdown.

    ``default`` pre-fills the input line through readline so the user can
    edit the current value in place. Without readline or a terminal the
    pre-fill is skipped and the user types the whole value.
    """

    def __init__(self, console: Console, *, style: str = "red") -> None:
        self._console = console
        self._style = style
        self._reader: threading.Thread | None = None

    @property
    def reading(self) -> bool:
        """True while a reader thread is blocked waiting for a line."""

        return self._reader is not None and self._reader.is_alive()

    async def ask(self, text: str, *, default: str | None = None) -> str:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()

        def settle(setter: Callable[..., None], value: object) -> None:
            if not future.done():
                setter(value)

        def hand_back(setter: Callable[..., None], value: object) -> None:
            try:
                loop.call_soon_threadsafe(settle, setter, value)
            except RuntimeError:
                # The loop closed while this line was being read.
                pass

        def read() -> None:
            try:
                line = self._read_line(text, default)
            except Exception as exc:
                hand_back(future.set_exception, exc)
            else:
                hand_back(future.set_result, line)

        self._reader = threading.Thread(
            target=read, name="quiz-prompt", daemon=True
        )
        self._reader.start()
        return await future

    def _read_line(self, text: str, default: str | None) -> str:
        prompt = Text(text, style=self._style)
        if not default or readline is None or not self._console.is_terminal:
            return self._console.input(prompt).strip()
        readline.set_startup_hook(lambda: readline.insert_text(default))
        try:
            return self._console.input(prompt).strip()
        finally:
            readline.set_startup_hook()
