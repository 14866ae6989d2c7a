"""Interactive read-dispatch loop for the quiz commands."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Sequence

from .commands import DEFAULT_AUTHORS, CommandEngine
from .output import QuizOutput
from .prompt import Prompt

__all__ = ["COMMANDS", "ShellCommand", "QuizShell", "split_line"]

Handler = Callable[[CommandEngine, Sequence[str]], Awaitable[bool]]


@dataclass(frozen=True)
class ShellCommand:
    """A command name, its aliases and the engine call it maps to."""

    name: str
    handler: Handler
    aliases: tuple[str, ...] = ()


def _first(args: Sequence[str]) -> str | None:
    return args[0] if args else None


_COMMAND_SPECS: Sequence[ShellCommand] = (
    ShellCommand("help", lambda engine, args: engine.help(), ("h",)),
    ShellCommand("list", lambda engine, args: engine.list_quizzes()),
    ShellCommand("show", lambda engine, args: engine.show(_first(args))),
    ShellCommand("add", lambda engine, args: engine.add()),
    ShellCommand("delete", lambda engine, args: engine.delete(_first(args))),
    ShellCommand("edit", lambda engine, args: engine.edit(_first(args))),
    ShellCommand("test", lambda engine, args: engine.test(_first(args))),
    ShellCommand("play", lambda engine, args: engine.play(), ("p",)),
    ShellCommand("credits", lambda engine, args: engine.credits()),
    ShellCommand("quit", lambda engine, args: engine.quit(), ("q",)),
)

COMMANDS: Mapping[str, ShellCommand] = {
    name: spec
    for spec in _COMMAND_SPECS
    for name in (spec.name, *spec.aliases)
}


def split_line(line: str) -> tuple[str, list[str]] | None:
    """Split ``line`` into a lowercased command name and its arguments."""

    words = line.split()
    if not words:
        return None
    head, *tail = words
    return head.lower(), tail


class QuizShell:
    """Read commands until ``quit`` or end of input.

    A line is only read after the running command has signalled ``resume``
    (or ``close``), so one command is in flight at a time.
    """

    def __init__(
        self,
        store: Any,
        prompt: Prompt,
        output: QuizOutput,
        *,
        prompt_text: str = "quiz > ",
        rng: random.Random | None = None,
        authors: Sequence[str] = DEFAULT_AUTHORS,
        logger: logging.Logger | None = None,
    ) -> None:
        self._prompt = prompt
        self._output = output
        self._prompt_text = prompt_text
        self._logger = logger or logging.getLogger(__name__)
        self._ready = asyncio.Event()
        self.closed = False
        self.engine = CommandEngine(
            store,
            prompt,
            output,
            resume=self._ready.set,
            close=self.close,
            rng=rng,
            authors=authors,
            logger=self._logger,
        )

    def close(self) -> None:
        self.closed = True
        self._ready.set()

    async def run(self) -> None:
        self._output.banner("CORE Quiz", "green")
        while not self.closed:
            try:
                line = await self._prompt.ask(self._prompt_text)
            except (EOFError, KeyboardInterrupt):
                self._logger.debug("input closed", extra={"event": "eof"})
                self.close()
                break
            await self.dispatch(line)
        self._output.log("¡Adiós!")

    async def dispatch(self, line: str) -> None:
        parsed = split_line(line)
        if parsed is None:
            return
        name, args = parsed
        self._logger.debug(
            "dispatching command",
            extra={"event": "dispatch", "command": name, "arguments": args},
        )
        self._ready.clear()
        spec = COMMANDS.get(name)
        if spec is None:
            await self.engine.unknown(name)
        else:
            await spec.handler(self.engine, args)
        await self._ready.wait()
