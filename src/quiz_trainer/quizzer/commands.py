"""Command handlers behind the quiz shell.

Each handler runs through :meth:`CommandEngine._run`, which reports failures
as error lines and calls ``resume`` exactly once whatever the outcome. Only
``quit`` calls ``close`` instead.
"""

from __future__ import annotations

import logging
import random
import re
from typing import Any, Awaitable, Callable, Sequence

from rich.text import Text

from .errors import (
    MissingParameterError,
    NotANumberError,
    NotFoundError,
    QuizError,
    ValidationError,
)
from .models import Quiz, answers_match
from .output import QuizOutput
from .prompt import Prompt
from .session import PlayResult, PlaySession

__all__ = [
    "DEFAULT_AUTHORS",
    "HELP_LINES",
    "CommandEngine",
    "validate_id",
]

DEFAULT_AUTHORS: tuple[str, ...] = ("Irene Rodríguez Gómez",)

HELP_LINES: tuple[str, ...] = (
    " h|help - Muestra esta ayuda.",
    " list - Listar los quizzes existentes.",
    " show <id> - Muestra la pregunta y la respuesta del quiz indicado.",
    " add - Añadir un nuevo quiz interactivamente.",
    " delete <id> - Borrar el quiz indicado.",
    " edit <id> - Editar el quiz indicado.",
    " test <id> - Probar el quiz indicado.",
    " p|play - Jugar a preguntar aleatoriamente todos los quizzes.",
    " credits - Créditos.",
    " q|quit - Salir del programa.",
)

# parseInt semantics: leading digits win, the rest of the string is ignored.
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")

Action = Callable[[], Awaitable[None]]
QuizStep = Callable[[Quiz], Awaitable[None]]


async def validate_id(raw: str | None) -> int:
    """Parse a user-supplied quiz id.

    ``"12abc"`` parses as 12; a value without leading digits is rejected.
    """

    if raw is None:
        raise MissingParameterError("Falta el parámetro <id>.")
    match = _LEADING_INT.match(str(raw))
    if match is None:
        raise NotANumberError("El valor del parámetro <id> no es un número.")
    return int(match.group(1))


def _quiz_line(quiz: Quiz, *, with_answer: bool = False) -> Text:
    line = Text.assemble(" [", (str(quiz.id), "magenta"), "]: ", quiz.question)
    if with_answer:
        line.append_text(Text.assemble(" ", ("=>", "magenta"), " ", quiz.answer))
    return line


class CommandEngine:
    """Async handlers for every quiz shell command."""

    def __init__(
        self,
        store: Any,
        prompt: Prompt,
        output: QuizOutput,
        *,
        resume: Callable[[], None],
        close: Callable[[], None],
        rng: random.Random | None = None,
        authors: Sequence[str] = DEFAULT_AUTHORS,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._prompt = prompt
        self._output = output
        self._resume = resume
        self._close = close
        self._rng = rng or random.Random()
        self._authors = tuple(authors)
        self._logger = logger or logging.getLogger(__name__)
        self.last_play: PlayResult | None = None

    async def _run(self, name: str, action: Action) -> bool:
        """Run ``action`` as command ``name`` and resume the shell.

        Returns ``True`` when the action finished without error.
        """

        try:
            await action()
        except ValidationError as exc:
            self._output.error("El quiz es erróneo:")
            for message in exc.errors:
                self._output.error(message)
            self._logger.info(
                "command rejected",
                extra={"event": "validation_failed", "command": name},
            )
            return False
        except QuizError as exc:
            self._output.error(str(exc))
            self._logger.info(
                "command failed",
                extra={
                    "event": "command_failed",
                    "command": name,
                    "error": type(exc).__name__,
                },
            )
            return False
        except Exception as exc:
            self._logger.exception(
                "unexpected command failure",
                extra={"event": "command_crashed", "command": name},
            )
            self._output.error(str(exc) or type(exc).__name__)
            return False
        else:
            self._logger.debug(
                "command finished",
                extra={"event": "command_ok", "command": name},
            )
            return True
        finally:
            self._resume()

    async def _run_on_quiz(
        self, name: str, raw_id: str | None, step: QuizStep
    ) -> bool:
        """validate -> lookup -> ``step`` pipeline shared by id commands."""

        async def action() -> None:
            quiz_id = await validate_id(raw_id)
            quiz = await self._store.find_by_id(quiz_id)
            if quiz is None:
                raise NotFoundError(quiz_id)
            await step(quiz)

        return await self._run(name, action)

    async def help(self) -> bool:
        async def action() -> None:
            self._output.log("Comandos:")
            for line in HELP_LINES:
                self._output.log(line)

        return await self._run("help", action)

    async def list_quizzes(self) -> bool:
        async def action() -> None:
            for quiz in await self._store.find_all():
                self._output.log(_quiz_line(quiz))

        return await self._run("list", action)

    async def show(self, raw_id: str | None = None) -> bool:
        async def step(quiz: Quiz) -> None:
            self._output.log(_quiz_line(quiz, with_answer=True))

        return await self._run_on_quiz("show", raw_id, step)

    async def add(self) -> bool:
        async def action() -> None:
            question = await self._prompt.ask("Introduzca una pregunta: ")
            answer = await self._prompt.ask("Introduzca la respuesta: ")
            quiz = await self._store.create(question, answer)
            self._output.log(
                Text.assemble(
                    ("Se ha añadido", "magenta"),
                    f": {quiz.question} ",
                    ("=>", "magenta"),
                    f" {quiz.answer}",
                )
            )

        return await self._run("add", action)

    async def delete(self, raw_id: str | None = None) -> bool:
        async def action() -> None:
            quiz_id = await validate_id(raw_id)
            if await self._store.destroy(quiz_id):
                self._output.log(f"Se ha borrado el quiz {quiz_id}.")
            else:
                self._output.log(
                    f"No hay ningún quiz con id={quiz_id}; no se ha borrado nada."
                )

        return await self._run("delete", action)

    async def edit(self, raw_id: str | None = None) -> bool:
        async def step(quiz: Quiz) -> None:
            question = await self._prompt.ask(
                "Introduzca la pregunta: ", default=quiz.question
            )
            answer = await self._prompt.ask(
                "Introduzca la respuesta: ", default=quiz.answer
            )
            quiz.question = question
            quiz.answer = answer
            updated = await self._store.update(quiz)
            self._output.log(
                Text.assemble(
                    "Se ha cambiado el quiz ",
                    (str(updated.id), "magenta"),
                    f" por: {updated.question} ",
                    ("=>", "magenta"),
                    f" {updated.answer}",
                )
            )

        return await self._run_on_quiz("edit", raw_id, step)

    async def test(self, raw_id: str | None = None) -> bool:
        async def step(quiz: Quiz) -> None:
            reply = await self._prompt.ask(f"{quiz.question}: ")
            if answers_match(reply, quiz.answer):
                self._output.log("Su respuesta es correcta.")
                self._output.banner("Correcta", "green")
            else:
                self._output.log("Su respuesta es incorrecta.")
                self._output.banner("Incorrecta", "red")

        return await self._run_on_quiz("test", raw_id, step)

    async def play(self) -> bool:
        async def action() -> None:
            session = PlaySession(
                self._store,
                self._prompt,
                self._output,
                rng=self._rng,
                logger=self._logger,
            )
            self.last_play = await session.run()

        return await self._run("play", action)

    async def credits(self) -> bool:
        async def action() -> None:
            self._output.log("Autores de la práctica:")
            for author in self._authors:
                self._output.log(author, style="green")

        return await self._run("credits", action)

    async def unknown(self, name: str) -> bool:
        async def action() -> None:
            self._output.log(
                Text.assemble("Comando desconocido: '", (name, "red"), "'")
            )
            self._output.log(
                Text.assemble(
                    "Use ", ("help", "green"), " para ver todos los comandos "
                    "disponibles."
                )
            )

        return await self._run("unknown", action)

    async def quit(self) -> bool:
        self._logger.debug("quit requested", extra={"event": "quit"})
        self._close()
        return True
