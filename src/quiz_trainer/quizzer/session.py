"""Randomized play session: every quiz asked once until the first miss.

The session is a small state machine driven by an explicit loop::

    LOADING -> ASKING -> (ASKING | SCORING) -> DONE

``LOADING`` snapshots the store, each ``ASKING`` step draws one quiz
uniformly from the quizzes not asked yet and removes it, ``SCORING`` reports
the result. The only suspension points are the store read and the prompts,
and each prompt waits for the previous answer.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .errors import QuizError
from .models import answers_match
from .output import QuizOutput
from .prompt import Prompt

__all__ = ["PlayState", "PlayResult", "PlaySession"]


class PlayState(Enum):
    LOADING = "loading"
    ASKING = "asking"
    SCORING = "scoring"
    DONE = "done"


@dataclass(frozen=True)
class PlayResult:
    """Outcome of one ``play`` run."""

    score: int
    asked: tuple[str, ...]
    total: int
    error: str | None = None

    @property
    def completed(self) -> bool:
        """True when every quiz was answered correctly."""

        return self.error is None and self.score == self.total


class PlaySession:
    """Single-use driver for one play run."""

    def __init__(
        self,
        store: Any,
        prompt: Prompt,
        output: QuizOutput,
        *,
        rng: random.Random | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._prompt = prompt
        self._output = output
        self._rng = rng or random.Random()
        self._logger = logger or logging.getLogger(__name__)
        self.state = PlayState.LOADING
        self.remaining: list[Mapping[str, Any]] = []
        self.asked: list[str] = []
        self.score = 0
        self.total = 0
        self.error: str | None = None

    async def run(self) -> PlayResult:
        if self.state is not PlayState.LOADING:
            raise RuntimeError("A play session can only run once.")
        while self.state is not PlayState.DONE:
            if self.state is PlayState.LOADING:
                await self._load()
            elif self.state is PlayState.ASKING:
                await self._ask_next()
            else:
                self._report()
        return PlayResult(
            score=self.score,
            asked=tuple(self.asked),
            total=self.total,
            error=self.error,
        )

    async def _load(self) -> None:
        try:
            snapshot = await self._store.find_all(raw=True)
        except QuizError as exc:
            self.error = str(exc)
            self._output.error(self.error)
            self.state = PlayState.SCORING
            return
        self.remaining = list(snapshot)
        self.total = len(self.remaining)
        self._logger.debug(
            "play session loaded",
            extra={"event": "play_loaded", "total": self.total},
        )
        self.state = PlayState.ASKING

    async def _ask_next(self) -> None:
        if not self.remaining:
            self._output.log("No hay más preguntas.")
            self.state = PlayState.SCORING
            return

        index = self._rng.randrange(len(self.remaining))
        quiz = self.remaining.pop(index)
        question = str(quiz["question"])
        self.asked.append(question)

        reply = await self._prompt.ask(f"{question}: ")
        if answers_match(reply, str(quiz["answer"])):
            self.score += 1
            self._output.log(
                f"Respuesta correcta. Lleva {self.score} aciertos.",
                style="green",
            )
            return

        self._output.log("Respuesta incorrecta.")
        self._output.banner("Incorrecta", "red")
        self.state = PlayState.SCORING

    def _report(self) -> None:
        self._output.log(f"Fin del juego. Aciertos: {self.score}")
        self._output.banner(str(self.score), "magenta")
        self._logger.info(
            "play session finished",
            extra={
                "event": "play_finished",
                "score": self.score,
                "asked": len(self.asked),
                "total": self.total,
            },
        )
        self.state = PlayState.DONE
