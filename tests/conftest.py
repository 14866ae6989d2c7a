from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest
from rich.console import Console

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

# Make src/ importable without an editable install.
ROOT = TESTS_DIR.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from fixtures import ShellSignals, WorkspaceBuilder  # noqa: E402
from quiz_trainer.quizzer.output import QuizOutput  # noqa: E402
from quiz_trainer.quizzer.store import MemoryQuizStore  # noqa: E402

SCENARIO = (("2+2?", "4"), ("Capital of Spain?", "Madrid"))


@pytest.fixture
def console() -> Console:
    """A recording console; read it back with ``export_text``."""

    return Console(record=True, width=100, force_terminal=True)


@pytest.fixture
def output(console: Console) -> QuizOutput:
    return QuizOutput(console)


@pytest.fixture
def store() -> MemoryQuizStore:
    """The two-quiz store used across the command scenarios."""

    return MemoryQuizStore(SCENARIO)


@pytest.fixture
def signals() -> ShellSignals:
    return ShellSignals()


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    return WorkspaceBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for key in (
        "QUIZ_TRAINER_DATA_HOME",
        "QUIZ_TRAINER_CONFIG",
        "QUIZ_TRAINER_STORE_PATH",
        "QUIZ_TRAINER_SEED",
        "QUIZ_TRAINER_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("QUIZ_TRAINER_DATA_HOME", str(tmp_path / "default-home"))


@pytest.fixture(autouse=True)
def _reset_shell_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("quiz_trainer.quizzer")
    logger.propagate = True
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
