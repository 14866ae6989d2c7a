from .commands import CommandEngine, validate_id
from .errors import (
    MissingParameterError,
    NotANumberError,
    NotFoundError,
    QuizError,
    StoreError,
    ValidationError,
)
from .models import Quiz, answers_match, validate_fields
from .output import QuizOutput
from .prompt import ConsolePrompt, Prompt
from .session import PlayResult, PlaySession, PlayState
from .shell import COMMANDS, QuizShell
from .store import DEFAULT_QUIZZES, JsonQuizStore, MemoryQuizStore

__all__ = [
    "CommandEngine",
    "validate_id",
    "MissingParameterError",
    "NotANumberError",
    "NotFoundError",
    "QuizError",
    "StoreError",
    "ValidationError",
    "Quiz",
    "answers_match",
    "validate_fields",
    "QuizOutput",
    "ConsolePrompt",
    "Prompt",
    "PlayResult",
    "PlaySession",
    "PlayState",
    "COMMANDS",
    "QuizShell",
    "DEFAULT_QUIZZES",
    "JsonQuizStore",
    "MemoryQuizStore",
]
