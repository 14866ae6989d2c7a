"""Shared testing fixtures for the quiz_trainer test suite."""

from .engine import ShellSignals  # noqa: F401
from .prompt import AnswerKeyPrompt, ScriptedPrompt  # noqa: F401
from .workspace import WorkspaceBuilder  # noqa: F401

__all__ = [
    "AnswerKeyPrompt",
    "ScriptedPrompt",
    "ShellSignals",
    "WorkspaceBuilder",
]
