"""Error taxonomy for quiz commands and stores.

Every error carries the Spanish message shown to the user, so handlers can
print ``str(exc)`` directly.
"""

from __future__ import annotations

from typing import Iterable

__all__ = [
    "QuizError",
    "MissingParameterError",
    "NotANumberError",
    "NotFoundError",
    "ValidationError",
    "StoreError",
]


class QuizError(RuntimeError):
    """Base class for failures a command reports instead of crashing."""


class MissingParameterError(QuizError):
    """An id-requiring command was invoked without an id."""


class NotANumberError(QuizError):
    """The supplied id does not start with a decimal number."""


class NotFoundError(QuizError):
    """A well-formed id does not match any stored quiz."""

    def __init__(self, quiz_id: int) -> None:
        super().__init__(f"No existe un quiz asociado al id={quiz_id}.")
        self.quiz_id = quiz_id


class ValidationError(QuizError):
    """A quiz payload violates field constraints.

    ``errors`` holds one message per violated constraint.
    """

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = tuple(errors)
        super().__init__("; ".join(self.errors) or "El quiz es erróneo.")


class StoreError(QuizError):
    """Any other persistence failure."""
