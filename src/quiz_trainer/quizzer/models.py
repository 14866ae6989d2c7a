"""Quiz record and field rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .errors import StoreError, ValidationError


@dataclass
class Quiz:
    """A question/answer pair identified by a store-assigned id."""

    id: int
    question: str
    answer: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "question": self.question, "answer": self.answer}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Quiz":
        """Build a quiz from a stored record, enforcing the field rules."""

        try:
            quiz_id = int(payload["id"])
            question = payload["question"]
            answer = payload["answer"]
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError(f"Registro de quiz inválido: {payload!r}") from exc
        if not isinstance(question, str) or not isinstance(answer, str):
            raise StoreError(f"Registro de quiz inválido: {payload!r}")
        try:
            validate_fields(question, answer)
        except ValidationError as exc:
            raise StoreError(f"Registro de quiz inválido: {payload!r}") from exc
        return cls(id=quiz_id, question=question, answer=answer)


def validate_fields(question: str, answer: str) -> None:
    """Raise :class:`ValidationError` listing every empty field."""

    errors = []
    if not question or not question.strip():
        errors.append("La pregunta no puede estar vacía.")
    if not answer or not answer.strip():
        errors.append("La respuesta no puede estar vacía.")
    if errors:
        raise ValidationError(errors)


def answers_match(given: str, expected: str) -> bool:
    """Compare answers ignoring case and surrounding whitespace."""

    return given.strip().casefold() == expected.strip().casefold()
