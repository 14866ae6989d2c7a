from __future__ import annotations

import asyncio

import pytest

from quiz_trainer.quizzer.commands import validate_id
from quiz_trainer.quizzer.errors import MissingParameterError, NotANumberError
from quiz_trainer.quizzer.models import answers_match


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("3", 3),
        ("42", 42),
        (" 7 ", 7),
        ("0", 0),
        ("-2", -2),
        ("+5", 5),
        # Leading digits win; the rest is discarded like parseInt does.
        ("3x", 3),
        ("12abc", 12),
        ("1.9", 1),
        ("8 9", 8),
    ],
)
def test_validate_id_parses_leading_integer(raw, expected):
    assert asyncio.run(validate_id(raw)) == expected


@pytest.mark.parametrize("raw", ["", "   ", "abc", "x3", "-", "uno", "#1"])
def test_validate_id_rejects_non_numbers(raw):
    with pytest.raises(NotANumberError) as excinfo:
        asyncio.run(validate_id(raw))
    assert "no es un número" in str(excinfo.value)


def test_validate_id_requires_a_value():
    with pytest.raises(MissingParameterError) as excinfo:
        asyncio.run(validate_id(None))
    assert str(excinfo.value) == "Falta el parámetro <id>."


@pytest.mark.parametrize("given", ["Madrid", " madrid ", "MADRID", "\tmAdRiD\n"])
def test_answers_match_ignores_case_and_whitespace(given):
    assert answers_match(given, "Madrid")


@pytest.mark.parametrize("given", ["Madri", "Madrid!", "", "Ma drid"])
def test_answers_match_rejects_other_text(given):
    assert not answers_match(given, "Madrid")
