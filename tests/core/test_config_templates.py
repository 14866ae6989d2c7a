from __future__ import annotations

from pathlib import Path

import pytest

from quiz_trainer.core import config_templates
from quiz_trainer.core.config_templates import (
    ConfigTemplate,
    ConfigTemplateError,
)


def test_get_template_returns_quiz_template(tmp_path: Path) -> None:
    template = config_templates.get_template("quiz")
    assert isinstance(template, ConfigTemplate)

    contents = template.read_text()
    assert "[store]" in contents
    assert "seed_defaults" in contents

    target = tmp_path / "config" / "quiz.toml"
    written = template.write(target)
    assert written == target
    assert target.read_text(encoding="utf-8") == contents

    with pytest.raises(ConfigTemplateError, match="already exists"):
        template.write(target)

    target.write_text("# edited\n", encoding="utf-8")
    assert template.write(target, overwrite=True) == target
    assert target.read_text(encoding="utf-8") == contents


def test_iter_templates_returns_registered_templates() -> None:
    names = {template.name for template in config_templates.iter_templates()}
    assert names == {"quiz"}


@pytest.mark.parametrize("unknown", ["missing", "", "convert_markdown"])
def test_get_template_unknown_raises(unknown: str) -> None:
    with pytest.raises(ConfigTemplateError):
        config_templates.get_template(unknown)


def test_missing_resource_is_reported() -> None:
    template = ConfigTemplate(
        name="ghost",
        filename="ghost.toml",
        description="",
        package="quiz_trainer.quizzer",
    )

    with pytest.raises(ConfigTemplateError, match="ghost"):
        template.read_text()
