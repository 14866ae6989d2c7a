"""Configuration loader for the quiz shell."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

from quiz_trainer.core import config as core_config
from quiz_trainer.core import workspace as workspace_mod

from .commands import DEFAULT_AUTHORS

CONFIG_FILENAME = "quiz.toml"
CONFIG_ENV = "QUIZ_TRAINER_CONFIG"
ENV_PREFIX = "QUIZ_TRAINER_"
STORE_FILENAME = "quizzes.json"

_DEFAULT_PROMPT = "quiz > "
_DEFAULT_LOG_LEVEL = "INFO"
_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


class QuizConfigError(RuntimeError):
    """Raised when quiz configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizConfig:
    """Fully resolved settings for one shell run."""

    store_path: Path
    seed_defaults: bool
    prompt: str
    authors: tuple[str, ...]
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """Values given on the command line; ``None`` means not given."""

    store_path: Optional[Path] = None
    seed_defaults: Optional[bool] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: QuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def default_config_path(layout: workspace_mod.WorkspaceLayout) -> Path:
    return layout.path_for("config") / CONFIG_FILENAME


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Resolve settings with precedence CLI > env > TOML > defaults.

    A missing config file is fine at the default location, but an explicit
    ``config_path`` or ``QUIZ_TRAINER_CONFIG`` must point at an existing file.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    except workspace_mod.WorkspaceError as exc:
        raise QuizConfigError(str(exc)) from exc

    explicit = config_path is not None or bool(
        (env_map.get(CONFIG_ENV) or "").strip()
    )
    requested = _resolve_config_path(config_path, env_map, layout)

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            core_config.merge_defaults(table, core_config.load_toml(requested))
        except core_config.TomlConfigError as exc:
            raise QuizConfigError(str(exc)) from exc
        loaded_path = requested
    elif explicit:
        raise QuizConfigError(f"Config file not found: {requested}")

    store_path = _resolve_store_path(
        _pick_first(
            overrides.store_path,
            _env_path(env_map, "STORE_PATH"),
            _coerce_optional_path(table["store"]["path"]),
        ),
        layout,
    )
    seed_defaults = _pick_first(
        overrides.seed_defaults,
        _env_bool(env_map, "SEED"),
        _require_bool(table["store"]["seed_defaults"], "store.seed_defaults"),
    )
    log_level = _require_string(
        _pick_first(
            overrides.log_level,
            _env_string(env_map, "LOG_LEVEL"),
            table["logging"]["level"],
        ),
        "logging.level",
    ).upper()

    config = QuizConfig(
        store_path=store_path,
        seed_defaults=bool(seed_defaults),
        prompt=_require_prompt(table["shell"]["prompt"]),
        authors=_require_authors(table["shell"]["authors"]),
        log_level=log_level,
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, Any]]:
    return {
        "store": {"path": None, "seed_defaults": True},
        "shell": {"prompt": _DEFAULT_PROMPT, "authors": list(DEFAULT_AUTHORS)},
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _resolve_config_path(
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    layout: workspace_mod.WorkspaceLayout,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = (env_map.get(CONFIG_ENV) or "").strip()
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_config_path(layout)


def _resolve_store_path(
    candidate: Optional[Path], layout: workspace_mod.WorkspaceLayout
) -> Path:
    if candidate is None:
        return layout.path_for("data") / STORE_FILENAME
    candidate = candidate.expanduser()
    if not candidate.is_absolute():
        return (layout.home / candidate).resolve()
    return candidate.resolve()


def _coerce_optional_path(value: object) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, str):
        return Path(value.strip()) if value.strip() else None
    raise QuizConfigError("store.path must be a string when provided.")


def _require_bool(value: object, field: str) -> bool:
    if not isinstance(value, bool):
        raise QuizConfigError(f"'{field}' must be a boolean.")
    return value


def _require_string(value: object, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError(f"'{field}' must be a non-empty string.")
    return value.strip()


def _require_prompt(value: object) -> str:
    # Trailing spaces are part of the prompt, so only reject blank values.
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError("'shell.prompt' must be a non-empty string.")
    return value


def _require_authors(value: object) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(
        isinstance(item, str) and item.strip() for item in value
    ):
        raise QuizConfigError("'shell.authors' must be a list of names.")
    return tuple(item.strip() for item in value)


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    return raw.strip() or None


def _env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _env_string(env_map, key)
    return Path(raw) if raw is not None else None


def _env_bool(env_map: Mapping[str, str], key: str) -> Optional[bool]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    lowered = raw.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise QuizConfigError(
        f"{ENV_PREFIX}{key} must be one of: "
        + ", ".join(sorted(_TRUE_WORDS | _FALSE_WORDS))
    )


def _pick_first(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
