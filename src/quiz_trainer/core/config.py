"""TOML helpers shared by quiz-trainer configuration loaders."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, MutableMapping

try:  # Python >= 3.11 ships ``tomllib`` in the stdlib.
    import tomllib
except ModuleNotFoundError as exc:  # pragma: no cover - interpreter guard
    raise RuntimeError("Python 3.11+ is required for tomllib support.") from exc

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """Raised when reading, merging or writing a TOML document fails."""


def load_toml(path: Path) -> Mapping[str, Any]:
    """Parse the TOML document at ``path``.

    Missing files and syntax errors both surface as :class:`TomlConfigError`
    so the quizzer config loader only has one exception type to translate.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Merge ``override`` into ``base`` in place, rejecting unknown keys."""

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        current = base[key]
        if not isinstance(current, MutableMapping):
            base[key] = value
            continue
        if not isinstance(value, Mapping):
            raise TomlConfigError(
                "Expected table for '{0}', found {1}.".format(
                    dotted,
                    type(value).__name__,
                )
            )
        merge_defaults(current, value, path=f"{dotted}.")


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write ``template`` to ``path`` unless it exists and ``overwrite`` is off."""

    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template, encoding="utf-8")
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path
