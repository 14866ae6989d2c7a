"""Top-level ``quiz`` command dispatcher."""

from __future__ import annotations

import inspect
import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Mapping, Optional, Sequence


CommandHandler = Callable[[Sequence[str]], int]

DIST_NAME = "quiz-trainer"


@dataclass(frozen=True)
class CommandSpec:
    """A ``quiz`` subcommand and the module function that runs it."""

    name: str
    summary: str
    module: str
    func: str = "main"
    is_tui: bool = False

    def run(self, argv: Sequence[str]) -> int:
        target = getattr(import_module(self.module), self.func)
        return _invoke_main(target, f"quiz {self.name}", argv)


_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="init",
        summary="Create the quiz-trainer workspace.",
        module="quiz_trainer.workspace.cli",
    ),
    CommandSpec(
        name="config",
        summary="Write, locate or validate quiz.toml.",
        module="quiz_trainer.quizzer._main",
        func="config_main",
    ),
    CommandSpec(
        name="shell",
        summary="Start the interactive quiz trainer.",
        module="quiz_trainer.quizzer._main",
        is_tui=True,
    ),
)

COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec for spec in _COMMAND_SPECS
}


def format_command_table() -> str:
    """Return the command listing used by ``list`` and the usage banner."""

    width = max((len(spec.name) for spec in _COMMAND_SPECS), default=0)
    lines = ["Available commands:"]
    for spec in _COMMAND_SPECS:
        suffix = " (interactive)" if spec.is_tui else ""
        lines.append(f"  {spec.name.ljust(width)}  {spec.summary}{suffix}")
    return "\n".join(lines)


def format_usage() -> str:
    return "\n".join(
        [
            "Usage: quiz <command> [args...]",
            "Run `quiz list` for commands or `quiz help <name>` for details.",
            "",
            format_command_table(),
        ]
    )


def _print(
    text: str, *, stream: Optional[Callable[[str], object]] = None
) -> None:
    target = stream if stream is not None else sys.stdout.write
    if text:
        target(text + "\n")


def _handle_version() -> int:
    try:
        version = metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        version = "unknown"
    _print(version)
    return 0


def _handle_help(argv: Sequence[str]) -> int:
    if not argv:
        _print(format_usage())
        return 0
    spec = COMMANDS.get(argv[0])
    if spec is None:
        _print(f"Unknown command '{argv[0]}'.", stream=sys.stderr.write)
        _print(format_command_table(), stream=sys.stderr.write)
        return 2
    _print(f"{spec.name}: {spec.summary}")
    _print(f"Run `quiz {spec.name} --help` for command options.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])

    if not args:
        _print(format_usage())
        return 2

    head, *tail = args

    if head in ("-h", "--help"):
        _print(format_usage())
        return 0
    if head in ("-V", "--version", "version"):
        return _handle_version()
    if head == "list":
        _print(format_command_table())
        return 0
    if head == "help":
        return _handle_help(tail)

    spec = COMMANDS.get(head)
    if spec is not None:
        return spec.run(tail)

    _print(f"Unknown command '{head}'.", stream=sys.stderr.write)
    _print(format_command_table(), stream=sys.stderr.write)
    return 2


def _invoke_main(
    func: Callable[..., object], prog_name: str, argv: Sequence[str]
) -> int:
    args = list(argv)
    old_argv = sys.argv
    sys.argv = [prog_name, *args]
    try:
        result = func(args) if _accepts_argv(func) else func()
    except SystemExit as exc:
        return _normalize_system_exit(exc)
    finally:
        sys.argv = old_argv
    return result if isinstance(result, int) else 0


def _accepts_argv(func: Callable[..., object]) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    return any(
        param.kind
        in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        )
        for param in signature.parameters.values()
    )


def _normalize_system_exit(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    _print(str(code), stream=sys.stderr.write)
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
