"""``quiz shell`` and ``quiz config`` entry points."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Sequence

from rich.console import Console

from quiz_trainer.core import config_templates
from quiz_trainer.core import workspace as workspace_mod
from quiz_trainer.core.config_templates import ConfigTemplateError
from quiz_trainer.core.logging import configure_logger
from quiz_trainer.core.workspace import WorkspaceError

from .config import (
    ConfigOverrides,
    QuizConfigError,
    default_config_path,
    load_config,
)
from .errors import QuizError
from .output import QuizOutput
from .prompt import ConsolePrompt
from .shell import QuizShell
from .store import DEFAULT_QUIZZES, JsonQuizStore


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz shell",
        description="Interactive quiz trainer: manage and play quizzes.",
        epilog="Type `help` at the quiz prompt to list the commands.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to quiz.toml (defaults to the workspace config directory).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root (config, logs and quiz data).",
    )
    parser.add_argument(
        "--store",
        type=Path,
        help="JSON file holding the quizzes.",
    )
    parser.add_argument(
        "--no-seed",
        dest="seed_defaults",
        action="store_const",
        const=False,
        default=None,
        help="Start a new store empty instead of with the sample quizzes.",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level for the log file (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Also write log records to stderr.",
    )
    return parser


def main(
    argv: Sequence[str] | None = None, *, console: Console | None = None
) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    overrides = ConfigOverrides(
        store_path=args.store,
        seed_defaults=args.seed_defaults,
        log_level=args.log_level,
    )
    try:
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except QuizConfigError as exc:
        parser.error(str(exc))

    config = load_result.config
    logger, log_path = configure_logger(
        "quiz_trainer.quizzer",
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
        verbose=args.verbose,
    )
    logger.info(
        "quiz shell starting",
        extra={
            "event": "start",
            "store": config.store_path,
            "config": load_result.config_path,
        },
    )

    try:
        store = JsonQuizStore(
            config.store_path,
            seed=DEFAULT_QUIZZES if config.seed_defaults else (),
        )
    except QuizError as exc:
        logger.error("store unavailable", extra={"event": "store_error"})
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    console = console or Console()
    prompt = ConsolePrompt(console)
    shell = QuizShell(
        store,
        prompt,
        QuizOutput(console),
        prompt_text=config.prompt,
        authors=config.authors,
        logger=logger,
    )
    try:
        asyncio.run(shell.run())
    except KeyboardInterrupt:
        logger.info("interrupted", extra={"event": "interrupt"})
        if getattr(prompt, "reading", False):
            _abandon_reader(130)
        return 130
    logger.info("quiz shell stopped", extra={"event": "stop", "log": log_path})
    return 0


def _abandon_reader(code: int) -> None:
    """Exit now, leaving the reader thread blocked in ``input``.

    Interpreter shutdown would wait on that thread's hold of stdin, so
    logs and standard streams are flushed by hand before ``os._exit``.
    """

    logging.shutdown()
    sys.stdout.write("\n")
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(code)


def config_main(argv: Sequence[str] | None = None) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.command == "init":
        return _handle_config_init(args)
    if args.command == "path":
        return _handle_config_path(args)
    return _handle_config_validate(args)


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz config",
        description="Manage the quiz.toml configuration file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init", help="Write the default quiz.toml template."
    )
    init_parser.add_argument("--path", type=Path, help="Destination file.")
    init_parser.add_argument(
        "--workspace", type=Path, help="Workspace root override."
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if it already exists.",
    )

    path_parser = subparsers.add_parser(
        "path", help="Print the resolved config path."
    )
    path_parser.add_argument("--path", type=Path, help="Explicit config path.")
    path_parser.add_argument(
        "--workspace", type=Path, help="Workspace root override."
    )

    validate_parser = subparsers.add_parser(
        "validate", help="Load the config and print the resolved settings."
    )
    validate_parser.add_argument(
        "--path", type=Path, help="Config file to validate."
    )
    validate_parser.add_argument(
        "--workspace", type=Path, help="Workspace root override."
    )
    return parser


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate
    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return default_config_path(layout)


def _handle_config_init(args: argparse.Namespace) -> int:
    try:
        target = _resolve_config_target(args)
        written = config_templates.get_template("quiz").write(
            target, overwrite=args.force
        )
    except (WorkspaceError, ConfigTemplateError) as exc:
        sys.stderr.write(str(exc) + "\n")
        return 2
    sys.stdout.write(f"Wrote quiz config to {written}\n")
    return 0


def _handle_config_path(args: argparse.Namespace) -> int:
    try:
        target = _resolve_config_target(args)
    except WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 2
    sys.stdout.write(f"{target}\n")
    return 0


def _handle_config_validate(args: argparse.Namespace) -> int:
    try:
        result = load_config(
            config_path=args.path, workspace_path=args.workspace
        )
    except QuizConfigError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 2
    config = result.config
    lines = [
        "Configuration OK",
        f"  config:        {result.config_path or '(defaults)'}",
        f"  store:         {config.store_path}",
        f"  seed_defaults: {str(config.seed_defaults).lower()}",
        f"  prompt:        {config.prompt!r}",
        f"  log level:     {config.log_level}",
    ]
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
