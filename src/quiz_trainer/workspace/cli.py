"""``quiz init``: create the workspace directories."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from quiz_trainer.core import workspace as workspace_mod


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz init",
        description=(
            "Create the quiz-trainer workspace with its config, logs and data "
            "directories."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Workspace root (defaults to QUIZ_TRAINER_DATA_HOME or "
            "~/.quiz-trainer-data)."
        ),
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Print nothing on success.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    if args.quiet:
        return 0

    def status(key: str) -> str:
        return "created" if layout.created.get(key, False) else "exists"

    lines = [f"Workspace ready at {layout.home} ({status('home')})"]
    width = max((len(name) for name in layout.directories), default=0)
    for name, directory in layout.items():
        lines.append(f"  {name.ljust(width)}  {directory} ({status(name)})")
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
