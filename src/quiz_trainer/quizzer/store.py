"""Quiz persistence: an in-memory store and a JSON file-backed one."""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from .errors import NotFoundError, StoreError
from .models import Quiz, validate_fields

__all__ = [
    "DEFAULT_QUIZZES",
    "MemoryQuizStore",
    "JsonQuizStore",
]

DEFAULT_QUIZZES: tuple[tuple[str, str], ...] = (
    ("Capital de Italia", "Roma"),
    ("Capital de Francia", "París"),
    ("Capital de España", "Madrid"),
    ("Capital de Portugal", "Lisboa"),
)

_LOCK_TIMEOUT_SECONDS = 5.0


class MemoryQuizStore:
    """Keep quizzes in a dict ordered by creation.

    Reads hand out copies, so a caller can change a fetched quiz freely and
    nothing is stored until :meth:`update` accepts it. Subclasses persist the
    next state in :meth:`_persist` before it replaces the current one.
    """

    def __init__(self, quizzes: Iterable[tuple[str, str]] = ()) -> None:
        self._records: dict[int, Quiz] = {}
        self._next_id = 1
        for question, answer in quizzes:
            validate_fields(question, answer)
            self._records[self._next_id] = Quiz(
                self._next_id, question.strip(), answer.strip()
            )
            self._next_id += 1

    def __len__(self) -> int:
        return len(self._records)

    async def find_all(self, *, raw: bool = False) -> list[Any]:
        """Return every quiz in store order.

        With ``raw=True`` the result is a list of plain ``dict`` snapshots.
        """

        if raw:
            return [quiz.to_dict() for quiz in self._records.values()]
        return [replace(quiz) for quiz in self._records.values()]

    async def find_by_id(self, quiz_id: int) -> Quiz | None:
        quiz = self._records.get(quiz_id)
        return replace(quiz) if quiz is not None else None

    async def create(self, question: str, answer: str) -> Quiz:
        validate_fields(question, answer)
        quiz = Quiz(self._next_id, question.strip(), answer.strip())
        records = dict(self._records)
        records[quiz.id] = quiz
        await self._commit(records, self._next_id + 1)
        return replace(quiz)

    async def update(self, quiz: Quiz) -> Quiz:
        validate_fields(quiz.question, quiz.answer)
        if quiz.id not in self._records:
            raise NotFoundError(quiz.id)
        stored = Quiz(quiz.id, quiz.question.strip(), quiz.answer.strip())
        records = dict(self._records)
        records[quiz.id] = stored
        await self._commit(records, self._next_id)
        return replace(stored)

    async def destroy(self, quiz_id: int) -> bool:
        """Delete ``quiz_id`` and report whether it existed.

        Unknown ids are ignored.
        """

        if quiz_id not in self._records:
            return False
        records = dict(self._records)
        del records[quiz_id]
        await self._commit(records, self._next_id)
        return True

    async def _commit(self, records: dict[int, Quiz], next_id: int) -> None:
        await self._persist(records, next_id)
        self._records = records
        self._next_id = next_id

    async def _persist(self, records: dict[int, Quiz], next_id: int) -> None:
        return None


class JsonQuizStore(MemoryQuizStore):
    """Quiz store saved as a single JSON document.

    The file is read once when the store is opened and rewritten atomically
    after every mutation. ``next_id`` is persisted so ids of deleted quizzes
    are never reused. A missing file is created, seeded with ``seed``.
    """

    def __init__(
        self, path: Path, *, seed: Sequence[tuple[str, str]] = ()
    ) -> None:
        super().__init__()
        self._path = Path(path)
        self._lock_path = self._path.with_name(self._path.name + ".lock")
        if self._path.exists():
            self._load()
        else:
            for question, answer in seed:
                validate_fields(question, answer)
                self._records[self._next_id] = Quiz(
                    self._next_id, question, answer
                )
                self._next_id += 1
            self._write(self._records, self._next_id)

    @property
    def path(self) -> Path:
        return self._path

    async def _persist(self, records: dict[int, Quiz], next_id: int) -> None:
        await asyncio.to_thread(self._write, records, next_id)

    def _load(self) -> None:
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StoreError(
                f"No se pudo leer el fichero de quizzes: {self._path}"
            ) from exc
        except OSError as exc:
            raise StoreError(
                f"No se pudo abrir el fichero de quizzes: {self._path}"
            ) from exc
        if not isinstance(payload, Mapping):
            raise StoreError(f"Formato de quizzes inválido: {self._path}")
        quizzes = [Quiz.from_dict(item) for item in payload.get("quizzes", [])]
        self._records = {quiz.id: quiz for quiz in quizzes}
        highest = max(self._records, default=0)
        try:
            next_id = int(payload.get("next_id", highest + 1))
        except (TypeError, ValueError) as exc:
            raise StoreError(f"Formato de quizzes inválido: {self._path}") from exc
        self._next_id = max(next_id, highest + 1)

    def _write(self, records: dict[int, Quiz], next_id: int) -> None:
        payload = {
            "next_id": next_id,
            "quizzes": [quiz.to_dict() for quiz in records.values()],
        }
        try:
            with _StoreLock(self._lock_path):
                _atomic_write_json(self._path, payload)
        except OSError as exc:
            raise StoreError(
                f"No se pudo guardar el fichero de quizzes: {self._path}"
            ) from exc


class _StoreLock:
    """Exclusive lock file held while the store document is rewritten."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def __enter__(self) -> "_StoreLock":
        self._path.parent.mkdir(parents=True, exist_ok=True)
        deadline = time.monotonic() + _LOCK_TIMEOUT_SECONDS
        while True:
            try:
                fd = os.open(self._path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
            except FileExistsError:
                if time.monotonic() > deadline:
                    raise StoreError(
                        f"Tiempo de espera agotado para el bloqueo: {self._path}"
                    )
                time.sleep(0.05)
                continue
            os.close(fd)
            return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        self._path.unlink(missing_ok=True)


def _atomic_write_json(path: Path, payload: Mapping[str, Any]) -> None:
    handle = tempfile.NamedTemporaryFile(
        "w",
        delete=False,
        encoding="utf-8",
        dir=str(path.parent),
    )
    try:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
        handle.flush()
        os.fsync(handle.fileno())
    finally:
        handle.close()
    os.replace(handle.name, path)
    try:
        path.chmod(0o600)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
