# src/taskbook/tasks/task_storage.py

from __future__ import annotations

import contextlib
import errno
import logging
import os
import re
from collections.abc import Sequence
from datetime import date, datetime
from pathlib import Path
from typing import assert_never

from ..core.errors import CorruptRecordError, StorageError, StorageErrorKind
from ..core.events import NullObserver, StoreEvent
from ..core.ports import StoreObserver
from .task_models import Deadline, Event, Task, TaskKind, Todo

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = " | "
EVENT_RANGE_SEPARATOR = " to "
DATE_FORMAT = "%Y-%m-%d"

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_DISK_FULL_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


def parse_iso_date(text: str) -> date:
    """Strict yyyy-MM-dd. Raises ValueError for anything else."""
    raw = text.strip()
    if not _ISO_DATE.match(raw):
        raise ValueError(f"not a yyyy-MM-dd date: {text!r}")
    return datetime.strptime(raw, DATE_FORMAT).date()


def format_line(task: Task) -> str:
    """Encode one task as a single line of the task file."""
    done = "1" if task.is_done else "0"
    match task:
        case Todo():
            fields = [TaskKind.TODO.value, done, task.description]
        case Deadline():
            fields = [TaskKind.DEADLINE.value, done, task.description, task.due.strftime(DATE_FORMAT)]
        case Event():
            fields = [
                TaskKind.EVENT.value,
                done,
                task.description,
                f"{task.start}{EVENT_RANGE_SEPARATOR}{task.end}",
            ]
        case _:
            assert_never(task)
    return FIELD_SEPARATOR.join(fields)


def parse_line(line: str) -> Task | None:
    """
    Decode one line of the task file.

    Returns None for blank lines. Raises CorruptRecordError when the line does
    not carry the fields its type tag needs.
    """
    trimmed = line.strip()
    if not trimmed:
        return None

    parts = trimmed.split(FIELD_SEPARATOR)
    if len(parts) < 3:
        raise CorruptRecordError("fewer than 3 fields", line)

    tag, done_flag, description = parts[0], parts[1], parts[2]
    try:
        kind = TaskKind(tag)
    except ValueError:
        raise CorruptRecordError(f"unknown task type {tag!r}", line) from None

    task: Task
    try:
        match kind:
            case TaskKind.TODO:
                task = Todo(description)
            case TaskKind.DEADLINE:
                if len(parts) < 4:
                    raise CorruptRecordError("deadline without a date", line)
                task = Deadline(description, due=parse_iso_date(parts[3]))
            case TaskKind.EVENT:
                if len(parts) < 4:
                    raise CorruptRecordError("event without a time range", line)
                start, sep, end = parts[3].partition(EVENT_RANGE_SEPARATOR)
                if not sep:
                    raise CorruptRecordError("event range missing ' to '", line)
                task = Event(description, start=start, end=end)
            case _:
                assert_never(kind)
    except ValueError as e:
        raise CorruptRecordError(str(e), line) from e

    if done_flag == "1":
        task.mark_done()
    return task


def _classify_os_error(e: OSError) -> StorageErrorKind:
    if isinstance(e, PermissionError):
        return StorageErrorKind.PERMISSION_DENIED
    if isinstance(e, FileNotFoundError):
        return StorageErrorKind.NOT_FOUND
    if isinstance(e, (NotADirectoryError, IsADirectoryError, FileExistsError)):
        return StorageErrorKind.PATH_UNAVAILABLE
    if e.errno in _DISK_FULL_ERRNOS:
        return StorageErrorKind.DISK_FULL
    if e.errno == errno.EROFS:
        return StorageErrorKind.PATH_UNAVAILABLE
    return StorageErrorKind.IO


_HINTS: dict[StorageErrorKind, str] = {
    StorageErrorKind.PERMISSION_DENIED: "Permission denied. Check that you have access to {path}.",
    StorageErrorKind.NOT_FOUND: (
        "Data file not found at {path}. A new file will be created when you add tasks."
    ),
    StorageErrorKind.PATH_UNAVAILABLE: (
        "The storage location {path} is unavailable (read-only drive or a file where a folder should be)."
    ),
    StorageErrorKind.DISK_FULL: "Not enough disk space. Free up some space and try again.",
    StorageErrorKind.IO: "Unexpected I/O error on {path}: {detail}",
}


def _storage_error(action: str, path: Path, e: OSError) -> StorageError:
    kind = _classify_os_error(e)
    hint = _HINTS[kind].format(path=path, detail=e.strerror or e)
    return StorageError(kind, f"Cannot {action} data: {hint}", path=path)


class TaskFileStorage:
    """
    Line-oriented task file.

        T | 1 | read book
        D | 0 | return book | 2019-10-15
        E | 0 | project meeting | 2pm to 4pm

    load() skips corrupted lines (reporting each to the observer) so one bad
    line never blocks the rest of the list. save() rewrites the whole file via
    a temp file + os.replace, so a crash mid-save leaves the old file intact.

    strict_missing_file:
    - False: a missing file is created empty and loading starts from nothing.
    - True: a missing file raises StorageError(NOT_FOUND); the caller decides.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        strict_missing_file: bool = False,
        observer: StoreObserver | None = None,
    ) -> None:
        self._path = Path(path)
        self._strict_missing_file = strict_missing_file
        self._observer: StoreObserver = observer or NullObserver()

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    def _ensure_parent(self) -> None:
        parent = self._path.parent
        if not parent.exists():
            parent.mkdir(parents=True, exist_ok=True)

    def _ensure_file(self) -> None:
        self._ensure_parent()
        if not self._path.exists():
            self._path.touch()

    def _tmp_path(self) -> Path:
        return self._path.with_name(self._path.name + ".tmp")

    # ---- public API ----

    def load(self) -> list[Task]:
        try:
            if not self._path.exists():
                if self._strict_missing_file:
                    raise FileNotFoundError(errno.ENOENT, "No such file", str(self._path))
                self._ensure_file()
                self._observer.notify(StoreEvent.MISSING_FILE, path=self._path)
            raw = self._path.read_bytes()
        except OSError as e:
            err = _storage_error("load", self._path, e)
            self._observer.notify(StoreEvent.LOAD_FAILED, path=self._path, kind=err.kind)
            raise err from e

        tasks: list[Task] = []
        skipped = 0
        for lineno, raw_line in enumerate(raw.splitlines(), start=1):
            try:
                line = raw_line.decode("utf-8")
                task = parse_line(line)
            except UnicodeDecodeError:
                skipped += 1
                self._observer.notify(
                    StoreEvent.CORRUPT_LINE_SKIPPED, path=self._path, line=lineno, reason="not utf-8"
                )
                continue
            except CorruptRecordError as e:
                skipped += 1
                self._observer.notify(
                    StoreEvent.CORRUPT_LINE_SKIPPED, path=self._path, line=lineno, reason=e.reason
                )
                continue
            if task is not None:
                tasks.append(task)

        self._observer.notify(
            StoreEvent.LOAD_COMPLETE, path=self._path, loaded=len(tasks), skipped=skipped
        )
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        payload = "".join(format_line(t) + "\n" for t in tasks)
        tmp = self._tmp_path()
        try:
            self._ensure_parent()
            with tmp.open("w", encoding="utf-8", newline="\n") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            err = _storage_error("save", self._path, e)
            self._observer.notify(StoreEvent.SAVE_FAILED, path=self._path, kind=err.kind)
            raise err from e

        self._observer.notify(StoreEvent.SAVE_COMPLETE, path=self._path, saved=len(tasks))
