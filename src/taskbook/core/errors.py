# src/taskbook/core/errors.py

"""Error types shared by the task store, the serializer and the interpreter.

Nothing here is fatal: user errors and storage errors are reported back to the
front end and the loop keeps going. Corrupt records never leave the loader.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path


class TaskbookError(Exception):
    """Base class carrying a short machine code next to the human message."""

    code = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UserInputError(TaskbookError):
    """Malformed command, bad index, bad date or a length limit."""

    code = "invalid_input"


class UnknownCommandError(UserInputError):
    code = "unknown_command"


class AmbiguousCommandError(UserInputError):
    code = "ambiguous_command"

    def __init__(self, token: str, candidates: list[str]) -> None:
        super().__init__(
            f"Ambiguous command '{token}': could be {', '.join(candidates)}."
        )
        self.token = token
        self.candidates = list(candidates)


class IndexInputError(UserInputError):
    code = "invalid_index"


class DateInputError(UserInputError):
    code = "invalid_date"


class TaskTypeError(UserInputError):
    """The command does not apply to this kind of task (e.g. snoozing a todo)."""

    code = "wrong_task_type"


class StorageErrorKind(StrEnum):
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    PATH_UNAVAILABLE = "path_unavailable"
    DISK_FULL = "disk_full"
    IO = "io"


class StorageError(TaskbookError):
    """I/O failure while loading or saving the task file."""

    code = "storage"

    def __init__(self, kind: StorageErrorKind, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.path = path


class CorruptRecordError(TaskbookError):
    """A single persisted line failed the minimal field/type checks."""

    code = "corrupt_record"

    def __init__(self, reason: str, line: str = "") -> None:
        super().__init__(reason)
        self.reason = reason
        self.line = line
