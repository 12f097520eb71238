# src/taskbook/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import TypeAlias

DATE_MIN = date(1900, 1, 1)
DATE_MAX = date(2100, 1, 1)


class TaskKind(StrEnum):
    """
    Closed set of task variants.

    The value doubles as the type tag in rendered text and in the task file,
    so adding a variant means extending task_storage and cli.commands too.
    """

    TODO = "T"
    DEADLINE = "D"
    EVENT = "E"


def _require_text(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{field_name} is required")
    return str(value).strip()


def _require_date_in_range(value: date | None) -> date:
    if value is None:
        raise ValueError("due date is required")
    if not DATE_MIN <= value <= DATE_MAX:
        raise ValueError(f"due date {value.isoformat()} is outside {DATE_MIN}..{DATE_MAX}")
    return value


@dataclass(slots=True, eq=True)
class _Completion:
    description: str
    is_done: bool = False

    def __post_init__(self) -> None:
        self.description = _require_text(self.description, "description")

    def mark_done(self) -> None:
        self.is_done = True

    def mark_not_done(self) -> None:
        self.is_done = False

    def status_glyph(self) -> str:
        return "X" if self.is_done else " "

    def _prefix(self, kind: TaskKind) -> str:
        return f"[{kind}][{self.status_glyph()}] {self.description}"


@dataclass(slots=True, eq=True)
class Todo(_Completion):
    @property
    def kind(self) -> TaskKind:
        return TaskKind.TODO

    def render(self) -> str:
        return self._prefix(self.kind)


@dataclass(slots=True, eq=True, kw_only=True)
class Deadline(_Completion):
    due: date

    def __post_init__(self) -> None:
        _Completion.__post_init__(self)
        self.due = _require_date_in_range(self.due)

    @property
    def kind(self) -> TaskKind:
        return TaskKind.DEADLINE

    def reschedule(self, new_date: date | None) -> None:
        self.due = _require_date_in_range(new_date)

    def render(self) -> str:
        # "Dec 25 2024"
        pretty = f"{self.due:%b} {self.due.day} {self.due.year}"
        return f"{self._prefix(self.kind)} (by: {pretty})"


@dataclass(slots=True, eq=True, kw_only=True)
class Event(_Completion):
    start: str
    end: str

    def __post_init__(self) -> None:
        _Completion.__post_init__(self)
        self.start = _require_text(self.start, "start")
        self.end = _require_text(self.end, "end")

    @property
    def kind(self) -> TaskKind:
        return TaskKind.EVENT

    def render(self) -> str:
        return f"{self._prefix(self.kind)} (from: {self.start} to: {self.end})"


Task: TypeAlias = Todo | Deadline | Event
