# tests/fakes.py

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from taskbook.core.errors import StorageError, StorageErrorKind
from taskbook.core.events import StoreEvent
from taskbook.tasks.task_models import Task
from taskbook.tasks.task_storage import format_line


class FakeStorage:
    """
    In-memory TaskStorage for interpreter tests.

    - Counts save() calls for "exactly one save per mutation" assertions
    - Keeps the encoded lines of the last snapshot
    """

    def __init__(self, initial: list[Task] | None = None) -> None:
        self.initial = list(initial or [])
        self.saves = 0
        self.last_saved: list[str] = []

    def load(self) -> list[Task]:
        return list(self.initial)

    def save(self, tasks: Sequence[Task]) -> None:
        self.saves += 1
        self.last_saved = [format_line(t) for t in tasks]


class FailingStorage(FakeStorage):
    """save() always fails as if the disk were full."""

    def save(self, tasks: Sequence[Task]) -> None:
        self.saves += 1
        raise StorageError(StorageErrorKind.DISK_FULL, "Cannot save data: disk full")


@dataclass(slots=True)
class RecordedEvent:
    event: StoreEvent
    details: dict[str, Any]


@dataclass(slots=True)
class RecordingObserver:
    events: list[RecordedEvent] = field(default_factory=list)

    def notify(self, event: StoreEvent, **details: Any) -> None:
        self.events.append(RecordedEvent(event=event, details=details))

    def of(self, event: StoreEvent) -> list[RecordedEvent]:
        return [e for e in self.events if e.event is event]


def feed(interp, *lines: str):
    """Send several lines to an interpreter, return the last result."""
    result = None
    for line in lines:
        result = interp.handle(line)
    return result
