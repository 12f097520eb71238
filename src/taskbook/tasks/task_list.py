# src/taskbook/tasks/task_list.py

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .task_models import Task


class TaskList:
    """
    Ordered in-memory task collection.

    Position is the only identity: duplicates are allowed, and insertion order
    is both the display order (1-based) and the order written to disk.

    Indices here are 0-based and unchecked. Bounds are validated by the
    interpreter before it calls in; an IndexError from this class is a bug.
    No locking: callers serialize access (see AppState.lock).
    """

    def __init__(self, initial: Iterable[Task] | None = None) -> None:
        self._tasks: list[Task] = list(initial or [])

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def size(self) -> int:
        return len(self._tasks)

    def is_empty(self) -> bool:
        return not self._tasks

    def get(self, index: int) -> Task:
        if index < 0:
            raise IndexError(f"task index {index} out of range")
        return self._tasks[index]

    def add(self, task: Task) -> None:
        self._tasks.append(task)

    def insert(self, index: int, task: Task) -> None:
        """Put a task back at `index` (used to undo a removal)."""
        self._tasks.insert(index, task)

    def remove(self, index: int) -> Task:
        """Remove and return the task; later tasks shift down by one."""
        if index < 0:
            raise IndexError(f"task index {index} out of range")
        return self._tasks.pop(index)

    def find_by_text(self, needle: str) -> list[tuple[int, Task]]:
        """
        Case-insensitive substring search over each task's rendered text
        (type tag, status and dates included, not only the description).

        Returns (0-based index, task) pairs in list order.
        """
        lowered = needle.lower()
        return [(i, t) for i, t in enumerate(self._tasks) if lowered in t.render().lower()]

    def snapshot(self) -> tuple[Task, ...]:
        return tuple(self._tasks)
