# tests/test_task_list.py

from __future__ import annotations

from datetime import date

import pytest

from taskbook.tasks.task_list import TaskList
from taskbook.tasks.task_models import Deadline, Event, Todo


def test_remove_shifts_later_indices() -> None:
    a, b, c = Todo("A"), Todo("B"), Todo("C")
    tasks = TaskList([a, b, c])

    removed = tasks.remove(1)

    assert removed is b
    assert tasks.size() == 2
    assert tasks.get(1) is c


def test_duplicates_allowed_and_order_kept() -> None:
    tasks = TaskList()
    assert tasks.is_empty()
    tasks.add(Todo("same"))
    tasks.add(Todo("same"))
    assert [t.description for t in tasks] == ["same", "same"]
    assert len(tasks) == 2


def test_find_matches_rendered_text_case_insensitively() -> None:
    tasks = TaskList(
        [
            Todo("Read BOOK"),
            Deadline("return book", due=date(2019, 10, 15)),
            Event("party", start="Oct 1", end="Oct 2"),
        ]
    )

    assert [i for i, _ in tasks.find_by_text("book")] == [0, 1]
    # Rendered text includes the type tag and the pretty date.
    assert [i for i, _ in tasks.find_by_text("[e]")] == [2]
    assert [i for i, _ in tasks.find_by_text("oct 15 2019")] == [1]
    assert tasks.find_by_text("nothing") == []


def test_out_of_bounds_is_an_index_error() -> None:
    tasks = TaskList([Todo("only")])
    with pytest.raises(IndexError):
        tasks.get(1)
    with pytest.raises(IndexError):
        tasks.get(-1)
    with pytest.raises(IndexError):
        tasks.remove(5)


def test_snapshot_is_a_copy() -> None:
    tasks = TaskList([Todo("x")])
    snap = tasks.snapshot()
    tasks.add(Todo("y"))
    assert len(snap) == 1
