# tests/test_task_models.py

from __future__ import annotations

from datetime import date

import pytest

from taskbook.tasks.task_models import Deadline, Event, TaskKind, Todo


def test_render_variants() -> None:
    todo = Todo("read book")
    deadline = Deadline("submit", due=date(2024, 12, 25))
    event = Event("meeting", start="2pm", end="4pm")

    assert todo.render() == "[T][ ] read book"
    assert deadline.render() == "[D][ ] submit (by: Dec 25 2024)"
    assert event.render() == "[E][ ] meeting (from: 2pm to: 4pm)"
    assert [t.kind for t in (todo, deadline, event)] == [TaskKind.TODO, TaskKind.DEADLINE, TaskKind.EVENT]


def test_mark_and_unmark_are_idempotent() -> None:
    t = Todo("x")
    t.mark_done()
    t.mark_done()
    assert t.is_done and t.status_glyph() == "X"

    t.mark_not_done()
    t.mark_not_done()
    assert not t.is_done and t.status_glyph() == " "


@pytest.mark.parametrize("description", ["", "   "])
def test_empty_description_rejected(description: str) -> None:
    with pytest.raises(ValueError):
        Todo(description)


def test_deadline_range_and_reschedule() -> None:
    d = Deadline("edge", due=date(1900, 1, 1))
    d.reschedule(date(2100, 1, 1))
    assert d.due == date(2100, 1, 1)

    with pytest.raises(ValueError):
        d.reschedule(None)
    with pytest.raises(ValueError):
        d.reschedule(date(2100, 1, 2))
    assert d.due == date(2100, 1, 1)

    with pytest.raises(ValueError):
        Deadline("old", due=date(1899, 12, 31))


def test_event_needs_both_endpoints() -> None:
    with pytest.raises(ValueError):
        Event("talk", start="", end="5pm")
    with pytest.raises(ValueError):
        Event("talk", start="4pm", end=" ")
