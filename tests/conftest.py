# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskbook.cli.bootstrap import create_initial_state
from taskbook.cli.commands import CommandInterpreter
from taskbook.config import Settings
from taskbook.core.state import AppState
from taskbook.tasks.task_list import TaskList

from .fakes import FakeStorage, RecordingObserver


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings pointing every path into tmp_path.

    Built directly instead of via get_settings() so a developer's .env or
    TASKBOOK_* variables never leak into the tests.
    """
    data_dir = tmp_path / "data"
    return Settings(
        log_dir=tmp_path / "logs",
        data_dir=data_dir,
        data_file=data_dir / "taskbook.txt",
    )


@pytest.fixture()
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture()
def interpreter(storage: FakeStorage, observer: RecordingObserver) -> CommandInterpreter:
    """Interpreter over an empty list, saving into FakeStorage."""
    return CommandInterpreter(TaskList(), storage, observer=observer)


@pytest.fixture()
def state(settings: Settings, observer: RecordingObserver) -> AppState:
    """Full app wiring over a real task file under tmp_path."""
    return create_initial_state(settings=settings, observer=observer)
