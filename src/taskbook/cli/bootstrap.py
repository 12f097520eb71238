# src/taskbook/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes settings once,
- wires the task file storage, the observer and the interpreter together,
- loads the task file into the in-memory list before any input is read.
"""

from __future__ import annotations

import logging
import threading

from ..config import Settings, get_settings
from ..core.errors import StorageError
from ..core.events import LoggingObserver
from ..core.ports import StoreObserver, TaskStorage
from ..core.state import AppState
from ..tasks.task_list import TaskList
from ..tasks.task_storage import TaskFileStorage
from .commands import CommandInterpreter, Limits

logger = logging.getLogger(__name__)


def load_tasks(storage: TaskStorage) -> tuple[TaskList, str | None]:
    """
    Hydrate the task list. A storage error is not fatal: the app starts empty
    and the message is returned so the front end can show it.
    """
    try:
        return TaskList(storage.load()), None
    except StorageError as e:
        logger.warning("Starting with an empty task list: %s", e.message)
        return TaskList(), e.message


def create_initial_state(
    *,
    settings: Settings | None = None,
    storage: TaskStorage | None = None,
    observer: StoreObserver | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Everything is injectable for tests; if settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    observer = observer or LoggingObserver()
    if storage is None:
        storage = TaskFileStorage(
            settings.data_file,
            strict_missing_file=settings.strict_missing_file,
            observer=observer,
        )

    tasks, load_warning = load_tasks(storage)
    lock = threading.RLock()

    interpreter = CommandInterpreter(
        tasks,
        storage,
        limits=Limits.from_settings(settings),
        observer=observer,
        lock=lock,
        rollback_on_save_failure=settings.rollback_on_save_failure,
    )

    state = AppState(
        settings=settings,
        tasks=tasks,
        storage=storage,
        observer=observer,
        interpreter=interpreter,
        load_warning=load_warning,
        lock=lock,
    )
    logger.info("Task list ready: %d tasks from %s", tasks.size(), settings.data_file)
    return state
