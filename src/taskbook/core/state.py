# src/taskbook/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..cli.commands import CommandInterpreter
from ..config import Settings
from ..tasks.task_list import TaskList
from .ports import StoreObserver, TaskStorage


@dataclass
class AppState:
    # Settings stay on the state so the front end can read app_name etc.
    settings: Settings

    tasks: TaskList
    storage: TaskStorage
    observer: StoreObserver
    interpreter: CommandInterpreter

    # Set when the task file could not be loaded at start-up; shown once by the console.
    load_warning: str | None = None

    lock: threading.RLock = field(default_factory=threading.RLock)
