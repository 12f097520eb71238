# src/taskbook/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The interpreter depends on these Protocols instead of the concrete file
storage or logging, which keeps both swappable in tests.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from ..tasks.task_models import Task
from .events import StoreEvent


class TaskStorage(Protocol):
    """Durable snapshot of the whole task list."""

    def load(self) -> list[Task]: ...

    def save(self, tasks: Sequence[Task]) -> None: ...


class StoreObserver(Protocol):
    """
    Receives notable events from the store/serializer/interpreter.

    Implementations must not raise; the core does not guard these calls.
    """

    def notify(self, event: StoreEvent, **details: Any) -> None: ...
