# src/taskbook/core/events.py

"""Observer events emitted by the core, and the default logging observer."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


class StoreEvent(StrEnum):
    LOAD_COMPLETE = "load_complete"
    LOAD_FAILED = "load_failed"
    MISSING_FILE = "missing_file"
    CORRUPT_LINE_SKIPPED = "corrupt_line_skipped"
    SAVE_COMPLETE = "save_complete"
    SAVE_FAILED = "save_failed"
    ROLLED_BACK = "rolled_back"


_LEVELS: dict[StoreEvent, int] = {
    StoreEvent.LOAD_COMPLETE: logging.INFO,
    StoreEvent.LOAD_FAILED: logging.ERROR,
    StoreEvent.MISSING_FILE: logging.INFO,
    StoreEvent.CORRUPT_LINE_SKIPPED: logging.WARNING,
    StoreEvent.SAVE_COMPLETE: logging.DEBUG,
    StoreEvent.SAVE_FAILED: logging.ERROR,
    StoreEvent.ROLLED_BACK: logging.WARNING,
}


def _format_details(details: dict[str, Any]) -> str:
    return " ".join(f"{k}={v}" for k, v in sorted(details.items()))


class LoggingObserver:
    """Forward store events to the `taskbook.core.events` logger."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def notify(self, event: StoreEvent, **details: Any) -> None:
        level = _LEVELS.get(event, logging.INFO)
        self._log.log(level, "%s %s", event.value, _format_details(details))


class NullObserver:
    def notify(self, event: StoreEvent, **details: Any) -> None:
        return
