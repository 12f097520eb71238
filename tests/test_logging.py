# tests/test_logging.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskbook.core.events import LoggingObserver, StoreEvent
from taskbook.logging_setup import _ConsoleNoiseFilter, setup_logging


def test_logging_observer_levels(caplog: pytest.LogCaptureFixture) -> None:
    observer = LoggingObserver()

    with caplog.at_level(logging.DEBUG, logger="taskbook"):
        observer.notify(StoreEvent.CORRUPT_LINE_SKIPPED, line=3, reason="fewer than 3 fields")
        observer.notify(StoreEvent.SAVE_FAILED, kind="disk_full")

    levels = [(r.levelno, r.getMessage()) for r in caplog.records]
    assert levels == [
        (logging.WARNING, "corrupt_line_skipped line=3 reason=fewer than 3 fields"),
        (logging.ERROR, "save_failed kind=disk_full"),
    ]


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("taskbook.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        logging.captureWarnings(False)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("taskbook.tasks.task_storage", logging.DEBUG, True),
        ("taskbook", logging.INFO, True),
        ("py.warnings", logging.WARNING, False),
        ("py.warnings", logging.ERROR, True),
        ("urllib3", logging.WARNING, False),
        ("taskbookish", logging.WARNING, False),
    ],
)
def test_console_filter_only_lets_taskbook_below_error(name: str, level: int, shown: bool) -> None:
    record = logging.LogRecord(name, level, __file__, 1, "msg", None, None)
    assert _ConsoleNoiseFilter().filter(record) is shown
