# tests/test_config.py

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from taskbook.cli.commands import Limits
from taskbook.config import Settings


def test_defaults_without_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in [
        "TASKBOOK_APP_NAME",
        "TASKBOOK_DATA_DIR",
        "TASKBOOK_DATA_FILE",
        "TASKBOOK_STRICT_MISSING_FILE",
        "TASKBOOK_MAX_INPUT_LENGTH",
        "TASKBOOK_DATE_MIN",
        "TASKBOOK_DATE_MAX",
    ]:
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert s.data_file == Path("data") / "taskbook.txt"
    assert s.strict_missing_file is False
    assert s.rollback_on_save_failure is True
    assert (s.max_input_length, s.max_description_length, s.max_keyword_length) == (2000, 1000, 100)
    assert (s.date_min, s.date_max) == (date(1900, 1, 1), date(2100, 1, 1))


def test_env_overrides_and_bad_values_fall_back(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKBOOK_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TASKBOOK_DATA_FILE", raising=False)
    monkeypatch.setenv("TASKBOOK_APP_NAME", "todo")
    monkeypatch.setenv("TASKBOOK_STRICT_MISSING_FILE", "yes")
    monkeypatch.setenv("TASKBOOK_MAX_INPUT_LENGTH", "not-a-number")
    monkeypatch.setenv("TASKBOOK_DATE_MIN", "2000-01-01")
    monkeypatch.setenv("TASKBOOK_DATE_MAX", "someday")

    s = Settings.from_env()

    assert s.data_file == tmp_path / "todo.txt"
    assert s.strict_missing_file is True
    assert s.max_input_length == 2000
    assert s.date_min == date(2000, 1, 1)
    assert s.date_max == date(2100, 1, 1)


def test_limits_never_widen_past_model_range() -> None:
    s = Settings(date_min=date(1800, 1, 1), date_max=date(2200, 1, 1))
    limits = Limits.from_settings(s)
    assert (limits.date_min, limits.date_max) == (date(1900, 1, 1), date(2100, 1, 1))
