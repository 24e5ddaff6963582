"""Tests for configuration helpers."""

from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from mood_engine.config import Settings, resolve_storage_path, resolve_timezone


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("HISTORY_DAYS", "14")
    monkeypatch.setenv("POLL_INTERVAL_SECONDS", "0.5")

    settings = Settings()

    assert settings.storage_backend == "memory"
    assert settings.history_days == 14
    assert settings.poll_interval_seconds == 0.5


def test_resolve_timezone() -> None:
    assert resolve_timezone(None) is None
    assert resolve_timezone("  ") is None
    assert resolve_timezone("Europe/Berlin") == ZoneInfo("Europe/Berlin")


def test_resolve_storage_path_expands_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    resolved = resolve_storage_path("~/moods/state.json")

    assert resolved == (tmp_path / "moods" / "state.json").resolve()
