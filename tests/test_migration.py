"""Tests for importing moods written by earlier app versions."""

import json
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from mood_engine.adapters.memory_storage import MemoryStorageContext
from mood_engine.domain.moods import MoodSource
from mood_engine.domain.stats import PracticeTotals
from mood_engine.services.migration import (
    CHAT_MOOD_KEY,
    INSIGHTS_KEY,
    TODAY_MOOD_KEY,
    load_legacy_state,
)
from mood_engine.services.store import STATE_KEY, MoodStore
from tests.conftest import NOW, UTC_ZONE, FakeClock


def test_no_legacy_keys_yields_nothing(storage: MemoryStorageContext) -> None:
    assert load_legacy_state(storage, UTC_ZONE, lambda: NOW, 7) is None


def test_five_point_value_is_scaled(storage: MemoryStorageContext) -> None:
    storage.set_item(
        TODAY_MOOD_KEY,
        json.dumps(
            {"mood": "Happy", "value": 4, "source": "manual", "at": NOW.isoformat()}
        ),
    )

    state = load_legacy_state(storage, UTC_ZONE, lambda: NOW, 7)

    assert state is not None
    record = state.record_for(date(2026, 10, 18))
    assert record is not None
    assert record.mood_label == "happy"
    assert record.score == 80
    assert record.latest_sample.source == MoodSource.MANUAL


def test_chat_source_and_missing_value(storage: MemoryStorageContext) -> None:
    at = datetime(2026, 10, 17, 9, 30, tzinfo=UTC)
    storage.set_item(
        TODAY_MOOD_KEY,
        json.dumps({"mood": "anxious", "source": "chat", "at": at.isoformat()}),
    )

    state = load_legacy_state(storage, UTC_ZONE, lambda: NOW, 7)

    assert state is not None
    record = state.record_for(date(2026, 10, 17))
    assert record is not None
    assert record.score == 55
    assert record.latest_sample.source == MoodSource.LOCAL_HEURISTIC
    assert record.latest_sample.timestamp == at


def test_chat_shape_counts_as_today(storage: MemoryStorageContext) -> None:
    storage.set_item(CHAT_MOOD_KEY, json.dumps({"moodScore": 45, "todayMood": "sad"}))

    state = load_legacy_state(storage, UTC_ZONE, lambda: NOW, 7)

    assert state is not None
    assert state.days == (date(2026, 10, 18),)
    record = state.record_for(date(2026, 10, 18))
    assert record is not None
    assert record.mood_label == "sad"
    assert record.latest_sample.timestamp == NOW


def test_newer_legacy_entry_wins_same_day(storage: MemoryStorageContext) -> None:
    earlier = datetime(2026, 10, 18, 8, 0, tzinfo=UTC)
    storage.set_item(
        TODAY_MOOD_KEY,
        json.dumps({"mood": "calm", "value": 4, "at": earlier.isoformat()}),
    )
    storage.set_item(CHAT_MOOD_KEY, json.dumps({"moodScore": 35, "todayMood": "angry"}))

    state = load_legacy_state(storage, UTC_ZONE, lambda: NOW, 7)

    assert state is not None
    record = state.record_for(date(2026, 10, 18))
    assert record is not None
    assert record.mood_label == "angry"
    assert record.score == 35


def test_unreadable_keys_and_derived_insights_are_ignored(
    storage: MemoryStorageContext,
) -> None:
    storage.set_item(TODAY_MOOD_KEY, "{not json")
    storage.set_item(INSIGHTS_KEY, json.dumps({"streak": 12, "average": 4.2}))

    assert load_legacy_state(storage, UTC_ZONE, lambda: NOW, 7) is None


def test_store_migrates_once_on_first_load(
    storage: MemoryStorageContext, clock: FakeClock
) -> None:
    storage.set_item(CHAT_MOOD_KEY, json.dumps({"moodScore": 85, "todayMood": "happy"}))

    store = MoodStore(storage=storage, timezone=UTC_ZONE, clock=clock)

    current = store.get_current()
    assert current is not None
    assert current.mood_label == "happy"
    assert storage.get_item(STATE_KEY) is not None

    storage.set_item(CHAT_MOOD_KEY, json.dumps({"moodScore": 35, "todayMood": "angry"}))
    reopened = MoodStore(storage=storage, timezone=UTC_ZONE, clock=clock)
    reopened_current = reopened.get_current()
    assert reopened_current is not None
    assert reopened_current.mood_label == "happy"


def test_insights_practice_counters_are_imported(
    storage: MemoryStorageContext,
) -> None:
    storage.set_item(
        INSIGHTS_KEY,
        json.dumps(
            {"averageMood": 4.2, "streak": 7, "timePracticed": 89, "exercises": 12}
        ),
    )

    state = load_legacy_state(storage, UTC_ZONE, lambda: NOW, 7)

    assert state is not None
    assert state.history == ()
    assert state.practice == PracticeTotals(
        exercises=12, minutes_practiced=89, updated_at=NOW
    )


def test_insights_non_numeric_counters_become_zero(
    storage: MemoryStorageContext,
) -> None:
    storage.set_item(
        INSIGHTS_KEY, json.dumps({"timePracticed": "lots", "exercises": "4"})
    )

    state = load_legacy_state(storage, UTC_ZONE, lambda: NOW, 7)

    assert state is not None
    assert state.practice.exercises == 4
    assert state.practice.minutes_practiced == 0


def test_naive_legacy_timestamp_uses_store_timezone(
    storage: MemoryStorageContext,
) -> None:
    auckland = ZoneInfo("Pacific/Auckland")
    storage.set_item(
        TODAY_MOOD_KEY,
        json.dumps({"mood": "calm", "value": 4, "at": "2026-10-18T23:30:00"}),
    )

    state = load_legacy_state(storage, auckland, lambda: NOW, 7)

    assert state is not None
    assert state.days == (date(2026, 10, 18),)
