"""One-time import of mood keys written by earlier app versions."""

import logging
from collections.abc import Callable
from datetime import datetime, tzinfo
from typing import Protocol

from pydantic import ValidationError

from mood_engine.domain.moods import DayRecord, MoodSample, MoodSource
from mood_engine.domain.state import LegacyChatMood, LegacyInsights, LegacyTodayMood
from mood_engine.domain.stats import PracticeTotals
from mood_engine.services.history import (
    MoodState,
    apply_practice,
    apply_record,
    ensure_aware,
    local_day,
)
from mood_engine.services.labels import (
    clamp_score,
    default_score_for,
    normalize_label,
    practice_count,
)

TODAY_MOOD_KEY = "zenora_today_mood"
CHAT_MOOD_KEY = "zenora-mood"
# Its average and streak are recomputed; only the practice counters are kept.
INSIGHTS_KEY = "insightsData"

_FIVE_POINT_FACTOR = 20

logger = logging.getLogger(__name__)


class LegacyReader(Protocol):
    """Read-only view of storage used for migration."""

    def get_item(self, key: str) -> str | None:
        """Return the raw value stored under a key."""


def load_legacy_state(
    storage: LegacyReader,
    tz: tzinfo | None,
    now: Callable[[], datetime],
    limit: int,
) -> MoodState | None:
    """Build a state from legacy keys, or None when none are usable."""
    samples = [
        sample
        for sample in (
            _today_mood_sample(storage.get_item(TODAY_MOOD_KEY), tz, now),
            _chat_mood_sample(storage.get_item(CHAT_MOOD_KEY), now),
        )
        if sample is not None
    ]
    practice = _practice_totals(storage.get_item(INSIGHTS_KEY), now)
    if not samples and practice is None:
        return None
    state = MoodState()
    for sample in sorted(samples, key=lambda item: item.timestamp):
        record = DayRecord(day=local_day(sample.timestamp, tz), latest_sample=sample)
        state = apply_record(state, record, limit)
    if practice is not None:
        state = apply_practice(state, practice)
    logger.info(
        "Migrated %s legacy mood sample(s)%s",
        len(samples),
        " and practice totals" if practice is not None else "",
    )
    return state


def _today_mood_sample(
    raw: str | None, tz: tzinfo | None, now: Callable[[], datetime]
) -> MoodSample | None:
    if raw is None:
        return None
    try:
        legacy = LegacyTodayMood.model_validate_json(raw)
    except ValidationError:
        logger.warning("Ignoring unreadable legacy key %s", TODAY_MOOD_KEY)
        return None
    label = normalize_label(legacy.mood)
    score = (
        clamp_score(legacy.value * _FIVE_POINT_FACTOR)
        if legacy.value is not None
        else default_score_for(label)
    )
    source = (
        MoodSource.LOCAL_HEURISTIC if legacy.source == "chat" else MoodSource.MANUAL
    )
    return MoodSample(
        mood_label=label,
        score=score,
        source=source,
        timestamp=ensure_aware(legacy.at, tz) if legacy.at else now(),
    )


def _chat_mood_sample(
    raw: str | None, now: Callable[[], datetime]
) -> MoodSample | None:
    if raw is None:
        return None
    try:
        legacy = LegacyChatMood.model_validate_json(raw)
    except ValidationError:
        logger.warning("Ignoring unreadable legacy key %s", CHAT_MOOD_KEY)
        return None
    # This shape never stored a timestamp; it always described the current day.
    return MoodSample(
        mood_label=normalize_label(legacy.todayMood),
        score=clamp_score(legacy.moodScore),
        source=MoodSource.LOCAL_HEURISTIC,
        timestamp=now(),
    )


def _practice_totals(
    raw: str | None, now: Callable[[], datetime]
) -> PracticeTotals | None:
    if raw is None:
        return None
    try:
        legacy = LegacyInsights.model_validate_json(raw)
    except ValidationError:
        logger.warning("Ignoring unreadable legacy key %s", INSIGHTS_KEY)
        return None
    if legacy.exercises is None and legacy.timePracticed is None:
        return None
    return PracticeTotals(
        exercises=practice_count(legacy.exercises),
        minutes_practiced=practice_count(legacy.timePracticed),
        updated_at=now(),
    )

