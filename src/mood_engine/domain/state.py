"""Pydantic models for the persisted mood state and its legacy shapes."""

from datetime import date, datetime

from typing import Any

from pydantic import BaseModel, Field

STATE_VERSION = 1


class PersistedSample(BaseModel):
    """Serialized mood sample."""

    mood_label: str
    score: float
    source: str
    timestamp: datetime


class PersistedDayRecord(BaseModel):
    """Serialized day record."""

    date: date
    sample: PersistedSample


class PersistedState(BaseModel):
    """Canonical persisted blob: history plus today's record."""

    version: int = STATE_VERSION
    current: PersistedDayRecord | None = None
    history: list[PersistedDayRecord] = Field(default_factory=list)
    cleared_at: datetime | None = None
    exercises: int = 0
    minutes_practiced: int = 0
    practice_updated_at: datetime | None = None


class LegacyTodayMood(BaseModel):
    """Shape written by the old mood context under ``zenora_today_mood``."""

    mood: str
    value: float | None = None
    source: str | None = None
    at: datetime | None = None


class LegacyChatMood(BaseModel):
    """Shape written by the old chat screen under ``zenora-mood``."""

    moodScore: float  # noqa: N815
    todayMood: str  # noqa: N815


class LegacyInsights(BaseModel):
    """Shape written by the old insights screen under ``insightsData``.

    Values came from free-form inputs, so they are kept raw and coerced.
    """

    exercises: Any = None
    timePracticed: Any = None  # noqa: N815
