"""Domain models for derived mood statistics."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from mood_engine.domain.moods import DayRecord


class HeatmapTone(Enum):
    """Color bucket for a heatmap cell."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class HeatmapBucket:
    """Render data for one populated day."""

    day: date
    mood_label: str
    score: float
    tone: HeatmapTone
    level: int


@dataclass(frozen=True)
class PracticeTotals:
    """Cumulative exercise counters kept next to the mood history.

    Counters cannot be derived from moods, so they are stored; the newest
    update wins when contexts disagree.
    """

    exercises: int = 0
    minutes_practiced: int = 0
    updated_at: datetime | None = None


@dataclass(frozen=True)
class DerivedStats:
    """Statistics recomputed from the mood history on demand."""

    current: DayRecord | None
    average_score: float
    streak_length: int
    days_logged: int
    heatmap_buckets: tuple[HeatmapBucket, ...]
    practice: PracticeTotals = field(default_factory=PracticeTotals)
