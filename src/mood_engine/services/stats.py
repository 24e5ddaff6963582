"""Derived mood statistics: average, streak and heatmap."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from mood_engine.domain.moods import DayRecord
from mood_engine.domain.stats import (
    DerivedStats,
    HeatmapBucket,
    HeatmapTone,
    PracticeTotals,
)

EMPTY_AVERAGE = 0.0
LEVEL_STEP = 20

POSITIVE_LABELS = frozenset(
    {"happy", "great", "good", "calm", "relaxed", "content", "joyful", "excited"}
)
NEUTRAL_LABELS = frozenset({"neutral", "okay"})
NEGATIVE_LABELS = frozenset(
    {
        "sad",
        "angry",
        "anxious",
        "stressed",
        "upset",
        "low",
        "difficult",
        "tired",
        "worried",
    }
)


class MoodHistorySource(Protocol):
    """Read interface the stats service needs from the store."""

    def get_history(self) -> tuple[DayRecord, ...]:
        """Return the history ascending by date."""

    def get_current(self) -> DayRecord | None:
        """Return today's record, if any."""

    def today(self) -> date:
        """Return the current local date."""

    def get_practice(self) -> PracticeTotals:
        """Return the cumulative practice counters."""


@dataclass
class StatsService:
    """Service recomputing derived statistics from the latest history."""

    source: MoodHistorySource

    def get_derived_stats(self) -> DerivedStats:
        """Return average, streak, heatmap and practice totals."""
        history = self.source.get_history()
        return DerivedStats(
            current=self.source.get_current(),
            average_score=average_score(history),
            streak_length=streak_length(
                (record.day for record in history), self.source.today()
            ),
            days_logged=len(history),
            heatmap_buckets=heatmap_buckets(history),
            practice=self.source.get_practice(),
        )


def average_score(history: Iterable[DayRecord]) -> float:
    """Mean score rounded to one decimal; 0.0 for an empty history."""
    scores = [record.score for record in history]
    if not scores:
        return EMPTY_AVERAGE
    return _round_half_up(sum(scores) / len(scores), "0.1")


def streak_length(days: Iterable[date], today: date) -> int:
    """Count consecutive days with a record, walking back from today."""
    logged = set(days)
    streak = 0
    expected = today
    while expected in logged:
        streak += 1
        expected -= timedelta(days=1)
    return streak


def tone_for(label: str) -> HeatmapTone:
    """Map a mood label to a heatmap tone; unknown labels are neutral."""
    key = label.strip().lower()
    if key in POSITIVE_LABELS:
        return HeatmapTone.POSITIVE
    if key in NEGATIVE_LABELS:
        return HeatmapTone.NEGATIVE
    return HeatmapTone.NEUTRAL


def heatmap_buckets(history: Iterable[DayRecord]) -> tuple[HeatmapBucket, ...]:
    """Return one heatmap bucket per populated day."""
    return tuple(
        HeatmapBucket(
            day=record.day,
            mood_label=record.mood_label,
            score=record.score,
            tone=tone_for(record.mood_label),
            level=int(_round_half_up(record.score / LEVEL_STEP, "1")),
        )
        for record in history
    )


def _round_half_up(value: float, quantum: str) -> float:
    return float(Decimal(str(value)).quantize(Decimal(quantum), ROUND_HALF_UP))
