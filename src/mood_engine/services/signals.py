"""Inbound mood signal API used by screens."""

from dataclasses import dataclass

from mood_engine.domain.moods import DayRecord, MoodSample, MoodSource
from mood_engine.domain.stats import PracticeTotals
from mood_engine.services.classifier import classify
from mood_engine.services.labels import (
    clamp_score,
    coerce_number,
    default_score_for,
    normalize_label,
    practice_count,
)
from mood_engine.services.store import MoodStore

INTENSITY_FACTOR = 10


def intensity_to_score(intensity: object) -> float:
    """Map a remote emotion intensity to the 0-100 scale."""
    return clamp_score(100 - coerce_number(intensity) * INTENSITY_FACTOR)


@dataclass
class MoodSignalService:
    """Turns raw inputs from any surface into samples for the store."""

    store: MoodStore

    def record_manual_mood(
        self, label: str, score: object | None = None
    ) -> DayRecord | None:
        """Record a mood picked by the user.

        A missing score uses the label's default; unparseable input becomes 0.
        """
        mood_label = normalize_label(label)
        value = (
            default_score_for(mood_label) if score is None else coerce_number(score)
        )
        return self._record(mood_label, clamp_score(value), MoodSource.MANUAL)

    def record_text_for_classification(self, text: str) -> DayRecord | None:
        """Classify free text locally and record the result."""
        result = classify(text)
        return self._record(result.label, result.score, MoodSource.LOCAL_HEURISTIC)

    def record_remote_inference(
        self, label: str, intensity: object
    ) -> DayRecord | None:
        """Record an emotion produced by the remote inference service."""
        return self._record(
            normalize_label(label),
            intensity_to_score(intensity),
            MoodSource.REMOTE_INFERENCE,
        )

    def set_practice_totals(
        self, exercises: object | None = None, minutes_practiced: object | None = None
    ) -> PracticeTotals:
        """Overwrite the practice counters from user input.

        A counter left as None keeps its value; unparseable input becomes 0.
        """
        held = self.store.get_practice()
        return self.store.record_practice(
            PracticeTotals(
                exercises=(
                    held.exercises if exercises is None else practice_count(exercises)
                ),
                minutes_practiced=(
                    held.minutes_practiced
                    if minutes_practiced is None
                    else practice_count(minutes_practiced)
                ),
                updated_at=self.store.clock(),
            )
        )

    def log_practice_session(self, minutes: object) -> PracticeTotals:
        """Count one finished exercise and add its minutes."""
        held = self.store.get_practice()
        return self.store.record_practice(
            PracticeTotals(
                exercises=held.exercises + 1,
                minutes_practiced=held.minutes_practiced + practice_count(minutes),
                updated_at=self.store.clock(),
            )
        )

    def get_current_mood(self) -> DayRecord | None:
        """Return today's record, if any."""
        return self.store.get_current()

    def get_history(self) -> tuple[DayRecord, ...]:
        """Return the bounded history."""
        return self.store.get_history()

    def _record(
        self, label: str, score: float, source: MoodSource
    ) -> DayRecord | None:
        sample = MoodSample(
            mood_label=label,
            score=score,
            source=source,
            timestamp=self.store.clock(),
        )
        return self.store.record_signal(sample)
