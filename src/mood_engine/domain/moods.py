"""Domain models for mood samples and day records."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class MoodSource(Enum):
    """Origin of a mood sample. Used for precedence only, never for filtering."""

    MANUAL = "manual"
    LOCAL_HEURISTIC = "local-heuristic"
    REMOTE_INFERENCE = "remote-inference"


@dataclass(frozen=True)
class MoodSample:
    """One classified mood observation on the 0-100 valence scale."""

    mood_label: str
    score: float
    source: MoodSource
    timestamp: datetime


@dataclass(frozen=True)
class DayRecord:
    """Canonical mood for one calendar date."""

    day: date
    latest_sample: MoodSample

    @property
    def mood_label(self) -> str:
        return self.latest_sample.mood_label

    @property
    def score(self) -> float:
        return self.latest_sample.score
