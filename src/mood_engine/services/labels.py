"""Mood label vocabulary and numeric coercion helpers."""

import math

from mood_engine.services.classifier import NEUTRAL_LABEL, NEUTRAL_SCORE

MIN_SCORE = 0.0
MAX_SCORE = 100.0

# Default 0-100 score for a manually chosen label without an explicit score.
DEFAULT_SCORES: dict[str, float] = {
    "great": 90,
    "happy": 85,
    "good": 80,
    "calm": 80,
    "relaxed": 80,
    "okay": 70,
    "neutral": 70,
    "anxious": 55,
    "worried": 55,
    "low": 45,
    "sad": 45,
    "tired": 45,
    "upset": 45,
    "angry": 35,
    "stressed": 35,
    "difficult": 35,
}


def normalize_label(raw: str | None) -> str:
    """Lower-case a label and drop decorations such as a leading emoji."""
    if not raw:
        return NEUTRAL_LABEL
    words = [word for word in raw.split() if any(char.isalnum() for char in word)]
    return " ".join(words).lower() or NEUTRAL_LABEL


def default_score_for(label: str) -> float:
    """Return the default score for a label, neutral for unknown labels."""
    return float(DEFAULT_SCORES.get(label, NEUTRAL_SCORE))


def coerce_number(value: object, default: float = 0.0) -> float:
    """Coerce loose numeric input (form fields, JSON) to a finite float."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def clamp_score(value: float) -> float:
    """Clamp a score to the 0-100 scale."""
    return min(MAX_SCORE, max(MIN_SCORE, value))


def practice_count(value: object) -> int:
    """Coerce a counter input to a whole number of at least 0; bad input is 0."""
    return int(max(coerce_number(value), 0.0))
