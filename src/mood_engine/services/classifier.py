"""Keyword-based local mood classifier."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Classification:
    """Label and 0-100 score produced by the classifier."""

    label: str
    score: float


@dataclass(frozen=True)
class KeywordRule:
    """Maps any of a set of keywords to a classification."""

    keywords: tuple[str, ...]
    label: str
    score: float

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


# Order matters: the first matching rule wins.
RULES: tuple[KeywordRule, ...] = (
    KeywordRule(("sad", "tired", "upset"), "sad", 45),
    KeywordRule(("angry", "mad"), "angry", 35),
    KeywordRule(("happy", "great", "good"), "happy", 85),
    KeywordRule(("anxious", "worried"), "anxious", 55),
    KeywordRule(("relax", "calm"), "calm", 80),
)

NEUTRAL_LABEL = "neutral"
NEUTRAL_SCORE = 70.0

_EMOJI = {
    "sad": "😔",
    "angry": "😡",
    "happy": "😊",
    "anxious": "😰",
    "calm": "😌",
    "stressed": "😩",
    "relaxed": "😴",
    NEUTRAL_LABEL: "🙂",
}


def classify(text: str, rules: tuple[KeywordRule, ...] = RULES) -> Classification:
    """Classify free text with case-insensitive substring rules.

    Always returns a value; text matching no rule (including empty text)
    yields the neutral fallback.
    """
    lowered = (text or "").lower()
    for rule in rules:
        if rule.matches(lowered):
            return Classification(label=rule.label, score=float(rule.score))
    return Classification(label=NEUTRAL_LABEL, score=NEUTRAL_SCORE)


def emoji_for(label: str) -> str:
    """Return the display emoji for a mood label."""
    return _EMOJI.get(label.strip().lower(), _EMOJI[NEUTRAL_LABEL])
