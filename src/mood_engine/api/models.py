"""Pydantic request models for the mood API."""

from pydantic import BaseModel, Field


class ManualMoodRequest(BaseModel):
    """Mood picked by the user; score may be raw form input."""

    label: str
    score: float | str | None = None


class TextMoodRequest(BaseModel):
    """Free text to classify locally."""

    text: str


class RemoteInferenceRequest(BaseModel):
    """Emotion reported by the inference service."""

    label: str
    intensity: float | str = 0


class ChatRequest(BaseModel):
    """Chat message sent by the user."""

    message: str = Field(min_length=1)


class PracticeTotalsRequest(BaseModel):
    """Counters typed by the user; omitted fields keep their value."""

    exercises: float | str | None = None
    minutes_practiced: float | str | None = None


class PracticeSessionRequest(BaseModel):
    """A finished exercise session."""

    minutes: float | str = 0
