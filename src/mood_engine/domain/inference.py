"""Models for remote emotion inference payloads."""

from pydantic import BaseModel, ConfigDict, Field


class EmotionAnalysis(BaseModel):
    """Emotion block returned by the inference service."""

    emotions: list[str] = Field(default_factory=list)
    intensity: float = 0.0


class InferenceResult(BaseModel):
    """Chat reply with optional emotion analysis and crisis flag."""

    model_config = ConfigDict(populate_by_name=True)

    response: str
    is_crisis: bool = Field(default=False, alias="isCrisis")
    emotion_analysis: EmotionAnalysis | None = Field(
        default=None, alias="emotionAnalysis"
    )
