"""Remote emotion inference: client interface, schema and validation."""

from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from mood_engine.domain.inference import InferenceResult

INFERENCE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "response": {"type": "string"},
        "isCrisis": {"type": "boolean"},
        "emotionAnalysis": {
            "anyOf": [
                {
                    "type": "object",
                    "properties": {
                        "emotions": {"type": "array", "items": {"type": "string"}},
                        "intensity": {"type": "number", "minimum": 0, "maximum": 10},
                    },
                    "required": ["emotions", "intensity"],
                    "additionalProperties": False,
                },
                {"type": "null"},
            ]
        },
    },
    "required": ["response", "isCrisis", "emotionAnalysis"],
    "additionalProperties": False,
}

INFERENCE_INSTRUCTIONS = (
    "You are a supportive wellbeing companion. Reply briefly and warmly to the "
    "user's latest message. Also report the user's dominant emotions as short "
    "lower-case words, most prominent first, with an intensity from 0 (mild) "
    "to 10 (overwhelming). Set isCrisis to true only if the user may be at "
    "risk of harming themselves or others."
)


class InferenceError(Exception):
    """Raised when the remote inference service cannot provide a result."""


class InferenceClient(Protocol):
    """Interface for the remote chat and emotion inference service."""

    async def analyze(
        self, *, message: str, context: list[dict[str, str]]
    ) -> dict[str, object]:
        """Return the raw reply payload for a message and recent context."""


@dataclass
class InferenceService:
    """Calls the inference client and validates its reply."""

    client: InferenceClient

    async def analyze(
        self, message: str, context: list[dict[str, str]]
    ) -> InferenceResult:
        """Return a validated reply, raising InferenceError on any failure."""
        raw = await self.client.analyze(message=message, context=context)
        try:
            return InferenceResult.model_validate(raw)
        except ValidationError as exc:
            raise InferenceError("Inference reply did not match schema") from exc
