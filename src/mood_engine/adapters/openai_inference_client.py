"""OpenAI Responses API client for chat replies with emotion analysis."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from mood_engine.services.inference import (
    INFERENCE_INSTRUCTIONS,
    INFERENCE_SCHEMA,
    InferenceClient,
    InferenceError,
)


@dataclass
class OpenAIInferenceClient(InferenceClient):
    """Inference client backed by OpenAI structured outputs."""

    client: AsyncOpenAI
    model: str
    store: bool = False

    @classmethod
    def create(
        cls, api_key: str, model: str, store: bool = False
    ) -> "OpenAIInferenceClient":
        """Create an OpenAI inference client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model, store=store)

    async def analyze(
        self, *, message: str, context: list[dict[str, str]]
    ) -> dict[str, object]:
        """Call the Responses API with a strict JSON schema."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "instructions": INFERENCE_INSTRUCTIONS,
            "input": [
                *context,
                {"role": "user", "content": message},
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "mood_reply",
                    "strict": True,
                    "schema": INFERENCE_SCHEMA,
                }
            },
            "store": self.store,
        }
        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise InferenceError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise InferenceError("OpenAI returned an empty response")
        try:
            return json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise InferenceError("OpenAI returned invalid JSON") from exc

    async def close(self) -> None:
        """Close the underlying OpenAI client."""
        await self.client.close()
