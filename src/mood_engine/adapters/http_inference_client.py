"""HTTP client for a hosted chat and emotion inference function."""

from dataclasses import dataclass

import httpx

from mood_engine.services.inference import InferenceClient, InferenceError


@dataclass
class HttpxInferenceClient(InferenceClient):
    """HTTPX-backed inference client."""

    url: str
    http_client: httpx.AsyncClient
    token: str | None = None

    @classmethod
    def create(cls, url: str, token: str | None = None) -> "HttpxInferenceClient":
        """Create an inference client with a managed httpx session."""
        return cls(url=url, http_client=httpx.AsyncClient(), token=token)

    async def analyze(
        self, *, message: str, context: list[dict[str, str]]
    ) -> dict[str, object]:
        """Post the message and recent context, returning the JSON reply."""
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else None
        try:
            response = await self.http_client.post(
                self.url,
                json={"message": message, "context": context},
                headers=headers,
                timeout=15,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise InferenceError(f"Inference request failed: {exc}") from exc
        if not isinstance(payload, dict):
            raise InferenceError("Inference reply was not a JSON object")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
