"""Chat flow that keeps today's mood in step with the conversation."""

import logging
from dataclasses import dataclass, field

from mood_engine.domain.moods import DayRecord
from mood_engine.services.inference import InferenceError, InferenceService
from mood_engine.services.signals import MoodSignalService

DEFAULT_CONTEXT_SIZE = 5
# Used when the service reports an emotion block without any emotion.
DEFAULT_REMOTE_LABEL = "calm"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatTurn:
    """One message of the conversation transcript."""

    role: str
    content: str

    def as_payload(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ChatOutcome:
    """Result of sending one chat message.

    ``is_crisis`` is passed through from the inference service untouched.
    """

    reply: str | None
    mood: DayRecord | None
    is_crisis: bool = False
    service_unavailable: bool = False


@dataclass
class ChatService:
    """Records an optimistic local mood, then reconciles with the service."""

    signals: MoodSignalService
    inference: InferenceService | None = None
    context_size: int = DEFAULT_CONTEXT_SIZE
    transcript: list[ChatTurn] = field(default_factory=list)

    async def send_message(self, text: str) -> ChatOutcome:
        """Send a user message and update today's mood from the exchange."""
        message = text.strip()
        if not message:
            raise ValueError("Message must not be empty")
        context = [turn.as_payload() for turn in self._recent_turns()]
        self._remember(ChatTurn(role="user", content=message))
        mood = self.signals.record_text_for_classification(message)
        if self.inference is None:
            return ChatOutcome(reply=None, mood=mood)

        try:
            result = await self.inference.analyze(message, context)
        except InferenceError:
            logger.warning("Inference unavailable; keeping local mood", exc_info=True)
            return ChatOutcome(reply=None, mood=mood, service_unavailable=True)

        self._remember(ChatTurn(role="assistant", content=result.response))
        analysis = result.emotion_analysis
        if analysis is not None:
            label = analysis.emotions[0] if analysis.emotions else DEFAULT_REMOTE_LABEL
            mood = self.signals.record_remote_inference(label, analysis.intensity)
        else:
            mood = self.signals.record_text_for_classification(result.response)
        return ChatOutcome(reply=result.response, mood=mood, is_crisis=result.is_crisis)

    def _recent_turns(self) -> list[ChatTurn]:
        if self.context_size <= 0:
            return []
        return self.transcript[-self.context_size :]

    def _remember(self, turn: ChatTurn) -> None:
        # The transcript only holds the turns that can still be sent as context.
        self.transcript.append(turn)
        if self.context_size <= 0:
            self.transcript.clear()
        else:
            del self.transcript[: -self.context_size]
