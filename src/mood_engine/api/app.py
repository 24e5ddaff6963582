"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from mood_engine.api.models import (
    ChatRequest,
    ManualMoodRequest,
    PracticeSessionRequest,
    PracticeTotalsRequest,
    RemoteInferenceRequest,
    TextMoodRequest,
)
from mood_engine.app_logging import configure_logging
from mood_engine.containers import AppContainer
from mood_engine.domain.moods import DayRecord
from mood_engine.domain.stats import DerivedStats, PracticeTotals
from mood_engine.services.classifier import emoji_for


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.store.start()
        logger.info("Mood sync started")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/mood/current")
    async def current_mood(request: Request) -> dict[str, object]:
        """Return today's mood, or null when nothing is logged today."""
        state_container: AppContainer = request.app.state.container
        return {"current": _record_payload(state_container.store.get_current())}

    @app.get("/mood/history")
    async def mood_history(request: Request) -> dict[str, object]:
        """Return the bounded mood history."""
        state_container: AppContainer = request.app.state.container
        return {
            "history": [
                _record_payload(record)
                for record in state_container.store.get_history()
            ]
        }

    @app.get("/mood/stats")
    async def mood_stats(request: Request) -> dict[str, object]:
        """Return derived statistics."""
        state_container: AppContainer = request.app.state.container
        return _stats_payload(state_container.stats_service.get_derived_stats())

    @app.post("/mood/manual")
    async def manual_mood(
        body: ManualMoodRequest, request: Request
    ) -> dict[str, object]:
        """Record a mood chosen by the user."""
        state_container: AppContainer = request.app.state.container
        record = state_container.signal_service.record_manual_mood(
            body.label, body.score
        )
        return {"record": _record_payload(record)}

    @app.post("/mood/text")
    async def text_mood(body: TextMoodRequest, request: Request) -> dict[str, object]:
        """Classify text locally and record the result."""
        state_container: AppContainer = request.app.state.container
        record = state_container.signal_service.record_text_for_classification(
            body.text
        )
        return {"record": _record_payload(record)}

    @app.post("/mood/inference")
    async def inference_mood(
        body: RemoteInferenceRequest, request: Request
    ) -> dict[str, object]:
        """Record an emotion produced by the inference service."""
        state_container: AppContainer = request.app.state.container
        record = state_container.signal_service.record_remote_inference(
            body.label, body.intensity
        )
        return {"record": _record_payload(record)}

    @app.put("/practice")
    async def set_practice(
        body: PracticeTotalsRequest, request: Request
    ) -> dict[str, object]:
        """Overwrite the practice counters."""
        state_container: AppContainer = request.app.state.container
        totals = state_container.signal_service.set_practice_totals(
            exercises=body.exercises, minutes_practiced=body.minutes_practiced
        )
        return {"practice": _practice_payload(totals)}

    @app.post("/practice/sessions")
    async def log_practice(
        body: PracticeSessionRequest, request: Request
    ) -> dict[str, object]:
        """Count a finished exercise session."""
        state_container: AppContainer = request.app.state.container
        totals = state_container.signal_service.log_practice_session(body.minutes)
        return {"practice": _practice_payload(totals)}

    @app.delete("/mood")
    async def clear_mood(request: Request) -> dict[str, str]:
        """Clear all mood data."""
        state_container: AppContainer = request.app.state.container
        state_container.store.clear()
        return {"status": "cleared"}

    @app.post("/chat")
    async def chat(body: ChatRequest, request: Request) -> dict[str, object]:
        """Send a chat message and return the reply with the updated mood."""
        state_container: AppContainer = request.app.state.container
        try:
            outcome = await state_container.chat_service.send_message(body.message)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return {
            "reply": outcome.reply,
            "is_crisis": outcome.is_crisis,
            "service_unavailable": outcome.service_unavailable,
            "mood": _record_payload(outcome.mood),
        }

    return app


def _record_payload(record: DayRecord | None) -> dict[str, object] | None:
    if record is None:
        return None
    sample = record.latest_sample
    return {
        "date": record.day.isoformat(),
        "mood_label": sample.mood_label,
        "emoji": emoji_for(sample.mood_label),
        "score": sample.score,
        "source": sample.source.value,
        "timestamp": sample.timestamp.isoformat(),
    }


def _stats_payload(stats: DerivedStats) -> dict[str, object]:
    return {
        "current": _record_payload(stats.current),
        "average_score": stats.average_score,
        "streak_length": stats.streak_length,
        "days_logged": stats.days_logged,
        "heatmap": [
            {
                "date": bucket.day.isoformat(),
                "mood_label": bucket.mood_label,
                "score": bucket.score,
                "tone": bucket.tone.value,
                "level": bucket.level,
            }
            for bucket in stats.heatmap_buckets
        ],
        "practice": _practice_payload(stats.practice),
    }


def _practice_payload(totals: PracticeTotals) -> dict[str, object]:
    return {
        "exercises": totals.exercises,
        "minutes_practiced": totals.minutes_practiced,
        "updated_at": totals.updated_at.isoformat() if totals.updated_at else None,
    }
