"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from mood_engine.adapters.http_inference_client import HttpxInferenceClient
from mood_engine.adapters.json_file_storage import JsonFileStorage
from mood_engine.adapters.memory_storage import SharedMemoryStorage
from mood_engine.adapters.openai_inference_client import OpenAIInferenceClient
from mood_engine.adapters.supabase_state_storage import SupabaseStateStorage
from mood_engine.config import Settings, resolve_storage_path, resolve_timezone
from mood_engine.services.chat import ChatService
from mood_engine.services.inference import InferenceService
from mood_engine.services.signals import MoodSignalService
from mood_engine.services.stats import StatsService
from mood_engine.services.store import MoodStore, StateStorage

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds the dependencies of one application session."""

    settings: Settings
    store: MoodStore
    signal_service: MoodSignalService
    stats_service: StatsService
    chat_service: ChatService
    close_resources: Callable[[], Awaitable[None]]


def build_storage(settings: Settings) -> StateStorage:
    """Create the durable storage selected in settings."""
    if settings.storage_backend == "memory":
        return SharedMemoryStorage().context()
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires supabase_url and key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseStateStorage(
            client=client,
            scope=settings.supabase_scope,
            table=settings.supabase_table,
        )
    return JsonFileStorage(resolve_storage_path(settings.storage_path))


def build_inference_client(
    settings: Settings,
) -> HttpxInferenceClient | OpenAIInferenceClient | None:
    """Create the configured inference client, preferring the HTTP function."""
    if settings.inference_url:
        return HttpxInferenceClient.create(
            settings.inference_url, token=settings.inference_token
        )
    if settings.openai_api_key:
        return OpenAIInferenceClient.create(
            settings.openai_api_key,
            model=settings.openai_model,
            store=settings.openai_store,
        )
    logger.info("No inference service configured; using local classifier only")
    return None


def build_container(
    settings: Settings | None = None, storage: StateStorage | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = MoodStore(
        storage=storage or build_storage(resolved_settings),
        timezone=resolve_timezone(resolved_settings.timezone),
        history_days=resolved_settings.history_days,
        poll_interval_seconds=resolved_settings.poll_interval_seconds,
    )
    signal_service = MoodSignalService(store)
    inference_client = build_inference_client(resolved_settings)
    chat_service = ChatService(
        signals=signal_service,
        inference=(
            InferenceService(inference_client) if inference_client is not None else None
        ),
        context_size=resolved_settings.chat_context_size,
    )

    async def close_resources() -> None:
        await store.close()
        if inference_client is not None:
            await inference_client.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        signal_service=signal_service,
        stats_service=StatsService(store),
        chat_service=chat_service,
        close_resources=close_resources,
    )
