"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from mood_engine.adapters.memory_storage import (
    MemoryStorageContext,
    SharedMemoryStorage,
)
from mood_engine.config import Settings
from mood_engine.containers import AppContainer
from mood_engine.domain.moods import MoodSample, MoodSource
from mood_engine.services.chat import ChatService
from mood_engine.services.inference import (
    InferenceClient,
    InferenceError,
    InferenceService,
)
from mood_engine.services.signals import MoodSignalService
from mood_engine.services.stats import StatsService
from mood_engine.services.store import MoodStore, StateStorage

UTC_ZONE = ZoneInfo("UTC")
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


@dataclass
class FakeClock:
    """Controllable clock for stores and services."""

    now: datetime = NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class FakeInferenceClient(InferenceClient):
    """Fake inference client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "response": "That sounds like a lot. Let's take it step by step.",
            "isCrisis": False,
            "emotionAnalysis": {"emotions": ["stressed"], "intensity": 6},
        }
    )
    calls: list[tuple[str, list[dict[str, str]]]] = field(default_factory=list)

    async def analyze(
        self, *, message: str, context: list[dict[str, str]]
    ) -> dict[str, object]:
        self.calls.append((message, context))
        return self.payload


@dataclass
class FailingInferenceClient(InferenceClient):
    """Inference client that always fails like a network error."""

    async def analyze(
        self, *, message: str, context: list[dict[str, str]]
    ) -> dict[str, object]:
        raise InferenceError("connection refused")


@dataclass
class BrokenStorage(StateStorage):
    """Storage that reads fine but fails every write."""

    items: dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        raise OSError("disk full")

    def remove_item(self, key: str) -> None:
        raise OSError("disk full")


def make_sample(
    label: str,
    score: float,
    timestamp: datetime,
    source: MoodSource = MoodSource.MANUAL,
) -> MoodSample:
    return MoodSample(mood_label=label, score=score, source=source, timestamp=timestamp)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def shared_area() -> SharedMemoryStorage:
    return SharedMemoryStorage()


@pytest.fixture
def storage(shared_area: SharedMemoryStorage) -> MemoryStorageContext:
    return shared_area.context()


@pytest.fixture
def store(storage: MemoryStorageContext, clock: FakeClock) -> MoodStore:
    return MoodStore(storage=storage, timezone=UTC_ZONE, clock=clock)


@pytest.fixture
def signal_service(store: MoodStore) -> MoodSignalService:
    return MoodSignalService(store)


@pytest.fixture
def settings() -> Settings:
    return Settings(storage_backend="memory", timezone="UTC")


@pytest.fixture
def inference_client() -> FakeInferenceClient:
    return FakeInferenceClient()


@pytest.fixture
def container(
    settings: Settings,
    store: MoodStore,
    signal_service: MoodSignalService,
    inference_client: FakeInferenceClient,
) -> AppContainer:
    chat_service = ChatService(
        signals=signal_service,
        inference=InferenceService(inference_client),
        context_size=settings.chat_context_size,
    )

    async def close_resources() -> None:
        await store.close()

    return AppContainer(
        settings=settings,
        store=store,
        signal_service=signal_service,
        stats_service=StatsService(store),
        chat_service=chat_service,
        close_resources=close_resources,
    )
