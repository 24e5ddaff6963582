"""Propagation of mood changes between consumers and execution contexts."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from mood_engine.domain.moods import DayRecord

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 2.0


@dataclass(frozen=True)
class MoodChange:
    """Event published after the store accepts a mutation."""

    reason: str
    current: DayRecord | None
    history: tuple[DayRecord, ...]


MoodListener = Callable[[MoodChange], None]
StorageListener = Callable[[str | None], None]


@runtime_checkable
class WatchableStorage(Protocol):
    """Storage that reports writes made by other contexts."""

    def add_listener(self, listener: StorageListener) -> Callable[[], None]:
        """Register a change listener and return a callable that removes it.

        The listener receives the changed key, or None when every key was
        cleared at once.
        """


class MoodBroadcast:
    """In-process channel delivering changes to subscribers of one store."""

    def __init__(self) -> None:
        self._listeners: list[MoodListener] = []

    def subscribe(self, listener: MoodListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: MoodListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, change: MoodChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Mood listener failed for %s change", change.reason)

    def __len__(self) -> int:
        return len(self._listeners)


@dataclass
class SyncLayer:
    """Owns the broadcast channel, the storage watcher and the poll timer.

    ``reconcile`` re-reads persisted state and merges it into memory; it is
    triggered by storage change notifications and by the periodic poll.
    """

    storage: object
    key: str
    reconcile: Callable[[], bool]
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    broadcast: MoodBroadcast = field(default_factory=MoodBroadcast)
    _remove_watcher: Callable[[], None] | None = field(default=None, init=False)
    _poll_task: asyncio.Task[None] | None = field(default=None, init=False)

    def attach(self) -> None:
        """Start listening for writes made by other contexts."""
        if self._remove_watcher is not None:
            return
        if isinstance(self.storage, WatchableStorage):
            self._remove_watcher = self.storage.add_listener(self._on_storage_change)

    def start_polling(self) -> None:
        """Start the reconciliation poll on the running event loop."""
        if self._poll_task is not None and not self._poll_task.done():
            return
        self._poll_task = asyncio.get_running_loop().create_task(self._poll())

    @property
    def polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    async def stop(self) -> None:
        """Stop the poll and detach the storage watcher."""
        if self._remove_watcher is not None:
            self._remove_watcher()
            self._remove_watcher = None
        task = self._poll_task
        self._poll_task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def publish(self, change: MoodChange) -> None:
        self.broadcast.publish(change)

    def _on_storage_change(self, key: str | None) -> None:
        if key is None or key == self.key:
            self._safe_reconcile("storage event")

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval_seconds)
            self._safe_reconcile("poll")

    def _safe_reconcile(self, trigger: str) -> None:
        try:
            changed = self.reconcile()
        except Exception:
            logger.exception("Mood reconciliation failed (%s)", trigger)
            return
        if changed:
            logger.debug("Mood state reconciled from storage (%s)", trigger)
