"""Canonical mood record store shared by every consumer of a session."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, tzinfo
from typing import Protocol

from mood_engine.domain.moods import DayRecord, MoodSample
from mood_engine.domain.stats import PracticeTotals
from mood_engine.services.history import (
    HISTORY_DAYS,
    MoodState,
    StateDecodeError,
    apply_practice,
    apply_record,
    decode_state,
    encode_state,
    ensure_aware,
    local_day,
    merge_states,
)
from mood_engine.services.migration import load_legacy_state
from mood_engine.services.sync import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    MoodChange,
    MoodListener,
    SyncLayer,
)

STATE_KEY = "mood_engine.state"

logger = logging.getLogger(__name__)


class StateStorage(Protocol):
    """Durable string key/value storage, one area per device."""

    def get_item(self, key: str) -> str | None:
        """Return the value stored under a key, if any."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def remove_item(self, key: str) -> None:
        """Delete a key if present."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MoodStore:
    """Holds today's mood and the bounded history for one session.

    Every mutation is persisted under ``STATE_KEY`` before subscribers are
    notified. Writes from other contexts sharing the storage are merged by
    ``reconcile``, driven by the sync layer.
    """

    storage: StateStorage
    timezone: tzinfo | None = None
    history_days: int = HISTORY_DAYS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    clock: Callable[[], datetime] = _utc_now
    sync: SyncLayer = field(init=False)
    _state: MoodState = field(init=False)
    _last_raw: str | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        self._state = self._load()
        self.sync = SyncLayer(
            storage=self.storage,
            key=STATE_KEY,
            reconcile=self.reconcile,
            poll_interval_seconds=self.poll_interval_seconds,
        )
        self.sync.attach()

    def today(self) -> date:
        """Return the current calendar date in the store's zone."""
        return local_day(self.clock(), self.timezone)

    def record_signal(self, sample: MoodSample) -> DayRecord | None:
        """Merge a sample into its day's record and persist the result.

        Returns the record now held for the sample's date, which is None
        only when that date is older than every date the history keeps.
        """
        normalized = MoodSample(
            mood_label=sample.mood_label,
            score=sample.score,
            source=sample.source,
            timestamp=ensure_aware(sample.timestamp, self.timezone),
        )
        record = DayRecord(
            day=local_day(normalized.timestamp, self.timezone),
            latest_sample=normalized,
        )
        updated = apply_record(self._state, record, self.history_days)
        if updated != self._state:
            self._commit(updated, "signal")
        return self._state.record_for(record.day)

    def get_current(self) -> DayRecord | None:
        """Return today's record, or None when nothing is logged today."""
        return self._state.record_for(self.today())

    def get_history(self) -> tuple[DayRecord, ...]:
        """Return the history, ascending by date."""
        return self._state.history

    def get_practice(self) -> PracticeTotals:
        """Return the cumulative practice counters."""
        return self._state.practice

    def record_practice(self, totals: PracticeTotals) -> PracticeTotals:
        """Replace the practice counters and persist them.

        An update stamped before the held one is ignored.
        """
        if totals.updated_at is not None:
            totals = PracticeTotals(
                exercises=totals.exercises,
                minutes_practiced=totals.minutes_practiced,
                updated_at=ensure_aware(totals.updated_at, self.timezone),
            )
        updated = apply_practice(self._state, totals)
        if updated != self._state:
            self._commit(updated, "practice")
        return self._state.practice

    def clear(self) -> None:
        """Reset to empty and notify subscribers."""
        self._commit(MoodState(cleared_at=self.clock()), "clear")

    def subscribe(self, listener: MoodListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that removes it."""
        return self.sync.broadcast.subscribe(listener)

    def unsubscribe(self, listener: MoodListener) -> None:
        self.sync.broadcast.unsubscribe(listener)

    def start(self) -> None:
        """Start the reconciliation poll; requires a running event loop."""
        self.sync.start_polling()

    async def close(self) -> None:
        """Stop synchronization at the end of the session."""
        await self.sync.stop()

    def reconcile(self) -> bool:
        """Merge persisted state with memory; returns True if memory changed.

        Applying it to already consistent state changes nothing.
        """
        raw = self.storage.get_item(STATE_KEY)
        if raw == self._last_raw:
            return False
        if raw is None:
            # Key removed by another context or an external wipe.
            self._last_raw = None
            if not self._state.history and self._state.practice == PracticeTotals():
                return False
            self._state = MoodState()
            self._publish("clear")
            return True
        try:
            persisted = decode_state(raw, self.history_days)
        except StateDecodeError:
            logger.warning("Discarding unreadable mood state during reconcile")
            persisted = MoodState()
            raw = None
        merged = merge_states(self._state, persisted, self.history_days)
        if raw is None or merged != persisted:
            self._write(merged)
        else:
            self._last_raw = raw
        if merged == self._state:
            return False
        self._state = merged
        self._publish("reconcile")
        return True

    def _load(self) -> MoodState:
        raw = self.storage.get_item(STATE_KEY)
        if raw is None:
            migrated = load_legacy_state(
                self.storage, self.timezone, self.clock, self.history_days
            )
            if migrated is None:
                return MoodState()
            self._write(migrated)
            return migrated
        try:
            state = decode_state(raw, self.history_days)
        except StateDecodeError:
            # Left in place; the next write replaces it.
            logger.warning("Discarding unreadable mood state", exc_info=True)
            return MoodState()
        self._last_raw = raw
        return state

    def _commit(self, state: MoodState, reason: str) -> None:
        self._write(state)
        self._state = state
        self._publish(reason)

    def _write(self, state: MoodState) -> None:
        raw = encode_state(state, self.today())
        self.storage.set_item(STATE_KEY, raw)
        self._last_raw = raw

    def _publish(self, reason: str) -> None:
        self.sync.publish(
            MoodChange(
                reason=reason,
                current=self.get_current(),
                history=self._state.history,
            )
        )
