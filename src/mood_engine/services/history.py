"""Pure operations on the bounded mood history and its serialized form."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, tzinfo

from pydantic import ValidationError

from mood_engine.domain.moods import DayRecord, MoodSample, MoodSource
from mood_engine.domain.state import (
    PersistedDayRecord,
    PersistedSample,
    PersistedState,
)
from mood_engine.domain.stats import PracticeTotals

HISTORY_DAYS = 7


class StateDecodeError(ValueError):
    """Raised when persisted state cannot be decoded."""


@dataclass(frozen=True)
class MoodState:
    """In-memory mood state: history, practice totals, last clear instant."""

    history: tuple[DayRecord, ...] = ()
    cleared_at: datetime | None = None
    practice: PracticeTotals = field(default_factory=PracticeTotals)

    def record_for(self, day: date) -> DayRecord | None:
        for record in self.history:
            if record.day == day:
                return record
        return None

    @property
    def days(self) -> tuple[date, ...]:
        return tuple(record.day for record in self.history)


def ensure_aware(timestamp: datetime, tz: tzinfo | None = None) -> datetime:
    """Attach a zone to naive timestamps.

    A naive timestamp is wall-clock time in ``tz``, or in the system local
    zone when ``tz`` is None.
    """
    if timestamp.tzinfo is not None:
        return timestamp
    if tz is not None:
        return timestamp.replace(tzinfo=tz)
    return timestamp.astimezone()


def local_day(timestamp: datetime, tz: tzinfo | None) -> date:
    """Return the calendar date of a timestamp in the given zone.

    ``None`` means the system local zone.
    """
    return ensure_aware(timestamp, tz).astimezone(tz).date()


def apply_record(state: MoodState, record: DayRecord, limit: int) -> MoodState:
    """Merge a record into the state, last write wins within its date.

    A sample produced before the one already held for that date, or before
    the last clear, leaves the state unchanged.
    """
    sample = record.latest_sample
    if state.cleared_at is not None and sample.timestamp < state.cleared_at:
        return state
    existing = state.record_for(record.day)
    if existing is not None:
        if existing == record:
            return state
        if existing.latest_sample.timestamp > sample.timestamp:
            return state
    by_day = {entry.day: entry for entry in state.history}
    by_day[record.day] = record
    return replace(state, history=_bounded(by_day, limit))


def apply_practice(state: MoodState, totals: PracticeTotals) -> MoodState:
    """Replace the practice totals unless the update is older than the held one."""
    if totals == state.practice or _is_stale(totals, state.cleared_at):
        return state
    if _practice_order(totals) < _practice_order(state.practice):
        return state
    return replace(state, practice=totals)


def merge_states(local: MoodState, persisted: MoodState, limit: int) -> MoodState:
    """Merge two states per date; persisted state wins timestamp ties."""
    cleared_at = _latest(local.cleared_at, persisted.cleared_at)
    by_day: dict[date, DayRecord] = {}
    for record in (*local.history, *persisted.history):
        timestamp = record.latest_sample.timestamp
        if cleared_at is not None and timestamp < cleared_at:
            continue
        current = by_day.get(record.day)
        if current is None or timestamp >= current.latest_sample.timestamp:
            by_day[record.day] = record
    # Persisted first so that it wins ties in max().
    live = [
        totals
        for totals in (persisted.practice, local.practice)
        if not _is_stale(totals, cleared_at)
    ]
    practice = max(live, key=_practice_order, default=PracticeTotals())
    return MoodState(
        history=_bounded(by_day, limit), cleared_at=cleared_at, practice=practice
    )


def encode_state(state: MoodState, today: date) -> str:
    """Serialize state to the canonical JSON blob."""
    current = state.record_for(today)
    payload = PersistedState(
        current=_to_persisted(current) if current else None,
        history=[_to_persisted(record) for record in state.history],
        cleared_at=state.cleared_at,
        exercises=state.practice.exercises,
        minutes_practiced=state.practice.minutes_practiced,
        practice_updated_at=state.practice.updated_at,
    )
    return payload.model_dump_json()


def decode_state(raw: str | None, limit: int = HISTORY_DAYS) -> MoodState:
    """Parse the canonical JSON blob.

    Raises StateDecodeError for anything that is not a valid blob.
    """
    if raw is None:
        return MoodState()
    try:
        payload = PersistedState.model_validate_json(raw)
        records = [_from_persisted(entry) for entry in payload.history]
    except (ValidationError, ValueError) as exc:
        raise StateDecodeError(str(exc)) from exc
    cleared_at = ensure_utc(payload.cleared_at) if payload.cleared_at else None
    updated_at = payload.practice_updated_at
    practice = PracticeTotals(
        exercises=max(payload.exercises, 0),
        minutes_practiced=max(payload.minutes_practiced, 0),
        updated_at=ensure_utc(updated_at) if updated_at else None,
    )
    persisted = MoodState(
        history=tuple(records), cleared_at=cleared_at, practice=practice
    )
    return merge_states(MoodState(), persisted, limit)


def ensure_utc(timestamp: datetime) -> datetime:
    """Treat naive persisted timestamps as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp


def _bounded(by_day: dict[date, DayRecord], limit: int) -> tuple[DayRecord, ...]:
    ordered = sorted(by_day.values(), key=lambda record: record.day)
    return tuple(ordered[-limit:]) if limit > 0 else ()


def _is_stale(totals: PracticeTotals, cleared_at: datetime | None) -> bool:
    return (
        cleared_at is not None
        and totals.updated_at is not None
        and totals.updated_at < cleared_at
    )


def _practice_order(totals: PracticeTotals) -> datetime:
    return totals.updated_at or datetime.min.replace(tzinfo=UTC)


def _latest(first: datetime | None, second: datetime | None) -> datetime | None:
    if first is None:
        return second
    if second is None:
        return first
    return max(first, second)


def _to_persisted(record: DayRecord) -> PersistedDayRecord:
    sample = record.latest_sample
    return PersistedDayRecord(
        date=record.day,
        sample=PersistedSample(
            mood_label=sample.mood_label,
            score=sample.score,
            source=sample.source.value,
            timestamp=sample.timestamp,
        ),
    )


def _from_persisted(entry: PersistedDayRecord) -> DayRecord:
    sample = entry.sample
    return DayRecord(
        day=entry.date,
        latest_sample=MoodSample(
            mood_label=sample.mood_label,
            score=sample.score,
            source=MoodSource(sample.source),
            timestamp=ensure_utc(sample.timestamp),
        ),
    )
