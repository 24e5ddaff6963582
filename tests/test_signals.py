"""Tests for the inbound signal API."""

from datetime import timedelta

from mood_engine.domain.moods import MoodSource
from mood_engine.domain.stats import HeatmapTone
from mood_engine.services.signals import MoodSignalService, intensity_to_score
from mood_engine.services.stats import StatsService
from tests.conftest import FakeClock


def test_manual_mood_uses_label_default_score(
    signal_service: MoodSignalService,
) -> None:
    record = signal_service.record_manual_mood("great")

    assert record is not None
    assert record.score == 90
    assert record.latest_sample.source == MoodSource.MANUAL


def test_manual_mood_unknown_label_defaults_to_neutral_score(
    signal_service: MoodSignalService,
) -> None:
    record = signal_service.record_manual_mood("bewildered")

    assert record is not None
    assert record.score == 70


def test_manual_mood_coerces_invalid_numbers(
    signal_service: MoodSignalService, clock: FakeClock
) -> None:
    record = signal_service.record_manual_mood("okay", "not a number")
    assert record is not None
    assert record.score == 0.0

    clock.advance(minutes=1)
    record = signal_service.record_manual_mood("okay", float("nan"))
    assert record is not None
    assert record.score == 0.0

    clock.advance(minutes=1)
    record = signal_service.record_manual_mood("okay", " 42 ")
    assert record is not None
    assert record.score == 42.0

    clock.advance(minutes=1)
    record = signal_service.record_manual_mood("okay", 150)
    assert record is not None
    assert record.score == 100.0


def test_manual_mood_label_is_normalized(signal_service: MoodSignalService) -> None:
    record = signal_service.record_manual_mood("😊 Happy")

    assert record is not None
    assert record.mood_label == "happy"


def test_intensity_maps_to_score() -> None:
    assert intensity_to_score(3) == 70
    assert intensity_to_score(0) == 100
    assert intensity_to_score(12) == 0
    assert intensity_to_score(-5) == 100
    assert intensity_to_score("7") == 30


def test_remote_inference_supersedes_local_heuristic_today(
    signal_service: MoodSignalService,
) -> None:
    signal_service.record_text_for_classification("I feel great")

    record = signal_service.record_remote_inference("Stressed", 6)

    assert record is not None
    assert record.mood_label == "stressed"
    assert record.score == 40
    assert record.latest_sample.source == MoodSource.REMOTE_INFERENCE
    assert len(signal_service.get_history()) == 1


def test_later_manual_entry_overrides_remote_result(
    signal_service: MoodSignalService, clock: FakeClock
) -> None:
    signal_service.record_remote_inference("sad", 5)
    clock.advance(hours=2)

    signal_service.record_manual_mood("good")

    current = signal_service.get_current_mood()
    assert current is not None
    assert current.mood_label == "good"
    assert current.latest_sample.source == MoodSource.MANUAL


def test_text_signal_updates_stats(signal_service: MoodSignalService) -> None:
    signal_service.record_text_for_classification("I'm really anxious about tomorrow")

    current = signal_service.get_current_mood()
    assert current is not None
    assert current.mood_label == "anxious"
    assert current.score == 55
    assert current.latest_sample.source == MoodSource.LOCAL_HEURISTIC

    stats = StatsService(signal_service.store).get_derived_stats()
    assert stats.average_score == 55.0
    assert stats.heatmap_buckets[-1].day == current.day
    assert stats.heatmap_buckets[-1].tone == HeatmapTone.NEGATIVE


def test_signals_on_consecutive_days_build_history(
    signal_service: MoodSignalService, clock: FakeClock
) -> None:
    clock.now = clock.now - timedelta(days=1)
    signal_service.record_manual_mood("good")
    clock.advance(days=1)
    signal_service.record_manual_mood("calm")

    stats = StatsService(signal_service.store).get_derived_stats()

    assert stats.streak_length == 2
    assert stats.average_score == 80.0


def test_practice_totals_coerce_form_input(
    signal_service: MoodSignalService,
) -> None:
    totals = signal_service.set_practice_totals(
        exercises=" 7 ", minutes_practiced="not a number"
    )

    assert totals.exercises == 7
    assert totals.minutes_practiced == 0

    kept = signal_service.set_practice_totals(minutes_practiced=-30)

    assert kept.exercises == 7
    assert kept.minutes_practiced == 0


def test_practice_session_increments_counters(
    signal_service: MoodSignalService,
) -> None:
    signal_service.set_practice_totals(exercises=2, minutes_practiced=20)

    signal_service.log_practice_session("10.9")
    totals = signal_service.log_practice_session(float("nan"))

    assert totals.exercises == 4
    assert totals.minutes_practiced == 30
    stats = StatsService(signal_service.store).get_derived_stats()
    assert stats.practice == totals
