"""Quota tracker tests: windows, eligibility and concurrent recording"""

import threading
from datetime import timedelta

import pytest

from geo_resolver.services.quota import QuotaTracker
from tests.fakes import FakeClock


WINDOW = timedelta(days=30)


@pytest.fixture
def tracker(clock: FakeClock) -> QuotaTracker:
    tracker = QuotaTracker(clock=clock)
    tracker.register("primary", calls_limit=3, window_duration=WINDOW, warning_threshold=2)
    return tracker


def test_fresh_provider_is_eligible(tracker: QuotaTracker):
    assert tracker.is_eligible("primary")
    assert tracker.snapshot("primary").calls_used == 0


def test_provider_ineligible_once_limit_reached(tracker: QuotaTracker):
    for _ in range(3):
        assert tracker.is_eligible("primary")
        tracker.record_usage("primary", "geocoding")

    assert not tracker.is_eligible("primary")
    assert tracker.snapshot("primary").calls_used == 3


def test_near_limit_at_warning_threshold(tracker: QuotaTracker):
    tracker.record_usage("primary")
    assert not tracker.snapshot("primary").near_limit

    tracker.record_usage("primary")
    state = tracker.snapshot("primary")
    assert state.near_limit
    assert state.eligible


def test_window_rolls_over_lazily(tracker: QuotaTracker, clock: FakeClock):
    start = clock.now
    for _ in range(3):
        tracker.record_usage("primary")
    assert not tracker.is_eligible("primary")

    clock.advance(days=29, hours=23)
    assert not tracker.is_eligible("primary")

    clock.advance(hours=1)
    assert tracker.is_eligible("primary")
    state = tracker.snapshot("primary")
    assert state.calls_used == 0
    assert state.by_operation == {}
    assert state.window_start == start + WINDOW


def test_window_skips_whole_idle_windows(tracker: QuotaTracker, clock: FakeClock):
    start = clock.now
    tracker.record_usage("primary")

    clock.advance(days=95)

    state = tracker.snapshot("primary")
    assert state.window_start == start + 3 * WINDOW
    assert state.window_end == start + 4 * WINDOW
    assert state.calls_used == 0


def test_unlimited_provider_always_eligible(clock: FakeClock):
    tracker = QuotaTracker(clock=clock)
    tracker.register("secondary", calls_limit=None, window_duration=WINDOW)

    for _ in range(1000):
        tracker.record_usage("secondary")

    assert tracker.is_eligible("secondary")
    assert tracker.snapshot("secondary").calls_used == 1000


def test_unregistered_provider_is_not_tracked(tracker: QuotaTracker):
    assert tracker.is_eligible("mathematical")
    tracker.record_usage("mathematical")
    assert tracker.snapshot("mathematical") is None
    assert list(tracker.providers()) == ["primary"]


def test_mark_exhausted_until_window_resets(tracker: QuotaTracker, clock: FakeClock):
    tracker.mark_exhausted("primary")
    assert not tracker.is_eligible("primary")
    assert tracker.snapshot("primary").calls_used == 0

    clock.advance(days=30)
    assert tracker.is_eligible("primary")


def test_mark_exhausted_ignored_for_unlimited(clock: FakeClock):
    tracker = QuotaTracker(clock=clock)
    tracker.register("secondary", calls_limit=None, window_duration=WINDOW)

    tracker.mark_exhausted("secondary")

    assert tracker.is_eligible("secondary")


def test_usage_counted_per_operation(tracker: QuotaTracker):
    tracker.record_usage("primary", "geocoding")
    tracker.record_usage("primary", "geocoding")
    tracker.record_usage("primary", "distance")

    assert tracker.snapshot("primary").by_operation == {"geocoding": 2, "distance": 1}


def test_snapshot_is_a_copy(tracker: QuotaTracker):
    snapshot = tracker.snapshot("primary")
    snapshot.calls_used = 99
    snapshot.by_operation["geocoding"] = 99

    state = tracker.snapshot("primary")
    assert state.calls_used == 0
    assert state.by_operation == {}


def test_concurrent_recording_loses_no_updates(clock: FakeClock):
    tracker = QuotaTracker(clock=clock)
    tracker.register("primary", calls_limit=100000, window_duration=WINDOW)

    def worker():
        for _ in range(500):
            tracker.record_usage("primary", "geocoding")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    state = tracker.snapshot("primary")
    assert state.calls_used == 4000
    assert state.by_operation["geocoding"] == 4000
