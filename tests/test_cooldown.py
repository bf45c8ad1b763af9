"""Tests for the per-pane cooldown tracker."""

import pytest

from codex_yolo.cooldown import DEFAULT_COOLDOWN_SECS, CooldownTracker


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestCooldownTracker:
    def test_default_window(self):
        assert CooldownTracker().window == DEFAULT_COOLDOWN_SECS == 2.0

    def test_fresh_pane_not_in_cooldown(self):
        assert CooldownTracker().is_in_cooldown("%1") is False

    def test_just_approved_in_cooldown(self):
        tracker = CooldownTracker(window=2.0)
        tracker.record_approval("%1", now=100.0)
        assert tracker.is_in_cooldown("%1", now=100.0) is True

    def test_exactly_at_window_not_in_cooldown(self):
        tracker = CooldownTracker(window=2.0)
        tracker.record_approval("%1", now=100.0)
        assert tracker.is_in_cooldown("%1", now=102.0) is False

    def test_just_inside_window(self):
        tracker = CooldownTracker(window=2.0)
        tracker.record_approval("%1", now=100.0)
        assert tracker.is_in_cooldown("%1", now=101.999) is True

    def test_long_after_window(self):
        tracker = CooldownTracker(window=2.0)
        tracker.record_approval("%1", now=100.0)
        assert tracker.is_in_cooldown("%1", now=110.0) is False

    def test_panes_are_independent(self):
        tracker = CooldownTracker(window=2.0)
        tracker.record_approval("%1", now=100.0)
        tracker.record_approval("%2", now=90.0)
        assert tracker.is_in_cooldown("%1", now=100.5) is True
        assert tracker.is_in_cooldown("%2", now=100.5) is False
        assert tracker.is_in_cooldown("%3", now=100.5) is False

    def test_record_overwrites(self):
        tracker = CooldownTracker(window=2.0)
        tracker.record_approval("%1", now=100.0)
        tracker.record_approval("%1", now=105.0)
        assert tracker.is_in_cooldown("%1", now=106.0) is True

    def test_uses_clock(self):
        clock = FakeClock(50.0)
        tracker = CooldownTracker(window=2.0, clock=clock)
        tracker.record_approval("%1")
        assert tracker.is_in_cooldown("%1")
        clock.now = 52.0
        assert not tracker.is_in_cooldown("%1")

    def test_remaining(self):
        tracker = CooldownTracker(window=2.0)
        assert tracker.remaining("%1", now=0.0) == 0.0
        tracker.record_approval("%1", now=10.0)
        assert tracker.remaining("%1", now=10.5) == pytest.approx(1.5)
        assert tracker.remaining("%1", now=20.0) == 0.0

    def test_forget(self):
        tracker = CooldownTracker(window=2.0)
        tracker.record_approval("%1", now=10.0)
        assert "%1" in tracker
        tracker.forget("%1")
        assert "%1" not in tracker
        assert len(tracker) == 0
        assert not tracker.is_in_cooldown("%1", now=10.0)

    def test_zero_window_never_suppresses(self):
        tracker = CooldownTracker(window=0.0)
        tracker.record_approval("%1", now=10.0)
        assert not tracker.is_in_cooldown("%1", now=10.0)
