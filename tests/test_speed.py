"""Tests for the softcap speed curve and interval tweening."""

import pytest

from snake_core.events import RecordingListener
from snake_core.speed import (
    SpeedController,
    SpeedCurve,
    compute_level,
    compute_target_interval,
    ease_out_cubic,
)

CURVE = SpeedCurve(softcap_threshold=8, k1=8.0, k2=2.0, min_interval=60.0)


class TestSpeedCurve:
    def test_defaults(self):
        curve = SpeedCurve()
        assert curve.softcap_threshold == 8
        assert curve.k1 == 8.0
        assert curve.k2 == 2.0

    def test_k2_above_k1_rejected(self):
        with pytest.raises(ValueError, match="k2"):
            SpeedCurve(k1=2.0, k2=8.0)

    def test_non_positive_floor_rejected(self):
        with pytest.raises(ValueError, match="min_interval"):
            SpeedCurve(min_interval=0)


class TestComputeTargetInterval:
    def test_no_growth_keeps_base(self):
        assert compute_target_interval(500, 3, 3, CURVE) == 500

    def test_shorter_than_start_counts_as_zero(self):
        assert compute_target_interval(500, 2, 3, CURVE) == 500

    def test_phase_one(self):
        assert compute_target_interval(500, 3 + 8, 3, CURVE) == 436

    def test_phase_two(self):
        assert compute_target_interval(500, 3 + 12, 3, CURVE) == 428

    def test_floor_for_unbounded_growth(self):
        for length in (100, 1_000, 1_000_000):
            assert compute_target_interval(500, length, 3, CURVE) == 60

    def test_base_below_floor_is_clamped(self):
        assert compute_target_interval(40, 3, 3, CURVE) == 60


class TestLevel:
    def test_level_steps(self):
        assert compute_level(3, 3, CURVE) == 1
        assert compute_level(7, 3, CURVE) == 1
        assert compute_level(8, 3, CURVE) == 2

    def test_level_capped(self):
        assert compute_level(10_000, 3, CURVE) == CURVE.max_level


class TestTween:
    def test_ease_out_cubic_endpoints(self):
        assert ease_out_cubic(0.0) == 0.0
        assert ease_out_cubic(1.0) == 1.0
        assert ease_out_cubic(0.5) == pytest.approx(0.875)

    def test_retarget_starts_tween(self):
        ctl = SpeedController(500, 3, CURVE)
        ctl.retarget(4, now=1000.0)
        assert ctl.target_interval == 492
        assert ctl.current_interval == 500
        assert ctl.state.tween_start_time == 1000.0

    def test_tween_midpoint(self):
        ctl = SpeedController(500, 3, CURVE)
        ctl.retarget(4, now=0.0)
        ctl.tween(150.0)
        assert ctl.current_interval == pytest.approx(500 - 8 * 0.875)
        assert ctl.state.tweening

    def test_tween_completes_and_snaps(self):
        ctl = SpeedController(500, 3, CURVE)
        ctl.retarget(4, now=0.0)
        ctl.tween(CURVE.tween_duration + 1)
        assert ctl.current_interval == 492
        assert ctl.state.tween_start_time is None

    def test_hold_shifts_running_tween(self):
        ctl = SpeedController(500, 3, CURVE)
        ctl.retarget(4, now=0.0)
        ctl.hold(1000.0)
        assert ctl.state.tween_start_time == 1000.0
        ctl.tween(1150.0)
        assert ctl.current_interval == pytest.approx(500 - 8 * 0.875)

    def test_hold_without_tween_is_noop(self):
        ctl = SpeedController(500, 3, CURVE)
        ctl.hold(1000.0)
        assert ctl.state.tween_start_time is None

    def test_tween_before_start_time_is_clamped(self):
        ctl = SpeedController(500, 3, CURVE)
        ctl.retarget(4, now=100.0)
        ctl.tween(50.0)
        assert ctl.current_interval == 500

    def test_retarget_mid_tween_starts_from_current(self):
        ctl = SpeedController(500, 3, CURVE)
        ctl.retarget(4, now=0.0)
        ctl.tween(150.0)
        mid = ctl.current_interval
        ctl.retarget(5, now=150.0)
        assert ctl.state.tween_from == mid
        assert ctl.target_interval == 484

    def test_zero_duration_snaps(self):
        curve = SpeedCurve(tween_duration=0)
        ctl = SpeedController(500, 3, curve)
        ctl.retarget(4, now=0.0)
        assert ctl.tween(0.0) == 492

    def test_current_never_below_floor(self):
        ctl = SpeedController(500, 3, CURVE)
        for length, now in ((50, 0.0), (500, 1000.0), (5_000, 2000.0)):
            ctl.retarget(length, now)
            for t in range(0, 400, 25):
                ctl.tween(now + t)
                assert ctl.current_interval >= CURVE.min_interval

    def test_no_tween_when_target_unchanged(self):
        ctl = SpeedController(500, 3, CURVE)
        ctl.retarget(3, now=0.0)
        assert not ctl.state.tweening


class TestLevelEvents:
    def test_level_change_emitted_once(self):
        rec = RecordingListener()
        ctl = SpeedController(500, 3, CURVE, events=rec)
        for length in range(4, 9):
            ctl.retarget(length, now=0.0)
        assert rec.events == [{"event": "level_changed", "level": 2}]
        assert ctl.level == 2

    def test_reset(self):
        ctl = SpeedController(500, 3, CURVE)
        ctl.retarget(20, now=0.0)
        ctl.reset(350.0)
        assert ctl.current_interval == 350.0
        assert ctl.target_interval == 350.0
        assert ctl.level == 1
        assert not ctl.state.tweening
