"""Unit tests for pointer interpolation"""

import threading

import pytest

from xremote.common.channels import LatestValueCell
from xremote.common.types import Position, Screen
from xremote.server.pointer_loop import PointerInterpolator, axis_approach, position_approach


@pytest.fixture
def targets() -> LatestValueCell:
    return LatestValueCell("pointer")


@pytest.fixture
def interpolator(injector, targets) -> PointerInterpolator:
    """Interpolator over a 100x100 screen with no pacing"""
    return PointerInterpolator(
        injector=injector,
        targets=targets,
        screen=Screen(width=100, height=100),
        step=1,
        tick_interval=0.001,
    )


def _ticks(interpolator: PointerInterpolator, count: int) -> list:
    return [interpolator.tick() for _ in range(count)]


class TestApproach:
    """Tests for single-step approach arithmetic"""

    def test_moves_by_step(self):
        assert axis_approach(10, 0, 1) == 1
        assert axis_approach(-10, 0, 3) == -3

    def test_snaps_inside_one_step(self):
        """No overshoot: within one step lands exactly on target"""
        assert axis_approach(10, 8, 3) == 10
        assert axis_approach(0, 2, 3) == 0

    def test_at_target_stays(self):
        assert axis_approach(5, 5, 1) == 5

    def test_axes_independent(self):
        assert position_approach(Position(3, -3), Position(0, 0), 2) == Position(2, -2)


class TestPointerInterpolator:
    """Tests for the tick state machine"""

    def test_linear_approach_then_hold(self, interpolator, targets, injector):
        """(0,0) -> (10,0) emits each intermediate position once then holds"""
        targets.value_put(Position(10, 0))
        emitted = [p for p in _ticks(interpolator, 15) if p is not None]
        assert emitted == [Position(x, 0) for x in range(1, 11)]
        assert injector.warps == emitted
        assert interpolator.current == Position(10, 0)

    def test_retarget_mid_approach(self, interpolator, targets):
        """A new target abandons the old approach from the current position"""
        targets.value_put(Position(10, 0))
        _ticks(interpolator, 5)
        assert interpolator.current == Position(5, 0)

        targets.value_put(Position(0, 0))
        emitted = [p for p in _ticks(interpolator, 10) if p is not None]
        assert emitted == [Position(x, 0) for x in range(4, -1, -1)]

    def test_repeated_target_produces_no_motion(self, interpolator, targets, injector):
        """Sending the arrived-at target again does nothing"""
        targets.value_put(Position(2, 2))
        _ticks(interpolator, 3)
        warps_before = list(injector.warps)
        targets.value_put(Position(2, 2))
        assert _ticks(interpolator, 3) == [None, None, None]
        assert injector.warps == warps_before

    def test_only_latest_target_reached(self, interpolator, targets):
        """Targets that were overwritten before being taken are never visited"""
        targets.value_put(Position(0, 50))
        targets.value_put(Position(3, 0))
        emitted = [p for p in _ticks(interpolator, 5) if p is not None]
        assert emitted == [Position(1, 0), Position(2, 0), Position(3, 0)]

    def test_out_of_range_targets_clamped_at_backend(self, injector, targets):
        """Percent positions are clamped only when converted to pixels"""
        interpolator = PointerInterpolator(
            injector=injector,
            targets=targets,
            screen=Screen(width=1280, height=720),
            step=200,
            tick_interval=0.001,
        )
        targets.value_put(Position(-10, 200))
        assert interpolator.tick() == Position(-10, 200)
        assert injector.warps == [Position(0, 720)]

    def test_idle_tick_returns_none(self, interpolator):
        """At target with no new target: no emission"""
        assert interpolator.tick() is None

    def test_step_must_be_positive(self, injector, targets):
        with pytest.raises(ValueError):
            PointerInterpolator(injector, targets, Screen(100, 100), step=0)


class TestPointerLoop:
    """Tests for the threaded loop"""

    def test_loop_converges_and_stops_on_close(self, interpolator, targets, injector):
        """Loop reaches the latest target and exits when the cell closes"""
        thread = threading.Thread(target=interpolator.loop_run, daemon=True)
        thread.start()
        targets.value_put(Position(0, 0))
        targets.value_put(Position(20, 10))

        deadline = threading.Event()
        for _ in range(200):
            if interpolator.current == Position(20, 10):
                break
            deadline.wait(0.01)
        assert interpolator.current == Position(20, 10)

        targets.cell_close()
        thread.join(timeout=2.0)
        assert not thread.is_alive()

    def test_loop_stops_on_event_and_closes_cell(self, interpolator, targets):
        """Stopping the loop closes its input so producers notice"""
        stop_event = threading.Event()
        thread = threading.Thread(target=interpolator.loop_run, args=(stop_event,), daemon=True)
        thread.start()
        stop_event.set()
        thread.join(timeout=2.0)
        assert not thread.is_alive()
        assert targets.isClosed_check()
