"""
Pointer interpolation worker.

The interpolator keeps a `current` and a `target` position in percent space.
Every tick it moves `current` at most `step` per axis toward `target` and
warps the real pointer there, so the cursor glides instead of jumping. Targets
arrive through a latest-wins cell: a new target replaces the old one
immediately and interpolation continues from wherever the cursor is.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from xremote.common.channels import ChannelClosedError, LatestValueCell
from xremote.common.types import Position, Screen
from xremote.input.backend import InputInjector

logger = logging.getLogger(__name__)

__all__ = [
    "PointerInterpolator",
    "axis_approach",
    "position_approach",
]


def axis_approach(target: int, current: int, step: int) -> int:
    """
    Move one axis toward its target without overshooting.

    Args:
        target: Target coordinate.
        current: Current coordinate.
        step: Maximum movement.

    Returns:
        New coordinate; equals `target` when within one step.
    """
    diff: int = target - current
    if diff > step:
        return current + step
    if diff < -step:
        return current - step
    return target


def position_approach(target: Position, current: Position, step: int) -> Position:
    """
    Move a position one step toward the target on both axes.

    Args:
        target: Target position.
        current: Current position.
        step: Maximum movement per axis.

    Returns:
        New position.
    """
    return Position(
        x=axis_approach(target.x, current.x, step),
        y=axis_approach(target.y, current.y, step),
    )


class PointerInterpolator:
    """Moves the pointer toward the most recent target, one step per tick."""

    def __init__(
        self,
        injector: InputInjector,
        targets: LatestValueCell[Position],
        screen: Screen,
        step: int = 1,
        tick_interval: float = 0.002,
    ) -> None:
        """
        Initialize interpolator.

        Args:
            injector: Shared input backend.
            targets: Latest-wins cell of percent-space targets.
            screen: Screen geometry used for percent-to-pixel conversion.
            step: Maximum percent movement per axis per tick.
            tick_interval: Seconds between ticks while moving; also the
                longest wait for a new target while idle.
        """
        if step < 1:
            raise ValueError(f"step must be >= 1, got {step}")
        self._injector: InputInjector = injector
        self._targets: LatestValueCell[Position] = targets
        self._screen: Screen = screen
        self._step: int = step
        self._tick_interval: float = tick_interval
        self.current: Position = Position(x=0, y=0)
        self.target: Position = Position(x=0, y=0)

    def tick(self) -> Optional[Position]:
        """
        Run one interpolation step.

        Returns:
            New current position when the pointer moved, else None.

        Raises:
            ChannelClosedError: If the target cell is closed and drained.
        """
        if self.current == self.target:
            new_target: Optional[Position] = self._targets.value_wait(self._tick_interval)
        else:
            new_target = self._targets.value_tryTake()
        if new_target is not None:
            self.target = new_target

        if self.current == self.target:
            return None

        self.current = position_approach(self.target, self.current, self._step)
        self._injector.pointer_warp(self._screen.percentage_toPixels(self.current))
        return self.current

    def loop_run(self, stop_event: Optional[threading.Event] = None) -> None:
        """
        Tick until the target cell closes or `stop_event` is set.

        Args:
            stop_event: Optional event requesting shutdown.
        """
        logger.info("Pointer loop started (step=%s, tick=%ss)", self._step, self._tick_interval)
        try:
            while stop_event is None or not stop_event.is_set():
                moved: Optional[Position] = self.tick()
                if moved is not None and self._tick_interval > 0:
                    # Pace motion; idle ticks already waited on the cell
                    time.sleep(self._tick_interval)
        except ChannelClosedError:
            logger.warning("Pointer target channel disconnected")
        finally:
            self._targets.cell_close()
            logger.info("Pointer loop stopped")
