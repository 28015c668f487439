"""Backend protocol for input injection."""

from __future__ import annotations

from typing import Protocol

from xremote.common.types import Position, Screen


class InputInjector(Protocol):
    """
    Abstract input injection interface.

    One injector is shared by the pointer and button worker threads, so
    implementations must tolerate concurrent calls. Failures are fatal to the
    process and are raised, never swallowed.
    """

    def connection_establish(self) -> None:
        """Connect to the display/input subsystem."""

    def connection_close(self) -> None:
        """Disconnect from the display/input subsystem."""

    def screenGeometry_get(self) -> Screen:
        """Return screen size in pixels."""

    def pointer_warp(self, position: Position) -> None:
        """Move the pointer to an absolute pixel position."""

    def key_press(self, keycode: int) -> None:
        """Press a key by keycode."""

    def key_release(self, keycode: int) -> None:
        """Release a key by keycode."""

    def mouseButton_press(self, button: int) -> None:
        """Press a mouse button by number."""

    def mouseButton_release(self, button: int) -> None:
        """Release a mouse button by number."""
