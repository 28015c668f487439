"""X11 event injection using XTest extension"""

import logging
from typing import Optional

from Xlib import X
from Xlib.ext import xtest

from xremote.common.types import Position, Screen
from xremote.x11.display import DisplayManager

logger = logging.getLogger(__name__)


class X11InputInjector:
    """Injects mouse and keyboard events into X11 using XTest extension"""

    def __init__(
        self,
        display_manager: DisplayManager,
        screen_override: Optional[Screen] = None,
    ) -> None:
        """
        Initialize event injector

        Args:
            display_manager: X11 display manager
            screen_override: Geometry to report instead of querying X11
        """
        self._display_manager: DisplayManager = display_manager
        self._screen_override: Optional[Screen] = screen_override

    def connection_establish(self) -> None:
        """
        Connect to X11 and check XTest is usable

        Raises:
            RuntimeError: If the XTEST extension is missing
        """
        self._display_manager.connection_establish()
        if not self.xtestExtension_verify():
            raise RuntimeError("X11 display does not provide the XTEST extension")

    def connection_close(self) -> None:
        """Close the X11 connection"""
        self._display_manager.connection_close()

    def xtestExtension_verify(self) -> bool:
        """
        Verify XTest extension is available

        Returns:
            True if XTest is available, False otherwise
        """
        display = self._display_manager.display_get()
        ext_info = display.query_extension('XTEST')
        return ext_info is not None

    def screenGeometry_get(self) -> Screen:
        """Screen size, honouring any configured override"""
        if self._screen_override is not None:
            return self._screen_override
        return self._display_manager.screenGeometry_get()

    def pointer_warp(self, position: Position) -> None:
        """
        Move mouse pointer to absolute position

        Args:
            position: Target position in pixels
        """
        self._display_manager.cursorPosition_set(position)

    def mouseButton_press(self, button: int) -> None:
        """
        Press mouse button

        Args:
            button: Button number (1=left, 3=right, 4/5=scroll)
        """
        display = self._display_manager.display_get()
        xtest.fake_input(display, X.ButtonPress, detail=button)
        display.sync()

    def mouseButton_release(self, button: int) -> None:
        """
        Release mouse button

        Args:
            button: Button number (1=left, 3=right, 4/5=scroll)
        """
        display = self._display_manager.display_get()
        xtest.fake_input(display, X.ButtonRelease, detail=button)
        display.sync()

    def key_press(self, keycode: int) -> None:
        """
        Press keyboard key

        Args:
            keycode: X11 keycode
        """
        display = self._display_manager.display_get()
        xtest.fake_input(display, X.KeyPress, detail=keycode)
        display.sync()

    def key_release(self, keycode: int) -> None:
        """
        Release keyboard key

        Args:
            keycode: X11 keycode
        """
        display = self._display_manager.display_get()
        xtest.fake_input(display, X.KeyRelease, detail=keycode)
        display.sync()
