"""
Keyboard, mouse-button and special-key worker.

Each tick takes at most one pending item from each inbound channel and taps it
on the backend: press, settle delay, release. The settle delay keeps the
display server from seeing a held key and auto-repeating it.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional, TypeVar

from xremote.common.channels import Channel, ChannelClosedError
from xremote.common.keymap import SHIFT_KEYCODE, charKeycode_get
from xremote.common.types import MouseCode, SpecialCode
from xremote.input.backend import InputInjector

logger = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = ["ButtonActuator"]


class ButtonActuator:
    """Drains key, button and special channels into the input backend."""

    def __init__(
        self,
        injector: InputInjector,
        keys: Channel[str],
        buttons: Channel[MouseCode],
        specials: Channel[SpecialCode],
        settle_delay: float = 0.05,
        idle_wait: float = 0.01,
    ) -> None:
        """
        Initialize actuator.

        Args:
            injector: Shared input backend.
            keys: Characters to type.
            buttons: Mouse buttons to click.
            specials: Special keys to press.
            settle_delay: Seconds between press and release.
            idle_wait: Longest wait for new input when every channel is empty.
        """
        self._injector: InputInjector = injector
        self._keys: Channel[str] = keys
        self._buttons: Channel[MouseCode] = buttons
        self._specials: Channel[SpecialCode] = specials
        self._settle_delay: float = settle_delay
        self._idle_wait: float = idle_wait

    def tick(self) -> int:
        """
        Actuate at most one pending item per channel.

        A closed, drained channel does not stop the others: the tick only
        reports the close once nothing was left to actuate anywhere.

        Returns:
            Number of items actuated.

        Raises:
            ChannelClosedError: If a channel is closed and drained and the
                other channels are empty.
        """
        actuated: int = 0
        closed: list[str] = []

        character: Optional[str] = self._item_take(self._keys, closed)
        if character is not None:
            self.character_enter(character)
            actuated += 1

        button: Optional[MouseCode] = self._item_take(self._buttons, closed)
        if button is not None:
            self.mouseButton_tap(button)
            actuated += 1

        special: Optional[SpecialCode] = self._item_take(self._specials, closed)
        if special is not None:
            self.special_enter(special)
            actuated += 1

        if closed and actuated == 0:
            raise ChannelClosedError(f"{', '.join(closed)} channel closed")
        return actuated

    @staticmethod
    def _item_take(channel: Channel[T], closed: list[str]) -> Optional[T]:
        try:
            return channel.item_tryReceive()
        except ChannelClosedError:
            closed.append(channel.name)
            return None

    def character_enter(self, character: str) -> bool:
        """
        Type one character, holding shift when the keymap needs it.

        Args:
            character: Character to type.

        Returns:
            False when the character has no key on the layout.
        """
        mapping: Optional[tuple[int, bool]] = charKeycode_get(character)
        if mapping is None:
            logger.warning("No keycode for character %r", character)
            return False

        keycode, needs_shift = mapping
        if needs_shift:
            self._injector.key_press(SHIFT_KEYCODE)
        self.key_tap(keycode)
        if needs_shift:
            self._injector.key_release(SHIFT_KEYCODE)
        return True

    def special_enter(self, code: SpecialCode) -> None:
        """Press and release a special key."""
        self.key_tap(code.keycode_get())

    def key_tap(self, keycode: int) -> None:
        """Press, settle, release."""
        self._injector.key_press(keycode)
        self._settle()
        self._injector.key_release(keycode)
        self._settle()

    def mouseButton_tap(self, code: MouseCode) -> None:
        """Click a mouse button (press, settle, release)."""
        button: int = code.numeral_get()
        self._injector.mouseButton_press(button)
        self._settle()
        self._injector.mouseButton_release(button)
        self._settle()

    def loop_run(self, stop_event: Optional[threading.Event] = None) -> None:
        """
        Tick until a channel closes or `stop_event` is set.

        Args:
            stop_event: Optional event requesting shutdown.
        """
        logger.info("Button loop started (settle=%ss)", self._settle_delay)
        try:
            while stop_event is None or not stop_event.is_set():
                if self.tick() == 0:
                    self._idleInput_await()
        except ChannelClosedError as e:
            logger.warning("Button loop input disconnected: %s", e)
        finally:
            self._keys.channel_close()
            self._buttons.channel_close()
            self._specials.channel_close()
            logger.info("Button loop stopped")

    def _idleInput_await(self) -> None:
        # Block briefly on the key channel; anything received is typed now
        character: Optional[str] = self._keys.item_receive(self._idle_wait)
        if character is not None:
            self.character_enter(character)

    def _settle(self) -> None:
        if self._settle_delay > 0:
            time.sleep(self._settle_delay)
