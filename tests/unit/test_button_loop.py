"""Unit tests for key, button and special actuation"""

import threading

import pytest

from xremote.common.channels import Channel, ChannelClosedError
from xremote.common.types import MouseCode, SpecialCode
from xremote.server.button_loop import ButtonActuator


@pytest.fixture
def keys() -> Channel:
    return Channel("key")


@pytest.fixture
def buttons() -> Channel:
    return Channel("button")


@pytest.fixture
def specials() -> Channel:
    return Channel("special")


@pytest.fixture
def actuator(injector, keys, buttons, specials) -> ButtonActuator:
    """Actuator with no settle delay"""
    return ButtonActuator(
        injector=injector,
        keys=keys,
        buttons=buttons,
        specials=specials,
        settle_delay=0.0,
        idle_wait=0.001,
    )


class TestButtonActuator:
    """Tests for single ticks"""

    def test_lower_character(self, actuator, keys, injector):
        keys.item_send("a")
        assert actuator.tick() == 1
        assert injector.calls == [("key_press", 38), ("key_release", 38)]

    def test_upper_character_wrapped_in_shift(self, actuator, keys, injector):
        """Shifted characters hold left shift around the tap"""
        keys.item_send("A")
        actuator.tick()
        assert injector.calls == [
            ("key_press", 50),
            ("key_press", 38),
            ("key_release", 38),
            ("key_release", 50),
        ]

    def test_unmapped_character_skipped(self, actuator, injector):
        assert actuator.character_enter("é") is False
        assert injector.calls == []

    def test_mouse_button_click(self, actuator, buttons, injector):
        buttons.item_send(MouseCode.SCROLL_UP)
        actuator.tick()
        assert injector.calls == [("button_press", 4), ("button_release", 4)]

    def test_special_key(self, actuator, specials, injector):
        specials.item_send(SpecialCode.RETURN)
        actuator.tick()
        assert injector.calls == [("key_press", 36), ("key_release", 36)]

    def test_one_item_per_channel_per_tick(self, actuator, keys, buttons, injector):
        """Each tick takes at most one item from each channel, FIFO"""
        keys.item_send("a")
        keys.item_send("b")
        buttons.item_send(MouseCode.LEFT)
        assert actuator.tick() == 2
        assert actuator.tick() == 1
        assert actuator.tick() == 0
        key_presses = [code for name, code in injector.calls if name == "key_press"]
        assert key_presses == [38, 56]

    def test_settle_delay_between_press_and_release(self, injector, keys, buttons, specials, monkeypatch):
        """Press and release are separated by the settle delay"""
        sleeps: list = []
        monkeypatch.setattr("xremote.server.button_loop.time.sleep", sleeps.append)
        actuator = ButtonActuator(injector, keys, buttons, specials, settle_delay=0.05)
        actuator.special_enter(SpecialCode.TAB)
        assert sleeps == [0.05, 0.05]


    def test_closed_key_channel_does_not_drop_other_input(self, actuator, keys, buttons, specials, injector):
        """Buttons and specials queued before shutdown are still actuated"""
        buttons.item_send(MouseCode.LEFT)
        buttons.item_send(MouseCode.RIGHT)
        specials.item_send(SpecialCode.TAB)
        keys.channel_close()
        buttons.channel_close()
        specials.channel_close()

        assert actuator.tick() == 2
        assert actuator.tick() == 1
        with pytest.raises(ChannelClosedError):
            actuator.tick()
        assert injector.calls == [
            ("button_press", 1),
            ("button_release", 1),
            ("key_press", 23),
            ("key_release", 23),
            ("button_press", 3),
            ("button_release", 3),
        ]

class TestButtonLoop:
    """Tests for the threaded loop"""

    def test_loop_types_then_exits_on_close(self, actuator, keys, buttons, specials, injector):
        """Pending input is actuated; closing the inputs ends the loop"""
        thread = threading.Thread(target=actuator.loop_run, daemon=True)
        thread.start()
        for char in "hi":
            keys.item_send(char)
        specials.item_send(SpecialCode.RETURN)

        for _ in range(200):
            if len(injector.calls) >= 6:
                break
            threading.Event().wait(0.01)

        keys.channel_close()
        thread.join(timeout=2.0)
        assert not thread.is_alive()
        key_presses = [code for name, code in injector.calls if name == "key_press"]
        assert key_presses[:2] == [43, 31]
        assert 36 in key_presses

    def test_loop_exit_closes_all_inputs(self, actuator, keys, buttons, specials):
        """After the loop stops every channel refuses sends"""
        stop_event = threading.Event()
        stop_event.set()
        actuator.loop_run(stop_event)
        assert keys.isClosed_check()
        assert buttons.isClosed_check()
        assert specials.isClosed_check()
