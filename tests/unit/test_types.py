"""Unit tests for common types (codes, commands, Screen)"""

import pytest
from xremote.common.types import (
    Credential,
    KeyPress,
    MouseCode,
    PointerMove,
    Position,
    Screen,
    SpecialCode,
)


class TestMouseCode:
    """Test mouse code lookup tables"""

    @pytest.mark.parametrize(
        "numeral,code",
        [(1, MouseCode.LEFT), (3, MouseCode.RIGHT), (4, MouseCode.SCROLL_UP), (5, MouseCode.SCROLL_DOWN)],
    )
    def test_numeral_lookup_known(self, numeral, code):
        """Known numerals map to their code and back"""
        assert MouseCode.numeral_lookup(numeral) is code
        assert code.numeral_get() == numeral

    @pytest.mark.parametrize("numeral", [0, 2, 6, 9, 255])
    def test_numeral_lookup_unknown(self, numeral):
        """Numerals outside the enumeration are not mapped"""
        assert MouseCode.numeral_lookup(numeral) is None


class TestSpecialCode:
    """Test special key lookup tables"""

    def test_every_name_maps(self):
        """Every special code is reachable by its wire name"""
        for code in SpecialCode:
            assert SpecialCode.name_lookup(code.value) is code

    def test_unknown_and_uppercase_names(self):
        """Names are lower-case only"""
        assert SpecialCode.name_lookup("jump") is None
        assert SpecialCode.name_lookup("Return") is None

    def test_keycodes(self):
        """Special keys use the US-layout X11 keycodes"""
        assert SpecialCode.RETURN.keycode_get() == 36
        assert SpecialCode.BACKSPACE.keycode_get() == 22
        assert SpecialCode.SPACE.keycode_get() == 65
        assert len({code.keycode_get() for code in SpecialCode}) == len(SpecialCode)


class TestScreen:
    """Test percentage to pixel conversion"""

    def test_percentage_toPixels_scales(self):
        """50% of a 1280x720 screen is its centre"""
        screen = Screen(width=1280, height=720)
        assert screen.percentage_toPixels(Position(x=50, y=50)) == Position(x=640, y=360)

    def test_percentage_toPixels_clamps(self):
        """Out-of-range percentages are clamped, not rejected"""
        screen = Screen(width=1280, height=720)
        assert screen.percentage_toPixels(Position(x=-10, y=200)) == Position(x=0, y=720)


class TestCommands:
    """Test command value semantics"""

    def test_commands_are_immutable(self):
        """Commands are frozen values"""
        command = KeyPress(char="a")
        with pytest.raises(AttributeError):
            command.char = "b"

    def test_commands_compare_by_value(self):
        """Equal arguments give equal commands"""
        assert PointerMove(x=1, y=2) == PointerMove(x=1, y=2)
        assert PointerMove(x=1, y=2).position_get() == Position(x=1, y=2)

    def test_credential_repr_hides_secret(self):
        """The secret never appears in logs via repr"""
        assert "hunter2" not in repr(Credential(secret=b"hunter2"))
