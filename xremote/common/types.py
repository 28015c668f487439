"""Common types and data structures for xremote"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class CommandTag(Enum):
    """Wire tags selecting the command kind (first token of a chunk)"""
    KEY_PRESS = b"t"
    MOUSE_BUTTON = b"c"
    POINTER_MOVE = b"m"
    SPECIAL = b"s"


class MouseCode(Enum):
    """Mouse buttons accepted on the wire, valued by X11 button number"""
    LEFT = 1
    RIGHT = 3
    SCROLL_UP = 4
    SCROLL_DOWN = 5

    @staticmethod
    def numeral_lookup(numeral: int) -> Optional["MouseCode"]:
        """Map a wire numeral to a mouse code, None if unknown"""
        return _MOUSE_CODE_BY_NUMERAL.get(numeral)

    def numeral_get(self) -> int:
        """Wire numeral (and X11 button) for this code"""
        return _NUMERAL_BY_MOUSE_CODE[self]


class SpecialCode(Enum):
    """Named special keys accepted on the wire"""
    BACKSPACE = "backspace"
    TAB = "tab"
    RETURN = "return"
    SPACE = "space"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @staticmethod
    def name_lookup(name: str) -> Optional["SpecialCode"]:
        """Map a lower-case wire name to a special code, None if unknown"""
        return _SPECIAL_CODE_BY_NAME.get(name)

    def keycode_get(self) -> int:
        """X11 keycode (US layout) for this special key"""
        return _KEYCODE_BY_SPECIAL_CODE[self]


_MOUSE_CODE_BY_NUMERAL: dict[int, MouseCode] = {
    1: MouseCode.LEFT,
    3: MouseCode.RIGHT,
    4: MouseCode.SCROLL_UP,
    5: MouseCode.SCROLL_DOWN,
}

_SPECIAL_CODE_BY_NAME: dict[str, SpecialCode] = {
    "backspace": SpecialCode.BACKSPACE,
    "tab": SpecialCode.TAB,
    "return": SpecialCode.RETURN,
    "space": SpecialCode.SPACE,
    "up": SpecialCode.UP,
    "down": SpecialCode.DOWN,
    "left": SpecialCode.LEFT,
    "right": SpecialCode.RIGHT,
}

_KEYCODE_BY_SPECIAL_CODE: dict[SpecialCode, int] = {
    SpecialCode.BACKSPACE: 22,
    SpecialCode.TAB: 23,
    SpecialCode.RETURN: 36,
    SpecialCode.SPACE: 65,
    SpecialCode.UP: 111,
    SpecialCode.DOWN: 116,
    SpecialCode.LEFT: 113,
    SpecialCode.RIGHT: 114,
}


def _lookupTables_validate() -> dict[MouseCode, int]:
    """
    Check the code tables are one-to-one and cover every enum member

    Returns:
        Inverse mouse table (code -> numeral)

    Raises:
        ValueError: If a table is incomplete or not bijective
    """
    inverse_mouse: dict[MouseCode, int] = {code: n for n, code in _MOUSE_CODE_BY_NUMERAL.items()}
    if set(inverse_mouse) != set(MouseCode) or len(inverse_mouse) != len(_MOUSE_CODE_BY_NUMERAL):
        raise ValueError("Mouse code table must map each MouseCode exactly once")
    for numeral, code in _MOUSE_CODE_BY_NUMERAL.items():
        if code.value != numeral:
            raise ValueError(f"Mouse numeral {numeral} mapped to mismatched {code}")

    if set(_SPECIAL_CODE_BY_NAME.values()) != set(SpecialCode):
        raise ValueError("Special name table must map each SpecialCode exactly once")
    if len(_SPECIAL_CODE_BY_NAME) != len(SpecialCode):
        raise ValueError("Special name table has duplicate entries")
    if set(_KEYCODE_BY_SPECIAL_CODE) != set(SpecialCode):
        raise ValueError("Special keycode table must cover every SpecialCode")
    return inverse_mouse


_NUMERAL_BY_MOUSE_CODE: dict[MouseCode, int] = _lookupTables_validate()


@dataclass(frozen=True)
class Position:
    """2D position coordinates"""
    x: int
    y: int


@dataclass(frozen=True)
class Screen:
    """Screen dimensions in pixels"""
    width: int
    height: int

    def percentage_toPixels(self, position: Position) -> Position:
        """
        Convert a 0-100 percentage position into absolute pixels

        Out-of-range percentages are clamped into 0..100 first.

        Args:
            position: Position expressed as percentage of width/height

        Returns:
            Absolute pixel position
        """
        x = min(max(position.x, 0), 100)
        y = min(max(position.y, 0), 100)
        return Position(
            x=int(self.width * (x / 100.0)),
            y=int(self.height * (y / 100.0)),
        )


@dataclass(frozen=True)
class Credential:
    """Shared secret used to key the authentication HMAC"""
    secret: bytes

    def __repr__(self) -> str:
        return "Credential(secret=<redacted>)"


@dataclass(frozen=True)
class AuthAttempt:
    """First message of a connection: payload and its claimed tag"""
    data: bytes
    tag: bytes


@dataclass(frozen=True)
class KeyPress:
    """Type one character"""
    char: str


@dataclass(frozen=True)
class MouseButton:
    """Click one mouse button"""
    code: MouseCode


@dataclass(frozen=True)
class PointerMove:
    """Absolute pointer target as percentage of the screen (not clamped)"""
    x: int
    y: int

    def position_get(self) -> Position:
        """Target as a Position in percent space"""
        return Position(x=self.x, y=self.y)


@dataclass(frozen=True)
class Special:
    """Press one named special key"""
    code: SpecialCode


Command = Union[KeyPress, MouseButton, PointerMove, Special]
