"""US-layout character to X11 keycode mapping."""

from __future__ import annotations

from typing import Optional

SHIFT_KEYCODE: int = 50
"""Keycode of the left shift key."""

# Rows of the main keyboard block, keycode first, then (unshifted, shifted).
_KEYBOARD_ROWS: tuple[tuple[int, str, str], ...] = (
    # Row 1
    (10, "1", "!"),
    (11, "2", "@"),
    (12, "3", "#"),
    (13, "4", "$"),
    (14, "5", "%"),
    (15, "6", "^"),
    (16, "7", "&"),
    (17, "8", "*"),
    (18, "9", "("),
    (19, "0", ")"),
    (20, "-", "_"),
    (21, "=", "+"),
    # Row 2
    (24, "q", "Q"),
    (25, "w", "W"),
    (26, "e", "E"),
    (27, "r", "R"),
    (28, "t", "T"),
    (29, "y", "Y"),
    (30, "u", "U"),
    (31, "i", "I"),
    (32, "o", "O"),
    (33, "p", "P"),
    (34, "[", "{"),
    (35, "]", "}"),
    (51, "\\", "|"),
    # Row 3
    (38, "a", "A"),
    (39, "s", "S"),
    (40, "d", "D"),
    (41, "f", "F"),
    (42, "g", "G"),
    (43, "h", "H"),
    (44, "j", "J"),
    (45, "k", "K"),
    (46, "l", "L"),
    (47, ";", ":"),
    (48, "'", '"'),
    (49, "`", "~"),
    # Row 4
    (52, "z", "Z"),
    (53, "x", "X"),
    (54, "c", "C"),
    (55, "v", "V"),
    (56, "b", "B"),
    (57, "n", "N"),
    (58, "m", "M"),
    (59, ",", "<"),
    (60, ".", ">"),
    (61, "/", "?"),
)

_LOWER_KEYCODES: dict[str, int] = {lower: code for code, lower, _ in _KEYBOARD_ROWS}
_UPPER_KEYCODES: dict[str, int] = {upper: code for code, _, upper in _KEYBOARD_ROWS}


def charKeycode_get(char: str) -> Optional[tuple[int, bool]]:
    """
    Look up the keycode for a printable character.

    Args:
        char: Single character to type.

    Returns:
        Tuple of (keycode, needs_shift), or None when the character has no key.
    """
    if char in _LOWER_KEYCODES:
        return _LOWER_KEYCODES[char], False
    if char in _UPPER_KEYCODES:
        return _UPPER_KEYCODES[char], True
    return None
