"""Wire command parsing and encoding for the xremote protocol

A command is one chunk of ASCII-whitespace-delimited tokens; the first token
is a single-byte tag:

    t <char>        type a character (only its first byte is used)
    c <numeral>     click mouse button 1, 3, 4 or 5
    m <x> <y>       move pointer to x, y percent (signed 16-bit, unclamped)
    s <name>        press a special key (backspace, tab, return, ...)
"""

from typing import Iterator, List, Optional

from xremote.common.types import (
    Command,
    CommandTag,
    KeyPress,
    MouseButton,
    MouseCode,
    PointerMove,
    Special,
    SpecialCode,
)

INT16_MIN = -32768
INT16_MAX = 32767


class DecodeError(Exception):
    """Base class for chunks that do not produce a command"""


class HardDecodeError(DecodeError):
    """Unknown tag or missing required token"""


class SoftDecodeError(DecodeError):
    """Token present but invalid (bad UTF-8, bad numeral, unknown code)"""


def tokens_split(chunk: bytes) -> List[bytes]:
    """
    Split a chunk on ASCII whitespace, dropping empty tokens

    Args:
        chunk: Raw bytes from one read

    Returns:
        Non-empty tokens in order
    """
    # bytes.split() with no separator splits on ASCII whitespace only
    return chunk.split()


def token_decode(token: bytes, what: str) -> str:
    """
    Decode a token as UTF-8

    Raises:
        SoftDecodeError: If the token is not valid UTF-8
    """
    try:
        return token.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SoftDecodeError(f"{what} is not valid UTF-8: {e}") from e


def token_toInt(token: bytes, what: str, minimum: int, maximum: int) -> int:
    """
    Parse a token as a decimal integer within [minimum, maximum]

    Raises:
        SoftDecodeError: If the token is not a numeral or is out of range
    """
    text = token_decode(token, what)
    digits = text[1:] if text[:1] in ("-", "+") else text
    # int() would also take underscores and non-ASCII digits
    if not (digits.isascii() and digits.isdigit()):
        raise SoftDecodeError(f"{what} is not a decimal numeral: {text!r}")
    value = int(text, 10)
    if not minimum <= value <= maximum:
        raise SoftDecodeError(f"{what} {value} out of range [{minimum}, {maximum}]")
    return value


def token_next(tokens: Iterator[bytes], what: str) -> bytes:
    """
    Take the next required token

    Raises:
        HardDecodeError: If no token remains
    """
    token: Optional[bytes] = next(tokens, None)
    if token is None:
        raise HardDecodeError(f"missing {what}")
    return token


class CommandParser:
    """Parses wire chunks into typed commands"""

    @staticmethod
    def command_parse(chunk: bytes) -> Command:
        """
        Parse one chunk into a command

        Args:
            chunk: Raw bytes from one read

        Returns:
            Decoded command

        Raises:
            HardDecodeError: Unknown tag or missing tokens
            SoftDecodeError: Present but invalid tokens
        """
        tokens = iter(tokens_split(chunk))
        raw_tag = token_next(tokens, "command tag")
        try:
            tag = CommandTag(raw_tag)
        except ValueError:
            raise HardDecodeError(f"unknown command tag {raw_tag!r}") from None

        if tag == CommandTag.KEY_PRESS:
            return CommandParser.keyPress_parse(tokens)
        if tag == CommandTag.MOUSE_BUTTON:
            return CommandParser.mouseButton_parse(tokens)
        if tag == CommandTag.POINTER_MOVE:
            return CommandParser.pointerMove_parse(tokens)
        return CommandParser.special_parse(tokens)

    @staticmethod
    def keyPress_parse(tokens: Iterator[bytes]) -> KeyPress:
        """
        Parse key press arguments

        Only the first byte of the token is used, so multi-byte UTF-8
        characters cannot be typed.
        """
        token = token_next(tokens, "key character")
        return KeyPress(char=chr(token[0]))

    @staticmethod
    def mouseButton_parse(tokens: Iterator[bytes]) -> MouseButton:
        """Parse mouse button arguments"""
        token = token_next(tokens, "mouse button")
        numeral = token_toInt(token, "mouse button", 0, 255)
        code = MouseCode.numeral_lookup(numeral)
        if code is None:
            raise SoftDecodeError(f"unknown mouse button {numeral}")
        return MouseButton(code=code)

    @staticmethod
    def pointerMove_parse(tokens: Iterator[bytes]) -> PointerMove:
        """Parse pointer move arguments (no clamping here)"""
        x_token = token_next(tokens, "pointer x")
        y_token = token_next(tokens, "pointer y")
        x = token_toInt(x_token, "pointer x", INT16_MIN, INT16_MAX)
        y = token_toInt(y_token, "pointer y", INT16_MIN, INT16_MAX)
        return PointerMove(x=x, y=y)

    @staticmethod
    def special_parse(tokens: Iterator[bytes]) -> Special:
        """Parse special key arguments"""
        token = token_next(tokens, "special key name")
        name = token_decode(token, "special key name")
        code = SpecialCode.name_lookup(name)
        if code is None:
            raise SoftDecodeError(f"unknown special key {name!r}")
        return Special(code=code)


class CommandBuilder:
    """Encodes typed commands into wire chunks"""

    @staticmethod
    def command_encode(command: Command) -> bytes:
        """
        Encode a command for sending

        Args:
            command: Command to encode

        Returns:
            Wire bytes for the command

        Raises:
            ValueError: If a key press character cannot be sent as one byte
        """
        if isinstance(command, KeyPress):
            encoded = command.char.encode("utf-8")
            if len(encoded) != 1 or encoded.isspace():
                raise ValueError(f"Cannot send {command.char!r} as a key press; use a special key")
            return CommandTag.KEY_PRESS.value + b" " + encoded
        if isinstance(command, MouseButton):
            return CommandTag.MOUSE_BUTTON.value + b" %d" % command.code.numeral_get()
        if isinstance(command, PointerMove):
            return CommandTag.POINTER_MOVE.value + b" %d %d" % (command.x, command.y)
        if isinstance(command, Special):
            return CommandTag.SPECIAL.value + b" " + command.code.value.encode("ascii")
        raise ValueError(f"Unsupported command: {command!r}")
