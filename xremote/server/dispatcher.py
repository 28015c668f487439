"""
Command routing from the network context to the worker loops.

Each decoded command goes to exactly one outbound channel, chosen by its
variant. Sends never block; pointer targets overwrite a single-slot cell while
key, button and special commands queue in FIFO order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from xremote.common.channels import Channel, ChannelClosedError, LatestValueCell
from xremote.common.types import (
    Command,
    KeyPress,
    MouseButton,
    MouseCode,
    PointerMove,
    Position,
    Special,
    SpecialCode,
)
from xremote.protocol.command import CommandParser, HardDecodeError, SoftDecodeError

logger = logging.getLogger(__name__)

__all__ = [
    "CommandChannels",
    "CommandDispatcher",
    "DispatchError",
]


class DispatchError(RuntimeError):
    """A worker loop is gone; commands can no longer be delivered."""


@dataclass(frozen=True)
class CommandChannels:
    """The four outbound channels, shared between dispatcher and workers."""

    pointer: LatestValueCell[Position]
    keys: Channel[str]
    buttons: Channel[MouseCode]
    specials: Channel[SpecialCode]

    @staticmethod
    def channels_create() -> "CommandChannels":
        """
        Create a fresh, open set of channels.

        Returns:
            New channel set.
        """
        return CommandChannels(
            pointer=LatestValueCell("pointer"),
            keys=Channel("key"),
            buttons=Channel("button"),
            specials=Channel("special"),
        )

    def all_close(self) -> None:
        """Close every channel."""
        self.pointer.cell_close()
        self.keys.channel_close()
        self.buttons.channel_close()
        self.specials.channel_close()


class CommandDispatcher:
    """Routes decoded commands onto their channels."""

    def __init__(self, channels: CommandChannels) -> None:
        """
        Initialize dispatcher.

        Args:
            channels: Outbound channels to the worker loops.
        """
        self._channels: CommandChannels = channels

    def command_dispatch(self, command: Command) -> None:
        """
        Send a command to the channel matching its variant.

        Args:
            command: Decoded command.

        Raises:
            DispatchError: If the consuming loop has exited.
        """
        try:
            if isinstance(command, PointerMove):
                self._channels.pointer.value_put(command.position_get())
            elif isinstance(command, KeyPress):
                self._channels.keys.item_send(command.char)
            elif isinstance(command, MouseButton):
                self._channels.buttons.item_send(command.code)
            elif isinstance(command, Special):
                self._channels.specials.item_send(command.code)
            else:
                raise TypeError(f"Unsupported command: {command!r}")
        except ChannelClosedError as e:
            raise DispatchError(f"Cannot dispatch {command!r}: {e}") from e

    def chunk_handle(self, chunk: bytes) -> Optional[Command]:
        """
        Decode one chunk and dispatch the resulting command.

        Decode failures are logged and skipped; the session keeps going.

        Args:
            chunk: Raw bytes from one read.

        Returns:
            Dispatched command, or None when the chunk did not decode.

        Raises:
            DispatchError: If the consuming loop has exited.
        """
        try:
            command: Command = CommandParser.command_parse(chunk)
        except SoftDecodeError as e:
            logger.warning("Invalid command %r: %s", chunk, e)
            return None
        except HardDecodeError as e:
            logger.info("Unrecognized command %r: %s", chunk, e)
            return None

        logger.debug("Dispatching %r", command)
        self.command_dispatch(command)
        return command
