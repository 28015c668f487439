"""xremote controller client entry point"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from xremote.common.types import Command, KeyPress, Special, SpecialCode
from xremote.client.network import ClientNetwork
from xremote.protocol.command import CommandBuilder, CommandParser, DecodeError
from xremote.server.auth import credential_load
from xremote.server.bootstrap import configWithSettings_load, loggingWithConfig_setup
from xremote.server.server_logging import logging_setup

logger = logging.getLogger(__name__)

_SPECIAL_BY_CHAR: dict[str, SpecialCode] = {
    " ": SpecialCode.SPACE,
    "\t": SpecialCode.TAB,
    "\n": SpecialCode.RETURN,
}


def serverAddress_parse(address: str) -> tuple[str, int]:
    """
    Split HOST:PORT

    Args:
        address: Address string

    Returns:
        Host and port

    Raises:
        ValueError: If the address is malformed
    """
    host, sep, port_text = address.rpartition(":")
    if not sep or not host or not port_text.isdigit():
        raise ValueError(f"Expected HOST:PORT, got '{address}'")
    return host, int(port_text)


def textCommands_build(text: str) -> list[Command]:
    """
    Turn text into key press commands

    Whitespace becomes the matching special key since the wire format cannot
    carry it as a character.

    Args:
        text: Text to type

    Returns:
        Commands in typing order
    """
    commands: list[Command] = []
    for char in text:
        if char in _SPECIAL_BY_CHAR:
            commands.append(Special(code=_SPECIAL_BY_CHAR[char]))
        else:
            commands.append(KeyPress(char=char))
    return commands


def sendCommands_parse(raw_commands: list[str]) -> list[Command]:
    """
    Validate wire-form commands given on the command line

    Args:
        raw_commands: Strings such as "m 50 50"

    Returns:
        Parsed commands

    Raises:
        ValueError: If any command does not parse
    """
    commands: list[Command] = []
    for raw in raw_commands:
        try:
            commands.append(CommandParser.command_parse(raw.encode("utf-8")))
        except DecodeError as e:
            raise ValueError(f"Invalid command '{raw}': {e}") from e
    return commands


def commandPayloads_encode(commands: list[Command]) -> list[bytes]:
    """
    Encode every command up front so nothing is sent when one cannot be

    Args:
        commands: Commands in sending order

    Returns:
        Wire chunks in the same order

    Raises:
        ValueError: If any command has no wire form
    """
    return [CommandBuilder.command_encode(command) for command in commands]


def client_run(args: argparse.Namespace) -> None:
    """
    Connect, authenticate and send the requested commands

    Args:
        args: Parsed command line arguments
    """
    config = configWithSettings_load(args)
    loggingWithConfig_setup(args, config, logging_setup)

    try:
        host, port = serverAddress_parse(args.server)
        commands: list[Command] = sendCommands_parse(args.send or [])
        if args.type:
            commands.extend(textCommands_build(args.type))
        payloads: list[bytes] = commandPayloads_encode(commands)
        credential = credential_load(Path(config.server.secret_file).expanduser())
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    network = ClientNetwork(host=host, port=port, credential=credential, send_interval=args.interval)
    try:
        network.connection_establish()
        if network.rejection_check():
            logger.error("Server rejected authentication")
            sys.exit(1)
        for payload in payloads:
            network.raw_send(payload)
        logger.info(f"Sent {len(payloads)} command(s) to {host}:{port}")
    finally:
        network.connection_close()
