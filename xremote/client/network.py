"""
TCP client transport for xremote.

This module owns connection setup, the authentication message, and command
writes for the bundled controller client. The protocol has no length prefix:
each command must arrive in its own server read, so writes are paced.
"""

from __future__ import annotations

import binascii
import logging
import os
import socket
import time

from xremote.common.settings import settings
from xremote.common.types import Command, Credential
from xremote.protocol.command import CommandBuilder
from xremote.server.auth import authMessage_build

logger = logging.getLogger(__name__)


class ClientNetwork:
    """TCP transport used by the xremote controller client."""

    def __init__(
        self,
        host: str,
        port: int,
        credential: Credential,
        send_interval: float = settings.CLIENT_SEND_INTERVAL_SEC,
        timeout: float = 5.0,
    ) -> None:
        """
        Initialize client transport configuration.

        Args:
            host:
                Server host.
            port:
                Server port.
            credential:
                Shared secret used to sign the authentication message.
            send_interval:
                Pause after each write in seconds.
            timeout:
                Connect and write timeout in seconds.
        """
        self.host: str = host
        self.port: int = port
        self.send_interval: float = send_interval
        self.timeout: float = timeout
        self._credential: Credential = credential
        self.socket: socket.socket | None = None

    def connection_establish(self) -> None:
        """
        Connect and authenticate.

        Raises:
            ConnectionError:
                Raised when the connection or authentication write fails.
        """
        try:
            self.socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as exc:
            raise ConnectionError(f"Failed to connect to {self.host}:{self.port}: {exc}") from exc
        logger.info("Connected to server %s:%s", self.host, self.port)
        self.authMessage_send()

    def authMessage_send(self) -> None:
        """Send the signed authentication message with a fresh random payload."""
        data: bytes = binascii.hexlify(os.urandom(settings.CLIENT_AUTH_DATA_BYTES))
        self.raw_send(authMessage_build(self._credential, data))

    def command_send(self, command: Command) -> None:
        """
        Encode and send one command.

        Args:
            command:
                Command to send.
        """
        self.raw_send(CommandBuilder.command_encode(command))

    def raw_send(self, payload: bytes) -> None:
        """
        Write one message and pause so it is framed on its own.

        Args:
            payload:
                Bytes to write (at most one server read).

        Raises:
            ValueError:
                If the payload exceeds the server read size.
            ConnectionError:
                If not connected or the write fails.
        """
        if len(payload) > settings.MAX_CHUNK_SIZE:
            raise ValueError(
                f"Message of {len(payload)} bytes exceeds {settings.MAX_CHUNK_SIZE}-byte frame"
            )
        if self.socket is None:
            raise ConnectionError("Not connected")
        try:
            self.socket.sendall(payload)
        except OSError as exc:
            raise ConnectionError(f"Send failed: {exc}") from exc
        logger.debug("Sent %r", payload)
        if self.send_interval > 0:
            time.sleep(self.send_interval)

    def rejection_check(self, wait: float = 0.2) -> bool:
        """
        Check whether the server rejected authentication.

        The server stays silent on success, so this waits briefly for a
        rejection notice or a close.

        Args:
            wait:
                Seconds to wait for a reply.

        Returns:
            True if the server rejected or closed the connection.
        """
        if self.socket is None:
            raise ConnectionError("Not connected")
        self.socket.settimeout(wait)
        try:
            reply: bytes = self.socket.recv(settings.MAX_CHUNK_SIZE)
        except socket.timeout:
            return False
        except ConnectionResetError:
            return True
        finally:
            self.socket.settimeout(self.timeout)
        if reply:
            logger.warning("Server replied: %r", reply)
        return True

    def connection_close(self) -> None:
        """Close the connection."""
        if self.socket is not None:
            try:
                self.socket.close()
            finally:
                self.socket = None
