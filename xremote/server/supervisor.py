"""
Connection supervision for the xremote server.

Connections are served strictly one at a time: authenticate, then read and
dispatch commands until the peer goes away. Transport and authentication
problems end only the current connection; a `DispatchError` means a worker
loop died and is propagated to stop the process.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from xremote.common.config import AuthConfig
from xremote.common.settings import settings
from xremote.common.types import AuthAttempt, Credential
from xremote.server.auth import AuthError, AuthTooShortError, authMessage_parse, hash_verify
from xremote.server.dispatcher import CommandDispatcher
from xremote.server.network import ClientConnection, ConnectionClosedError, ServerNetwork

logger = logging.getLogger(__name__)

__all__ = ["ConnectionSupervisor"]


class ConnectionSupervisor:
    """Owns the listener and sequences auth, framing, decoding and dispatch."""

    def __init__(
        self,
        network: ServerNetwork,
        credential: Credential,
        dispatcher: CommandDispatcher,
        auth_config: AuthConfig,
    ) -> None:
        """
        Initialize supervisor.

        Args:
            network: Listener (not yet started).
            credential: Shared secret for authentication.
            dispatcher: Command dispatcher feeding the worker loops.
            auth_config: Authentication timeout and minimum payload length.
        """
        self._network: ServerNetwork = network
        self._credential: Credential = credential
        self._dispatcher: CommandDispatcher = dispatcher
        self._auth_timeout: float = auth_config.timeout_seconds
        self._min_data_length: int = auth_config.min_data_length
        self._active_connection: Optional[ClientConnection] = None
        self._active_lock: threading.Lock = threading.Lock()
        self._stopped: bool = False

    def serve_forever(self) -> None:
        """
        Accept and serve connections until the listener is stopped.

        Raises:
            DispatchError: If a worker loop has exited.
        """
        if not self._network.is_running:
            self._network.server_start()

        while self._network.is_running:
            try:
                connection: ClientConnection = self._network.connection_accept()
            except OSError as e:
                if not self._network.is_running:
                    break
                logger.error(f"Connection failure: {e}")
                continue
            self.connection_serve(connection)

    def connection_serve(self, connection: ClientConnection) -> None:
        """
        Serve one connection to completion, always closing it.

        Args:
            connection: Accepted client connection.

        Raises:
            DispatchError: If a worker loop has exited.
        """
        self._activeConnection_set(connection)
        try:
            if self.connection_authorize(connection):
                logger.info(f"Authorized connection from {connection.address}")
                connection.readTimeout_set(None)
                self.commands_read(connection)
        finally:
            self._activeConnection_set(None)
            connection.connection_close()
            logger.info(f"Finished connection from {connection.address}")

    def connection_authorize(self, connection: ClientConnection) -> bool:
        """
        Read and check the authentication message.

        A failed check is answered with the rejection notice.

        Args:
            connection: Freshly accepted connection.

        Returns:
            True when the peer proved knowledge of the secret.
        """
        connection.readTimeout_set(self._auth_timeout)
        try:
            chunk: bytes = connection.chunk_read()
        except ConnectionError as e:
            logger.warning(f"Authentication read failed from {connection.address}: {e}")
            return False

        reason: Optional[str] = None
        try:
            if self.attempt_verify(authMessage_parse(chunk)):
                return True
            reason = "tag mismatch"
        except AuthError as e:
            reason = str(e)

        logger.warning(f"Unauthorized connection from {connection.address}: {reason}")
        try:
            connection.rejection_send(settings.REJECTION_MESSAGE)
        except ConnectionError as e:
            logger.warning(f"Could not notify {connection.address} of rejection: {e}")
        return False

    def attempt_verify(self, attempt: AuthAttempt) -> bool:
        """
        Check an authentication attempt against the credential.

        Args:
            attempt: Parsed authentication message.

        Returns:
            True iff the tag is valid for the data.

        Raises:
            AuthError: If data or tag is missing or the data is too short.
        """
        # Empty data is left for hash_verify to report as missing
        if attempt.data and len(attempt.data) < self._min_data_length:
            raise AuthTooShortError(
                f"Authentication data is {len(attempt.data)} bytes, "
                f"need at least {self._min_data_length}"
            )
        return hash_verify(self._credential, attempt.data, attempt.tag)

    def commands_read(self, connection: ClientConnection) -> None:
        """
        Read chunks and dispatch commands until the connection ends.

        Args:
            connection: Authenticated connection.

        Raises:
            DispatchError: If a worker loop has exited.
        """
        while True:
            try:
                chunk: bytes = connection.chunk_read()
            except ConnectionClosedError:
                logger.info(f"Connection gone: {connection.address}")
                return
            except ConnectionError as e:
                logger.warning(f"Read error from {connection.address}: {e}")
                return
            self._dispatcher.chunk_handle(chunk)

    def serve_stop(self) -> None:
        """Stop accepting connections and end the session being served."""
        self._network.server_stop()
        with self._active_lock:
            self._stopped = True
            if self._active_connection is not None:
                logger.info(f"Ending session with {self._active_connection.address}")
                self._active_connection.connection_shutdown()

    def _activeConnection_set(self, connection: Optional[ClientConnection]) -> None:
        with self._active_lock:
            self._active_connection = connection
            if connection is not None and self._stopped:
                # Stopped between accept and serve
                connection.connection_shutdown()
