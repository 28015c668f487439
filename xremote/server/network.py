"""TCP listener and per-connection chunk reader for the xremote server"""

import logging
import socket
from typing import Optional

from xremote.common.settings import settings

logger = logging.getLogger(__name__)


class ConnectionClosedError(ConnectionError):
    """Peer closed the connection (zero-byte read)"""


class ClientConnection:
    """Represents the connected controller"""

    def __init__(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        """
        Initialize client connection

        Args:
            client_socket: Client socket
            address: Client address (host, port)
        """
        self.socket: socket.socket = client_socket
        self.address: tuple[str, int] = address

    def readTimeout_set(self, timeout: Optional[float]) -> None:
        """
        Set the timeout applied to reads and writes

        Args:
            timeout: Seconds, or None to block indefinitely
        """
        self.socket.settimeout(timeout)

    def chunk_read(self, max_size: int = settings.MAX_CHUNK_SIZE) -> bytes:
        """
        Read one chunk (a single recv) from the client

        Args:
            max_size: Maximum bytes to take in this read

        Returns:
            Bytes read, never empty

        Raises:
            ConnectionClosedError: If the client closed the connection
            ConnectionError: On timeout or socket error
        """
        try:
            data = self.socket.recv(max_size)
        except socket.timeout as e:
            raise ConnectionError(f"Read timed out: {e}") from e
        except OSError as e:
            raise ConnectionError(f"Socket error: {e}") from e

        if not data:
            raise ConnectionClosedError("Connection closed by client")
        return data

    def rejection_send(self, message: bytes = settings.REJECTION_MESSAGE) -> None:
        """
        Send the rejection notice to an unauthenticated client

        Args:
            message: Literal text to send

        Raises:
            ConnectionError: If the write fails or times out
        """
        try:
            self.socket.sendall(message)
        except OSError as e:
            raise ConnectionError(f"Failed to send rejection: {e}") from e

    def connection_shutdown(self) -> None:
        """Shut the socket down in both directions, waking a blocked read"""
        try:
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug(f"Shutdown of {self.address}: {e}")

    def connection_close(self) -> None:
        """Close connection to client"""
        try:
            self.socket.close()
        except OSError as e:
            logger.error(f"Error closing connection to {self.address}: {e}")


class ServerNetwork:
    """TCP server accepting one client connection at a time"""

    def __init__(self, host: str, port: int) -> None:
        """
        Initialize server network

        Args:
            host: Host address to bind to
            port: Port to listen on (0 picks a free port)
        """
        self.host: str = host
        self.port: int = port
        self.server_socket: Optional[socket.socket] = None
        self.is_running: bool = False

    def server_start(self) -> None:
        """
        Start TCP server and begin listening for connections

        Raises:
            OSError: If unable to bind to address
        """
        self.server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.server_socket.bind((self.host, self.port))
        self.server_socket.listen(1)
        self.port = self.server_socket.getsockname()[1]
        self.is_running = True

        logger.info(f"Server listening on {self.host}:{self.port}")

    def server_stop(self) -> None:
        """Stop server and close the listening socket"""
        self.is_running = False

        if self.server_socket:
            try:
                # Wakes a thread blocked in accept() on Linux
                self.server_socket.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                logger.debug(f"Listener shutdown: {e}")
            try:
                self.server_socket.close()
            except OSError as e:
                logger.error(f"Error closing server socket: {e}")
            finally:
                self.server_socket = None

        logger.info("Server stopped")

    def connection_accept(self) -> ClientConnection:
        """
        Block until a client connects

        Returns:
            Accepted client connection

        Raises:
            RuntimeError: If the server has not been started
            OSError: If accept fails (including after server_stop)
        """
        if not self.server_socket:
            raise RuntimeError("Server not started")

        client_socket, address = self.server_socket.accept()
        logger.info(f"Connection established: {address}")
        return ClientConnection(client_socket, address)
