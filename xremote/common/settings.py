"""Application settings singleton - single source of truth for configuration

This module provides a singleton Settings class that consolidates:
1. Protocol-level constants (must match between server/client)
2. Runtime configuration from config.yml

Usage:
    from xremote.common.settings import settings

    # Initialize once at startup with loaded config
    config = ConfigLoader.config_load()
    settings.initialize(config)

    # Use anywhere in the application
    chunk = connection.chunk_read(settings.MAX_CHUNK_SIZE)
"""

from typing import Optional

from xremote.common.config import Config


class Settings:
    """Singleton settings manager combining config.yml and protocol constants"""

    _instance: Optional["Settings"] = None

    def __new__(cls) -> "Settings":
        """Ensure only one Settings instance exists"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize settings singleton (only runs once)"""
        if hasattr(self, "_initialized"):
            return
        self._initialized = True
        self._config: Optional[Config] = None

    def initialize(self, config: Config) -> None:
        """
        Initialize with loaded configuration

        Args:
            config: Loaded configuration object
        """
        self._config = config

    # =========================================================================
    # Protocol Constants
    # =========================================================================

    MAX_CHUNK_SIZE: int = 100
    """Maximum bytes taken by one read() off the connection

    Messages are framed by read boundaries, so this is also the largest
    command (or authentication message) the server will consider.
    """

    REJECTION_MESSAGE: bytes = b"Not OK"
    """Literal reply sent to a peer that fails authentication"""

    # =========================================================================
    # Client Constants
    # =========================================================================

    CLIENT_AUTH_DATA_BYTES: int = 16
    """Random bytes the bundled client hex-encodes as its auth payload"""

    CLIENT_SEND_INTERVAL_SEC: float = 0.05
    """Pause between client writes so each lands in its own server read"""

    # =========================================================================
    # Runtime Configuration Access
    # =========================================================================

    @property
    def config(self) -> Config:
        """Get loaded configuration object"""
        if self._config is None:
            raise RuntimeError("Settings not initialized. Call settings.initialize(config) first.")
        return self._config


# Global singleton instance
settings = Settings()
"""Global settings singleton instance

Import this anywhere in the application:
    from xremote.common.settings import settings
"""
