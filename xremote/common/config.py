"""Configuration file loading and management"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class ServerConfig:
    """Server configuration settings"""
    host: str
    port: int
    display: Optional[str]
    secret_file: str
    backend: str


@dataclass
class AuthConfig:
    """Connection authentication settings"""
    timeout_seconds: float
    min_data_length: int


@dataclass
class PointerConfig:
    """Pointer interpolation settings"""
    step: int
    tick_ms: float
    screen_width: Optional[int]   # Overrides queried geometry when both are set
    screen_height: Optional[int]


@dataclass
class KeyboardConfig:
    """Key/button actuation settings"""
    settle_ms: float


@dataclass
class LoggingConfig:
    """Logging configuration settings"""
    level: str
    file: Optional[str]
    format: str


@dataclass
class Config:
    """Complete application configuration"""
    server: ServerConfig
    auth: AuthConfig
    pointer: PointerConfig
    keyboard: KeyboardConfig
    logging: LoggingConfig


class ConfigLoader:
    """Loads and parses configuration from YAML files"""

    DEFAULT_CONFIG_PATHS = [
        "config.yml",
        "~/.config/xremote/config.yml",
        "/etc/xremote/config.yml",
    ]

    @staticmethod
    def configFile_find() -> Optional[Path]:
        """
        Find configuration file in standard locations

        Returns:
            Path to config file, or None if not found
        """
        for config_path in ConfigLoader.DEFAULT_CONFIG_PATHS:
            path = Path(config_path).expanduser().resolve()
            if path.exists() and path.is_file():
                return path
        return None

    @staticmethod
    def yaml_load(file_path: Path) -> Dict[str, Any]:
        """
        Load YAML configuration file

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If file does not exist
            yaml.YAMLError: If file is not valid YAML
        """
        with open(file_path, "r") as f:
            data = yaml.safe_load(f)

        # An empty file is a valid "all defaults" config
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {file_path} must contain a YAML dictionary")

        return data

    @staticmethod
    def section_get(data: Dict[str, Any], name: str) -> Dict[str, Any]:
        """
        Fetch an optional config section

        Args:
            data: Raw configuration dictionary
            name: Section key

        Returns:
            Section dictionary (empty when absent)

        Raises:
            ValueError: If the section is present but not a mapping
        """
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ValueError(f"Config section '{name}' must be a mapping")
        return section

    @staticmethod
    def config_parse(data: Dict[str, Any]) -> Config:
        """
        Parse configuration dictionary into Config object

        Missing keys fall back to built-in defaults.

        Args:
            data: Raw configuration dictionary

        Returns:
            Parsed Config object
        """
        server_data = ConfigLoader.section_get(data, "server")
        server = ServerConfig(
            host=server_data.get("host", "0.0.0.0"),
            port=int(server_data.get("port", 9232)),
            display=server_data.get("display"),
            secret_file=server_data.get("secret_file", "secret.txt"),
            backend=server_data.get("backend", "x11"),
        )

        auth_data = ConfigLoader.section_get(data, "auth")
        auth = AuthConfig(
            timeout_seconds=float(auth_data.get("timeout_seconds", 5.0)),
            min_data_length=int(auth_data.get("min_data_length", 10)),
        )

        pointer_data = ConfigLoader.section_get(data, "pointer")
        pointer = PointerConfig(
            step=int(pointer_data.get("step", 1)),
            tick_ms=float(pointer_data.get("tick_ms", 2)),
            screen_width=pointer_data.get("screen_width"),
            screen_height=pointer_data.get("screen_height"),
        )
        if pointer.step < 1:
            raise ValueError(f"pointer.step must be >= 1, got {pointer.step}")

        keyboard_data = ConfigLoader.section_get(data, "keyboard")
        keyboard = KeyboardConfig(
            settle_ms=float(keyboard_data.get("settle_ms", 50)),
        )

        logging_data = ConfigLoader.section_get(data, "logging")
        logging = LoggingConfig(
            level=logging_data.get("level", "INFO"),
            file=logging_data.get("file"),
            format=logging_data.get("format", DEFAULT_LOG_FORMAT),
        )

        return Config(
            server=server,
            auth=auth,
            pointer=pointer,
            keyboard=keyboard,
            logging=logging,
        )

    @staticmethod
    def config_load(file_path: Optional[Path] = None) -> Config:
        """
        Load configuration from file

        Args:
            file_path: Optional path to config file. If None, searches standard
                locations and falls back to defaults when nothing is found.

        Returns:
            Parsed Config object

        Raises:
            FileNotFoundError: If an explicit config file does not exist
            ValueError: If config file is invalid
        """
        if file_path is None:
            file_path = ConfigLoader.configFile_find()
            if file_path is None:
                return ConfigLoader.config_parse({})

        data = ConfigLoader.yaml_load(file_path)
        return ConfigLoader.config_parse(data)

    @staticmethod
    def configWithOverrides_load(
        file_path: Optional[Path] = None,
        **overrides: Any
    ) -> Config:
        """
        Load configuration and apply command-line overrides

        Args:
            file_path: Optional path to config file
            **overrides: Key-value pairs to override config values

        Returns:
            Config object with overrides applied

        Example:
            config = ConfigLoader.configWithOverrides_load(
                host="127.0.0.1",
                port=9232
            )
        """
        config = ConfigLoader.config_load(file_path)

        if overrides.get("host") is not None:
            config.server.host = overrides["host"]
        if overrides.get("port") is not None:
            config.server.port = overrides["port"]
        if overrides.get("display") is not None:
            config.server.display = overrides["display"]
        if overrides.get("secret_file") is not None:
            config.server.secret_file = overrides["secret_file"]
        if overrides.get("backend") is not None:
            config.server.backend = overrides["backend"]

        return config
