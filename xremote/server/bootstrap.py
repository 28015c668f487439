"""Server bootstrap helpers for config, logging, credential and backend wiring."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

from xremote.common.config import Config, ConfigLoader
from xremote.common.settings import settings
from xremote.common.types import Credential, Screen
from xremote.input.backend import InputInjector
from xremote.input.factory import injectorBackend_create
from xremote.server.auth import credential_load

logger = logging.getLogger(__name__)


def configWithSettings_load(args: argparse.Namespace) -> Config:
    """
    Load configuration and initialize settings singleton.

    Args:
        args: Parsed server CLI args.

    Returns:
        Loaded config.
    """
    config_path: Path | None = Path(args.config) if args.config else None
    try:
        config: Config = ConfigLoader.configWithOverrides_load(
            file_path=config_path,
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
            display=getattr(args, "display", None),
            secret_file=getattr(args, "secret_file", None),
            backend=getattr(args, "backend", None),
        )
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Create a config.yml file or specify path with --config", file=sys.stderr)
        sys.exit(1)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)
    settings.initialize(config)
    return config


def loggingWithConfig_setup(
    args: argparse.Namespace,
    config: Config,
    logging_setup_func: Callable[[str, str, Optional[str]], None],
) -> None:
    """
    Setup logging from config and CLI override.

    Args:
        args: Parsed server args.
        config: Loaded config.
        logging_setup_func: Logging setup callback.
    """
    log_level: str = getattr(args, "log_level", None) or config.logging.level
    logging_setup_func(log_level, config.logging.format, config.logging.file)


def credentialFromConfig_load(config: Config) -> Credential:
    """
    Load the shared secret named by the config, exiting on failure.

    Args:
        config: Loaded config.

    Returns:
        Credential for the process lifetime.
    """
    secret_path: Path = Path(config.server.secret_file).expanduser()
    try:
        credential: Credential = credential_load(secret_path)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load secret: {e}")
        sys.exit(1)
    logger.info(f"Loaded secret from {secret_path}")
    return credential


def screenOverride_resolve(config: Config) -> Screen | None:
    """
    Resolve configured screen geometry override.

    Args:
        config: Loaded config.

    Returns:
        Override screen when both dimensions are configured, else None.
    """
    width: int | None = config.pointer.screen_width
    height: int | None = config.pointer.screen_height
    if width is None or height is None:
        if width is not None or height is not None:
            logger.warning("Ignoring partial screen override; set both screen_width and screen_height")
        return None
    return Screen(width=int(width), height=int(height))


def injectorWithConfig_create(config: Config) -> InputInjector:
    """
    Create and connect the input backend, exiting on failure.

    Args:
        config: Loaded config.

    Returns:
        Connected input injector.
    """
    try:
        injector: InputInjector = injectorBackend_create(
            backend_name=config.server.backend,
            display_name=config.server.display,
            screen_override=screenOverride_resolve(config),
        )
        injector.connection_establish()
    except Exception as e:
        logger.error(f"Failed to connect to {config.server.backend} display: {e}")
        sys.exit(1)
    return injector
