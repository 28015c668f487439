"""Backend factory functions."""

from __future__ import annotations

from typing import Optional

from xremote.common.types import Screen
from xremote.input.backend import InputInjector


def injectorBackend_create(
    backend_name: str,
    display_name: Optional[str],
    screen_override: Optional[Screen] = None,
) -> InputInjector:
    """
    Create the input injector for the server.

    Args:
        backend_name: Backend identifier (currently only "x11")
        display_name: Display name (backend-specific)
        screen_override: Optional geometry replacing the queried screen size

    Returns:
        Unconnected input injector
    """
    backend = backend_name.lower()

    if backend == "x11":
        from xremote.x11.display import DisplayManager
        from xremote.x11.injector import X11InputInjector

        return X11InputInjector(
            display_manager=DisplayManager(display_name=display_name),
            screen_override=screen_override,
        )

    raise ValueError(f"Unsupported backend '{backend_name}'. Supported: x11.")
