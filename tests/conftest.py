"""Pytest configuration and shared fixtures for xremote tests

This module provides common fixtures and test utilities used across
unit and integration tests.
"""

import logging
import threading
from typing import Generator

import pytest

from xremote.common.config import Config, ConfigLoader
from xremote.common.settings import settings
from xremote.common.types import Credential, Position, Screen


class RecordingInjector:
    """In-memory input backend recording every call in order"""

    def __init__(self, screen: Screen = Screen(width=100, height=100)) -> None:
        self.screen = screen
        self.calls: list[tuple[str, object]] = []
        self.warps: list[Position] = []
        self._lock = threading.Lock()

    def connection_establish(self) -> None:
        self.calls.append(("connect", None))

    def connection_close(self) -> None:
        self.calls.append(("close", None))

    def screenGeometry_get(self) -> Screen:
        return self.screen

    def pointer_warp(self, position: Position) -> None:
        with self._lock:
            self.warps.append(position)

    def key_press(self, keycode: int) -> None:
        with self._lock:
            self.calls.append(("key_press", keycode))

    def key_release(self, keycode: int) -> None:
        with self._lock:
            self.calls.append(("key_release", keycode))

    def mouseButton_press(self, button: int) -> None:
        with self._lock:
            self.calls.append(("button_press", button))

    def mouseButton_release(self, button: int) -> None:
        with self._lock:
            self.calls.append(("button_release", button))


@pytest.fixture
def injector() -> RecordingInjector:
    """Recording backend with a 100x100 screen (pixels == percent)"""
    return RecordingInjector()


@pytest.fixture
def credential() -> Credential:
    """Shared secret used by auth tests"""
    return Credential(secret=b"AAAAAAAAAIAMSCREAMING")


@pytest.fixture
def default_config() -> Config:
    """Configuration with every default applied"""
    return ConfigLoader.config_parse({})


@pytest.fixture
def reset_settings() -> Generator[None, None, None]:
    """Reset settings singleton between tests

    This fixture ensures each test gets a fresh Settings instance.
    """
    settings._initialized = False
    settings._config = None
    yield
    settings._initialized = False
    settings._config = None


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Setup logging for tests"""
    caplog.set_level(logging.DEBUG)


# Markers for test organization
def pytest_configure(config) -> None:
    """Register custom pytest markers used by this test suite."""
    config.addinivalue_line("markers", "requires_x11: mark test as requiring X11 display")
