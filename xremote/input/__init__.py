"""Backend abstraction layer for input injection."""

from xremote.input.backend import InputInjector
from xremote.input.factory import injectorBackend_create

__all__ = [
    "InputInjector",
    "injectorBackend_create",
]
