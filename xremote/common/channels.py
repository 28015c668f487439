"""
Thread-safe channels between the network context and the worker loops.

Two shapes are provided:

* `Channel` is an unbounded FIFO; sends never block the network read path.
* `LatestValueCell` is a single slot where a new value overwrites any
  unconsumed one ("latest wins"), used for pointer targets.

Either side may close a channel. A producer closes when it is going away so
the consumer can drain and stop; a consumer closes when its loop exits so the
next send fails loudly instead of queueing into the void.
"""

from __future__ import annotations

import queue
import threading
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

__all__ = [
    "Channel",
    "ChannelClosedError",
    "LatestValueCell",
]


class ChannelClosedError(Exception):
    """Raised when sending on a closed channel or receiving from a drained closed one."""


class Channel(Generic[T]):
    """Unbounded FIFO channel with close semantics."""

    def __init__(self, name: str) -> None:
        """
        Initialize channel.

        Args:
            name: Channel name used in errors and logs.
        """
        self.name: str = name
        self._queue: queue.SimpleQueue[T] = queue.SimpleQueue()
        self._closed: threading.Event = threading.Event()
        self._lock: threading.Lock = threading.Lock()

    def item_send(self, item: T) -> None:
        """
        Enqueue an item without blocking.

        Raises:
            ChannelClosedError: If the channel has been closed.
        """
        with self._lock:
            if self._closed.is_set():
                raise ChannelClosedError(f"{self.name} channel is closed")
            self._queue.put(item)

    def item_tryReceive(self) -> Optional[T]:
        """
        Dequeue the oldest item without blocking.

        Returns:
            Next item, or None when the channel is empty.

        Raises:
            ChannelClosedError: If the channel is closed and fully drained.
        """
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return self._drainedClosed_check()

    def item_receive(self, timeout: float) -> Optional[T]:
        """
        Dequeue the oldest item, waiting up to `timeout` seconds.

        Returns:
            Next item, or None when nothing arrived in time.

        Raises:
            ChannelClosedError: If the channel is closed and fully drained.
        """
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return self._drainedClosed_check()

    def channel_close(self) -> None:
        """Close the channel; pending items stay receivable."""
        with self._lock:
            self._closed.set()

    def _drainedClosed_check(self) -> Optional[T]:
        # Sends cannot follow a close, so a closed channel holds its last items
        if not self._closed.is_set():
            return None
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            raise ChannelClosedError(f"{self.name} channel is closed") from None

    def isClosed_check(self) -> bool:
        """Return True once the channel has been closed."""
        return self._closed.is_set()


class LatestValueCell(Generic[T]):
    """Single-slot cell where each put overwrites the unconsumed value."""

    def __init__(self, name: str) -> None:
        """
        Initialize empty cell.

        Args:
            name: Cell name used in errors and logs.
        """
        self.name: str = name
        self._condition: threading.Condition = threading.Condition()
        self._value: Optional[T] = None
        self._closed: bool = False

    def value_put(self, value: T) -> None:
        """
        Store value, replacing any value not yet taken.

        Raises:
            ChannelClosedError: If the cell has been closed.
        """
        with self._condition:
            if self._closed:
                raise ChannelClosedError(f"{self.name} cell is closed")
            self._value = value
            self._condition.notify_all()

    def value_tryTake(self) -> Optional[T]:
        """
        Take the pending value without blocking.

        Returns:
            Latest value, or None when nothing is pending.

        Raises:
            ChannelClosedError: If the cell is closed and empty.
        """
        with self._condition:
            return self._pending_take()

    def value_wait(self, timeout: float) -> Optional[T]:
        """
        Take the pending value, waiting up to `timeout` seconds for one.

        Returns:
            Latest value, or None when nothing arrived in time.

        Raises:
            ChannelClosedError: If the cell is closed and empty.
        """
        with self._condition:
            if self._value is None and not self._closed:
                self._condition.wait(timeout)
            return self._pending_take()

    def cell_close(self) -> None:
        """Close the cell and wake any waiter."""
        with self._condition:
            self._closed = True
            self._condition.notify_all()

    def isClosed_check(self) -> bool:
        """Return True once the cell has been closed."""
        with self._condition:
            return self._closed

    def _pending_take(self) -> Optional[T]:
        # caller holds the condition
        value: Optional[T] = self._value
        self._value = None
        if value is None and self._closed:
            raise ChannelClosedError(f"{self.name} cell is closed")
        return value
