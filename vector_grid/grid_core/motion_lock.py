"""
Motion Lock
===========

Debounce window that lets one move resolve at a time and holds a few
rapid intents for in-order replay.
"""

from __future__ import annotations

from collections import deque
from typing import Callable, Deque, Generic, List, Optional, TypeVar

from vector_grid.grid_core.scheduler import Timeline

T = TypeVar("T")


class MotionLock(Generic[T]):
    """
    Scheduled-callback debounce with a bounded FIFO buffer.

    While the lock window is open, new intents are buffered up to
    capacity and further overflow is dropped. When the window closes the
    oldest buffered intent is handed to on_release, which is expected to
    resolve it through the normal path (and so reopen the lock).
    """

    def __init__(
        self,
        timeline: Timeline,
        window_ms: int,
        capacity: int,
        on_release: Callable[[T], None]
    ):
        self._timeline = timeline
        self._window_ms = window_ms
        self._capacity = capacity
        self._on_release = on_release
        self._buffer: Deque[T] = deque()
        self._handle: Optional[int] = None
        self._dropped: int = 0

    @property
    def locked(self) -> bool:
        return self._handle is not None

    @property
    def buffered(self) -> List[T]:
        return list(self._buffer)

    @property
    def dropped(self) -> int:
        """Intents discarded because the buffer was full."""
        return self._dropped

    def try_acquire(self, intent: T) -> bool:
        """
        Open the lock for an intent.

        Returns:
            True if the caller should resolve the intent now, False if it
            was buffered or dropped.
        """
        if self._handle is not None:
            if len(self._buffer) < self._capacity:
                self._buffer.append(intent)
            else:
                self._dropped += 1
            return False

        self._handle = self._timeline.schedule(self._window_ms, self._release)
        return True

    def _release(self) -> None:
        self._handle = None
        if self._buffer:
            self._on_release(self._buffer.popleft())

    def clear(self) -> None:
        """Cancel the window and forget buffered intents."""
        if self._handle is not None:
            self._timeline.cancel(self._handle)
            self._handle = None
        self._buffer.clear()
