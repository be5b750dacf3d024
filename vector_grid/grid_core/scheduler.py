"""
Timeline
========

Single-owner cooperative scheduler on a millisecond timeline.

Nothing runs on its own: callbacks fire only inside advance(), in order of
due time and then scheduling order. This is what the session clock, the
motion lock and the wall-hit flash run on.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Set, Tuple

Callback = Callable[[], None]


class Timeline:
    """Deterministic scheduled-callback queue."""

    def __init__(self):
        self._now: int = 0
        self._queue: List[Tuple[int, int, int, Callback]] = []
        self._handles = itertools.count(1)
        self._tie_breaker = itertools.count()
        self._cancelled: Set[int] = set()
        self._pending: Set[int] = set()

    @property
    def now(self) -> int:
        """Current timeline position in milliseconds."""
        return self._now

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def schedule(self, delay_ms: int, callback: Callback) -> int:
        """
        Run callback delay_ms after the current position.

        Returns:
            Handle usable with cancel().
        """
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        handle = next(self._handles)
        heapq.heappush(
            self._queue,
            (self._now + delay_ms, next(self._tie_breaker), handle, callback)
        )
        self._pending.add(handle)
        return handle

    def cancel(self, handle: int) -> bool:
        """Cancel a scheduled callback. Returns False if it already ran."""
        if handle not in self._pending:
            return False
        self._pending.discard(handle)
        self._cancelled.add(handle)
        return True

    def is_pending(self, handle: int) -> bool:
        return handle in self._pending

    def advance(self, delta_ms: int) -> int:
        """
        Move the timeline forward, firing every callback that falls due.

        Callbacks may schedule more work; anything due within the window
        runs in the same call.

        Returns:
            Number of callbacks fired.
        """
        if delta_ms < 0:
            raise ValueError(f"delta_ms must be >= 0, got {delta_ms}")

        end = self._now + delta_ms
        fired = 0
        while self._queue and self._queue[0][0] <= end:
            due, _, handle, callback = heapq.heappop(self._queue)
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            self._pending.discard(handle)
            self._now = due
            callback()
            fired += 1
        self._now = end
        return fired

    def clear(self) -> None:
        """Drop every pending callback without running it."""
        self._queue.clear()
        self._cancelled.clear()
        self._pending.clear()
