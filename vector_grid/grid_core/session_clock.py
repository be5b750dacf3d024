"""
Session Clock
=============

Countdown timer on the session timeline. Expiry is reported through a
callback supplied by the owning session.
"""

from __future__ import annotations

from typing import Callable, Optional

from vector_grid.grid_core.scheduler import Timeline


class SessionClock:
    """
    Fixed-interval countdown.

    Invariant: 0 <= time_remaining <= time_budget.
    Stopping cancels the pending tick rather than ignoring it, so a
    restart always waits a full interval from the frozen value.
    """

    def __init__(
        self,
        timeline: Timeline,
        interval_ms: int,
        on_expired: Callable[[], None]
    ):
        self._timeline = timeline
        self._interval_ms = interval_ms
        self._on_expired = on_expired
        self._time_budget: int = 0
        self._time_remaining: int = 0
        self._handle: Optional[int] = None

    @property
    def time_budget(self) -> int:
        return self._time_budget

    @property
    def time_remaining(self) -> int:
        return self._time_remaining

    @property
    def running(self) -> bool:
        return self._handle is not None

    def reset(self, budget_ms: int) -> None:
        """Set a new full budget. Does not change running state."""
        if budget_ms < 0:
            raise ValueError(f"budget_ms must be >= 0, got {budget_ms}")
        self._time_budget = budget_ms
        self._time_remaining = budget_ms

    def start(self) -> None:
        if self._handle is None:
            self._handle = self._timeline.schedule(self._interval_ms, self._tick)

    def stop(self) -> None:
        if self._handle is not None:
            self._timeline.cancel(self._handle)
            self._handle = None

    def penalize(self, amount_ms: int) -> int:
        """
        Subtract time, floored at zero.

        Returns:
            Remaining time after the penalty.
        """
        self._time_remaining = max(0, self._time_remaining - amount_ms)
        return self._time_remaining

    def _tick(self) -> None:
        self._handle = None
        self._time_remaining = max(0, self._time_remaining - self._interval_ms)
        if self._time_remaining <= 0:
            self._on_expired()
            return
        self.start()
