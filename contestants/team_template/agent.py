"""
Team Template Agent
===================

Copy this directory and replace the strategy. The harness accepts either:
1. A `GridAgent` class with `act(obs) -> int` (and optionally `reset(seed)`)
2. A module-level `act(obs) -> int` function

Actions: 0 up, 1 down, 2 left, 3 right.

Useful observation keys (see vector_grid/grid_core/state_snapshot.py):
    player_row, player_col, target_row, target_col   board coordinates
    grid_size                                        live board side length
    cells                                            (5, 5) int8 codes, -1 padding
    time_remaining, time_budget                      milliseconds
"""

from __future__ import annotations

from typing import Dict, Optional

import numpy as np

UP, DOWN, LEFT, RIGHT = range(4)


class GridAgent:
    """
    Greedy starter: step along the larger axis gap toward the target.

    It ignores walls, so it stalls behind them. Replace with your own logic.
    """

    def __init__(self):
        self.rng = np.random.default_rng()

    def reset(self, seed: Optional[int] = None) -> None:
        """Called before each episode."""
        self.rng = np.random.default_rng(seed)

    def act(self, obs: Dict[str, np.ndarray]) -> int:
        d_row = int(obs["target_row"]) - int(obs["player_row"])
        d_col = int(obs["target_col"]) - int(obs["player_col"])

        if d_row == 0 and d_col == 0:
            return int(self.rng.integers(4))
        if abs(d_row) >= abs(d_col):
            return DOWN if d_row > 0 else UP
        return RIGHT if d_col > 0 else LEFT


def act(obs: Dict[str, np.ndarray]) -> int:
    """Function-style alternative: a random direction."""
    return int(np.random.default_rng().integers(4))
