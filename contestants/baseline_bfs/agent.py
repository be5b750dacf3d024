"""
Baseline BFS Agent - Walks the shortest open path to the target.

This serves as:
1. A working example of how to read observations and return actions
2. A baseline benchmark for agents to compare against
3. A verification that generated boards are solvable in play

Strategy:
- Read the cells grid (walls and decayed tiles are blocked)
- Breadth-first search from the player to the target
- Take the first step of that path
- Fall back to a random move when no path exists
"""

import logging
from typing import Any, Dict, Optional

import numpy as np

from vector_grid.grid_core.grid import ACTION_DIRECTIONS, GridCoordinate
from vector_grid.grid_core.pathfinding import shortest_path
from vector_grid.grid_core.state_snapshot import CELL_DECAYED, CELL_WALL

logger = logging.getLogger(__name__)


class GridAgent:
    """
    Shortest-path agent.

    Replans every step, so it never steps onto a decayed tile and
    adapts immediately when a new board appears.
    """

    def __init__(self, debug: bool = False):
        """
        Initialize the agent.

        Args:
            debug: If True, log decisions.
        """
        self.debug = debug
        self._rng = np.random.default_rng()

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset agent state for a new episode.

        Args:
            seed: Optional random seed for the fallback moves.
        """
        if seed is not None:
            self._rng = np.random.default_rng(seed)

    def act(self, observation: Dict[str, Any]) -> int:
        """
        Choose a direction.

        Args:
            observation: Dict of numpy arrays from the environment.

        Returns:
            Action index into (up, down, left, right).
        """
        size = int(observation["grid_size"])
        player = int(observation["player_index"])
        target = int(observation["target_index"])

        cells = observation["cells"][:size, :size]
        blocked_mask = (cells == CELL_WALL) | (cells == CELL_DECAYED)
        blocked = set(int(i) for i in np.flatnonzero(blocked_mask))

        path = shortest_path(size, player, target, blocked)
        if path is None or len(path) < 2:
            action = int(self._rng.integers(len(ACTION_DIRECTIONS)))
            if self.debug:
                logger.info("[BFS Agent] No path from %d to %d, random action %d", player, target, action)
            return action

        here = GridCoordinate.from_index(player, size)
        step = GridCoordinate.from_index(path[1], size)
        delta = (step.row - here.row, step.col - here.col)
        for action, direction in enumerate(ACTION_DIRECTIONS):
            if direction.delta == delta:
                if self.debug:
                    logger.info(
                        "[BFS Agent] %d -> %d via %s, %d steps left",
                        player, target, direction.name, len(path) - 1
                    )
                return action

        raise RuntimeError(f"Path step {player} -> {path[1]} is not a unit move")


# Convenience function to create agent (used by evaluation harness)
def create_agent(**kwargs) -> GridAgent:
    """Factory function to create an agent instance."""
    return GridAgent(**kwargs)
