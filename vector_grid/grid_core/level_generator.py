"""
Level Generator
===============

Produces a target cell and wall set for a grid, using the reachability
oracle to guarantee the board is solvable.

Two strategies:
- Scatter: a random count of walls sprinkled over the free cells.
- Corridor: a random path from player to target is kept clear and the
  remaining cells are filled with walls at a random density.

Generation is a pure function of (grid_size, player_index, level, rng_state).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from vector_grid.grid_core.config_loader import GameConfig, get_config
from vector_grid.grid_core.difficulty import DifficultyParams, curve
from vector_grid.grid_core.grid import check_index, manhattan
from vector_grid.grid_core.pathfinding import random_simple_path, reachable
from vector_grid.grid_core.rng import LevelRng, RngState

logger = logging.getLogger(__name__)


class Strategy(Enum):
    SCATTER = "scatter"
    CORRIDOR = "corridor"


@dataclass(frozen=True)
class Board:
    """A generated level: grid size, impassable cells and target."""
    size: int
    walls: FrozenSet[int]
    target: int

    def is_wall(self, index: int) -> bool:
        return index in self.walls


@dataclass(frozen=True)
class GenerationResult:
    """Board plus generation metadata."""
    board: Board
    strategy: Strategy
    attempts: int
    fallback: bool   # True when retries were exhausted and walls were cleared


def candidate_targets(
    grid_size: int,
    player_index: int,
    min_distance: int = 2
) -> List[int]:
    """
    Cells eligible as a target.

    Cells at Manhattan distance >= min_distance from the player; every
    non-player cell if no such cell exists.
    """
    cells = [i for i in range(grid_size * grid_size) if i != player_index]
    far = [i for i in cells if manhattan(i, player_index, grid_size) >= min_distance]
    return far if far else cells


def _scatter_walls(
    grid_size: int,
    player_index: int,
    target_index: int,
    params: DifficultyParams,
    rng: LevelRng
) -> FrozenSet[int]:
    free = [
        i for i in range(grid_size * grid_size)
        if i != player_index and i != target_index
    ]
    rng.shuffle(free)
    count = rng.randint(params.wall_count_min, params.wall_count_max)
    return frozenset(free[:count])


def _corridor_walls(
    grid_size: int,
    player_index: int,
    target_index: int,
    config: GameConfig,
    rng: LevelRng
) -> FrozenSet[int]:
    path = set(random_simple_path(grid_size, player_index, target_index, rng))
    fill_factor = rng.uniform(
        config.generation.corridor_fill_min,
        config.generation.corridor_fill_max
    )
    walls = set()
    for i in range(grid_size * grid_size):
        if i in path:
            continue
        if rng.random() < fill_factor:
            walls.add(i)
    return frozenset(walls)


def generate_level(
    grid_size: int,
    player_index: int,
    level: int,
    rng_state: RngState,
    config: Optional[GameConfig] = None
) -> Tuple[GenerationResult, RngState]:
    """
    Generate a solvable board.

    Args:
        grid_size: Side length of the board.
        player_index: Cell the player occupies.
        level: Progression level (selects wall counts and complexity).
        rng_state: Random state to generate from.
        config: Game configuration. Uses default if None.

    Returns:
        (GenerationResult, new_rng_state). The same inputs always give
        the same board.
    """
    if config is None:
        config = get_config()

    check_index(player_index, grid_size)
    if grid_size * grid_size < 2:
        raise ValueError(f"Grid of size {grid_size} has no room for a target")

    params = curve(level, config)
    rng = LevelRng.from_state(rng_state)
    targets = candidate_targets(grid_size, player_index, config.grid.min_target_distance)
    max_attempts = config.generation.max_attempts

    target = targets[0]
    walls: FrozenSet[int] = frozenset()
    strategy = Strategy.SCATTER
    attempts = 0

    while attempts < max_attempts:
        attempts += 1
        target = rng.choice(targets)

        if rng.random() < params.complexity:
            strategy = Strategy.CORRIDOR
            walls = _corridor_walls(grid_size, player_index, target, config, rng)
        else:
            strategy = Strategy.SCATTER
            walls = _scatter_walls(grid_size, player_index, target, params, rng)

        if reachable(grid_size, player_index, target, walls):
            board = Board(size=grid_size, walls=walls, target=target)
            result = GenerationResult(board, strategy, attempts, fallback=False)
            return result, rng.get_state()

    # Generation exhausted: an empty board is always playable
    logger.warning(
        "Level %d: no solvable %dx%d board after %d attempts, clearing walls",
        level, grid_size, grid_size, attempts
    )
    board = Board(size=grid_size, walls=frozenset(), target=target)
    result = GenerationResult(board, strategy, attempts, fallback=True)
    return result, rng.get_state()


class LevelGenerator:
    """
    Stateful convenience around generate_level.

    Owns a LevelRng and threads its state through each call.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        if config is None:
            config = get_config()

        self._config = config
        self._rng = LevelRng(seed)

    @property
    def rng(self) -> LevelRng:
        return self._rng

    def generate(self, grid_size: int, player_index: int, level: int) -> GenerationResult:
        result, state = generate_level(
            grid_size,
            player_index,
            level,
            self._rng.get_state(),
            self._config
        )
        self._rng.set_state(state)
        logger.debug(
            "Generated level %d: target=%d walls=%d strategy=%s attempts=%d",
            level, result.board.target, len(result.board.walls),
            result.strategy.value, result.attempts
        )
        return result

    def reset(self, seed: Optional[int] = None) -> None:
        self._rng.reset(seed)
