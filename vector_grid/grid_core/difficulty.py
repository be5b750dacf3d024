"""
Difficulty Curve
================

Maps a progression level to grid size, time budget, wall density and
generation style. Pure function of the level and the tier table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from vector_grid.grid_core.config_loader import GameConfig, get_config


@dataclass(frozen=True)
class DifficultyParams:
    """Generation and timing parameters for one level."""
    grid_size: int
    time_limit_ms: int
    wall_count_min: int
    wall_count_max: int
    complexity: float   # Probability of corridor-style generation

    @property
    def area(self) -> int:
        return self.grid_size * self.grid_size


def curve(level: int, config: Optional[GameConfig] = None) -> DifficultyParams:
    """
    Compute difficulty parameters for a level.

    Args:
        level: Progression level, starting at 1.
        config: Game configuration. Uses default if None.

    Returns:
        DifficultyParams with the safety clamp applied.

    Raises:
        ValueError: If level is below 1.
    """
    if level < 1:
        raise ValueError(f"Level must be >= 1, got {level}")

    if config is None:
        config = get_config()

    tier = config.tier_for(level)
    grid_size = tier.grid_size

    # Safety clamp: leave room for player, target and a viable path
    safe_limit = max(0, grid_size * grid_size - config.difficulty.reserved_cells)
    wall_count_max = min(tier.wall_count_max, safe_limit)
    wall_count_min = min(tier.wall_count_min, wall_count_max)

    return DifficultyParams(
        grid_size=grid_size,
        time_limit_ms=tier.time_limit_ms(level),
        wall_count_min=wall_count_min,
        wall_count_max=wall_count_max,
        complexity=tier.complexity
    )
