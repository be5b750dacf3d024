"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml


@dataclass(frozen=True)
class GridConfig:
    """Board placement settings."""
    origin_index: int          # Player cell on a fresh session
    min_target_distance: int   # Minimum Manhattan distance player -> target


@dataclass(frozen=True)
class GenerationConfig:
    """Level generator parameters."""
    max_attempts: int
    corridor_fill_min: float
    corridor_fill_max: float


@dataclass(frozen=True)
class TierConfig:
    """A single difficulty tier."""
    max_level: Optional[int]   # Inclusive upper bound, None for the last tier
    grid_size: int
    wall_count_min: int
    wall_count_max: int
    time_base_ms: int
    time_step_ms: int
    time_floor_ms: int
    level_offset: int
    complexity: float

    def contains(self, level: int) -> bool:
        return self.max_level is None or level <= self.max_level

    def time_limit_ms(self, level: int) -> int:
        """Piecewise-linear time budget, clamped to the tier floor."""
        return max(
            self.time_floor_ms,
            self.time_base_ms - (level - self.level_offset) * self.time_step_ms
        )


@dataclass(frozen=True)
class DifficultyConfig:
    """Difficulty progression table."""
    reserved_cells: int
    tiers: Tuple[TierConfig, ...]

    @property
    def max_grid_size(self) -> int:
        """Largest grid any level can produce."""
        return max(t.grid_size for t in self.tiers)


@dataclass(frozen=True)
class TimingConfig:
    """Clock, motion lock and penalty timings (milliseconds)."""
    clock_interval_ms: int
    motion_lock_ms: int
    input_buffer_size: int
    collision_penalty_ms: int
    hit_flash_ms: int


@dataclass(frozen=True)
class CapsConfig:
    """Environment limits."""
    max_steps: int


@dataclass(frozen=True)
class EnvConfig:
    """Gymnasium wrapper settings."""
    step_ms: int


@dataclass(frozen=True)
class ObservationConfig:
    """Observation layout parameters."""
    include_visited: bool


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    grid: GridConfig
    generation: GenerationConfig
    difficulty: DifficultyConfig
    timing: TimingConfig
    caps: CapsConfig
    env: EnvConfig
    observation: ObservationConfig

    @property
    def max_grid_size(self) -> int:
        return self.difficulty.max_grid_size

    def tier_for(self, level: int) -> TierConfig:
        """Get the tier covering a level."""
        for tier in self.difficulty.tiers:
            if tier.contains(level):
                return tier
        return self.difficulty.tiers[-1]


def _parse_pair(data, name: str) -> Tuple[int, int]:
    """Parse a [min, max] pair from YAML."""
    if len(data) != 2:
        raise ValueError(f"{name} must have 2 values [min, max], got {data}")
    return (int(data[0]), int(data[1]))


def _parse_tier(tier_data: dict) -> TierConfig:
    """Parse a single difficulty tier from YAML."""
    wall_min, wall_max = _parse_pair(tier_data["wall_count"], "wall_count")
    time_data = tier_data["time"]
    max_level = tier_data.get("max_level")
    return TierConfig(
        max_level=None if max_level is None else int(max_level),
        grid_size=int(tier_data["grid_size"]),
        wall_count_min=wall_min,
        wall_count_max=wall_max,
        time_base_ms=int(time_data["base_ms"]),
        time_step_ms=int(time_data["step_ms"]),
        time_floor_ms=int(time_data["floor_ms"]),
        level_offset=int(time_data.get("level_offset", 0)),
        complexity=float(tier_data.get("complexity", 0.0))
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    tiers = config.difficulty.tiers
    if not tiers:
        raise ValueError("difficulty.tiers must contain at least one tier")

    # Only the last tier may be open ended, bounds must increase
    previous_max = 0
    previous_size = 0
    for i, tier in enumerate(tiers):
        is_last = i == len(tiers) - 1
        if tier.max_level is None and not is_last:
            raise ValueError(f"Tier {i} has no max_level but is not the last tier")
        if tier.max_level is not None:
            if tier.max_level <= previous_max:
                raise ValueError(
                    f"Tier {i} max_level ({tier.max_level}) must exceed "
                    f"previous tier ({previous_max})"
                )
            previous_max = tier.max_level

        # Grid size is a nondecreasing step function of level
        if tier.grid_size < previous_size:
            raise ValueError(
                f"Tier {i} grid_size ({tier.grid_size}) is smaller than "
                f"previous tier ({previous_size})"
            )
        previous_size = tier.grid_size

        if tier.grid_size < 2:
            raise ValueError(f"Tier {i} grid_size must be at least 2, got {tier.grid_size}")
        if tier.wall_count_min < 0 or tier.wall_count_min > tier.wall_count_max:
            raise ValueError(
                f"Tier {i} wall_count must satisfy 0 <= min <= max, got "
                f"[{tier.wall_count_min}, {tier.wall_count_max}]"
            )
        if not 0.0 <= tier.complexity <= 1.0:
            raise ValueError(f"Tier {i} complexity must be in [0, 1], got {tier.complexity}")
        if tier.time_floor_ms <= 0:
            raise ValueError(f"Tier {i} floor_ms must be positive, got {tier.time_floor_ms}")

    gen = config.generation
    if gen.max_attempts < 1:
        raise ValueError(f"generation.max_attempts must be >= 1, got {gen.max_attempts}")
    if not 0.0 <= gen.corridor_fill_min <= gen.corridor_fill_max <= 1.0:
        raise ValueError(
            f"corridor fill range must satisfy 0 <= min <= max <= 1, got "
            f"[{gen.corridor_fill_min}, {gen.corridor_fill_max}]"
        )

    first_size = tiers[0].grid_size
    if not 0 <= config.grid.origin_index < first_size * first_size:
        raise ValueError(
            f"grid.origin_index ({config.grid.origin_index}) outside the "
            f"{first_size}x{first_size} starting grid"
        )

    timing = config.timing
    for name in ("clock_interval_ms", "motion_lock_ms", "hit_flash_ms"):
        if getattr(timing, name) <= 0:
            raise ValueError(f"timing.{name} must be positive")
    if timing.input_buffer_size < 0:
        raise ValueError("timing.input_buffer_size must be >= 0")
    if timing.collision_penalty_ms < 0:
        raise ValueError("timing.collision_penalty_ms must be >= 0")

    if config.env.step_ms <= 0:
        raise ValueError(f"env.step_ms must be positive, got {config.env.step_ms}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    grid_data = raw.get("grid", {})
    grid = GridConfig(
        origin_index=int(grid_data.get("origin_index", 0)),
        min_target_distance=int(grid_data.get("min_target_distance", 2))
    )

    gen_data = raw.get("generation", {})
    generation = GenerationConfig(
        max_attempts=int(gen_data.get("max_attempts", 50)),
        corridor_fill_min=float(gen_data.get("corridor_fill_min", 0.4)),
        corridor_fill_max=float(gen_data.get("corridor_fill_max", 0.7))
    )

    diff_data = raw["difficulty"]
    difficulty = DifficultyConfig(
        reserved_cells=int(diff_data.get("reserved_cells", 6)),
        tiers=tuple(_parse_tier(t) for t in diff_data["tiers"])
    )

    timing_data = raw["timing"]
    timing = TimingConfig(
        clock_interval_ms=int(timing_data["clock_interval_ms"]),
        motion_lock_ms=int(timing_data["motion_lock_ms"]),
        input_buffer_size=int(timing_data.get("input_buffer_size", 2)),
        collision_penalty_ms=int(timing_data["collision_penalty_ms"]),
        hit_flash_ms=int(timing_data.get("hit_flash_ms", 200))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_steps=int(caps_data.get("max_steps", 5000))
    )

    env_data = raw.get("env", {})
    env = EnvConfig(
        step_ms=int(env_data.get("step_ms", timing.motion_lock_ms))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        include_visited=bool(obs_data.get("include_visited", True))
    )

    config = GameConfig(
        grid=grid,
        generation=generation,
        difficulty=difficulty,
        timing=timing,
        caps=caps,
        env=env,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
