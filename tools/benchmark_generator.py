"""
Generator Benchmark
===================

Measures level generation throughput, retry counts and fallback rate
per difficulty tier, plus session step throughput.

Usage:
    python -m tools.benchmark_generator [--boards N] [--steps S] [--seed X]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import List

import numpy as np

from vector_grid.grid_core.config_loader import load_config
from vector_grid.grid_core.difficulty import curve
from vector_grid.grid_core.env_gym import GridRunEnv
from vector_grid.grid_core.level_generator import LevelGenerator, Strategy


def benchmark_generation(
    level: int,
    num_boards: int = 1000,
    seed: int = 42
) -> dict:
    """
    Benchmark board generation at one level.

    Args:
        level: Progression level to generate for.
        num_boards: Number of boards to generate.
        seed: Random seed.

    Returns:
        Dict with timing and retry statistics.
    """
    config = load_config()
    params = curve(level, config)
    generator = LevelGenerator(config, seed=seed)
    rng = np.random.default_rng(seed)

    attempts: List[int] = []
    wall_counts: List[int] = []
    corridors = 0
    fallbacks = 0

    start = time.perf_counter()
    for _ in range(num_boards):
        player = int(rng.integers(params.area))
        result = generator.generate(params.grid_size, player, level)
        attempts.append(result.attempts)
        wall_counts.append(len(result.board.walls))
        corridors += result.strategy is Strategy.CORRIDOR
        fallbacks += result.fallback
    elapsed = time.perf_counter() - start

    return {
        "level": level,
        "grid_size": params.grid_size,
        "num_boards": num_boards,
        "elapsed_seconds": elapsed,
        "boards_per_second": num_boards / elapsed,
        "mean_attempts": float(np.mean(attempts)),
        "max_attempts": int(np.max(attempts)),
        "mean_walls": float(np.mean(wall_counts)),
        "corridor_rate": corridors / num_boards,
        "fallback_rate": fallbacks / num_boards,
    }


def benchmark_session_steps(
    num_steps: int = 5000,
    seed: int = 42
) -> dict:
    """
    Benchmark environment step throughput with random actions.

    Args:
        num_steps: Number of steps to run.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = GridRunEnv()
    rng = np.random.default_rng(seed)

    env.reset(seed=seed)
    start = time.perf_counter()
    for _ in range(num_steps):
        _, _, terminated, truncated, _ = env.step(int(rng.integers(4)))
        if terminated or truncated:
            env.reset()
    elapsed = time.perf_counter() - start
    env.close()

    return {
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps,
    }


def print_results(results: dict) -> None:
    """Pretty print benchmark results."""
    for key, value in results.items():
        if isinstance(value, float):
            print(f"  {key:18s} {value:.4f}")
        else:
            print(f"  {key:18s} {value}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark level generation")
    parser.add_argument("--boards", type=int, default=1000, help="Boards per tier")
    parser.add_argument("--steps", type=int, default=5000, help="Environment steps")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    config = load_config()

    # One representative level per tier: its first level
    levels = [1]
    for tier in config.difficulty.tiers[:-1]:
        levels.append(tier.max_level + 1)

    print("=" * 50)
    print("GENERATION")
    print("=" * 50)
    for level in levels:
        print(f"Level {level}:")
        print_results(benchmark_generation(level, args.boards, args.seed))

    print("=" * 50)
    print("SESSION STEPS")
    print("=" * 50)
    print_results(benchmark_session_steps(args.steps, args.seed))

    return 0


if __name__ == "__main__":
    sys.exit(main())
