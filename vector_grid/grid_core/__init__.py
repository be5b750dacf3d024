"""
Grid Core - The heart of the puzzle.

This module provides the session state machine, the solvability-guaranteed
level generator, the difficulty curve and all supporting systems
(reachability oracle, seeded RNG, motion lock, session clock).

Main exports:
- start_session / GameSession: One play session and its operations
- generate_level / LevelGenerator: Solvable board generation
- curve: Difficulty parameters for a level
- reachable: Exact BFS reachability oracle
- GridRunEnv: Gymnasium environment for automated agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from vector_grid.grid_core.config_loader import GameConfig, load_config
from vector_grid.grid_core.difficulty import DifficultyParams, curve
from vector_grid.grid_core.events import EventRecorder, SessionListener
from vector_grid.grid_core.grid import Direction, GridCoordinate, parse_direction
from vector_grid.grid_core.level_generator import (
    Board,
    GenerationResult,
    LevelGenerator,
    generate_level,
)
from vector_grid.grid_core.pathfinding import reachable, shortest_path
from vector_grid.grid_core.rng import LevelRng
from vector_grid.grid_core.rules import GameMode, TerminationReason
from vector_grid.grid_core.session import GameSession, RunState, start_session
from vector_grid.grid_core.env_gym import GridRunEnv

__all__ = [
    "GameConfig",
    "load_config",
    "DifficultyParams",
    "curve",
    "EventRecorder",
    "SessionListener",
    "Direction",
    "GridCoordinate",
    "parse_direction",
    "Board",
    "GenerationResult",
    "LevelGenerator",
    "generate_level",
    "reachable",
    "shortest_path",
    "LevelRng",
    "GameMode",
    "TerminationReason",
    "GameSession",
    "RunState",
    "start_session",
    "GridRunEnv",
]
