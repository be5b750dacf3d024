"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to a grid-run session.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from vector_grid.grid_core.config_loader import GameConfig, load_config
from vector_grid.grid_core.events import (
    AdvanceEvent,
    EventRecorder,
    LevelCompleteEvent,
    PenaltyEvent,
)
from vector_grid.grid_core.grid import ACTION_DIRECTIONS
from vector_grid.grid_core.rules import GameMode
from vector_grid.grid_core.session import GameSession
from vector_grid.grid_core.state_snapshot import (
    CELL_DECAYED,
    CELL_PADDING,
    MODE_IDS,
    SnapshotBuilder,
)

logger = logging.getLogger(__name__)


class GridRunEnv(gym.Env):
    """
    Grid navigation puzzle as a Gymnasium environment.

    Action Space:
        Discrete(4): up, down, left, right.

    Observation Space:
        Dict of scalars plus the board padded to the largest grid.

    Step:
        Submits one intent, then advances session time by env.step_ms
        (one motion-lock window by default), so the clock keeps running
        while the agent thinks in steps.

    Reward:
        Always 0.0. Agents compute their own reward from the info dict.
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        mode: Union[GameMode, str] = GameMode.CLASSIC,
        config_path: Optional[str] = None,
        step_ms: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            mode: Game mode for every episode.
            config_path: Path to game_config.yaml. Uses default if None.
            step_ms: Override milliseconds of session time per step.
            debug: If True, log every step at INFO level.
        """
        super().__init__()

        self._config = load_config(config_path)
        self._mode = GameMode.parse(mode)
        self._step_ms = step_ms if step_ms is not None else self._config.env.step_ms
        self._debug = debug

        self._recorder = EventRecorder()
        self._session = GameSession(self._mode, config=self._config, listeners=[self._recorder])
        self._snapshot_builder = SnapshotBuilder(self._config)
        self._steps: int = 0

        self.action_space = spaces.Discrete(len(ACTION_DIRECTIONS))
        self.observation_space = self._build_observation_space()

        if self._debug:
            logger.info(
                "GridRunEnv initialized: mode=%s step=%dms max_grid=%d",
                self._mode.value, self._step_ms, self._config.max_grid_size
            )

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_size = self._config.max_grid_size
        max_index = max_size * max_size - 1
        max_time = max(
            max(t.time_base_ms, t.time_floor_ms) for t in self._config.difficulty.tiers
        )
        int_max = np.iinfo(np.int32).max

        def scalar(high: int) -> spaces.Box:
            return spaces.Box(low=0, high=high, shape=(), dtype=np.int32)

        return spaces.Dict({
            "level": spaces.Box(low=1, high=int_max, shape=(), dtype=np.int32),
            "mode_id": spaces.Discrete(len(MODE_IDS)),
            "grid_size": scalar(max_size),
            "player_index": scalar(max_index),
            "target_index": scalar(max_index),
            "player_row": scalar(max_size - 1),
            "player_col": scalar(max_size - 1),
            "target_row": scalar(max_size - 1),
            "target_col": scalar(max_size - 1),
            "time_remaining": scalar(max_time),
            "time_budget": scalar(max_time),
            "time_fraction": spaces.Box(low=0, high=1, shape=(), dtype=np.float32),
            "moves": scalar(int_max),
            "penalties": scalar(int_max),
            "buffered_count": scalar(self._config.timing.input_buffer_size),
            "cells": spaces.Box(
                low=CELL_PADDING,
                high=CELL_DECAYED,
                shape=(max_size, max_size),
                dtype=np.int8
            ),
            "wall_mask": spaces.MultiBinary((max_size, max_size)),
            "cell_mask": spaces.MultiBinary((max_size, max_size)),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for level generation.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._session.restart(seed=seed)
        self._recorder.clear()
        self._steps = 0

        info = self._session.get_info()
        info["delta_level"] = 0
        return self._observe(), info

    def step(
        self,
        action: Union[int, np.integer, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: Index into (up, down, left, right).

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        action = int(action)
        if not 0 <= action < len(ACTION_DIRECTIONS):
            raise ValueError(f"Invalid action {action}, expected 0-{len(ACTION_DIRECTIONS) - 1}")

        level_before = self._session.level
        self._recorder.clear()

        if not self._session.is_over:
            self._session.submit_intent(ACTION_DIRECTIONS[action])
            self._session.tick(self._step_ms)
            self._steps += 1

        terminated = self._session.is_over
        truncated = not terminated and self._steps >= self._config.caps.max_steps

        info = self._session.get_info()
        info["delta_level"] = self._session.level - level_before
        info["advances"] = len(self._recorder.of_type(AdvanceEvent))
        info["penalty_events"] = len(self._recorder.of_type(PenaltyEvent))
        info["levels_completed"] = len(self._recorder.of_type(LevelCompleteEvent))
        info["steps"] = self._steps
        if truncated:
            info["truncated_reason"] = "step_cap"

        if self._debug:
            logger.info(
                "Step: action=%s level=%d time=%dms",
                ACTION_DIRECTIONS[action].name, info["level"], info["time_remaining"]
            )
            if terminated:
                logger.info("TERMINATED: %s", info["terminated_reason"])

        return self._observe(), 0.0, terminated, truncated, info

    def _observe(self) -> Dict[str, np.ndarray]:
        return self._snapshot_builder.build(self._session).to_obs_dict()

    def close(self) -> None:
        """Nothing to release; present for API symmetry."""
        self._recorder.clear()

    @property
    def session(self) -> GameSession:
        """Access to underlying session (for debugging/tools)."""
        return self._session

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
