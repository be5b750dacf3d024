"""
State Snapshot
==============

Packs session state into fixed-size numpy arrays for observations.
Boards are padded to the largest grid any tier can produce so the
observation shape never changes across levels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

import numpy as np

from vector_grid.grid_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from vector_grid.grid_core.session import GameSession

# Cell codes
CELL_PADDING = -1
CELL_EMPTY = 0
CELL_WALL = 1
CELL_PLAYER = 2
CELL_TARGET = 3
CELL_DECAYED = 4

MODE_IDS = {"CLASSIC": 0, "LAVA": 1, "FRAGILE": 2}


@dataclass
class GameSnapshot:
    """Complete session state at one instant."""
    level: int
    mode_id: int
    grid_size: int
    player_index: int
    target_index: int
    player_row: int
    player_col: int
    target_row: int
    target_col: int
    time_remaining: int
    time_budget: int
    time_fraction: float   # time_remaining / time_budget
    moves: int
    penalties: int
    buffered_count: int

    cells: np.ndarray      # (MAX, MAX) int8 cell codes
    wall_mask: np.ndarray  # (MAX, MAX) bool
    cell_mask: np.ndarray  # (MAX, MAX) bool, True inside the live grid

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "level": np.array(self.level, dtype=np.int32),
            "mode_id": np.array(self.mode_id, dtype=np.int32),
            "grid_size": np.array(self.grid_size, dtype=np.int32),
            "player_index": np.array(self.player_index, dtype=np.int32),
            "target_index": np.array(self.target_index, dtype=np.int32),
            "player_row": np.array(self.player_row, dtype=np.int32),
            "player_col": np.array(self.player_col, dtype=np.int32),
            "target_row": np.array(self.target_row, dtype=np.int32),
            "target_col": np.array(self.target_col, dtype=np.int32),
            "time_remaining": np.array(self.time_remaining, dtype=np.int32),
            "time_budget": np.array(self.time_budget, dtype=np.int32),
            "time_fraction": np.array(self.time_fraction, dtype=np.float32),
            "moves": np.array(self.moves, dtype=np.int32),
            "penalties": np.array(self.penalties, dtype=np.int32),
            "buffered_count": np.array(self.buffered_count, dtype=np.int32),
            "cells": self.cells,
            "wall_mask": self.wall_mask.astype(np.int8),
            "cell_mask": self.cell_mask.astype(np.int8),
        }


class SnapshotBuilder:
    """Builds GameSnapshot objects from a session."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_size = config.max_grid_size
        self._include_visited = config.observation.include_visited

    @property
    def max_size(self) -> int:
        return self._max_size

    def build(self, session: "GameSession") -> GameSnapshot:
        size = session.grid_size
        board = session.board
        max_size = self._max_size

        cells = np.full((max_size, max_size), CELL_PADDING, dtype=np.int8)
        cells[:size, :size] = CELL_EMPTY

        cell_mask = np.zeros((max_size, max_size), dtype=bool)
        cell_mask[:size, :size] = True

        wall_mask = np.zeros((max_size, max_size), dtype=bool)
        for index in board.walls:
            wall_mask[index // size, index % size] = True
        cells[wall_mask] = CELL_WALL

        if self._include_visited:
            for index in session.visited:
                cells[index // size, index % size] = CELL_DECAYED

        player_row, player_col = divmod(session.player_index, size)
        target_row, target_col = divmod(board.target, size)
        cells[target_row, target_col] = CELL_TARGET
        cells[player_row, player_col] = CELL_PLAYER

        budget = session.time_budget
        fraction = session.time_remaining / budget if budget > 0 else 0.0

        return GameSnapshot(
            level=session.level,
            mode_id=MODE_IDS[session.mode.value],
            grid_size=size,
            player_index=session.player_index,
            target_index=board.target,
            player_row=player_row,
            player_col=player_col,
            target_row=target_row,
            target_col=target_col,
            time_remaining=session.time_remaining,
            time_budget=budget,
            time_fraction=float(fraction),
            moves=session.moves,
            penalties=session.penalties,
            buffered_count=len(session.buffered_intents),
            cells=cells,
            wall_mask=wall_mask,
            cell_mask=cell_mask
        )
