"""
Tests for the numpy state snapshot.
"""

import numpy as np

from helpers import open_board
from vector_grid.grid_core.grid import Direction
from vector_grid.grid_core.rules import GameMode
from vector_grid.grid_core.session import start_session
from vector_grid.grid_core.state_snapshot import (
    CELL_DECAYED,
    CELL_EMPTY,
    CELL_PADDING,
    CELL_PLAYER,
    CELL_TARGET,
    CELL_WALL,
    MODE_IDS,
    SnapshotBuilder,
)


class TestSnapshot:
    """Test cell encoding and padding."""

    def test_cells_layout(self, config):
        session = start_session(GameMode.FRAGILE, config=config, seed=1)
        session.load_board(open_board(3, 8, walls=[4]), 0)
        session.submit_intent(Direction.RIGHT)

        snapshot = SnapshotBuilder(config).build(session)
        cells = snapshot.cells

        assert cells.shape == (5, 5)
        assert cells.dtype == np.int8
        assert cells[0, 0] == CELL_DECAYED
        assert cells[0, 1] == CELL_PLAYER
        assert cells[1, 1] == CELL_WALL
        assert cells[2, 2] == CELL_TARGET
        assert cells[0, 2] == CELL_EMPTY
        assert np.all(cells[3:, :] == CELL_PADDING)
        assert np.all(cells[:, 3:] == CELL_PADDING)

    def test_masks(self, config):
        session = start_session(GameMode.CLASSIC, config=config, seed=1)
        session.load_board(open_board(3, 8, walls=[4, 5]), 0)

        snapshot = SnapshotBuilder(config).build(session)

        assert snapshot.cell_mask.sum() == 9
        assert snapshot.wall_mask.sum() == 2
        assert snapshot.wall_mask[1, 2]

    def test_scalars(self, config):
        session = start_session(GameMode.LAVA, config=config, seed=1)
        session.load_board(open_board(3, 7), 0)
        session.tick(100)

        snapshot = SnapshotBuilder(config).build(session)

        assert snapshot.mode_id == MODE_IDS["LAVA"]
        assert snapshot.target_row == 2
        assert snapshot.target_col == 1
        assert snapshot.time_remaining == session.time_budget - 100
        assert 0.0 < snapshot.time_fraction < 1.0

    def test_visited_can_be_hidden(self, config_factory):
        from vector_grid.grid_core.config_loader import load_config

        def mutate(raw):
            raw["observation"]["include_visited"] = False
        config = load_config(config_factory(mutate))

        session = start_session(GameMode.FRAGILE, config=config, seed=1)
        session.load_board(open_board(3, 8), 0)
        session.submit_intent(Direction.RIGHT)

        cells = SnapshotBuilder(config).build(session).cells
        assert cells[0, 0] == CELL_EMPTY

    def test_obs_dict_dtypes(self, config):
        session = start_session(GameMode.CLASSIC, config=config, seed=1)
        obs = SnapshotBuilder(config).build(session).to_obs_dict()

        assert obs["level"].dtype == np.int32
        assert obs["time_fraction"].dtype == np.float32
        assert obs["wall_mask"].dtype == np.int8
        assert obs["cells"].shape == (5, 5)
