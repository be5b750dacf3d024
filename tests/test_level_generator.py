"""
Tests for level generation.
"""

import pytest

from vector_grid.grid_core.config_loader import load_config
from vector_grid.grid_core.difficulty import curve
from vector_grid.grid_core.grid import manhattan
from vector_grid.grid_core.level_generator import (
    LevelGenerator,
    Strategy,
    _corridor_walls,
    candidate_targets,
    generate_level,
)
from vector_grid.grid_core.pathfinding import random_simple_path, reachable
from vector_grid.grid_core.rng import LevelRng

# First level of every tier plus a deep level
SAMPLE_LEVELS = [1, 3, 6, 16, 31, 51, 120]


class TestCandidateTargets:
    """Test target candidate selection."""

    def test_center_of_3x3(self):
        assert sorted(candidate_targets(3, 4)) == [0, 2, 6, 8]

    def test_excludes_player_and_neighbours(self):
        targets = candidate_targets(3, 0)
        assert 0 not in targets
        assert 1 not in targets
        assert 3 not in targets

    def test_fallback_to_all_cells(self):
        assert sorted(candidate_targets(2, 0, min_distance=10)) == [1, 2, 3]


class TestGeneratedBoards:
    """Test board invariants across levels and seeds."""

    @pytest.mark.parametrize("level", SAMPLE_LEVELS)
    def test_invariants(self, config, level):
        params = curve(level, config)
        size = params.grid_size
        generator = LevelGenerator(config, seed=level)

        for player in range(size * size):
            for _ in range(5):
                result = generator.generate(size, player, level)
                board = result.board

                assert board.size == size
                assert board.target != player
                assert 0 <= board.target < size * size
                assert player not in board.walls
                assert board.target not in board.walls
                assert reachable(size, player, board.target, board.walls) or not board.walls
                assert manhattan(player, board.target, size) > 1

    @pytest.mark.parametrize("level", [1, 3, 6, 16])
    def test_scatter_wall_counts_in_range(self, config, level):
        params = curve(level, config)
        generator = LevelGenerator(config, seed=7)

        for _ in range(100):
            result = generator.generate(params.grid_size, 0, level)
            if result.strategy is Strategy.SCATTER and not result.fallback:
                assert params.wall_count_min <= len(result.board.walls) <= params.wall_count_max

    def test_low_levels_never_use_corridors(self, config):
        generator = LevelGenerator(config, seed=3)
        for _ in range(50):
            assert generator.generate(3, 0, 4).strategy is Strategy.SCATTER

    def test_high_levels_mostly_corridors(self, config):
        generator = LevelGenerator(config, seed=3)
        strategies = [generator.generate(5, 0, 80).strategy for _ in range(200)]
        assert strategies.count(Strategy.CORRIDOR) > 100

    def test_first_levels_are_open(self, config):
        result, _ = generate_level(3, 0, 1, LevelRng(1).get_state(), config)
        assert result.board.walls == frozenset()


class TestPureGeneration:
    """Test generation as a pure function of rng state."""

    def test_same_state_same_board(self, config):
        state = LevelRng(42).get_state()
        first, first_state = generate_level(5, 12, 40, state, config)
        second, second_state = generate_level(5, 12, 40, state, config)

        assert first == second
        assert first_state == second_state

    def test_state_advances(self, config):
        state = LevelRng(42).get_state()
        _, new_state = generate_level(5, 12, 40, state, config)
        assert new_state != state

    def test_generator_threads_state(self, config):
        a = LevelGenerator(config, seed=5)
        b = LevelGenerator(config, seed=5)
        boards_a = [a.generate(4, 0, 20).board for _ in range(10)]
        boards_b = [b.generate(4, 0, 20).board for _ in range(10)]
        assert boards_a == boards_b

    def test_reset_restores_sequence(self, config):
        generator = LevelGenerator(config, seed=11)
        initial = [generator.generate(5, 0, 60).board for _ in range(5)]
        generator.reset(seed=11)
        assert [generator.generate(5, 0, 60).board for _ in range(5)] == initial

    def test_invalid_player(self, config):
        with pytest.raises(ValueError):
            generate_level(3, 9, 1, LevelRng(0).get_state(), config)


class TestCorridorPaths:
    """Test that corridor boards keep their carved path clear."""

    def test_corridor_board_contains_open_path(self, config):
        rng = LevelRng(17)
        for _ in range(20):
            path = random_simple_path(5, 0, 24, rng)
            assert reachable(5, 0, 24, frozenset(set(range(25)) - set(path)))

    def test_corridor_walls_spare_path_and_respect_fill(self, config):
        """Replaying the same rng draws recovers the carved path and fill factor."""
        gen = config.generation
        rng = LevelRng(23)
        walled = 0
        fillable = 0

        for _ in range(300):
            replay = LevelRng.from_state(rng.get_state())
            path = set(random_simple_path(5, 0, 24, replay))
            fill = replay.uniform(gen.corridor_fill_min, gen.corridor_fill_max)

            walls = _corridor_walls(5, 0, 24, config, rng)

            assert gen.corridor_fill_min <= fill <= gen.corridor_fill_max
            assert not walls & path
            assert reachable(5, 0, 24, walls)
            walled += len(walls)
            fillable += 25 - len(path)

        density = walled / fillable
        assert gen.corridor_fill_min <= density <= gen.corridor_fill_max


class TestFallback:
    """Test the empty-board fallback after exhausted retries."""

    @pytest.fixture
    def impossible_config(self, config_factory):
        """Every free cell becomes a wall, so no board is ever solvable."""
        def mutate(raw):
            raw["difficulty"]["reserved_cells"] = 0
            raw["difficulty"]["tiers"][0]["wall_count"] = [7, 7]
            raw["generation"]["max_attempts"] = 10
        return load_config(config_factory(mutate))

    def test_fallback_clears_walls(self, impossible_config):
        result, _ = generate_level(3, 0, 1, LevelRng(0).get_state(), impossible_config)

        assert result.fallback
        assert result.attempts == 10
        assert result.board.walls == frozenset()
        assert result.board.target != 0
        assert reachable(3, 0, result.board.target, result.board.walls)

    def test_fallback_is_logged(self, impossible_config, caplog):
        with caplog.at_level("WARNING"):
            generate_level(3, 0, 1, LevelRng(0).get_state(), impossible_config)
        assert "clearing walls" in caplog.text
