"""
Tests for the difficulty curve.
"""

import pytest

from vector_grid.grid_core.config_loader import load_config
from vector_grid.grid_core.difficulty import curve

LEVELS = range(1, 121)


class TestCurveValues:
    """Test the shipped tier table."""

    def test_level_one(self, config):
        """Level 1 is a 3x3 board with 4760ms and no walls."""
        params = curve(1, config)

        assert params.grid_size == 3
        assert params.time_limit_ms == max(3800, 5000 - 1 * 240) == 4760
        assert params.wall_count_min == 0
        assert params.wall_count_max == 0
        assert params.complexity == 0.0

    def test_walls_appear_from_level_three(self, config):
        assert curve(2, config).wall_count_max == 0
        params = curve(3, config)
        assert (params.wall_count_min, params.wall_count_max) == (1, 2)

    @pytest.mark.parametrize("level, grid_size, time_ms", [
        (5, 3, 3800),
        (6, 4, 4820),
        (15, 4, 3200),
        (16, 4, 3120),
        (30, 4, 2000),
        (31, 5, 4400),
        (50, 5, 2500),
        (51, 5, 2450),
        (500, 5, 1200),
    ])
    def test_tier_boundaries(self, config, level, grid_size, time_ms):
        params = curve(level, config)
        assert params.grid_size == grid_size
        assert params.time_limit_ms == time_ms

    def test_invalid_level_rejected(self, config):
        with pytest.raises(ValueError):
            curve(0, config)


class TestCurveShape:
    """Test monotonicity and clamping across levels."""

    def test_grid_size_nondecreasing(self, config):
        sizes = [curve(level, config).grid_size for level in LEVELS]
        assert sizes == sorted(sizes)

    def test_wall_counts_nondecreasing(self, config):
        mins = [curve(level, config).wall_count_min for level in LEVELS]
        maxes = [curve(level, config).wall_count_max for level in LEVELS]
        assert mins == sorted(mins)
        assert maxes == sorted(maxes)

    def test_complexity_nondecreasing_and_bounded(self, config):
        values = [curve(level, config).complexity for level in LEVELS]
        assert values == sorted(values)
        assert all(0.0 <= v <= 1.0 for v in values)

    def test_safety_clamp_holds(self, config):
        for level in LEVELS:
            params = curve(level, config)
            assert params.wall_count_max <= params.grid_size ** 2 - 6
            assert params.wall_count_min <= params.wall_count_max

    def test_time_decreases_within_grid_size(self, config):
        """Time never rises while the grid stays the same size."""
        for level in range(1, 120):
            here, nxt = curve(level, config), curve(level + 1, config)
            if here.grid_size == nxt.grid_size:
                assert nxt.time_limit_ms <= here.time_limit_ms

    def test_time_resets_upward_when_grid_grows(self, config):
        for level in range(1, 120):
            here, nxt = curve(level, config), curve(level + 1, config)
            if nxt.grid_size > here.grid_size:
                assert nxt.time_limit_ms > here.time_limit_ms

    def test_time_respects_floor(self, config):
        for level in LEVELS:
            tier = config.tier_for(level)
            assert curve(level, config).time_limit_ms >= tier.time_floor_ms


class TestSafetyClamp:
    """Test the clamp against a deliberately dense tier."""

    def test_dense_tier_clamped(self, config_factory):
        def mutate(raw):
            raw["difficulty"]["tiers"][0]["wall_count"] = [5, 9]
        config = load_config(config_factory(mutate))

        params = curve(1, config)
        assert params.wall_count_max == 3 * 3 - 6
        assert params.wall_count_min == params.wall_count_max
