"""
Tests for configuration loading and validation.
"""

import pytest

from vector_grid.grid_core.config_loader import get_config, load_config, reload_config


class TestLoadConfig:
    """Test the shipped configuration."""

    def test_default_config_loads(self, config):
        assert config.generation.max_attempts == 50
        assert config.timing.motion_lock_ms == 100
        assert config.timing.input_buffer_size == 2
        assert config.timing.collision_penalty_ms == 500
        assert config.timing.hit_flash_ms == 200
        assert config.grid.origin_index == 0

    def test_max_grid_size(self, config):
        assert config.max_grid_size == 5

    def test_tier_lookup(self, config):
        assert config.tier_for(1).grid_size == 3
        assert config.tier_for(10).grid_size == 4
        assert config.tier_for(1000).max_level is None

    def test_cached_config(self):
        assert get_config() is get_config()
        reloaded = reload_config()
        assert get_config() is reloaded

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))


class TestValidation:
    """Test rejection of inconsistent configurations."""

    def test_open_tier_must_be_last(self, config_factory):
        def mutate(raw):
            raw["difficulty"]["tiers"][0]["max_level"] = None
        with pytest.raises(ValueError):
            load_config(config_factory(mutate))

    def test_grid_size_cannot_shrink(self, config_factory):
        def mutate(raw):
            raw["difficulty"]["tiers"][-1]["grid_size"] = 3
        with pytest.raises(ValueError):
            load_config(config_factory(mutate))

    def test_max_levels_must_increase(self, config_factory):
        def mutate(raw):
            raw["difficulty"]["tiers"][1]["max_level"] = 2
        with pytest.raises(ValueError):
            load_config(config_factory(mutate))

    def test_wall_range_ordered(self, config_factory):
        def mutate(raw):
            raw["difficulty"]["tiers"][2]["wall_count"] = [4, 2]
        with pytest.raises(ValueError):
            load_config(config_factory(mutate))

    def test_fill_range_bounded(self, config_factory):
        def mutate(raw):
            raw["generation"]["corridor_fill_max"] = 1.5
        with pytest.raises(ValueError):
            load_config(config_factory(mutate))

    def test_origin_inside_first_grid(self, config_factory):
        def mutate(raw):
            raw["grid"]["origin_index"] = 9
        with pytest.raises(ValueError):
            load_config(config_factory(mutate))

    def test_complexity_bounded(self, config_factory):
        def mutate(raw):
            raw["difficulty"]["tiers"][0]["complexity"] = 2.0
        with pytest.raises(ValueError):
            load_config(config_factory(mutate))
