"""
Shared fixtures.
"""

import os
from typing import Callable

import pytest
import yaml

from vector_grid.grid_core.config_loader import load_config

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)),
    "vector_grid",
    "game_config.yaml"
)


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def raw_config():
    with open(DEFAULT_CONFIG_PATH, "r") as f:
        return yaml.safe_load(f)


@pytest.fixture
def config_factory(tmp_path, raw_config) -> Callable:
    """Write a mutated copy of the default config and return its path."""
    def _make(mutate: Callable[[dict], None], name: str = "game_config.yaml") -> str:
        mutate(raw_config)
        path = tmp_path / name
        with open(path, "w") as f:
            yaml.safe_dump(raw_config, f)
        return str(path)
    return _make
