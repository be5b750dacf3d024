"""
Grid Geometry
=============

Linear cell indices, (row, col) decomposition, directions and key mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple, Union


class Direction(Enum):
    """Unit offsets as (d_row, d_col)."""
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value


# Action order used by the Gymnasium wrapper
ACTION_DIRECTIONS: Tuple[Direction, ...] = (
    Direction.UP,
    Direction.DOWN,
    Direction.LEFT,
    Direction.RIGHT,
)

_KEY_MAP = {
    "up": Direction.UP,
    "arrowup": Direction.UP,
    "w": Direction.UP,
    "down": Direction.DOWN,
    "arrowdown": Direction.DOWN,
    "s": Direction.DOWN,
    "left": Direction.LEFT,
    "arrowleft": Direction.LEFT,
    "a": Direction.LEFT,
    "right": Direction.RIGHT,
    "arrowright": Direction.RIGHT,
    "d": Direction.RIGHT,
}


def parse_direction(value: Union[Direction, str, None]) -> Optional[Direction]:
    """
    Map a raw input to a direction.

    Accepts Direction members, direction names and key names
    (arrow keys and WASD, case-insensitive).

    Returns:
        The direction, or None for non-directional input.
    """
    if isinstance(value, Direction):
        return value
    if not isinstance(value, str):
        return None
    return _KEY_MAP.get(value.strip().lower())


@dataclass(frozen=True)
class GridCoordinate:
    """A cell of an N x N grid."""
    row: int
    col: int

    @staticmethod
    def from_index(index: int, size: int) -> "GridCoordinate":
        return GridCoordinate(index // size, index % size)

    def to_index(self, size: int) -> int:
        return self.row * size + self.col

    def in_bounds(self, size: int) -> bool:
        return 0 <= self.row < size and 0 <= self.col < size

    def step(self, direction: Direction) -> "GridCoordinate":
        d_row, d_col = direction.delta
        return GridCoordinate(self.row + d_row, self.col + d_col)

    def manhattan(self, other: "GridCoordinate") -> int:
        return abs(self.row - other.row) + abs(self.col - other.col)


def check_index(index: int, size: int) -> None:
    """Raise ValueError if index is outside [0, size^2)."""
    if not 0 <= index < size * size:
        raise ValueError(f"Cell index {index} outside {size}x{size} grid")


def neighbors(index: int, size: int) -> Iterator[int]:
    """4-connected neighbours of a cell, in Direction order."""
    coord = GridCoordinate.from_index(index, size)
    for direction in Direction:
        nxt = coord.step(direction)
        if nxt.in_bounds(size):
            yield nxt.to_index(size)


def manhattan(a: int, b: int, size: int) -> int:
    return GridCoordinate.from_index(a, size).manhattan(GridCoordinate.from_index(b, size))


def remap_index(index: int, old_size: int, new_size: int) -> int:
    """
    Carry a cell to a resized grid at the same (row, col).

    Raises:
        ValueError: If the cell does not exist in the new grid.
    """
    coord = GridCoordinate.from_index(index, old_size)
    if not coord.in_bounds(new_size):
        raise ValueError(
            f"Cell ({coord.row}, {coord.col}) does not fit a {new_size}x{new_size} grid"
        )
    return coord.to_index(new_size)
