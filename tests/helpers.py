"""
Test helpers for building boards and playing levels.
"""

from vector_grid.grid_core.grid import Direction, GridCoordinate
from vector_grid.grid_core.level_generator import Board
from vector_grid.grid_core.pathfinding import shortest_path


def open_board(size: int, target: int, walls=()) -> Board:
    return Board(size=size, walls=frozenset(walls), target=target)


def direction_between(a: int, b: int, size: int) -> Direction:
    here = GridCoordinate.from_index(a, size)
    there = GridCoordinate.from_index(b, size)
    delta = (there.row - here.row, there.col - here.col)
    for direction in Direction:
        if direction.delta == delta:
            return direction
    raise AssertionError(f"{a} -> {b} is not a unit move")


def walk_to_target(session, lock_ms: int = 100) -> int:
    """Play the current level along a shortest path. Returns the target reached."""
    target = session.target_index
    size = session.grid_size
    blocked = set(session.walls) | set(session.visited)
    path = shortest_path(size, session.player_index, target, blocked)
    assert path is not None
    for a, b in zip(path, path[1:]):
        session.submit_intent(direction_between(a, b, size))
        session.tick(lock_ms)
    return target
