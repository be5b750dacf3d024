"""
Pathfinding
===========

Reachability oracle (exact BFS) and the randomized depth-first path
used by corridor generation. Grids are small, so plain Python sets and
deques are enough.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, AbstractSet, Dict, List, Optional

from vector_grid.grid_core.grid import check_index, neighbors

if TYPE_CHECKING:
    from vector_grid.grid_core.rng import LevelRng


def reachable(
    grid_size: int,
    start: int,
    end: int,
    walls: AbstractSet[int]
) -> bool:
    """
    Check whether end can be reached from start without crossing walls.

    Breadth-first search over the 4-connected grid, O(N^2).

    Args:
        grid_size: Side length N.
        start: Start cell index.
        end: Goal cell index.
        walls: Impassable cell indices.

    Returns:
        True if a wall-free path exists.
    """
    check_index(start, grid_size)
    check_index(end, grid_size)

    if start == end:
        return True

    queue = deque([start])
    visited = {start}

    while queue:
        current = queue.popleft()
        for nxt in neighbors(current, grid_size):
            if nxt in visited or nxt in walls:
                continue
            if nxt == end:
                return True
            visited.add(nxt)
            queue.append(nxt)

    return False


def shortest_path(
    grid_size: int,
    start: int,
    end: int,
    blocked: AbstractSet[int]
) -> Optional[List[int]]:
    """
    Shortest wall-free path as a list of cells from start to end (inclusive).

    Returns:
        The path, or None if end is unreachable.
    """
    check_index(start, grid_size)
    check_index(end, grid_size)

    parents: Dict[int, Optional[int]] = {start: None}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        if current == end:
            break
        for nxt in neighbors(current, grid_size):
            if nxt in parents or nxt in blocked:
                continue
            parents[nxt] = current
            queue.append(nxt)

    if end not in parents:
        return None

    path = [end]
    while path[-1] != start:
        path.append(parents[path[-1]])
    path.reverse()
    return path


def random_simple_path(
    grid_size: int,
    start: int,
    end: int,
    rng: "LevelRng"
) -> List[int]:
    """
    One random simple path from start to end on an empty grid.

    Randomized depth-first search with backtracking: the stack is the
    current path, neighbour order is shuffled at every step, and dead
    ends are popped until the end cell is found.

    Returns:
        Cells from start to end, inclusive, with no repeats.
    """
    check_index(start, grid_size)
    check_index(end, grid_size)

    path = [start]
    visited = {start}

    while path:
        current = path[-1]
        if current == end:
            return path

        options = [n for n in neighbors(current, grid_size) if n not in visited]
        if not options:
            path.pop()
            continue

        rng.shuffle(options)
        nxt = options[0]
        visited.add(nxt)
        path.append(nxt)

    # Unreachable on a connected grid
    return []
