"""
Game Session
============

The authoritative play state and the move resolution state machine.

A session is mutated only through submit_intent, tick, pause, resume and
restart. Both event sources (intents and clock ticks) run on the
session's own Timeline, so nothing is ever resolved concurrently.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union

from vector_grid.grid_core.config_loader import GameConfig, get_config
from vector_grid.grid_core.difficulty import DifficultyParams, curve
from vector_grid.grid_core.events import SessionListener
from vector_grid.grid_core.grid import (
    Direction,
    GridCoordinate,
    check_index,
    parse_direction,
    remap_index,
)
from vector_grid.grid_core.level_generator import Board, GenerationResult, LevelGenerator
from vector_grid.grid_core.motion_lock import MotionLock
from vector_grid.grid_core.rules import (
    GameMode,
    ModeRules,
    Resolution,
    ResolutionKind,
    TerminationReason,
    get_rules,
)
from vector_grid.grid_core.scheduler import Timeline
from vector_grid.grid_core.session_clock import SessionClock

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"
    TERMINATED = "terminated"


class GameSession:
    """
    One play session: level, board, player, clock and input discipline.

    Lifecycle: IDLE -> ACTIVE <-> PAUSED -> TERMINATED. restart() returns
    to a fresh ACTIVE level 1 from any state.
    """

    def __init__(
        self,
        mode: Union[GameMode, str],
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        listeners: Iterable[SessionListener] = ()
    ):
        """
        Initialize session.

        Args:
            mode: Game mode (Classic, Lava or Fragile).
            config: Game configuration. Uses default if None.
            seed: Random seed for level generation. Random if None.
            listeners: Outcome event listeners.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._mode = GameMode.parse(mode)
        self._rules: ModeRules = get_rules(self._mode)
        self._listeners: List[SessionListener] = list(listeners)

        timing = config.timing
        self._timeline = Timeline()
        self._clock = SessionClock(
            self._timeline,
            timing.clock_interval_ms,
            self._on_time_expired
        )
        self._lock: MotionLock[Direction] = MotionLock(
            self._timeline,
            timing.motion_lock_ms,
            timing.input_buffer_size,
            self._resolve_buffered
        )
        self._generator = LevelGenerator(config, seed)

        params = curve(1, config)
        self._level: int = 1
        self._grid_size: int = params.grid_size
        self._player_index: int = config.grid.origin_index
        self._board: Optional[Board] = None
        self._last_generation: Optional[GenerationResult] = None
        self._visited: set = set()
        self._run_state = RunState.IDLE
        self._termination_reason: Optional[TerminationReason] = None
        self._hit_tile: Optional[int] = None
        self._hit_handle: Optional[int] = None
        self._moves: int = 0
        self._penalties: int = 0

    # ------------------------------------------------------------------
    # Read-only state

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def mode(self) -> GameMode:
        return self._mode

    @property
    def level(self) -> int:
        return self._level

    @property
    def score(self) -> int:
        """Score is the level reached."""
        return self._level

    @property
    def grid_size(self) -> int:
        return self._grid_size

    @property
    def player_index(self) -> int:
        return self._player_index

    @property
    def player(self) -> GridCoordinate:
        return GridCoordinate.from_index(self._player_index, self._grid_size)

    @property
    def board(self) -> Board:
        if self._board is None:
            raise RuntimeError("Session has not been started")
        return self._board

    @property
    def target_index(self) -> int:
        return self.board.target

    @property
    def walls(self) -> FrozenSet[int]:
        return self.board.walls

    @property
    def visited(self) -> FrozenSet[int]:
        """Decayed tiles (Fragile only; always empty otherwise)."""
        return frozenset(self._visited)

    @property
    def time_remaining(self) -> int:
        return self._clock.time_remaining

    @property
    def time_budget(self) -> int:
        return self._clock.time_budget

    @property
    def run_state(self) -> RunState:
        return self._run_state

    @property
    def is_over(self) -> bool:
        return self._run_state is RunState.TERMINATED

    @property
    def termination_reason(self) -> Optional[TerminationReason]:
        return self._termination_reason

    @property
    def hit_tile(self) -> Optional[int]:
        """Tile flagged by a recent wall hit, cleared after a short flash."""
        return self._hit_tile

    @property
    def move_locked(self) -> bool:
        return self._lock.locked

    @property
    def buffered_intents(self) -> List[Direction]:
        return self._lock.buffered

    @property
    def moves(self) -> int:
        """Moves resolved (buffered or dropped intents excluded)."""
        return self._moves

    @property
    def penalties(self) -> int:
        return self._penalties

    @property
    def last_generation(self) -> Optional[GenerationResult]:
        return self._last_generation

    @property
    def now_ms(self) -> int:
        return self._timeline.now

    def difficulty(self) -> DifficultyParams:
        return curve(self._level, self._config)

    # ------------------------------------------------------------------
    # Listeners

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SessionListener) -> None:
        self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Operations

    def start(self) -> None:
        """Begin level 1. Only valid from IDLE; use restart() afterwards."""
        if self._run_state is not RunState.IDLE:
            logger.debug("start() ignored in state %s", self._run_state.value)
            return
        self._begin_run()

    def restart(self, seed: Optional[int] = None) -> None:
        """
        Reset to level 1 with a fresh board and a full clock.

        Args:
            seed: New generation seed. Keeps the current random stream if None.
        """
        if seed is not None:
            self._generator.reset(seed)
        self._begin_run()

    def submit_intent(self, direction: Union[Direction, str, None]) -> None:
        """
        Submit a directional intent.

        Non-directional input is ignored. While a move is in flight the
        intent is buffered (or dropped if the buffer is full) and replayed
        when the lock window closes.
        """
        parsed = parse_direction(direction)
        if parsed is None:
            logger.debug("Ignoring non-directional input %r", direction)
            return
        if self._run_state is not RunState.ACTIVE:
            return
        if not self._lock.try_acquire(parsed):
            return
        self._resolve_move(parsed)

    def tick(self, delta_ms: int) -> None:
        """
        Advance session time.

        Fires clock ticks, lock releases (with buffered replays) and
        hit-flash expiry that fall due. Does nothing unless ACTIVE, so a
        paused session keeps every timer frozen together.
        """
        if self._run_state is not RunState.ACTIVE:
            return
        self._timeline.advance(delta_ms)

    def pause(self) -> None:
        if self._run_state is not RunState.ACTIVE:
            return
        self._run_state = RunState.PAUSED
        self._clock.stop()

    def resume(self) -> None:
        if self._run_state is not RunState.PAUSED:
            return
        self._run_state = RunState.ACTIVE
        self._clock.start()

    def load_board(self, board: Board, player_index: int) -> None:
        """
        Replace the current board (scenario setup for tools and tests).

        Raises:
            ValueError: If the player would start on a wall or the target.
        """
        check_index(player_index, board.size)
        check_index(board.target, board.size)
        if player_index == board.target:
            raise ValueError("Player cannot start on the target")
        if player_index in board.walls or board.target in board.walls:
            raise ValueError("Player and target must not be walls")

        self._grid_size = board.size
        self._board = board
        self._player_index = player_index
        self._visited.clear()

    def get_info(self) -> Dict[str, Any]:
        """Summary dict for collaborators and the Gymnasium wrapper."""
        reason = self._termination_reason
        return {
            "mode": self._mode.value,
            "level": self._level,
            "score": self.score,
            "grid_size": self._grid_size,
            "player_index": self._player_index,
            "target_index": self._board.target if self._board is not None else -1,
            "wall_count": len(self._board.walls) if self._board is not None else 0,
            "time_remaining": self._clock.time_remaining,
            "time_budget": self._clock.time_budget,
            "moves": self._moves,
            "penalties": self._penalties,
            "run_state": self._run_state.value,
            "terminated_reason": reason.code if reason is not None else "",
            "hit_tile": self._hit_tile,
        }

    # ------------------------------------------------------------------
    # Internals

    def _begin_run(self) -> None:
        self._clock.stop()
        self._lock.clear()
        self._timeline.clear()
        self._hit_tile = None
        self._hit_handle = None

        params = curve(1, self._config)
        self._level = 1
        self._grid_size = params.grid_size
        self._player_index = self._config.grid.origin_index
        self._visited.clear()
        self._install_board(self._generator.generate(self._grid_size, self._player_index, 1))

        self._clock.reset(params.time_limit_ms)
        self._moves = 0
        self._penalties = 0
        self._termination_reason = None
        self._run_state = RunState.ACTIVE
        self._clock.start()
        logger.debug("Session started: mode=%s budget=%dms", self._mode.value, params.time_limit_ms)

    def _install_board(self, result: GenerationResult) -> None:
        self._last_generation = result
        self._board = result.board

    def _resolve_buffered(self, direction: Direction) -> None:
        self.submit_intent(direction)

    def _resolve_move(self, direction: Direction) -> None:
        board = self.board
        size = self._grid_size
        self._moves += 1

        destination = self.player.step(direction)
        if not destination.in_bounds(size):
            self._apply(self._rules.out_of_bounds(), self._player_index)
            return

        dest_index = destination.to_index(size)

        # Decayed tiles collapse regardless of wall status
        revisit = self._rules.revisit(dest_index, self._visited)
        if revisit.is_terminal:
            self._flash_hit(dest_index)
            self._apply(revisit, dest_index)
            return

        if board.is_wall(dest_index):
            self._flash_hit(dest_index)
            self._apply(self._rules.wall_collision(), dest_index)
            return

        if dest_index == board.target:
            self._complete_level(dest_index)
            return

        if self._rules.tracks_visited:
            self._visited.add(self._player_index)
        self._player_index = dest_index
        self._emit("on_advance", dest_index)

    def _apply(self, resolution: Resolution, tile_index: int) -> None:
        if resolution.kind is ResolutionKind.TERMINATE:
            self._terminate(resolution.reason)
        elif resolution.kind is ResolutionKind.PENALTY:
            self._penalties += 1
            self._clock.penalize(self._config.timing.collision_penalty_ms)
            self._emit("on_penalty", tile_index)

    def _complete_level(self, dest_index: int) -> None:
        old_size = self._grid_size
        self._level += 1
        params = curve(self._level, self._config)

        self._grid_size = params.grid_size
        self._player_index = remap_index(dest_index, old_size, params.grid_size)
        self._visited.clear()
        self._install_board(
            self._generator.generate(self._grid_size, self._player_index, self._level)
        )
        self._clock.reset(params.time_limit_ms)

        logger.info(
            "Level %d reached: %dx%d grid, %d walls, %dms",
            self._level, params.grid_size, params.grid_size,
            len(self.board.walls), params.time_limit_ms
        )
        self._emit("on_level_complete", self._level, self.board)

    def _flash_hit(self, tile_index: int) -> None:
        if self._hit_handle is not None:
            self._timeline.cancel(self._hit_handle)
        self._hit_tile = tile_index
        self._hit_handle = self._timeline.schedule(
            self._config.timing.hit_flash_ms,
            self._clear_hit
        )

    def _clear_hit(self) -> None:
        self._hit_tile = None
        self._hit_handle = None

    def _on_time_expired(self) -> None:
        self._terminate(TerminationReason.TIME_LIMIT_EXCEEDED)

    def _terminate(self, reason: TerminationReason) -> None:
        self._run_state = RunState.TERMINATED
        self._termination_reason = reason
        self._clock.stop()
        self._lock.clear()
        if self._hit_handle is not None:
            self._timeline.cancel(self._hit_handle)
            self._hit_handle = None
        logger.info("Session terminated at level %d: %s", self._level, reason.label)
        self._emit("on_terminated", reason, self._level)

    def _emit(self, name: str, *args) -> None:
        for listener in list(self._listeners):
            getattr(listener, name)(*args)


def start_session(
    mode: Union[GameMode, str],
    config: Optional[GameConfig] = None,
    seed: Optional[int] = None,
    listeners: Iterable[SessionListener] = ()
) -> GameSession:
    """Create a session and start level 1."""
    session = GameSession(mode, config=config, seed=seed, listeners=listeners)
    session.start()
    return session
