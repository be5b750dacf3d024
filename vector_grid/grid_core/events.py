"""
Outcome Events
==============

State-change notifications delivered to presentation collaborators
(rendering, audio, haptics, score persistence).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Union

from vector_grid.grid_core.rules import TerminationReason

if TYPE_CHECKING:
    from vector_grid.grid_core.level_generator import Board


@dataclass(frozen=True)
class AdvanceEvent:
    new_player_index: int


@dataclass(frozen=True)
class PenaltyEvent:
    tile_index: int


@dataclass(frozen=True)
class LevelCompleteEvent:
    new_level: int
    board: "Board"


@dataclass(frozen=True)
class TerminatedEvent:
    reason: TerminationReason
    final_level: int


SessionEvent = Union[AdvanceEvent, PenaltyEvent, LevelCompleteEvent, TerminatedEvent]


class SessionListener:
    """Base listener. Override the notifications you care about."""

    def on_advance(self, new_player_index: int) -> None:
        pass

    def on_penalty(self, tile_index: int) -> None:
        pass

    def on_level_complete(self, new_level: int, board: "Board") -> None:
        pass

    def on_terminated(self, reason: TerminationReason, final_level: int) -> None:
        pass


class EventRecorder(SessionListener):
    """Listener that keeps every event in arrival order."""

    def __init__(self):
        self.events: List[SessionEvent] = []

    def on_advance(self, new_player_index: int) -> None:
        self.events.append(AdvanceEvent(new_player_index))

    def on_penalty(self, tile_index: int) -> None:
        self.events.append(PenaltyEvent(tile_index))

    def on_level_complete(self, new_level: int, board: "Board") -> None:
        self.events.append(LevelCompleteEvent(new_level, board))

    def on_terminated(self, reason: TerminationReason, final_level: int) -> None:
        self.events.append(TerminatedEvent(reason, final_level))

    def of_type(self, event_type: type) -> List[SessionEvent]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()
