"""
Game Rules
==========

Mode-specific collision handling and termination reasons.

Each mode is a small handler class; the session asks the handler how to
resolve an out-of-bounds move, a wall hit or a revisit and applies the
answer. Adding a mode means adding a handler and registering it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Dict, Optional, Union


class GameMode(Enum):
    CLASSIC = "CLASSIC"   # Collisions cost time, never fatal
    LAVA = "LAVA"         # Any violation ends the run
    FRAGILE = "FRAGILE"   # Vacated tiles decay and cannot be re-entered

    @staticmethod
    def parse(value: Union["GameMode", str]) -> "GameMode":
        if isinstance(value, GameMode):
            return value
        try:
            return GameMode(str(value).upper())
        except ValueError:
            raise ValueError(f"Unknown game mode: {value!r}") from None


class TerminationReason(Enum):
    """Terminal states, each with a stable code and a presentation pair."""
    TIME_LIMIT_EXCEEDED = ("time_limit_exceeded", "TERMINATED", "TIME LIMIT EXCEEDED")
    CRITICAL_FAILURE = ("critical_failure", "CRITICAL FAILURE", "INCINERATED BY FIREWALL")
    SIGNAL_LOST = ("signal_lost", "SIGNAL LOST", "UNIT FELL INTO VOID")
    STRUCTURAL_COLLAPSE = ("structural_collapse", "STRUCTURAL COLLAPSE", "ATTEMPTED TO CROSS DECAYED PATH")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def label(self) -> str:
        return self.value[1]

    @property
    def description(self) -> str:
        return self.value[2]


class ResolutionKind(Enum):
    NONE = "none"
    PENALTY = "penalty"
    TERMINATE = "terminate"


@dataclass(frozen=True)
class Resolution:
    """How a rule check resolves a move."""
    kind: ResolutionKind
    reason: Optional[TerminationReason] = None

    @staticmethod
    def none() -> "Resolution":
        return Resolution(ResolutionKind.NONE)

    @staticmethod
    def penalty() -> "Resolution":
        return Resolution(ResolutionKind.PENALTY)

    @staticmethod
    def terminate(reason: TerminationReason) -> "Resolution":
        return Resolution(ResolutionKind.TERMINATE, reason)

    @property
    def is_terminal(self) -> bool:
        return self.kind is ResolutionKind.TERMINATE


class ModeRules:
    """Classic behaviour; other modes override what differs."""

    mode = GameMode.CLASSIC
    tracks_visited = False

    def out_of_bounds(self) -> Resolution:
        return Resolution.penalty()

    def wall_collision(self) -> Resolution:
        return Resolution.penalty()

    def revisit(self, destination: int, visited: AbstractSet[int]) -> Resolution:
        return Resolution.none()


class ClassicRules(ModeRules):
    pass


class LavaRules(ModeRules):
    mode = GameMode.LAVA

    def out_of_bounds(self) -> Resolution:
        return Resolution.terminate(TerminationReason.SIGNAL_LOST)

    def wall_collision(self) -> Resolution:
        return Resolution.terminate(TerminationReason.CRITICAL_FAILURE)


class FragileRules(ModeRules):
    """
    One-way traversal. Collisions cost time like Classic; stepping back
    onto a decayed tile collapses the structure.
    """

    mode = GameMode.FRAGILE
    tracks_visited = True

    def revisit(self, destination: int, visited: AbstractSet[int]) -> Resolution:
        if destination in visited:
            return Resolution.terminate(TerminationReason.STRUCTURAL_COLLAPSE)
        return Resolution.none()


_MODE_RULES: Dict[GameMode, ModeRules] = {
    GameMode.CLASSIC: ClassicRules(),
    GameMode.LAVA: LavaRules(),
    GameMode.FRAGILE: FragileRules(),
}


def get_rules(mode: Union[GameMode, str]) -> ModeRules:
    """Get the rule handler for a mode."""
    return _MODE_RULES[GameMode.parse(mode)]
