"""Centralized simulation enums.

This module contains the enums shared by the progression, combat and run
modules, providing a single source of truth for curve kinds, session states
and round results.
"""

from enum import Enum, auto


class XPCurveKind(Enum):
    """Shapes of the experience curve."""
    LINEAR = "linear"            # a * L
    QUADRATIC = "quadratic"      # a * L^2
    LOGARITHMIC = "logarithmic"  # round(a * ln(L + 1))


class EnemyLevelMode(Enum):
    """Where an enemy's level comes from at the start of a round."""
    MATCH_PLAYER = "match_player"
    ROUND_INDEX = "round_index"


class SessionState(Enum):
    """Lifecycle of a single combat session."""
    NOT_STARTED = auto()
    ACTIVE = auto()
    WON = auto()
    LOST = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.WON, SessionState.LOST)


class RoundResult(Enum):
    """Outcome tag of one attack exchange."""
    WIN = auto()
    LOSS = auto()
    IN_PROGRESS = auto()


XP_CURVE_NAMES = {
    XPCurveKind.LINEAR: "Linear",
    XPCurveKind.QUADRATIC: "Quadratic",
    XPCurveKind.LOGARITHMIC: "Logarithmic",
}

ROUND_RESULT_NAMES = {
    RoundResult.WIN: "Win",
    RoundResult.LOSS: "Loss",
    RoundResult.IN_PROGRESS: "In progress",
}
