"""Core data definitions.

This package contains fundamental enums shared across the simulator:
- game_enums.py: Curve kinds, enemy level modes, session states, round results
"""

from .game_enums import (
    XPCurveKind,
    EnemyLevelMode,
    SessionState,
    RoundResult,
    XP_CURVE_NAMES,
    ROUND_RESULT_NAMES,
)

__all__ = [
    "XPCurveKind",
    "EnemyLevelMode",
    "SessionState",
    "RoundResult",
    "XP_CURVE_NAMES",
    "ROUND_RESULT_NAMES",
]
