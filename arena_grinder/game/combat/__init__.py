"""Combat system components.

This package contains the combat logic with clear separation of concerns:
- damage_roller.py: Bias-shaped enemy damage rolls with crits
- combat_session.py: One round's state machine and attack resolution
- battle_forecast.py: Read-only display numbers for the stat panels
"""

from .damage_roller import DamageRoller, DamageRoll, bias_sample_count
from .combat_session import CombatSession, EnemyState, RoundOutcome
from .battle_forecast import BattleCalculator, BattleForecast

__all__ = [
    "DamageRoller",
    "DamageRoll",
    "bias_sample_count",
    "CombatSession",
    "EnemyState",
    "RoundOutcome",
    "BattleCalculator",
    "BattleForecast",
]
