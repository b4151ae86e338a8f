"""
Stat formulas: level -> derived stats.

These pure functions are the only place the scaling rules live. Combat,
progression and the forecast all call into this module instead of
repeating the arithmetic.
"""
import math
from typing import TYPE_CHECKING

from ..core.data import XPCurveKind

if TYPE_CHECKING:
    from .config import XPCurve


def player_damage(level: int, base_damage: int, per_level: int) -> int:
    """Damage the player deals per hit. Level 1 gets no scaling."""
    return base_damage + per_level * (level - 1)


def enemy_max_hp(level: int, base_hp: int, per_level: int) -> int:
    """Max HP of an enemy spawned at the given level."""
    return base_hp + per_level * level


def _scaled_enemy_damage(level: int, base_damage: float, per_level: float) -> float:
    return base_damage + per_level * level


def enemy_damage_bounds(
    level: int, base_damage: float, per_level: float, min_mult: float, max_mult: float
) -> tuple[float, float]:
    """Continuous (min, max) enemy damage before rounding, used by the roll."""
    scaled = _scaled_enemy_damage(level, base_damage, per_level)
    return scaled * min_mult, scaled * max_mult


def enemy_base_damage_range(
    level: int, base_damage: float, per_level: float, min_mult: float, max_mult: float
) -> tuple[int, int]:
    """Integer (min, max) enemy damage for display, without crits.

    Both bounds are rounded up and floored to 1.
    """
    low, high = enemy_damage_bounds(level, base_damage, per_level, min_mult, max_mult)
    return max(1, math.ceil(low)), max(1, math.ceil(high))


def enemy_crit_max_damage(
    level: int, base_damage: float, per_level: float, max_mult: float, crit_mult: float
) -> int:
    """Highest damage an enemy can deal with a critical hit."""
    scaled = _scaled_enemy_damage(level, base_damage, per_level)
    return max(1, math.ceil(scaled * max_mult * crit_mult))


def xp_to_next(level: int, curve: "XPCurve") -> int:
    """XP needed to go from ``level`` to ``level + 1``.

    Linear: a * L, Quadratic: a * L^2, Logarithmic: round(a * ln(L + 1)).
    Never less than 1 so every level stays reachable.
    """
    a = curve.coefficient
    if curve.kind is XPCurveKind.LINEAR:
        required = a * level
    elif curve.kind is XPCurveKind.QUADRATIC:
        required = a * level * level
    elif curve.kind is XPCurveKind.LOGARITHMIC:
        # round() is half-to-even
        required = round(a * math.log(level + 1))
    else:
        raise ValueError(f"Unsupported XP curve: {curve.kind}")
    return max(1, int(round(required)))
