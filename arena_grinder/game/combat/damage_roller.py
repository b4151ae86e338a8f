"""
Enemy damage rolls.

Damage is drawn from the enemy's continuous damage bounds with a
bias-shaped position: the mean of n uniform draws. n=1 is uniform; larger n
pulls rolls toward the middle of the range (central-limit shaping), so big
spikes mostly come from crits.
"""
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from .. import formulas

if TYPE_CHECKING:
    from ...core.random_source import RandomSource
    from ..config import CombatConfig

MAX_BIAS_SAMPLES = 12


@dataclass(frozen=True)
class DamageRoll:
    """Result of one enemy damage roll."""
    damage: int
    was_crit: bool


def bias_sample_count(bias: float) -> int:
    """Number of uniform draws averaged for a bias parameter, in [1, 12]."""
    return max(1, min(MAX_BIAS_SAMPLES, round(bias)))


class DamageRoller:
    """Rolls enemy retaliation damage from an injected random source."""

    @staticmethod
    def biased_unit(bias: float, random_source: "RandomSource") -> float:
        """Draw t in [0, 1) as the mean of ``bias_sample_count(bias)`` uniform draws."""
        n = bias_sample_count(bias)
        total = 0.0
        for _ in range(n):
            total += random_source.uniform()
        return total / n

    @staticmethod
    def roll(enemy_level: int, config: "CombatConfig", random_source: "RandomSource") -> DamageRoll:
        """Roll the damage an enemy of ``enemy_level`` deals on retaliation.

        The shaping draws are consumed first, then one draw for the crit check.

        Args:
            enemy_level: Level of the attacking enemy
            config: Combat configuration with bounds, bias and crit knobs
            random_source: Source of uniform draws

        Returns:
            DamageRoll with damage >= 1 and the crit flag
        """
        low, high = formulas.enemy_damage_bounds(
            enemy_level,
            config.enemy_base_damage,
            config.enemy_damage_per_level,
            config.min_multiplier,
            config.max_multiplier,
        )

        t = DamageRoller.biased_unit(config.damage_bias, random_source)
        damage = low + t * (high - low)

        was_crit = random_source.uniform() < config.crit_chance
        if was_crit:
            damage *= config.crit_multiplier

        return DamageRoll(damage=max(1, math.ceil(damage)), was_crit=was_crit)

    @staticmethod
    def sample_biased_batch(bias: float, size: int, generator: np.random.Generator) -> np.ndarray:
        """Vectorized draw of ``size`` shaped positions, for distribution analysis.

        Uses the same shaping rule as ``biased_unit``.
        """
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        n = bias_sample_count(bias)
        return generator.random((size, n)).mean(axis=1)
