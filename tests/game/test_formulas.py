"""
Unit tests for the stat formulas.

Tests player damage scaling, enemy HP and damage ranges, and the XP curves.
"""
import math

import pytest

from arena_grinder.core.data import XPCurveKind
from arena_grinder.game import formulas
from arena_grinder.game.config import XPCurve


class TestPlayerDamage:
    """Test player damage scaling."""

    def test_level_one_is_base_damage(self):
        assert formulas.player_damage(1, base_damage=2, per_level=1) == 2

    @pytest.mark.parametrize("level", range(2, 30))
    def test_each_level_adds_per_level_damage(self, level):
        previous = formulas.player_damage(level - 1, 3, 2)
        assert formulas.player_damage(level, 3, 2) == previous + 2

    def test_zero_growth(self):
        assert formulas.player_damage(9, 4, 0) == 4


class TestEnemyStats:
    """Test enemy HP and damage ranges."""

    def test_enemy_max_hp_scales_from_level_one(self):
        # Unlike player damage, the enemy already scales at level 1
        assert formulas.enemy_max_hp(1, base_hp=5, per_level=3) == 8
        assert formulas.enemy_max_hp(4, base_hp=5, per_level=3) == 17

    def test_continuous_bounds(self):
        low, high = formulas.enemy_damage_bounds(2, 1.0, 0.5, 0.5, 1.5)

        # scaled = 1 + 0.5 * 2 = 2
        assert low == pytest.approx(1.0)
        assert high == pytest.approx(3.0)

    def test_display_range_rounds_up(self):
        # scaled = 1 + 0.5 * 4 = 3.0 -> 2.1 and 3.9
        assert formulas.enemy_base_damage_range(4, 1.0, 0.5, 0.7, 1.3) == (3, 4)

    def test_display_range_level_one_defaults(self):
        # scaled = 1.5 -> 1.05 and 1.95
        assert formulas.enemy_base_damage_range(1, 1.0, 0.5, 0.7, 1.3) == (2, 2)

    def test_display_range_floors_at_one(self):
        assert formulas.enemy_base_damage_range(3, 0.0, 0.0, 0.7, 1.3) == (1, 1)

    def test_crit_max_damage(self):
        # 1.5 * 1.3 * 2 = 3.9
        assert formulas.enemy_crit_max_damage(1, 1.0, 0.5, 1.3, 2.0) == 4


class TestXPToNext:
    """Test the experience curves."""

    def test_linear(self):
        curve = XPCurve(XPCurveKind.LINEAR, 50)
        assert [formulas.xp_to_next(level, curve) for level in (1, 2, 3)] == [50, 100, 150]

    def test_quadratic(self):
        curve = XPCurve(XPCurveKind.QUADRATIC, 20)
        assert [formulas.xp_to_next(level, curve) for level in (1, 2, 3)] == [20, 80, 180]

    def test_logarithmic(self):
        curve = XPCurve(XPCurveKind.LOGARITHMIC, 120)

        assert formulas.xp_to_next(1, curve) == round(120 * math.log(2))  # 83
        assert formulas.xp_to_next(2, curve) == round(120 * math.log(3))  # 132

    def test_logarithmic_floors_at_one(self):
        curve = XPCurve(XPCurveKind.LOGARITHMIC, 0.1)

        # 0.1 * ln(2) rounds to 0
        assert formulas.xp_to_next(1, curve) == 1

    def test_fractional_linear_coefficient_is_integer(self):
        curve = XPCurve(XPCurveKind.LINEAR, 0.3)

        assert formulas.xp_to_next(1, curve) == 1
        assert isinstance(formulas.xp_to_next(10, curve), int)

    @pytest.mark.parametrize("kind", list(XPCurveKind))
    @pytest.mark.parametrize("coefficient", [0.01, 1, 50, 120])
    def test_always_at_least_one(self, kind, coefficient):
        curve = XPCurve(kind, coefficient)
        for level in range(1, 51):
            assert formulas.xp_to_next(level, curve) >= 1
