"""
Battle forecast for the stat panels.

This module provides read-only numbers a presentation layer shows next to
the fighters (damage per hit, enemy damage range, worst-case crit) without
touching session state or consuming random draws.
"""
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional

from .. import formulas

if TYPE_CHECKING:
    from ..config import CombatConfig, ProgressionConfig
    from .combat_session import CombatSession


@dataclass(frozen=True)
class BattleForecast:
    """Display numbers for one player level versus one enemy level."""
    player_level: int
    player_damage: int
    enemy_level: int
    enemy_max_hp: int
    enemy_min_damage: int
    enemy_max_damage: int
    enemy_crit_max_damage: int
    crit_chance: float
    hits_to_kill: int
    player_hp: Optional[int] = None
    enemy_hp: Optional[int] = None


class BattleCalculator:
    """Calculates battle forecasts for display."""

    @staticmethod
    def calculate_forecast(
        player_level: int,
        enemy_level: int,
        progression: "ProgressionConfig",
        combat: "CombatConfig",
    ) -> BattleForecast:
        """Calculate the forecast for a fresh enemy at ``enemy_level``.

        Args:
            player_level: Current player level
            enemy_level: Level of the enemy being fought
            progression: Player scaling config
            combat: Enemy scaling config

        Returns:
            BattleForecast with full HP on both sides
        """
        damage = formulas.player_damage(
            player_level, progression.player_base_damage, progression.player_damage_per_level
        )
        max_hp = formulas.enemy_max_hp(enemy_level, combat.enemy_base_hp, combat.enemy_hp_per_level)
        min_damage, max_damage = formulas.enemy_base_damage_range(
            enemy_level,
            combat.enemy_base_damage,
            combat.enemy_damage_per_level,
            combat.min_multiplier,
            combat.max_multiplier,
        )
        crit_max = formulas.enemy_crit_max_damage(
            enemy_level,
            combat.enemy_base_damage,
            combat.enemy_damage_per_level,
            combat.max_multiplier,
            combat.crit_multiplier,
        )

        return BattleForecast(
            player_level=player_level,
            player_damage=damage,
            enemy_level=enemy_level,
            enemy_max_hp=max_hp,
            enemy_min_damage=min_damage,
            enemy_max_damage=max_damage,
            enemy_crit_max_damage=crit_max,
            crit_chance=combat.crit_chance,
            hits_to_kill=BattleCalculator._hits_to_kill(max_hp, damage),
            player_hp=progression.player_base_hp,
            enemy_hp=max_hp,
        )

    @staticmethod
    def forecast_session(session: "CombatSession") -> BattleForecast:
        """Forecast for a started session, using its current HP values."""
        if session.enemy is None or session.combat_config is None:
            raise ValueError("Session has no enemy yet")

        forecast = BattleCalculator.calculate_forecast(
            session.player_level, session.enemy.level, session.progression, session.combat_config
        )
        return replace(
            forecast,
            hits_to_kill=BattleCalculator._hits_to_kill(session.enemy.hp, forecast.player_damage),
            player_hp=session.player_hp,
            enemy_hp=session.enemy.hp,
        )

    @staticmethod
    def _hits_to_kill(enemy_hp: int, damage: int) -> int:
        if enemy_hp <= 0:
            return 0
        return -(-enemy_hp // damage)
