"""
Player progression: XP, levels and the level cap.

The engine turns XP grants into zero or more level-ups along the active
curve. A single large grant can cross several thresholds; the caller gets
one LevelUpEvent summarizing the net change.
"""
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from . import formulas

if TYPE_CHECKING:
    from .config import ProgressionConfig


@dataclass
class PlayerState:
    """Progression and per-round HP of the player."""
    level: int
    xp: int
    xp_to_next: int
    hp: int
    max_hp: int
    wins: int = 0
    losses: int = 0
    total_xp: int = 0


@dataclass(frozen=True)
class LevelUpEvent:
    """Net change produced by one grant_xp call that crossed a threshold."""
    from_level: int
    to_level: int
    levels_gained: int
    old_damage: int
    new_damage: int
    old_xp_to_next: int
    new_xp_to_next: int
    xp_remainder: int


class ProgressionEngine:
    """Owns the player's XP/level state for one run."""

    def __init__(self, config: "ProgressionConfig"):
        self.config = config
        self.player = self._fresh_player()

    def _fresh_player(self) -> PlayerState:
        return PlayerState(
            level=1,
            xp=0,
            xp_to_next=self.xp_to_next(1),
            hp=self.config.player_base_hp,
            max_hp=self.config.player_base_hp,
        )

    def reset(self) -> None:
        """Start over at level 1 with no XP, wins or losses."""
        self.player = self._fresh_player()

    def xp_to_next(self, level: int) -> int:
        return formulas.xp_to_next(level, self.config.curve)

    def damage_at(self, level: int) -> int:
        return formulas.player_damage(
            level, self.config.player_base_damage, self.config.player_damage_per_level
        )

    @property
    def damage(self) -> int:
        return self.damage_at(self.player.level)

    def grant_xp(self, amount: int) -> Optional[LevelUpEvent]:
        """Add XP and apply every level-up it pays for, up to the target level.

        XP past the cap is kept as-is; it never triggers further level-ups.

        Args:
            amount: XP to add (non-negative)

        Returns:
            LevelUpEvent if at least one level was gained, else None
        """
        if amount < 0:
            raise ValueError(f"XP amount must be non-negative, got {amount}")

        player = self.player
        player.xp += amount
        player.total_xp += amount

        from_level = player.level
        old_xp_to_next = player.xp_to_next
        levels_gained = 0

        while player.xp >= player.xp_to_next and player.level < self.config.target_level:
            player.xp -= player.xp_to_next
            player.level += 1
            player.xp_to_next = self.xp_to_next(player.level)
            levels_gained += 1

        if levels_gained == 0:
            return None

        return LevelUpEvent(
            from_level=from_level,
            to_level=player.level,
            levels_gained=levels_gained,
            old_damage=self.damage_at(from_level),
            new_damage=self.damage_at(player.level),
            old_xp_to_next=old_xp_to_next,
            new_xp_to_next=player.xp_to_next,
            xp_remainder=player.xp,
        )

    def record_win(self) -> int:
        self.player.wins += 1
        return self.player.wins

    def record_loss(self) -> int:
        self.player.losses += 1
        return self.player.losses

    def is_run_complete(self) -> bool:
        return self.player.level >= self.config.target_level
