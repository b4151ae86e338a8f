"""
Combat session: one round against one enemy.

A session is a small state machine over NOT_STARTED -> ACTIVE -> WON | LOST.
Each attack is a full exchange: the player strikes first, and the enemy only
retaliates if it survived. WON and LOST are terminal; the next round needs a
new session.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ...core.data import RoundResult, SessionState
from ...core.errors import InvalidStateError
from .. import formulas
from .damage_roller import DamageRoller

if TYPE_CHECKING:
    from ...core.random_source import RandomSource
    from ..config import CombatConfig, ProgressionConfig


@dataclass
class EnemyState:
    """The enemy of the current round; discarded when the round ends."""
    level: int
    max_hp: int
    hp: int

    @property
    def is_alive(self) -> bool:
        return self.hp > 0


@dataclass(frozen=True)
class RoundOutcome:
    """Result of one attack exchange.

    ``damage_received`` is 0 and ``was_crit`` False when the player's hit
    killed the enemy, since no retaliation happens.
    """
    result: RoundResult
    damage_dealt: int
    damage_received: int
    was_crit: bool
    player_hp: int
    enemy_hp: int

    @property
    def is_terminal(self) -> bool:
        return self.result is not RoundResult.IN_PROGRESS


class CombatSession:
    """Owns per-round HP for the player and one enemy."""

    def __init__(self, player_level: int, progression: "ProgressionConfig"):
        """Create a session for a player at a fixed level.

        Args:
            player_level: Player level for the whole round
            progression: Source of the player damage scaling
        """
        self.player_level = player_level
        self.progression = progression
        self.state = SessionState.NOT_STARTED

        self.combat_config: Optional["CombatConfig"] = None
        self.enemy: Optional[EnemyState] = None
        self.player_hp = 0
        self.player_max_hp = 0
        self.attacks_resolved = 0

    @property
    def player_damage(self) -> int:
        return formulas.player_damage(
            self.player_level,
            self.progression.player_base_damage,
            self.progression.player_damage_per_level,
        )

    def start(self, enemy_level: int, combat_config: "CombatConfig", player_max_hp: int) -> EnemyState:
        """Spawn the enemy and fill the player's HP.

        Raises:
            InvalidStateError: If the session was already started
            ValueError: If enemy_level is below 1
        """
        if self.state is not SessionState.NOT_STARTED:
            raise InvalidStateError(
                "Combat session already started", {"state": self.state.name}
            )
        if enemy_level < 1:
            raise ValueError(f"Enemy level must be >= 1, got {enemy_level}")

        max_hp = formulas.enemy_max_hp(
            enemy_level, combat_config.enemy_base_hp, combat_config.enemy_hp_per_level
        )
        self.combat_config = combat_config
        self.enemy = EnemyState(level=enemy_level, max_hp=max_hp, hp=max_hp)
        self.player_max_hp = player_max_hp
        self.player_hp = player_max_hp
        self.state = SessionState.ACTIVE
        return self.enemy

    def resolve_attack(self, random_source: "RandomSource") -> RoundOutcome:
        """Resolve one exchange: player hit, then enemy retaliation if it lives.

        Raises:
            InvalidStateError: If the session is not ACTIVE; nothing changes
        """
        if self.state is not SessionState.ACTIVE:
            raise InvalidStateError(
                "Cannot attack outside an active session", {"state": self.state.name}
            )
        assert self.enemy is not None and self.combat_config is not None

        self.attacks_resolved += 1
        dealt = self.player_damage
        self.enemy.hp = max(0, self.enemy.hp - dealt)

        if not self.enemy.is_alive:
            self.state = SessionState.WON
            return self._outcome(RoundResult.WIN, dealt, 0, False)

        roll = DamageRoller.roll(self.enemy.level, self.combat_config, random_source)
        self.player_hp = max(0, self.player_hp - roll.damage)

        if self.player_hp <= 0:
            self.state = SessionState.LOST
            return self._outcome(RoundResult.LOSS, dealt, roll.damage, roll.was_crit)

        return self._outcome(RoundResult.IN_PROGRESS, dealt, roll.damage, roll.was_crit)

    def _outcome(self, result: RoundResult, dealt: int, received: int, was_crit: bool) -> RoundOutcome:
        assert self.enemy is not None
        return RoundOutcome(
            result=result,
            damage_dealt=dealt,
            damage_received=received,
            was_crit=was_crit,
            player_hp=self.player_hp,
            enemy_hp=self.enemy.hp,
        )

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE
