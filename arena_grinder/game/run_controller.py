"""
Run controller: rounds, wins and losses from level 1 to the target level.

The controller composes one ProgressionEngine with a fresh CombatSession per
round. Its methods return everything a caller needs (outcome, optional
LevelUpEvent, snapshots); when an EventManager is attached it additionally
publishes events describing each step for loggers and presentation layers.
"""
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from ..core.data import EnemyLevelMode, RoundResult, SessionState
from ..core.errors import InvalidStateError
from ..core.events import (
    AttackResolved,
    LogMessage,
    PlayerLeveledUp,
    RoundEnded,
    RoundStarted,
    RunCompleted,
    RunStarted,
)
from ..core.random_source import NumpyRandomSource
from .combat import CombatSession, EnemyState, RoundOutcome
from .log_manager import LogLevel
from .progression import LevelUpEvent, PlayerState, ProgressionEngine

if TYPE_CHECKING:
    from ..core.events import EventManager, GameEvent
    from ..core.random_source import RandomSource
    from .config import CombatConfig, ProgressionConfig

# Status line cadence, in wins
STATUS_EVERY_N_WINS = 5


@dataclass(frozen=True)
class AttackReport:
    """What one call to on_attack produced."""
    outcome: RoundOutcome
    level_up: Optional[LevelUpEvent] = None


@dataclass(frozen=True)
class RunSnapshot:
    """Read-only view of a run for rendering."""
    player: PlayerState
    player_damage: int
    enemy: Optional[EnemyState]
    round_index: int
    session_state: SessionState
    last_outcome: Optional[RoundOutcome]
    run_complete: bool


class RunController:
    """Drives repeated combat sessions against a single progression engine."""

    def __init__(
        self,
        progression: "ProgressionConfig",
        combat: "CombatConfig",
        random_source: Optional["RandomSource"] = None,
        event_manager: Optional["EventManager"] = None,
    ):
        """Initialize a run at level 1.

        Args:
            progression: Player progression config
            combat: Enemy and damage roll config
            random_source: Default source for enemy damage rolls
            event_manager: Optional bus for run events and log messages
        """
        self.progression_config = progression
        self.combat_config = combat
        self.random_source = random_source if random_source is not None else NumpyRandomSource()
        self.event_manager = event_manager

        self.engine = ProgressionEngine(progression)
        self.round_index = 0
        self.session: Optional[CombatSession] = None
        self.last_outcome: Optional[RoundOutcome] = None

        self._announce_run_start()

    @property
    def player(self) -> PlayerState:
        return self.engine.player

    def is_run_complete(self) -> bool:
        return self.engine.is_run_complete()

    @property
    def session_state(self) -> SessionState:
        return self.session.state if self.session is not None else SessionState.NOT_STARTED

    def restart(self) -> None:
        """Throw away the current run and start again at level 1."""
        self.engine.reset()
        self.round_index = 0
        self.session = None
        self.last_outcome = None
        self._announce_run_start()

    def begin_round(self) -> EnemyState:
        """Spawn the next enemy and refill the player's HP.

        Raises:
            InvalidStateError: If the run is complete or a round is in progress
        """
        if self.is_run_complete():
            raise InvalidStateError(
                "Run is complete; no more rounds can start",
                {"level": self.player.level, "target_level": self.progression_config.target_level},
            )
        if self.session is not None and self.session.is_active:
            raise InvalidStateError("A round is already in progress", {"round": self.round_index})

        self.round_index += 1
        enemy_level = self._enemy_level()

        # HP resets every round, even after a loss
        self.player.hp = self.player.max_hp
        self.session = CombatSession(self.player.level, self.progression_config)
        enemy = self.session.start(enemy_level, self.combat_config, self.player.max_hp)
        self.last_outcome = None

        self._publish(RoundStarted(
            round_index=self.round_index,
            enemy_level=enemy.level,
            enemy_max_hp=enemy.max_hp,
            player_max_hp=self.player.max_hp,
        ))
        self._emit_log(f"Round {self.round_index}: enemy L{enemy.level} ({enemy.max_hp} HP)", "ROUND")
        return enemy

    def _enemy_level(self) -> int:
        if self.combat_config.enemy_level_mode is EnemyLevelMode.MATCH_PLAYER:
            return self.player.level
        return self.round_index

    def on_attack(self, random_source: Optional["RandomSource"] = None) -> AttackReport:
        """Resolve one attack exchange in the current round.

        Args:
            random_source: Overrides the controller's source for this attack

        Returns:
            AttackReport with the outcome and any level-up from a win

        Raises:
            InvalidStateError: If no round is in progress
        """
        if self.session is None or not self.session.is_active:
            raise InvalidStateError(
                "No active round; call begin_round() first", {"state": self.session_state.name}
            )

        outcome = self.session.resolve_attack(random_source if random_source is not None else self.random_source)
        self.player.hp = outcome.player_hp
        self.last_outcome = outcome
        self._publish(AttackResolved(round_index=self.round_index, outcome=outcome))

        if outcome.was_crit:
            self._emit_log(
                f"ENEMY CRIT! Round={self.round_index} EnemyL={self.session.enemy.level} "
                f"Damage={outcome.damage_received}",
                "COMBAT",
            )

        level_up = None
        if outcome.result is RoundResult.WIN:
            level_up = self._handle_win()
        elif outcome.result is RoundResult.LOSS:
            self._handle_loss()

        return AttackReport(outcome=outcome, level_up=level_up)

    def _handle_win(self) -> Optional[LevelUpEvent]:
        wins = self.engine.record_win()
        level_up = self.engine.grant_xp(self.progression_config.xp_per_win)

        self._publish(RoundEnded(
            round_index=self.round_index, result=RoundResult.WIN,
            wins=wins, losses=self.player.losses,
        ))
        if level_up is not None:
            self._publish(PlayerLeveledUp(round_index=self.round_index, level_up=level_up))
            self._emit_log(f"LEVEL UP -> {level_up.to_level}. {self.status_line()}", "PROGRESSION")

        if wins % STATUS_EVERY_N_WINS == 0:
            self._emit_log(f"Win #{wins}. {self.status_line()}", "PROGRESSION")

        if self.is_run_complete():
            self._publish(RunCompleted(
                round_index=self.round_index, level=self.player.level,
                wins=wins, losses=self.player.losses,
            ))
            self._emit_log(f"Target reached! Level {self.player.level}.", "SYSTEM")

        return level_up

    def _handle_loss(self) -> None:
        losses = self.engine.record_loss()
        self._publish(RoundEnded(
            round_index=self.round_index, result=RoundResult.LOSS,
            wins=self.player.wins, losses=losses,
        ))
        self._emit_log(
            f"ROUND LOST at PlayerLevel={self.player.level} vs "
            f"EnemyLevel={self.session.enemy.level} after {self.player.wins} wins.",
            "WARNING",
            LogLevel.WARNING,
        )

    def snapshot(self) -> RunSnapshot:
        """Copy of the current run state; safe to hold across calls."""
        enemy = None
        if self.session is not None and self.session.enemy is not None:
            e = self.session.enemy
            enemy = EnemyState(level=e.level, max_hp=e.max_hp, hp=e.hp)
        p = self.player
        return RunSnapshot(
            player=PlayerState(
                level=p.level, xp=p.xp, xp_to_next=p.xp_to_next, hp=p.hp, max_hp=p.max_hp,
                wins=p.wins, losses=p.losses, total_xp=p.total_xp,
            ),
            player_damage=self.engine.damage,
            enemy=enemy,
            round_index=self.round_index,
            session_state=self.session_state,
            last_outcome=self.last_outcome,
            run_complete=self.is_run_complete(),
        )

    def status_line(self) -> str:
        p = self.player
        return (
            f"PlayerLevel={p.level} | Damage={self.engine.damage} | XP={p.xp}/{p.xp_to_next} "
            f"| Wins={p.wins} | Round={self.round_index}"
        )

    def _announce_run_start(self) -> None:
        curve = self.progression_config.curve
        target = self.progression_config.target_level
        self._publish(RunStarted(round_index=0, curve_name=curve.name, target_level=target))
        self._emit_log(f"=== Arena Grinder START | Curve={curve.name} | TargetLevel={target} ===", "SYSTEM")
        self._emit_log(self.status_line(), "SYSTEM")

    def _publish(self, event: "GameEvent") -> None:
        if self.event_manager is not None:
            self.event_manager.publish(event, source="RunController")

    def _emit_log(self, message: str, category: str = "SYSTEM", level: LogLevel = LogLevel.INFO) -> None:
        """Emit a log message event."""
        self._publish(LogMessage(
            round_index=self.round_index,
            message=message,
            category=category,
            level=level,
            source="RunController",
        ))
