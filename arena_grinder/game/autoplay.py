"""
Headless autoplay for balance analysis.

Drives a RunController the way a player mashing Attack would: start a round,
attack until it ends, repeat until the target level or a round budget is
reached. Useful for comparing curves and enemy tuning without a UI.
"""
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from ..core.data import RoundResult
from ..core.errors import ConfigurationError
from .run_controller import RunController

if TYPE_CHECKING:
    from ..core.events import EventManager
    from ..core.random_source import RandomSource
    from .config import CombatConfig, ProgressionConfig


@dataclass
class AutoplaySummary:
    """Aggregate numbers from one autoplayed run."""
    rounds: int = 0
    wins: int = 0
    losses: int = 0
    attacks: int = 0
    crits_received: int = 0
    final_level: int = 1
    total_xp: int = 0
    completed: bool = False
    # rounds_per_level[i] = rounds spent at level i + 1
    rounds_per_level: list[int] = field(default_factory=list)

    @property
    def win_rate(self) -> float:
        return self.wins / self.rounds if self.rounds else 0.0


def play_round(controller: RunController, summary: AutoplaySummary) -> RoundResult:
    """Play one round to its end, updating the summary."""
    level = controller.player.level
    controller.begin_round()
    summary.rounds += 1

    while len(summary.rounds_per_level) < level:
        summary.rounds_per_level.append(0)
    summary.rounds_per_level[level - 1] += 1

    while True:
        report = controller.on_attack()
        summary.attacks += 1
        if report.outcome.was_crit:
            summary.crits_received += 1
        if report.outcome.is_terminal:
            return report.outcome.result


def run_autoplay(
    progression: "ProgressionConfig",
    combat: "CombatConfig",
    random_source: Optional["RandomSource"] = None,
    max_rounds: int = 10_000,
    event_manager: Optional["EventManager"] = None,
) -> AutoplaySummary:
    """Autoplay a full run.

    Args:
        progression: Player progression config
        combat: Enemy config
        random_source: Source of damage rolls (seeded numpy source if None)
        max_rounds: Round budget; the run stops early if it is exhausted
        event_manager: Optional bus; queued events are dispatched after each round

    Raises:
        ConfigurationError: If max_rounds is below 1
    """
    if max_rounds < 1:
        raise ConfigurationError("max_rounds must be >= 1", {"max_rounds": max_rounds})

    controller = RunController(progression, combat, random_source, event_manager)
    summary = AutoplaySummary()
    _dispatch(event_manager)

    while not controller.is_run_complete() and summary.rounds < max_rounds:
        play_round(controller, summary)
        _dispatch(event_manager)

    player = controller.player
    summary.wins = player.wins
    summary.losses = player.losses
    summary.final_level = player.level
    summary.total_xp = player.total_xp
    summary.completed = controller.is_run_complete()
    return summary


def _dispatch(event_manager: Optional["EventManager"]) -> None:
    if event_manager is not None:
        event_manager.process_events()
