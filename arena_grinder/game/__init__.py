"""Simulation logic.

This package contains the arena simulation:
- config.py: Immutable progression/combat configs and YAML loading
- formulas.py: Stat scaling formulas (single source of truth)
- combat/: Damage rolls, combat sessions and forecasts
- progression.py: XP and level-up handling
- run_controller.py: Round orchestration across a run
- log_manager.py: Event-fed run log
- autoplay.py: Headless runs for balance analysis
"""

from . import formulas
from .config import (
    XPCurve,
    ProgressionConfig,
    CombatConfig,
    load_config,
    config_from_dict,
)
from .combat import CombatSession, DamageRoller, RoundOutcome, BattleCalculator
from .progression import ProgressionEngine, PlayerState, LevelUpEvent
from .run_controller import RunController, AttackReport, RunSnapshot
from .log_manager import LogManager, LogCategory, LogLevel
from .autoplay import run_autoplay, AutoplaySummary

__all__ = [
    "formulas",
    "XPCurve",
    "ProgressionConfig",
    "CombatConfig",
    "load_config",
    "config_from_dict",
    "CombatSession",
    "DamageRoller",
    "RoundOutcome",
    "BattleCalculator",
    "ProgressionEngine",
    "PlayerState",
    "LevelUpEvent",
    "RunController",
    "AttackReport",
    "RunSnapshot",
    "LogManager",
    "LogCategory",
    "LogLevel",
    "run_autoplay",
    "AutoplaySummary",
]
