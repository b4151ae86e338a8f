"""Simulation events and context.

This module defines the events the run publishes for observers such as the
log manager or a presentation layer.

Event Design Principles:
- Events are immutable dataclasses with rich object payloads
- All events include the round_index they happened in (0 before the first round)
- Events are notifications only; simulation state never depends on a subscriber
- Keep event types focused and avoid over-granular events
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from abc import ABC
from enum import Enum, auto

from ..data import RoundResult

if TYPE_CHECKING:
    from ...game.combat.combat_session import RoundOutcome
    from ...game.log_manager import LogLevel
    from ...game.progression import LevelUpEvent


class EventType(Enum):
    """Types of events that observers can subscribe to."""
    # Run lifecycle
    RUN_STARTED = auto()
    RUN_COMPLETED = auto()

    # Round lifecycle
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()

    # Combat
    ATTACK_RESOLVED = auto()

    # Progression
    PLAYER_LEVELED_UP = auto()

    # Logging
    LOG_MESSAGE = auto()
    LOG_SAVE_REQUESTED = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all events."""
    round_index: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class RunStarted(GameEvent):
    """Event emitted when a run is (re)started at level 1."""
    curve_name: str
    target_level: int

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.RUN_STARTED)


@dataclass(frozen=True)
class RunCompleted(GameEvent):
    """Event emitted when the player reaches the target level."""
    level: int
    wins: int
    losses: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.RUN_COMPLETED)


@dataclass(frozen=True)
class RoundStarted(GameEvent):
    """Event emitted when a fresh enemy is spawned."""
    enemy_level: int
    enemy_max_hp: int
    player_max_hp: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ROUND_STARTED)


@dataclass(frozen=True)
class RoundEnded(GameEvent):
    """Event emitted when a round ends in a win or a loss."""
    result: RoundResult
    wins: int
    losses: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ROUND_ENDED)


@dataclass(frozen=True)
class AttackResolved(GameEvent):
    """Event emitted after every attack exchange."""
    outcome: "RoundOutcome"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ATTACK_RESOLVED)


@dataclass(frozen=True)
class PlayerLeveledUp(GameEvent):
    """Event emitted when an XP grant crossed one or more level thresholds."""
    level_up: "LevelUpEvent"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.PLAYER_LEVELED_UP)


# Logging Events
@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: "LogLevel"
    source: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class LogSaveRequested(GameEvent):
    """Event emitted when the log should be written to disk."""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_SAVE_REQUESTED)
