"""Event system for publisher-subscriber communication.

This package contains the event-driven observation layer:
- event_manager.py: Publisher-subscriber event routing
- events.py: Event definitions published by a run
"""

from .event_manager import EventManager, EventPriority, QueuedEvent
from .events import (
    GameEvent,
    EventType,
    RunStarted,
    RunCompleted,
    RoundStarted,
    RoundEnded,
    AttackResolved,
    PlayerLeveledUp,
    LogMessage,
    LogSaveRequested,
)

__all__ = [
    "EventManager",
    "EventPriority",
    "QueuedEvent",
    "GameEvent",
    "EventType",
    "RunStarted",
    "RunCompleted",
    "RoundStarted",
    "RoundEnded",
    "AttackResolved",
    "PlayerLeveledUp",
    "LogMessage",
    "LogSaveRequested",
]
