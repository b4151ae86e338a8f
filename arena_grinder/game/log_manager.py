"""
Log management for run messages and debugging.

This module provides centralized, event-fed logging with categorization,
filtering, and bounded storage for display by a presentation layer.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ..core.events import EventType, LogMessage as LogEvent, LogSaveRequested

if TYPE_CHECKING:
    from ..core.events import EventManager


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()       # Run start/restart, configuration
    ROUND = auto()        # Round spawn and round results
    COMBAT = auto()       # Attack exchanges and crits
    PROGRESSION = auto()  # XP, level-ups, status lines
    DEBUG = auto()
    WARNING = auto()
    ERROR = auto()


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.ROUND: "RND",
    LogCategory.COMBAT: "CMB",
    LogCategory.PROGRESSION: "PRG",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class LogEntry:
    """A single stored log message with metadata."""
    text: str
    category: LogCategory
    level: LogLevel = LogLevel.INFO
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the message for display."""
        parts = []

        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        parts.append(self.text)
        return " ".join(parts)


class LogManager:
    """Collects log messages published during a run."""

    def __init__(
        self,
        event_manager: Optional["EventManager"] = None,
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO,
        log_dir: str = "logs",
    ):
        """Initialize the log manager.

        Args:
            event_manager: Event bus to subscribe to (optional for direct use)
            max_messages: Maximum number of messages kept in the buffer
            default_level: Minimum level returned by get_messages()
            log_dir: Directory save_log_to_file() writes into
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)
        self.event_manager = event_manager
        self.log_dir = log_dir

        if event_manager is not None:
            self._setup_event_subscriptions(event_manager)

    def _setup_event_subscriptions(self, event_manager: "EventManager") -> None:
        event_manager.subscribe(
            EventType.LOG_MESSAGE,
            self._handle_log_message_event,
            subscriber_name="LogManager.log_message"
        )
        event_manager.subscribe(
            EventType.LOG_SAVE_REQUESTED,
            self._handle_log_save_request,
            subscriber_name="LogManager.log_save_request"
        )

    def _handle_log_message_event(self, event) -> None:
        if not isinstance(event, LogEvent):
            return
        try:
            category = LogCategory[event.category.upper()]
        except (KeyError, AttributeError):
            category = LogCategory.SYSTEM

        level = event.level if isinstance(event.level, LogLevel) else LogLevel.INFO
        self.messages.append(LogEntry(text=event.message, category=category, level=level))

    def _handle_log_save_request(self, event) -> None:
        if isinstance(event, LogSaveRequested):
            self.save_log_to_file()

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM,
            level: LogLevel = LogLevel.INFO) -> None:
        """Add a message to the log directly."""
        self.messages.append(LogEntry(text=text, category=category, level=level))

    # Convenience methods for common categories
    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def round(self, text: str) -> None:
        self.log(text, LogCategory.ROUND)

    def combat(self, text: str) -> None:
        self.log(text, LogCategory.COMBAT)

    def progression(self, text: str) -> None:
        self.log(text, LogCategory.PROGRESSION)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG, LogLevel.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING, LogLevel.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR, LogLevel.ERROR)

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[set[LogCategory]] = None) -> list[LogEntry]:
        """Get recent messages, filtered by category and level.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Categories to include (None for all enabled)

        Returns:
            Matching messages, oldest first
        """
        wanted = self.enabled_categories if categories is None else categories & self.enabled_categories
        filtered = [
            msg for msg in self.messages
            if msg.category in wanted and msg.level.value >= self.log_level.value
        ]

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def get_formatted(self, count: Optional[int] = None) -> list[str]:
        return [msg.format() for msg in self.get_messages(count)]

    def clear(self) -> None:
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        return LogCategory.DEBUG in self.enabled_categories and self.log_level == LogLevel.DEBUG

    def toggle_debug(self) -> None:
        """Toggle debug message visibility."""
        if self.is_debug_enabled():
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

    def save_log_to_file(self) -> Optional[str]:
        """Save all messages, ignoring filters, to a timestamped log file.

        Returns:
            Path of the written file, or None if writing failed
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = os.path.join(self.log_dir, f"arena_{timestamp}.log")

        try:
            os.makedirs(self.log_dir, exist_ok=True)
            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Arena Grinder - Run Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                for msg in self.messages:
                    timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                    f.write(f"[{timestamp_str}] [{msg.category.name}] {msg.text}\n")
        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return None

        self.system(f"Run log saved to {filepath}")
        return filepath
