"""
Error taxonomy for the arena simulator.

Every error the simulation raises on purpose derives from ``ArenaError`` so a
host can catch the whole family in one place:

- ``InvalidStateError``: an operation was called outside the state it is
  valid in (attacking a finished session, starting a round after the run is
  complete). The caller recovers by fixing its call sequence.
- ``ConfigurationError``: a config value was rejected when the config object
  was built. Also a ``ValueError`` so generic validation handlers catch it.
"""

from typing import Any, Optional


class ArenaError(Exception):
    """Base class for all simulator errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} ({context})"


class InvalidStateError(ArenaError):
    """Raised when an operation is invoked outside its valid state."""


class ConfigurationError(ArenaError, ValueError):
    """Raised when configuration values are rejected at construction time."""
