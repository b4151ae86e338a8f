"""Arena Grinder: a turn-based progression and combat simulator."""

__version__ = "0.1.0"
