"""
Basic test fixtures for the arena grinder test suite.

Provides configs, event managers and scripted random sources.
"""

import sys
import os
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from arena_grinder.core.data import XPCurveKind
from arena_grinder.core.events import EventManager
from arena_grinder.core.random_source import ScriptedRandomSource
from arena_grinder.game.config import CombatConfig, ProgressionConfig, XPCurve


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager(enable_debug_logging=False)


@pytest.fixture
def progression_config():
    """Default progression: linear a=50, target 10, 20 HP, 2 (+1/level) damage."""
    return ProgressionConfig()


@pytest.fixture
def combat_config():
    """Default enemy scaling with crits enabled."""
    return CombatConfig()


@pytest.fixture
def no_crit_combat_config():
    """Default enemy scaling without crits."""
    return CombatConfig(crit_chance=0.0)


@pytest.fixture
def linear10_progression():
    """Linear curve with a=10: thresholds 10, 20, 30, ..."""
    return ProgressionConfig(curve=XPCurve(XPCurveKind.LINEAR, 10))


@pytest.fixture
def scripted():
    """Factory for scripted random sources."""
    def _make(*values):
        return ScriptedRandomSource(values)
    return _make
