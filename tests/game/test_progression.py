"""
Unit tests for the ProgressionEngine.

Tests XP grants, multi-level jumps, the level cap and run completion.
"""
import pytest

from arena_grinder.core.data import XPCurveKind
from arena_grinder.game.config import ProgressionConfig, XPCurve
from arena_grinder.game.progression import LevelUpEvent, ProgressionEngine


@pytest.fixture
def engine(linear10_progression):
    return ProgressionEngine(linear10_progression)


class TestInitialState:
    """Test a fresh engine."""

    def test_starts_at_level_one(self, engine):
        player = engine.player

        assert player.level == 1
        assert player.xp == 0
        assert player.xp_to_next == 10
        assert player.hp == player.max_hp == 20
        assert player.wins == player.losses == 0

    def test_damage_uses_formula(self, engine):
        assert engine.damage == 2
        assert engine.damage_at(5) == 6


class TestGrantXP:
    """Test XP grants and level-ups."""

    def test_below_threshold_returns_none(self, engine):
        assert engine.grant_xp(5) is None
        assert engine.player.xp == 5
        assert engine.player.level == 1

    def test_exact_threshold_levels_up(self, engine):
        event = engine.grant_xp(10)

        assert event is not None
        assert event.levels_gained == 1
        assert engine.player.level == 2
        assert engine.player.xp == 0
        assert engine.player.xp_to_next == 20

    def test_multi_level_jump(self, engine):
        # Thresholds 10 and 20 are both paid for; 5 left over
        event = engine.grant_xp(35)

        assert event == LevelUpEvent(
            from_level=1,
            to_level=3,
            levels_gained=2,
            old_damage=2,
            new_damage=4,
            old_xp_to_next=10,
            new_xp_to_next=30,
            xp_remainder=5,
        )
        assert engine.player.level == 3
        assert engine.player.xp == 5

    def test_grants_accumulate(self, engine):
        assert engine.grant_xp(6) is None
        event = engine.grant_xp(6)

        assert event.from_level == 1
        assert event.to_level == 2
        assert event.xp_remainder == 2

    def test_zero_grant(self, engine):
        assert engine.grant_xp(0) is None
        assert engine.player.total_xp == 0

    def test_negative_grant_rejected(self, engine):
        with pytest.raises(ValueError):
            engine.grant_xp(-1)
        assert engine.player.xp == 0

    def test_monotonic_level_and_total_xp(self, engine):
        previous_level = engine.player.level
        previous_total = engine.player.total_xp

        for amount in [3, 0, 17, 40, 1, 90, 250, 7]:
            engine.grant_xp(amount)
            assert engine.player.level >= previous_level
            assert engine.player.total_xp == previous_total + amount
            previous_level = engine.player.level
            previous_total = engine.player.total_xp

    def test_xp_to_next_tracks_level(self, engine):
        engine.grant_xp(500)
        assert engine.player.xp_to_next == engine.xp_to_next(engine.player.level)


class TestLevelCap:
    """Test behavior at the target level."""

    @pytest.fixture
    def capped(self):
        return ProgressionEngine(
            ProgressionConfig(curve=XPCurve(XPCurveKind.LINEAR, 10), target_level=3)
        )

    def test_never_exceeds_target(self, capped):
        event = capped.grant_xp(1000)

        assert event.to_level == 3
        assert capped.player.level == 3
        assert capped.is_run_complete()

    def test_xp_beyond_cap_is_retained(self, capped):
        capped.grant_xp(1000)
        assert capped.player.xp == 1000 - 10 - 20

        assert capped.grant_xp(50) is None
        assert capped.player.xp == 1020
        assert capped.player.level == 3

    def test_target_level_one_is_complete_from_start(self):
        engine = ProgressionEngine(ProgressionConfig(target_level=1))

        assert engine.is_run_complete()
        assert engine.grant_xp(10_000) is None
        assert engine.player.level == 1

    def test_not_complete_below_target(self, capped):
        capped.grant_xp(10)
        assert not capped.is_run_complete()


class TestCounters:
    """Test wins, losses and reset."""

    def test_record_win_and_loss(self, engine):
        assert engine.record_win() == 1
        assert engine.record_win() == 2
        assert engine.record_loss() == 1
        assert engine.player.wins == 2
        assert engine.player.losses == 1

    def test_reset(self, engine):
        engine.grant_xp(100)
        engine.record_win()
        engine.record_loss()

        engine.reset()

        assert engine.player.level == 1
        assert engine.player.xp == 0
        assert engine.player.total_xp == 0
        assert engine.player.wins == engine.player.losses == 0
