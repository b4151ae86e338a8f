"""
Unit tests for the RunController.

Tests round orchestration, win/loss bookkeeping, XP hand-off, run
completion and the events published along the way.
"""
from unittest.mock import Mock

import pytest

from arena_grinder.core.data import EnemyLevelMode, RoundResult, SessionState, XPCurveKind
from arena_grinder.core.errors import InvalidStateError
from arena_grinder.core.events import EventType
from arena_grinder.core.random_source import ScriptedRandomSource
from arena_grinder.game.config import CombatConfig, ProgressionConfig, XPCurve
from arena_grinder.game.run_controller import RunController


def one_shot_progression(**overrides):
    """Player kills any early enemy in one hit and gains exactly one level per win."""
    values = dict(
        # 0.1 * ln(L + 1) rounds to 0 for small L, so every threshold floors to 1 XP
        curve=XPCurve(XPCurveKind.LOGARITHMIC, 0.1),
        player_base_damage=100,
        xp_per_win=1,
        target_level=5,
    )
    values.update(overrides)
    return ProgressionConfig(**values)


@pytest.fixture
def controller(progression_config, no_crit_combat_config):
    return RunController(progression_config, no_crit_combat_config, ScriptedRandomSource([]))


class TestBeginRound:
    """Test round start."""

    def test_first_round(self, controller):
        enemy = controller.begin_round()

        assert controller.round_index == 1
        assert enemy.level == 1
        assert enemy.hp == enemy.max_hp == 8
        assert controller.session_state is SessionState.ACTIVE

    def test_round_in_progress_blocks_new_round(self, controller):
        controller.begin_round()

        with pytest.raises(InvalidStateError):
            controller.begin_round()
        assert controller.round_index == 1

    def test_enemy_level_tracks_round_index(self):
        combat = CombatConfig(enemy_level_mode=EnemyLevelMode.ROUND_INDEX)
        controller = RunController(ProgressionConfig(player_base_damage=500), combat,
                                   ScriptedRandomSource([]))

        levels = []
        for _ in range(3):
            levels.append(controller.begin_round().level)
            controller.on_attack()

        assert levels == [1, 2, 3]
        # 90 xp crosses the 50 xp threshold but not the next 100
        assert controller.player.level == 2

    def test_enemy_level_matches_player(self):
        controller = RunController(one_shot_progression(), CombatConfig(), ScriptedRandomSource([]))

        levels = []
        for _ in range(3):
            levels.append(controller.begin_round().level)
            controller.on_attack()

        assert levels == [1, 2, 3]
        assert controller.round_index == 3

    def test_complete_run_blocks_new_round(self):
        controller = RunController(ProgressionConfig(target_level=1), CombatConfig(),
                                   ScriptedRandomSource([]))

        assert controller.is_run_complete()
        with pytest.raises(InvalidStateError):
            controller.begin_round()
        assert controller.round_index == 0


class TestOnAttack:
    """Test attacks through the controller."""

    def test_requires_round(self, controller):
        with pytest.raises(InvalidStateError):
            controller.on_attack()

    def test_in_progress_attack(self, controller, scripted):
        controller.begin_round()

        report = controller.on_attack(scripted(0.25, 0.5))

        assert report.outcome.result is RoundResult.IN_PROGRESS
        assert report.level_up is None
        assert controller.player.hp == 18
        assert controller.last_outcome == report.outcome

    def test_uses_controller_source_by_default(self, progression_config, no_crit_combat_config):
        source = ScriptedRandomSource([0.25, 0.5])
        controller = RunController(progression_config, no_crit_combat_config, source)
        controller.begin_round()

        controller.on_attack()

        assert source.draws_made == 2

    def test_win_grants_xp_and_levels(self):
        controller = RunController(one_shot_progression(), CombatConfig(), ScriptedRandomSource([]))
        controller.begin_round()

        report = controller.on_attack()

        assert report.outcome.result is RoundResult.WIN
        assert report.level_up is not None
        assert report.level_up.from_level == 1
        assert report.level_up.to_level == 2
        assert controller.player.wins == 1
        assert controller.player.losses == 0
        assert controller.session_state is SessionState.WON

    def test_win_without_level_up(self):
        progression = ProgressionConfig(player_base_damage=100, xp_per_win=10)
        controller = RunController(progression, CombatConfig(), ScriptedRandomSource([]))
        controller.begin_round()

        report = controller.on_attack()

        assert report.level_up is None
        assert controller.player.xp == 10

    def test_loss_counts_and_round_ends(self, scripted):
        progression = ProgressionConfig(player_base_hp=1)
        controller = RunController(progression, CombatConfig(), scripted())
        controller.begin_round()

        report = controller.on_attack(scripted(0.5, 0.9))

        assert report.outcome.result is RoundResult.LOSS
        assert report.level_up is None
        assert controller.player.losses == 1
        assert controller.player.xp == 0
        with pytest.raises(InvalidStateError):
            controller.on_attack(scripted(0.5, 0.9))

    def test_hp_resets_after_loss(self, scripted):
        progression = ProgressionConfig(player_base_hp=2)
        controller = RunController(progression, CombatConfig(), scripted())
        controller.begin_round()
        controller.on_attack(scripted(0.5, 0.1))  # crit for 3 kills a 2 HP player
        assert controller.player.hp == 0

        controller.begin_round()

        assert controller.player.hp == 2
        assert controller.round_index == 2

    def test_run_completes_at_target(self):
        controller = RunController(one_shot_progression(target_level=3), CombatConfig(),
                                   ScriptedRandomSource([]))

        while not controller.is_run_complete():
            controller.begin_round()
            controller.on_attack()

        assert controller.player.level == 3
        assert controller.player.wins == 2
        with pytest.raises(InvalidStateError):
            controller.begin_round()


class TestSnapshotAndRestart:
    """Test read-only views and restarting."""

    def test_snapshot_is_a_copy(self, controller, scripted):
        controller.begin_round()
        controller.on_attack(scripted(0.25, 0.5))

        snapshot = controller.snapshot()
        controller.on_attack(scripted(0.25, 0.5))

        assert snapshot.player.hp == 18
        assert snapshot.enemy.hp == 6
        assert snapshot.round_index == 1
        assert snapshot.session_state is SessionState.ACTIVE
        assert snapshot.player_damage == 2
        assert not snapshot.run_complete

    def test_snapshot_before_first_round(self, controller):
        snapshot = controller.snapshot()

        assert snapshot.enemy is None
        assert snapshot.last_outcome is None
        assert snapshot.session_state is SessionState.NOT_STARTED

    def test_restart(self):
        controller = RunController(one_shot_progression(), CombatConfig(), ScriptedRandomSource([]))
        controller.begin_round()
        controller.on_attack()

        controller.restart()

        assert controller.player.level == 1
        assert controller.player.wins == 0
        assert controller.round_index == 0
        assert controller.session is None
        assert controller.begin_round().level == 1

    def test_status_line(self, controller):
        assert controller.status_line() == "PlayerLevel=1 | Damage=2 | XP=0/50 | Wins=0 | Round=0"


class TestEvents:
    """Test events published for observers."""

    def test_round_events(self, event_manager):
        subscriber = Mock()
        event_manager.subscribe_all(subscriber)
        controller = RunController(one_shot_progression(target_level=2), CombatConfig(),
                                   ScriptedRandomSource([]), event_manager)

        controller.begin_round()
        controller.on_attack()
        event_manager.process_events()

        types = [call.args[0].event_type for call in subscriber.call_args_list]
        assert types[0] is EventType.RUN_STARTED
        for expected in (EventType.ROUND_STARTED, EventType.ATTACK_RESOLVED,
                         EventType.ROUND_ENDED, EventType.PLAYER_LEVELED_UP,
                         EventType.RUN_COMPLETED):
            assert expected in types
        assert types.index(EventType.ROUND_STARTED) < types.index(EventType.ATTACK_RESOLVED)

    def test_level_up_event_payload(self, event_manager):
        subscriber = Mock()
        event_manager.subscribe(EventType.PLAYER_LEVELED_UP, subscriber)
        controller = RunController(one_shot_progression(), CombatConfig(),
                                   ScriptedRandomSource([]), event_manager)

        controller.begin_round()
        report = controller.on_attack()
        event_manager.process_events()

        subscriber.assert_called_once()
        event = subscriber.call_args.args[0]
        assert event.level_up == report.level_up
        assert event.round_index == 1

    def test_loss_logs_warning(self, event_manager, scripted):
        subscriber = Mock()
        event_manager.subscribe(EventType.LOG_MESSAGE, subscriber)
        controller = RunController(ProgressionConfig(player_base_hp=1), CombatConfig(),
                                   scripted(), event_manager)

        controller.begin_round()
        controller.on_attack(scripted(0.5, 0.9))
        event_manager.process_events()

        categories = [call.args[0].category for call in subscriber.call_args_list]
        assert "WARNING" in categories

    def test_works_without_event_manager(self, controller):
        controller.begin_round()
        assert controller.event_manager is None
