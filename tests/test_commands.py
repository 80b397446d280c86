"""Tests for camp_sim.simulation.commands: the player command API."""
from __future__ import annotations

import pytest

from camp_sim.agents.meeple import Action, Status


def _select(engine, meeple_id: int) -> None:
    assert engine.select_unit(meeple_id).accepted


class TestSelect:
    def test_select_and_toggle(self, camp) -> None:
        assert camp.select_unit(1).accepted
        assert camp.commands.selected_id == 1
        assert camp.select_unit(1).accepted
        assert camp.commands.selected_id is None

    def test_unknown_unit(self, camp) -> None:
        result = camp.select_unit(42)
        assert not result.accepted
        assert result.message == "No such unit."
        assert camp.commands.selected_id is None

    def test_busy_unit_refused(self, camp) -> None:
        camp.meeples[2].action = Action.EATING
        result = camp.select_unit(2)
        assert not result.accepted
        assert result.message == "Wait! Elara is busy."

    def test_stunned_unit_can_be_selected(self, camp) -> None:
        elara = camp.meeples[2]
        elara.stun_timer = 1.0
        elara.order_return()
        assert camp.select_unit(2).accepted

    def test_select_clears_pending_gather(self, camp) -> None:
        _select(camp, 1)
        camp.issue_action("GATHER")
        _select(camp, 2)
        assert not camp.commands.pending_gather


class TestRejections:
    def test_unknown_action(self, camp) -> None:
        _select(camp, 1)
        result = camp.issue_action("DANCE")
        assert not result.accepted
        assert result.message == "Unknown action."

    def test_no_selection(self, camp) -> None:
        result = camp.issue_action("EAT")
        assert not result.accepted
        assert result.message == "No unit selected."
        assert camp.stockpile.food == 10

    def test_stunned(self, camp) -> None:
        _select(camp, 1)
        camp.meeples[1].stun_timer = 1.0
        result = camp.issue_action("EAT")
        assert result.message == "Unit is stunned!"
        assert camp.stockpile.food == 10

    def test_busy(self, camp) -> None:
        _select(camp, 1)
        assert camp.issue_action("EAT").accepted
        result = camp.issue_action("SLEEP")
        assert not result.accepted
        assert result.message == "Wait! Haldor is busy."
        assert camp.meeples[1].action is Action.EATING

    def test_each_rejection_logs_once(self, camp) -> None:
        before = len(camp.logger.entries)
        revision = camp.logger.revision
        camp.issue_action("EAT")
        assert len(camp.logger.entries) == before + 1
        assert camp.logger.revision == revision + 1
        assert camp.logger.recent[0] == "No unit selected."

    def test_rejections_are_counted(self, camp) -> None:
        camp.issue_action("EAT")
        camp.select_unit(99)
        snap = camp.metrics.collect_daily(
            1, list(camp.meeples.values()), [], camp.stockpile, camp.clock
        )
        assert snap.rejected_commands == 2


class TestEat:
    def test_not_enough_food(self, camp) -> None:
        camp.stockpile.food = 1
        _select(camp, 2)
        result = camp.issue_action("EAT")
        assert not result.accepted
        assert result.message == "Not enough food."
        assert camp.stockpile.food == 1
        assert camp.meeples[2].status is Status.NORMAL
        assert camp.logger.recent[0] == "Not enough food."

    def test_eat_makes_fit_for_two_seconds(self, camp) -> None:
        camp.stockpile.food = 3
        _select(camp, 2)
        result = camp.issue_action("EAT")
        assert result.accepted
        assert result.message == "Ate food."

        elara = camp.meeples[2]
        assert camp.stockpile.food == 1
        assert elara.status is Status.FIT
        assert elara.action is Action.EATING
        camp.run(10, dt=0.1)
        assert elara.action is Action.EATING
        camp.run(15, dt=0.1)
        assert elara.action is Action.IDLE

    def test_timer_runs_on_session_time(self, camp) -> None:
        # Long frames are clamped for the simulation but not for timers
        _select(camp, 2)
        camp.issue_action("EAT")
        camp.tick(2.5)
        assert camp.meeples[2].action is Action.IDLE

    def test_hit_during_meal_is_not_undone(self, camp) -> None:
        _select(camp, 1)
        camp.issue_action("EAT")
        haldor = camp.meeples[1]
        haldor.order_return()
        camp.timers.poll(10.0)
        assert haldor.action is Action.RETURNING

    def test_interrupted_meal_timer_does_not_end_next_meal(self, camp) -> None:
        _select(camp, 1)
        camp.issue_action("EAT")
        haldor = camp.meeples[1]
        haldor.order_return()
        haldor.action = Action.IDLE
        camp.run(12, dt=0.1)

        assert camp.issue_action("EAT").accepted
        # First meal's timer comes due at 2.0s, second meal runs until 3.2s
        camp.run(13, dt=0.1)
        assert haldor.action is Action.EATING
        camp.run(10, dt=0.1)
        assert haldor.action is Action.IDLE


class TestSleep:
    def test_tired_with_fire_becomes_fit(self, camp) -> None:
        _select(camp, 3)
        result = camp.issue_action("SLEEP")
        assert result.accepted
        assert result.message == "Sleeping..."
        assert camp.meeples[3].status is Status.FIT
        assert camp.meeples[3].action is Action.SLEEPING

    def test_tired_without_fire_becomes_normal(self, camp) -> None:
        camp.clock.fire_time_left = 0.0
        _select(camp, 3)
        camp.issue_action("SLEEP")
        assert camp.meeples[3].status is Status.NORMAL

    def test_normal_without_fire_stays_normal(self, camp) -> None:
        camp.clock.fire_time_left = 0.0
        _select(camp, 2)
        camp.issue_action("SLEEP")
        assert camp.meeples[2].status is Status.NORMAL

    def test_wounded_sleep_does_not_heal(self, camp) -> None:
        camp.meeples[2].status = Status.WOUNDED
        _select(camp, 2)
        camp.issue_action("SLEEP")
        assert camp.meeples[2].status is Status.WOUNDED

    def test_sleep_lasts_five_seconds(self, camp) -> None:
        _select(camp, 3)
        camp.issue_action("SLEEP")
        camp.run(45, dt=0.1)
        assert camp.meeples[3].action is Action.SLEEPING
        camp.run(10, dt=0.1)
        assert camp.meeples[3].action is Action.IDLE


class TestHeal:
    @pytest.mark.parametrize("status", [Status.WOUNDED, Status.INFECTED])
    def test_heal_spends_herb(self, camp, status) -> None:
        camp.meeples[2].status = status
        _select(camp, 2)
        result = camp.issue_action("HEAL")
        assert result.accepted
        assert result.message == "Healed."
        assert camp.stockpile.plants == 1
        assert camp.meeples[2].status is Status.NORMAL
        assert camp.meeples[2].action is Action.HEALING

    def test_no_herbs(self, camp) -> None:
        camp.stockpile.plants = 0
        camp.meeples[2].status = Status.WOUNDED
        _select(camp, 2)
        result = camp.issue_action("HEAL")
        assert not result.accepted
        assert result.message == "Need herbs."
        assert camp.meeples[2].status is Status.WOUNDED


class TestRitual:
    def test_ritual(self, camp) -> None:
        camp.meeples[3].status = Status.INFECTED
        _select(camp, 3)
        result = camp.issue_action("RITUAL")
        assert result.accepted
        assert result.message == "Ritual started."
        assert camp.meeples[3].status is Status.NORMAL
        camp.run(25, dt=0.1)
        assert camp.meeples[3].action is Action.RITUAL
        camp.run(10, dt=0.1)
        assert camp.meeples[3].action is Action.IDLE


class TestLightFire:
    def test_not_enough_wood(self, camp) -> None:
        camp.stockpile.wood = 3
        _select(camp, 1)
        result = camp.issue_action("LIGHT_FIRE")
        assert not result.accepted
        assert result.message == "Need 5 wood."
        assert camp.stockpile.wood == 3
        assert camp.meeples[1].action is Action.IDLE

    def test_heads_to_fire(self, camp) -> None:
        _select(camp, 1)
        result = camp.issue_action("LIGHT_FIRE")
        assert result.message == "Moving to fire..."
        haldor = camp.meeples[1]
        assert haldor.action is Action.MOVING
        assert haldor.action_target.is_fire
        assert haldor.target_position == (0.0, 0.0, 0.0)
        assert camp.stockpile.wood == 5


class TestGather:
    def test_too_tired(self, camp) -> None:
        _select(camp, 3)
        result = camp.issue_action("GATHER")
        assert not result.accepted
        assert result.message == "Too tired."
        assert not camp.commands.pending_gather

    def test_arms_pending_gather(self, camp) -> None:
        _select(camp, 1)
        result = camp.issue_action("GATHER")
        assert result.accepted
        assert result.message == "Select resource."
        assert camp.commands.pending_gather
        assert camp.meeples[1].action is Action.IDLE

    def test_target_requires_gather(self, camp) -> None:
        camp.resource_manager.add_tree(105, (2.0, 0.0, 6.0))
        _select(camp, 1)
        result = camp.issue_gather_target(105, "wood", (2.0, 0.0, 6.0))
        assert not result.accepted
        assert result.message == "Choose Gather first."

    def test_sends_meeple(self, camp) -> None:
        camp.resource_manager.add_tree(105, (2.0, 0.0, 6.0))
        _select(camp, 1)
        camp.issue_action("GATHER")
        entries = len(camp.logger.entries)
        result = camp.issue_gather_target(105, "wood", (2.0, 0.0, 6.0))
        assert result.accepted

        haldor = camp.meeples[1]
        assert haldor.action is Action.MOVING
        assert haldor.action_target.node_id == 105
        assert haldor.target_position == (2.0, 0.0, 6.0)
        assert not camp.commands.pending_gather
        assert len(camp.logger.entries) == entries

    @pytest.mark.parametrize(
        "position",
        [(float("nan"), 0.0, 0.0), (0.0, float("inf"), 0.0), None, (1.0, 2.0)],
    )
    def test_invalid_position(self, camp, position) -> None:
        camp.resource_manager.add_tree(105, (2.0, 0.0, 6.0))
        _select(camp, 1)
        camp.issue_action("GATHER")
        result = camp.issue_gather_target(105, "wood", position)
        assert not result.accepted
        assert result.message == "Invalid target."
        assert camp.meeples[1].action is Action.IDLE
        assert camp.meeples[1].position == (2.0, 0.0, 2.0)

    def test_invalid_resource_name(self, camp) -> None:
        _select(camp, 1)
        camp.issue_action("GATHER")
        result = camp.issue_gather_target(105, "gold", (2.0, 0.0, 6.0))
        assert result.message == "Invalid target."

    def test_unknown_node(self, camp) -> None:
        _select(camp, 1)
        camp.issue_action("GATHER")
        result = camp.issue_gather_target(555, "wood", (2.0, 0.0, 6.0))
        assert not result.accepted
        assert result.message == "Nothing to gather there."

    def test_depleted_node(self, camp) -> None:
        camp.resource_manager.add_tree(105, (2.0, 0.0, 6.0), food=False)
        _select(camp, 1)
        camp.issue_action("GATHER")
        result = camp.issue_gather_target(105, "food", (2.0, 0.0, 6.0))
        assert result.message == "Nothing to gather there."
        assert camp.commands.pending_gather
