"""Scripted player for headless runs.

It only talks to the engine through the command API, exactly like a
human at the control panel would, and only gives orders to idle,
unstunned meeples.
"""

from __future__ import annotations

from camp_sim.agents.meeple import Action, Meeple, Status
from camp_sim.core.config import AUTOPLAY_LOW_FOOD, AUTOPLAY_LOW_HERBS
from camp_sim.world.resources import ResourceNode, ResourceType


class AutoPlayer:
    """Priority-list heuristics: keep the fire going, patch up the wounded,
    rest the tired, and otherwise gather whatever the camp is short of."""

    def __init__(self, fire_reserve_hours: float = 2.0) -> None:
        self.fire_reserve_hours = fire_reserve_hours
        self.orders_issued: int = 0

    def act(self, engine: "SimulationEngine") -> None:  # noqa: F821
        for meeple in engine.meeples.values():
            if meeple.action is not Action.IDLE or meeple.is_stunned or not meeple.is_alive:
                continue
            if self._give_order(engine, meeple):
                self.orders_issued += 1

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _give_order(self, engine: "SimulationEngine", meeple: Meeple) -> bool:  # noqa: F821
        stock = engine.stockpile
        costs = engine.tuning.action_costs

        if self._fire_needs_tending(engine) and stock.wood >= costs["LIGHT_FIRE"]:
            return self._command(engine, meeple, "LIGHT_FIRE")
        if meeple.status in (Status.WOUNDED, Status.INFECTED) and stock.plants >= costs["HEAL"]:
            return self._command(engine, meeple, "HEAL")
        if meeple.status is Status.TIRED:
            return self._command(engine, meeple, "SLEEP")
        if meeple.status is Status.NORMAL and stock.food >= AUTOPLAY_LOW_FOOD:
            return self._command(engine, meeple, "EAT")

        resource = self._most_needed(engine)
        node = engine.resource_manager.get_nearest(meeple.position, resource)
        if node is None and resource is not ResourceType.WOOD:
            resource = ResourceType.WOOD
            node = engine.resource_manager.get_nearest(meeple.position, resource)
        if node is None:
            return False
        return self._gather(engine, meeple, node, resource)

    def _fire_needs_tending(self, engine: "SimulationEngine") -> bool:  # noqa: F821
        if engine.clock.fire_time_left >= self.fire_reserve_hours:
            return False
        # One fire-lighter at a time
        return not any(m.action_target.is_fire for m in engine.meeples.values())

    @staticmethod
    def _most_needed(engine: "SimulationEngine") -> ResourceType:  # noqa: F821
        stock = engine.stockpile
        if stock.plants < AUTOPLAY_LOW_HERBS:
            return ResourceType.PLANTS
        if stock.food < AUTOPLAY_LOW_FOOD:
            return ResourceType.FOOD
        return ResourceType.WOOD

    @staticmethod
    def _select(engine: "SimulationEngine", meeple: Meeple) -> bool:  # noqa: F821
        if engine.commands.selected_id == meeple.id:
            return True
        return engine.select_unit(meeple.id).accepted

    def _command(self, engine: "SimulationEngine", meeple: Meeple, action: str) -> bool:  # noqa: F821
        if not self._select(engine, meeple):
            return False
        return engine.issue_action(action).accepted

    def _gather(
        self,
        engine: "SimulationEngine",  # noqa: F821
        meeple: Meeple,
        node: ResourceNode,
        resource: ResourceType,
    ) -> bool:
        if not self._command(engine, meeple, "GATHER"):
            return False
        result = engine.issue_gather_target(node.node_id, resource, node.position)
        return result.accepted
