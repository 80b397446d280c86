"""Meeple behaviour: walk to orders, work on them, and come home."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from camp_sim.agents.meeple import WORK_ACTIONS, Action, Meeple, Status
from camp_sim.core.clock import GameClock
from camp_sim.core.config import Tuning
from camp_sim.economy.stockpile import Stockpile
from camp_sim.viz.logger import SimLogger
from camp_sim.world.resources import ResourceManager, ResourceType
from camp_sim.world.spatial import distance, normalize


# Log line for each harvest type
_HARVEST_MESSAGES: dict[ResourceType, str] = {
    ResourceType.WOOD: "{name} got wood.",
    ResourceType.FOOD: "{name} got apples.",
    ResourceType.PLANTS: "{name} got herbs.",
}


class MeepleAI:
    """Per-tick movement and work progress for every meeple.

    Orders (MOVING, LIGHT_FIRE) come from the command layer; this class
    only carries them out. Stunned meeples are frozen until the stun
    wears off.
    """

    def __init__(
        self,
        tuning: Tuning,
        logger: SimLogger,
        metrics: Optional["MetricsCollector"] = None,  # noqa: F821
    ) -> None:
        self.tuning = tuning
        self._logger = logger
        self._metrics = metrics

    def step(
        self,
        meeples: dict[int, Meeple],
        resources: ResourceManager,
        stockpile: Stockpile,
        clock: GameClock,
        now: float,
        dt: float,
    ) -> bool:
        """Advance every meeple by *dt* seconds.

        Returns True when the stockpile, fire, or resource nodes changed.
        """
        economy_changed = False
        for meeple in meeples.values():
            if not meeple.is_alive:
                continue
            if meeple.is_stunned:
                meeple.stun_timer -= dt
                continue

            if meeple.action in (Action.MOVING, Action.RETURNING):
                self._travel(meeple, resources, dt)
            elif meeple.action in WORK_ACTIONS:
                meeple.action_timer += dt
                if meeple.action_timer > self.tuning.action_resolve_seconds:
                    if self._resolve_work(meeple, resources, stockpile, clock, now):
                        economy_changed = True
                    meeple.order_return()
        return economy_changed

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def _travel(self, meeple: Meeple, resources: ResourceManager, dt: float) -> None:
        returning = meeple.action is Action.RETURNING
        target = meeple.base_position if returning else meeple.target_position
        if target is None:
            # A move order without a destination cannot finish; send them home.
            meeple.order_return()
            return

        d = distance(meeple.position, target)
        if returning or meeple.action_target.is_fire:
            threshold = self.tuning.arrival_return_distance
        else:
            threshold = self.tuning.arrival_resource_distance

        if d < threshold:
            self._arrive(meeple)
            return

        dx, dz = normalize(target[0] - meeple.position[0], target[2] - meeple.position[2], 0.001)
        if d > self.tuning.tree_avoid_start_distance:
            dx, dz = self._avoid_trees(meeple, resources, dx, dz)

        flen = math.hypot(dx, dz) or 0.001
        speed = self.tuning.char_speed * dt
        if meeple.is_slowed:
            speed *= self.tuning.slow_speed_factor

        x, y, z = meeple.position
        nx = x + dx / flen * speed
        nz = z + dz / flen * speed
        if np.isfinite(nx) and np.isfinite(nz):
            meeple.position = (float(nx), y, float(nz))

    def _avoid_trees(
        self, meeple: Meeple, resources: ResourceManager, dx: float, dz: float
    ) -> tuple[float, float]:
        """Push the heading away from trees the meeple is brushing past."""
        radius = self.tuning.tree_avoid_radius
        target_id = meeple.action_target.node_id if meeple.action_target.is_node else None
        px, _, pz = meeple.position
        for tree in resources.trees:
            if tree.node_id == target_id:
                continue
            td = distance(meeple.position, tree.position)
            if td < radius:
                push = (radius - td) / radius
                dx += (px - tree.position[0]) * push * self.tuning.tree_avoid_strength
                dz += (pz - tree.position[2]) * push * self.tuning.tree_avoid_strength
        return dx, dz

    @staticmethod
    def _arrive(meeple: Meeple) -> None:
        if meeple.action is Action.RETURNING:
            meeple.action = Action.IDLE
            meeple.position = meeple.base_position
            return

        if meeple.action_target.is_fire:
            meeple.action = Action.LIGHTING_FIRE
        elif meeple.target_resource is ResourceType.WOOD:
            meeple.action = Action.CHOPPING
        else:
            meeple.action = Action.GATHERING
        meeple.action_timer = 0.0

    # ------------------------------------------------------------------
    # Work
    # ------------------------------------------------------------------

    def _resolve_work(
        self,
        meeple: Meeple,
        resources: ResourceManager,
        stockpile: Stockpile,
        clock: GameClock,
        now: float,
    ) -> bool:
        """Apply the result of a finished work action once.

        Returns False when the target was already gone (someone else took
        the apples or herbs first).
        """
        if meeple.action is Action.LIGHTING_FIRE:
            clock.add_fuel(self.tuning.fire_hours_per_lighting)
            if self._metrics is not None:
                self._metrics.record_fire_lit()
            self._logger.log(SimLogger.FIRE, "Fire lit.", [meeple.id], time=now, day=clock.day)
            return True

        resource = meeple.target_resource
        node = resources.get_node(meeple.action_target.node_id)
        if resource is None or node is None or not node.take(resource):
            return False

        bonus = self.tuning.fit_harvest_bonus if meeple.status is Status.FIT else 1
        amount = self.tuning.harvest_yields[resource.value] * bonus
        stockpile.add(resource, amount)
        if self._metrics is not None:
            self._metrics.record_harvest(resource, amount)
        self._logger.log(
            SimLogger.HARVEST,
            _HARVEST_MESSAGES[resource].format(name=meeple.name),
            [meeple.id],
            time=now,
            day=clock.day,
            node_id=node.node_id,
            amount=amount,
        )
        return True
