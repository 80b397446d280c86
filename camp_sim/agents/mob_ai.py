"""Mob behaviour: patrol the camp perimeter, ambush careless villagers, flee."""

from __future__ import annotations

import math
from typing import Optional

from numpy.random import Generator

from camp_sim.agents.meeple import Meeple, Status
from camp_sim.agents.mob import Mob, MobState
from camp_sim.core.clock import GameClock
from camp_sim.core.config import (
    ORBIT_JITTER,
    SPIRAL_RADIAL_WEIGHT,
    SPIRAL_TANGENT_WEIGHT,
    WAIT_MIN_SECONDS,
    WAIT_SPAN_SECONDS,
    Tuning,
)
from camp_sim.viz.logger import SimLogger
from camp_sim.world.spatial import (
    distance,
    forward_vector,
    heading,
    normalize,
    radial_distance,
)


def exclusion_radius(clock: GameClock, tuning: Tuning) -> float:
    """How close to the camp mobs may come. A lit fire keeps them at bay,
    darkness without one lets them creep in."""
    if clock.fire_lit:
        return tuning.exclusion_radius_fire
    if clock.is_night:
        return tuning.exclusion_radius_dark
    return tuning.exclusion_radius_day


class MobAI:
    """Per-tick state machine for every mob.

    PATROL -> ATTACK_DASH when a meeple is close and in the vision cone;
    ATTACK_DASH -> FLEEING once the dash lands (hit or miss);
    FLEEING -> PATROL once back out in the patrol band;
    PATROL <-> WAIT at random while orbiting.
    """

    def __init__(
        self,
        tuning: Tuning,
        rng: Generator,
        logger: SimLogger,
        metrics: Optional["MetricsCollector"] = None,  # noqa: F821
    ) -> None:
        self.tuning = tuning
        self._rng = rng
        self._logger = logger
        self._metrics = metrics

    def step(
        self,
        mobs: dict[int, Mob],
        meeples: dict[int, Meeple],
        clock: GameClock,
        now: float,
        dt: float,
    ) -> None:
        """Advance every mob by *dt* seconds. Hits mutate meeples in place."""
        inner = exclusion_radius(clock, self.tuning)
        outer = inner + self.tuning.patrol_band_width

        for mob in mobs.values():
            if mob.state is MobState.WAIT:
                mob.wait_timer -= dt
                if mob.wait_timer <= 0:
                    mob.state = MobState.PATROL
            elif mob.state is MobState.ATTACK_DASH:
                self._dash(mob, meeples, clock, now, dt)
            elif mob.state is MobState.FLEEING:
                self._flee(mob, outer, dt)
            else:
                if self._scan_for_prey(mob, meeples, clock, now):
                    continue
                self._patrol(mob, inner, outer, dt)

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def _dash(
        self, mob: Mob, meeples: dict[int, Meeple], clock: GameClock, now: float, dt: float
    ) -> None:
        if mob.dash_target is None:
            mob.state = MobState.PATROL
            return

        x, y, z = mob.position
        dx = mob.dash_target[0] - x
        dz = mob.dash_target[2] - z
        dist = math.hypot(dx, dz)

        if dist < self.tuning.dash_arrival_distance:
            for meeple in meeples.values():
                if self._can_hit(mob, meeple, now):
                    self._hit(mob, meeple, clock, now)
            mob.state = MobState.FLEEING
            mob.dash_target = None
            return

        move = self.tuning.mob_dash_speed * dt
        mob.position = (x + dx / dist * move, y, z + dz / dist * move)
        mob.angle = heading(dx, dz)

    def _flee(self, mob: Mob, outer: float, dt: float) -> None:
        dist = radial_distance(mob.position)
        if dist > outer - self.tuning.flee_safe_margin:
            mob.state = MobState.PATROL
            return

        rx, rz = self._outward(mob, dist)
        speed = self.tuning.mob_dash_speed * self.tuning.mob_flee_speed_factor * dt
        x, y, z = mob.position
        mob.position = (x + rx * speed, y, z + rz * speed)
        mob.angle = heading(rx, rz)

    def _patrol(self, mob: Mob, inner: float, outer: float, dt: float) -> None:
        dist = radial_distance(mob.position)
        rx, rz = self._outward(mob, dist)
        tx, tz = -rz, rx

        if dist < inner:
            move_x, move_z = rx, rz
        elif dist > outer:
            move_x = tx * SPIRAL_TANGENT_WEIGHT - rx * SPIRAL_RADIAL_WEIGHT
            move_z = tz * SPIRAL_TANGENT_WEIGHT - rz * SPIRAL_RADIAL_WEIGHT
        else:
            move_x = tx + (self._rng.random() - 0.5) * ORBIT_JITTER
            move_z = tz + (self._rng.random() - 0.5) * ORBIT_JITTER
            if self._rng.random() < self.tuning.wait_chance_per_tick:
                mob.state = MobState.WAIT
                mob.wait_timer = WAIT_MIN_SECONDS + self._rng.random() * WAIT_SPAN_SECONDS
                mob.angle = heading(-mob.position[0], -mob.position[2])
                return

        ux, uz = normalize(move_x, move_z)
        dx = ux * mob.speed * dt
        dz = uz * mob.speed * dt
        x, y, z = mob.position
        mob.position = (x + dx, y, z + dz)

        if dist < inner:
            mob.angle = heading(rx, rz)
        else:
            mob.angle = heading(dx, dz)

    # ------------------------------------------------------------------
    # Aggro and hits
    # ------------------------------------------------------------------

    def _scan_for_prey(
        self, mob: Mob, meeples: dict[int, Meeple], clock: GameClock, now: float
    ) -> bool:
        """Commit to a dash on the first meeple close and inside the vision cone."""
        fx, fz = forward_vector(mob.angle)
        for meeple in meeples.values():
            if not meeple.is_alive or meeple.is_stunned:
                continue
            dist = distance(mob.position, meeple.position)
            if dist >= self.tuning.aggro_distance or dist == 0:
                continue
            dx = meeple.position[0] - mob.position[0]
            dz = meeple.position[2] - mob.position[2]
            dot = fx * (dx / dist) + fz * (dz / dist)
            if dot > self.tuning.aggro_cone_dot:
                mob.state = MobState.ATTACK_DASH
                mob.dash_target = meeple.position
                self._logger.log(
                    SimLogger.COMBAT,
                    f"Mob spotted {meeple.name}! Dashing!",
                    [meeple.id],
                    time=now,
                    day=clock.day,
                    mob_id=mob.id,
                )
                return True
        return False

    def _can_hit(self, mob: Mob, meeple: Meeple, now: float) -> bool:
        if not meeple.is_alive or meeple.is_stunned:
            return False
        if distance(meeple.position, mob.position) >= self.tuning.hit_radius:
            return False
        return now - meeple.last_hit_time > self.tuning.hit_cooldown_seconds

    def _hit(self, mob: Mob, meeple: Meeple, clock: GameClock, now: float) -> None:
        infected = clock.is_night and self._rng.random() < self.tuning.night_infection_chance
        meeple.status = Status.INFECTED if infected else Status.WOUNDED
        meeple.last_hit_time = now
        meeple.stun_timer = self.tuning.stun_seconds
        meeple.order_return()
        mob.last_hit_time = now

        if self._metrics is not None:
            self._metrics.record_hit(infected)
        self._logger.log(
            SimLogger.COMBAT,
            f"{meeple.name} STUNNED! Fleeing...",
            [meeple.id],
            time=now,
            day=clock.day,
            mob_id=mob.id,
            status=meeple.status.value,
        )

    @staticmethod
    def _outward(mob: Mob, dist: float) -> tuple[float, float]:
        """Unit vector from the camp center toward the mob."""
        if dist == 0:
            # Dead center has no outward direction; use the facing instead.
            return forward_vector(mob.angle)
        return mob.position[0] / dist, mob.position[2] / dist
