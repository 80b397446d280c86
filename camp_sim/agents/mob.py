"""Hostile creatures roaming around the camp."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from numpy.random import Generator

from camp_sim.core.config import (
    MOB_COUNT,
    MOB_ID_OFFSET,
    MOB_SPAWN_MIN_RADIUS,
    MOB_SPAWN_RADIUS_SPAN,
    MOB_SPEED,
)
from camp_sim.world.spatial import Position


class MobState(Enum):
    PATROL = "PATROL"
    WAIT = "WAIT"
    ATTACK_DASH = "ATTACK_DASH"
    FLEEING = "FLEEING"


@dataclass
class Mob:
    """A single creature. ``angle`` is its facing on the ground plane."""

    id: int
    position: Position
    angle: float = 0.0
    speed: float = MOB_SPEED
    state: MobState = MobState.PATROL
    wait_timer: float = 0.0
    dash_target: Optional[Position] = None
    target_meeple_id: Optional[int] = None
    last_hit_time: float = -999.0


def spawn_mobs(rng: Generator, count: int = MOB_COUNT, speed: float = MOB_SPEED) -> list[Mob]:
    """Spread mobs evenly around the camp, just outside it, facing along the ring."""
    mobs: list[Mob] = []
    for i in range(count):
        angle = (i / count) * math.pi * 2
        dist = MOB_SPAWN_MIN_RADIUS + rng.random() * MOB_SPAWN_RADIUS_SPAN
        mobs.append(
            Mob(
                id=i + MOB_ID_OFFSET,
                position=(math.sin(angle) * dist, 0.0, math.cos(angle) * dist),
                angle=angle + math.pi / 2,
                speed=speed,
            )
        )
    return mobs
