"""Villager agents (meeples): identity, status, current order."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from camp_sim.world.resources import ResourceType
from camp_sim.world.spatial import Position


class Status(Enum):
    FIT = "Fit"
    NORMAL = "Normal"
    TIRED = "Tired"
    WOUNDED = "Wounded"
    INFECTED = "Infected"
    DEAD = "Dead"  # reserved: nothing in the simulation sets it


class Action(Enum):
    IDLE = "IDLE"
    MOVING = "MOVING"
    RETURNING = "RETURNING"
    CHOPPING = "CHOPPING"
    GATHERING = "GATHERING"
    LIGHTING_FIRE = "LIGHTING_FIRE"
    EATING = "EATING"
    SLEEPING = "SLEEPING"
    HEALING = "HEALING"
    RITUAL = "RITUAL"


# Actions that progress on a per-tick work timer
WORK_ACTIONS = frozenset({Action.CHOPPING, Action.GATHERING, Action.LIGHTING_FIRE})


class TargetKind(Enum):
    NONE = "none"
    RESOURCE_NODE = "resource_node"
    CAMP_FIRE = "camp_fire"


@dataclass(frozen=True)
class ActionTarget:
    """What a meeple is heading to or working on."""

    kind: TargetKind = TargetKind.NONE
    node_id: Optional[int] = None

    @classmethod
    def node(cls, node_id: int) -> "ActionTarget":
        return cls(TargetKind.RESOURCE_NODE, node_id)

    @classmethod
    def fire(cls) -> "ActionTarget":
        return cls(TargetKind.CAMP_FIRE)

    @property
    def is_fire(self) -> bool:
        return self.kind is TargetKind.CAMP_FIRE

    @property
    def is_node(self) -> bool:
        return self.kind is TargetKind.RESOURCE_NODE


NO_TARGET = ActionTarget()


@dataclass
class Meeple:
    """A player-controlled villager."""

    id: int
    name: str
    role: str
    color: str
    position: Position
    base_position: Position
    status: Status = Status.NORMAL
    action: Action = Action.IDLE
    target_position: Optional[Position] = None
    action_target: ActionTarget = field(default=NO_TARGET)
    target_resource: Optional[ResourceType] = None
    action_timer: float = 0.0
    action_serial: int = 0
    stun_timer: float = 0.0
    last_hit_time: float = -999.0

    @property
    def is_stunned(self) -> bool:
        return self.stun_timer > 0

    @property
    def is_alive(self) -> bool:
        return self.status is not Status.DEAD

    @property
    def is_slowed(self) -> bool:
        return self.status in (Status.WOUNDED, Status.TIRED)

    def order_move(
        self,
        target_position: Position,
        target: ActionTarget,
        resource: Optional[ResourceType] = None,
    ) -> None:
        self.action = Action.MOVING
        self.target_position = target_position
        self.action_target = target
        self.target_resource = resource
        self.action_timer = 0.0

    def order_return(self) -> None:
        """Drop whatever the meeple is doing and head home."""
        self.action = Action.RETURNING
        self.target_position = None
        self.action_target = NO_TARGET
        self.action_timer = 0.0


# ------------------------------------------------------------------
# Starting roster
# ------------------------------------------------------------------

_ROSTER: list[tuple[int, str, str, Status, Position, str]] = [
    (1, "Haldor", "Chef", Status.FIT, (2.0, 0.0, 2.0), "#4a6fa5"),
    (2, "Elara", "Priestess", Status.NORMAL, (-2.0, 0.0, 2.0), "#a54a6f"),
    (3, "Barnaby", "Drunkard", Status.TIRED, (0.0, 0.0, -3.0), "#6fa54a"),
]


def generate_roster() -> list[Meeple]:
    """The three villagers every session starts with."""
    return [
        Meeple(
            id=mid,
            name=name,
            role=role,
            color=color,
            position=home,
            base_position=home,
            status=status,
        )
        for mid, name, role, status, home, color in _ROSTER
    ]
