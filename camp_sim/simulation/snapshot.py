"""Read-only, versioned views of the simulation for the render/UI layer.

The engine keeps the mutable truth; consumers only ever get these frozen
copies, so holding on to one never races the next tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from camp_sim.agents.meeple import Meeple
from camp_sim.agents.mob import Mob
from camp_sim.core.clock import GameClock
from camp_sim.economy.stockpile import Stockpile
from camp_sim.world.resources import ResourceNode
from camp_sim.world.spatial import Position


@dataclass(frozen=True)
class MeepleView:
    id: int
    name: str
    role: str
    color: str
    status: str
    action: str
    position: Position
    base_position: Position
    target_position: Optional[Position]
    target_kind: str
    target_node_id: Optional[int]
    target_resource: Optional[str]
    action_timer: float
    stun_timer: float
    last_hit_time: float


@dataclass(frozen=True)
class MobView:
    id: int
    position: Position
    angle: float
    state: str
    dash_target: Optional[Position]
    last_hit_time: float


@dataclass(frozen=True)
class NodeView:
    node_id: int
    kind: str
    position: Position
    wood_available: bool
    food_available: bool
    available: bool


@dataclass(frozen=True)
class EconomyView:
    """Clock, stockpiles, and the rolling log at one publish."""

    version: int
    day: int
    hour: float
    is_night: bool
    fire_time_left: float
    wood: int
    food: int
    plants: int
    population: int
    logs: tuple[str, ...]


@dataclass(frozen=True)
class FrameSnapshot:
    version: int
    frame: int
    session_time: float
    meeples: tuple[MeepleView, ...]
    mobs: tuple[MobView, ...]
    trees: tuple[NodeView, ...]
    plants: tuple[NodeView, ...]
    economy: EconomyView
    selected_id: Optional[int]
    pending_gather: bool

    def meeple(self, meeple_id: int) -> Optional[MeepleView]:
        for view in self.meeples:
            if view.id == meeple_id:
                return view
        return None


def meeple_view(m: Meeple) -> MeepleView:
    return MeepleView(
        id=m.id,
        name=m.name,
        role=m.role,
        color=m.color,
        status=m.status.value,
        action=m.action.value,
        position=m.position,
        base_position=m.base_position,
        target_position=m.target_position,
        target_kind=m.action_target.kind.value,
        target_node_id=m.action_target.node_id,
        target_resource=m.target_resource.value if m.target_resource else None,
        action_timer=m.action_timer,
        stun_timer=m.stun_timer,
        last_hit_time=m.last_hit_time,
    )


def mob_view(mob: Mob) -> MobView:
    return MobView(
        id=mob.id,
        position=mob.position,
        angle=mob.angle,
        state=mob.state.value,
        dash_target=mob.dash_target,
        last_hit_time=mob.last_hit_time,
    )


def node_view(node: ResourceNode) -> NodeView:
    return NodeView(
        node_id=node.node_id,
        kind=node.kind.value,
        position=node.position,
        wood_available=node.wood_available,
        food_available=node.food_available,
        available=node.available,
    )


class SnapshotPublisher:
    """Builds snapshots, republishing the heavy parts only when asked.

    Meeples and mobs change every tick and are always copied. The economy
    and resource nodes are copied on a heavy publish and reused otherwise.
    """

    def __init__(self) -> None:
        self.version: int = 0
        self.heavy_version: int = 0
        self.current: Optional[FrameSnapshot] = None
        self._economy: Optional[EconomyView] = None
        self._trees: tuple[NodeView, ...] = ()
        self._plants: tuple[NodeView, ...] = ()

    def publish(
        self,
        engine: "SimulationEngine",  # noqa: F821
        heavy: bool,
    ) -> FrameSnapshot:
        self.version += 1
        if heavy or self._economy is None:
            self.heavy_version += 1
            self._economy = self._economy_view(engine.clock, engine.stockpile, engine)
            self._trees = tuple(node_view(n) for n in engine.resource_manager.trees)
            self._plants = tuple(node_view(n) for n in engine.resource_manager.plants)

        self.current = FrameSnapshot(
            version=self.version,
            frame=engine.frame,
            session_time=engine.session_time,
            meeples=tuple(meeple_view(m) for m in engine.meeples.values()),
            mobs=tuple(mob_view(m) for m in engine.mobs.values()),
            trees=self._trees,
            plants=self._plants,
            economy=self._economy,
            selected_id=engine.commands.selected_id,
            pending_gather=engine.commands.pending_gather,
        )
        return self.current

    def _economy_view(
        self, clock: GameClock, stockpile: Stockpile, engine: "SimulationEngine"  # noqa: F821
    ) -> EconomyView:
        return EconomyView(
            version=self.heavy_version,
            day=clock.day,
            hour=clock.hour,
            is_night=clock.is_night,
            fire_time_left=clock.fire_time_left,
            wood=stockpile.wood,
            food=stockpile.food,
            plants=stockpile.plants,
            population=sum(1 for m in engine.meeples.values() if m.is_alive),
            logs=tuple(engine.logger.recent),
        )
