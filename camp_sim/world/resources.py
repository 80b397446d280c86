"""Harvestable trees and herb plants around the camp."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from numpy.random import Generator

from camp_sim.core.config import (
    PLANT_COUNT,
    PLANT_ID_OFFSET,
    PLANT_MIN_RADIUS,
    PLANT_RADIUS_SPAN,
    TREE_COUNT,
    TREE_FOOD_CHANCE,
    TREE_ID_OFFSET,
    TREE_MIN_RADIUS,
    TREE_MIN_SPACING,
    TREE_PLACEMENT_ATTEMPTS,
    TREE_RADIUS_SPAN,
)
from camp_sim.world.spatial import Position, distance


class NodeKind(Enum):
    TREE = "tree"
    PLANT = "plant"


class ResourceType(Enum):
    WOOD = "wood"
    FOOD = "food"
    PLANTS = "plants"


# Which node kind yields which resource
_KIND_FOR_RESOURCE: dict[ResourceType, NodeKind] = {
    ResourceType.WOOD: NodeKind.TREE,
    ResourceType.FOOD: NodeKind.TREE,
    ResourceType.PLANTS: NodeKind.PLANT,
}


@dataclass
class ResourceNode:
    """A tree or plant at a fixed position.

    Trees always have wood; their food (apples) can be taken once.
    Plants carry a single one-shot herb harvest in ``available``.
    """

    node_id: int
    kind: NodeKind
    position: Position
    wood_available: bool = False
    food_available: bool = False
    available: bool = False

    def has(self, resource: ResourceType) -> bool:
        """Whether *resource* can currently be harvested here."""
        if _KIND_FOR_RESOURCE[resource] is not self.kind:
            return False
        if resource is ResourceType.WOOD:
            return self.wood_available
        if resource is ResourceType.FOOD:
            return self.food_available
        return self.available

    def take(self, resource: ResourceType) -> bool:
        """Harvest *resource*. Returns False when nothing was there.

        Wood never depletes; food and herbs are consumed.
        """
        if not self.has(resource):
            return False
        if resource is ResourceType.FOOD:
            self.food_available = False
        elif resource is ResourceType.PLANTS:
            self.available = False
        return True


class ResourceManager:
    """Registry of all resource nodes, keyed by id. Nodes are never removed."""

    def __init__(self) -> None:
        self._nodes: dict[int, ResourceNode] = {}

    @property
    def nodes(self) -> list[ResourceNode]:
        return list(self._nodes.values())

    @property
    def trees(self) -> list[ResourceNode]:
        return [n for n in self._nodes.values() if n.kind is NodeKind.TREE]

    @property
    def plants(self) -> list[ResourceNode]:
        return [n for n in self._nodes.values() if n.kind is NodeKind.PLANT]

    def get_node(self, node_id: Optional[int]) -> Optional[ResourceNode]:
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def add_node(self, node: ResourceNode) -> None:
        self._nodes[node.node_id] = node

    def add_tree(self, node_id: int, position: Position, food: bool = False) -> ResourceNode:
        node = ResourceNode(node_id, NodeKind.TREE, position, wood_available=True, food_available=food)
        self.add_node(node)
        return node

    def add_plant(self, node_id: int, position: Position, available: bool = True) -> ResourceNode:
        node = ResourceNode(node_id, NodeKind.PLANT, position, available=available)
        self.add_node(node)
        return node

    def generate_forest(self, rng: Generator) -> None:
        """Scatter trees and plants in rings around the camp."""
        self._generate_trees(rng)
        self._generate_plants(rng)

    def get_nearest(
        self, position: Position, resource: ResourceType
    ) -> Optional[ResourceNode]:
        """Nearest node that currently offers *resource*."""
        best: Optional[ResourceNode] = None
        best_dist = float("inf")
        for node in self._nodes.values():
            if not node.has(resource):
                continue
            d = distance(position, node.position)
            if d < best_dist:
                best_dist = d
                best = node
        return best

    def count_available(self, resource: ResourceType) -> int:
        return sum(1 for n in self._nodes.values() if n.has(resource))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _generate_trees(self, rng: Generator) -> None:
        placed: list[ResourceNode] = []
        attempts = 0
        while len(placed) < TREE_COUNT and attempts < TREE_PLACEMENT_ATTEMPTS:
            attempts += 1
            r = TREE_MIN_RADIUS + rng.random() * TREE_RADIUS_SPAN
            theta = rng.random() * math.pi * 2
            pos = (r * math.sin(theta), 0.0, r * math.cos(theta))
            if any(distance(pos, t.position) < TREE_MIN_SPACING for t in placed):
                continue
            has_food = bool(rng.random() < TREE_FOOD_CHANCE)
            placed.append(self.add_tree(attempts + TREE_ID_OFFSET, pos, food=has_food))

    def _generate_plants(self, rng: Generator) -> None:
        for i in range(PLANT_COUNT):
            angle = rng.random() * math.pi * 2
            dist = PLANT_MIN_RADIUS + rng.random() * PLANT_RADIUS_SPAN
            pos = (math.sin(angle) * dist, 0.0, math.cos(angle) * dist)
            self.add_plant(i + PLANT_ID_OFFSET, pos)
