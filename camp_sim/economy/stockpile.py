"""Shared camp stockpiles: wood, food, and herbs."""

from __future__ import annotations

from dataclasses import dataclass

from camp_sim.core.config import START_FOOD, START_PLANTS, START_WOOD
from camp_sim.world.resources import ResourceType


@dataclass
class Stockpile:
    """Camp-wide resource counters. Counts never go below zero."""

    wood: int = START_WOOD
    food: int = START_FOOD
    plants: int = START_PLANTS

    def amount(self, resource: ResourceType) -> int:
        return getattr(self, resource.value)

    def add(self, resource: ResourceType, amount: int) -> None:
        setattr(self, resource.value, self.amount(resource) + amount)

    def can_afford(self, resource: ResourceType, amount: int) -> bool:
        return self.amount(resource) >= amount

    def spend(self, resource: ResourceType, amount: int) -> bool:
        """Remove *amount* if available. Returns False and changes nothing otherwise."""
        if not self.can_afford(resource, amount):
            return False
        setattr(self, resource.value, self.amount(resource) - amount)
        return True
