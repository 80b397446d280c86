"""Tests for resource nodes, the stockpile, and spatial helpers."""
from __future__ import annotations

import math

import numpy as np
import pytest

from camp_sim.economy.stockpile import Stockpile
from camp_sim.world.resources import NodeKind, ResourceManager, ResourceType
from camp_sim.world.spatial import (
    distance,
    forward_vector,
    heading,
    is_finite_position,
    normalize,
    radial_distance,
)


class TestResourceNode:
    def test_apples_taken_once(self) -> None:
        rm = ResourceManager()
        tree = rm.add_tree(105, (0.0, 0.0, 5.0), food=True)
        assert tree.take(ResourceType.FOOD)
        assert not tree.take(ResourceType.FOOD)
        assert not tree.food_available

    def test_wood_never_depletes(self) -> None:
        rm = ResourceManager()
        tree = rm.add_tree(105, (0.0, 0.0, 5.0))
        for _ in range(5):
            assert tree.take(ResourceType.WOOD)
        assert tree.wood_available

    def test_herbs_taken_once(self) -> None:
        rm = ResourceManager()
        plant = rm.add_plant(2000, (3.0, 0.0, 0.0))
        assert plant.take(ResourceType.PLANTS)
        assert not plant.has(ResourceType.PLANTS)

    def test_kind_must_match(self) -> None:
        rm = ResourceManager()
        tree = rm.add_tree(105, (0.0, 0.0, 5.0), food=True)
        plant = rm.add_plant(2000, (3.0, 0.0, 0.0))
        assert not tree.has(ResourceType.PLANTS)
        assert not plant.has(ResourceType.WOOD)
        assert not plant.has(ResourceType.FOOD)


class TestResourceManager:
    def test_get_node(self) -> None:
        rm = ResourceManager()
        rm.add_tree(105, (0.0, 0.0, 5.0))
        assert rm.get_node(105).kind is NodeKind.TREE
        assert rm.get_node(999) is None
        assert rm.get_node(None) is None

    def test_nearest_skips_depleted(self) -> None:
        rm = ResourceManager()
        near = rm.add_tree(101, (0.0, 0.0, 2.0), food=False)
        far = rm.add_tree(102, (0.0, 0.0, 9.0), food=True)
        assert rm.get_nearest((0.0, 0.0, 0.0), ResourceType.WOOD) is near
        assert rm.get_nearest((0.0, 0.0, 0.0), ResourceType.FOOD) is far
        far.take(ResourceType.FOOD)
        assert rm.get_nearest((0.0, 0.0, 0.0), ResourceType.FOOD) is None

    def test_count_available(self) -> None:
        rm = ResourceManager()
        rm.add_plant(2000, (1.0, 0.0, 0.0))
        rm.add_plant(2001, (2.0, 0.0, 0.0), available=False)
        assert rm.count_available(ResourceType.PLANTS) == 1


class TestForest:
    def test_generation_layout(self) -> None:
        rm = ResourceManager()
        rm.generate_forest(np.random.default_rng(3))

        trees = rm.trees
        assert 0 < len(trees) <= 60
        for t in trees:
            assert t.node_id > 100
            assert 6.0 <= radial_distance(t.position) < 50.0
            assert t.wood_available
        for i, a in enumerate(trees):
            for b in trees[i + 1:]:
                assert distance(a.position, b.position) >= 3.0

        plants = rm.plants
        assert sorted(p.node_id for p in plants) == list(range(2000, 2015))
        for p in plants:
            assert 8.0 <= radial_distance(p.position) < 28.0
            assert p.available

    def test_same_seed_same_forest(self) -> None:
        a = ResourceManager()
        b = ResourceManager()
        a.generate_forest(np.random.default_rng(11))
        b.generate_forest(np.random.default_rng(11))
        assert [n.position for n in a.nodes] == [n.position for n in b.nodes]


class TestStockpile:
    def test_starting_amounts(self) -> None:
        s = Stockpile()
        assert (s.wood, s.food, s.plants) == (10, 10, 2)

    def test_spend_refuses_overdraft(self) -> None:
        s = Stockpile(food=1)
        assert not s.spend(ResourceType.FOOD, 2)
        assert s.food == 1

    def test_spend_and_add(self) -> None:
        s = Stockpile()
        assert s.spend(ResourceType.WOOD, 5)
        s.add(ResourceType.WOOD, 12)
        assert s.amount(ResourceType.WOOD) == 17


class TestSpatial:
    def test_heading_zero_faces_plus_z(self) -> None:
        assert heading(0.0, 1.0) == 0.0
        fx, fz = forward_vector(0.0)
        assert fx == pytest.approx(0.0)
        assert fz == pytest.approx(1.0)

    def test_normalize_zero_vector(self) -> None:
        assert normalize(0.0, 0.0) == (0.0, 0.0)
        ux, uz = normalize(3.0, 4.0)
        assert math.hypot(ux, uz) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "position",
        [None, (1.0, 2.0), (float("nan"), 0.0, 0.0), (0.0, float("inf"), 0.0), ("a", 0, 0)],
    )
    def test_invalid_positions(self, position) -> None:
        assert not is_finite_position(position)

    def test_valid_position(self) -> None:
        assert is_finite_position((1, 0, -2.5))
        assert is_finite_position([0.0, 0.0, 0.0])
