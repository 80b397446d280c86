"""Shared fixtures for the camp simulation tests."""
from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from camp_sim.agents.meeple import generate_roster
from camp_sim.core.clock import GameClock
from camp_sim.core.config import Tuning
from camp_sim.simulation.engine import SimulationEngine
from camp_sim.viz.logger import SimLogger


@pytest.fixture
def tuning() -> Tuning:
    return Tuning()


@pytest.fixture
def logger() -> SimLogger:
    return SimLogger()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(0)


@pytest.fixture
def clock() -> GameClock:
    """Day 1, 08:00, fire lit for 5 hours."""
    return GameClock()


@pytest.fixture
def camp() -> SimulationEngine:
    """Engine with the starting roster only: no forest, no mobs."""
    engine = SimulationEngine(seed=7)
    engine.meeples = {m.id: m for m in generate_roster()}
    return engine


@pytest.fixture
def world() -> SimulationEngine:
    """Fully initialized engine without mobs."""
    engine = SimulationEngine(seed=7)
    engine.initialize(mob_count=0)
    return engine
