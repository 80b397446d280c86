"""Frame driver: one ordered simulation step per rendered frame."""

from __future__ import annotations

import math
from typing import Callable, Optional, Union

import numpy as np
from numpy.random import Generator

from camp_sim.agents.meeple import Meeple, generate_roster
from camp_sim.agents.meeple_ai import MeepleAI
from camp_sim.agents.mob import Mob, spawn_mobs
from camp_sim.agents.mob_ai import MobAI
from camp_sim.core.clock import GameClock
from camp_sim.core.config import DEFAULT_FPS, MOB_COUNT, WELCOME_MESSAGE, Tuning
from camp_sim.economy.stockpile import Stockpile
from camp_sim.simulation.commands import CommandController, CommandResult
from camp_sim.simulation.metrics import MetricsCollector
from camp_sim.simulation.snapshot import FrameSnapshot, SnapshotPublisher
from camp_sim.simulation.timers import TimerScheduler
from camp_sim.viz.logger import SimLogger
from camp_sim.world.resources import ResourceManager, ResourceType


class SimulationEngine:
    """Owns every registry and runs the per-frame pipeline.

    Each ``tick`` runs, in order: clock, mobs, meeples, wall-clock timers,
    snapshot publish. A mob hit therefore freezes its victim in the very
    same tick.
    """

    def __init__(
        self,
        seed: int = 42,
        tuning: Optional[Tuning] = None,
        logger: Optional[SimLogger] = None,
    ) -> None:
        self.rng: Generator = np.random.default_rng(seed)
        self.tuning = tuning or Tuning()

        # World state
        self.clock = GameClock(self.tuning.day_length_seconds)
        self.resource_manager = ResourceManager()
        self.stockpile = Stockpile()
        self.meeples: dict[int, Meeple] = {}
        self.mobs: dict[int, Mob] = {}

        # Session time in real seconds, unclamped
        self.session_time: float = 0.0
        self.frame: int = 0

        # Systems
        self.logger = logger or SimLogger()
        self.metrics = MetricsCollector()
        self.timers = TimerScheduler()
        self.mob_ai = MobAI(self.tuning, self.rng, self.logger, self.metrics)
        self.meeple_ai = MeepleAI(self.tuning, self.logger, self.metrics)
        self.commands = CommandController(self)
        self.publisher = SnapshotPublisher()

        self._published_log_revision: int = -1
        self._day_callback: Optional[Callable[[int, MetricsCollector], None]] = None

    def initialize(self, mob_count: int = MOB_COUNT) -> None:
        """Grow the forest, place the villagers and the mobs."""
        self.resource_manager.generate_forest(self.rng)
        self.meeples = {m.id: m for m in generate_roster()}
        self.mobs = {m.id: m for m in spawn_mobs(self.rng, mob_count, self.tuning.mob_speed)}

        self.logger.log(SimLogger.LIFECYCLE, WELCOME_MESSAGE, day=self.clock.day)
        self._publish(heavy=True)

    def set_day_callback(self, callback: Callable[[int, MetricsCollector], None]) -> None:
        """Set a function called with (day, metrics) whenever a day ends."""
        self._day_callback = callback

    @property
    def snapshot(self) -> Optional[FrameSnapshot]:
        """Latest published snapshot."""
        return self.publisher.current

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def tick(self, dt: float) -> Optional[FrameSnapshot]:
        """Advance one frame by *dt* real seconds and publish a snapshot."""
        if not self.meeples:
            return None

        raw_dt = float(dt)
        if not math.isfinite(raw_dt) or raw_dt < 0:
            raw_dt = 0.0
        self.session_time += raw_dt
        self.frame += 1
        step = min(raw_dt, self.tuning.max_frame_dt)

        # 1. Clock
        day_before = self.clock.day
        self.clock.advance(step)

        # 2. Mobs (may stun meeples)
        self.mob_ai.step(self.mobs, self.meeples, self.clock, self.session_time, step)

        # 3. Meeples
        economy_changed = self.meeple_ai.step(
            self.meeples, self.resource_manager, self.stockpile,
            self.clock, self.session_time, step,
        )

        # 4. Timed player actions
        self.timers.poll(self.session_time)

        if self.clock.day != day_before:
            self._end_of_day(day_before)

        # 5. Publish
        heavy = (
            economy_changed
            or self.logger.revision != self._published_log_revision
            or self.rng.random() < self.tuning.heavy_publish_chance
        )
        return self._publish(heavy)

    def run(
        self,
        frames: int,
        dt: float = 1.0 / DEFAULT_FPS,
        autoplay: Optional["AutoPlayer"] = None,  # noqa: F821
    ) -> None:
        """Run a number of frames, letting *autoplay* issue commands between them."""
        for _ in range(frames):
            if autoplay is not None:
                autoplay.act(self)
            self.tick(dt)

    def run_days(
        self,
        days: float,
        fps: int = DEFAULT_FPS,
        autoplay: Optional["AutoPlayer"] = None,  # noqa: F821
    ) -> None:
        """Run for roughly *days* game days at a steady frame rate."""
        dt = 1.0 / fps
        step = min(dt, self.tuning.max_frame_dt)
        frames = int(math.ceil(days * self.tuning.day_length_seconds / step))
        self.run(frames, dt, autoplay)

    # ------------------------------------------------------------------
    # Command API
    # ------------------------------------------------------------------

    def select_unit(self, meeple_id: int) -> CommandResult:
        return self.commands.select_unit(meeple_id)

    def issue_action(self, action_name: str) -> CommandResult:
        return self.commands.issue_action(action_name)

    def issue_gather_target(
        self,
        node_id: int,
        resource_type: Union[ResourceType, str],
        position,
    ) -> CommandResult:
        return self.commands.issue_gather_target(node_id, resource_type, position)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _publish(self, heavy: bool) -> FrameSnapshot:
        if heavy:
            self._published_log_revision = self.logger.revision
        return self.publisher.publish(self, heavy)

    def _end_of_day(self, day: int) -> None:
        self.metrics.collect_daily(
            day, list(self.meeples.values()), list(self.mobs.values()),
            self.stockpile, self.clock,
        )
        self.logger.flush()
        if self._day_callback:
            self._day_callback(day, self.metrics)
