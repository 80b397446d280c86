"""Data collection, daily statistics, and export."""

from __future__ import annotations

import csv
import os
from dataclasses import dataclass, field
from typing import Optional

from camp_sim.world.resources import ResourceType


@dataclass
class DailySnapshot:
    """End-of-day state of the camp."""

    day: int = 0
    wood: int = 0
    food: int = 0
    plants: int = 0
    fire_time_left: float = 0.0
    hits: int = 0
    infections: int = 0
    fires_lit: int = 0
    wood_gathered: int = 0
    food_gathered: int = 0
    herbs_gathered: int = 0
    rejected_commands: int = 0
    population: int = 0
    status_counts: dict[str, int] = field(default_factory=dict)
    mob_state_counts: dict[str, int] = field(default_factory=dict)


class MetricsCollector:
    """Counts events during the day and snapshots the camp at each rollover."""

    def __init__(self) -> None:
        self.snapshots: list[DailySnapshot] = []
        self._daily_hits: int = 0
        self._daily_infections: int = 0
        self._daily_fires: int = 0
        self._daily_rejections: int = 0
        self._daily_harvest: dict[ResourceType, int] = {r: 0 for r in ResourceType}

    def record_hit(self, infected: bool = False) -> None:
        self._daily_hits += 1
        if infected:
            self._daily_infections += 1

    def record_fire_lit(self) -> None:
        self._daily_fires += 1

    def record_harvest(self, resource: ResourceType, amount: int) -> None:
        self._daily_harvest[resource] += amount

    def record_rejection(self) -> None:
        self._daily_rejections += 1

    def collect_daily(
        self,
        day: int,
        meeples: list["Meeple"],  # noqa: F821
        mobs: list["Mob"],  # noqa: F821
        stockpile: "Stockpile",  # noqa: F821
        clock: "GameClock",  # noqa: F821
    ) -> DailySnapshot:
        """Collect all metrics for the day that just ended."""
        status_counts: dict[str, int] = {}
        for m in meeples:
            status_counts[m.status.value] = status_counts.get(m.status.value, 0) + 1

        mob_state_counts: dict[str, int] = {}
        for mob in mobs:
            mob_state_counts[mob.state.value] = mob_state_counts.get(mob.state.value, 0) + 1

        snapshot = DailySnapshot(
            day=day,
            wood=stockpile.wood,
            food=stockpile.food,
            plants=stockpile.plants,
            fire_time_left=clock.fire_time_left,
            hits=self._daily_hits,
            infections=self._daily_infections,
            fires_lit=self._daily_fires,
            wood_gathered=self._daily_harvest[ResourceType.WOOD],
            food_gathered=self._daily_harvest[ResourceType.FOOD],
            herbs_gathered=self._daily_harvest[ResourceType.PLANTS],
            rejected_commands=self._daily_rejections,
            population=sum(1 for m in meeples if m.is_alive),
            status_counts=status_counts,
            mob_state_counts=mob_state_counts,
        )
        self.snapshots.append(snapshot)

        # Reset daily counters
        self._daily_hits = 0
        self._daily_infections = 0
        self._daily_fires = 0
        self._daily_rejections = 0
        self._daily_harvest = {r: 0 for r in ResourceType}

        return snapshot

    def export_csv(self, filepath: str) -> None:
        """Export all snapshots to CSV."""
        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else ".", exist_ok=True)
        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow([
                "day", "wood", "food", "herbs", "fire_hours", "hits", "infections",
                "fires_lit", "wood_gathered", "food_gathered", "herbs_gathered",
                "rejected_commands", "population",
            ])
            for s in self.snapshots:
                writer.writerow([
                    s.day, s.wood, s.food, s.plants, f"{s.fire_time_left:.2f}",
                    s.hits, s.infections, s.fires_lit, s.wood_gathered,
                    s.food_gathered, s.herbs_gathered, s.rejected_commands,
                    s.population,
                ])

    def summary_report(self, start_day: int = 0, end_day: Optional[int] = None) -> str:
        """Generate a human-readable summary of the simulation period."""
        relevant = [
            s for s in self.snapshots
            if s.day >= start_day and (end_day is None or s.day <= end_day)
        ]
        if not relevant:
            return "No data available for the specified period."

        first = relevant[0]
        last = relevant[-1]
        total_hits = sum(s.hits for s in relevant)
        total_infections = sum(s.infections for s in relevant)
        total_fires = sum(s.fires_lit for s in relevant)

        lines = [
            f"=== Camp Summary: Day {first.day} to Day {last.day} ===",
            f"Duration: {last.day - first.day + 1} days",
            f"",
            f"Danger:",
            f"  Mob hits: {total_hits} ({total_infections} infections)",
            f"  Fires lit: {total_fires}",
            f"",
            f"Gathered:",
            f"  Wood: {sum(s.wood_gathered for s in relevant)}",
            f"  Food: {sum(s.food_gathered for s in relevant)}",
            f"  Herbs: {sum(s.herbs_gathered for s in relevant)}",
            f"",
            f"Final Stockpile:",
            f"  Wood: {last.wood}  Food: {last.food}  Herbs: {last.plants}",
            f"  Fire: {last.fire_time_left:.1f}h left",
            f"  Rejected commands: {sum(s.rejected_commands for s in relevant)}",
        ]

        if last.status_counts:
            lines.append(f"")
            lines.append(f"Villager Status (final day):")
            for status, count in sorted(last.status_counts.items(), key=lambda x: -x[1]):
                lines.append(f"  {status}: {count}")

        return "\n".join(lines)
