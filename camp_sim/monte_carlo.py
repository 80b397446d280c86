"""Monte Carlo analysis: run N autoplayed camps with different seeds, aggregate statistics."""

from __future__ import annotations

import csv
import os
import statistics
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np

from camp_sim.core.config import DEFAULT_FPS, Tuning


@dataclass
class RunResult:
    """Summary of a single simulation run."""
    seed: int
    days_completed: int
    total_hits: int
    total_infections: int
    fires_lit: int
    wood_gathered: int
    food_gathered: int
    herbs_gathered: int
    final_wood: int
    final_food: int
    final_plants: int
    final_fire_hours: float
    cold_nights: int  # nights that ended with the fire out
    orders_issued: int
    elapsed_seconds: float


def run_single(
    seed: int,
    days: int,
    fps: int = DEFAULT_FPS,
    tuning: Optional[Tuning] = None,
) -> RunResult:
    """Run one autoplayed session and return its summary."""
    from camp_sim.simulation.autoplay import AutoPlayer
    from camp_sim.simulation.engine import SimulationEngine
    from camp_sim.viz.logger import SimLogger

    engine = SimulationEngine(seed=seed, tuning=tuning, logger=SimLogger(verbosity=-1))
    engine.initialize()
    player = AutoPlayer()

    t0 = time.time()
    engine.run_days(days, fps=fps, autoplay=player)
    elapsed = time.time() - t0

    snaps = engine.metrics.snapshots

    return RunResult(
        seed=seed,
        days_completed=len(snaps),
        total_hits=sum(s.hits for s in snaps),
        total_infections=sum(s.infections for s in snaps),
        fires_lit=sum(s.fires_lit for s in snaps),
        wood_gathered=sum(s.wood_gathered for s in snaps),
        food_gathered=sum(s.food_gathered for s in snaps),
        herbs_gathered=sum(s.herbs_gathered for s in snaps),
        final_wood=engine.stockpile.wood,
        final_food=engine.stockpile.food,
        final_plants=engine.stockpile.plants,
        final_fire_hours=engine.clock.fire_time_left,
        cold_nights=sum(1 for s in snaps if s.fire_time_left <= 0),
        orders_issued=player.orders_issued,
        elapsed_seconds=elapsed,
    )


def monte_carlo(
    n_runs: int = 20,
    days: int = 5,
    fps: int = DEFAULT_FPS,
    output_dir: str = "results/monte_carlo",
    tuning: Optional[Tuning] = None,
) -> list[RunResult]:
    """Run N simulations with generated seeds and report aggregate stats."""

    os.makedirs(output_dir, exist_ok=True)
    results: list[RunResult] = []
    rng = np.random.default_rng(0)
    seeds = [int(s) for s in rng.integers(0, 100_000, size=n_runs)]

    print(f"=== Monte Carlo Simulation ===")
    print(f"Runs: {n_runs} | Days/run: {days} | FPS: {fps}")
    print(f"Seeds: {seeds[:5]}{'...' if n_runs > 5 else ''}")
    print()

    total_t0 = time.time()

    for i, seed in enumerate(seeds):
        result = run_single(seed, days, fps, tuning)
        results.append(result)
        print(
            f"  Run {i+1:>3}/{n_runs} | seed={seed:>5} | "
            f"hits={result.total_hits:>3} ({result.total_infections} inf) | "
            f"wood={result.final_wood:>4} food={result.final_food:>4} "
            f"herbs={result.final_plants:>3} | "
            f"cold nights={result.cold_nights} | {result.elapsed_seconds:.1f}s"
        )

    total_elapsed = time.time() - total_t0
    print(f"\nAll {n_runs} runs completed in {total_elapsed:.1f}s "
          f"({total_elapsed/max(1, n_runs):.1f}s avg)")

    # ── Aggregate Statistics ──────────────────────────────────────────
    print("\n" + "=" * 70)
    print("AGGREGATE RESULTS")
    print("=" * 70)

    print("\nDANGER")
    print(stat_line("Mob hits", [r.total_hits for r in results]))
    print(stat_line("Infections", [r.total_infections for r in results]))
    print(stat_line("Cold nights", [r.cold_nights for r in results]))

    print("\nGATHERING")
    print(stat_line("Wood gathered", [r.wood_gathered for r in results]))
    print(stat_line("Food gathered", [r.food_gathered for r in results]))
    print(stat_line("Herbs gathered", [r.herbs_gathered for r in results]))
    print(stat_line("Fires lit", [r.fires_lit for r in results]))

    print("\nFINAL STOCKPILE")
    print(stat_line("Wood", [r.final_wood for r in results]))
    print(stat_line("Food", [r.final_food for r in results]))
    print(stat_line("Herbs", [r.final_plants for r in results]))
    print(stat_line("Fire hours left", [r.final_fire_hours for r in results], ".2f"))

    unhurt = sum(1 for r in results if r.total_hits == 0)
    print(f"  Runs without a single hit: {unhurt}/{n_runs} "
          f"({unhurt/max(1, n_runs)*100:.0f}%)")

    # ── Export CSV ────────────────────────────────────────────────────
    csv_path = os.path.join(output_dir, "monte_carlo_results.csv")
    export_results(results, csv_path)
    print(f"\nResults exported to {csv_path}")

    return results


def stat_line(label: str, values: list[float], fmt: str = ".1f") -> str:
    if not values:
        return f"  {label}: no data"
    avg = statistics.mean(values)
    med = statistics.median(values)
    std = statistics.stdev(values) if len(values) > 1 else 0
    return (f"  {label:<30s}  mean={avg:{fmt}}  median={med:{fmt}}  std={std:{fmt}}  "
            f"min={min(values):{fmt}}  max={max(values):{fmt}}")


def export_results(results: list[RunResult], csv_path: str) -> None:
    with open(csv_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "seed", "days", "hits", "infections", "fires_lit",
            "wood_gathered", "food_gathered", "herbs_gathered",
            "final_wood", "final_food", "final_herbs", "final_fire_hours",
            "cold_nights", "orders", "elapsed_s",
        ])
        for r in results:
            writer.writerow([
                r.seed, r.days_completed, r.total_hits, r.total_infections,
                r.fires_lit, r.wood_gathered, r.food_gathered, r.herbs_gathered,
                r.final_wood, r.final_food, r.final_plants,
                f"{r.final_fire_hours:.2f}", r.cold_nights, r.orders_issued,
                f"{r.elapsed_seconds:.1f}",
            ])


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Monte Carlo camp simulation")
    parser.add_argument("--runs", type=int, default=20, help="Number of runs")
    parser.add_argument("--days", type=int, default=5, help="Game days per run")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS, help="Simulated frame rate")
    parser.add_argument("--tuning", type=str, default=None, help="TOML file with tuning overrides")
    parser.add_argument("--output-dir", type=str, default="results/monte_carlo")
    args = parser.parse_args()

    monte_carlo(
        n_runs=args.runs,
        days=args.days,
        fps=args.fps,
        output_dir=args.output_dir,
        tuning=Tuning.from_toml(args.tuning) if args.tuning else None,
    )
