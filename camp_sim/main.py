"""Entry point for a headless camp session."""

from __future__ import annotations

import argparse
import os
import time

from camp_sim.core.config import DEFAULT_FPS


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Medvil Camp Simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--days", type=float, default=3, help="Number of game days to simulate")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS, help="Simulated frame rate")
    parser.add_argument("--verbosity", type=int, default=1, choices=[0, 1, 2, 3], help="Log verbosity level")
    parser.add_argument("--output-dir", type=str, default="results", help="Output directory for results")
    parser.add_argument("--tuning", type=str, default=None, help="TOML file with tuning overrides")
    parser.add_argument("--no-autoplay", action="store_true", help="Run without issuing any commands")
    parser.add_argument("--no-report", action="store_true", help="Skip the PNG reports")
    parser.add_argument("--no-dashboard", action="store_true", help="Disable the live end-of-day dashboard")

    args = parser.parse_args()

    # Import here to allow --help without loading everything
    from camp_sim.core.config import Tuning
    from camp_sim.simulation.autoplay import AutoPlayer
    from camp_sim.simulation.engine import SimulationEngine
    from camp_sim.viz.logger import SimLogger

    tuning = Tuning.from_toml(args.tuning) if args.tuning else None

    print(f"=== Medvil Camp Simulation ===")
    print(f"Days: {args.days} | Seed: {args.seed} | FPS: {args.fps}")
    print(f"Output: {args.output_dir}")
    print()

    logger = SimLogger(
        verbosity=args.verbosity,
        log_file=os.path.join(args.output_dir, "simulation.log"),
        stdout=(args.verbosity > 0),
    )
    engine = SimulationEngine(seed=args.seed, tuning=tuning, logger=logger)

    print("Initializing camp...")
    engine.initialize()
    print(f"  Trees: {len(engine.resource_manager.trees)} | Plants: {len(engine.resource_manager.plants)}")
    print(f"  Villagers: {', '.join(m.name for m in engine.meeples.values())}")
    print(f"  Mobs: {len(engine.mobs)}")
    print()

    dashboard = None
    if not args.no_dashboard:
        try:
            from camp_sim.viz.dashboard import Dashboard
            dashboard = Dashboard()
            dashboard.initialize()
            engine.set_day_callback(lambda day, metrics: dashboard.update(day, metrics))
            print("Live dashboard enabled")
        except Exception as e:
            print(f"Dashboard unavailable ({e}), continuing without it")
            dashboard = None

    player = None if args.no_autoplay else AutoPlayer()

    print(f"Running simulation for {args.days} days...")
    t0 = time.time()

    try:
        engine.run_days(args.days, fps=args.fps, autoplay=player)
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")

    elapsed = time.time() - t0
    print(f"\nSimulation complete: {engine.frame} frames, "
          f"{engine.session_time:.1f}s of session time in {elapsed:.2f}s")
    if player is not None:
        print(f"Autoplay issued {player.orders_issued} orders")

    os.makedirs(args.output_dir, exist_ok=True)

    csv_path = os.path.join(args.output_dir, "metrics.csv")
    engine.metrics.export_csv(csv_path)
    print(f"Metrics exported to {csv_path}")

    if not args.no_report:
        from camp_sim.viz.dashboard import Dashboard
        Dashboard.comprehensive_report(engine.metrics, args.output_dir)

    print()
    print(engine.metrics.summary_report())

    if dashboard:
        dashboard.save(os.path.join(args.output_dir, "dashboard_final.png"))
        dashboard.close()

    engine.logger.export_json(os.path.join(args.output_dir, "events.json"))
    engine.logger.close()

    print(f"\nAll results saved to {args.output_dir}/")


if __name__ == "__main__":
    main()
