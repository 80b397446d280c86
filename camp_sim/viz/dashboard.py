"""matplotlib dashboard and static reports of the camp's daily metrics."""

from __future__ import annotations

import os

import matplotlib.pyplot as plt


class Dashboard:
    """Live 2x2 dashboard, refreshed at the end of every game day."""

    def __init__(self) -> None:
        self._initialized = False
        self._fig = None
        self._axes = None

    def initialize(self) -> None:
        """Set up the matplotlib figure and subplots."""
        plt.ion()
        self._fig, axes = plt.subplots(2, 2, figsize=(12, 8))
        self._fig.suptitle("Camp Dashboard", fontsize=14)
        self._axes = {
            "stockpile": axes[0, 0],
            "fire": axes[0, 1],
            "hits": axes[1, 0],
            "status": axes[1, 1],
        }
        for ax in axes.flat:
            ax.grid(True, alpha=0.3)
        plt.tight_layout()
        self._initialized = True
        plt.pause(0.01)

    def update(self, day: int, metrics: "MetricsCollector") -> None:  # noqa: F821
        """Redraw every panel from the collected snapshots."""
        if not self._initialized:
            self.initialize()

        snapshots = metrics.snapshots
        if not snapshots:
            return

        _plot_stockpile(self._axes["stockpile"], snapshots)
        _plot_fire(self._axes["fire"], snapshots)
        _plot_hits(self._axes["hits"], snapshots)
        _plot_status(self._axes["status"], snapshots[-1])

        self._fig.suptitle(f"Camp Dashboard - Day {day}", fontsize=14)
        plt.tight_layout()
        plt.pause(0.01)

    def save(self, filepath: str) -> None:
        """Save the current dashboard as an image."""
        if self._fig:
            self._fig.savefig(filepath, dpi=150, bbox_inches="tight")

    def close(self) -> None:
        if self._fig:
            plt.close(self._fig)

    # ------------------------------------------------------------------
    # Post-hoc static plots
    # ------------------------------------------------------------------

    @staticmethod
    def comprehensive_report(metrics: "MetricsCollector", output_dir: str) -> list[str]:  # noqa: F821
        """Save one PNG per panel into *output_dir*. Returns the written paths."""
        snapshots = metrics.snapshots
        if not snapshots:
            return []
        os.makedirs(output_dir, exist_ok=True)

        panels = [
            ("stockpile.png", lambda ax: _plot_stockpile(ax, snapshots)),
            ("fire.png", lambda ax: _plot_fire(ax, snapshots)),
            ("mob_hits.png", lambda ax: _plot_hits(ax, snapshots)),
            ("status.png", lambda ax: _plot_status(ax, snapshots[-1])),
        ]
        paths: list[str] = []
        for filename, draw in panels:
            fig, ax = plt.subplots(figsize=(10, 5))
            draw(ax)
            path = os.path.join(output_dir, filename)
            fig.savefig(path, dpi=150)
            plt.close(fig)
            paths.append(path)

        print(f"Reports saved to {output_dir}/")
        return paths


# ---------------------------------------------------------------------------
# Panels
# ---------------------------------------------------------------------------

def _plot_stockpile(ax, snapshots) -> None:
    days = [s.day for s in snapshots]
    ax.clear()
    ax.set_title("Stockpile")
    ax.plot(days, [s.wood for s in snapshots], color="saddlebrown", linewidth=1.5, label="Wood")
    ax.plot(days, [s.food for s in snapshots], "r-", linewidth=1.5, label="Food")
    ax.plot(days, [s.plants for s in snapshots], color="purple", linewidth=1.5, label="Herbs")
    ax.set_xlabel("Day")
    ax.legend(fontsize=8)
    ax.grid(True, alpha=0.3)


def _plot_fire(ax, snapshots) -> None:
    days = [s.day for s in snapshots]
    ax.clear()
    ax.set_title("Fire Fuel at Day End")
    ax.bar(days, [s.fire_time_left for s in snapshots], color="orange")
    ax.set_xlabel("Day")
    ax.set_ylabel("Hours")
    ax.grid(True, alpha=0.3)


def _plot_hits(ax, snapshots) -> None:
    days = [s.day for s in snapshots]
    ax.clear()
    ax.set_title("Mob Hits per Day")
    ax.plot(days, [s.hits for s in snapshots], "k-", linewidth=1.5, label="Hits")
    ax.plot(days, [s.infections for s in snapshots], "g--", linewidth=1, label="Infections")
    ax.set_xlabel("Day")
    ax.legend(fontsize=8)
    ax.grid(True, alpha=0.3)


def _plot_status(ax, latest) -> None:
    ax.clear()
    ax.set_title(f"Villager Status (Day {latest.day})")
    if latest.status_counts:
        labels = list(latest.status_counts.keys())
        sizes = list(latest.status_counts.values())
        ax.pie(sizes, labels=labels, autopct="%1.0f%%", textprops={"fontsize": 8})
