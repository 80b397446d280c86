"""Tests for camp_sim.simulation.timers: TimerScheduler."""
from __future__ import annotations

from camp_sim.simulation.timers import TimerScheduler


class TestSchedule:
    def test_not_due_yet(self) -> None:
        timers = TimerScheduler()
        fired = []
        timers.schedule(0.0, 2.0, lambda: fired.append("eat"))
        assert timers.poll(1.9) == 0
        assert fired == []
        assert len(timers) == 1

    def test_fires_once(self) -> None:
        timers = TimerScheduler()
        fired = []
        timers.schedule(0.0, 2.0, lambda: fired.append("eat"))
        assert timers.poll(2.0) == 1
        assert timers.poll(5.0) == 0
        assert fired == ["eat"]
        assert len(timers) == 0
        assert timers.fired == 1


class TestOrdering:
    def test_due_order(self) -> None:
        timers = TimerScheduler()
        fired = []
        timers.schedule(0.0, 5.0, lambda: fired.append("sleep"))
        timers.schedule(0.0, 2.0, lambda: fired.append("eat"))
        timers.schedule(1.0, 2.0, lambda: fired.append("ritual"))
        timers.poll(10.0)
        assert fired == ["eat", "ritual", "sleep"]

    def test_ties_keep_insertion_order(self) -> None:
        timers = TimerScheduler()
        fired = []
        for name in ("a", "b", "c"):
            timers.schedule(0.0, 1.0, lambda n=name: fired.append(n))
        timers.poll(1.0)
        assert fired == ["a", "b", "c"]

    def test_label_kept(self) -> None:
        timers = TimerScheduler()
        timer = timers.schedule(3.0, 2.0, lambda: None, label="HEAL:2")
        assert timer.due == 5.0
        assert timer.label == "HEAL:2"
