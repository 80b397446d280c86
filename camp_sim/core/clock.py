"""Time system for the camp: hours, days, night, and fire fuel."""

from __future__ import annotations

from camp_sim.core.config import (
    DAY_LENGTH_SECONDS,
    NIGHT_END_HOUR,
    NIGHT_START_HOUR,
    START_DAY,
    START_FIRE_HOURS,
    START_HOUR,
)


class GameClock:
    """Manages game time and the fire's remaining fuel."""

    def __init__(
        self,
        day_length_seconds: float = DAY_LENGTH_SECONDS,
        day: int = START_DAY,
        hour: float = START_HOUR,
        fire_time_left: float = START_FIRE_HOURS,
    ) -> None:
        self.day_length_seconds = day_length_seconds
        self.day: int = day
        self.hour: float = hour
        self.fire_time_left: float = fire_time_left

    @property
    def is_night(self) -> bool:
        return self.hour < NIGHT_END_HOUR or self.hour > NIGHT_START_HOUR

    @property
    def fire_lit(self) -> bool:
        return self.fire_time_left > 0

    def advance(self, dt: float) -> float:
        """Advance the clock by *dt* real seconds. Returns the hours elapsed."""
        hours = dt / self.day_length_seconds * 24
        self.hour += hours
        while self.hour >= 24:
            self.hour -= 24
            self.day += 1
        self.fire_time_left = max(0.0, self.fire_time_left - hours)
        return hours

    def add_fuel(self, hours: float) -> None:
        self.fire_time_left += hours
