"""All tunable constants for the camp simulation.

Every magic number in the codebase must reference this file. The ``Tuning``
dataclass bundles them so a session can override any of them from TOML.
"""

from __future__ import annotations

import math
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Union

# =============================================================================
# WORLD
# =============================================================================
CAMP_CENTER: tuple[float, float, float] = (0.0, 0.0, 0.0)

TREE_COUNT: int = 60
TREE_PLACEMENT_ATTEMPTS: int = 1000
TREE_MIN_RADIUS: float = 6.0
TREE_RADIUS_SPAN: float = 44.0
TREE_MIN_SPACING: float = 3.0
TREE_FOOD_CHANCE: float = 0.25
TREE_ID_OFFSET: int = 100

PLANT_COUNT: int = 15
PLANT_MIN_RADIUS: float = 8.0
PLANT_RADIUS_SPAN: float = 20.0
PLANT_ID_OFFSET: int = 2000

# =============================================================================
# TIME
# =============================================================================
DAY_LENGTH_SECONDS: float = 240.0    # real seconds per game day
MAX_FRAME_DT: float = 0.1            # clamp for a single simulation step
NIGHT_START_HOUR: float = 20.0
NIGHT_END_HOUR: float = 6.0

START_DAY: int = 1
START_HOUR: float = 8.0

# =============================================================================
# STARTING ECONOMY
# =============================================================================
START_WOOD: int = 10
START_FOOD: int = 10
START_PLANTS: int = 2
START_FIRE_HOURS: float = 5.0
WELCOME_MESSAGE: str = "Welcome to Medvil. Select a character."
LOG_CAPACITY: int = 5

# =============================================================================
# MEEPLE
# =============================================================================
CHAR_SPEED: float = 3.5
SLOW_SPEED_FACTOR: float = 0.6       # Wounded / Tired
ARRIVAL_RESOURCE_DISTANCE: float = 1.6
ARRIVAL_RETURN_DISTANCE: float = 0.6
TREE_AVOID_START_DISTANCE: float = 2.5
TREE_AVOID_RADIUS: float = 2.0
TREE_AVOID_STRENGTH: float = 2.5
ACTION_RESOLVE_SECONDS: float = 1.0
FIT_HARVEST_BONUS: int = 2

# Resource yields per harvest (before the Fit bonus)
HARVEST_YIELDS: dict[str, int] = {
    "wood": 6,
    "food": 6,
    "plants": 3,
}

FIRE_HOURS_PER_LIGHTING: float = 12.0

# Stockpile costs of player-issued actions
ACTION_COSTS: dict[str, int] = {
    "EAT": 2,
    "HEAL": 1,
    "LIGHT_FIRE": 5,
}

# Wall-clock durations (real seconds) of the timed player actions
ACTION_DURATIONS: dict[str, float] = {
    "EAT": 2.0,
    "HEAL": 2.0,
    "RITUAL": 3.0,
    "SLEEP": 5.0,
}

# =============================================================================
# MOB
# =============================================================================
MOB_COUNT: int = 6
MOB_ID_OFFSET: int = 1000
MOB_SPAWN_MIN_RADIUS: float = 11.0
MOB_SPAWN_RADIUS_SPAN: float = 3.0
MOB_SPEED: float = 1.8               # patrol speed
MOB_DASH_SPEED: float = 8.0          # attack speed
MOB_FLEE_SPEED_FACTOR: float = 0.6

# Patrol band around the camp
EXCLUSION_RADIUS_DAY: float = 13.0
EXCLUSION_RADIUS_FIRE: float = 10.0
EXCLUSION_RADIUS_DARK: float = 5.5   # night without fire
PATROL_BAND_WIDTH: float = 5.0
FLEE_SAFE_MARGIN: float = 2.0
SPIRAL_TANGENT_WEIGHT: float = 0.7
SPIRAL_RADIAL_WEIGHT: float = 0.3
ORBIT_JITTER: float = 0.2
WAIT_CHANCE_PER_TICK: float = 0.005
WAIT_MIN_SECONDS: float = 1.0
WAIT_SPAN_SECONDS: float = 2.0

# Aggro and hits
AGGRO_DISTANCE: float = 2.5
AGGRO_CONE_DOT: float = 0.75         # ~40 degree half-angle
DASH_ARRIVAL_DISTANCE: float = 0.5
HIT_RADIUS: float = 1.5
HIT_COOLDOWN_SECONDS: float = 1.0
STUN_SECONDS: float = 1.0
NIGHT_INFECTION_CHANCE: float = 0.6

# =============================================================================
# FRAME DRIVER
# =============================================================================
HEAVY_PUBLISH_CHANCE: float = 0.05
DEFAULT_FPS: int = 60

# =============================================================================
# AUTOPLAY
# =============================================================================
AUTOPLAY_LOW_FOOD: int = 4
AUTOPLAY_LOW_HERBS: int = 1


@dataclass
class Tuning:
    """Runtime-tunable copy of the constants above.

    Each session owns one instance; systems read from it instead of the
    module constants so overrides never leak across sessions.
    """

    # Time
    day_length_seconds: float = DAY_LENGTH_SECONDS
    max_frame_dt: float = MAX_FRAME_DT

    # Meeple
    char_speed: float = CHAR_SPEED
    slow_speed_factor: float = SLOW_SPEED_FACTOR
    arrival_resource_distance: float = ARRIVAL_RESOURCE_DISTANCE
    arrival_return_distance: float = ARRIVAL_RETURN_DISTANCE
    tree_avoid_start_distance: float = TREE_AVOID_START_DISTANCE
    tree_avoid_radius: float = TREE_AVOID_RADIUS
    tree_avoid_strength: float = TREE_AVOID_STRENGTH
    action_resolve_seconds: float = ACTION_RESOLVE_SECONDS
    fit_harvest_bonus: int = FIT_HARVEST_BONUS
    fire_hours_per_lighting: float = FIRE_HOURS_PER_LIGHTING
    harvest_yields: dict[str, int] = field(default_factory=lambda: dict(HARVEST_YIELDS))
    action_costs: dict[str, int] = field(default_factory=lambda: dict(ACTION_COSTS))
    action_durations: dict[str, float] = field(default_factory=lambda: dict(ACTION_DURATIONS))

    # Mob
    mob_speed: float = MOB_SPEED
    mob_dash_speed: float = MOB_DASH_SPEED
    mob_flee_speed_factor: float = MOB_FLEE_SPEED_FACTOR
    exclusion_radius_day: float = EXCLUSION_RADIUS_DAY
    exclusion_radius_fire: float = EXCLUSION_RADIUS_FIRE
    exclusion_radius_dark: float = EXCLUSION_RADIUS_DARK
    patrol_band_width: float = PATROL_BAND_WIDTH
    flee_safe_margin: float = FLEE_SAFE_MARGIN
    wait_chance_per_tick: float = WAIT_CHANCE_PER_TICK
    aggro_distance: float = AGGRO_DISTANCE
    aggro_cone_dot: float = AGGRO_CONE_DOT
    dash_arrival_distance: float = DASH_ARRIVAL_DISTANCE
    hit_radius: float = HIT_RADIUS
    hit_cooldown_seconds: float = HIT_COOLDOWN_SECONDS
    stun_seconds: float = STUN_SECONDS
    night_infection_chance: float = NIGHT_INFECTION_CHANCE

    # Frame driver
    heavy_publish_chance: float = HEAVY_PUBLISH_CHANCE

    @classmethod
    def from_dict(cls, data: dict) -> "Tuning":
        """Build a Tuning from a (possibly sectioned) mapping of overrides.

        Nested tables are flattened, so ``[mob] dash_speed = 9`` and a
        top-level ``mob_dash_speed = 9`` are equivalent.
        """
        known = {f.name for f in fields(cls)}
        flat: dict = {}
        for key, value in data.items():
            if isinstance(value, dict) and key not in known:
                for sub_key, sub_value in value.items():
                    name = sub_key if sub_key in known else f"{key}_{sub_key}"
                    flat[name] = sub_value
            else:
                flat[key] = value

        unknown = sorted(set(flat) - known)
        if unknown:
            raise ValueError(f"Unknown tuning keys: {', '.join(unknown)}")

        tuning = cls()
        for name, value in flat.items():
            current = getattr(tuning, name)
            if isinstance(current, dict):
                if not isinstance(value, dict):
                    raise ValueError(f"Tuning key {name} must be a table")
                merged = dict(current)
                for sub_key, sub_value in value.items():
                    label = f"{name}.{sub_key}"
                    merged[sub_key] = _number(label, sub_value, type(current.get(sub_key, 0.0)))
                    if name == "action_durations" and merged[sub_key] <= 0:
                        raise ValueError(f"Tuning key {label} must be positive")
                setattr(tuning, name, merged)
            else:
                setattr(tuning, name, _number(name, value, type(current)))

        for name in _POSITIVE_KEYS:
            if not getattr(tuning, name) > 0:
                raise ValueError(f"Tuning key {name} must be positive")
        for name in _PROBABILITY_KEYS:
            if not 0.0 <= getattr(tuning, name) <= 1.0:
                raise ValueError(f"Tuning key {name} must be between 0 and 1")
        return tuning

    @classmethod
    def from_toml(cls, path: Union[str, Path]) -> "Tuning":
        """Load overrides from a TOML file."""
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls.from_dict(data)


# Overrides that divide or scale time and must stay above zero
_POSITIVE_KEYS = ("day_length_seconds", "max_frame_dt", "char_speed", "mob_speed", "mob_dash_speed")
_PROBABILITY_KEYS = ("night_infection_chance", "heavy_publish_chance", "wait_chance_per_tick")


def _number(name: str, value, kind: type) -> Union[int, float]:
    """Coerce a TOML value to *kind*, rejecting anything that is not a finite number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Tuning key {name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"Tuning key {name} must be finite")
    return kind(value)
