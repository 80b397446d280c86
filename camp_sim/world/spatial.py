"""Distance and heading helpers shared by the mob and meeple AI."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

Position = tuple[float, float, float]


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance in 3D."""
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2)


def radial_distance(position: Sequence[float]) -> float:
    """Ground distance from the camp center (the origin)."""
    return math.hypot(position[0], position[2])


def normalize(dx: float, dz: float, fallback: float = 1.0) -> tuple[float, float]:
    """Unit vector of (dx, dz). A zero vector is divided by *fallback*."""
    length = math.hypot(dx, dz) or fallback
    return dx / length, dz / length


def heading(dx: float, dz: float) -> float:
    """Facing angle of a movement vector; angle 0 faces +z."""
    return math.atan2(dx, dz)


def forward_vector(angle: float) -> tuple[float, float]:
    return math.sin(angle), math.cos(angle)


def is_finite_position(position: Optional[Sequence[float]]) -> bool:
    """True for a 3-component position with only finite coordinates."""
    if position is None:
        return False
    try:
        if len(position) != 3:
            return False
        coords = np.asarray(position, dtype=np.float64)
    except (TypeError, ValueError):
        return False
    return bool(np.all(np.isfinite(coords)))


def as_position(position: Sequence[float]) -> Position:
    return float(position[0]), float(position[1]), float(position[2])
