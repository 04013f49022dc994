"""
Geometry & units — unit conversion, grid snapping, interval overlap.

Pure functions, no state.  Lengths are inches; "scene units" are the
rendering coordinate space (SCALE_FACTOR scene units per inch).
"""

import math
from typing import Tuple

from config import SCALE_FACTOR, CargoItem
from planner.errors import InvalidGridSizeError


def to_scene_units(length: float) -> float:
    return length * SCALE_FACTOR


def to_length(units: float) -> float:
    return units / SCALE_FACTOR


def snap_to_grid(value: float, grid_size: float) -> float:
    """
    Round *value* to the nearest multiple of *grid_size*.

    Halves round up, so snapping is idempotent and every multiple of the
    grid is a fixed point.
    """
    if grid_size <= 0:
        raise InvalidGridSizeError(f"Grid size must be positive, got {grid_size}")
    return math.floor(value / grid_size + 0.5) * grid_size


def interval_overlap(a0: float, a1: float, b0: float, b1: float) -> float:
    """Signed length of [a0, a1] ∩ [b0, b1]; negative when disjoint."""
    return min(a1, b1) - max(a0, b0)


def footprint_overlap(a: CargoItem, b: CargoItem) -> Tuple[float, float]:
    """Signed (x, z) overlap of the horizontal footprints of *a* and *b*."""
    return (
        interval_overlap(a.x, a.x_max, b.x, b.x_max),
        interval_overlap(a.z, a.z_max, b.z, b.z_max),
    )


def footprint_overlap_area(a: CargoItem, b: CargoItem) -> float:
    ox, oz = footprint_overlap(a, b)
    return max(0.0, ox) * max(0.0, oz)
