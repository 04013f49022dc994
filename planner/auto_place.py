"""
Auto-placement search — first valid, fully supported position for an item.

The scan is Y-major, then X, then Z over a discretised grid (the active
grid size, or 1 inch with snapping off): lower positions win, then
positions nearer the front, then nearer the left wall.  The first position
that validates with zero warnings is taken.

Each Y layer builds a collision mask over the whole X × Z grid with NumPy,
using the same inequality as ``overlaps()``.  Only collision-free cells are
confirmed with ``validate_placement()`` in scan order, so the result is the
same as a brute-force scan.  Cost is O((L/step)·(W/step)·(H/step)·n).

Usage:
    placed = auto_place(item, items, container, step=6)
    if not placed:
        ...  # item is at a best-effort fallback; validate and report
"""

import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np

from config import CargoItem, ContainerSpec, PlannerConfig, DEFAULT_PLANNER_CONFIG
from planner.stacking import find_stacking_y
from planner.validator import validate_placement

logger = logging.getLogger(__name__)


def scan_positions(limit: float, step: float) -> np.ndarray:
    """0, step, 2·step, … up to and including *limit*; empty if limit < 0."""
    if step <= 0:
        raise ValueError(f"Scan step must be positive, got {step}")
    if limit < 0:
        return np.empty(0, dtype=np.float64)
    count = int(np.floor(limit / step)) + 1
    positions = np.arange(count, dtype=np.float64) * step
    # floor() can overshoot by one step through rounding
    return positions[positions <= limit]


def _collision_mask(
    item: CargoItem,
    y: float,
    xs: np.ndarray,
    zs: np.ndarray,
    boxes: np.ndarray,
    eps: float,
) -> np.ndarray:
    """Boolean (len(xs), len(zs)) grid: True where *item* at (x, y, z) collides."""
    if boxes.size == 0:
        return np.zeros((xs.size, zs.size), dtype=bool)
    bx, by, bz, bl, bh, bw = boxes.T

    in_y = (y < by + bh - eps) & (y + item.height > by + eps)
    if not in_y.any():
        return np.zeros((xs.size, zs.size), dtype=bool)
    bx, bz, bl, bw = bx[in_y], bz[in_y], bl[in_y], bw[in_y]

    hit_x = (xs[:, None] < bx + bl - eps) & (xs[:, None] + item.length > bx + eps)
    hit_z = (zs[:, None] < bz + bw - eps) & (zs[:, None] + item.width > bz + eps)
    # (nx, k) @ (k, nz): count of boxes colliding in both x and z
    return (hit_x.astype(np.int32) @ hit_z.T.astype(np.int32)) > 0


def find_first_valid_position(
    item: CargoItem,
    items: Iterable[CargoItem],
    container: ContainerSpec,
    step: float,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> Optional[Tuple[float, float, float]]:
    """
    Scan for the first (x, y, z) where *item* validates with no warnings.

    *item* is moved during the search and restored before returning.
    """
    others: List[CargoItem] = [o for o in items if o.id != item.id]
    boxes = np.array(
        [(o.x, o.y, o.z, o.length, o.height, o.width) for o in others],
        dtype=np.float64,
    ).reshape(-1, 6)

    ys = scan_positions(container.height - item.height, step)
    xs = scan_positions(container.length - item.length, step)
    zs = scan_positions(container.width - item.width, step)
    if not (ys.size and xs.size and zs.size):
        return None

    saved = (item.x, item.y, item.z)
    try:
        for y in ys:
            free = ~_collision_mask(item, float(y), xs, zs, boxes, cfg.overlap_epsilon)
            for ix, iz in np.argwhere(free):
                item.x, item.y, item.z = float(xs[ix]), float(y), float(zs[iz])
                if validate_placement(item, others, container, cfg).is_clean:
                    return item.x, item.y, item.z
    finally:
        item.x, item.y, item.z = saved
    return None


def auto_place(
    item: CargoItem,
    items: Iterable[CargoItem],
    container: ContainerSpec,
    step: float,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> bool:
    """
    Move *item* to the first clean position found by the scan.

    If the scan is exhausted, *item* goes to x = z = 0 at whatever level
    ``find_stacking_y()`` picks there, which may still be invalid, and
    False is returned.  The caller validates and reports either way.
    """
    items = list(items)
    found = find_first_valid_position(item, items, container, step, cfg)
    if found is not None:
        item.x, item.y, item.z = found
        return True

    logger.warning(
        "No clean position for %r (%gx%gx%g) in %s; falling back to the origin",
        item.label, item.length, item.width, item.height, container.name,
    )
    item.x, item.y, item.z = 0.0, 0.0, 0.0
    item.y = find_stacking_y(item, items, container, cfg).y
    return False
