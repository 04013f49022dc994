"""
Stacking solver — vertical landing levels for an item.

find_stacking_y()          — greedy: the highest top surface under the
                             item's current footprint (drag-and-drop)
find_all_stack_levels()    — every achievable level, no footprint filter
                             (edit / resize recovery)
find_overlapping_levels()  — floor plus tops under the footprint, ascending
                             (drop recovery)

The greedy rule does not check that the chosen surface is itself
supported; nested overhangs can stack onto an unsupported item.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from config import CargoItem, ContainerSpec, PlannerConfig, DEFAULT_PLANNER_CONFIG
from planner.geometry import footprint_overlap


@dataclass(frozen=True)
class StackResult:
    """Landing level for an item; stacked_on is None for the floor."""
    y: float
    stacked_on: Optional[CargoItem] = None

    @property
    def on_floor(self) -> bool:
        return self.stacked_on is None


def _genuinely_overlaps(item: CargoItem, other: CargoItem, cfg: PlannerConfig) -> bool:
    ox, oz = footprint_overlap(item, other)
    return ox > cfg.stack_min_overlap and oz > cfg.stack_min_overlap


def _fits_below_ceiling(
    level: float, item: CargoItem, container: ContainerSpec, cfg: PlannerConfig,
) -> bool:
    return level + item.height <= container.height + cfg.ceiling_tolerance


def find_stacking_y(
    item: CargoItem,
    items: Iterable[CargoItem],
    container: ContainerSpec,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> StackResult:
    """
    Highest top surface under *item*'s current footprint that leaves room
    below the ceiling.  Falls back to the floor.
    """
    best = StackResult(0.0)
    for other in items:
        if other.id == item.id or not _genuinely_overlaps(item, other, cfg):
            continue
        top = other.y + other.height
        if top > best.y and _fits_below_ceiling(top, item, container, cfg):
            best = StackResult(top, other)
    return best


def find_all_stack_levels(
    item: CargoItem,
    items: Iterable[CargoItem],
    container: ContainerSpec,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> List[float]:
    """Floor plus every other item's top with ceiling clearance, ascending."""
    levels = {0.0}
    for other in items:
        if other.id == item.id:
            continue
        top = other.y + other.height
        if _fits_below_ceiling(top, item, container, cfg):
            levels.add(top)
    return sorted(levels)


def find_overlapping_levels(
    item: CargoItem,
    items: Iterable[CargoItem],
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> List[float]:
    """Floor plus the tops of items genuinely under *item*'s footprint."""
    levels = {0.0}
    for other in items:
        if other.id != item.id and _genuinely_overlaps(item, other, cfg):
            levels.add(other.y + other.height)
    return sorted(levels)
