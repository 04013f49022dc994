"""
Collision & support model.

overlaps()      — axis-aligned box interpenetration beyond an epsilon
support_area()  — footprint area backed by items directly beneath
is_supported()  — static support heuristic (≥ min_support_ratio backed)

Support is a static heuristic, not physics: supporting items are not
themselves checked for support, so there is no transitive stability check.
"""

from typing import Iterable, List

from config import CargoItem, PlannerConfig, DEFAULT_PLANNER_CONFIG
from planner.geometry import footprint_overlap_area


def overlaps(
    a: CargoItem,
    b: CargoItem,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> bool:
    """
    True iff *a* and *b* interpenetrate by more than the epsilon on all
    three axes.  Boxes sharing a face do not overlap.
    """
    eps = cfg.overlap_epsilon
    return (
        a.x < b.x + b.length - eps
        and a.x + a.length > b.x + eps
        and a.y < b.y + b.height - eps
        and a.y + a.height > b.y + eps
        and a.z < b.z + b.width - eps
        and a.z + a.width > b.z + eps
    )


def _rests_on(item: CargoItem, other: CargoItem, cfg: PlannerConfig) -> bool:
    return abs(other.y + other.height - item.y) < cfg.support_tolerance


def supporting_items(
    item: CargoItem,
    items: Iterable[CargoItem],
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> List[CargoItem]:
    """Items whose top touches *item*'s bottom with positive footprint overlap."""
    return [
        other for other in items
        if other.id != item.id
        and _rests_on(item, other, cfg)
        and footprint_overlap_area(item, other) > 0
    ]


def support_area(
    item: CargoItem,
    items: Iterable[CargoItem],
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> float:
    """Summed footprint overlap with every item directly beneath *item*."""
    area = 0.0
    for other in items:
        if other.id == item.id:
            continue
        if _rests_on(item, other, cfg):
            area += footprint_overlap_area(item, other)
    return area


def support_ratio(
    item: CargoItem,
    items: Iterable[CargoItem],
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> float:
    """Fraction of the footprint that is backed.  1.0 on the floor."""
    if item.y <= cfg.floor_level:
        return 1.0
    base = item.footprint_area
    if base <= 0:
        return 0.0
    return support_area(item, items, cfg) / base


def is_supported(
    item: CargoItem,
    items: Iterable[CargoItem],
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> bool:
    if item.y <= cfg.floor_level:
        return True
    return support_area(item, items, cfg) >= item.footprint_area * cfg.min_support_ratio
