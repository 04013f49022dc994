"""
Aggregate metrics over an item set.

Pure aggregates: nothing here checks validity, so overlapping or
out-of-bounds items still count (utilisation can exceed 100%).
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from config import CargoItem, ContainerSpec, PlannerConfig, DEFAULT_PLANNER_CONFIG


@dataclass(frozen=True)
class WeightDistribution:
    """Percent of total weight on each side of the container midpoints."""
    front: float
    back: float
    left: float
    right: float

    @property
    def front_back_imbalance(self) -> float:
        return abs(self.front - self.back)

    @property
    def left_right_imbalance(self) -> float:
        return abs(self.left - self.right)

    def to_dict(self) -> dict:
        return {"front": self.front, "back": self.back,
                "left": self.left, "right": self.right}


BALANCED = WeightDistribution(50.0, 50.0, 50.0, 50.0)


@dataclass(frozen=True)
class LoadSummary:
    """Headline numbers for the current arrangement."""
    item_count: int
    total_weight: float
    max_weight: float
    utilization: float
    distribution: WeightDistribution
    balance_tolerance: float

    @property
    def payload_pct(self) -> float:
        return self.total_weight / self.max_weight * 100

    @property
    def overweight(self) -> bool:
        return self.total_weight > self.max_weight

    @property
    def balanced(self) -> bool:
        return (self.distribution.front_back_imbalance <= self.balance_tolerance
                and self.distribution.left_right_imbalance <= self.balance_tolerance)

    def to_dict(self) -> dict:
        return {
            "item_count": self.item_count,
            "total_weight": self.total_weight,
            "max_weight": self.max_weight,
            "payload_pct": round(self.payload_pct, 3),
            "overweight": self.overweight,
            "utilization": round(self.utilization, 3),
            "distribution": self.distribution.to_dict(),
            "balanced": self.balanced,
        }


def _as_list(items: Iterable[CargoItem]) -> Sequence[CargoItem]:
    return items if isinstance(items, (list, tuple)) else list(items)


def utilization(items: Iterable[CargoItem], container: ContainerSpec) -> float:
    """Σ item volume / container volume × 100."""
    items = _as_list(items)
    if not items:
        return 0.0
    dims = np.array([(i.length, i.width, i.height) for i in items], dtype=np.float64)
    return float(np.prod(dims, axis=1).sum() / container.volume * 100)


def total_weight(items: Iterable[CargoItem]) -> float:
    return float(sum(i.weight for i in items))


def weight_distribution(
    items: Iterable[CargoItem],
    container: ContainerSpec,
) -> WeightDistribution:
    """
    Classify items by centre against the container's X midpoint
    (front/back) and Z midpoint (left/right).  With no weight at all the
    split is reported as an even 50/50.
    """
    items = _as_list(items)
    if not items:
        return BALANCED
    weights = np.array([i.weight for i in items], dtype=np.float64)
    total = weights.sum()
    if total == 0:
        return BALANCED
    cx = np.array([i.center_x for i in items], dtype=np.float64)
    cz = np.array([i.center_z for i in items], dtype=np.float64)

    front = weights[cx < container.length / 2].sum()
    left = weights[cz < container.width / 2].sum()
    return WeightDistribution(
        front=float(front / total * 100),
        back=float((total - front) / total * 100),
        left=float(left / total * 100),
        right=float((total - left) / total * 100),
    )


def summarize(
    items: Iterable[CargoItem],
    container: ContainerSpec,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> LoadSummary:
    items = _as_list(items)
    return LoadSummary(
        item_count=len(items),
        total_weight=total_weight(items),
        max_weight=container.max_weight,
        utilization=utilization(items, container),
        distribution=weight_distribution(items, container),
        balance_tolerance=cfg.balance_tolerance,
    )
