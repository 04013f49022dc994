"""
Load sequencer — turns a finished arrangement into loading steps.

Loading priority (most significant first, each with a dead zone so that
sub-inch placement noise does not reorder items):
  1. Lower y first            (floor to ceiling, ties within 1")
  2. Heavier first            (stable base, ties within 10 lbs)
  3. Lower x first            (front to back, ties within 1")
  4. Lower z first            (left to right, exact)

Each step carries a placement instruction, a position description, an
orientation note, handling tips and running weight / utilisation totals.
The sequencer only reads the items; steps hold snapshots.

Usage:
    for step in generate_load_plan(items, container):
        print(step.step_number, step.instruction)
"""

import math
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Iterable, List, Sequence

from config import (
    CargoItem, ContainerSpec, ItemCategory, PlannerConfig, DEFAULT_PLANNER_CONFIG,
)
from planner.geometry import footprint_overlap


CATEGORY_TIPS = {
    ItemCategory.FRAGILE: "FRAGILE -- Handle with care. Avoid placing heavy items on top.",
    ItemCategory.HAZARDOUS: "HAZARDOUS -- Follow IMDG/DOT regulations. Keep separation distances.",
    ItemCategory.PERISHABLE: "PERISHABLE -- Ensure cold chain maintained. Load last if possible.",
    ItemCategory.HEAVY: "HEAVY -- Use forklift or mechanical lift. Ensure floor-level placement.",
    ItemCategory.GENERAL: None,
}

STACKED_TIP = "Ensure item sits flat and stable on supporting items below."
LARGE_ITEM_TIP = "Large item -- may need two people or forklift to position."
FRAGILE_ABOVE_TIP = "Fragile item(s) will be placed on top -- ensure surface is flat."


@dataclass(frozen=True)
class LoadStep:
    """
    One entry of the loading sequence.

    Attributes:
        step_number:            1-based position in the sequence.
        item:                   Snapshot of the item to load.
        instruction:            Where and how to place it.
        position:               Qualitative position in the container.
        orientation:            Dimensions and rotation note.
        tips:                   Handling and safety notes.
        cumulative_weight:      Weight loaded up to and including this step.
        cumulative_utilization: Volume percent used up to this step.
    """
    step_number: int
    item: CargoItem
    instruction: str
    position: str
    orientation: str
    tips: List[str] = field(default_factory=list)
    cumulative_weight: float = 0.0
    cumulative_utilization: float = 0.0

    def to_dict(self) -> dict:
        return {
            "step": self.step_number,
            "item_id": self.item.id,
            "label": self.item.label,
            "instruction": self.instruction,
            "position": self.position,
            "orientation": self.orientation,
            "tips": list(self.tips),
            "cumulative_weight": self.cumulative_weight,
            "cumulative_utilization": round(self.cumulative_utilization, 6),
        }


# ─────────────────────────────────────────────────────────────────────────────
# Ordering
# ─────────────────────────────────────────────────────────────────────────────

def sequence_items(
    items: Iterable[CargoItem],
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> List[CargoItem]:
    """Items in loading order (see module docstring)."""

    def compare(a: CargoItem, b: CargoItem) -> float:
        dy = a.y - b.y
        if abs(dy) > cfg.sequence_y_deadzone:
            return dy
        dw = b.weight - a.weight
        if abs(dw) > cfg.sequence_weight_deadzone:
            return dw
        dx = a.x - b.x
        if abs(dx) > cfg.sequence_x_deadzone:
            return dx
        return a.z - b.z

    return sorted(items, key=cmp_to_key(compare))


# ─────────────────────────────────────────────────────────────────────────────
# Descriptions
# ─────────────────────────────────────────────────────────────────────────────

def _fmt(value: float) -> str:
    return f"{value:g}"


def _fmt_weight(value: float) -> str:
    """Thousands separators, up to three decimals, trailing zeros dropped."""
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def describe_position(item: CargoItem, container: ContainerSpec) -> str:
    """Quarter bands along the length (front/back) and width (left/right)."""
    mid_x = container.length / 2
    mid_z = container.width / 2
    cx, cz = item.center_x, item.center_z

    if cx < mid_x * 0.5:
        fb = "near the front"
    elif cx < mid_x:
        fb = "front-center"
    elif cx < mid_x * 1.5:
        fb = "back-center"
    else:
        fb = "near the back"

    if cz < mid_z * 0.5:
        lr = "against the left wall"
    elif cz < mid_z:
        lr = "left of center"
    elif cz < mid_z * 1.5:
        lr = "right of center"
    else:
        lr = "against the right wall"

    return f"{fb}, {lr}"


def describe_orientation(item: CargoItem) -> str:
    dims = f'{_fmt(item.length)}"L x {_fmt(item.width)}"W x {_fmt(item.height)}"H'
    if not item.is_reoriented and item.rotation_degrees == 0:
        return f"Orientation: {dims} (standard)."
    return f"Orientation: {dims} (rotated {item.rotation_degrees}°)."


def _rests_on_top(upper: CargoItem, lower: CargoItem, cfg: PlannerConfig) -> bool:
    return abs(lower.y + lower.height - upper.y) < cfg.beneath_tolerance


def _directly_on_top(upper: CargoItem, lower: CargoItem, cfg: PlannerConfig) -> bool:
    ox, oz = footprint_overlap(upper, lower)
    return _rests_on_top(upper, lower, cfg) and ox > 0 and oz > 0


def build_instruction(
    item: CargoItem,
    loaded_before: Sequence[CargoItem],
    container: ContainerSpec,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> str:
    """
    Floor placement, "stack on top of" the already-loaded items beneath,
    or a plain height instruction when nothing beneath was loaded earlier.
    """
    pos = describe_position(item, container)
    orientation = describe_orientation(item)

    if item.y < cfg.floor_instruction_height:
        return f'Place "{item.label}" on the container floor, {pos}. {orientation}'

    below = [other for other in loaded_before if _directly_on_top(item, other, cfg)]
    if below:
        names = ", ".join(f'"{b.label}"' for b in below)
        return f'Stack "{item.label}" on top of {names}, {pos}. {orientation}'
    return f'Place "{item.label}" at height {math.floor(item.y + 0.5)}", {pos}. {orientation}'


def build_tips(
    item: CargoItem,
    loaded_after: Sequence[CargoItem],
    container: ContainerSpec,
    cumulative_weight: float,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> List[str]:
    tips: List[str] = []

    category_tip = CATEGORY_TIPS[item.category]
    if category_tip:
        tips.append(category_tip)

    if cumulative_weight > container.max_weight * cfg.capacity_warning_ratio:
        tips.append(
            f"Container approaching weight limit "
            f"({_fmt_weight(cumulative_weight)} / {_fmt_weight(container.max_weight)} lbs)"
        )

    if item.y > 0:
        tips.append(STACKED_TIP)

    if item.volume / container.volume > cfg.large_item_volume_ratio:
        tips.append(LARGE_ITEM_TIP)

    if item.category is not ItemCategory.FRAGILE and any(
        other.category is ItemCategory.FRAGILE and _rests_on_top(other, item, cfg)
        for other in loaded_after
    ):
        tips.append(FRAGILE_ABOVE_TIP)

    return tips


# ─────────────────────────────────────────────────────────────────────────────
# Plan
# ─────────────────────────────────────────────────────────────────────────────

def generate_load_plan(
    items: Iterable[CargoItem],
    container: ContainerSpec,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> List[LoadStep]:
    """Ordered loading steps for *items*.  Empty input gives an empty plan."""
    ordered = [item.snapshot() for item in sequence_items(items, cfg)]
    steps: List[LoadStep] = []
    weight = 0.0
    volume = 0.0

    for idx, item in enumerate(ordered):
        weight += item.weight
        volume += item.volume
        steps.append(LoadStep(
            step_number=idx + 1,
            item=item,
            instruction=build_instruction(item, ordered[:idx], container, cfg),
            position=describe_position(item, container),
            orientation=describe_orientation(item),
            tips=build_tips(item, ordered[idx + 1:], container, weight, cfg),
            cumulative_weight=weight,
            cumulative_utilization=volume / container.volume * 100,
        ))
    return steps
