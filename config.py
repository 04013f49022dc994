"""
Central configuration and data models for the container load planner.

All modules import their core types from here to ensure consistency
across the validator, stacking solver, placement search, load sequencer
and engine layers.

Classes:
    ContainerSpec  — immutable container definition (inches / lbs)
    ItemCategory   — closed set of cargo handling categories
    ColorMode      — how item colours are assigned
    RotationKind   — yaw (about the vertical axis) or one of the two tips
    CargoItem      — the mutable placed item, with snapshot / restore
    PlannerConfig  — every heuristic threshold used by the engine
"""

import math
import uuid
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Dict, Optional, Union

import yaml


# ─────────────────────────────────────────────────────────────────────────────
# Grid & units
# ─────────────────────────────────────────────────────────────────────────────

GRID_SIZES = (1, 2, 3, 4, 6, 8, 12, 24)
DEFAULT_GRID_SIZE = 6

# Scene units per inch.
SCALE_FACTOR = 0.02


# ─────────────────────────────────────────────────────────────────────────────
# Container
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ContainerSpec:
    """
    Internal dimensions and payload of a shipping container.

    Frozen: switching containers replaces the spec, never mutates it.

    Attributes:
        name:       Catalog key (e.g. "20ft").
        label:      Display label.
        length:     X-axis extent (inches).
        width:      Z-axis extent (inches).
        height:     Y-axis extent (inches).
        max_weight: Maximum payload (lbs).
    """
    name: str
    label: str
    length: float
    width: float
    height: float
    max_weight: float

    def __post_init__(self) -> None:
        for attr in ("length", "width", "height", "max_weight"):
            if getattr(self, attr) <= 0:
                raise ValueError(
                    f"ContainerSpec.{attr} must be positive, got {getattr(self, attr)}"
                )

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    def to_dict(self) -> dict:
        return {"name": self.name, "label": self.label, "length": self.length,
                "width": self.width, "height": self.height,
                "max_weight": self.max_weight}

    @classmethod
    def from_dict(cls, d: dict) -> "ContainerSpec":
        return cls(name=d["name"], label=d.get("label", d["name"]),
                   length=d["length"], width=d["width"], height=d["height"],
                   max_weight=d["max_weight"])


CONTAINER_SPECS: Dict[str, ContainerSpec] = {
    "20ft": ContainerSpec("20ft", "20' Standard", 232.0, 92.5, 94.5, 47900.0),
    "40ft": ContainerSpec("40ft", "40' Standard", 473.5, 92.5, 94.5, 58860.0),
    "40hc": ContainerSpec("40hc", "40' High Cube", 473.5, 92.5, 106.3, 58860.0),
}


def get_container(name: str) -> ContainerSpec:
    """Look up a catalog container by name."""
    try:
        return CONTAINER_SPECS[name]
    except KeyError:
        raise KeyError(
            f"Unknown container '{name}'. Available: {sorted(CONTAINER_SPECS)}"
        ) from None


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────

class ItemCategory(str, Enum):
    """Handling category. Advisory only, never a placement constraint."""
    GENERAL = "general"
    FRAGILE = "fragile"
    HEAVY = "heavy"
    HAZARDOUS = "hazardous"
    PERISHABLE = "perishable"


class ColorMode(str, Enum):
    CATEGORY = "category"
    WEIGHT = "weight"
    CUSTOM = "custom"


class RotationKind(str, Enum):
    """
    YAW swaps length/width and advances the rotation counter.
    TIP_FORWARD swaps length/height, TIP_SIDE swaps width/height; tips
    leave the counter alone.
    """
    YAW = "yaw"
    TIP_FORWARD = "tip_forward"
    TIP_SIDE = "tip_side"


# ─────────────────────────────────────────────────────────────────────────────
# Cargo item
# ─────────────────────────────────────────────────────────────────────────────

def generate_id() -> str:
    return "item_" + uuid.uuid4().hex[:12]


@dataclass
class CargoItem:
    """
    A cargo item inside the container.

    Position (x, y, z) is the minimum corner: x runs along the container
    length, y is height above the floor, z runs along the container width.
    length/width/height are the *effective* dimensions and change under
    rotation; orig_* are fixed at creation (or by a dimension edit).

    Items carry no references to each other; support relationships are
    computed from geometry on demand.
    """
    id: str
    label: str
    length: float
    width: float
    height: float
    weight: float
    category: ItemCategory = ItemCategory.GENERAL
    color: str = "#5b8af5"
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    visible: bool = True
    rotation: int = 0
    orig_length: float = field(default=0.0)
    orig_width: float = field(default=0.0)
    orig_height: float = field(default=0.0)

    def __post_init__(self) -> None:
        self.category = ItemCategory(self.category)
        if not self.orig_length:
            self.orig_length = self.length
        if not self.orig_width:
            self.orig_width = self.width
        if not self.orig_height:
            self.orig_height = self.height

    @classmethod
    def create(
        cls,
        label: str,
        length: float,
        width: float,
        height: float,
        weight: float,
        category: Union[ItemCategory, str] = ItemCategory.GENERAL,
        color: str = "#5b8af5",
        item_id: Optional[str] = None,
    ) -> "CargoItem":
        """New item at the origin with a fresh identifier."""
        return cls(id=item_id or generate_id(), label=label, length=length,
                   width=width, height=height, weight=weight,
                   category=ItemCategory(category), color=color)

    # ── Derived geometry ─────────────────────────────────────────────────

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    @property
    def footprint_area(self) -> float:
        return self.length * self.width

    @property
    def x_max(self) -> float:
        return self.x + self.length

    @property
    def y_max(self) -> float:
        """Top surface height."""
        return self.y + self.height

    @property
    def z_max(self) -> float:
        return self.z + self.width

    @property
    def center_x(self) -> float:
        return self.x + self.length / 2

    @property
    def center_z(self) -> float:
        return self.z + self.width / 2

    @property
    def rotation_degrees(self) -> int:
        return self.rotation * 90

    @property
    def is_reoriented(self) -> bool:
        """True if the effective dimensions differ from the original ones."""
        return (self.length != self.orig_length
                or self.width != self.orig_width
                or self.height != self.orig_height)

    # ── Rotation ─────────────────────────────────────────────────────────

    def rotate_yaw(self) -> None:
        self.length, self.width = self.width, self.length
        self.rotation = (self.rotation + 1) % 4

    def tip_forward(self) -> None:
        self.length, self.height = self.height, self.length

    def tip_side(self) -> None:
        self.width, self.height = self.height, self.width

    def apply_rotation(self, kind: Union[RotationKind, str]) -> None:
        kind = RotationKind(kind)
        if kind is RotationKind.YAW:
            self.rotate_yaw()
        elif kind is RotationKind.TIP_FORWARD:
            self.tip_forward()
        else:
            self.tip_side()

    # ── Snapshot / restore (rollback) ────────────────────────────────────

    def snapshot(self) -> "CargoItem":
        """Value copy of every field."""
        return replace(self)

    def restore(self, snap: "CargoItem") -> None:
        """Copy every field of *snap* back onto this item."""
        for f in fields(self):
            setattr(self, f.name, getattr(snap, f.name))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "dims": [self.length, self.width, self.height],
            "orig_dims": [self.orig_length, self.orig_width, self.orig_height],
            "position": [self.x, self.y, self.z],
            "weight": self.weight,
            "category": self.category.value,
            "color": self.color,
            "visible": self.visible,
            "rotation": self.rotation,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "CargoItem":
        orig = d.get("orig_dims", d["dims"])
        return cls(
            id=d["id"], label=d["label"],
            length=d["dims"][0], width=d["dims"][1], height=d["dims"][2],
            weight=d["weight"], category=ItemCategory(d.get("category", "general")),
            color=d.get("color", "#5b8af5"),
            x=d["position"][0], y=d["position"][1], z=d["position"][2],
            visible=d.get("visible", True), rotation=d.get("rotation", 0),
            orig_length=orig[0], orig_width=orig[1], orig_height=orig[2],
        )


# ─────────────────────────────────────────────────────────────────────────────
# Planner configuration
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PlannerConfig:
    """
    Heuristic thresholds used across the engine (inches / lbs).

    These are tuning constants carried over from the interactive planner,
    not validated physical limits.

    Attributes:
        overlap_epsilon:          Interpenetration ignored on each axis.
        boundary_tolerance:       Slack past the container walls / ceiling.
        floor_level:              Items at or below this y rest on the floor.
        support_tolerance:        Max gap between a top surface and a bottom
                                  for the top to count as support.
        min_support_ratio:        Fraction of footprint that must be backed.
        stack_min_overlap:        Per-axis footprint overlap required before
                                  an item's top is a landing level.
        ceiling_tolerance:        Slack when checking a level against the
                                  container ceiling.
        sequence_y_deadzone:      Load order: y differences treated as ties.
        sequence_weight_deadzone: Load order: weight differences treated as ties.
        sequence_x_deadzone:      Load order: x differences treated as ties.
        floor_instruction_height: Below this y an item is "on the floor".
        beneath_tolerance:        Load plan "directly beneath" gap.
        capacity_warning_ratio:   Payload fraction that triggers a warning.
        large_item_volume_ratio:  Item / container volume needing two people.
        balance_tolerance:        Max front/back or left/right split (points).
    """
    overlap_epsilon: float = 0.01
    boundary_tolerance: float = 0.5
    floor_level: float = 0.1
    support_tolerance: float = 1.0
    min_support_ratio: float = 0.4
    stack_min_overlap: float = 0.5
    ceiling_tolerance: float = 0.5
    sequence_y_deadzone: float = 1.0
    sequence_weight_deadzone: float = 10.0
    sequence_x_deadzone: float = 1.0
    floor_instruction_height: float = 1.0
    beneath_tolerance: float = 2.0
    capacity_warning_ratio: float = 0.9
    large_item_volume_ratio: float = 0.08
    balance_tolerance: float = 20.0

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"PlannerConfig.{f.name} must be >= 0, got {value}")

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: dict) -> "PlannerConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown planner config keys: {sorted(unknown)}")
        return cls(**{k: float(v) for k, v in d.items()})


DEFAULT_PLANNER_CONFIG = PlannerConfig()


def load_planner_config(path: str) -> PlannerConfig:
    """Read a PlannerConfig from a YAML mapping; missing keys keep defaults."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")
    # Allow the constants to sit under a top-level "planner" key.
    if set(data) == {"planner"}:
        data = data["planner"] or {}
    return PlannerConfig.from_dict(data)
