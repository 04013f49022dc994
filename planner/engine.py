"""
Load planner engine — the single authority over the item set.

Every mutation of the container contents goes through this class so that
no caller ever observes an accepted overlap or boundary violation:
operations snapshot the fields they touch, apply the change, validate,
and restore the snapshot on failure.  Unsupported (floating) items are the
one tolerated soft violation and come back as warnings.

Data flow:
  1. UI calls  planner.add_item(...)          -> item auto-placed, validated
  2. UI calls  planner.move_item / rotate_item / edit_item
                                               -> OperationResult (reverted on error)
  3. Drag:     begin_drag -> drag_to (preview, repeatedly) -> end_drag
  4. Queries:  validate_all(), summary(), load_plan()

Usage:
    planner = LoadPlanner("40hc")
    res = planner.add_item("Generator", 48, 30, 36, 1500, "heavy")
    planner.rotate_item(res.item_id, RotationKind.YAW)
    steps = planner.load_plan()
"""

import logging
from collections import OrderedDict, deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

from config import (
    CargoItem, ColorMode, ContainerSpec, ItemCategory, PlannerConfig, RotationKind,
    DEFAULT_GRID_SIZE, DEFAULT_PLANNER_CONFIG, GRID_SIZES, get_container,
)
from planner.auto_place import auto_place
from planner.colors import ColorCycle, color_for
from planner.errors import (
    DimensionsExceedContainerError, DragStateError, InvalidGridSizeError,
    ItemNotFoundError,
)
from planner.geometry import snap_to_grid
from planner.library import ItemTemplate
from planner.load_plan import LoadStep, generate_load_plan
from planner.metrics import (
    LoadSummary, WeightDistribution, summarize, total_weight, utilization,
    weight_distribution,
)
from planner.stacking import (
    StackResult, find_all_stack_levels, find_overlapping_levels, find_stacking_y,
)
from planner.validator import ValidationResult, validate_all, validate_placement

logger = logging.getLogger(__name__)

_AXES = ("x", "y", "z")

# Most recent operations kept for get_operation_log().
OPERATION_LOG_SIZE = 200


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a mutating operation.

    success is False when the change was rejected and fully reverted.
    item is a snapshot of the item after the call (None after deletion).
    """
    action: str
    item_id: str
    success: bool
    validation: ValidationResult
    item: Optional[CargoItem] = None
    message: str = ""

    def to_dict(self) -> dict:
        d = {
            "action": self.action,
            "item_id": self.item_id,
            "success": self.success,
            "message": self.message,
            "validation": self.validation.to_dict(),
        }
        if self.item is not None:
            d["item"] = self.item.to_dict()
        return d


@dataclass(frozen=True)
class DragPreview:
    """Candidate drop position computed while an item is dragged."""
    x: float
    y: float
    z: float
    stacked_on_id: Optional[str]
    stacked_on_label: Optional[str]
    validation: ValidationResult

    @property
    def on_floor(self) -> bool:
        return self.stacked_on_id is None


@dataclass
class _DragSession:
    item_id: str
    start: Tuple[float, float, float]
    candidate: Optional[Tuple[float, float, float]] = None


# ---------------------------------------------------------------------------
# LoadPlanner
# ---------------------------------------------------------------------------

class LoadPlanner:
    """
    Owns the container spec and the item arena (insertion-ordered, keyed by
    id).  Callers receive snapshots, never the live items.

    Public interface
    ~~~~~~~~~~~~~~~~
    add_item / add_from_template / delete_item / clear
    move_item / rotate_item / edit_item               -> OperationResult
    begin_drag / drag_to / end_drag / cancel_drag
    set_container / set_grid_size / set_snap / set_color_mode
    toggle_visibility / set_all_visibility
    validate / validate_all / stacking_level
    utilization / total_weight / weight_distribution / summary / load_plan
    """

    def __init__(
        self,
        container: Union[str, ContainerSpec] = "20ft",
        grid_size: float = DEFAULT_GRID_SIZE,
        snap_enabled: bool = True,
        color_mode: Union[ColorMode, str] = ColorMode.CUSTOM,
        cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
    ) -> None:
        self._container = self._resolve_container(container)
        self._check_grid_size(grid_size)
        self._grid_size = grid_size
        self._snap_enabled = snap_enabled
        self._color_mode = ColorMode(color_mode)
        self._cfg = cfg
        self._items: "OrderedDict[str, CargoItem]" = OrderedDict()
        self._colors = ColorCycle()
        self._drag: Optional[_DragSession] = None
        self._log: "deque[OperationResult]" = deque(maxlen=OPERATION_LOG_SIZE)

    # -- Public: state access ------------------------------------------------

    @property
    def container(self) -> ContainerSpec:
        return self._container

    @property
    def config(self) -> PlannerConfig:
        return self._cfg

    @property
    def grid_size(self) -> float:
        return self._grid_size

    @property
    def snap_enabled(self) -> bool:
        return self._snap_enabled

    @property
    def color_mode(self) -> ColorMode:
        return self._color_mode

    @property
    def scan_step(self) -> float:
        """Auto-placement step: the grid size when snapping, else 1 inch."""
        return self._grid_size if self._snap_enabled else 1

    @property
    def items(self) -> List[CargoItem]:
        """Snapshots of every item in insertion order."""
        return [item.snapshot() for item in self._items.values()]

    @property
    def item_count(self) -> int:
        return len(self._items)

    @property
    def dragging(self) -> Optional[str]:
        """Id of the item being dragged, if any."""
        return self._drag.item_id if self._drag else None

    def get_item(self, item_id: str) -> CargoItem:
        return self._get(item_id).snapshot()

    def get_operation_log(self) -> List[OperationResult]:
        """The last OPERATION_LOG_SIZE operations, oldest first."""
        return list(self._log)

    # -- Public: settings ----------------------------------------------------

    def set_container(self, container: Union[str, ContainerSpec]) -> None:
        """
        Replace the active container.  Existing items are not re-checked
        here; callers should follow with validate_all() and surface the
        findings.
        """
        self._container = self._resolve_container(container)
        logger.info("Container set to %s (%s)", self._container.name, self._container.label)

    def set_grid_size(self, size: float) -> None:
        self._check_grid_size(size)
        self._grid_size = size

    def set_snap(self, enabled: bool) -> None:
        self._snap_enabled = bool(enabled)

    def set_color_mode(self, mode: Union[ColorMode, str]) -> None:
        """Switch colour mode; category / weight modes recolour every item."""
        self._color_mode = ColorMode(mode)
        if self._color_mode is ColorMode.CUSTOM:
            return
        for item in self._items.values():
            item.color = color_for(item.category, item.weight, self._color_mode)

    def toggle_visibility(self, item_id: str) -> bool:
        item = self._get(item_id)
        item.visible = not item.visible
        return item.visible

    def set_all_visibility(self, visible: bool) -> None:
        for item in self._items.values():
            item.visible = visible

    # -- Public: item CRUD ---------------------------------------------------

    def add_item(
        self,
        label: str,
        length: float,
        width: float,
        height: float,
        weight: float,
        category: Union[ItemCategory, str] = ItemCategory.GENERAL,
    ) -> OperationResult:
        """
        Create an item, auto-place it and add it to the container.

        The item is always added once its dimensions fit the container; if
        the search finds no clean position the result carries the
        validation errors / warnings of the fallback position.

        Raises:
            ValueError:                     non-positive dimension or negative weight.
            DimensionsExceedContainerError: larger than the container on an axis.
        """
        if min(length, width, height) <= 0:
            raise ValueError(f"Item dimensions must be positive: {length}x{width}x{height}")
        if weight < 0:
            raise ValueError(f"Item weight must be >= 0, got {weight}")
        c = self._container
        if length > c.length or width > c.width or height > c.height:
            raise DimensionsExceedContainerError(
                f'"{label}" ({length:g}x{width:g}x{height:g}) exceeds container '
                f"{c.name} ({c.length:g}x{c.width:g}x{c.height:g})"
            )

        category = ItemCategory(category)
        item = CargoItem.create(
            label, length, width, height, weight, category,
            color=color_for(category, weight, self._color_mode, self._colors),
        )
        found = auto_place(item, self._items.values(), c, self.scan_step, self._cfg)
        self._items[item.id] = item

        result = validate_placement(item, self._items.values(), c, self._cfg)
        if found:
            message = f'Added "{label}" at ({item.x:g}, {item.y:g}, {item.z:g})'
            logger.info(message)
        else:
            message = f'No clean position for "{label}"; placed at fallback position'
        return self._record("add", item, True, result, message)

    def add_from_template(self, template: ItemTemplate, label: Optional[str] = None) -> OperationResult:
        return self.add_item(
            label or template.name, template.length, template.width,
            template.height, template.weight, template.category,
        )

    def add_many(self, template: ItemTemplate, quantity: int) -> List[OperationResult]:
        """Add *quantity* copies of *template*, numbering labels when > 1."""
        results = []
        for n in range(quantity):
            label = template.name if quantity == 1 else f"{template.name} #{n + 1}"
            results.append(self.add_from_template(template, label=label))
        return results

    def delete_item(self, item_id: str) -> OperationResult:
        item = self._get(item_id)
        if self._drag and self._drag.item_id == item_id:
            self._drag = None
        del self._items[item_id]
        logger.info('Deleted "%s"', item.label)
        return self._record("delete", item, True, ValidationResult(),
                            f'Deleted "{item.label}"', keep_item=False)

    def clear(self) -> None:
        self._items.clear()
        self._drag = None
        self._log.clear()
        logger.info("Cleared all items")

    # -- Public: move / rotate / edit ---------------------------------------

    def move_item(self, item_id: str, axis: str, delta: float) -> OperationResult:
        """
        Nudge an item along one axis.  Coordinates are clamped at 0 and
        snapped; the move is reverted if the result is invalid.
        """
        if axis not in _AXES:
            raise ValueError(f"Axis must be one of x, y, z; got {axis!r}")
        item = self._get(item_id)
        before = item.snapshot()

        setattr(item, axis, max(0.0, getattr(item, axis) + delta))
        if self._snap_enabled:
            item.x = self._snap(item.x)
            item.y = self._snap(item.y)
            item.z = self._snap(item.z)

        result = self._validate(item)
        if not result.valid:
            item.restore(before)
            return self._record("move", item, False, result,
                                f'Cannot move "{item.label}": ' + "; ".join(result.errors))
        return self._record("move", item, True, result,
                            f'Moved "{item.label}" {axis} by {delta:+g}')

    def rotate_item(self, item_id: str, kind: Union[RotationKind, str] = RotationKind.YAW) -> OperationResult:
        """
        Rotate an item in place: yaw swaps length/width, the tips swap
        height with length or width.  The item is pulled back inside the
        container and lifted onto whatever now lies beneath it; rejected
        and reverted on overlap or boundary errors.
        """
        item = self._get(item_id)
        before = item.snapshot()
        c = self._container

        item.apply_rotation(kind)
        item.x = min(item.x, max(0.0, c.length - item.length))
        item.z = min(item.z, max(0.0, c.width - item.width))
        item.y = min(item.y, max(0.0, c.height - item.height))
        self._snap_position(item)
        self._lift_onto_stack(item)

        result = self._validate(item)
        if not result.valid:
            item.restore(before)
            return self._record("rotate", item, False, result,
                                "Cannot rotate -- would cause overlap or exceed container")
        return self._record(
            "rotate", item, True, result,
            f'Rotated "{item.label}" -> {item.length:g}"x{item.width:g}"x{item.height:g}" '
            f"({item.rotation_degrees} deg)",
        )

    def edit_item(
        self,
        item_id: str,
        label: Optional[str] = None,
        length: Optional[float] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        weight: Optional[float] = None,
        category: Optional[Union[ItemCategory, str]] = None,
        color: Optional[str] = None,
    ) -> OperationResult:
        """
        Change an item's mutable fields.

        Label, weight, category and colour never affect geometry and are
        applied directly.  A dimension change resets the original of each
        changed dimension and the yaw counter, then tries, in order:
          1. the clamped, snapped, lifted position;
          2. every stack level (ascending) at the same x / z;
          3. a fresh auto-placement search;
        and rolls every field back if all of them fail.
        """
        item = self._get(item_id)
        before = item.snapshot()
        c = self._container

        new_dims = (length, width, height)
        for dim in new_dims:
            if dim is not None and dim <= 0:
                raise ValueError(f"Item dimensions must be positive, got {dim}")
        if weight is not None and weight < 0:
            raise ValueError(f"Item weight must be >= 0, got {weight}")

        if label is not None:
            item.label = label
        if weight is not None:
            item.weight = weight
        if category is not None:
            item.category = ItemCategory(category)
        if color is not None:
            item.color = color

        dims_changed = any(dim is not None for dim in new_dims)
        if dims_changed:
            if length is not None:
                item.length = item.orig_length = length
            if width is not None:
                item.width = item.orig_width = width
            if height is not None:
                item.height = item.orig_height = height
            item.rotation = 0
            item.x = max(0.0, min(item.x, c.length - item.length))
            item.z = max(0.0, min(item.z, c.width - item.width))
            item.y = max(0.0, min(item.y, c.height - item.height))
            self._snap_position(item)
            self._lift_onto_stack(item)

        result = self._validate(item)
        if not result.valid and dims_changed:
            result = self._recover_resized(item)
            if not result.valid:
                item.restore(before)
                return self._record(
                    "edit", item, False, result,
                    "Cannot resize -- new dimensions cause overlap or exceed container",
                )

        if self._color_mode is not ColorMode.CUSTOM:
            item.color = color_for(item.category, item.weight, self._color_mode)

        return self._record("edit", item, True, result,
                            f'Updated "{item.label}": {self._describe_changes(before, item)}')

    # -- Public: drag & drop -------------------------------------------------

    def begin_drag(self, item_id: str) -> None:
        if self._drag is not None:
            raise DragStateError(f"Already dragging '{self._drag.item_id}'")
        item = self._get(item_id)
        self._drag = _DragSession(item_id, (item.x, item.y, item.z))

    def drag_to(self, x: float, z: float, force_floor: bool = False) -> DragPreview:
        """
        Preview a drop at horizontal position (x, z).

        The position is snapped and clamped inside the container, and y is
        the highest surface beneath the footprint (or the floor when
        *force_floor*).  The item itself does not move until end_drag().
        """
        session = self._require_drag()
        item = self._get(session.item_id)
        c = self._container

        if self._snap_enabled:
            x, z = self._snap(x), self._snap(z)
        ghost = item.snapshot()
        ghost.x = max(0.0, min(x, c.length - item.length))
        ghost.z = max(0.0, min(z, c.width - item.width))

        stacked_on: Optional[CargoItem] = None
        if force_floor:
            ghost.y = 0.0
        else:
            stack = find_stacking_y(ghost, self._items.values(), c, self._cfg)
            ghost.y = self._snap(stack.y) if self._snap_enabled else stack.y
            stacked_on = stack.stacked_on

        session.candidate = (ghost.x, ghost.y, ghost.z)
        return DragPreview(
            x=ghost.x, y=ghost.y, z=ghost.z,
            stacked_on_id=stacked_on.id if stacked_on else None,
            stacked_on_label=stacked_on.label if stacked_on else None,
            validation=validate_placement(ghost, self._items.values(), c, self._cfg),
        )

    def end_drag(self) -> OperationResult:
        """
        Drop the dragged item at the last previewed position.

        On overlap, retries every level beneath the footprint from the
        floor up; otherwise (or if no level works) the item returns to
        where the drag started.
        """
        session = self._require_drag()
        self._drag = None
        item = self._get(session.item_id)
        if session.candidate is None:
            return self._record("drag", item, True, self._validate(item), "Drag ended without moving")

        item.x, item.y, item.z = session.candidate
        result = self._validate(item)
        if result.valid:
            return self._record("drag", item, True, result, f'Dropped "{item.label}"')

        if result.has_overlap:
            for level in find_overlapping_levels(item, self._items.values(), self._cfg):
                item.y = self._snap(level) if self._snap_enabled else level
                recheck = self._validate(item)
                if recheck.valid:
                    return self._record("drag", item, True, recheck,
                                        f'Dropped "{item.label}" at y={item.y:g}')

        item.x, item.y, item.z = session.start
        return self._record("drag", item, False, result,
                            "Could not place item there -- reverted to original position")

    def cancel_drag(self) -> None:
        self._require_drag()
        self._drag = None

    # -- Public: queries -----------------------------------------------------

    def validate(self, item_id: str) -> ValidationResult:
        return self._validate(self._get(item_id))

    def validate_all(self) -> Dict[str, ValidationResult]:
        return validate_all(self._items.values(), self._container, self._cfg)

    def invalid_items(self) -> Dict[str, ValidationResult]:
        return {k: v for k, v in self.validate_all().items() if not v.valid}

    def stacking_level(
        self, item_id: str, x: Optional[float] = None, z: Optional[float] = None,
    ) -> StackResult:
        """Landing level for an item, optionally at another (x, z)."""
        ghost = self._get(item_id).snapshot()
        if x is not None:
            ghost.x = x
        if z is not None:
            ghost.z = z
        return find_stacking_y(ghost, self._items.values(), self._container, self._cfg)

    def utilization(self) -> float:
        return utilization(self._items.values(), self._container)

    def total_weight(self) -> float:
        return total_weight(self._items.values())

    def weight_distribution(self) -> WeightDistribution:
        return weight_distribution(self._items.values(), self._container)

    def summary(self) -> LoadSummary:
        return summarize(self._items.values(), self._container, self._cfg)

    def load_plan(self) -> List[LoadStep]:
        return generate_load_plan(self._items.values(), self._container, self._cfg)

    # -- Private helpers -----------------------------------------------------

    @staticmethod
    def _resolve_container(container: Union[str, ContainerSpec]) -> ContainerSpec:
        if isinstance(container, ContainerSpec):
            return container
        return get_container(container)

    @staticmethod
    def _check_grid_size(size: float) -> None:
        if size not in GRID_SIZES:
            raise InvalidGridSizeError(f"Grid size must be one of {GRID_SIZES}, got {size}")

    def _get(self, item_id: str) -> CargoItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise ItemNotFoundError(item_id) from None

    def _require_drag(self) -> _DragSession:
        if self._drag is None:
            raise DragStateError("No drag in progress")
        return self._drag

    def _snap(self, value: float) -> float:
        return snap_to_grid(value, self._grid_size)

    def _snap_position(self, item: CargoItem) -> None:
        if self._snap_enabled:
            item.x = self._snap(item.x)
            item.z = self._snap(item.z)
            item.y = self._snap(item.y)

    def _lift_onto_stack(self, item: CargoItem) -> None:
        stack = find_stacking_y(item, self._items.values(), self._container, self._cfg)
        item.y = max(item.y, stack.y)
        if self._snap_enabled:
            item.y = self._snap(item.y)

    def _validate(self, item: CargoItem) -> ValidationResult:
        return validate_placement(item, self._items.values(), self._container, self._cfg)

    def _others(self, item: CargoItem) -> Iterable[CargoItem]:
        return [o for o in self._items.values() if o.id != item.id]

    def _recover_resized(self, item: CargoItem) -> ValidationResult:
        """Stack levels at the same x / z, then a full search.  Last result wins."""
        saved_x, saved_z = item.x, item.z
        for level in find_all_stack_levels(item, self._items.values(), self._container, self._cfg):
            item.x, item.z = saved_x, saved_z
            item.y = self._snap(level) if self._snap_enabled else level
            result = self._validate(item)
            if result.valid:
                return result

        auto_place(item, self._others(item), self._container, self.scan_step, self._cfg)
        return self._validate(item)

    @staticmethod
    def _describe_changes(before: CargoItem, after: CargoItem) -> str:
        changes = []
        if after.label != before.label:
            changes.append(f'label -> "{after.label}"')
        if after.weight != before.weight:
            changes.append(f"weight -> {after.weight:,g} lbs")
        if after.category != before.category:
            changes.append(f"category -> {after.category.value}")
        for name in ("length", "width", "height"):
            if getattr(after, name) != getattr(before, name):
                changes.append(f'{name[0].upper()} -> {getattr(after, name):g}"')
        if after.color != before.color:
            changes.append("color updated")
        return ", ".join(changes) or "no changes"

    def _record(
        self,
        action: str,
        item: CargoItem,
        success: bool,
        validation: ValidationResult,
        message: str,
        keep_item: bool = True,
    ) -> OperationResult:
        if not success:
            logger.warning("%s rejected for %s: %s", action, item.id, message)
        elif validation.warnings:
            logger.info("%s %s: %s", action, item.id, "; ".join(validation.warnings))
        op = OperationResult(
            action=action,
            item_id=item.id,
            success=success,
            validation=validation,
            item=item.snapshot() if keep_item else None,
            message=message,
        )
        self._log.append(op)
        return op
