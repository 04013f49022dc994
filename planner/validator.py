"""
Placement validator — pure-function constraint checking.

All checks are stateless: they take an item, the current item set and the
container, and return a ValidationResult.  Nothing is raised; callers use
``result.valid`` to accept or reject and surface ``result.warnings``
without blocking.

Checks (in order, all accumulated):
  1. Bounds      — item extent inside [0, dim + tolerance] on each axis (error)
  2. Overlap     — no interpenetration with any other item (error per pair)
  3. Support     — off-floor items need ≥40% footprint backing (warning)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from config import CargoItem, ContainerSpec, PlannerConfig, DEFAULT_PLANNER_CONFIG
from planner.collision import overlaps, is_supported


# ─────────────────────────────────────────────────────────────────────────────
# Findings
# ─────────────────────────────────────────────────────────────────────────────

class IssueKind(str, Enum):
    BOUNDARY = "boundary"
    OVERLAP = "overlap"
    UNSUPPORTED = "unsupported"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Issue:
    kind: IssueKind
    severity: Severity
    message: str
    other_id: Optional[str] = None


@dataclass
class ValidationResult:
    """Errors block a placement; warnings never affect validity."""
    issues: List[Issue] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        return [i.message for i in self.issues if i.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[str]:
        return [i.message for i in self.issues if i.severity is Severity.WARNING]

    @property
    def valid(self) -> bool:
        return not any(i.severity is Severity.ERROR for i in self.issues)

    @property
    def has_overlap(self) -> bool:
        return any(i.kind is IssueKind.OVERLAP for i in self.issues)

    @property
    def is_clean(self) -> bool:
        """Valid and without warnings."""
        return not self.issues

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": self.errors, "warnings": self.warnings}


# ─────────────────────────────────────────────────────────────────────────────
# Validator
# ─────────────────────────────────────────────────────────────────────────────

_AXES = (
    # (position attr, dimension attr, container attr, boundary name)
    ("x", "length", "length", "length"),
    ("z", "width", "width", "width"),
    ("y", "height", "height", "height"),
)


def validate_placement(
    item: CargoItem,
    items: Iterable[CargoItem],
    container: ContainerSpec,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> ValidationResult:
    """
    Check *item* against the container bounds and every other item.

    Args:
        item:      Item to check at its current position and dimensions.
        items:     Current item set; *item* itself is skipped by id.
        container: Active container.
        cfg:       Tolerances.

    Returns:
        ValidationResult with every finding.
    """
    items = list(items)
    result = ValidationResult()

    # ── 1. Bounds ────────────────────────────────────────────────────────
    for pos_attr, dim_attr, cont_attr, name in _AXES:
        pos = getattr(item, pos_attr)
        limit = getattr(container, cont_attr) + cfg.boundary_tolerance
        if pos < 0 or pos + getattr(item, dim_attr) > limit:
            result.issues.append(Issue(
                IssueKind.BOUNDARY, Severity.ERROR,
                f'"{item.label}" exceeds container {name} boundary',
            ))

    # ── 2. Overlap ───────────────────────────────────────────────────────
    for other in items:
        if other.id == item.id:
            continue
        if overlaps(item, other, cfg):
            result.issues.append(Issue(
                IssueKind.OVERLAP, Severity.ERROR,
                f'"{item.label}" overlaps with "{other.label}"',
                other_id=other.id,
            ))

    # ── 3. Support ───────────────────────────────────────────────────────
    if item.y > 0 and not is_supported(item, items, cfg):
        result.issues.append(Issue(
            IssueKind.UNSUPPORTED, Severity.WARNING,
            f'"{item.label}" is not fully supported (floating)',
        ))

    return result


def validate_all(
    items: Iterable[CargoItem],
    container: ContainerSpec,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> Dict[str, ValidationResult]:
    """Validate every item against the rest of the set, keyed by id."""
    items = list(items)
    return {item.id: validate_placement(item, items, container, cfg) for item in items}
