"""
Exceptions for caller mistakes.

Placement findings (boundary, overlap, unsupported) are never raised;
they come back as data in a ValidationResult.  These exceptions cover the
cases where the caller asked for something that cannot be attempted at all.
"""


class PlannerError(Exception):
    """Base class for load planner errors."""


class ItemNotFoundError(PlannerError, KeyError):
    """No item with the given identifier is in the container."""

    def __init__(self, item_id: str) -> None:
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"No item with id '{self.item_id}'"


class DimensionsExceedContainerError(PlannerError):
    """A new item is larger than the container on at least one axis."""


class InvalidGridSizeError(PlannerError, ValueError):
    """Grid size is not positive or not one of the allowed increments."""


class DragStateError(PlannerError):
    """Drag operation called without (or during) an active drag session."""
