"""
planner — placement, validation, stacking and load sequencing for a
single shipping container.

Public API:
    from planner.engine import LoadPlanner, OperationResult, DragPreview
    from planner.validator import validate_placement, ValidationResult
    from planner.stacking import find_stacking_y, find_all_stack_levels
    from planner.auto_place import auto_place
    from planner.metrics import utilization, total_weight, weight_distribution
    from planner.load_plan import generate_load_plan, LoadStep
"""
