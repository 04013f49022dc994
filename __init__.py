"""
Container load planner.

Public API:
    from config import ContainerSpec, CargoItem, ItemCategory, PlannerConfig, CONTAINER_SPECS
    from planner.engine import LoadPlanner
    from planner.load_plan import generate_load_plan
    from manifest.loader import load_manifest
    from manifest.generator import generate_from_library
"""
