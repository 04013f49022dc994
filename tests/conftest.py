"""
Shared test fixtures for the load planner tests.

Run with:
    python -m pytest tests -v
"""
import os
import sys

import pytest

# Ensure the project root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import CargoItem, ContainerSpec, ItemCategory, get_container


@pytest.fixture
def cube_container():
    """100 × 100 × 100 container (volume 1,000,000)."""
    return ContainerSpec("cube", "Test Cube", 100.0, 100.0, 100.0, 10000.0)


@pytest.fixture
def container_20ft():
    return get_container("20ft")


@pytest.fixture
def make_item():
    """Factory: make_item("A", 10, 10, 10, x=0, y=0, z=0, weight=50)."""
    counter = iter(range(1, 10_000))

    def _make(label="item", length=10.0, width=10.0, height=10.0,
              x=0.0, y=0.0, z=0.0, weight=50.0,
              category=ItemCategory.GENERAL, item_id=None):
        item = CargoItem.create(label, length, width, height, weight, category,
                                item_id=item_id or f"t{next(counter)}")
        item.x, item.y, item.z = x, y, z
        return item

    return _make
