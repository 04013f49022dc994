"""
Tests for containers, cargo items and planner configuration.
"""

import os

import pytest

from config import (
    CONTAINER_SPECS, DEFAULT_PLANNER_CONFIG, CargoItem, ContainerSpec, ItemCategory,
    PlannerConfig, RotationKind, get_container, load_planner_config,
)

PROJECT_ROOT = os.path.join(os.path.dirname(__file__), "..")


class TestContainers:
    def test_catalog(self):
        assert set(CONTAINER_SPECS) == {"20ft", "40ft", "40hc"}
        hc = get_container("40hc")
        assert (hc.length, hc.width, hc.height, hc.max_weight) == (473.5, 92.5, 106.3, 58860.0)

    def test_unknown(self):
        with pytest.raises(KeyError, match="Available"):
            get_container("53ft")

    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            ContainerSpec("bad", "Bad", 100.0, 0.0, 100.0, 100.0)

    def test_dict_round_trip(self):
        spec = get_container("20ft")
        assert ContainerSpec.from_dict(spec.to_dict()) == spec


class TestCargoItem:
    def test_create(self):
        item = CargoItem.create("Crate", 30, 20, 10, 50, "fragile")
        assert item.id.startswith("item_")
        assert item.category is ItemCategory.FRAGILE
        assert (item.orig_length, item.orig_width, item.orig_height) == (30, 20, 10)
        assert (item.x, item.y, item.z) == (0, 0, 0)

    def test_ids_unique(self):
        ids = {CargoItem.create("x", 1, 1, 1, 1).id for _ in range(50)}
        assert len(ids) == 50

    def test_rotations(self):
        item = CargoItem.create("Crate", 30, 20, 10, 50)
        item.apply_rotation(RotationKind.YAW)
        assert (item.length, item.width, item.rotation_degrees) == (20, 30, 90)
        item.apply_rotation("tip_side")
        assert (item.width, item.height) == (10, 30)
        assert item.rotation == 1
        assert item.is_reoriented

    def test_snapshot_restore(self):
        item = CargoItem.create("Crate", 30, 20, 10, 50)
        snap = item.snapshot()
        item.x, item.label = 40, "Moved"
        item.rotate_yaw()
        assert snap.x == 0
        item.restore(snap)
        assert (item.x, item.label, item.length, item.rotation) == (0, "Crate", 30, 0)

    def test_dict_round_trip(self):
        item = CargoItem.create("Crate", 30, 20, 10, 50, "heavy")
        item.x, item.y, item.z = 1, 2, 3
        item.tip_forward()
        assert CargoItem.from_dict(item.to_dict()) == item


class TestPlannerConfig:
    def test_defaults(self):
        cfg = DEFAULT_PLANNER_CONFIG
        assert cfg.min_support_ratio == 0.4
        assert cfg.boundary_tolerance == 0.5
        assert cfg.sequence_weight_deadzone == 10.0

    def test_rejects_negative(self):
        with pytest.raises(ValueError):
            PlannerConfig(overlap_epsilon=-1)

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="min_suport_ratio"):
            PlannerConfig.from_dict({"min_suport_ratio": 0.5})

    def test_shipped_yaml_matches_defaults(self):
        cfg = load_planner_config(os.path.join(PROJECT_ROOT, "configs", "planner.yaml"))
        assert cfg == DEFAULT_PLANNER_CONFIG

    def test_partial_yaml(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("min_support_ratio: 0.6\nbalance_tolerance: 10\n", encoding="utf-8")
        cfg = load_planner_config(str(path))
        assert cfg.min_support_ratio == 0.6
        assert cfg.balance_tolerance == 10.0
        assert cfg.overlap_epsilon == DEFAULT_PLANNER_CONFIG.overlap_epsilon

    def test_yaml_must_be_mapping(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_planner_config(str(path))
