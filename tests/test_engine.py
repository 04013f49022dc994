"""
Tests for the LoadPlanner engine: every mutation either succeeds cleanly
or is fully reverted.

Most tests use a 100 × 100 × 100 container with a 1 inch grid so that
snapping never moves anything off the expected positions.
"""

import pytest

from config import ColorMode, ItemCategory, RotationKind
from planner.colors import CATEGORY_COLORS, ITEM_COLORS
from planner.engine import OPERATION_LOG_SIZE, LoadPlanner
from planner.errors import (
    DimensionsExceedContainerError, DragStateError, InvalidGridSizeError,
    ItemNotFoundError,
)
from planner.library import ItemTemplate


@pytest.fixture
def planner(cube_container):
    return LoadPlanner(cube_container, grid_size=1)


@pytest.fixture
def pair(planner):
    """Two 20" cubes side by side along z: (0,0,0) and (0,0,20)."""
    a = planner.add_item("A", 20, 20, 20, 100).item_id
    b = planner.add_item("B", 20, 20, 20, 100).item_id
    return a, b


@pytest.fixture
def tall_pair(planner):
    """Two 90" high columns side by side along z."""
    a = planner.add_item("A", 20, 20, 90, 100).item_id
    b = planner.add_item("B", 20, 20, 90, 100).item_id
    return a, b


def pos(planner, item_id):
    item = planner.get_item(item_id)
    return item.x, item.y, item.z


# ─────────────────────────────────────────────────────────────────────────────
# Add / delete
# ─────────────────────────────────────────────────────────────────────────────

class TestAdd:
    def test_first_item_at_origin(self, planner):
        res = planner.add_item("Crate", 20, 20, 20, 100)
        assert res.success
        assert res.validation.is_clean
        assert pos(planner, res.item_id) == (0, 0, 0)

    def test_second_item_beside_first(self, planner, pair):
        assert pos(planner, pair[1]) == (0, 0, 20)
        assert planner.item_count == 2
        assert not planner.invalid_items()

    def test_oversize_raises(self, planner):
        with pytest.raises(DimensionsExceedContainerError):
            planner.add_item("Huge", 101, 10, 10, 10)
        assert planner.item_count == 0

    @pytest.mark.parametrize("dims, weight", [
        ((0, 10, 10), 10), ((10, -1, 10), 10), ((10, 10, 10), -5),
    ])
    def test_bad_values_raise(self, planner, dims, weight):
        with pytest.raises(ValueError):
            planner.add_item("Bad", *dims, weight)

    def test_full_container_still_adds(self, planner):
        planner.add_item("Block", 100, 100, 100, 100)
        res = planner.add_item("Extra", 10, 10, 10, 10)
        assert res.success
        assert not res.validation.valid
        assert planner.item_count == 2
        assert res.item_id in planner.invalid_items()

    def test_category_string(self, planner):
        res = planner.add_item("Acid", 10, 10, 10, 10, "hazardous")
        assert planner.get_item(res.item_id).category is ItemCategory.HAZARDOUS

    def test_add_many_numbers_labels(self, planner):
        template = ItemTemplate(name="Box", length=10, width=10, height=10, weight=5)
        results = planner.add_many(template, 3)
        assert [r.item.label for r in results] == ["Box #1", "Box #2", "Box #3"]
        single = planner.add_many(template, 1)
        assert single[0].item.label == "Box"

    def test_operation_log(self, planner, pair):
        log = planner.get_operation_log()
        assert [op.action for op in log] == ["add", "add"]
        assert log[0].to_dict()["item"]["label"] == "A"

    def test_operation_log_is_bounded(self, planner, pair):
        for n in range(OPERATION_LOG_SIZE + 50):
            planner.move_item(pair[0], "x", 1 if n % 2 == 0 else -1)
        log = planner.get_operation_log()
        assert len(log) == OPERATION_LOG_SIZE
        assert log[-1].action == "move"
        planner.clear()
        assert planner.get_operation_log() == []

    def test_delete(self, planner, pair):
        res = planner.delete_item(pair[0])
        assert res.success
        assert res.item is None
        assert planner.item_count == 1
        with pytest.raises(ItemNotFoundError):
            planner.get_item(pair[0])

    def test_clear(self, planner, pair):
        planner.clear()
        assert planner.item_count == 0
        assert planner.load_plan() == []


class TestLookup:
    def test_unknown_id(self, planner):
        with pytest.raises(ItemNotFoundError) as exc:
            planner.move_item("nope", "x", 1)
        assert "nope" in str(exc.value)
        # still a KeyError for dict-style callers
        assert isinstance(exc.value, KeyError)

    def test_items_are_snapshots(self, planner, pair):
        item = planner.get_item(pair[0])
        item.x = 77
        planner.items[0].label = "changed"
        assert pos(planner, pair[0]) == (0, 0, 0)
        assert planner.get_item(pair[0]).label == "A"


# ─────────────────────────────────────────────────────────────────────────────
# Move / rotate
# ─────────────────────────────────────────────────────────────────────────────

class TestMove:
    def test_move(self, planner, pair):
        res = planner.move_item(pair[0], "x", 10)
        assert res.success
        assert pos(planner, pair[0]) == (10, 0, 0)

    def test_move_into_neighbour_reverts(self, planner, pair):
        res = planner.move_item(pair[1], "z", -5)
        assert not res.success
        assert res.validation.has_overlap
        assert pos(planner, pair[1]) == (0, 0, 20)

    def test_clamped_at_zero(self, planner, pair):
        assert planner.move_item(pair[0], "x", -50).success
        assert pos(planner, pair[0]) == (0, 0, 0)

    def test_past_wall_reverts(self, planner, pair):
        res = planner.move_item(pair[0], "x", 85)
        assert not res.success
        assert pos(planner, pair[0]) == (0, 0, 0)

    def test_floating_is_allowed_with_warning(self, planner, pair):
        res = planner.move_item(pair[0], "y", 30)
        assert res.success
        assert res.validation.warnings == ['"A" is not fully supported (floating)']

    def test_snaps_to_grid(self, cube_container):
        planner = LoadPlanner(cube_container, grid_size=6)
        item_id = planner.add_item("A", 10, 10, 10, 10).item_id
        planner.move_item(item_id, "x", 10)
        assert pos(planner, item_id) == (12, 0, 0)

    def test_bad_axis(self, planner, pair):
        with pytest.raises(ValueError):
            planner.move_item(pair[0], "w", 1)


class TestRotate:
    def test_four_yaws_restore(self, planner):
        item_id = planner.add_item("Crate", 30, 20, 10, 50).item_id
        res = planner.rotate_item(item_id)
        assert res.success
        assert (res.item.length, res.item.width, res.item.rotation) == (20, 30, 1)
        for _ in range(3):
            planner.rotate_item(item_id, RotationKind.YAW)
        item = planner.get_item(item_id)
        assert (item.length, item.width, item.height, item.rotation) == (30, 20, 10, 0)

    def test_tip_keeps_counter(self, planner):
        item_id = planner.add_item("Crate", 30, 20, 10, 50).item_id
        res = planner.rotate_item(item_id, "tip_forward")
        assert (res.item.length, res.item.width, res.item.height) == (10, 20, 30)
        assert res.item.rotation == 0
        res = planner.rotate_item(item_id, RotationKind.TIP_SIDE)
        assert (res.item.length, res.item.width, res.item.height) == (10, 30, 20)

    def test_pulled_back_inside(self, planner):
        item_id = planner.add_item("Beam", 10, 40, 10, 50).item_id
        planner.move_item(item_id, "x", 90)
        res = planner.rotate_item(item_id)
        assert res.success
        assert pos(planner, item_id) == (60, 0, 0)

    def test_lifted_onto_neighbour(self, planner):
        a = planner.add_item("A", 30, 20, 10, 50).item_id
        planner.add_item("B", 30, 20, 10, 50)
        res = planner.rotate_item(a)
        # now 20 × 30 and partly over B: rests on top of it
        assert res.success
        assert pos(planner, a) == (0, 10, 0)

    def test_overlap_reverts(self, planner):
        a = planner.add_item("A", 30, 20, 95, 50).item_id
        planner.add_item("B", 30, 20, 95, 50)
        res = planner.rotate_item(a)
        assert not res.success
        item = planner.get_item(a)
        assert (item.length, item.width, item.rotation) == (30, 20, 0)


# ─────────────────────────────────────────────────────────────────────────────
# Edit
# ─────────────────────────────────────────────────────────────────────────────

class TestEdit:
    def test_non_geometric_fields(self, planner, pair):
        res = planner.edit_item(pair[0], label="Crate", weight=250, category="fragile")
        assert res.success
        item = planner.get_item(pair[0])
        assert (item.label, item.weight, item.category) == ("Crate", 250, ItemCategory.FRAGILE)
        assert pos(planner, pair[0]) == (0, 0, 0)

    def test_resize_in_place(self, planner):
        item_id = planner.add_item("Crate", 30, 20, 10, 50).item_id
        planner.rotate_item(item_id)
        res = planner.edit_item(item_id, height=30)
        assert res.success
        item = planner.get_item(item_id)
        assert item.height == item.orig_height == 30
        assert item.rotation == 0
        # length / width keep their originals, so the yaw still shows
        assert (item.orig_length, item.orig_width) == (30, 20)
        assert item.is_reoriented
        assert planner.load_plan()[0].orientation == (
            'Orientation: 20"L x 30"W x 30"H (rotated 0°).'
        )

    def test_resize_lifts_onto_neighbour(self, planner, pair):
        res = planner.edit_item(pair[0], width=30)
        assert res.success
        assert pos(planner, pair[0]) == (0, 20, 0)
        assert res.validation.warnings

    def test_resize_falls_back_to_search(self, planner, tall_pair):
        res = planner.edit_item(tall_pair[0], width=30)
        assert res.success
        assert res.validation.is_clean
        assert pos(planner, tall_pair[0]) == (0, 0, 40)

    def test_impossible_resize_rolls_back(self, planner, pair):
        res = planner.edit_item(pair[0], label="Renamed", width=101)
        assert not res.success
        item = planner.get_item(pair[0])
        assert (item.label, item.width, item.orig_width) == ("A", 20, 20)
        assert pos(planner, pair[0]) == (0, 0, 0)

    def test_bad_dimension_raises(self, planner, pair):
        with pytest.raises(ValueError):
            planner.edit_item(pair[0], length=0)

    def test_recolours_in_category_mode(self, cube_container):
        planner = LoadPlanner(cube_container, grid_size=1, color_mode="category")
        item_id = planner.add_item("Box", 10, 10, 10, 10).item_id
        assert planner.get_item(item_id).color == CATEGORY_COLORS[ItemCategory.GENERAL]
        planner.edit_item(item_id, category=ItemCategory.FRAGILE)
        assert planner.get_item(item_id).color == CATEGORY_COLORS[ItemCategory.FRAGILE]


class TestRollback:
    """A rejected operation leaves every field exactly as it was."""

    @pytest.fixture
    def styled(self, planner):
        """A yawed item resting on a neighbour, with custom colour, weight and category."""
        a = planner.add_item("A", 30, 20, 10, 100).item_id
        planner.add_item("B", 30, 20, 10, 100)
        assert planner.rotate_item(a).success
        planner.edit_item(a, color="#123456", weight=999, category="fragile")
        item = planner.get_item(a)
        assert (item.rotation, item.y, item.color) == (1, 10, "#123456")
        return a

    def test_failed_edit(self, planner, styled):
        before = planner.get_item(styled)
        res = planner.edit_item(styled, label="Other", length=5, width=101,
                                weight=1, category="heavy", color="#000000")
        assert not res.success
        assert planner.get_item(styled) == before

    def test_failed_move(self, planner, styled):
        before = planner.get_item(styled)
        assert not planner.move_item(styled, "x", 85).success
        assert planner.get_item(styled) == before

    def test_failed_rotate(self, planner):
        a = planner.add_item("A", 30, 20, 95, 50).item_id
        planner.add_item("B", 30, 20, 95, 50)
        planner.edit_item(a, color="#abcdef", weight=75, category="perishable")
        before = planner.get_item(a)
        res = planner.rotate_item(a, RotationKind.YAW)
        assert not res.success
        assert planner.get_item(a) == before


# ─────────────────────────────────────────────────────────────────────────────
# Drag & drop
# ─────────────────────────────────────────────────────────────────────────────

class TestDrag:
    def test_preview_does_not_move(self, planner, pair):
        planner.begin_drag(pair[1])
        preview = planner.drag_to(5, 5)
        assert (preview.x, preview.y, preview.z) == (5, 20, 5)
        assert preview.stacked_on_id == pair[0]
        assert preview.stacked_on_label == "A"
        assert preview.validation.is_clean
        assert pos(planner, pair[1]) == (0, 0, 20)
        assert planner.dragging == pair[1]

    def test_drop(self, planner, pair):
        planner.begin_drag(pair[1])
        planner.drag_to(5, 5)
        res = planner.end_drag()
        assert res.success
        assert pos(planner, pair[1]) == (5, 20, 5)
        assert planner.dragging is None

    def test_forced_floor_drop_climbs(self, planner, pair):
        planner.begin_drag(pair[1])
        preview = planner.drag_to(5, 5, force_floor=True)
        assert preview.y == 0
        assert preview.on_floor
        assert not preview.validation.valid
        res = planner.end_drag()
        assert res.success
        assert pos(planner, pair[1]) == (5, 20, 5)

    def test_drop_reverts_when_nothing_fits(self, planner):
        planner.add_item("Column", 20, 20, 90, 100)
        box = planner.add_item("Box", 20, 20, 20, 10).item_id
        planner.begin_drag(box)
        preview = planner.drag_to(5, 5)
        assert preview.on_floor
        assert not preview.validation.valid
        res = planner.end_drag()
        assert not res.success
        assert pos(planner, box) == (0, 0, 20)

    def test_clamped_inside(self, planner, pair):
        planner.begin_drag(pair[0])
        preview = planner.drag_to(500, 500)
        assert (preview.x, preview.z) == (80, 80)

    def test_cancel(self, planner, pair):
        planner.begin_drag(pair[1])
        planner.drag_to(50, 50)
        planner.cancel_drag()
        assert pos(planner, pair[1]) == (0, 0, 20)
        assert planner.dragging is None

    def test_end_without_preview(self, planner, pair):
        planner.begin_drag(pair[0])
        res = planner.end_drag()
        assert res.success
        assert pos(planner, pair[0]) == (0, 0, 0)

    def test_state_errors(self, planner, pair):
        with pytest.raises(DragStateError):
            planner.drag_to(1, 1)
        with pytest.raises(DragStateError):
            planner.end_drag()
        planner.begin_drag(pair[0])
        with pytest.raises(DragStateError):
            planner.begin_drag(pair[1])

    def test_delete_ends_drag(self, planner, pair):
        planner.begin_drag(pair[0])
        planner.delete_item(pair[0])
        assert planner.dragging is None


# ─────────────────────────────────────────────────────────────────────────────
# Settings & queries
# ─────────────────────────────────────────────────────────────────────────────

class TestSettings:
    def test_container_switch_keeps_items(self):
        planner = LoadPlanner("40ft", grid_size=1)
        item_id = planner.add_item("Crate", 48, 40, 36, 500).item_id
        planner.move_item(item_id, "x", 300)
        planner.set_container("20ft")
        assert planner.container.name == "20ft"
        assert pos(planner, item_id) == (300, 0, 0)
        invalid = planner.invalid_items()
        assert invalid[item_id].errors == ['"Crate" exceeds container length boundary']

    def test_unknown_container(self):
        with pytest.raises(KeyError):
            LoadPlanner("45ft")

    def test_grid_size(self, planner):
        planner.set_grid_size(12)
        assert planner.scan_step == 12
        planner.set_snap(False)
        assert planner.scan_step == 1
        with pytest.raises(InvalidGridSizeError):
            planner.set_grid_size(5)
        with pytest.raises(ValueError):
            LoadPlanner(grid_size=7)

    def test_custom_colours_cycle(self, planner, pair):
        assert planner.get_item(pair[0]).color == ITEM_COLORS[0]
        assert planner.get_item(pair[1]).color == ITEM_COLORS[1]

    def test_weight_mode_recolours(self, planner):
        heavy = planner.add_item("Heavy", 10, 10, 10, 600).item_id
        light = planner.add_item("Light", 10, 10, 10, 10).item_id
        planner.set_color_mode(ColorMode.WEIGHT)
        assert planner.get_item(heavy).color == "#5b8af5"
        assert planner.get_item(light).color == "#34d399"

    def test_visibility(self, planner, pair):
        assert planner.toggle_visibility(pair[0]) is False
        assert planner.toggle_visibility(pair[0]) is True
        planner.set_all_visibility(False)
        assert not any(i.visible for i in planner.items)


class TestQueries:
    def test_stacking_level(self, planner, pair):
        level = planner.stacking_level(pair[1], x=0, z=0)
        assert level.y == 20
        assert level.stacked_on.id == pair[0]

    def test_aggregates(self, planner, pair):
        assert planner.total_weight() == 200
        assert planner.utilization() == pytest.approx(1.6)
        assert planner.weight_distribution().front == 100.0
        summary = planner.summary()
        assert summary.item_count == 2
        assert not summary.balanced

    def test_load_plan(self, planner, pair):
        planner.move_item(pair[1], "x", 40)
        steps = planner.load_plan()
        assert [s.item.label for s in steps] == ["A", "B"]
        assert steps[0].instruction.startswith('Place "A" on the container floor')
