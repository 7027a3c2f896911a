"""
Tests for panel_engine/geometry_store.py -- create/remove, visibility,
snapshot/restore, z-order and clamping.
"""

import random
from unittest.mock import MagicMock

import pytest

from panel_engine.errors import DuplicatePanelError, PanelEngineError
from panel_engine.geometry_store import (
    OpResult,
    PanelGeometry,
    PanelGeometryStore,
    clamp,
    clamp_geometry,
)
from panel_engine.models import PanelSnapshot
from panel_engine.templates import PanelConfig


def _config(panel_id, x=0, y=0, width=200, height=100, hidden=False):
    return PanelConfig(panel_id, f"Title {panel_id}", x, y, width, height, hidden)


# ------------------------------------------------------------------
# Create / remove
# ------------------------------------------------------------------


class TestCreateRemove:
    def test_create_uses_config_geometry(self):
        store = PanelGeometryStore()
        inst = store.create_panel(_config("a", 10, 20, 300, 400))
        assert inst.geometry.as_tuple() == (10, 20, 300, 400)
        assert inst.visible is True
        assert "a" in store
        assert len(store) == 1

    def test_hidden_config_creates_hidden_panel(self):
        store = PanelGeometryStore()
        inst = store.create_panel(_config("a", hidden=True))
        assert inst.visible is False

    def test_duplicate_id_rejected(self):
        store = PanelGeometryStore()
        store.create_panel(_config("a"))
        with pytest.raises(DuplicatePanelError) as excinfo:
            store.create_panel(_config("a", 50, 50))
        assert excinfo.value.panel_id == "a"
        assert isinstance(excinfo.value, PanelEngineError)
        # Original instance untouched
        assert store.get("a").geometry.x == 0

    def test_geometry_is_independent_of_config(self):
        store = PanelGeometryStore()
        config = _config("a", 10, 10)
        store.create_panel(config)
        store.move("a", 99, 99)
        assert config.x == 10
        assert store.get("a").config.x == 10

    def test_remove_panel(self):
        store = PanelGeometryStore()
        store.create_panel(_config("a"))
        assert store.remove_panel("a") is OpResult.OK
        assert "a" not in store

    def test_remove_unknown_is_not_found(self):
        store = PanelGeometryStore()
        assert store.remove_panel("ghost") is OpResult.NOT_FOUND
        assert not store.remove_panel("ghost")

    def test_clear_all(self):
        store = PanelGeometryStore()
        for pid in "abc":
            store.create_panel(_config(pid))
        assert store.clear_all() == 3
        assert len(store) == 0

    def test_clear_all_limited_to_container(self):
        store = PanelGeometryStore()
        left, right = object(), object()
        store.create_panel(_config("a"), container=left)
        store.create_panel(_config("b"), container=right)
        assert store.clear_all(left) == 1
        assert store.panel_ids() == ["b"]

    def test_ids_stay_unique_under_random_operations(self):
        rng = random.Random(1234)
        store = PanelGeometryStore()
        ids = ["p%d" % i for i in range(6)]
        for _ in range(500):
            pid = rng.choice(ids)
            if rng.random() < 0.6:
                try:
                    store.create_panel(_config(pid))
                except DuplicatePanelError:
                    assert pid in store
            else:
                store.remove_panel(pid)
            current = store.panel_ids()
            assert len(current) == len(set(current))


# ------------------------------------------------------------------
# Visibility
# ------------------------------------------------------------------


class TestVisibility:
    def test_show_hide_toggle(self):
        store = PanelGeometryStore()
        store.create_panel(_config("a"))
        assert store.hide("a") is OpResult.OK
        assert store.is_visible("a") is False
        assert store.show("a") is OpResult.OK
        assert store.is_visible("a") is True
        store.toggle("a")
        assert store.is_visible("a") is False
        store.toggle("a")
        assert store.is_visible("a") is True

    @pytest.mark.parametrize("method", ["show", "hide", "toggle"])
    def test_unknown_panel_is_noop(self, method):
        store = PanelGeometryStore()
        store.create_panel(_config("a"))
        assert getattr(store, method)("ghost") is OpResult.NOT_FOUND
        assert store.is_visible("a") is True

    def test_visibility_listener_only_on_change(self):
        store = PanelGeometryStore()
        listener = MagicMock()
        store.add_listener(listener)
        store.create_panel(_config("a"))
        store.show("a")  # already visible
        listener.visibility_changed.assert_not_called()
        store.hide("a")
        listener.visibility_changed.assert_called_once()


# ------------------------------------------------------------------
# Snapshot / restore
# ------------------------------------------------------------------


class TestSnapshotRestore:
    def test_snapshot_reads_live_geometry(self):
        store = PanelGeometryStore()
        store.create_panel(_config("a", 0, 0, 200, 100))
        store.move("a", 40, 60)
        snap = store.snapshot()
        assert snap == [PanelSnapshot(id="a", title="Title a", x=40, y=60, width=200, height=100)]

    def test_snapshot_preserves_creation_order(self):
        store = PanelGeometryStore()
        for pid in ["z", "a", "m"]:
            store.create_panel(_config(pid))
        assert [s.id for s in store.snapshot()] == ["z", "a", "m"]

    def test_snapshot_records_hidden_panels(self):
        store = PanelGeometryStore()
        store.create_panel(_config("a", hidden=True))
        assert store.snapshot()[0].hidden is True
        assert "hidden" in store.snapshot()[0].model_dump()

    def test_snapshot_is_a_copy(self):
        store = PanelGeometryStore()
        store.create_panel(_config("a", 5, 5))
        snap = store.snapshot()
        store.move("a", 100, 100)
        assert snap[0].x == 5

    def test_snapshot_then_restore_is_idempotent(self):
        store = PanelGeometryStore()
        store.set_container_size(1200, 800)
        store.create_panel(_config("a", 10, 20, 300, 200))
        store.create_panel(_config("b", 400, 50, 250, 250))
        store.move("b", 420, 70)
        before = store.snapshot()
        assert store.restore(before) == 2
        assert store.snapshot() == before

    def test_restore_overwrites_matching_ids(self):
        store = PanelGeometryStore()
        store.create_panel(_config("a"))
        store.restore([{"id": "a", "title": "x", "x": 5, "y": 6, "width": 70, "height": 80}])
        assert store.get("a").geometry.as_tuple() == (5, 6, 70, 80)

    def test_restore_never_creates_panels(self):
        store = PanelGeometryStore()
        store.create_panel(_config("a"))
        count = store.restore([
            PanelSnapshot(id="ghost", x=1, y=1, width=1, height=1),
            PanelSnapshot(id="a", x=3, y=3, width=30, height=30),
        ])
        assert count == 1
        assert store.panel_ids() == ["a"]

    def test_restore_clamps_to_known_container(self):
        store = PanelGeometryStore()
        store.create_panel(_config("a"))
        store.set_container_size(800, 600)
        store.restore([PanelSnapshot(id="a", x=1000, y=900, width=300, height=200)])
        assert store.get("a").geometry.as_tuple() == (500, 400, 300, 200)

    def test_restore_respects_container_filter(self):
        store = PanelGeometryStore()
        mine, other = object(), object()
        store.create_panel(_config("a"), container=other)
        assert store.restore([PanelSnapshot(id="a", x=9, y=9, width=9, height=9)], mine) == 0
        assert store.get("a").geometry.x == 0


# ------------------------------------------------------------------
# Z-order
# ------------------------------------------------------------------


class TestZOrder:
    def test_empty_store_highest_is_zero(self):
        assert PanelGeometryStore().highest_z_order() == 0

    def test_raise_panel_puts_it_on_top(self):
        store = PanelGeometryStore()
        for pid in "abc":
            store.create_panel(_config(pid))
            store.raise_panel(pid)
        assert [store.get(p).z_order for p in "abc"] == [1, 2, 3]
        store.raise_panel("a")
        assert store.get("a").z_order == 4
        assert store.highest_z_order() == 4

    def test_raise_unknown(self):
        assert PanelGeometryStore().raise_panel("ghost") is OpResult.NOT_FOUND


# ------------------------------------------------------------------
# Clamping helpers
# ------------------------------------------------------------------


class TestClamping:
    def test_clamp_low_wins_on_empty_range(self):
        assert clamp(50, 0, -10) == 0
        assert clamp(5, 0, 10) == 5
        assert clamp(15, 0, 10) == 10

    def test_clamp_geometry_shrinks_oversized_panel(self):
        fitted = clamp_geometry(PanelGeometry(50, 50, 1000, 900), 800, 600)
        assert fitted.as_tuple() == (0, 0, 800, 600)

    def test_clamp_all_pulls_panels_inside(self):
        store = PanelGeometryStore()
        store.create_panel(_config("a", 900, 700, 200, 100))
        store.create_panel(_config("b", 10, 10, 200, 100))
        store.clamp_all(800, 600)
        assert store.get("a").geometry.as_tuple() == (600, 500, 200, 100)
        assert store.get("b").geometry.as_tuple() == (10, 10, 200, 100)
        assert store.container_size == (800, 600)

    def test_set_geometry_rejects_negative(self):
        store = PanelGeometryStore()
        store.create_panel(_config("a"))
        store.set_geometry("a", x=-5, y=-5)
        assert store.get("a").geometry.x == 0
        assert store.get("a").geometry.y == 0

    def test_geometry_listener_fires_on_change_only(self):
        store = PanelGeometryStore()
        listener = MagicMock()
        store.add_listener(listener)
        store.create_panel(_config("a", 0, 0))
        store.move("a", 0, 0)
        listener.geometry_changed.assert_not_called()
        store.move("a", 1, 0)
        listener.geometry_changed.assert_called_once()
