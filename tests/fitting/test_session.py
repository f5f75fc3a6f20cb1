"""
Tests for fit sessions: placement actions, undo/redo and selection changes.
"""

from __future__ import annotations

import logging

import pytest

from shipgrid.catalog.loader import catalog_from_dict
from shipgrid.core.config import ShipgridSettings
from shipgrid.fitting.session import (
    REASON_BAD_INDEX,
    REASON_NO_GRID,
    REASON_UNKNOWN_MODULE,
    AddPlacement,
    FitSession,
    MovePlacement,
    RemovePlacement,
    apply_placement,
    refit_placements,
)
from shipgrid.fitting.validator import REASON_OVERLAP, REASON_ROTATION
from shipgrid.models.fitting import Anchor, Fit, PlacedModule


def _at(module_id: str, r: int, c: int, rotation: int = 0) -> PlacedModule:
    return PlacedModule(module_id, Anchor(r, c), rotation)


@pytest.fixture
def session(catalog) -> FitSession:
    """Session on the 3x3 skiff hull (Power / Ammo / Utility rows)."""
    s = FitSession(catalog, seed="session")
    s.select_hull("skiff")
    return s


class TestApplyPlacement:
    def test_add_returns_new_fit(self, modules_by_id, skiff_grid):
        fit = Fit(seed="s", size_id="Frigate", primary_id="railgun", grid=skiff_grid)

        updated = apply_placement(fit, AddPlacement(_at("reactor", 0, 0)), modules_by_id)

        assert updated.placed == [_at("reactor", 0, 0)]
        assert updated.derived_stats["powerGen"] == 10.0
        assert fit.placed == []
        assert fit.derived_stats == {}

    def test_remove_and_move(self, modules_by_id, skiff_grid):
        fit = Fit(
            seed="s",
            size_id="Frigate",
            primary_id="railgun",
            grid=skiff_grid,
            placed=[_at("reactor", 0, 0), _at("capacitor", 0, 1)],
        )

        removed = apply_placement(fit, RemovePlacement(0), modules_by_id)
        moved = apply_placement(fit, MovePlacement(1, _at("capacitor", 2, 2)), modules_by_id)

        assert removed.placed == [_at("capacitor", 0, 1)]
        assert moved.placed == [_at("reactor", 0, 0), _at("capacitor", 2, 2)]
        assert moved.derived_stats["BW_mismatchAvg"] == 50.0

    def test_stat_context_passed_through(self, catalog, modules_by_id, skiff_grid):
        fit = Fit(seed="s", size_id="Frigate", primary_id="railgun", grid=skiff_grid)

        updated = apply_placement(
            fit,
            AddPlacement(_at("reactor", 0, 0)),
            modules_by_id,
            size=catalog.sizes_by_id["Frigate"],
        )

        assert updated.derived_stats["hull"] == 100.0
        assert updated.derived_stats["BW_limit"] == 60.0


class TestRefitPlacements:
    def test_keeps_legal_in_order(self, modules_by_id, skiff_grid):
        placed = [
            _at("reactor", 0, 0),
            _at("capacitor", 0, 0),  # overlaps the reactor
            _at("ghost", 1, 1),
            _at("ammo_rack", 1, 2),  # leaves the grid
            _at("ammo_rack", 1, 0),
        ]

        kept = refit_placements(skiff_grid, placed, modules_by_id)

        assert kept == [_at("reactor", 0, 0), _at("ammo_rack", 1, 0)]


class TestCommit:
    def test_add(self, session):
        result = session.commit(AddPlacement(_at("reactor", 0, 0)))

        assert result.ok
        assert session.placed == [_at("reactor", 0, 0)]
        assert session.derived_stats["powerGen"] == 10.0
        assert session.derived_stats["armor"] == 50.0

    def test_rejected_add_leaves_state(self, session, caplog):
        session.commit(AddPlacement(_at("ammo_rack", 1, 0)))
        before = list(session.placed)

        with caplog.at_level(logging.WARNING):
            result = session.commit(AddPlacement(_at("reactor", 1, 1)))

        assert result.reason == REASON_OVERLAP
        assert session.placed == before
        assert len(session.undo_stack) == 1
        assert "overlap" in caplog.text

    def test_rotation_rejected(self, session):
        result = session.commit(AddPlacement(_at("ammo_rack", 1, 0, 180)))

        assert result.reason == REASON_ROTATION

    def test_unknown_module(self, session):
        assert session.commit(AddPlacement(_at("ghost", 0, 0))).reason == REASON_UNKNOWN_MODULE

    def test_no_grid(self, catalog):
        fresh = FitSession(catalog)

        assert fresh.grid is None
        assert fresh.commit(AddPlacement(_at("reactor", 0, 0))).reason == REASON_NO_GRID

    @pytest.mark.parametrize("index", [-1, 1, 5])
    def test_bad_index(self, session, index):
        session.commit(AddPlacement(_at("reactor", 0, 0)))

        assert session.commit(RemovePlacement(index)).reason == REASON_BAD_INDEX
        assert session.commit(MovePlacement(index, _at("reactor", 2, 2))).reason == REASON_BAD_INDEX

    def test_remove(self, session):
        session.commit(AddPlacement(_at("reactor", 0, 0)))
        session.commit(AddPlacement(_at("capacitor", 0, 1)))

        assert session.commit(RemovePlacement(0)).ok
        assert session.placed == [_at("capacitor", 0, 1)]
        assert "powerGen" not in session.derived_stats

    def test_move_ignores_own_footprint(self, session):
        session.commit(AddPlacement(_at("ammo_rack", 1, 0)))

        # shifting right by one overlaps only the rack's own old cell
        result = session.commit(MovePlacement(0, _at("ammo_rack", 1, 1)))

        assert result.ok
        assert session.placed == [_at("ammo_rack", 1, 1)]

    def test_move_checks_other_placements(self, session):
        session.commit(AddPlacement(_at("reactor", 0, 0)))
        session.commit(AddPlacement(_at("capacitor", 0, 1)))

        result = session.commit(MovePlacement(1, _at("capacitor", 0, 0)))

        assert result.reason == REASON_OVERLAP
        assert session.placed[1] == _at("capacitor", 0, 1)


class TestHistory:
    def test_undo_redo(self, session):
        session.commit(AddPlacement(_at("reactor", 0, 0)))
        session.commit(AddPlacement(_at("capacitor", 0, 1)))

        assert session.undo()
        assert session.placed == [_at("reactor", 0, 0)]
        assert "capBuffer" not in session.derived_stats

        assert session.redo()
        assert session.placed == [_at("reactor", 0, 0), _at("capacitor", 0, 1)]
        assert session.derived_stats["capBuffer"] == 12.0

    def test_empty_stacks(self, session):
        assert session.undo() is False
        assert session.redo() is False

    def test_commit_clears_redo(self, session):
        session.commit(AddPlacement(_at("reactor", 0, 0)))
        session.undo()

        session.commit(AddPlacement(_at("capacitor", 0, 2)))

        assert session.redo() is False

    def test_history_limit(self, catalog):
        s = FitSession(catalog, settings=ShipgridSettings(history_limit=2))
        s.select_hull("skiff")

        for c in range(3):
            s.commit(AddPlacement(_at("reactor", 0, c)))

        assert len(s.undo_stack) == 2
        assert s.undo()
        assert s.undo()
        assert s.undo() is False
        assert s.placed == [_at("reactor", 0, 0)]

    def test_clear_history(self, session):
        session.commit(AddPlacement(_at("reactor", 0, 0)))

        session.clear_history()

        assert session.undo() is False
        assert session.placed == [_at("reactor", 0, 0)]


class TestSelections:
    def test_procedural_grid_needs_size_and_primary(self, catalog):
        s = FitSession(catalog, seed="alpha")

        s.select_size("Frigate")
        assert s.grid is None

        s.select_primary("railgun")
        assert (s.grid.rows, s.grid.cols) == (3, 3)
        assert s.grid.meta.seed == "alpha"

    def test_toggle_secondary(self, catalog):
        s = FitSession(catalog)

        s.toggle_secondary("shield_booster")
        s.toggle_secondary("sensor_suite")
        s.toggle_secondary("autoloader")
        assert s.secondary_ids == ["shield_booster", "sensor_suite"]

        s.toggle_secondary("shield_booster")
        assert s.secondary_ids == ["sensor_suite"]

    def test_seed_change_regenerates(self, catalog):
        s = FitSession(catalog, seed="one")
        s.select_size("Capital")
        s.select_primary("flak")
        grids = {s.grid.cells}

        for i in range(5):
            s.set_seed(f"other-{i}")
            grids.add(s.grid.cells)

        assert len(grids) > 1

    def test_hull_change_keeps_fitting_placements(self, session):
        session.commit(AddPlacement(_at("reactor", 0, 0)))
        session.commit(AddPlacement(_at("tracker", 2, 2)))

        session.select_hull("bastion")

        assert (session.grid.rows, session.grid.cols) == (2, 4)
        assert session.placed == [_at("reactor", 0, 0)]
        assert session.undo() is False
        assert session.derived_stats["BW_limit"] == 30.0

    def test_generate_resets_placements(self, session):
        session.select_size("Frigate")
        session.select_primary("railgun")
        session.commit(AddPlacement(_at("reactor", 1, 1)))

        session.generate()

        assert session.hull_id is None
        assert session.grid.meta is not None
        assert session.placed == []

    def test_generate_from_hull(self, catalog):
        s = FitSession(catalog)

        s.generate_from_hull("skiff")

        assert s.grid.hull_id == "skiff"
        assert s.placed == []

    def test_hull_size_drives_limit(self, session):
        session.commit(AddPlacement(_at("reactor", 0, 0)))

        assert session.derived_stats["BW_limit"] == 60.0

    def test_compatible_hulls(self, catalog):
        s = FitSession(catalog)
        s.select_primary("missiles")

        assert [h.id for h in s.compatible_hulls()] == ["bastion"]

    def test_incompatible_hull_replaced_on_primary_change(self, session):
        session.select_primary("missiles")

        assert session.hull_id == "bastion"
        assert session.grid.hull_id == "bastion"

    def test_compatible_hull_kept(self, session):
        session.select_primary("railgun")

        assert session.hull_id == "skiff"

    def test_incompatible_hull_replaced_on_secondary_toggle(self, catalog_data):
        catalog_data["hulls"][0]["incompatible_tags"].append("sensor")
        s = FitSession(catalog_from_dict(catalog_data))
        s.select_hull("skiff")
        s.select_primary("railgun")

        s.toggle_secondary("sensor_suite")

        assert s.hull_id == "bastion"

    def test_hull_cleared_when_nothing_fits(self, catalog_data):
        catalog_data["hulls"][1]["power_capacity"] = 10
        s = FitSession(catalog_from_dict(catalog_data))
        s.select_hull("skiff")

        s.select_primary("missiles")

        assert s.hull_id is None
        assert s.grid is None

    def test_no_hull_stays_procedural(self, catalog):
        s = FitSession(catalog)
        s.select_size("Frigate")

        s.select_primary("missiles")

        assert s.hull_id is None
        assert s.grid.meta is not None

    def test_available_modules(self, session):
        session.select_primary("railgun")

        ids = {m.id for m in session.available_modules()}

        assert "bulkhead" not in ids
        assert "reactor" in ids


class TestFitSnapshots:
    def test_to_fit(self, catalog):
        s = FitSession(catalog, seed="snap")
        s.select_size("Frigate")
        s.select_primary("railgun")
        s.commit(AddPlacement(_at("reactor", 1, 1)))

        fit = s.to_fit(name="test")

        assert fit.name == "test"
        assert fit.seed == "snap"
        assert fit.size_id == "Frigate"
        assert fit.primary_id == "railgun"
        assert fit.placed == [_at("reactor", 1, 1)]
        assert fit.grid is s.grid
        assert fit.derived_stats == s.derived_stats

    def test_load_fit(self, catalog):
        fit = Fit(
            seed="load",
            size_id="Frigate",
            primary_id="railgun",
            secondary_ids=["shield_booster"],
            placed=[_at("reactor", 1, 1), _at("ammo_rack", 5, 5)],
        )
        s = FitSession(catalog)

        s.load_fit(fit)

        assert s.grid is not None
        assert s.secondary_ids == ["shield_booster"]
        assert s.placed == [_at("reactor", 1, 1)]
        assert s.derived_stats["hull"] == 120.0
