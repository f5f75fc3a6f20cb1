"""
Shipgrid Test Suite - Shared Fixtures and Configuration
"""

from __future__ import annotations

import copy

import pytest

from shipgrid.catalog.loader import catalog_from_dict
from shipgrid.core.config import reset_settings
from shipgrid.core.logging import reset_logging
from shipgrid.grid.generator import generate_grid_from_hull
from shipgrid.models.catalog import Catalog, Hull, ModuleDef

# =============================================================================
# Sample Catalog
# =============================================================================

ONE_CELL = {"id": "1x1", "cells": [{"dr": 0, "dc": 0}], "size_class": "S"}
BAR_2 = {
    "id": "1x2",
    "cells": [{"dr": 0, "dc": 0}, {"dr": 0, "dc": 1}],
    "rotations": [0, 90],
    "size_class": "M",
}
ELL_3 = {
    "id": "L3",
    "cells": [{"dr": 0, "dc": 0}, {"dr": 0, "dc": 1}, {"dr": 1, "dc": 0}],
    "size_class": "M",
}

SAMPLE_CATALOG = {
    "ship_sizes": [
        {"id": "Frigate", "rows": 3, "cols": 3, "base_stats": {"hull": 100}},
        {"id": "Destroyer", "rows": 4, "cols": 5, "base_stats": {"hull": 180}},
        {"id": "Cruiser", "rows": 5, "cols": 6, "bw_limit": 120},
        {"id": "Capital", "rows": 6, "cols": 8},
    ],
    "primaries": [
        {
            "id": "railgun",
            "name": "Railgun",
            "shape": "long_narrow",
            "base_ratio": {"P": 0.5, "A": 0.3, "U": 0.2},
            "base_stats": {"damage": 40, "range": 600, "rateOfFire": 2.0},
            "tags": ["kinetic"],
            "min_power_slots": 2,
            "min_ammo_slots": 1,
            "power_draw": 20,
        },
        {
            "id": "missiles",
            "name": "Missile Battery",
            "shape": "wide",
            "base_ratio": {"P": 0.3, "A": 0.5, "U": 0.2},
            "tags": ["explosive"],
            "min_ammo_slots": 3,
            "power_draw": 15,
        },
        {
            "id": "beam",
            "name": "Beam Laser",
            "shape": "square",
            "base_ratio": {"P": 0.6, "A": 0.1, "U": 0.3},
            "tags": ["energy"],
            "power_draw": 30,
        },
        {
            "id": "flak",
            "name": "Flak Cannon",
            "shape": "irregular",
            "base_ratio": {"P": 0.3, "A": 0.4, "U": 0.3},
            "tags": ["kinetic"],
        },
        {
            "id": "plasma",
            "name": "Plasma Lance",
            "shape": "central_pockets",
            "base_ratio": {"P": 0.4, "A": 0.3, "U": 0.3},
            "tags": ["energy"],
        },
    ],
    "secondaries": [
        {
            "id": "shield_booster",
            "name": "Shield Booster",
            "category": "Defensive",
            "delta": {"dU": 0.1},
            "base_stats": {"hull": 20},
            "power_draw": 5,
        },
        {
            "id": "sensor_suite",
            "name": "Sensor Suite",
            "category": "Utility",
            "delta": {"dP": -0.05, "dU": 0.1},
            "reshape": {"edge_utility": 1},
            "tags": ["sensor"],
        },
        {
            "id": "autoloader",
            "name": "Autoloader",
            "category": "Offensive",
            "delta": {"dA": 0.1},
            "reshape": {"ammo_bias": 2},
            "delta_ammo_slots": 1,
        },
    ],
    "modules": [
        {"id": "reactor", "slot": "Power", "shape": ONE_CELL, "stats": {"powerGen": 10}, "base_bw": 10},
        {"id": "capacitor", "slot": "Power", "shape": ONE_CELL, "stats": {"capBuffer": 12}, "base_bw": 10},
        {
            "id": "ammo_rack",
            "slot": "Ammo",
            "shape": BAR_2,
            "stats": {"ammoCap": 20},
            "base_bw": 10,
            "tags": ["kinetic"],
        },
        {
            "id": "loader",
            "slot": "Ammo",
            "shape": ONE_CELL,
            "stats": {"rofBonus": 10, "reloadBonus": 10},
            "tags": ["kinetic"],
        },
        {
            "id": "tracker",
            "slot": "Utility",
            "shape": ONE_CELL,
            "stats": {"tracking": 50, "trackingBonus": 20},
            "tags": ["sensor"],
        },
        {
            "id": "bulkhead",
            "slot": "Utility",
            "shape": ELL_3,
            "stats": {"armor": 35.4},
            "tags": ["explosive"],
        },
        {"id": "heavy_reactor", "slot": "Power", "shape": ONE_CELL, "stats": {"powerGen": 30}, "base_bw": 40},
    ],
    "hulls": [
        {
            "id": "skiff",
            "name": "Skiff",
            "size_id": "Frigate",
            "grid": {
                "rows": 3,
                "cols": 3,
                "slots": [
                    {"r": 0, "c": 0, "type": "Power"},
                    {"r": 0, "c": 1, "type": "Power"},
                    {"r": 0, "c": 2, "type": "Power"},
                    {"r": 1, "c": 0, "type": "Ammo"},
                    {"r": 1, "c": 1, "type": "Ammo"},
                    {"r": 1, "c": 2, "type": "Ammo"},
                    {"r": 2, "c": 0, "type": "Utility"},
                    {"r": 2, "c": 1, "type": "Utility"},
                    {"r": 2, "c": 2, "type": "Utility"},
                ],
            },
            "power_capacity": 40,
            "base_stats": {"armor": 50},
            "compatible_tags": ["kinetic"],
            "incompatible_tags": ["explosive"],
        },
        {
            "id": "bastion",
            "name": "Bastion",
            "size_id": "Cruiser",
            "grid": {
                "rows": 2,
                "cols": 4,
                "slots": [
                    {"r": 0, "c": 0, "type": "Power"},
                    {"r": 0, "c": 1, "type": "Power"},
                    {"r": 0, "c": 2, "type": "Power"},
                    {"r": 1, "c": 0, "type": "Ammo"},
                    {"r": 1, "c": 1, "type": "Ammo"},
                    {"r": 1, "c": 2, "type": "Ammo"},
                    {"r": 1, "c": 3, "type": "Ammo"},
                    {"r": 5, "c": 5, "type": "Utility"},
                ],
            },
            "power_capacity": 100,
            "bandwidth_limit": 30,
        },
    ],
}


@pytest.fixture
def catalog_data() -> dict:
    """Deep copy of the sample catalog mapping, safe to mutate."""
    return copy.deepcopy(SAMPLE_CATALOG)


@pytest.fixture
def catalog(catalog_data) -> Catalog:
    return catalog_from_dict(catalog_data)


@pytest.fixture
def modules_by_id(catalog) -> dict[str, ModuleDef]:
    return dict(catalog.modules_by_id)


@pytest.fixture
def skiff(catalog) -> Hull:
    """3x3 hull: Power row 0, Ammo row 1, Utility row 2."""
    return catalog.hulls_by_id["skiff"]


@pytest.fixture
def skiff_grid(skiff):
    return generate_grid_from_hull(skiff)


# =============================================================================
# Global State Reset
# =============================================================================


@pytest.fixture(autouse=True)
def reset_all_singletons():
    """Reset cached settings and logging handlers around every test."""
    reset_settings()
    reset_logging()
    yield
    reset_settings()
    reset_logging()
