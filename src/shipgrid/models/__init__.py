"""
Data structures for shipgrid.

Catalog records are frozen pydantic models; grids, placements and fits are
dataclasses.
"""

from .catalog import (
    SHIP_SIZE_ORDER,
    SLOT_TYPES,
    Catalog,
    CatalogModel,
    Hull,
    HullGrid,
    HullSlot,
    ModuleDef,
    ModuleShape,
    PrimaryArchetype,
    RatioDelta,
    ReshapeHints,
    Rotation,
    SecondaryDef,
    ShapeClass,
    ShapeOffset,
    ShipSize,
    ShipSizeId,
    SlotRatio,
    SlotType,
)
from .fitting import (
    FIT_VERSION,
    PLACEMENT_OK,
    Anchor,
    Fit,
    Grid,
    GridCell,
    GridMeta,
    PlacedModule,
    PlacementResult,
)
from .stats import DERIVATION_RULES, StatDerivationRule, StatKey

__all__ = [
    # Catalog
    "SHIP_SIZE_ORDER",
    "SLOT_TYPES",
    "Catalog",
    "CatalogModel",
    "Hull",
    "HullGrid",
    "HullSlot",
    "ModuleDef",
    "ModuleShape",
    "PrimaryArchetype",
    "RatioDelta",
    "ReshapeHints",
    "Rotation",
    "SecondaryDef",
    "ShapeClass",
    "ShapeOffset",
    "ShipSize",
    "ShipSizeId",
    "SlotRatio",
    "SlotType",
    # Fitting
    "FIT_VERSION",
    "PLACEMENT_OK",
    "Anchor",
    "Fit",
    "Grid",
    "GridCell",
    "GridMeta",
    "PlacedModule",
    "PlacementResult",
    # Stats
    "DERIVATION_RULES",
    "StatDerivationRule",
    "StatKey",
]
