"""
Pydantic Models for the Fitting Catalog.

Ship sizes, weapon archetypes, secondary systems, module definitions and
fixed hull templates. These are read-only inputs supplied by the catalog
owner; the core never mutates them.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Type Aliases
# =============================================================================

SlotType = Literal["Power", "Ammo", "Utility"]
"""Designated affinity of a grid cell or module."""

SLOT_TYPES: tuple[SlotType, ...] = ("Power", "Ammo", "Utility")

ShipSizeId = Literal["Frigate", "Destroyer", "Cruiser", "Capital"]
"""Ship size identifiers, smallest first."""

SHIP_SIZE_ORDER: tuple[ShipSizeId, ...] = ("Frigate", "Destroyer", "Cruiser", "Capital")

ShapeClass = Literal["long_narrow", "wide", "square", "irregular", "central_pockets"]
"""
Grid-shape influence of a primary weapon archetype:
- long_narrow: base dimensions
- wide: columns widened up to a cap
- square: rows and columns normalized to one side
- irregular: base dimensions, corners carved
- central_pockets: base dimensions, interior pockets carved
"""

Rotation = Literal[0, 90, 180, 270]
"""Clockwise quarter-turn rotation in degrees."""

SizeClass = Literal["S", "M", "L"]

SecondaryCategory = Literal["Offensive", "Utility", "Defensive"]

StatMap = dict[str, float]


# =============================================================================
# Base Model
# =============================================================================


class CatalogModel(BaseModel):
    """
    Base model for catalog records.

    Configuration:
    - frozen: catalog data is immutable once loaded
    - extra="forbid": catches typos in catalog files
    """

    model_config = ConfigDict(frozen=True, extra="forbid")


# =============================================================================
# Ratio and Reshape Models
# =============================================================================


class SlotRatio(CatalogModel):
    """Power/Ammo/Utility proportions of a grid."""

    P: float = Field(ge=0)
    A: float = Field(ge=0)
    U: float = Field(ge=0)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.P, self.A, self.U)


class RatioDelta(CatalogModel):
    """Signed adjustment a secondary applies to the primary's ratio."""

    dP: float = 0.0
    dA: float = 0.0
    dU: float = 0.0


class ReshapeHints(CatalogModel):
    """
    Post-placement adjustments requested by a secondary system.

    edge_utility and inner_utility convert that many extra cells to Utility
    at the hull edge or interior; ammo_bias pulls Ammo toward the left wall
    (positive) or right wall (negative).
    """

    edge_utility: int = Field(default=0, ge=0)
    inner_utility: int = Field(default=0, ge=0)
    ammo_bias: float = 0.0


# =============================================================================
# Ship and Weapon Records
# =============================================================================


class ShipSize(CatalogModel):
    """Ship size class with base grid dimensions."""

    id: ShipSizeId
    rows: int = Field(ge=1)
    cols: int = Field(ge=1)
    description: str | None = None
    base_stats: StatMap = Field(default_factory=dict)
    bw_limit: float | None = Field(default=None, ge=0)

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols


class PrimaryArchetype(CatalogModel):
    """Primary weapon system; exactly one per fit."""

    id: str
    name: str
    shape: ShapeClass
    base_ratio: SlotRatio
    description: str | None = None
    base_stats: StatMap = Field(default_factory=dict)
    tags: tuple[str, ...] = ()
    min_power_slots: int = Field(default=0, ge=0)
    min_ammo_slots: int = Field(default=0, ge=0)
    power_draw: float = 0.0
    heat_generation: float = 0.0


class SecondaryDef(CatalogModel):
    """Secondary system; zero to two per fit."""

    id: str
    name: str
    category: SecondaryCategory = "Utility"
    description: str | None = None
    delta: RatioDelta = Field(default_factory=RatioDelta)
    reshape: ReshapeHints = Field(default_factory=ReshapeHints)
    base_stats: StatMap = Field(default_factory=dict)
    tags: tuple[str, ...] = ()
    delta_power_slots: int = 0
    delta_ammo_slots: int = 0
    delta_utility_slots: int = 0
    power_draw: float = 0.0
    heat_generation: float = 0.0


# =============================================================================
# Module Records
# =============================================================================


class ShapeOffset(CatalogModel):
    """Cell offset relative to a module's anchor."""

    dr: int
    dc: int


class ModuleShape(CatalogModel):
    """Footprint of a module at rotation 0."""

    id: str
    cells: tuple[ShapeOffset, ...]
    rotations: tuple[Rotation, ...] = (0, 90, 180, 270)
    size_class: SizeClass = "S"

    @field_validator("cells")
    @classmethod
    def require_cells(cls, v: tuple[ShapeOffset, ...]) -> tuple[ShapeOffset, ...]:
        if not v:
            raise ValueError("module shape must cover at least one cell")
        return v

    @property
    def offsets(self) -> list[tuple[int, int]]:
        """Offsets as plain (dr, dc) tuples."""
        return [(cell.dr, cell.dc) for cell in self.cells]


class ModuleDef(CatalogModel):
    """
    Placeable module definition.

    Family metadata is set on variants produced by
    shipgrid.catalog.variants.resolve_module_variants().
    """

    id: str
    slot: SlotType
    shape: ModuleShape
    stats: StatMap = Field(default_factory=dict)
    base_bw: float | None = Field(default=None, ge=0)
    base_heat: float | None = None
    description: str | None = None
    tags: tuple[str, ...] = ()
    family_id: str | None = None
    family_name: str | None = None
    variant_tier: str | None = None
    min_hull_size: ShipSizeId | None = None


# =============================================================================
# Hull Templates
# =============================================================================


class HullSlot(CatalogModel):
    """A hull-declared slot at (r, c)."""

    r: int
    c: int
    type: SlotType


class HullGrid(CatalogModel):
    rows: int = Field(ge=1)
    cols: int = Field(ge=1)
    slots: tuple[HullSlot, ...] = ()


class Hull(CatalogModel):
    """Fixed hull template with an explicit slot layout."""

    id: str
    name: str
    grid: HullGrid
    size_id: ShipSizeId | None = None
    description: str | None = None
    power_capacity: float = 0.0
    heat_dissipation: float = 0.0
    bandwidth_limit: float | None = Field(default=None, ge=0)
    base_stats: StatMap = Field(default_factory=dict)
    compatible_tags: tuple[str, ...] = ()
    incompatible_tags: tuple[str, ...] = ()
    preferred_weapons: tuple[str, ...] = ()


# =============================================================================
# Catalog Bundle
# =============================================================================

_R = TypeVar("_R", ShipSize, PrimaryArchetype, SecondaryDef, ModuleDef, Hull)


def _unique_by_id(records: Iterable[_R]) -> tuple[_R, ...]:
    """Drop later records that repeat an id; first occurrence wins."""
    seen: set[str] = set()
    out: list[_R] = []
    for record in records:
        if record.id in seen:
            continue
        seen.add(record.id)
        out.append(record)
    return tuple(out)


class Catalog:
    """
    Immutable bundle of catalog records with id lookups.

    Constructed explicitly and passed to every operation that needs
    catalog data.
    """

    __slots__ = (
        "ship_sizes",
        "primaries",
        "secondaries",
        "modules",
        "hulls",
        "sizes_by_id",
        "primaries_by_id",
        "secondaries_by_id",
        "modules_by_id",
        "hulls_by_id",
    )

    def __init__(
        self,
        ship_sizes: Iterable[ShipSize] = (),
        primaries: Iterable[PrimaryArchetype] = (),
        secondaries: Iterable[SecondaryDef] = (),
        modules: Iterable[ModuleDef] = (),
        hulls: Iterable[Hull] = (),
    ) -> None:
        self.ship_sizes = _unique_by_id(ship_sizes)
        self.primaries = _unique_by_id(primaries)
        self.secondaries = _unique_by_id(secondaries)
        self.modules = _unique_by_id(modules)
        self.hulls = _unique_by_id(hulls)
        self.sizes_by_id = {s.id: s for s in self.ship_sizes}
        self.primaries_by_id = {p.id: p for p in self.primaries}
        self.secondaries_by_id = {s.id: s for s in self.secondaries}
        self.modules_by_id = {m.id: m for m in self.modules}
        self.hulls_by_id = {h.id: h for h in self.hulls}

    def __setattr__(self, name: str, value: object) -> None:
        if hasattr(self, name):
            raise AttributeError(f"Catalog is immutable; cannot set {name!r}")
        object.__setattr__(self, name, value)

    def secondaries_for(self, ids: Iterable[str]) -> list[SecondaryDef]:
        """Resolve secondary ids, skipping unknown ones."""
        return [self.secondaries_by_id[i] for i in ids if i in self.secondaries_by_id]

    def with_modules(self, modules: Iterable[ModuleDef]) -> Catalog:
        """Return a copy of this catalog with a different module list."""
        return Catalog(
            ship_sizes=self.ship_sizes,
            primaries=self.primaries,
            secondaries=self.secondaries,
            modules=modules,
            hulls=self.hulls,
        )

    def __repr__(self) -> str:
        return (
            f"Catalog(sizes={len(self.ship_sizes)}, primaries={len(self.primaries)}, "
            f"secondaries={len(self.secondaries)}, modules={len(self.modules)}, "
            f"hulls={len(self.hulls)})"
        )
