"""
Data Models for Grids, Placements and Fits.

Grids are produced by shipgrid.grid.generator and never modified afterwards;
a fit's placement list is the only mutable state and is replaced wholesale
on every change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from .catalog import Rotation, SlotType

# =============================================================================
# Grid Models
# =============================================================================


@dataclass(frozen=True)
class GridCell:
    """
    A single grid cell.

    A hole is unusable and never carries a slot type.
    """

    r: int
    c: int
    slot: SlotType | None = None
    hole: bool = False

    def __post_init__(self) -> None:
        if self.hole and self.slot is not None:
            raise ValueError(f"hole cell ({self.r}, {self.c}) cannot carry slot {self.slot}")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        result: dict = {"r": self.r, "c": self.c}
        if self.slot is not None:
            result["slot"] = self.slot
        if self.hole:
            result["hole"] = True
        return result


@dataclass(frozen=True)
class GridMeta:
    """Traceability data for procedurally generated grids."""

    seed: str
    ratio: dict[str, float]
    reshape: dict[str, int] = field(default_factory=dict)
    ammo_bias: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "seed": self.seed,
            "ratio": dict(self.ratio),
            "reshape": dict(self.reshape),
            "ammo_bias": self.ammo_bias,
        }


@dataclass(frozen=True)
class Grid:
    """
    Row-major grid of cells.

    Exactly one of meta (procedural) or hull_id (fixed hull) is set.
    """

    rows: int
    cols: int
    cells: tuple[GridCell, ...]
    meta: GridMeta | None = None
    hull_id: str | None = None

    def index_of(self, r: int, c: int) -> int:
        return r * self.cols + c

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def cell_at(self, r: int, c: int) -> GridCell | None:
        """Return the cell at (r, c), or None when out of bounds."""
        if not self.in_bounds(r, c):
            return None
        return self.cells[self.index_of(r, c)]

    @property
    def usable_cells(self) -> list[GridCell]:
        """Non-hole cells in row-major order."""
        return [cell for cell in self.cells if not cell.hole]

    def slot_counts(self) -> dict[str, int]:
        """Count cells per designated slot type."""
        counts = {"Power": 0, "Ammo": 0, "Utility": 0}
        for cell in self.cells:
            if cell.slot is not None:
                counts[cell.slot] += 1
        return counts

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        result: dict = {
            "rows": self.rows,
            "cols": self.cols,
            "cells": [cell.to_dict() for cell in self.cells],
        }
        if self.meta is not None:
            result["meta"] = self.meta.to_dict()
        if self.hull_id is not None:
            result["hull_id"] = self.hull_id
        return result


# =============================================================================
# Placement Models
# =============================================================================


class Anchor(NamedTuple):
    """Grid coordinate a module's (0, 0) offset is pinned to."""

    r: int
    c: int


@dataclass(frozen=True)
class PlacedModule:
    """A module committed to the grid at an anchor and rotation."""

    module_id: str
    anchor: Anchor
    rotation: Rotation = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "module_id": self.module_id,
            "anchor": {"r": self.anchor.r, "c": self.anchor.c},
            "rotation": self.rotation,
        }


@dataclass(frozen=True)
class PlacementResult:
    """
    Outcome of a placement check.

    reason is one of "rotation-not-allowed", "out-of-bounds", "hole",
    "overlap" or (advisory checks only) "slot-mismatch".
    """

    ok: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.ok

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        result: dict = {"ok": self.ok}
        if self.reason:
            result["reason"] = self.reason
        return result


PLACEMENT_OK = PlacementResult(ok=True)


# =============================================================================
# Fit Model
# =============================================================================

FIT_VERSION = "r2.0"


@dataclass
class Fit:
    """
    A complete fit: selections, seed, grid and placements.

    derived_stats is always the full recomputation for the current
    placement list.
    """

    seed: str
    size_id: str | None
    primary_id: str | None
    secondary_ids: list[str] = field(default_factory=list)
    placed: list[PlacedModule] = field(default_factory=list)
    grid: Grid | None = None
    derived_stats: dict[str, float] = field(default_factory=dict)
    name: str = ""
    version: str = FIT_VERSION
    hull_id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "version": self.version,
            "seed": self.seed,
            "size_id": self.size_id,
            "primary_id": self.primary_id,
            "secondary_ids": list(self.secondary_ids),
            "hull_id": self.hull_id,
            "placed": [p.to_dict() for p in self.placed],
            "grid": self.grid.to_dict() if self.grid else None,
            "derived_stats": dict(self.derived_stats),
        }
