"""
Placement Validation.

Placement legality is purely geometric: legal rotation, inside the grid,
not over a hole, not over another module. Putting a module on cells of a
different slot type is legal and priced by the bandwidth engine instead;
is_placement_optimal() reports slot fit for hinting only.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from shipgrid.grid.shapes import covered_cells
from shipgrid.models.catalog import ModuleDef, Rotation
from shipgrid.models.fitting import (
    PLACEMENT_OK,
    Anchor,
    Grid,
    PlacedModule,
    PlacementResult,
)

REASON_ROTATION = "rotation-not-allowed"
REASON_BOUNDS = "out-of-bounds"
REASON_HOLE = "hole"
REASON_OVERLAP = "overlap"
REASON_SLOT_MISMATCH = "slot-mismatch"


def occupied_indices(
    grid: Grid,
    placements: Iterable[PlacedModule],
    modules_by_id: Mapping[str, ModuleDef],
) -> set[int]:
    """
    Replay placements into the set of grid indices they cover.

    Placements of unknown modules and out-of-bounds cells are skipped.
    """
    occupied: set[int] = set()
    for placement in placements:
        module = modules_by_id.get(placement.module_id)
        if module is None:
            continue
        for r, c in covered_cells(module, placement.anchor, placement.rotation):
            if grid.in_bounds(r, c):
                occupied.add(grid.index_of(r, c))
    return occupied


def can_place(
    grid: Grid,
    module: ModuleDef,
    anchor: Anchor | tuple[int, int],
    rotation: Rotation,
    existing: Iterable[PlacedModule],
    modules_by_id: Mapping[str, ModuleDef],
) -> PlacementResult:
    """
    Check whether a module may occupy ``anchor`` at ``rotation``.

    Args:
        grid: Current grid
        module: Module to place
        anchor: Grid coordinate for the module's (0, 0) offset
        rotation: Requested rotation
        existing: Placements already committed
        modules_by_id: Lookup for the modules in ``existing``

    Returns:
        PlacementResult; ok=False carries the first failing reason
    """
    if rotation not in module.shape.rotations:
        return PlacementResult(ok=False, reason=REASON_ROTATION)

    occupied = occupied_indices(grid, existing, modules_by_id)

    for r, c in covered_cells(module, Anchor(*anchor), rotation):
        if not grid.in_bounds(r, c):
            return PlacementResult(ok=False, reason=REASON_BOUNDS)
        idx = grid.index_of(r, c)
        if grid.cells[idx].hole:
            return PlacementResult(ok=False, reason=REASON_HOLE)
        if idx in occupied:
            return PlacementResult(ok=False, reason=REASON_OVERLAP)

    return PLACEMENT_OK


def is_placement_optimal(
    grid: Grid,
    module: ModuleDef,
    anchor: Anchor | tuple[int, int],
    rotation: Rotation,
    existing: Iterable[PlacedModule],
    modules_by_id: Mapping[str, ModuleDef],
) -> PlacementResult:
    """
    Advisory check: legal placement whose every covered cell matches the module's slot type.

    Cells without a slot designation do not match. Never used to gate commits.
    """
    result = can_place(grid, module, anchor, rotation, existing, modules_by_id)
    if not result.ok:
        return result

    for r, c in covered_cells(module, Anchor(*anchor), rotation):
        if grid.cells[grid.index_of(r, c)].slot != module.slot:
            return PlacementResult(ok=False, reason=REASON_SLOT_MISMATCH)

    return PLACEMENT_OK
