"""
Shape and rotation utilities.

Module shapes are lists of (dr, dc) offsets from the anchor at rotation 0.
Rotations are clockwise quarter turns.
"""

from __future__ import annotations

from collections.abc import Iterable

from shipgrid.models.catalog import ModuleDef, Rotation
from shipgrid.models.fitting import Anchor

Offset = tuple[int, int]


def rotate_offsets(cells: Iterable[Offset], rotation: int) -> list[Offset]:
    """
    Rotate offsets by 0/90/180/270 degrees.

    90 maps (dr, dc) to (dc, -dr); 180 to (-dr, -dc); 270 to (-dc, dr).
    Any other value is treated as 0.
    """
    if rotation == 90:
        return [(dc, -dr) for dr, dc in cells]
    if rotation == 180:
        return [(-dr, -dc) for dr, dc in cells]
    if rotation == 270:
        return [(-dc, dr) for dr, dc in cells]
    return [(dr, dc) for dr, dc in cells]


def covered_cells(module: ModuleDef, anchor: Anchor, rotation: Rotation) -> list[Offset]:
    """Absolute (r, c) coordinates covered by a module. May be out of bounds."""
    r0, c0 = anchor
    return [(r0 + dr, c0 + dc) for dr, dc in rotate_offsets(module.shape.offsets, rotation)]


def covered_indices(
    module: ModuleDef,
    anchor: Anchor,
    rotation: Rotation,
    grid_cols: int,
) -> list[int]:
    """
    Row-major indices covered by a module.

    Callers must bounds-check: an out-of-range column wraps into a
    neighbouring row here.
    """
    return [r * grid_cols + c for r, c in covered_cells(module, anchor, rotation)]
