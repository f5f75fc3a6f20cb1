"""
Grid dimensions per archetype shape class.
"""

from __future__ import annotations

from shipgrid.models.catalog import PrimaryArchetype, ShipSize

# Maximum number of extra columns a "wide" archetype may add
WIDE_MAX_EXTRA_COLS = 2


def shape_dims(primary: PrimaryArchetype, size: ShipSize) -> tuple[int, int]:
    """
    Compute (rows, cols) for a procedural grid.

    long_narrow, irregular and central_pockets keep the ship size's base
    dimensions (the latter two carve holes afterwards). wide stretches the
    column count toward rows + 2, capped at WIDE_MAX_EXTRA_COLS extra
    columns. square collapses to a single side within the base bounds.
    """
    base_rows, base_cols = size.rows, size.cols

    if primary.shape == "wide":
        cols = max(base_cols, base_rows + 2)
        return base_rows, min(cols, base_cols + WIDE_MAX_EXTRA_COLS)

    if primary.shape == "square":
        side = max(base_rows, base_cols - 1)
        capped = min(side, max(base_rows, base_cols))
        return capped, capped

    return base_rows, base_cols
