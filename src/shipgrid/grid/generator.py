"""
Grid Generation.

Two entry points:
- generate_grid(): procedural grid from a primary archetype, secondaries,
  ship size and seed. Same inputs always give an identical grid.
- generate_grid_from_hull(): projects a fixed hull's slot list onto a grid.
"""

from __future__ import annotations

from collections.abc import Sequence

from shipgrid.core.logging import get_logger
from shipgrid.core.rng import create_rng
from shipgrid.models.catalog import Hull, PrimaryArchetype, SecondaryDef, ShipSize, SlotType
from shipgrid.models.fitting import Grid, GridCell, GridMeta

from .carving import carve_central_pockets, carve_irregular
from .dimensions import shape_dims
from .placement import place_type
from .ratios import apply_secondaries, ratio_to_counts
from .reshape import apply_reshape, sum_reshape_hints

logger = get_logger(__name__)


def _freeze_cells(
    rows: int,
    cols: int,
    holes: list[bool],
    slots: list[SlotType | None],
) -> tuple[GridCell, ...]:
    return tuple(
        GridCell(
            r=i // cols,
            c=i % cols,
            slot=None if holes[i] else slots[i],
            hole=holes[i],
        )
        for i in range(rows * cols)
    )


def generate_grid(
    primary: PrimaryArchetype,
    secondaries: Sequence[SecondaryDef],
    size: ShipSize,
    seed: str,
) -> Grid:
    """
    Generate a procedural grid.

    Steps: dimensions from the shape class, hole carving (irregular and
    central_pockets only), ratio blending, largest-remainder counts,
    scored placement in P -> A -> U order, then secondary reshape.

    Args:
        primary: Primary weapon archetype
        secondaries: Zero to two secondary systems (order does not matter)
        size: Ship size
        seed: Seed string

    Returns:
        Immutable Grid with meta recording seed, effective ratio and reshape totals
    """
    rng = create_rng(seed)
    rows, cols = shape_dims(primary, size)
    holes = [False] * (rows * cols)
    slots: list[SlotType | None] = [None] * (rows * cols)

    if primary.shape == "irregular":
        carve_irregular(holes, rows, cols, rng)
    elif primary.shape == "central_pockets":
        carve_central_pockets(holes, rows, cols, rng)

    ratio = apply_secondaries(primary.base_ratio, secondaries)
    usable = holes.count(False)
    n_power, n_ammo, n_utility = ratio_to_counts(ratio.P, ratio.A, ratio.U, usable)

    reshape = sum_reshape_hints(secondaries)

    place_type(holes, slots, rows, cols, "Power", n_power, f"{seed}|P")
    place_type(holes, slots, rows, cols, "Ammo", n_ammo, f"{seed}|A", reshape.ammo_bias)
    place_type(holes, slots, rows, cols, "Utility", n_utility, f"{seed}|U")

    apply_reshape(holes, slots, rows, cols, reshape, seed)

    logger.debug(
        "Generated %dx%d grid for %s/%s seed=%r: usable=%d counts=P%d/A%d/U%d",
        rows,
        cols,
        size.id,
        primary.id,
        seed,
        usable,
        n_power,
        n_ammo,
        n_utility,
    )

    return Grid(
        rows=rows,
        cols=cols,
        cells=_freeze_cells(rows, cols, holes, slots),
        meta=GridMeta(
            seed=seed,
            ratio={"P": ratio.P, "A": ratio.A, "U": ratio.U},
            reshape=reshape.to_dict(),
            ammo_bias=reshape.ammo_bias,
        ),
    )


def generate_grid_from_hull(hull: Hull) -> Grid:
    """
    Build a grid from a hull template.

    All cells start empty; each declared slot is stamped onto its cell.
    Slots outside the grid are ignored.
    """
    rows, cols = hull.grid.rows, hull.grid.cols
    holes = [False] * (rows * cols)
    slots: list[SlotType | None] = [None] * (rows * cols)

    for slot in hull.grid.slots:
        if not (0 <= slot.r < rows and 0 <= slot.c < cols):
            logger.debug("Hull %s: ignoring out-of-bounds slot (%d, %d)", hull.id, slot.r, slot.c)
            continue
        slots[slot.r * cols + slot.c] = slot.type

    return Grid(
        rows=rows,
        cols=cols,
        cells=_freeze_cells(rows, cols, holes, slots),
        hull_id=hull.id,
    )
