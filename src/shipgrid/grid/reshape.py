"""
Post-placement reshape driven by secondary system hints.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from shipgrid.models.catalog import SecondaryDef, SlotType

from .placement import clamp_ammo_bias, select_edge_utility_targets, select_inner_utility_targets
from .ratios import canonical_order


@dataclass(frozen=True)
class ReshapeTotals:
    """Reshape hints summed over the selected secondaries."""

    edge_utility: int = 0
    inner_utility: int = 0
    ammo_bias: float = 0.0

    def to_dict(self) -> dict[str, int]:
        return {"edge_utility": self.edge_utility, "inner_utility": self.inner_utility}


def sum_reshape_hints(secondaries: Iterable[SecondaryDef]) -> ReshapeTotals:
    """Sum hints in canonical order; ammo bias is clamped to [-3, 3]."""
    edge = inner = 0
    bias = 0.0
    for secondary in canonical_order(secondaries):
        edge += secondary.reshape.edge_utility
        inner += secondary.reshape.inner_utility
        bias += secondary.reshape.ammo_bias
    return ReshapeTotals(edge_utility=edge, inner_utility=inner, ammo_bias=clamp_ammo_bias(bias))


def apply_reshape(
    holes: list[bool],
    slots: list[SlotType | None],
    rows: int,
    cols: int,
    totals: ReshapeTotals,
    seed: str,
) -> None:
    """
    Force extra cells to Utility: edge cells first, then interior cells.

    Overrides earlier Power/Ammo assignments.
    """
    if totals.edge_utility > 0:
        targets = select_edge_utility_targets(
            holes, slots, rows, cols, totals.edge_utility, f"{seed}|edgeU"
        )
        for idx in targets:
            slots[idx] = "Utility"

    if totals.inner_utility > 0:
        targets = select_inner_utility_targets(
            holes, slots, rows, cols, totals.inner_utility, f"{seed}|innerU"
        )
        for idx in targets:
            slots[idx] = "Utility"
