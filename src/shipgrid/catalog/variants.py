"""
Module Family Variants.

Some modules come in hull-size tiers: a larger hull gets a bigger
footprint, higher bandwidth cost and stronger stats. The family table
below is static; variants are derived from catalog modules on demand and
never stored.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from shipgrid.core.logging import get_logger
from shipgrid.models.catalog import (
    SHIP_SIZE_ORDER,
    Hull,
    ModuleDef,
    ModuleShape,
    ShapeOffset,
    ShipSizeId,
    SlotType,
)

logger = get_logger(__name__)

VARIANT_ID_SEPARATOR = "::"


@dataclass(frozen=True)
class VariantDefinition:
    """One hull-size tier of a module family."""

    tier: str
    min_hull_size: ShipSizeId
    slot: SlotType
    shape: ModuleShape
    base_bw: float
    stats: dict[str, float]


@dataclass(frozen=True)
class ModuleFamily:
    family_id: str
    family_name: str
    variants: tuple[VariantDefinition, ...]


def _shape(shape_id: str, cells: Iterable[tuple[int, int]], rotations, size_class) -> ModuleShape:
    return ModuleShape(
        id=shape_id,
        cells=tuple(ShapeOffset(dr=dr, dc=dc) for dr, dc in cells),
        rotations=tuple(rotations),
        size_class=size_class,
    )


_ALL = (0, 90, 180, 270)
_ONE = [(0, 0)]
_BAR2 = [(0, 0), (0, 1)]
_COL2 = [(0, 0), (1, 0)]
_ELL3 = [(0, 0), (0, 1), (1, 0)]
_SQ4 = [(0, 0), (0, 1), (1, 0), (1, 1)]
_RECT6 = [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)]
_TALL6 = [(0, 0), (0, 1), (1, 0), (1, 1), (2, 0), (2, 1)]


FAMILIES: dict[str, ModuleFamily] = {
    "flux_support": ModuleFamily(
        family_id="flux_support",
        family_name="Flux Support Matrix",
        variants=(
            VariantDefinition("frigate", "Frigate", "Utility", _shape("FluxSupport_S", _ONE, _ALL, "S"), 7, {"powerGen": 10, "capBuffer": 8, "repairRate": 4}),
            VariantDefinition("destroyer", "Destroyer", "Utility", _shape("FluxSupport_M", _BAR2, (0, 90), "M"), 11, {"powerGen": 14, "capBuffer": 12, "repairRate": 6}),
            VariantDefinition("cruiser", "Cruiser", "Utility", _shape("FluxSupport_L", _SQ4, (0,), "L"), 17, {"powerGen": 22, "capBuffer": 18, "repairRate": 8}),
            VariantDefinition("capital", "Capital", "Utility", _shape("FluxSupport_XL", _RECT6, (0,), "L"), 24, {"powerGen": 30, "capBuffer": 24, "repairRate": 12}),
        ),
    ),
    "energy_redistributor": ModuleFamily(
        family_id="energy_redistributor",
        family_name="Energy Redistributor",
        variants=(
            VariantDefinition("frigate", "Frigate", "Power", _shape("EnergyRedist_S", _ONE, _ALL, "S"), 8, {"powerGen": 10, "rofBonus": 2}),
            VariantDefinition("destroyer", "Destroyer", "Power", _shape("EnergyRedist_M", _BAR2, (0, 90), "M"), 12, {"powerGen": 16, "rofBonus": 3}),
            VariantDefinition("cruiser", "Cruiser", "Power", _shape("EnergyRedist_L", _ELL3, _ALL, "M"), 17, {"powerGen": 24, "rofBonus": 4}),
            VariantDefinition("capital", "Capital", "Power", _shape("EnergyRedist_XL", _RECT6, (0,), "L"), 22, {"powerGen": 32, "rofBonus": 5}),
        ),
    ),
    "surge_protector": ModuleFamily(
        family_id="surge_protector",
        family_name="Surge Protector Array",
        variants=(
            VariantDefinition("frigate", "Frigate", "Power", _shape("SurgeS", _ONE, _ALL, "S"), 8, {"capBuffer": 10, "repairRate": 1}),
            VariantDefinition("destroyer", "Destroyer", "Power", _shape("SurgeM", _BAR2, (0, 90), "M"), 13, {"capBuffer": 16, "repairRate": 2}),
            VariantDefinition("cruiser", "Cruiser", "Power", _shape("SurgeL", _SQ4, (0,), "L"), 18, {"capBuffer": 24, "repairRate": 3}),
            VariantDefinition("capital", "Capital", "Power", _shape("SurgeXL", _TALL6, (0,), "L"), 24, {"capBuffer": 32, "repairRate": 4}),
        ),
    ),
    "aux_reactor": ModuleFamily(
        family_id="aux_reactor",
        family_name="Auxiliary Reactor Node",
        variants=(
            VariantDefinition("frigate", "Frigate", "Power", _shape("AuxReactor_S", _ONE, _ALL, "S"), 9, {"powerGen": 16}),
            VariantDefinition("destroyer", "Destroyer", "Power", _shape("AuxReactor_M", _COL2, (0, 90), "M"), 13, {"powerGen": 22}),
            VariantDefinition("cruiser", "Cruiser", "Power", _shape("AuxReactor_L", _SQ4, (0,), "L"), 18, {"powerGen": 30}),
            VariantDefinition("capital", "Capital", "Power", _shape("AuxReactor_XL", _RECT6, (0,), "L"), 24, {"powerGen": 38}),
        ),
    ),
}


def hull_size_index(size: str | None) -> int:
    """Position in Frigate < Destroyer < Cruiser < Capital; unknown sizes rank as Frigate."""
    if size in SHIP_SIZE_ORDER:
        return SHIP_SIZE_ORDER.index(size)
    return 0


def _apply_variant(module: ModuleDef, family: ModuleFamily, variant: VariantDefinition, **extra) -> ModuleDef:
    return module.model_copy(
        update={
            "family_id": family.family_id,
            "family_name": family.family_name or module.family_name,
            "variant_tier": variant.tier,
            "min_hull_size": variant.min_hull_size,
            "slot": variant.slot,
            "shape": variant.shape,
            "base_bw": variant.base_bw,
            "stats": {**module.stats, **variant.stats},
            **extra,
        }
    )


def resolve_module_variants(modules: Iterable[ModuleDef]) -> list[ModuleDef]:
    """
    Expand family modules into one concrete module per tier.

    A module joins a family through its family_id, or its own id when
    family_id is unset. Variant ids are "<module id>::<tier>". Modules with
    no known family pass through unchanged.
    """
    resolved: list[ModuleDef] = []
    for module in modules:
        family = FAMILIES.get(module.family_id or module.id)
        if family is None:
            resolved.append(module)
            continue
        for variant in family.variants:
            resolved.append(
                _apply_variant(
                    module,
                    family,
                    variant,
                    id=f"{module.id}{VARIANT_ID_SEPARATOR}{variant.tier}",
                )
            )
        logger.debug("Expanded %s into %d variants", module.id, len(family.variants))
    return resolved


def select_variant_for_hull(module: ModuleDef, hull: Hull | None) -> ModuleDef:
    """
    Pick the largest tier whose minimum hull size fits the hull.

    The module id is kept; shape, slot, bandwidth, stats and tier are
    replaced. Modules without family metadata, unknown families, or hulls
    without a size come back unchanged.
    """
    if not module.family_id or not module.variant_tier or hull is None or not hull.size_id:
        return module

    family = FAMILIES.get(module.family_id)
    if family is None:
        return module

    hull_idx = hull_size_index(hull.size_id)
    eligible = [v for v in family.variants if hull_size_index(v.min_hull_size) <= hull_idx]
    if not eligible:
        return module

    best = max(eligible, key=lambda v: hull_size_index(v.min_hull_size))
    return _apply_variant(module, family, best)
