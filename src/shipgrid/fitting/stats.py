"""
Derived Stats and Bandwidth Engine.

Stats are always recomputed from scratch: base stats of the ship size,
primary, secondaries (and hull, for fixed-hull fits), then every placed
module's stats, then percentage-bonus derivation. When a grid is given,
bandwidth is priced per module by slot mismatch and compared against the
size limit; overage degrades a responsiveness multiplier but never blocks
the fit.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from shipgrid.core.config import get_settings
from shipgrid.grid.shapes import covered_cells
from shipgrid.models.catalog import Hull, ModuleDef, PrimaryArchetype, SecondaryDef, ShipSize
from shipgrid.models.fitting import Grid, PlacedModule
from shipgrid.models.stats import DERIVATION_RULES, StatKey, format_stat, is_bonus_key

# Bandwidth limit per ship size when the size record has no explicit limit
BW_LIMIT_FALLBACK: dict[str, float] = {
    "Frigate": 60,
    "Destroyer": 85,
    "Cruiser": 110,
    "Capital": 150,
}
DEFAULT_BW_LIMIT = BW_LIMIT_FALLBACK["Frigate"]

# Base bandwidth for modules that do not declare one
SIZE_CLASS_DEFAULT_BW: dict[str, float] = {"S": 7, "M": 12, "L": 21}
DEFAULT_MODULE_BW = 10.0

DEFAULT_BW_PENALTY_K = 0.01


@dataclass(frozen=True)
class BandwidthConfig:
    """Tuning for the bandwidth penalty model."""

    k_bw: float = DEFAULT_BW_PENALTY_K
    limit_fallback: Mapping[str, float] = field(default_factory=lambda: dict(BW_LIMIT_FALLBACK))

    @classmethod
    def from_settings(cls) -> BandwidthConfig:
        return cls(k_bw=get_settings().bw_penalty_k)


@dataclass(frozen=True)
class ModuleBandwidth:
    """Bandwidth pricing of one placed module."""

    module_id: str
    base_bw: float
    mismatch: float

    @property
    def cost(self) -> float:
        return self.base_bw * (1 + self.mismatch)


@dataclass(frozen=True)
class BandwidthReport:
    """Bandwidth totals for a fit."""

    modules: tuple[ModuleBandwidth, ...]
    limit: float
    k_bw: float

    @property
    def total(self) -> float:
        return sum(m.cost for m in self.modules)

    @property
    def over(self) -> float:
        return max(0.0, self.total - self.limit)

    @property
    def responsiveness(self) -> float:
        return responsiveness_multiplier(self.over, self.k_bw)

    @property
    def mismatch_avg(self) -> float:
        if not self.modules:
            return 0.0
        return sum(m.mismatch for m in self.modules) / len(self.modules)

    def to_stats(self) -> dict[str, float]:
        return {
            StatKey.BW_TOTAL.value: self.total,
            StatKey.BW_LIMIT.value: self.limit,
            StatKey.BW_OVER.value: self.over,
            StatKey.RESPONSIVENESS.value: self.responsiveness,
            StatKey.BW_MISMATCH_AVG.value: self.mismatch_avg * 100,
        }


# =============================================================================
# Bandwidth
# =============================================================================


def module_base_bw(module: ModuleDef) -> float:
    """Declared base bandwidth, else the size-class default."""
    if module.base_bw is not None:
        return module.base_bw
    return SIZE_CLASS_DEFAULT_BW.get(module.shape.size_class, DEFAULT_MODULE_BW)


def mismatch_fraction(grid: Grid, module: ModuleDef, placement: PlacedModule) -> float:
    """
    Fraction of covered cells whose designated slot differs from the module's.

    Cells with no designation, or outside the grid, are not mismatches.
    """
    cells = covered_cells(module, placement.anchor, placement.rotation)
    if not cells:
        return 0.0
    mismatched = 0
    for r, c in cells:
        cell = grid.cell_at(r, c)
        if cell is not None and cell.slot is not None and cell.slot != module.slot:
            mismatched += 1
    return mismatched / len(cells)


def responsiveness_multiplier(bw_over: float, k_bw: float = DEFAULT_BW_PENALTY_K) -> float:
    """1 / (1 + k * overage): 1.0 at or under the limit, never reaching zero."""
    return 1 / (1 + k_bw * max(0.0, bw_over))


def resolve_bw_limit(
    size: ShipSize | None,
    hull: Hull | None = None,
    config: BandwidthConfig | None = None,
) -> float:
    """Hull limit, then the size's explicit limit, then the per-size fallback."""
    config = config or BandwidthConfig()
    if hull is not None and hull.bandwidth_limit is not None:
        return hull.bandwidth_limit
    if size is None:
        return DEFAULT_BW_LIMIT
    if size.bw_limit is not None:
        return size.bw_limit
    return config.limit_fallback.get(size.id, DEFAULT_BW_LIMIT)


def compute_bandwidth(
    grid: Grid,
    placed: Iterable[PlacedModule],
    modules_by_id: Mapping[str, ModuleDef],
    size: ShipSize | None = None,
    hull: Hull | None = None,
    config: BandwidthConfig | None = None,
) -> BandwidthReport:
    """Price every placed module against the grid."""
    config = config or BandwidthConfig.from_settings()
    priced: list[ModuleBandwidth] = []
    for placement in placed:
        module = modules_by_id.get(placement.module_id)
        if module is None:
            continue
        priced.append(
            ModuleBandwidth(
                module_id=module.id,
                base_bw=module_base_bw(module),
                mismatch=mismatch_fraction(grid, module, placement),
            )
        )
    return BandwidthReport(
        modules=tuple(priced),
        limit=resolve_bw_limit(size, hull, config),
        k_bw=config.k_bw,
    )


# =============================================================================
# Stat Aggregation
# =============================================================================


def _accumulate(totals: dict[str, float], stats: Mapping[str, float] | None) -> None:
    if not stats:
        return
    for key, value in stats.items():
        if value is None:
            continue
        totals[key] = totals.get(key, 0.0) + value


def apply_derivation_rules(totals: Mapping[str, float]) -> dict[str, float]:
    """
    Fold percentage bonuses into their base stats.

    Bonus keys are consumed; a bonus without its base stat has no effect.
    Rules sharing a target chain multiplicatively.
    """
    final = {k: v for k, v in totals.items() if not is_bonus_key(k)}
    for rule in DERIVATION_RULES:
        bonus = totals.get(rule.bonus.value)
        base = final.get(rule.target.value)
        if bonus is None or not base:
            continue
        final[rule.target.value] = rule.apply(base, bonus)
    return final


def compute_derived_stats(
    placed: Sequence[PlacedModule],
    modules_by_id: Mapping[str, ModuleDef],
    size: ShipSize | None = None,
    primary: PrimaryArchetype | None = None,
    secondaries: Iterable[SecondaryDef] = (),
    grid: Grid | None = None,
    bw_config: BandwidthConfig | None = None,
    hull: Hull | None = None,
) -> dict[str, float]:
    """
    Compute the full derived stat map for a fit.

    Args:
        placed: Placement list
        modules_by_id: Module lookup; unknown ids contribute nothing
        size: Ship size (base stats and bandwidth limit)
        primary: Primary archetype (base stats)
        secondaries: Secondary systems (base stats, accumulated)
        grid: Current grid; bandwidth keys are only produced when given
        bw_config: Penalty tuning; defaults come from settings
        hull: Fixed hull (base stats and bandwidth limit override)

    Returns:
        Stat name -> rounded value, zero-valued stats omitted
    """
    totals: dict[str, float] = {}

    if size is not None:
        _accumulate(totals, size.base_stats)
    if primary is not None:
        _accumulate(totals, primary.base_stats)
    for secondary in secondaries:
        _accumulate(totals, secondary.base_stats)
    if hull is not None:
        _accumulate(totals, hull.base_stats)

    for placement in placed:
        module = modules_by_id.get(placement.module_id)
        if module is not None:
            _accumulate(totals, module.stats)

    final = apply_derivation_rules(totals)

    if grid is not None:
        report = compute_bandwidth(grid, placed, modules_by_id, size, hull, bw_config)
        final.update(report.to_stats())

    out: dict[str, float] = {}
    for key, value in final.items():
        if value:
            out[key] = format_stat(key, value)
    return out
