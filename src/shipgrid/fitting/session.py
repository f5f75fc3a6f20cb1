"""
Fit Session.

A FitSession owns the mutable state of one fitting: selections, the
current grid, the placement list and undo/redo history. Every mutation
replaces the placement list and recomputes derived stats in full.

Sessions are not thread-safe; use one per logical user session.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Union

from shipgrid.core.config import ShipgridSettings, get_settings
from shipgrid.core.logging import get_logger
from shipgrid.grid.generator import generate_grid, generate_grid_from_hull
from shipgrid.models.catalog import Catalog, Hull, ModuleDef
from shipgrid.models.fitting import (
    FIT_VERSION,
    PLACEMENT_OK,
    Fit,
    Grid,
    PlacedModule,
    PlacementResult,
)

from .compatibility import filter_modules_for_context, get_compatible_hulls
from .stats import BandwidthConfig, compute_derived_stats
from .validator import can_place

logger = get_logger(__name__)

MAX_SECONDARIES = 2
REASON_UNKNOWN_MODULE = "unknown-module"
REASON_NO_GRID = "no-grid"
REASON_BAD_INDEX = "index-out-of-range"


# =============================================================================
# Placement Actions
# =============================================================================


@dataclass(frozen=True)
class AddPlacement:
    placement: PlacedModule


@dataclass(frozen=True)
class RemovePlacement:
    index: int


@dataclass(frozen=True)
class MovePlacement:
    index: int
    to: PlacedModule


PlacementAction = Union[AddPlacement, RemovePlacement, MovePlacement]


def apply_placement(
    fit: Fit,
    action: PlacementAction,
    modules_by_id: Mapping[str, ModuleDef],
    **stat_context: Any,
) -> Fit:
    """
    Apply an action to a fit without validation and recompute its stats.

    Args:
        fit: Fit to update (not modified)
        action: Add, remove or move
        modules_by_id: Module lookup for stats
        **stat_context: Extra compute_derived_stats() arguments
            (size, primary, secondaries, hull, bw_config)

    Returns:
        New Fit with the updated placement list and stats
    """
    placed = list(fit.placed)
    if isinstance(action, AddPlacement):
        placed.append(action.placement)
    elif isinstance(action, RemovePlacement):
        del placed[action.index]
    elif isinstance(action, MovePlacement):
        placed[action.index] = action.to

    derived = compute_derived_stats(placed, modules_by_id, grid=fit.grid, **stat_context)
    return replace(fit, placed=placed, derived_stats=derived)


def refit_placements(
    grid: Grid,
    placed: list[PlacedModule],
    modules_by_id: Mapping[str, ModuleDef],
) -> list[PlacedModule]:
    """Replay placements onto a grid in order, keeping only those still legal."""
    kept: list[PlacedModule] = []
    for placement in placed:
        module = modules_by_id.get(placement.module_id)
        if module is None:
            continue
        if can_place(grid, module, placement.anchor, placement.rotation, kept, modules_by_id):
            kept.append(placement)
    return kept


# =============================================================================
# Session
# =============================================================================


class FitSession:
    """
    Mutable fitting state for a single user.

    Grid source: a selected hull takes precedence; otherwise a procedural
    grid is generated once both a ship size and a primary are selected.
    Any selection or seed change regenerates the grid, keeps the
    placements that still fit, and clears history. generate() and
    generate_from_hull() start over with no placements.
    """

    def __init__(
        self,
        catalog: Catalog,
        seed: str = "",
        settings: ShipgridSettings | None = None,
        bw_config: BandwidthConfig | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.catalog = catalog
        self.history_limit = settings.history_limit
        self.bw_config = bw_config or BandwidthConfig(k_bw=settings.bw_penalty_k)

        self.seed = seed
        self.size_id: str | None = None
        self.primary_id: str | None = None
        self.secondary_ids: list[str] = []
        self.hull_id: str | None = None

        self.grid: Grid | None = None
        self.placed: list[PlacedModule] = []
        self.derived_stats: dict[str, float] = {}
        self.undo_stack: list[list[PlacedModule]] = []
        self.redo_stack: list[list[PlacedModule]] = []

    # -------------------------------------------------------------------------
    # Selections
    # -------------------------------------------------------------------------

    @property
    def hull(self) -> Hull | None:
        return self.catalog.hulls_by_id.get(self.hull_id) if self.hull_id else None

    @property
    def modules_by_id(self) -> Mapping[str, ModuleDef]:
        return self.catalog.modules_by_id

    def select_size(self, size_id: str | None) -> None:
        self.size_id = size_id
        self.regenerate()

    def select_primary(self, primary_id: str | None) -> None:
        self.primary_id = primary_id
        self._reselect_hull()
        self.regenerate()

    def toggle_secondary(self, secondary_id: str) -> None:
        """Add or remove a secondary; at most two are kept (oldest first)."""
        if secondary_id in self.secondary_ids:
            selected = [s for s in self.secondary_ids if s != secondary_id]
        else:
            selected = [*self.secondary_ids, secondary_id]
        self.secondary_ids = selected[:MAX_SECONDARIES]
        self._reselect_hull()
        self.regenerate()

    def _reselect_hull(self) -> None:
        """Swap a selected hull that no longer suits the weapons for the first one that does."""
        if self.hull_id is None:
            return
        compatible = self.compatible_hulls()
        if any(h.id == self.hull_id for h in compatible):
            return
        replacement = compatible[0].id if compatible else None
        logger.debug(
            "Hull %s incompatible with selection, switching to %s", self.hull_id, replacement
        )
        self.hull_id = replacement

    def select_hull(self, hull_id: str | None) -> None:
        self.hull_id = hull_id
        self.regenerate()

    def set_seed(self, seed: str) -> None:
        self.seed = seed
        self.regenerate()

    def compatible_hulls(self) -> list[Hull]:
        primary = self.catalog.primaries_by_id.get(self.primary_id) if self.primary_id else None
        return get_compatible_hulls(
            self.catalog.hulls, primary, self.catalog.secondaries_for(self.secondary_ids)
        )

    def available_modules(self) -> list[ModuleDef]:
        """Module palette narrowed by hull and weapon tags."""
        primary = self.catalog.primaries_by_id.get(self.primary_id) if self.primary_id else None
        return filter_modules_for_context(
            self.catalog.modules,
            self.hull,
            primary,
            self.catalog.secondaries_for(self.secondary_ids),
        )

    # -------------------------------------------------------------------------
    # Grid
    # -------------------------------------------------------------------------

    def _build_grid(self) -> Grid | None:
        hull = self.hull
        if hull is not None:
            return generate_grid_from_hull(hull)

        size = self.catalog.sizes_by_id.get(self.size_id) if self.size_id else None
        primary = self.catalog.primaries_by_id.get(self.primary_id) if self.primary_id else None
        if size is None or primary is None:
            return None
        return generate_grid(
            primary, self.catalog.secondaries_for(self.secondary_ids), size, self.seed
        )

    def regenerate(self) -> Grid | None:
        """Rebuild the grid from current selections and re-validate placements."""
        self.grid = self._build_grid()
        if self.grid is None:
            kept: list[PlacedModule] = []
        else:
            kept = refit_placements(self.grid, self.placed, self.modules_by_id)
        dropped = len(self.placed) - len(kept)
        if dropped:
            logger.debug("Grid regenerated: dropped %d placement(s) that no longer fit", dropped)
        self.placed = kept
        self.clear_history()
        self.recompute()
        return self.grid

    def generate(self) -> Grid | None:
        """Start a fresh procedural fit: drop the hull, placements and history."""
        self.hull_id = None
        self.placed = []
        return self.regenerate()

    def generate_from_hull(self, hull_id: str) -> Grid | None:
        """Start a fresh fit on a fixed hull: drop placements and history."""
        self.hull_id = hull_id
        self.placed = []
        return self.regenerate()

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------

    def stat_context(self) -> dict[str, Any]:
        """Catalog records feeding compute_derived_stats() for this session."""
        hull = self.hull
        size_id = hull.size_id if hull is not None and hull.size_id else self.size_id
        return {
            "size": self.catalog.sizes_by_id.get(size_id) if size_id else None,
            "primary": self.catalog.primaries_by_id.get(self.primary_id)
            if self.primary_id
            else None,
            "secondaries": self.catalog.secondaries_for(self.secondary_ids),
            "hull": hull,
            "bw_config": self.bw_config,
        }

    def recompute(self) -> dict[str, float]:
        self.derived_stats = compute_derived_stats(
            self.placed, self.modules_by_id, grid=self.grid, **self.stat_context()
        )
        return self.derived_stats

    # -------------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------------

    def _check(self, action: PlacementAction) -> PlacementResult:
        if self.grid is None:
            return PlacementResult(ok=False, reason=REASON_NO_GRID)

        if isinstance(action, (RemovePlacement, MovePlacement)):
            if not 0 <= action.index < len(self.placed):
                return PlacementResult(ok=False, reason=REASON_BAD_INDEX)
        if isinstance(action, RemovePlacement):
            return PLACEMENT_OK

        target = action.placement if isinstance(action, AddPlacement) else action.to
        module = self.modules_by_id.get(target.module_id)
        if module is None:
            return PlacementResult(ok=False, reason=REASON_UNKNOWN_MODULE)

        others = self.placed
        if isinstance(action, MovePlacement):
            others = [p for i, p in enumerate(self.placed) if i != action.index]
        return can_place(
            self.grid, module, target.anchor, target.rotation, others, self.modules_by_id
        )

    def commit(self, action: PlacementAction) -> PlacementResult:
        """
        Validate and apply a placement action.

        Rejected actions leave the session untouched and are returned with
        their reason.
        """
        result = self._check(action)
        if not result.ok:
            logger.warning("Cannot apply %s: %s", type(action).__name__, result.reason)
            return result

        fit = apply_placement(self.to_fit(), action, self.modules_by_id, **self.stat_context())
        self._push(self.undo_stack, self.placed)
        self.redo_stack.clear()
        self.placed = fit.placed
        self.derived_stats = fit.derived_stats
        return result

    def _push(self, stack: list[list[PlacedModule]], snapshot: list[PlacedModule]) -> None:
        stack.append(list(snapshot))
        del stack[: -self.history_limit]

    def undo(self) -> bool:
        """Restore the previous placement list. Returns False when there is none."""
        if not self.undo_stack:
            return False
        self._push(self.redo_stack, self.placed)
        self.placed = self.undo_stack.pop()
        self.recompute()
        return True

    def redo(self) -> bool:
        """Re-apply an undone placement list. Returns False when there is none."""
        if not self.redo_stack:
            return False
        self._push(self.undo_stack, self.placed)
        self.placed = self.redo_stack.pop()
        self.recompute()
        return True

    def clear_history(self) -> None:
        self.undo_stack.clear()
        self.redo_stack.clear()

    # -------------------------------------------------------------------------
    # Fit Snapshots
    # -------------------------------------------------------------------------

    def to_fit(self, name: str = "") -> Fit:
        return Fit(
            seed=self.seed,
            size_id=self.size_id,
            primary_id=self.primary_id,
            secondary_ids=list(self.secondary_ids),
            placed=list(self.placed),
            grid=self.grid,
            derived_stats=dict(self.derived_stats),
            name=name,
            version=FIT_VERSION,
            hull_id=self.hull_id,
        )

    def load_fit(self, fit: Fit) -> None:
        """Adopt a fit's selections and placements (e.g. from a permalink)."""
        self.seed = fit.seed
        self.size_id = fit.size_id
        self.primary_id = fit.primary_id
        self.secondary_ids = list(fit.secondary_ids)[:MAX_SECONDARIES]
        self.hull_id = fit.hull_id
        self.placed = list(fit.placed)
        self.regenerate()
