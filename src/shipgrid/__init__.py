"""
shipgrid - Grid-based ship fitting core

Procedural slot grids, module placement, derived stats and permalinks for
a ship fitting tool.

Usage:
    from shipgrid import FitSession, PlacedModule, Anchor, load_catalog
    from shipgrid.fitting import AddPlacement

    catalog = load_catalog("catalog.yaml")
    session = FitSession(catalog, seed="alpha")
    session.select_size("Frigate")
    session.select_primary("railgun")
    session.commit(AddPlacement(PlacedModule("reactor", Anchor(0, 0))))
    code = encode_permalink(session.to_fit())

Package structure:
    shipgrid/
    ├── core/           # Settings, logging, seeded RNG
    ├── models/         # Catalog records, grids, fits, stat keys
    ├── grid/           # Grid generation
    ├── fitting/        # Validation, stats, compatibility, sessions
    ├── catalog/        # YAML loading and module variants
    └── permalink.py    # Fit permalinks
"""

__version__ = "1.0.0"

from .catalog import CatalogError, load_catalog, resolve_module_variants, select_variant_for_hull
from .fitting import FitSession, can_place, compute_derived_stats
from .grid import generate_grid, generate_grid_from_hull
from .models import Anchor, Catalog, Fit, Grid, PlacedModule, PlacementResult
from .permalink import decode_permalink, encode_permalink

__all__ = [
    "__version__",
    "Anchor",
    "Catalog",
    "CatalogError",
    "Fit",
    "FitSession",
    "Grid",
    "PlacedModule",
    "PlacementResult",
    "can_place",
    "compute_derived_stats",
    "decode_permalink",
    "encode_permalink",
    "generate_grid",
    "generate_grid_from_hull",
    "load_catalog",
    "resolve_module_variants",
    "select_variant_for_hull",
]
