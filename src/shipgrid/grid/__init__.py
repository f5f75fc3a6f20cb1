"""
Grid generation: seeded procedural grids and fixed hull projection.
"""

from .carving import carve_central_pockets, carve_irregular, is_connected
from .dimensions import shape_dims
from .generator import generate_grid, generate_grid_from_hull
from .ratios import apply_secondaries, ratio_to_counts
from .shapes import covered_cells, covered_indices, rotate_offsets

__all__ = [
    "apply_secondaries",
    "carve_central_pockets",
    "carve_irregular",
    "covered_cells",
    "covered_indices",
    "generate_grid",
    "generate_grid_from_hull",
    "is_connected",
    "ratio_to_counts",
    "rotate_offsets",
    "shape_dims",
]
