"""
Fitting: placement validation, derived stats, compatibility and sessions.
"""

from .compatibility import filter_modules_for_context, get_compatible_hulls, is_hull_compatible
from .session import (
    AddPlacement,
    FitSession,
    MovePlacement,
    PlacementAction,
    RemovePlacement,
    apply_placement,
)
from .stats import BandwidthConfig, BandwidthReport, compute_bandwidth, compute_derived_stats
from .validator import can_place, is_placement_optimal

__all__ = [
    # Validator
    "can_place",
    "is_placement_optimal",
    # Stats
    "BandwidthConfig",
    "BandwidthReport",
    "compute_bandwidth",
    "compute_derived_stats",
    # Compatibility
    "filter_modules_for_context",
    "get_compatible_hulls",
    "is_hull_compatible",
    # Session
    "AddPlacement",
    "FitSession",
    "MovePlacement",
    "PlacementAction",
    "RemovePlacement",
    "apply_placement",
]
