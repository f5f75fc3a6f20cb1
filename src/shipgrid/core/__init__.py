"""
Shared infrastructure: settings, logging and seeded randomness.
"""

from .config import ShipgridSettings, get_settings, reset_settings
from .logging import get_logger, reset_logging
from .rng import RNG_ALGORITHM, create_rng, seeded_bool, seeded_choice, seeded_shuffle

__all__ = [
    # Config
    "ShipgridSettings",
    "get_settings",
    "reset_settings",
    # Logging
    "get_logger",
    "reset_logging",
    # RNG
    "RNG_ALGORITHM",
    "create_rng",
    "seeded_bool",
    "seeded_choice",
    "seeded_shuffle",
]
