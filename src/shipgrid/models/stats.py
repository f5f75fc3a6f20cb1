"""
Stat keys and derivation rules for the derived-stats engine.

Stat maps stay keyed by plain strings so catalog data can introduce new
stats, but every key the engine treats specially is listed here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class StatKey(str, Enum):
    """Stat names with special meaning to the engine."""

    HULL = "hull"
    ARMOR = "armor"
    DAMAGE = "damage"
    RANGE = "range"
    RATE_OF_FIRE = "rateOfFire"
    TRACKING = "tracking"
    TRAVERSE_SPEED = "traverseSpeed"
    AMMO_CAP = "ammoCap"
    POWER_GEN = "powerGen"
    CAP_BUFFER = "capBuffer"
    HEAT_CAPACITY = "heatCapacity"
    POWER_CAPACITY = "powerCapacity"
    AMMO_CAPACITY = "ammoCapacity"
    DRONE_CONTROL = "droneControl"
    DRONE_CAPACITY = "droneCapacity"

    ROF_BONUS = "rofBonus"
    RELOAD_BONUS = "reloadBonus"
    TRACKING_BONUS = "trackingBonus"
    ARC_BONUS = "arcBonus"

    BW_TOTAL = "BW_total"
    BW_LIMIT = "BW_limit"
    BW_OVER = "BW_over"
    BW_MISMATCH_AVG = "BW_mismatchAvg"
    RESPONSIVENESS = "responsivenessMult"


BONUS_SUFFIX = "Bonus"
"""Keys ending in this suffix are percentage bonuses and never reported."""


@dataclass(frozen=True)
class StatDerivationRule:
    """A percentage bonus that scales a base stat multiplicatively."""

    bonus: StatKey
    target: StatKey

    def apply(self, base: float, bonus_pct: float) -> float:
        return base * (1 + bonus_pct / 100)


# Applied in order; rules sharing a target chain.
DERIVATION_RULES: tuple[StatDerivationRule, ...] = (
    StatDerivationRule(StatKey.ROF_BONUS, StatKey.RATE_OF_FIRE),
    StatDerivationRule(StatKey.RELOAD_BONUS, StatKey.RATE_OF_FIRE),
    StatDerivationRule(StatKey.TRACKING_BONUS, StatKey.TRACKING),
    StatDerivationRule(StatKey.ARC_BONUS, StatKey.TRAVERSE_SPEED),
)

INTEGER_STAT_KEYS: frozenset[str] = frozenset(
    k.value
    for k in (
        StatKey.HULL,
        StatKey.ARMOR,
        StatKey.DAMAGE,
        StatKey.RANGE,
        StatKey.AMMO_CAP,
        StatKey.POWER_GEN,
        StatKey.CAP_BUFFER,
        StatKey.HEAT_CAPACITY,
        StatKey.POWER_CAPACITY,
        StatKey.AMMO_CAPACITY,
        StatKey.DRONE_CONTROL,
        StatKey.DRONE_CAPACITY,
    )
)

# Multipliers need more precision than one decimal place.
RATIO_STAT_KEYS: frozenset[str] = frozenset({StatKey.RESPONSIVENESS.value})


def is_bonus_key(key: str) -> bool:
    return key.endswith(BONUS_SUFFIX)


def _round_half_up(value: float, places: int) -> float:
    scale = 10**places
    return math.floor(value * scale + 0.5) / scale


def format_stat(key: str, value: float) -> float:
    """Round a stat for output according to its key class (halves round up)."""
    if key in INTEGER_STAT_KEYS:
        return _round_half_up(value, 0)
    if key in RATIO_STAT_KEYS:
        return _round_half_up(value, 3)
    return _round_half_up(value, 1)
