"""
Scored slot assignment.

Candidate cells are scored per slot type, grouped by score, and visited in
ascending score order. Ties inside a score bucket are broken by a seeded
shuffle keyed on the bucket, so equal cells are chosen deterministically
without favouring any side of the grid.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from shipgrid.core.rng import seeded_shuffle
from shipgrid.models.catalog import SlotType

AMMO_BIAS_WEIGHT = 0.75
AMMO_BIAS_LIMIT = 3.0

Scorer = Callable[[int, int], float]


def edge_distance(r: int, c: int, rows: int, cols: int) -> int:
    """Steps from (r, c) to the nearest grid edge."""
    return min(r, c, rows - 1 - r, cols - 1 - c)


def _center_distance_scorer(rows: int, cols: int) -> Scorer:
    center_r, center_c = (rows - 1) / 2, (cols - 1) / 2
    return lambda r, c: math.hypot(r - center_r, c - center_c)


def _ammo_wall_scorer(cols: int, ammo_bias: float) -> Scorer:
    # Positive (or zero) bias pulls toward the left wall, negative toward the right.
    target_wall = 0 if ammo_bias >= 0 else cols - 1
    weight = abs(ammo_bias) * AMMO_BIAS_WEIGHT
    return lambda r, c: abs(c - target_wall) - weight


def _edge_scorer(rows: int, cols: int) -> Scorer:
    return lambda r, c: edge_distance(r, c, rows, cols)


def clamp_ammo_bias(bias: float) -> float:
    return max(-AMMO_BIAS_LIMIT, min(AMMO_BIAS_LIMIT, bias))


def order_by_score(
    candidates: list[int],
    cols: int,
    score: Scorer,
    seed_prefix: str,
    descending: bool = False,
) -> list[int]:
    """
    Order cell indices by score bucket, shuffling within each bucket.

    Buckets are keyed by the score rounded to six decimals; each bucket is
    shuffled with seed "<seed_prefix>|<bucket>".
    """
    buckets: dict[float, list[int]] = {}
    for idx in candidates:
        r, c = divmod(idx, cols)
        key = round(score(r, c), 6)
        buckets.setdefault(key, []).append(idx)

    ordered: list[int] = []
    for key in sorted(buckets, reverse=descending):
        ordered.extend(seeded_shuffle(buckets[key], f"{seed_prefix}|{key:.6f}"))
    return ordered


def place_type(
    holes: list[bool],
    slots: list[SlotType | None],
    rows: int,
    cols: int,
    slot_type: SlotType,
    count: int,
    rng_seed: str,
    ammo_bias: float = 0.0,
) -> int:
    """
    Assign ``slot_type`` to up to ``count`` unassigned usable cells.

    Power prefers the grid center, Ammo the wall selected by ammo_bias,
    Utility the edges. Returns the number of cells assigned.
    """
    if count <= 0:
        return 0

    if slot_type == "Power":
        score = _center_distance_scorer(rows, cols)
    elif slot_type == "Ammo":
        score = _ammo_wall_scorer(cols, ammo_bias)
    else:
        score = _edge_scorer(rows, cols)

    candidates = [i for i in range(len(slots)) if not holes[i] and slots[i] is None]
    ordered = order_by_score(candidates, cols, score, f"{rng_seed}|{slot_type}")

    placed = 0
    for idx in ordered:
        if placed >= count:
            break
        if holes[idx] or slots[idx] is not None:
            continue
        slots[idx] = slot_type
        placed += 1
    return placed


def _non_utility_candidates(holes: list[bool], slots: list[SlotType | None]) -> list[int]:
    return [i for i in range(len(slots)) if not holes[i] and slots[i] != "Utility"]


def select_edge_utility_targets(
    holes: list[bool],
    slots: list[SlotType | None],
    rows: int,
    cols: int,
    count: int,
    rng_seed: str,
) -> list[int]:
    """Pick up to ``count`` non-Utility cells closest to the edge."""
    ordered = order_by_score(
        _non_utility_candidates(holes, slots),
        cols,
        _edge_scorer(rows, cols),
        f"{rng_seed}|edgeU",
    )
    return ordered[:count]


def select_inner_utility_targets(
    holes: list[bool],
    slots: list[SlotType | None],
    rows: int,
    cols: int,
    count: int,
    rng_seed: str,
) -> list[int]:
    """Pick up to ``count`` non-Utility cells farthest from the edge."""
    ordered = order_by_score(
        _non_utility_candidates(holes, slots),
        cols,
        _edge_scorer(rows, cols),
        f"{rng_seed}|innerU",
        descending=True,
    )
    return ordered[:count]
