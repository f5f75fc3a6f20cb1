"""
Slot ratio blending and apportionment.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from shipgrid.models.catalog import SecondaryDef, SlotRatio

EVEN_SPLIT = SlotRatio(P=1 / 3, A=1 / 3, U=1 / 3)


def canonical_order(secondaries: Iterable[SecondaryDef]) -> list[SecondaryDef]:
    """Secondaries sorted by id, the order every blending step uses."""
    return sorted(secondaries, key=lambda s: s.id)


def apply_secondaries(base_ratio: SlotRatio, secondaries: Iterable[SecondaryDef]) -> SlotRatio:
    """
    Blend secondary deltas into a base ratio.

    Components are clamped at zero and renormalized; if everything
    collapses to zero the result is an even split.
    """
    p, a, u = base_ratio.as_tuple()
    for secondary in canonical_order(secondaries):
        p += secondary.delta.dP
        a += secondary.delta.dA
        u += secondary.delta.dU

    p, a, u = max(0.0, p), max(0.0, a), max(0.0, u)
    total = p + a + u
    if total == 0:
        return EVEN_SPLIT
    return SlotRatio(P=p / total, A=a / total, U=u / total)


def ratio_to_counts(p: float, a: float, u: float, n: int) -> tuple[int, int, int]:
    """
    Convert a ratio into integer counts summing to n.

    Largest-remainder apportionment: floors first, then one extra cell to
    each component in descending fractional-remainder order. Ties keep
    P, A, U order.
    """
    targets = (p * n, a * n, u * n)
    counts = [math.floor(t) for t in targets]
    remaining = n - sum(counts)

    by_fraction = sorted(range(3), key=lambda i: targets[i] - counts[i], reverse=True)
    for i in by_fraction:
        if remaining <= 0:
            break
        counts[i] += 1
        remaining -= 1

    return counts[0], counts[1], counts[2]
