"""
Seeded randomness for grid generation.

Every generation step draws from an RNG keyed by a string seed, so the
same (selection, seed) always yields the same grid. The stream algorithm is
part of the permalink contract: changing it invalidates every shared fit.

Pinned algorithm:
    CPython ``random.Random`` (MT19937) seeded with the seed string using
    version-2 string seeding (SHA-512 over the UTF-8 bytes). Only
    ``Random.random()`` is consumed; shuffles and choices are derived from
    that float stream here rather than from ``Random.shuffle``.
"""

from __future__ import annotations

import math
import random
from typing import Sequence, TypeVar

T = TypeVar("T")

RNG_ALGORITHM = "mt19937-sha512/1"
"""Identifier of the pinned stream algorithm, recorded in permalinks."""

RNG = random.Random


def create_rng(seed: str) -> RNG:
    """
    Create an isolated RNG for a string seed.

    Args:
        seed: Seed string (any text, including empty)

    Returns:
        random.Random producing floats in [0, 1) via ``.random()``
    """
    return random.Random(seed)


def seeded_shuffle(items: Sequence[T], seed: str) -> list[T]:
    """
    Fisher-Yates shuffle using a fresh RNG keyed by ``seed``.

    The input is not modified.
    """
    rng = create_rng(seed)
    arr = list(items)
    for i in range(len(arr) - 1, 0, -1):
        j = math.floor(rng.random() * (i + 1))
        arr[i], arr[j] = arr[j], arr[i]
    return arr


def seeded_choice(items: Sequence[T], rng: RNG) -> T:
    """Pick one item using a single draw from ``rng``."""
    return items[math.floor(rng.random() * len(items))]


def seeded_bool(probability: float, rng: RNG) -> bool:
    """Return True with the given probability using a single draw."""
    return rng.random() < probability
