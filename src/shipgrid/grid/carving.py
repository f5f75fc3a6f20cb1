"""
Hole carving with 4-connectivity preservation.

Carving works on a row-major list of hole flags. Every carve is tentative:
if the remaining usable cells stop forming one 4-connected component the
cell is restored.
"""

from __future__ import annotations

from collections import deque

from shipgrid.core.logging import get_logger
from shipgrid.core.rng import RNG, seeded_bool

logger = get_logger(__name__)

CORNER_CARVE_PROBABILITY = 0.6
SINGLE_POCKET_PROBABILITY = 0.75


def is_connected(holes: list[bool], rows: int, cols: int) -> bool:
    """
    Check that non-hole cells form a single 4-connected component.

    A grid with no usable cells counts as connected.
    """
    start = next((i for i, hole in enumerate(holes) if not hole), None)
    if start is None:
        return True

    visited = {start}
    queue = deque([start])
    while queue:
        cur = queue.popleft()
        r, c = divmod(cur, cols)
        for nr, nc in ((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)):
            if not (0 <= nr < rows and 0 <= nc < cols):
                continue
            ni = nr * cols + nc
            if holes[ni] or ni in visited:
                continue
            visited.add(ni)
            queue.append(ni)

    return len(visited) == holes.count(False)


def _try_carve(holes: list[bool], idx: int, rows: int, cols: int) -> bool:
    """Carve one cell, reverting if connectivity breaks. Returns True if kept."""
    prev = holes[idx]
    holes[idx] = True
    if is_connected(holes, rows, cols):
        return True
    holes[idx] = prev
    logger.debug("Carve at index %d rejected: would disconnect grid", idx)
    return False


def carve_irregular(holes: list[bool], rows: int, cols: int, rng: RNG) -> None:
    """Independently carve each corner with probability 0.6."""
    corners = ((0, 0), (0, cols - 1), (rows - 1, 0), (rows - 1, cols - 1))
    for r, c in corners:
        if not seeded_bool(CORNER_CARVE_PROBABILITY, rng):
            continue
        _try_carve(holes, r * cols + c, rows, cols)


def carve_central_pockets(holes: list[bool], rows: int, cols: int, rng: RNG) -> None:
    """
    Carve one (75%) or two pockets among interior cells around the center.

    Candidates are the 3x3 block around the center excluding edge cells.
    """
    pockets = 1 if seeded_bool(SINGLE_POCKET_PROBABILITY, rng) else 2
    center_r, center_c = rows // 2, cols // 2

    candidates: list[tuple[int, int]] = []
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            r, c = center_r + dr, center_c + dc
            if not (0 <= r < rows and 0 <= c < cols):
                continue
            if r in (0, rows - 1) or c in (0, cols - 1):
                continue
            candidates.append((r, c))

    for _ in range(pockets):
        if not candidates:
            break
        r, c = candidates.pop(int(rng.random() * len(candidates)))
        _try_carve(holes, r * cols + c, rows, cols)
