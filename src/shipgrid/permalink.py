"""
Fit permalinks.

A permalink carries only what is needed to re-derive a fit: seed,
selections and placements. The grid is never serialized; decoding
regenerates it from the catalog and drops placements that no longer fit.

Fixed hulls are not part of the payload. A fit built on a hull decodes to
the procedural grid of its size and primary, and to None when it has no
size or primary selected.

Wire format:
    base64url( zlib( msgpack(payload) ) ), padding stripped

    payload = {
        "v": "r2.0",                      # fit format version
        "rng": "mt19937-sha512/1",        # seeded stream algorithm
        "seed": str,
        "sizeId": str,
        "primaryId": str,
        "secondaryIds": [str, ...],
        "placed": [[moduleId, r, c, rotation], ...],
    }
"""

from __future__ import annotations

import base64
import binascii
import zlib

import msgpack
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from shipgrid.core.logging import get_logger
from shipgrid.core.rng import RNG_ALGORITHM
from shipgrid.fitting.stats import compute_derived_stats
from shipgrid.fitting.validator import can_place
from shipgrid.grid.generator import generate_grid
from shipgrid.models.catalog import Catalog
from shipgrid.models.fitting import FIT_VERSION, Anchor, Fit, PlacedModule

logger = get_logger(__name__)

FORMAT_VERSION = FIT_VERSION


class PermalinkPayload(BaseModel):
    """Decoded permalink body."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    v: str
    rng: str = RNG_ALGORITHM
    seed: str
    sizeId: str | None = None
    primaryId: str | None = None
    secondaryIds: list[str] = Field(default_factory=list)
    placed: list[tuple[str, int, int, int]] = Field(default_factory=list)


def encode_permalink(fit: Fit) -> str:
    """
    Encode a fit as a URL-safe permalink string.

    Only seed, selections and placements are stored; fit.hull_id is not.
    """
    payload = PermalinkPayload(
        v=FORMAT_VERSION,
        rng=RNG_ALGORITHM,
        seed=fit.seed,
        sizeId=fit.size_id,
        primaryId=fit.primary_id,
        secondaryIds=list(fit.secondary_ids),
        placed=[(p.module_id, p.anchor.r, p.anchor.c, p.rotation) for p in fit.placed],
    )
    packed = msgpack.packb(payload.model_dump(), use_bin_type=True)
    compressed = zlib.compress(packed, 9)
    return base64.urlsafe_b64encode(compressed).decode("ascii").rstrip("=")


def _unpack(code: str) -> PermalinkPayload | None:
    padded = code + "=" * (-len(code) % 4)
    try:
        compressed = base64.urlsafe_b64decode(padded.encode("ascii"))
        data = msgpack.unpackb(zlib.decompress(compressed), raw=False)
        return PermalinkPayload.model_validate(data)
    except (
        binascii.Error,
        zlib.error,
        msgpack.UnpackException,
        ValidationError,
        ValueError,
        TypeError,
    ) as e:
        logger.warning("Malformed permalink: %s", e)
        return None


def decode_permalink(code: str, catalog: Catalog) -> Fit | None:
    """
    Rebuild a fit from a permalink.

    The grid is regenerated from the seed and the catalog. Placements that
    reference unknown modules, use a rotation the module does not allow,
    or cover out-of-bounds or hole cells are dropped. Unknown secondaries
    are ignored.

    Returns:
        The decoded Fit, or None when the code is malformed, was written
        by an incompatible version, or names an unknown size or primary
    """
    payload = _unpack(code)
    if payload is None:
        return None

    if payload.v != FORMAT_VERSION or payload.rng != RNG_ALGORITHM:
        logger.warning(
            "Unsupported permalink version %s (rng %s); expected %s (rng %s)",
            payload.v,
            payload.rng,
            FORMAT_VERSION,
            RNG_ALGORITHM,
        )
        return None

    size = catalog.sizes_by_id.get(payload.sizeId) if payload.sizeId else None
    primary = catalog.primaries_by_id.get(payload.primaryId) if payload.primaryId else None
    if size is None or primary is None:
        logger.warning(
            "Permalink references unknown size %r or primary %r",
            payload.sizeId,
            payload.primaryId,
        )
        return None

    secondaries = catalog.secondaries_for(payload.secondaryIds)
    grid = generate_grid(primary, secondaries, size, payload.seed)

    placed: list[PlacedModule] = []
    for module_id, r, c, rotation in payload.placed:
        module = catalog.modules_by_id.get(module_id)
        if module is None:
            logger.debug("Dropping placement of unknown module %s", module_id)
            continue
        result = can_place(grid, module, Anchor(r, c), rotation, [], catalog.modules_by_id)
        if not result:
            logger.debug("Dropping %s at (%d, %d): %s", module_id, r, c, result.reason)
            continue
        placed.append(PlacedModule(module_id=module_id, anchor=Anchor(r, c), rotation=rotation))

    derived = compute_derived_stats(
        placed,
        catalog.modules_by_id,
        size=size,
        primary=primary,
        secondaries=secondaries,
        grid=grid,
    )
    return Fit(
        seed=payload.seed,
        size_id=size.id,
        primary_id=primary.id,
        secondary_ids=[s.id for s in secondaries],
        placed=placed,
        grid=grid,
        derived_stats=derived,
        version=payload.v,
    )
