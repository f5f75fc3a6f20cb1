"""
Hull compatibility and module context filtering.

Both are soft filters used to narrow choices; neither affects placement
legality or stats.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from shipgrid.models.catalog import Hull, ModuleDef, PrimaryArchetype, SecondaryDef


def _slot_counts(hull: Hull) -> dict[str, int]:
    counts = {"Power": 0, "Ammo": 0, "Utility": 0}
    for slot in hull.grid.slots:
        counts[slot.type] += 1
    return counts


def is_hull_compatible(
    hull: Hull,
    primary: PrimaryArchetype,
    secondaries: Sequence[SecondaryDef] = (),
) -> bool:
    """
    Check a hull against a weapon selection.

    The hull must supply the combined power draw, enough Power/Ammo/Utility
    slots for the primary's minimums plus secondary deltas, and must not
    list any of the weapons' tags as incompatible.
    """
    total_power = primary.power_draw + sum(s.power_draw for s in secondaries)
    if total_power > hull.power_capacity:
        return False

    counts = _slot_counts(hull)
    required_power = primary.min_power_slots + sum(s.delta_power_slots for s in secondaries)
    required_ammo = primary.min_ammo_slots + sum(s.delta_ammo_slots for s in secondaries)
    required_utility = sum(s.delta_utility_slots for s in secondaries)
    if counts["Power"] < required_power:
        return False
    if counts["Ammo"] < required_ammo:
        return False
    if counts["Utility"] < required_utility:
        return False

    weapon_tags = set(primary.tags)
    for secondary in secondaries:
        weapon_tags.update(secondary.tags)
    return not weapon_tags.intersection(hull.incompatible_tags)


def get_compatible_hulls(
    hulls: Iterable[Hull],
    primary: PrimaryArchetype | None,
    secondaries: Sequence[SecondaryDef] = (),
) -> list[Hull]:
    """Hulls compatible with the selection; all hulls when no primary is chosen."""
    hulls = list(hulls)
    if primary is None:
        return hulls
    return [h for h in hulls if is_hull_compatible(h, primary, secondaries)]


def filter_modules_for_context(
    modules: Sequence[ModuleDef],
    hull: Hull | None,
    primary: PrimaryArchetype | None,
    secondaries: Sequence[SecondaryDef] = (),
) -> list[ModuleDef]:
    """
    Narrow the module palette by tags.

    Modules carrying a hull-incompatible tag are removed. When the hull
    lists compatible tags, a module is kept if it shares one with the hull
    or the weapon selection, or has no tags. Without hull preferences a
    tagged module must share a tag with the selection. Never returns an
    empty list: if nothing survives, every module is returned.
    """
    if hull is None:
        return list(modules)

    selection_tags: set[str] = set(primary.tags) if primary else set()
    for secondary in secondaries:
        selection_tags.update(secondary.tags)

    def keep(module: ModuleDef) -> bool:
        tags = set(module.tags)
        if tags.intersection(hull.incompatible_tags):
            return False
        if hull.compatible_tags:
            if tags.intersection(hull.compatible_tags) or tags.intersection(selection_tags):
                return True
            return not tags
        if not tags or not selection_tags:
            return True
        return bool(tags.intersection(selection_tags))

    filtered = [m for m in modules if keep(m)]
    return filtered or list(modules)
