"""
Catalog Loader Module.

Loads ship sizes, archetypes, secondaries, modules and hulls from a YAML
document into an immutable Catalog.

Expected layout:

    ship_sizes:  [{id: Frigate, rows: 3, cols: 3, bw_limit: 60}, ...]
    primaries:   [{id: railgun, name: Railgun, shape: long_narrow,
                   base_ratio: {P: 0.5, A: 0.3, U: 0.2}}, ...]
    secondaries: [...]
    modules:     [...]
    hulls:       [...]          # optional
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from shipgrid.core.config import get_settings
from shipgrid.core.logging import get_logger
from shipgrid.models.catalog import (
    Catalog,
    Hull,
    ModuleDef,
    PrimaryArchetype,
    SecondaryDef,
    ShipSize,
)

logger = get_logger(__name__)

REQUIRED_SECTIONS = ("ship_sizes", "primaries", "secondaries", "modules")


class CatalogError(ValueError):
    """Catalog data could not be loaded or failed validation."""


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML file as a mapping.

    Raises:
        CatalogError: If the file is missing, unparsable, or not a mapping
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CatalogError(f"Catalog file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _parse_section(data: Mapping[str, Any], section: str, model: type) -> list:
    raw = data.get(section) or []
    if not isinstance(raw, list):
        raise CatalogError(f"Catalog section '{section}' must be a list")

    records = []
    for i, item in enumerate(raw):
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            raise CatalogError(f"Invalid {section}[{i}]: {e}") from e
    return records


def catalog_from_dict(data: Mapping[str, Any]) -> Catalog:
    """
    Build a Catalog from an in-memory mapping.

    Records are deduplicated by id (first occurrence wins).

    Raises:
        CatalogError: On missing sections, invalid records, or hulls
            without slots
    """
    for section in REQUIRED_SECTIONS:
        if not data.get(section):
            raise CatalogError(f"Catalog section '{section}' is missing or empty")

    hulls: list[Hull] = _parse_section(data, "hulls", Hull)
    for hull in hulls:
        if not hull.grid.slots:
            raise CatalogError(f"Hull {hull.id} has an empty grid")

    catalog = Catalog(
        ship_sizes=_parse_section(data, "ship_sizes", ShipSize),
        primaries=_parse_section(data, "primaries", PrimaryArchetype),
        secondaries=_parse_section(data, "secondaries", SecondaryDef),
        modules=_parse_section(data, "modules", ModuleDef),
        hulls=hulls,
    )
    logger.debug("Loaded %r", catalog)
    return catalog


def load_catalog(path: Path | str | None = None) -> Catalog:
    """
    Load a catalog from YAML.

    Args:
        path: Catalog file; defaults to SHIPGRID_CATALOG_PATH

    Raises:
        CatalogError: If no path is available or the data is invalid
    """
    if path is None:
        path = get_settings().catalog_path
    if path is None:
        raise CatalogError("No catalog path given and SHIPGRID_CATALOG_PATH is not set")

    return catalog_from_dict(load_yaml_file(Path(path)))
