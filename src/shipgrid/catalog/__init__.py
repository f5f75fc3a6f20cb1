"""
Catalog loading and module family variants.
"""

from .loader import CatalogError, catalog_from_dict, load_catalog, load_yaml_file
from .variants import (
    FAMILIES,
    ModuleFamily,
    VariantDefinition,
    hull_size_index,
    resolve_module_variants,
    select_variant_for_hull,
)

__all__ = [
    # Loader
    "CatalogError",
    "catalog_from_dict",
    "load_catalog",
    "load_yaml_file",
    # Variants
    "FAMILIES",
    "ModuleFamily",
    "VariantDefinition",
    "hull_size_index",
    "resolve_module_variants",
    "select_variant_for_hull",
]
