from .catalog_snapshot import (
    ModifierGroupSpec,
    ModifierOptionSpec,
    ProductSnapshot,
    fetch_product,
    list_products,
    snapshot_product,
)
from .modifier_rules import normalize_selections, validate_selections

__all__ = [
    "ModifierGroupSpec",
    "ModifierOptionSpec",
    "ProductSnapshot",
    "fetch_product",
    "list_products",
    "snapshot_product",
    "normalize_selections",
    "validate_selections",
]
