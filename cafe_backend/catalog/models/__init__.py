"""
PATH: catalog/models/__init__.py

Catalog models export surface.
"""

from .bundle import BundleItem
from .modifier import ModifierGroup, ModifierOption
from .product import Product

__all__ = [
    "Product",
    "ModifierGroup",
    "ModifierOption",
    "BundleItem",
]
