# catalog/serializers/__init__.py

from .product import ModifierGroupSerializer, ProductSerializer

__all__ = [
    "ModifierGroupSerializer",
    "ProductSerializer",
]
