# catalog/services/catalog_snapshot.py

"""
CATALOG SNAPSHOTS (READ-ONLY)

This module answers ONE question:
"What does the cart need to know about a product right now?"

Responsibilities:
- Convert ORM rows into immutable snapshots (ProductSnapshot / ModifierGroupSpec)
- Provide the read-only catalog access used by the cart and the storefront

RULES:
- READ-ONLY: no writes, ever
- Snapshots are plain data; they round-trip through the session as dicts
"""

from __future__ import annotations

from dataclasses import dataclass, field

from catalog.models import ModifierGroup, Product
from catalog.services.exceptions import ProductNotFoundError


@dataclass(frozen=True)
class ModifierOptionSpec:
    id: str
    name: str
    price: int = 0

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "price": self.price}

    @classmethod
    def from_dict(cls, data: dict) -> "ModifierOptionSpec":
        return cls(id=str(data["id"]), name=str(data.get("name", "")), price=int(data.get("price", 0)))


@dataclass(frozen=True)
class ModifierGroupSpec:
    id: str
    name: str
    is_required: bool = False
    selection_type: str = ModifierGroup.SELECTION_SINGLE
    options: tuple[ModifierOptionSpec, ...] = ()

    @property
    def is_single(self) -> bool:
        return self.selection_type == ModifierGroup.SELECTION_SINGLE

    def option(self, option_id: str) -> ModifierOptionSpec | None:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "is_required": self.is_required,
            "selection_type": self.selection_type,
            "options": [o.to_dict() for o in self.options],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ModifierGroupSpec":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            is_required=bool(data.get("is_required", False)),
            selection_type=str(data.get("selection_type") or ModifierGroup.SELECTION_SINGLE),
            options=tuple(ModifierOptionSpec.from_dict(o) for o in data.get("options") or []),
        )


@dataclass(frozen=True)
class ProductSnapshot:
    id: int
    name: str
    price: int
    category: str
    is_available: bool = True
    is_bundle: bool = False
    modifier_groups: tuple[ModifierGroupSpec, ...] = field(default_factory=tuple)

    def group(self, group_id: str) -> ModifierGroupSpec | None:
        for g in self.modifier_groups:
            if g.id == group_id:
                return g
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "is_available": self.is_available,
            "is_bundle": self.is_bundle,
            "modifier_groups": [g.to_dict() for g in self.modifier_groups],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProductSnapshot":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            price=int(data.get("price", 0)),
            category=str(data.get("category", "")),
            is_available=bool(data.get("is_available", True)),
            is_bundle=bool(data.get("is_bundle", False)),
            modifier_groups=tuple(
                ModifierGroupSpec.from_dict(g) for g in data.get("modifier_groups") or []
            ),
        )


# ============================================================
# ORM -> SNAPSHOT
# ============================================================


def snapshot_product(product: Product) -> ProductSnapshot:
    groups = []
    for g in product.modifier_groups.all():
        groups.append(
            ModifierGroupSpec(
                id=g.code,
                name=g.name,
                is_required=g.is_required,
                selection_type=g.selection_type,
                options=tuple(
                    ModifierOptionSpec(id=o.code, name=o.name, price=int(o.price or 0))
                    for o in g.options.all()
                ),
            )
        )

    return ProductSnapshot(
        id=product.id,
        name=product.name,
        price=int(product.unit_price or 0),
        category=product.category,
        is_available=bool(product.is_available),
        is_bundle=bool(product.is_bundle),
        modifier_groups=tuple(groups),
    )


def _product_queryset():
    return Product.objects.prefetch_related("modifier_groups__options")


def fetch_product(product_id) -> ProductSnapshot:
    product = _product_queryset().filter(pk=product_id).first()
    if product is None:
        raise ProductNotFoundError(f"Product {product_id} does not exist")
    return snapshot_product(product)


def list_products(*, category: str | None = None, available_only: bool = True, search: str | None = None):
    """
    Catalog listing used by the storefront.

    Filters:
    - category: exact label match ("Bundles" is a virtual category => is_bundle)
    - available_only: hide archived items (the admin "archive" flips is_available)
    - search: case-insensitive name match
    """
    qs = _product_queryset()

    if available_only:
        qs = qs.filter(is_available=True)

    if category:
        if category.strip().lower() == "bundles":
            qs = qs.filter(is_bundle=True)
        else:
            qs = qs.filter(category=category.strip())

    if search:
        qs = qs.filter(name__icontains=search.strip())

    return qs.order_by("category", "name")
