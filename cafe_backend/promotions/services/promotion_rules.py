# promotions/services/promotion_rules.py

"""
PROMOTION RULES (DOMAIN)

Immutable, validated view of a Promotion used by the evaluator.

Scope is a tagged variant instead of "scope string + maybe-set target columns":
- OrderScope()                 -> whole cart
- CategoryScope(category)      -> lines whose product category matches
- ProductScope(product_id)     -> lines of that product

A rule that cannot be represented (scoped promotion without its target,
percentage over 100, ...) fails at construction with InvalidPromotionConfiguration.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from django.utils.dateparse import parse_datetime

from promotions.models import Promotion
from promotions.services.exceptions import InvalidPromotionConfiguration


@dataclass(frozen=True)
class OrderScope:
    kind = Promotion.SCOPE_ORDER

    def matches(self, line) -> bool:
        return True

    def to_dict(self) -> dict:
        return {"kind": self.kind}


@dataclass(frozen=True)
class CategoryScope:
    category: str
    kind = Promotion.SCOPE_CATEGORY

    def matches(self, line) -> bool:
        return line.category == self.category

    def to_dict(self) -> dict:
        return {"kind": self.kind, "category": self.category}


@dataclass(frozen=True)
class ProductScope:
    product_id: int
    kind = Promotion.SCOPE_PRODUCT

    def matches(self, line) -> bool:
        return line.product_id == self.product_id

    def to_dict(self) -> dict:
        return {"kind": self.kind, "product_id": self.product_id}


PromotionScope = Union[OrderScope, CategoryScope, ProductScope]


def scope_from_dict(data: dict) -> PromotionScope:
    kind = (data or {}).get("kind")
    if kind == Promotion.SCOPE_ORDER:
        return OrderScope()
    if kind == Promotion.SCOPE_CATEGORY and (data.get("category") or "").strip():
        return CategoryScope(category=data["category"].strip())
    if kind == Promotion.SCOPE_PRODUCT and data.get("product_id") is not None:
        return ProductScope(product_id=int(data["product_id"]))
    raise InvalidPromotionConfiguration("Invalid promotion scope setup.")


@dataclass(frozen=True)
class PromotionRule:
    code: str
    discount_type: str
    value: int
    scope: PromotionScope
    starts_at: datetime
    ends_at: datetime | None = None
    is_active: bool = True
    min_order_value: int | None = None
    min_quantity: int | None = None
    description: str = ""

    def __post_init__(self):
        if self.discount_type not in (Promotion.TYPE_PERCENTAGE, Promotion.TYPE_FIXED_AMOUNT):
            raise InvalidPromotionConfiguration(f"Unknown discount type '{self.discount_type}'.")

        if self.value is None or int(self.value) < 0:
            raise InvalidPromotionConfiguration("Promotion value cannot be negative.")

        if self.discount_type == Promotion.TYPE_PERCENTAGE and int(self.value) > 100:
            raise InvalidPromotionConfiguration("Percentage promotion cannot exceed 100%.")

        if self.starts_at is None:
            raise InvalidPromotionConfiguration("Promotion start date is missing.")

    @property
    def is_percentage(self) -> bool:
        return self.discount_type == Promotion.TYPE_PERCENTAGE

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "discount_type": self.discount_type,
            "value": int(self.value),
            "scope": self.scope.to_dict(),
            "starts_at": self.starts_at.isoformat(),
            "ends_at": self.ends_at.isoformat() if self.ends_at else None,
            "is_active": self.is_active,
            "min_order_value": self.min_order_value,
            "min_quantity": self.min_quantity,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PromotionRule":
        ends_at = data.get("ends_at")
        return cls(
            code=str(data["code"]),
            discount_type=str(data["discount_type"]),
            value=int(data["value"]),
            scope=scope_from_dict(data.get("scope") or {}),
            starts_at=parse_datetime(data["starts_at"]),
            ends_at=parse_datetime(ends_at) if ends_at else None,
            is_active=bool(data.get("is_active", True)),
            min_order_value=data.get("min_order_value"),
            min_quantity=data.get("min_quantity"),
            description=str(data.get("description") or ""),
        )


def build_scope(promotion: Promotion) -> PromotionScope:
    if promotion.scope == Promotion.SCOPE_ORDER:
        return OrderScope()

    # Missing reverse one-to-one raises RelatedObjectDoesNotExist (an AttributeError).
    target = getattr(promotion, "target", None)

    if promotion.scope == Promotion.SCOPE_CATEGORY:
        category = (getattr(target, "target_category", "") or "").strip()
        if not category:
            raise InvalidPromotionConfiguration("Invalid promotion category setup.")
        return CategoryScope(category=category)

    if promotion.scope == Promotion.SCOPE_PRODUCT:
        product_id = getattr(target, "target_product_id", None)
        if product_id is None:
            raise InvalidPromotionConfiguration("Invalid promotion product setup.")
        return ProductScope(product_id=int(product_id))

    raise InvalidPromotionConfiguration(f"Unknown promotion scope '{promotion.scope}'.")


def build_rule(promotion: Promotion) -> PromotionRule:
    """ORM row -> validated rule. Raises InvalidPromotionConfiguration."""
    return PromotionRule(
        code=promotion.code,
        discount_type=promotion.discount_type,
        value=int(promotion.value),
        scope=build_scope(promotion),
        starts_at=promotion.starts_at,
        ends_at=promotion.ends_at,
        is_active=bool(promotion.is_active),
        min_order_value=promotion.min_order_value,
        min_quantity=promotion.min_quantity,
        description=promotion.description or "",
    )
