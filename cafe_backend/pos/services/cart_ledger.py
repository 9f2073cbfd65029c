# pos/services/cart_ledger.py

"""
CART LEDGER (DOMAIN)

The storefront cart: an ordered list of lines keyed by a deterministic fingerprint.

Money rules:
- base price and modifier definitions are SNAPSHOTTED when the line is added
- unit_price  = base_price + sum(selected option prices)
- line_total  = unit_price * quantity
- subtotal / item_count are derived on every read (never stored)

Line identity:
- line_key = "<product_id>-<canonical selections>"
- canonical selections: groups sorted, option ids sorted, empty groups dropped
- the note is carried on the line but is NOT part of the key

DESIGN PRINCIPLES:
- No database access (callers pass ProductSnapshot)
- Rejected mutations raise before touching state
- Serializes to plain dicts for session storage
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from catalog.services.catalog_snapshot import ModifierGroupSpec, ProductSnapshot
from catalog.services.modifier_rules import (
    Selections,
    describe_selections,
    modifier_extra,
    normalize_selections,
    validate_selections,
)
from pos.services.exceptions import InvalidQuantityError, ProductUnavailableError


def canonical_selections(selections: Selections) -> str:
    """
    {"milk": ("oat",), "addons": ("shot", "syrup")} -> "addons=shot,syrup;milk=oat"
    """
    return ";".join(
        f"{group_id}={','.join(option_ids)}"
        for group_id, option_ids in sorted(selections.items())
        if option_ids
    )


def make_line_key(product_id, selections: Selections) -> str:
    return f"{product_id}-{canonical_selections(selections)}"


def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError("Quantity must be a whole number.")
    if quantity <= 0:
        raise InvalidQuantityError("Quantity must be greater than zero.")
    return quantity


# ============================================================
# CART LINE
# ============================================================


@dataclass
class CartLine:
    line_key: str
    product_id: int
    name: str
    category: str
    base_price: int
    quantity: int
    modifier_groups: tuple[ModifierGroupSpec, ...] = ()
    selections: Selections = field(default_factory=dict)
    note: str = ""

    @property
    def modifier_total(self) -> int:
        return modifier_extra(self.modifier_groups, self.selections)

    @property
    def unit_price(self) -> int:
        return int(self.base_price) + self.modifier_total

    @property
    def line_total(self) -> int:
        return self.unit_price * int(self.quantity)

    @property
    def modifier_labels(self) -> list[dict]:
        return describe_selections(self.modifier_groups, self.selections)

    def to_dict(self) -> dict:
        return {
            "line_key": self.line_key,
            "product_id": self.product_id,
            "name": self.name,
            "category": self.category,
            "base_price": int(self.base_price),
            "quantity": int(self.quantity),
            "modifier_groups": [g.to_dict() for g in self.modifier_groups],
            "selections": {g: list(opts) for g, opts in self.selections.items()},
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        selections = normalize_selections(data.get("selections") or {})
        product_id = int(data["product_id"])
        return cls(
            line_key=str(data.get("line_key") or make_line_key(product_id, selections)),
            product_id=product_id,
            name=str(data.get("name", "")),
            category=str(data.get("category", "")),
            base_price=int(data.get("base_price", 0)),
            quantity=int(data.get("quantity", 1)),
            modifier_groups=tuple(
                ModifierGroupSpec.from_dict(g) for g in data.get("modifier_groups") or []
            ),
            selections=selections,
            note=str(data.get("note") or ""),
        )


# ============================================================
# CART
# ============================================================


class Cart:
    """Ordered collection of CartLine. Totals are always derived."""

    def __init__(self, lines: Iterable[CartLine] | None = None):
        self.lines: list[CartLine] = list(lines or [])

    def __len__(self):
        return len(self.lines)

    def __bool__(self):
        return bool(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def subtotal(self) -> int:
        return sum(line.line_total for line in self.lines)

    @property
    def item_count(self) -> int:
        return sum(int(line.quantity) for line in self.lines)

    def get_line(self, line_key: str) -> CartLine | None:
        for line in self.lines:
            if line.line_key == line_key:
                return line
        return None

    # -----------------------------
    # Mutations
    # -----------------------------

    def add_line(
        self,
        product: ProductSnapshot,
        quantity: int = 1,
        selections: Mapping[str, Iterable[str]] | None = None,
        note: str = "",
    ) -> CartLine:
        """
        Add `quantity` units of a product with the given selections.

        Same product + same selections merge into the existing line
        (quantities add up); anything else becomes a new line.
        """
        quantity = _validate_quantity(quantity)

        if not product.is_available:
            raise ProductUnavailableError(f"{product.name} is currently unavailable.")

        normalized = normalize_selections(selections)
        validate_selections(product.modifier_groups, normalized)

        note = (note or "").strip()
        key = make_line_key(product.id, normalized)
        existing = self.get_line(key)
        if existing is not None:
            existing.quantity += quantity
            if note:
                existing.note = note
            return existing

        line = CartLine(
            line_key=key,
            product_id=product.id,
            name=product.name,
            category=product.category,
            base_price=int(product.price),
            quantity=quantity,
            modifier_groups=tuple(product.modifier_groups),
            selections=normalized,
            note=note,
        )
        self.lines.append(line)
        return line

    def decrement(self, line_key: str) -> None:
        """-1 on the line; the line disappears at 0. Unknown key: no-op."""
        line = self.get_line(line_key)
        if line is None:
            return
        if line.quantity > 1:
            line.quantity -= 1
            return
        self.lines.remove(line)

    def remove_line(self, line_key: str) -> None:
        self.lines = [line for line in self.lines if line.line_key != line_key]

    def clear(self) -> None:
        self.lines = []

    # -----------------------------
    # Serialization
    # -----------------------------

    def to_dict(self) -> dict:
        return {"lines": [line.to_dict() for line in self.lines]}

    @classmethod
    def from_dict(cls, data: dict | None) -> "Cart":
        data = data or {}
        return cls(CartLine.from_dict(d) for d in data.get("lines") or [])

    def fingerprint(self) -> tuple:
        """Hashable pricing-relevant identity of the cart contents."""
        return tuple(
            (line.line_key, int(line.quantity), line.unit_price) for line in self.lines
        )
