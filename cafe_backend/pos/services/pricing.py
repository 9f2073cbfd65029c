# pos/services/pricing.py

"""
PRICING READ MODEL

final_total = max(0, subtotal - promo_discount - points_used)

Shared by the storefront (live pricing) and checkout (authoritative pricing),
so both always agree on the formula.
"""

from __future__ import annotations

from dataclasses import dataclass

from loyalty.services.points_engine import points_earned


@dataclass(frozen=True)
class PricingSummary:
    subtotal: int
    promo_discount: int = 0
    points_used: int = 0
    final_total: int = 0
    points_earned_estimate: int = 0
    promo_code: str = ""

    @property
    def total_after_promo(self) -> int:
        return max(0, self.subtotal - self.promo_discount)

    @property
    def discount_total(self) -> int:
        return self.promo_discount + self.points_used

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "promo_code": self.promo_code or None,
            "promo_discount": self.promo_discount,
            "points_used": self.points_used,
            "final_total": self.final_total,
            "points_earned_estimate": self.points_earned_estimate,
        }


def compute_pricing(cart, *, promo_discount: int = 0, points_used: int = 0, promo_code: str = "") -> PricingSummary:
    subtotal = int(cart.subtotal)
    promo_discount = max(0, min(int(promo_discount or 0), subtotal))
    points_used = max(0, int(points_used or 0))

    final_total = max(0, subtotal - promo_discount - points_used)

    return PricingSummary(
        subtotal=subtotal,
        promo_discount=promo_discount,
        points_used=points_used,
        final_total=final_total,
        points_earned_estimate=points_earned(final_total),
        promo_code=promo_code or "",
    )
