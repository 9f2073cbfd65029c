# promotions/services/promotion_evaluator.py

"""
PROMOTION EVALUATOR (DOMAIN)

Given a PromotionRule and the live cart, decide eligibility and compute the
discount amount, or raise the FIRST failing reason.

Check order (deterministic user-facing message):
1. is_active                  -> PromotionInactive
2. now >= starts_at           -> PromotionNotStarted
3. now <= ends_at (if set)    -> PromotionExpired
4. subtotal >= min_order      -> MinimumOrderNotMet
5. scoped quantity >= min_qty -> MinimumQuantityNotMet
6. eligible amount > 0        -> ScopeNotEligible

Money:
- percentage: floor(eligible * value / 100)
- fixed_amount: min(value, eligible)
- integers only (smallest currency unit)

DESIGN PRINCIPLES:
- No database access; the cart is duck-typed (subtotal, item_count, lines)
- Idempotent: same rule + same cart + same `now` -> same result
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.utils import timezone

from catalog.services.money import format_amount
from promotions.services.exceptions import (
    MinimumOrderNotMet,
    MinimumQuantityNotMet,
    PromotionError,
    PromotionExpired,
    PromotionInactive,
    PromotionNotStarted,
    ScopeNotEligible,
)
from promotions.services.promotion_rules import (
    CategoryScope,
    OrderScope,
    ProductScope,
    PromotionRule,
    PromotionScope,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromotionEvaluation:
    code: str
    discount_amount: int
    eligible_amount: int


# ============================================================
# SCOPE HELPERS
# ============================================================


def scoped_quantity(scope: PromotionScope, cart) -> int:
    if isinstance(scope, OrderScope):
        return int(cart.item_count)
    return sum(int(line.quantity) for line in cart.lines if scope.matches(line))


def eligible_amount(scope: PromotionScope, cart) -> int:
    if isinstance(scope, OrderScope):
        return int(cart.subtotal)
    return sum(int(line.line_total) for line in cart.lines if scope.matches(line))


def compute_discount(rule: PromotionRule, eligible: int) -> int:
    eligible = max(0, int(eligible))
    if rule.is_percentage:
        return (eligible * int(rule.value)) // 100
    return min(int(rule.value), eligible)


# ============================================================
# EVALUATION
# ============================================================


def _check_min_quantity(rule: PromotionRule, cart) -> None:
    if not rule.min_quantity:
        return

    qty = scoped_quantity(rule.scope, cart)
    if qty >= int(rule.min_quantity):
        return

    if isinstance(rule.scope, CategoryScope):
        raise MinimumQuantityNotMet(
            f"Add at least {rule.min_quantity} item(s) from {rule.scope.category}."
        )
    if isinstance(rule.scope, ProductScope):
        raise MinimumQuantityNotMet(
            f"Add at least {rule.min_quantity} of the required product."
        )
    raise MinimumQuantityNotMet(f"Minimum purchase of {rule.min_quantity} items required.")


def evaluate_promotion(rule: PromotionRule, cart, *, now=None) -> PromotionEvaluation:
    now = now or timezone.now()

    if not rule.is_active:
        raise PromotionInactive("Promotion is no longer active")

    if now < rule.starts_at:
        raise PromotionNotStarted("Promotion has not started yet")

    if rule.ends_at is not None and now > rule.ends_at:
        raise PromotionExpired("Promotion has expired")

    if rule.min_order_value and int(cart.subtotal) < int(rule.min_order_value):
        raise MinimumOrderNotMet(
            f"Minimum order of {format_amount(rule.min_order_value)} required."
        )

    _check_min_quantity(rule, cart)

    eligible = eligible_amount(rule.scope, cart)
    if eligible <= 0:
        if isinstance(rule.scope, CategoryScope):
            raise ScopeNotEligible(f"Promotion applies to {rule.scope.category} items only.")
        if isinstance(rule.scope, ProductScope):
            raise ScopeNotEligible("Required product is not in cart.")
        raise ScopeNotEligible("Cart has nothing this promotion can discount.")

    discount = compute_discount(rule, eligible)

    logger.debug(
        "Promotion evaluated",
        extra={"code": rule.code, "eligible": eligible, "discount": discount},
    )

    return PromotionEvaluation(
        code=rule.code,
        discount_amount=discount,
        eligible_amount=eligible,
    )


def try_evaluate_promotion(rule: PromotionRule, cart, *, now=None):
    """
    Reactive path (every cart change): errors come back as values.

    Returns (PromotionEvaluation, None) or (None, PromotionError).
    """
    try:
        return evaluate_promotion(rule, cart, now=now), None
    except PromotionError as exc:
        return None, exc
