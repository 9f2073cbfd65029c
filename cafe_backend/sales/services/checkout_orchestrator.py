# sales/services/checkout_orchestrator.py

"""
CHECKOUT ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- Finalize the storefront cart into a pending Order (atomic, auditable).
- Re-validate everything the customer saw: promotion against the live cart,
  points against the live balance.

Steps:
1. cart not empty
2. customer name + phone present
3. delivery needs an address or a maps link
4. promotion re-fetched by code and re-evaluated (failure -> PromotionError, nothing saved)
   points re-clamped against balance and post-promo total (clamped silently, reported)
5. final_total = max(0, subtotal - promo - points)
6. order id generated; a collision is retried ONCE with a fresh id
7. header + lines + redeem entry written in ONE transaction
8. notifier called after commit; its failures never undo the order

Hard rules:
- Money is integer smallest currency unit, computed server-side.
- Failures before persistence never touch the cart (the caller owns clearing it).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from loyalty.services.balance_service import ledger_balance
from loyalty.services.points_engine import clamp_redemption
from loyalty.services.points_posting import lock_account, post_redeem
from pos.services.pricing import PricingSummary, compute_pricing
from promotions.services.promotion_evaluator import evaluate_promotion
from promotions.services.promotion_lookup import fetch_promotion_by_code
from sales.models import Order
from sales.services.exceptions import (
    EmptyCartError,
    MissingCustomerInfoError,
    MissingDeliveryLocationError,
    OrderIdConflictError,
    OrderPersistenceError,
)
from sales.services.notifications import (
    OrderConfirmation,
    build_whatsapp_link,
    log_order_confirmation,
)
from sales.services.order_ids import generate_order_id
from sales.services.order_repository import insert_order, insert_order_lines

logger = logging.getLogger(__name__)

ID_ATTEMPTS = 2


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    phone: str


@dataclass(frozen=True)
class FulfillmentInfo:
    type: str = Order.FULFILLMENT_TAKEAWAY
    address: str = ""
    maps_link: str = ""
    notes: str = ""

    @property
    def is_delivery(self) -> bool:
        return self.type == Order.FULFILLMENT_DELIVERY


@dataclass(frozen=True)
class CheckoutResult:
    order_id: int
    subtotal: int
    promo_code: str
    promo_discount: int
    points_used: int
    final_total: int
    points_earned: int
    points_adjusted: bool
    whatsapp_url: str | None = None

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "subtotal": self.subtotal,
            "promo_code": self.promo_code or None,
            "promo_discount": self.promo_discount,
            "points_used": self.points_used,
            "final_total": self.final_total,
            "points_earned": self.points_earned,
            "points_adjusted": self.points_adjusted,
            "whatsapp_url": self.whatsapp_url,
        }


def _is_customer(user) -> bool:
    return user is not None and bool(getattr(user, "is_authenticated", False))


def _validate_request(cart, customer: CustomerInfo, fulfillment: FulfillmentInfo) -> None:
    if cart is None or cart.is_empty:
        raise EmptyCartError("Cart is empty")

    if not (customer.name or "").strip():
        raise MissingCustomerInfoError("Please enter your name.")

    if not (customer.phone or "").strip():
        raise MissingCustomerInfoError("Please enter your WhatsApp number.")

    if fulfillment.type not in (Order.FULFILLMENT_TAKEAWAY, Order.FULFILLMENT_DELIVERY):
        raise MissingDeliveryLocationError(f"Unknown fulfillment type '{fulfillment.type}'")

    if fulfillment.is_delivery and not (
        (fulfillment.address or "").strip() or (fulfillment.maps_link or "").strip()
    ):
        raise MissingDeliveryLocationError("Please add address or pin your location for delivery.")


def _promotion_discount(cart, promo_code, now) -> tuple[str, int]:
    if not (promo_code or "").strip():
        return "", 0
    rule = fetch_promotion_by_code(promo_code)
    evaluation = evaluate_promotion(rule, cart, now=now)
    return evaluation.code, evaluation.discount_amount


def _insert_with_retry(*, now, fields: dict) -> Order:
    for attempt in range(1, ID_ATTEMPTS + 1):
        try:
            return insert_order(order_id=generate_order_id(now=now), **fields)
        except OrderIdConflictError:
            if attempt == ID_ATTEMPTS:
                raise
            logger.info("Retrying order insert with a fresh id", extra={"attempt": attempt})


def finalize_order(
    *,
    cart,
    customer: CustomerInfo,
    fulfillment: FulfillmentInfo,
    promo_code: str | None = None,
    points_to_use: int = 0,
    user=None,
    now=None,
    notifier: Callable[[OrderConfirmation], object] | None = None,
) -> CheckoutResult:
    now = now or timezone.now()
    notifier = notifier or log_order_confirmation

    _validate_request(cart, customer, fulfillment)

    # Raises PromotionError; nothing written yet.
    code, promo_discount = _promotion_discount(cart, promo_code, now)

    is_customer = _is_customer(user)
    lines = list(cart.lines)

    try:
        with transaction.atomic():
            if is_customer:
                lock_account(user)
            # Ledger sum under the account lock, not the cache.
            balance = ledger_balance(user) if is_customer else 0

            after_promo = max(0, cart.subtotal - promo_discount)
            clamp = clamp_redemption(points_to_use, balance, after_promo)

            pricing: PricingSummary = compute_pricing(
                cart,
                promo_discount=promo_discount,
                points_used=clamp.points,
                promo_code=code,
            )
            earned = pricing.points_earned_estimate if is_customer else 0

            order = _insert_with_retry(
                now=now,
                fields={
                    "user": user if is_customer else None,
                    "customer_name": customer.name.strip(),
                    "customer_phone": customer.phone.strip(),
                    "fulfillment_type": fulfillment.type,
                    "address": fulfillment.address.strip() if fulfillment.is_delivery else "",
                    "maps_link": fulfillment.maps_link.strip() if fulfillment.is_delivery else "",
                    "order_notes": (fulfillment.notes or "").strip(),
                    "subtotal": pricing.subtotal,
                    "promo_discount": pricing.promo_discount,
                    "points_used": pricing.points_used,
                    "discount_total": pricing.discount_total,
                    "final_total": pricing.final_total,
                    "promo_code": code,
                    "points_earned": earned,
                    "status": Order.STATUS_PENDING,
                },
            )

            order_lines = insert_order_lines(order=order, lines=lines)

            if is_customer and pricing.points_used > 0:
                post_redeem(user=user, order=order, points=pricing.points_used)

    except OrderIdConflictError:
        logger.error("Order id conflict after retry")
        raise
    except (DatabaseError, ValidationError) as exc:
        logger.exception(
            "Order persistence failed",
            extra={"customer_phone": customer.phone, "subtotal": cart.subtotal},
        )
        raise OrderPersistenceError(f"Could not save order: {exc}") from exc

    logger.info(
        "Order created",
        extra={
            "order_id": order.pk,
            "final_total": order.final_total,
            "promo_code": code,
            "points_used": order.points_used,
            "points_adjusted": clamp.adjusted,
        },
    )

    confirmation = OrderConfirmation(
        order_id=order.pk,
        customer_name=order.customer_name,
        final_total=order.final_total,
    )
    try:
        notifier(confirmation)
    except Exception:
        logger.exception("Order notifier failed", extra={"order_id": order.pk})

    return CheckoutResult(
        order_id=order.pk,
        subtotal=order.subtotal,
        promo_code=code,
        promo_discount=order.promo_discount,
        points_used=order.points_used,
        final_total=order.final_total,
        points_earned=order.points_earned,
        points_adjusted=clamp.adjusted,
        whatsapp_url=build_whatsapp_link(order, order_lines),
    )
