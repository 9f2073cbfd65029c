# sales/services/order_lifecycle.py

"""
ORDER LIFECYCLE DOMAIN RULES

pending  -> assigned | completed | cancelled
assigned -> completed | cancelled
completed, cancelled -> terminal

Side effects of a transition (same transaction):
- completed -> earn entry posted (order.points_earned)
- cancelled -> redeemed points refunded
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from loyalty.services.points_posting import post_earn, post_refund
from sales.models import Order
from sales.services.exceptions import InvalidOrderTransitionError

logger = logging.getLogger(__name__)


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_COMPLETED,
    Order.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_ASSIGNED,
        Order.STATUS_COMPLETED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_ASSIGNED: {
        Order.STATUS_COMPLETED,
        Order.STATUS_CANCELLED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidOrderTransitionError(
            f"Order {order.pk} cannot transition from '{order.status}' to '{target_status}'"
        )


@transaction.atomic
def transition_order(*, order: Order, target_status: str, now=None) -> Order:
    order = Order.objects.select_for_update().get(pk=order.pk)
    validate_transition(order=order, target_status=target_status)

    now = now or timezone.now()
    previous = order.status
    order.status = target_status
    update_fields = ["status", "updated_at"]

    if target_status == Order.STATUS_COMPLETED:
        order.completed_at = now
        update_fields.append("completed_at")
    elif target_status == Order.STATUS_CANCELLED:
        order.cancelled_at = now
        update_fields.append("cancelled_at")

    order.save(update_fields=update_fields)

    if target_status == Order.STATUS_COMPLETED:
        post_earn(order=order)
    elif target_status == Order.STATUS_CANCELLED:
        post_refund(order=order)

    logger.info(
        "Order status changed",
        extra={"order_id": order.pk, "from": previous, "to": target_status},
    )
    return order
