# loyalty/services/points_posting.py

"""
POINTS POSTING SERVICE

The ONLY place that writes PointsLedgerEntry rows.

Postings:
- redeem  (checkout)           -> -points_used
- earn    (order completed)    -> +order.points_earned
- refund  (order cancelled)    -> +redeemed points not yet refunded

Guarantees:
- atomic (nested inside the caller's transaction when there is one)
- idempotent per order (earn / refund are never posted twice)
- cached LoyaltyAccount.points_balance is refreshed by PointsLedgerEntry.save()
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce

from loyalty.models import LoyaltyAccount, PointsLedgerEntry

logger = logging.getLogger(__name__)


def lock_account(user) -> LoyaltyAccount:
    """Row lock serializing balance reads + redeem postings for one customer."""
    account, _ = LoyaltyAccount.objects.select_for_update().get_or_create(user=user)
    return account


def _order_total(order, kind: str) -> int:
    return int(
        PointsLedgerEntry.objects.filter(order=order, kind=kind).aggregate(
            total=Coalesce(Sum("points_delta"), 0)
        )["total"]
        or 0
    )


@transaction.atomic
def post_redeem(*, user, order, points: int) -> PointsLedgerEntry | None:
    points = int(points or 0)
    if points <= 0:
        return None

    entry = PointsLedgerEntry.objects.create(
        user=user,
        order=order,
        kind=PointsLedgerEntry.KIND_REDEEM,
        points_delta=-points,
        note=f"Redeemed on order {order.pk}",
    )

    logger.info(
        "Points redeemed",
        extra={"user_id": user.pk, "order_id": order.pk, "points": points},
    )
    return entry


@transaction.atomic
def post_earn(*, order) -> PointsLedgerEntry | None:
    if order.user_id is None:
        return None

    points = int(order.points_earned or 0)
    if points <= 0:
        return None

    if PointsLedgerEntry.objects.filter(order=order, kind=PointsLedgerEntry.KIND_EARN).exists():
        return None

    entry = PointsLedgerEntry.objects.create(
        user_id=order.user_id,
        order=order,
        kind=PointsLedgerEntry.KIND_EARN,
        points_delta=points,
        note=f"Earned on order {order.pk}",
    )

    logger.info(
        "Points earned",
        extra={"user_id": order.user_id, "order_id": order.pk, "points": points},
    )
    return entry


@transaction.atomic
def post_refund(*, order) -> PointsLedgerEntry | None:
    if order.user_id is None:
        return None

    redeemed = -_order_total(order, PointsLedgerEntry.KIND_REDEEM)
    refunded = _order_total(order, PointsLedgerEntry.KIND_REFUND)
    outstanding = redeemed - refunded
    if outstanding <= 0:
        return None

    entry = PointsLedgerEntry.objects.create(
        user_id=order.user_id,
        order=order,
        kind=PointsLedgerEntry.KIND_REFUND,
        points_delta=outstanding,
        note=f"Refund for cancelled order {order.pk}",
    )

    logger.info(
        "Points refunded",
        extra={"user_id": order.user_id, "order_id": order.pk, "points": outstanding},
    )
    return entry
