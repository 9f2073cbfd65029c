# loyalty/services/points_insights.py

"""
POINTS INSIGHTS (READ-ONLY)

Customer-facing loyalty summary:
- balance, lifetime earned (sum of positive deltas), lifetime used (sum of negative deltas)
- tier from lifetime earned (settings.LOYALTY["TIER_THRESHOLDS"])
- pending points: earn estimate of orders that are not completed yet
- expiring soon: positive entries whose expiry date falls inside the warning window
- per-order earned / used breakdown
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from loyalty.models import PointsLedgerEntry
from loyalty.services.balance_service import fetch_points_balance, fetch_points_ledger
from sales.models import Order

BASE_TIER = "Bronze"


@dataclass(frozen=True)
class OrderPoints:
    order_id: int
    earned: int = 0
    used: int = 0


@dataclass(frozen=True)
class PointsInsights:
    balance: int
    lifetime_earned: int
    lifetime_used: int
    tier: str
    next_tier: str | None
    points_to_next_tier: int
    pending_points: int
    expiring_soon: int
    orders: list[OrderPoints] = field(default_factory=list)


def _tier_thresholds() -> list[tuple[str, int]]:
    thresholds = settings.LOYALTY.get("TIER_THRESHOLDS") or {}
    return sorted(((name, int(v)) for name, v in thresholds.items()), key=lambda t: t[1])


def tier_for(lifetime_earned: int) -> str:
    tier = BASE_TIER
    for name, threshold in _tier_thresholds():
        if lifetime_earned >= threshold:
            tier = name
    return tier


def next_tier_for(lifetime_earned: int):
    for name, threshold in _tier_thresholds():
        if lifetime_earned < threshold:
            return name, threshold - lifetime_earned
    return None, 0


def expiring_soon(entries, *, now=None) -> int:
    now = now or timezone.now()
    expiry = timedelta(days=int(settings.LOYALTY.get("POINTS_EXPIRY_DAYS", 90)))
    window_end = now + timedelta(days=int(settings.LOYALTY.get("EXPIRY_WARNING_DAYS", 7)))

    total = 0
    for entry in entries:
        if entry.points_delta <= 0 or entry.created_at is None:
            continue
        expires_at = entry.created_at + expiry
        if now <= expires_at <= window_end:
            total += int(entry.points_delta)
    return total


def points_by_order(entries) -> list[OrderPoints]:
    totals: dict[int, dict] = {}

    for entry in entries:
        if entry.order_id is None:
            continue
        row = totals.setdefault(entry.order_id, {"earned": 0, "used": 0})
        delta = int(entry.points_delta)

        if entry.kind == PointsLedgerEntry.KIND_EARN:
            row["earned"] += max(0, delta)
        elif entry.kind == PointsLedgerEntry.KIND_REDEEM:
            row["used"] += abs(delta)
        elif entry.kind == PointsLedgerEntry.KIND_REFUND:
            # positive refund gives back used points; negative one claws back earned points
            if delta > 0:
                row["used"] = max(0, row["used"] - delta)
            else:
                row["earned"] = max(0, row["earned"] + delta)

    return [
        OrderPoints(order_id=order_id, earned=row["earned"], used=row["used"])
        for order_id, row in sorted(totals.items(), reverse=True)
    ]


def pending_points(user) -> int:
    if user is None or not getattr(user, "is_authenticated", False):
        return 0
    values = Order.objects.filter(user=user, status__in=Order.OPEN_STATUSES).values_list(
        "points_earned", flat=True
    )
    return sum(max(0, int(v or 0)) for v in values)


def build_insights(user, *, now=None) -> PointsInsights:
    entries = list(fetch_points_ledger(user))

    earned = sum(e.points_delta for e in entries if e.points_delta > 0)
    used = sum(-e.points_delta for e in entries if e.points_delta < 0)

    next_tier, to_next = next_tier_for(earned)

    return PointsInsights(
        balance=fetch_points_balance(user),
        lifetime_earned=earned,
        lifetime_used=used,
        tier=tier_for(earned),
        next_tier=next_tier,
        points_to_next_tier=to_next,
        pending_points=pending_points(user),
        expiring_soon=expiring_soon(entries, now=now),
        orders=points_by_order(entries),
    )
