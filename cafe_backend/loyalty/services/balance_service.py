# loyalty/services/balance_service.py

"""
POINTS BALANCE SERVICE (READ-ONLY)

RULES:
- READ-ONLY: no writes, ever
- PointsLedgerEntry is the single source of truth
- LoyaltyAccount.points_balance is a cache; NULL -> sum the ledger
- Guests / anonymous users always have balance 0
"""

from __future__ import annotations

from django.db.models import Sum
from django.db.models.functions import Coalesce

from loyalty.models import LoyaltyAccount, PointsLedgerEntry


def _is_customer(user) -> bool:
    return user is not None and bool(getattr(user, "is_authenticated", False))


def fetch_points_ledger(user):
    if not _is_customer(user):
        return PointsLedgerEntry.objects.none()
    return PointsLedgerEntry.objects.filter(user=user).order_by("created_at", "id")


def ledger_balance(user) -> int:
    if not _is_customer(user):
        return 0
    total = PointsLedgerEntry.objects.filter(user=user).aggregate(
        total=Coalesce(Sum("points_delta"), 0)
    )["total"]
    return max(0, int(total or 0))


def fetch_points_balance(user) -> int:
    if not _is_customer(user):
        return 0

    cached = (
        LoyaltyAccount.objects.filter(user=user)
        .values_list("points_balance", flat=True)
        .first()
    )
    if cached is not None:
        return max(0, int(cached))

    return ledger_balance(user)
