# loyalty/services/points_engine.py

"""
LOYALTY POINTS ENGINE (DOMAIN)

Redemption rules:
- 1 point = 1 currency unit off the payable total
- redeemable cap = min(balance, total after promotion)
- explicit requests are REJECTED when invalid (request_redemption)
- already-applied points are CLAMPED when the cart changes (clamp_redemption)

Earn rule:
- points_earned = floor(final_total * EARN_RATE)
- EARN_RATE comes from settings.LOYALTY["EARN_RATE"]

DESIGN PRINCIPLES:
- No database access
- Integers only; Decimal for the rate
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from typing import Iterable

from django.conf import settings

from loyalty.services.exceptions import (
    ExceedsRedeemableCap,
    InsufficientPointsBalance,
    InvalidPointsAmount,
)


@dataclass(frozen=True)
class PointsClamp:
    points: int
    adjusted: bool


def get_earn_rate() -> Decimal:
    rate = settings.LOYALTY.get("EARN_RATE", Decimal("0.005"))
    return Decimal(str(rate))


def balance_from_ledger(entries: Iterable) -> int:
    """
    entries: ledger rows (points_delta attribute) or plain signed integers.
    """
    total = 0
    for entry in entries:
        total += int(getattr(entry, "points_delta", entry))
    return max(0, total)


def max_redeemable(balance: int, cart_total_after_promo: int) -> int:
    return max(0, min(int(balance), int(cart_total_after_promo)))


def request_redemption(requested, balance: int, cart_total_after_promo: int) -> int:
    if isinstance(requested, bool) or not isinstance(requested, int) or requested <= 0:
        raise InvalidPointsAmount("Enter a valid number of points.")

    if requested > int(balance):
        raise InsufficientPointsBalance("Not enough points.")

    cap = max_redeemable(balance, cart_total_after_promo)
    if requested > cap:
        raise ExceedsRedeemableCap("Points exceed the remaining total.", cap=cap)

    return requested


def clamp_redemption(applied: int, balance: int, cart_total_after_promo: int) -> PointsClamp:
    applied = max(0, int(applied or 0))
    if applied == 0:
        return PointsClamp(points=0, adjusted=False)

    cap = max_redeemable(balance, cart_total_after_promo)
    if applied > cap:
        return PointsClamp(points=cap, adjusted=True)
    return PointsClamp(points=applied, adjusted=False)


def points_earned(final_total: int, earn_rate: Decimal | None = None) -> int:
    rate = get_earn_rate() if earn_rate is None else Decimal(str(earn_rate))
    if final_total <= 0 or rate <= 0:
        return 0
    earned = (Decimal(int(final_total)) * rate).to_integral_value(rounding=ROUND_FLOOR)
    return int(earned)
