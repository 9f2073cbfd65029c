from .balance_service import fetch_points_balance, fetch_points_ledger
from .points_engine import (
    PointsClamp,
    balance_from_ledger,
    clamp_redemption,
    max_redeemable,
    points_earned,
    request_redemption,
)

__all__ = [
    "fetch_points_balance",
    "fetch_points_ledger",
    "PointsClamp",
    "balance_from_ledger",
    "clamp_redemption",
    "max_redeemable",
    "points_earned",
    "request_redemption",
]
