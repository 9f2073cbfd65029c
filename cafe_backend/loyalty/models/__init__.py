from .account import LoyaltyAccount
from .points_ledger import PointsLedgerEntry

__all__ = ["LoyaltyAccount", "PointsLedgerEntry"]
