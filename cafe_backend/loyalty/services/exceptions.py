# loyalty/services/exceptions.py

"""
LOYALTY SERVICE ERRORS

Rejections of a points redemption request.
1 point = 1 currency unit.
"""


class PointsError(Exception):
    """Base exception for all loyalty points failures."""

    code = "POINTS_ERROR"


class InvalidPointsAmount(PointsError):
    """Requested points are not a positive whole number."""

    code = "INVALID_POINTS_AMOUNT"


class InsufficientPointsBalance(PointsError):
    code = "INSUFFICIENT_POINTS"


class ExceedsRedeemableCap(PointsError):
    """Requested points exceed what the cart can absorb after the promotion."""

    code = "POINTS_EXCEED_TOTAL"

    def __init__(self, message: str, *, cap: int):
        super().__init__(message)
        self.cap = int(cap)
