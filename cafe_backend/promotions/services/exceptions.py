# promotions/services/exceptions.py

"""
PROMOTION SERVICE ERRORS

One class per user-facing rejection reason. The evaluator raises the FIRST
failing check, so the message a customer sees is deterministic.
"""


class PromotionError(Exception):
    """Base exception for all promotion failures."""

    code = "PROMOTION_ERROR"


class PromotionNotFound(PromotionError):
    code = "PROMOTION_NOT_FOUND"


class InvalidPromotionConfiguration(PromotionError):
    code = "PROMOTION_INVALID_CONFIGURATION"


class PromotionInactive(PromotionError):
    code = "PROMOTION_INACTIVE"


class PromotionNotStarted(PromotionError):
    code = "PROMOTION_NOT_STARTED"


class PromotionExpired(PromotionError):
    code = "PROMOTION_EXPIRED"


class MinimumOrderNotMet(PromotionError):
    code = "PROMOTION_MINIMUM_ORDER_NOT_MET"


class MinimumQuantityNotMet(PromotionError):
    code = "PROMOTION_MINIMUM_QUANTITY_NOT_MET"


class ScopeNotEligible(PromotionError):
    code = "PROMOTION_SCOPE_NOT_ELIGIBLE"
