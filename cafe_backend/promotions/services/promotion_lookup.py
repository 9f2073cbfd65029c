# promotions/services/promotion_lookup.py

"""
PROMOTION LOOKUP (READ-ONLY)

fetch_promotion_by_code(code) -> PromotionRule

Rules:
- Case-insensitive exact match (codes are stored uppercase)
- Unknown / blank code -> PromotionNotFound
- Broken definition -> InvalidPromotionConfiguration
"""

from __future__ import annotations

import logging

from promotions.models import Promotion
from promotions.services.exceptions import PromotionNotFound
from promotions.services.promotion_rules import PromotionRule, build_rule

logger = logging.getLogger(__name__)


def normalize_code(code) -> str:
    return str(code or "").strip().upper()


def fetch_promotion_by_code(code) -> PromotionRule:
    normalized = normalize_code(code)
    if not normalized:
        raise PromotionNotFound("Invalid promotion code")

    promotion = (
        Promotion.objects.select_related("target")
        .filter(code=normalized)
        .first()
    )
    if promotion is None:
        logger.info("Promotion code not found", extra={"code": normalized})
        raise PromotionNotFound("Invalid promotion code")

    return build_rule(promotion)
