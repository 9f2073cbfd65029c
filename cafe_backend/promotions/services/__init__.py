from .promotion_evaluator import (
    PromotionEvaluation,
    evaluate_promotion,
    try_evaluate_promotion,
)
from .promotion_lookup import fetch_promotion_by_code
from .promotion_rules import (
    CategoryScope,
    OrderScope,
    ProductScope,
    PromotionRule,
    build_rule,
)

__all__ = [
    "PromotionEvaluation",
    "evaluate_promotion",
    "try_evaluate_promotion",
    "fetch_promotion_by_code",
    "CategoryScope",
    "OrderScope",
    "ProductScope",
    "PromotionRule",
    "build_rule",
]
