"""
PATH: promotions/models/__init__.py

Promotions models export surface.
"""

from .promotion import Promotion
from .promotion_target import PromotionTarget

__all__ = [
    "Promotion",
    "PromotionTarget",
]
