# promotions/apps.py

"""
PROMOTIONS APP CONFIG

Promo codes for the storefront:
- Definitions are maintained in Django admin (read-only to checkout)
- Evaluation is a pure domain service (promotions.services.promotion_evaluator)
"""

from django.apps import AppConfig


class PromotionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "promotions"
    verbose_name = "Promotions"
