# pos/apps.py

"""
POS APP CONFIG

Storefront cart module:
- Session cart ledger (no tables; state lives in the Django session)
- Live pricing with promotion + points re-validation
- Checkout entry point
"""

from django.apps import AppConfig


class PosConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pos"
    verbose_name = "Storefront Cart"
