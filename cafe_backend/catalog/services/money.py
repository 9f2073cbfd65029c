# catalog/services/money.py

from __future__ import annotations

from django.conf import settings


def format_amount(amount: int) -> str:
    """Integer smallest-unit amount as shown to customers, e.g. "Rp 50,000"."""
    label = settings.ORDERS.get("CURRENCY_LABEL", "Rp")
    return f"{label} {int(amount):,}"
