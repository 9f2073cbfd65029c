# sales/services/order_ids.py

"""
ORDER ID GENERATION

id = YYMMDD (local date) + zero-padded random suffix
e.g. 2610190427 for the 427th-ish order slot on 2026-10-19

Uniqueness is enforced by the primary key; a collision surfaces as
OrderIdConflictError from the repository and the caller retries.
"""

from __future__ import annotations

import secrets

from django.conf import settings
from django.utils import timezone


def suffix_digits() -> int:
    return max(1, int(settings.ORDERS.get("ID_SUFFIX_DIGITS", 4)))


def generate_order_id(*, now=None, digits: int | None = None) -> int:
    now = timezone.localtime(now or timezone.now())
    digits = digits or suffix_digits()
    suffix = secrets.randbelow(10**digits)
    return int(f"{now:%y%m%d}{suffix:0{digits}d}")
