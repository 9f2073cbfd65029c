# loyalty/models/account.py

from django.conf import settings
from django.db import models


class LoyaltyAccount(models.Model):
    """
    Per-customer loyalty header.

    points_balance is a CACHE of the ledger sum:
    - NULL means "unknown" and readers fall back to summing the ledger
    - refreshed by PointsLedgerEntry.save() on every append
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="loyalty_account",
    )

    points_balance = models.IntegerField(null=True, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Loyalty account of user {self.user_id} ({self.points_balance} pts)"
