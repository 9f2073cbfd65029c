# loyalty/models/points_ledger.py

"""
======================================================
PATH: loyalty/models/points_ledger.py
======================================================
POINTS LEDGER ENTRY MODEL

One signed movement of a customer's loyalty points.

Guarantees:
- Immutable once created (no updates, no deletes)
- Direction is carried by the sign of points_delta:
    earn > 0, redeem < 0, expire < 0, refund / adjustment != 0
- Balance = max(0, sum(points_delta))
- Every append refreshes the cached LoyaltyAccount.points_balance
  in the same transaction, whoever writes the row (services or admin)
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from loyalty.models.account import LoyaltyAccount


class PointsLedgerEntry(models.Model):
    KIND_EARN = "earn"
    KIND_REDEEM = "redeem"
    KIND_EXPIRE = "expire"
    KIND_ADJUSTMENT = "adjustment"
    KIND_REFUND = "refund"

    KIND_CHOICES = [
        (KIND_EARN, "Earn"),
        (KIND_REDEEM, "Redeem"),
        (KIND_EXPIRE, "Expire"),
        (KIND_ADJUSTMENT, "Adjustment"),
        (KIND_REFUND, "Refund"),
    ]

    POSITIVE_KINDS = {KIND_EARN}
    NEGATIVE_KINDS = {KIND_REDEEM, KIND_EXPIRE}

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="points_entries",
    )

    order = models.ForeignKey(
        "sales.Order",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="points_entries",
    )

    kind = models.CharField(max_length=16, choices=KIND_CHOICES)

    points_delta = models.IntegerField(help_text="Signed points movement")

    note = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = "Points Ledger Entry"
        verbose_name_plural = "Points Ledger Entries"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="points_user_created_idx"),
            models.Index(fields=["order", "kind"], name="points_order_kind_idx"),
        ]

    def __str__(self):
        return f"{self.kind} {self.points_delta:+d} -> user {self.user_id}"

    def clean(self):
        if self.kind not in dict(self.KIND_CHOICES):
            raise ValidationError("Invalid points entry kind")

        if self.points_delta is None or int(self.points_delta) == 0:
            raise ValidationError("points_delta must be non-zero")

        if self.kind in self.POSITIVE_KINDS and self.points_delta < 0:
            raise ValidationError(f"{self.kind} entries must be positive")

        if self.kind in self.NEGATIVE_KINDS and self.points_delta > 0:
            raise ValidationError(f"{self.kind} entries must be negative")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("PointsLedgerEntry records are immutable and cannot be modified")

        self.full_clean()
        with transaction.atomic():
            super().save(*args, **kwargs)
            self._refresh_account_balance()

    def _refresh_account_balance(self):
        total = PointsLedgerEntry.objects.filter(user_id=self.user_id).aggregate(
            total=Coalesce(Sum("points_delta"), 0)
        )["total"]
        LoyaltyAccount.objects.update_or_create(
            user_id=self.user_id,
            defaults={"points_balance": max(0, int(total or 0))},
        )

    def delete(self, *args, **kwargs):
        raise ValidationError("PointsLedgerEntry records are immutable and cannot be deleted")
