# promotions/models/promotion.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class Promotion(models.Model):
    """
    Promo code definition.

    Rules:
    - code is unique and stored UPPERCASE (lookups are case-insensitive)
    - percentage value is 0..100; fixed_amount value is in currency units (>= 0)
    - scope != order requires exactly one PromotionTarget row
    - validity window is [starts_at, ends_at]; ends_at is optional (open-ended)
    """

    TYPE_PERCENTAGE = "percentage"
    TYPE_FIXED_AMOUNT = "fixed_amount"

    TYPE_CHOICES = [
        (TYPE_PERCENTAGE, "Percentage"),
        (TYPE_FIXED_AMOUNT, "Fixed amount"),
    ]

    SCOPE_ORDER = "order"
    SCOPE_CATEGORY = "category"
    SCOPE_PRODUCT = "product"

    SCOPE_CHOICES = [
        (SCOPE_ORDER, "Whole order"),
        (SCOPE_CATEGORY, "Category"),
        (SCOPE_PRODUCT, "Product"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    code = models.CharField(max_length=64, unique=True)
    description = models.TextField(blank=True, default="")

    discount_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    value = models.PositiveIntegerField(
        help_text="Percent (0-100) if percentage; currency amount if fixed_amount."
    )

    scope = models.CharField(max_length=16, choices=SCOPE_CHOICES, default=SCOPE_ORDER)

    min_order_value = models.PositiveIntegerField(null=True, blank=True)
    min_quantity = models.PositiveIntegerField(null=True, blank=True)

    starts_at = models.DateTimeField(default=timezone.now)
    ends_at = models.DateTimeField(null=True, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active", "starts_at"], name="promo_active_starts_idx"),
        ]

    def __str__(self):
        return f"{self.code} ({self.discount_type} {self.value}, {self.scope})"

    def clean(self):
        self.code = (self.code or "").strip().upper()
        if not self.code:
            raise ValidationError({"code": "code is required"})

        if self.discount_type == self.TYPE_PERCENTAGE and not (0 <= int(self.value or 0) <= 100):
            raise ValidationError({"value": "Percentage must be between 0 and 100"})

        if self.ends_at and self.starts_at and self.ends_at < self.starts_at:
            raise ValidationError({"ends_at": "ends_at must be after starts_at"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
