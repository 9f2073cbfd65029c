# promotions/models/promotion_target.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from catalog.models import Product

from .promotion import Promotion


class PromotionTarget(models.Model):
    """
    The single target row of a scoped promotion.

    - scope=category -> target_category set
    - scope=product  -> target_product set
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    promotion = models.OneToOneField(
        Promotion,
        on_delete=models.CASCADE,
        related_name="target",
    )

    target_category = models.CharField(max_length=64, blank=True, default="")

    target_product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="promotion_targets",
    )

    def clean(self):
        has_category = bool((self.target_category or "").strip())
        has_product = self.target_product_id is not None

        if has_category == has_product:
            raise ValidationError("Set exactly one of target_category / target_product")

        self.target_category = (self.target_category or "").strip()

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        if self.target_product_id:
            return f"{self.promotion.code} -> product {self.target_product_id}"
        return f"{self.promotion.code} -> category {self.target_category}"
