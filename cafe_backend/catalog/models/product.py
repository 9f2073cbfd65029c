# catalog/models/product.py

from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a sellable menu item.

    PRICE MODEL (IMPORTANT):
    - unit_price is an integer amount in the smallest currency unit (Rupiah has no cents)
    - The cart snapshots unit_price at add time; later edits never re-price open carts
    - Bundles charge their own unit_price; children only define the "list" price shown struck out
    """

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")

    unit_price = models.PositiveIntegerField(
        help_text="Price in the smallest currency unit (integer, non-negative)."
    )

    category = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Menu section label, e.g. 'Iced', 'Hot Coffee', 'Pastry'.",
    )

    image_url = models.URLField(blank=True, default="")

    is_available = models.BooleanField(default=True)
    is_bundle = models.BooleanField(default=False)
    is_recommended = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["category", "name"]
        indexes = [
            models.Index(fields=["category", "is_available"], name="catalog_prod_cat_avail_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.category})"

    def clean(self):
        if self.unit_price is None or int(self.unit_price) < 0:
            raise ValidationError({"unit_price": "Unit price cannot be negative"})

        if not (self.category or "").strip():
            raise ValidationError({"category": "category is required"})

        self.category = self.category.strip()

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
