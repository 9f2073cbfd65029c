# catalog/models/modifier.py

"""
MODIFIER MODELS

ModifierGroup: one customization question on a product ("Sugar Level", "Add-ons").
ModifierOption: one answer with an additional price ("Less sugar" +0, "Extra shot" +5000).

Rules:
- code is the stable string id used in cart selections (unique per product / per group)
- single groups allow at most one option; required groups need at least one
- option prices are non-negative integers (smallest currency unit)
"""

from django.core.exceptions import ValidationError
from django.db import models

from .product import Product


class ModifierGroup(models.Model):
    SELECTION_SINGLE = "single"
    SELECTION_MULTI = "multi"

    SELECTION_CHOICES = [
        (SELECTION_SINGLE, "Single choice"),
        (SELECTION_MULTI, "Multiple choice"),
    ]

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="modifier_groups",
    )

    code = models.SlugField(max_length=64)
    name = models.CharField(max_length=120)
    is_required = models.BooleanField(default=False)
    selection_type = models.CharField(
        max_length=8,
        choices=SELECTION_CHOICES,
        default=SELECTION_SINGLE,
    )
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "code"],
                name="unique_modifier_group_code_per_product",
            )
        ]

    def clean(self):
        if not (self.code or "").strip():
            raise ValidationError({"code": "code is required"})
        if self.selection_type not in (self.SELECTION_SINGLE, self.SELECTION_MULTI):
            raise ValidationError({"selection_type": "Invalid selection_type"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product.name} / {self.name}"


class ModifierOption(models.Model):
    group = models.ForeignKey(
        ModifierGroup,
        on_delete=models.CASCADE,
        related_name="options",
    )

    code = models.SlugField(max_length=64)
    name = models.CharField(max_length=120)
    price = models.PositiveIntegerField(
        default=0,
        help_text="Additional price per unit (smallest currency unit).",
    )
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["group", "code"],
                name="unique_modifier_option_code_per_group",
            )
        ]

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} (+{self.price})"
