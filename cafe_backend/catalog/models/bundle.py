# catalog/models/bundle.py

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .product import Product


class BundleItem(models.Model):
    """
    Composition row of a bundle product (parent) -> child product x quantity.

    The bundle is sold at parent.unit_price; children are used for display
    (list price / savings) and for kitchen tickets.
    """

    parent = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="bundle_items",
    )

    child = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="included_in_bundles",
    )

    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["parent", "child"],
                name="unique_child_per_bundle",
            )
        ]

    def clean(self):
        if self.parent_id and self.parent_id == self.child_id:
            raise ValidationError("A bundle cannot contain itself")

        if self.parent_id and not self.parent.is_bundle:
            raise ValidationError({"parent": "Parent product must be flagged as a bundle"})

        if self.child_id and self.child.is_bundle:
            raise ValidationError({"child": "Bundles cannot be nested"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.parent.name} ⊃ {self.child.name} x{self.quantity}"
