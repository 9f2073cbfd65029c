# sales/models/order_line.py

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class OrderLine(models.Model):
    """
    Line items for Order.

    Everything is a snapshot taken from the cart line at checkout time, so a later
    catalog edit never rewrites a placed order.
    """

    order = models.ForeignKey(
        "sales.Order",
        on_delete=models.CASCADE,
        related_name="lines",
    )

    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_lines",
    )
    product_ref = models.BigIntegerField(help_text="Product id at checkout time")
    product_name = models.CharField(max_length=255)

    base_price = models.PositiveIntegerField()
    unit_price = models.PositiveIntegerField(help_text="base_price + selected modifier prices")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    line_total = models.PositiveIntegerField(help_text="quantity * unit_price (server computed)")

    selections = models.JSONField(default=dict, blank=True)
    modifier_labels = models.JSONField(default=list, blank=True)
    note = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["id"]

    def clean(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValidationError("quantity must be >= 1")

        if self.unit_price is None or int(self.unit_price) < int(self.base_price or 0):
            raise ValidationError("unit_price cannot be below base_price")

        self.line_total = int(self.quantity) * int(self.unit_price)

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_name} x{self.quantity}"
