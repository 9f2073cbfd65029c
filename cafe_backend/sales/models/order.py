# sales/models/order.py

from django.conf import settings
from django.db import models


class Order(models.Model):
    """
    Storefront order (header).

    Key rules:
    - id is a BigInteger generated by sales.services.order_ids (YYMMDD + random suffix)
    - money is integer smallest currency unit, computed server-side at checkout
    - discount_total = promo_discount + points_used
    - final_total = max(0, subtotal - discount_total)
    - points_earned is the estimate recorded at creation; it is posted to the
      ledger when the order is completed
    """

    STATUS_PENDING = "pending"
    STATUS_ASSIGNED = "assigned"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ASSIGNED, "Assigned"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    OPEN_STATUSES = (STATUS_PENDING, STATUS_ASSIGNED)

    FULFILLMENT_TAKEAWAY = "takeaway"
    FULFILLMENT_DELIVERY = "delivery"

    FULFILLMENT_CHOICES = [
        (FULFILLMENT_TAKEAWAY, "Takeaway"),
        (FULFILLMENT_DELIVERY, "Delivery"),
    ]

    id = models.BigIntegerField(primary_key=True, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    # Customer / fulfillment
    customer_name = models.CharField(max_length=120)
    customer_phone = models.CharField(max_length=40)
    fulfillment_type = models.CharField(
        max_length=16, choices=FULFILLMENT_CHOICES, default=FULFILLMENT_TAKEAWAY
    )
    address = models.TextField(blank=True, default="")
    maps_link = models.CharField(max_length=500, blank=True, default="")
    order_notes = models.TextField(blank=True, default="")

    # Money (server authoritative)
    subtotal = models.PositiveIntegerField(default=0)
    promo_discount = models.PositiveIntegerField(default=0)
    points_used = models.PositiveIntegerField(default=0)
    discount_total = models.PositiveIntegerField(default=0)
    final_total = models.PositiveIntegerField(default=0)

    promo_code = models.CharField(max_length=64, blank=True, default="")
    points_earned = models.PositiveIntegerField(default=0)

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="order_status_created_idx"),
            models.Index(fields=["user", "created_at"], name="order_user_created_idx"),
        ]

    @property
    def is_delivery(self) -> bool:
        return self.fulfillment_type == self.FULFILLMENT_DELIVERY

    @property
    def is_terminal(self) -> bool:
        return self.status in (self.STATUS_COMPLETED, self.STATUS_CANCELLED)

    def __str__(self):
        return f"#{self.pk} | {self.customer_name} | {self.final_total} | {self.status}"
