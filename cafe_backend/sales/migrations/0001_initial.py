"""
======================================================
PATH: sales/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Order + OrderLine
"""

from __future__ import annotations

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigIntegerField(editable=False, primary_key=True, serialize=False)),
                ("customer_name", models.CharField(max_length=120)),
                ("customer_phone", models.CharField(max_length=40)),
                (
                    "fulfillment_type",
                    models.CharField(
                        choices=[("takeaway", "Takeaway"), ("delivery", "Delivery")],
                        default="takeaway",
                        max_length=16,
                    ),
                ),
                ("address", models.TextField(blank=True, default="")),
                ("maps_link", models.CharField(blank=True, default="", max_length=500)),
                ("order_notes", models.TextField(blank=True, default="")),
                ("subtotal", models.PositiveIntegerField(default=0)),
                ("promo_discount", models.PositiveIntegerField(default=0)),
                ("points_used", models.PositiveIntegerField(default=0)),
                ("discount_total", models.PositiveIntegerField(default=0)),
                ("final_total", models.PositiveIntegerField(default=0)),
                ("promo_code", models.CharField(blank=True, default="", max_length=64)),
                ("points_earned", models.PositiveIntegerField(default=0)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("assigned", "Assigned"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="order_status_created_idx"),
                    models.Index(fields=["user", "created_at"], name="order_user_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_ref", models.BigIntegerField(help_text="Product id at checkout time")),
                ("product_name", models.CharField(max_length=255)),
                ("base_price", models.PositiveIntegerField()),
                ("unit_price", models.PositiveIntegerField(help_text="base_price + selected modifier prices")),
                (
                    "quantity",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("line_total", models.PositiveIntegerField(help_text="quantity * unit_price (server computed)")),
                ("selections", models.JSONField(blank=True, default=dict)),
                ("modifier_labels", models.JSONField(blank=True, default=list)),
                ("note", models.TextField(blank=True, default="")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="sales.order",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="order_lines",
                        to="catalog.product",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
