"""
======================================================
PATH: promotions/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Promotion + PromotionTarget
"""

from __future__ import annotations

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Promotion",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("code", models.CharField(max_length=64, unique=True)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "discount_type",
                    models.CharField(
                        choices=[("percentage", "Percentage"), ("fixed_amount", "Fixed amount")],
                        max_length=16,
                    ),
                ),
                (
                    "value",
                    models.PositiveIntegerField(
                        help_text="Percent (0-100) if percentage; currency amount if fixed_amount."
                    ),
                ),
                (
                    "scope",
                    models.CharField(
                        choices=[("order", "Whole order"), ("category", "Category"), ("product", "Product")],
                        default="order",
                        max_length=16,
                    ),
                ),
                ("min_order_value", models.PositiveIntegerField(blank=True, null=True)),
                ("min_quantity", models.PositiveIntegerField(blank=True, null=True)),
                ("starts_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("ends_at", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["is_active", "starts_at"], name="promo_active_starts_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PromotionTarget",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("target_category", models.CharField(blank=True, default="", max_length=64)),
                (
                    "promotion",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="target",
                        to="promotions.promotion",
                    ),
                ),
                (
                    "target_product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="promotion_targets",
                        to="catalog.product",
                    ),
                ),
            ],
        ),
    ]
