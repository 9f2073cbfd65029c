"""
======================================================
PATH: catalog/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Product, ModifierGroup, ModifierOption, BundleItem
"""

from __future__ import annotations

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "unit_price",
                    models.PositiveIntegerField(
                        help_text="Price in the smallest currency unit (integer, non-negative)."
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        db_index=True,
                        help_text="Menu section label, e.g. 'Iced', 'Hot Coffee', 'Pastry'.",
                        max_length=64,
                    ),
                ),
                ("image_url", models.URLField(blank=True, default="")),
                ("is_available", models.BooleanField(default=True)),
                ("is_bundle", models.BooleanField(default=False)),
                ("is_recommended", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["category", "name"],
                "indexes": [
                    models.Index(fields=["category", "is_available"], name="catalog_prod_cat_avail_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ModifierGroup",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.SlugField(max_length=64)),
                ("name", models.CharField(max_length=120)),
                ("is_required", models.BooleanField(default=False)),
                (
                    "selection_type",
                    models.CharField(
                        choices=[("single", "Single choice"), ("multi", "Multiple choice")],
                        default="single",
                        max_length=8,
                    ),
                ),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="modifier_groups",
                        to="catalog.product",
                    ),
                ),
            ],
            options={
                "ordering": ["position", "id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("product", "code"),
                        name="unique_modifier_group_code_per_product",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ModifierOption",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.SlugField(max_length=64)),
                ("name", models.CharField(max_length=120)),
                (
                    "price",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Additional price per unit (smallest currency unit).",
                    ),
                ),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="options",
                        to="catalog.modifiergroup",
                    ),
                ),
            ],
            options={
                "ordering": ["position", "id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("group", "code"),
                        name="unique_modifier_option_code_per_group",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="BundleItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        default=1,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "child",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="included_in_bundles",
                        to="catalog.product",
                    ),
                ),
                (
                    "parent",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bundle_items",
                        to="catalog.product",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("parent", "child"),
                        name="unique_child_per_bundle",
                    )
                ],
            },
        ),
    ]
