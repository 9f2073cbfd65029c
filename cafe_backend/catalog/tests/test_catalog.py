# catalog/tests/test_catalog.py

"""
CATALOG TESTS

Run with:
    python manage.py test catalog -v 2
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from catalog.models import BundleItem, ModifierGroup, ModifierOption, Product
from catalog.services.bundles import bundle_list_price, bundle_savings
from catalog.services.catalog_snapshot import (
    ModifierGroupSpec,
    ModifierOptionSpec,
    fetch_product,
    list_products,
)
from catalog.services.exceptions import ModifierSelectionError, ProductNotFoundError
from catalog.services.money import format_amount
from catalog.services.modifier_rules import (
    describe_selections,
    modifier_extra,
    normalize_selections,
    validate_selections,
)


# -----------------------------
# Shared seeding helpers
# -----------------------------


def _create_latte():
    latte = Product.objects.create(name="Iced Latte", unit_price=28000, category="Iced")

    milk = ModifierGroup.objects.create(
        product=latte, code="milk", name="Milk", is_required=True, position=0
    )
    ModifierOption.objects.create(group=milk, code="fresh", name="Fresh milk", price=0, position=0)
    ModifierOption.objects.create(group=milk, code="oat", name="Oat milk", price=6000, position=1)

    addons = ModifierGroup.objects.create(
        product=latte,
        code="addons",
        name="Add-ons",
        selection_type=ModifierGroup.SELECTION_MULTI,
        position=1,
    )
    ModifierOption.objects.create(group=addons, code="shot", name="Extra shot", price=5000)
    ModifierOption.objects.create(group=addons, code="syrup", name="Vanilla syrup", price=4000)
    return latte


GROUPS = (
    ModifierGroupSpec(
        id="milk",
        name="Milk",
        is_required=True,
        options=(
            ModifierOptionSpec(id="fresh", name="Fresh milk", price=0),
            ModifierOptionSpec(id="oat", name="Oat milk", price=6000),
        ),
    ),
    ModifierGroupSpec(
        id="addons",
        name="Add-ons",
        selection_type=ModifierGroup.SELECTION_MULTI,
        options=(
            ModifierOptionSpec(id="shot", name="Extra shot", price=5000),
            ModifierOptionSpec(id="syrup", name="Vanilla syrup", price=4000),
        ),
    ),
    ModifierGroupSpec(
        id="sugar",
        name="Sugar",
        options=(
            ModifierOptionSpec(id="less", name="Less sugar"),
            ModifierOptionSpec(id="none", name="No sugar"),
        ),
    ),
)


class ModifierRulesTests(SimpleTestCase):
    def test_normalize_sorts_dedupes_and_drops_empty_groups(self):
        out = normalize_selections({"sugar": ["less"], "addons": ["syrup", "shot", "shot"], "milk": []})
        self.assertEqual(out, {"addons": ("shot", "syrup"), "sugar": ("less",)})
        self.assertEqual(list(out.keys()), ["addons", "sugar"])

    def test_normalize_accepts_single_string_option(self):
        self.assertEqual(normalize_selections({"milk": "oat"}), {"milk": ("oat",)})

    def test_normalize_rejects_non_mapping(self):
        with self.assertRaises(ModifierSelectionError):
            normalize_selections(["milk", "oat"])

    def test_required_single_group_needs_exactly_one_option(self):
        with self.assertRaises(ModifierSelectionError):
            validate_selections(GROUPS, {})

        with self.assertRaises(ModifierSelectionError):
            validate_selections(GROUPS, {"milk": ("fresh", "oat")})

        validate_selections(GROUPS, {"milk": ("oat",)})

    def test_optional_single_group_allows_zero_or_one(self):
        validate_selections(GROUPS, {"milk": ("fresh",), "sugar": ("less",)})
        with self.assertRaises(ModifierSelectionError):
            validate_selections(GROUPS, {"milk": ("fresh",), "sugar": ("less", "none")})

    def test_multi_group_allows_any_subset(self):
        validate_selections(GROUPS, {"milk": ("fresh",), "addons": ("shot", "syrup")})

    def test_unknown_group_or_option_is_rejected(self):
        with self.assertRaises(ModifierSelectionError):
            validate_selections(GROUPS, {"milk": ("fresh",), "ice": ("less",)})
        with self.assertRaises(ModifierSelectionError):
            validate_selections(GROUPS, {"milk": ("soy",)})

    def test_modifier_extra_and_labels(self):
        selections = {"milk": ("oat",), "addons": ("shot", "syrup")}
        self.assertEqual(modifier_extra(GROUPS, selections), 15000)
        self.assertEqual(
            describe_selections(GROUPS, selections),
            [
                {"group": "Milk", "options": "Oat milk", "extra": 6000},
                {"group": "Add-ons", "options": "Extra shot, Vanilla syrup", "extra": 9000},
            ],
        )


class CatalogSnapshotTests(TestCase):
    def test_fetch_product_snapshots_groups_in_position_order(self):
        latte = _create_latte()

        snap = fetch_product(latte.pk)

        self.assertEqual(snap.price, 28000)
        self.assertEqual(snap.category, "Iced")
        self.assertEqual([g.id for g in snap.modifier_groups], ["milk", "addons"])
        self.assertEqual(snap.group("milk").option("oat").price, 6000)
        self.assertFalse(snap.group("addons").is_single)

    def test_fetch_missing_product_raises(self):
        with self.assertRaises(ProductNotFoundError):
            fetch_product(999999)

    def test_list_products_hides_archived_and_supports_bundles_category(self):
        _create_latte()
        Product.objects.create(name="Old Brew", unit_price=20000, category="Iced", is_available=False)
        Product.objects.create(name="Breakfast Set", unit_price=45000, category="Sets", is_bundle=True)

        names = [p.name for p in list_products(category="Iced")]
        self.assertEqual(names, ["Iced Latte"])

        bundles = [p.name for p in list_products(category="bundles")]
        self.assertEqual(bundles, ["Breakfast Set"])

    def test_category_is_required(self):
        with self.assertRaises(ValidationError):
            Product.objects.create(name="Nameless", unit_price=1000, category="  ")


class BundleTests(TestCase):
    def setUp(self):
        self.latte = Product.objects.create(name="Latte", unit_price=25000, category="Hot")
        self.croissant = Product.objects.create(name="Croissant", unit_price=22000, category="Pastry")
        self.bundle = Product.objects.create(
            name="Morning Set", unit_price=40000, category="Sets", is_bundle=True
        )
        BundleItem.objects.create(parent=self.bundle, child=self.latte, quantity=1)
        BundleItem.objects.create(parent=self.bundle, child=self.croissant, quantity=1)

    def test_list_price_and_savings(self):
        self.assertEqual(bundle_list_price(self.bundle), 47000)
        self.assertEqual(bundle_savings(self.bundle), 7000)
        self.assertEqual(bundle_savings(self.latte), 0)

    def test_bundles_cannot_be_nested(self):
        other = Product.objects.create(name="Big Set", unit_price=80000, category="Sets", is_bundle=True)
        with self.assertRaises(ValidationError):
            BundleItem.objects.create(parent=other, child=self.bundle, quantity=1)

    def test_parent_must_be_a_bundle(self):
        with self.assertRaises(ValidationError):
            BundleItem.objects.create(parent=self.latte, child=self.croissant, quantity=1)


class MoneyFormatTests(SimpleTestCase):
    def test_thousands_separator_and_label(self):
        self.assertEqual(format_amount(50000), "Rp 50,000")

    @override_settings(ORDERS={"CURRENCY_LABEL": "IDR", "ID_SUFFIX_DIGITS": 4})
    def test_label_comes_from_settings(self):
        self.assertEqual(format_amount(1234567), "IDR 1,234,567")


class CatalogApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.latte = _create_latte()

    def test_list_is_public_and_paginated(self):
        res = self.client.get(reverse("products-list"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)

        product = res.data["results"][0]
        self.assertEqual(product["name"], "Iced Latte")
        self.assertEqual([g["id"] for g in product["modifier_groups"]], ["milk", "addons"])
        self.assertEqual(product["modifier_groups"][0]["options"][1], {"id": "oat", "name": "Oat milk", "price": 6000})

    def test_search_filter(self):
        Product.objects.create(name="Hot Chocolate", unit_price=24000, category="Hot")
        res = self.client.get(reverse("products-list"), {"q": "choco"})
        self.assertEqual([p["name"] for p in res.data["results"]], ["Hot Chocolate"])

    def test_retrieve(self):
        res = self.client.get(reverse("products-detail", args=[self.latte.pk]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["unit_price"], 28000)
