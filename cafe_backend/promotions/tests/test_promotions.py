# promotions/tests/test_promotions.py

"""
PROMOTION TESTS

Run with:
    python manage.py test promotions -v 2
"""

from __future__ import annotations

from datetime import timedelta

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from catalog.models import Product
from catalog.services.catalog_snapshot import ProductSnapshot
from pos.services.cart_ledger import Cart
from promotions.models import Promotion, PromotionTarget
from promotions.services.exceptions import (
    InvalidPromotionConfiguration,
    MinimumOrderNotMet,
    MinimumQuantityNotMet,
    PromotionExpired,
    PromotionInactive,
    PromotionNotFound,
    PromotionNotStarted,
    ScopeNotEligible,
)
from promotions.services.promotion_evaluator import (
    evaluate_promotion,
    try_evaluate_promotion,
)
from promotions.services.promotion_lookup import fetch_promotion_by_code
from promotions.services.promotion_rules import (
    CategoryScope,
    OrderScope,
    ProductScope,
    PromotionRule,
    build_rule,
)

NOW = timezone.now()

COFFEE = ProductSnapshot(id=1, name="Americano", price=20000, category="Coffee")
LATTE = ProductSnapshot(id=2, name="Latte", price=25000, category="Coffee")
CROISSANT = ProductSnapshot(id=3, name="Croissant", price=30000, category="Pastry")


def _rule(**overrides) -> PromotionRule:
    data = dict(
        code="TEST",
        discount_type=Promotion.TYPE_PERCENTAGE,
        value=10,
        scope=OrderScope(),
        starts_at=NOW - timedelta(days=1),
        ends_at=NOW + timedelta(days=1),
    )
    data.update(overrides)
    return PromotionRule(**data)


def _cart(*items) -> Cart:
    cart = Cart()
    for product, qty in items:
        cart.add_line(product, qty)
    return cart


class DiscountMathTests(SimpleTestCase):
    def test_percentage_discount_is_floored(self):
        odd = ProductSnapshot(id=9, name="Odd", price=12345, category="Misc")
        result = evaluate_promotion(_rule(value=10), _cart((odd, 1)), now=NOW)
        self.assertEqual(result.discount_amount, 1234)
        self.assertEqual(result.eligible_amount, 12345)

    def test_fixed_discount_is_capped_at_eligible_amount(self):
        rule = _rule(discount_type=Promotion.TYPE_FIXED_AMOUNT, value=50000)
        result = evaluate_promotion(rule, _cart((CROISSANT, 1)), now=NOW)
        self.assertEqual(result.discount_amount, 30000)

    def test_evaluation_is_idempotent(self):
        rule = _rule(value=15)
        cart = _cart((COFFEE, 2), (CROISSANT, 1))
        first = evaluate_promotion(rule, cart, now=NOW)
        second = evaluate_promotion(rule, cart, now=NOW)
        self.assertEqual(first, second)


class EligibilityOrderTests(SimpleTestCase):
    def test_inactive_wins_over_expired(self):
        rule = _rule(is_active=False, ends_at=NOW - timedelta(hours=1))
        with self.assertRaises(PromotionInactive):
            evaluate_promotion(rule, _cart((COFFEE, 1)), now=NOW)

    def test_not_started(self):
        rule = _rule(starts_at=NOW + timedelta(hours=1))
        with self.assertRaises(PromotionNotStarted):
            evaluate_promotion(rule, _cart((COFFEE, 1)), now=NOW)

    def test_expired(self):
        rule = _rule(ends_at=NOW - timedelta(seconds=1))
        with self.assertRaises(PromotionExpired):
            evaluate_promotion(rule, _cart((COFFEE, 1)), now=NOW)

    def test_open_ended_promotion_never_expires(self):
        rule = _rule(ends_at=None)
        result = evaluate_promotion(rule, _cart((COFFEE, 1)), now=NOW + timedelta(days=3650))
        self.assertEqual(result.discount_amount, 2000)

    def test_minimum_order_message_mentions_amount(self):
        rule = _rule(min_order_value=50000)
        with self.assertRaises(MinimumOrderNotMet) as ctx:
            evaluate_promotion(rule, _cart((COFFEE, 1)), now=NOW)
        self.assertIn("50,000", str(ctx.exception))

    def test_minimum_order_checked_before_scope(self):
        rule = _rule(scope=CategoryScope("Coffee"), min_order_value=100000)
        with self.assertRaises(MinimumOrderNotMet):
            evaluate_promotion(rule, _cart((CROISSANT, 1)), now=NOW)

    def test_zero_minimums_are_ignored(self):
        rule = _rule(min_order_value=0, min_quantity=0)
        evaluate_promotion(rule, _cart((COFFEE, 1)), now=NOW)


class ScopeTests(SimpleTestCase):
    def test_category_scope_discounts_matching_lines_only(self):
        rule = _rule(scope=CategoryScope("Coffee"), value=50)
        result = evaluate_promotion(rule, _cart((COFFEE, 1), (CROISSANT, 1)), now=NOW)
        self.assertEqual(result.eligible_amount, 20000)
        self.assertEqual(result.discount_amount, 10000)

    def test_category_scope_without_matching_line(self):
        rule = _rule(scope=CategoryScope("Coffee"))
        with self.assertRaises(ScopeNotEligible) as ctx:
            evaluate_promotion(rule, _cart((CROISSANT, 2)), now=NOW)
        self.assertEqual(str(ctx.exception), "Promotion applies to Coffee items only.")

    def test_category_minimum_quantity_counts_category_items(self):
        rule = _rule(scope=CategoryScope("Coffee"), min_quantity=2)
        with self.assertRaises(MinimumQuantityNotMet) as ctx:
            evaluate_promotion(rule, _cart((COFFEE, 1), (CROISSANT, 5)), now=NOW)
        self.assertEqual(str(ctx.exception), "Add at least 2 item(s) from Coffee.")

        result = evaluate_promotion(rule, _cart((COFFEE, 1), (LATTE, 1)), now=NOW)
        self.assertEqual(result.eligible_amount, 45000)

    def test_order_minimum_quantity_counts_every_item(self):
        rule = _rule(min_quantity=3)
        with self.assertRaises(MinimumQuantityNotMet):
            evaluate_promotion(rule, _cart((COFFEE, 2)), now=NOW)
        evaluate_promotion(rule, _cart((COFFEE, 2), (CROISSANT, 1)), now=NOW)

    def test_product_scope(self):
        rule = _rule(
            scope=ProductScope(LATTE.id),
            discount_type=Promotion.TYPE_FIXED_AMOUNT,
            value=5000,
        )
        with self.assertRaises(ScopeNotEligible) as ctx:
            evaluate_promotion(rule, _cart((COFFEE, 1)), now=NOW)
        self.assertEqual(str(ctx.exception), "Required product is not in cart.")

        result = evaluate_promotion(rule, _cart((COFFEE, 1), (LATTE, 2)), now=NOW)
        self.assertEqual(result.eligible_amount, 50000)
        self.assertEqual(result.discount_amount, 5000)

    def test_try_evaluate_returns_error_as_value(self):
        evaluation, error = try_evaluate_promotion(_rule(is_active=False), _cart((COFFEE, 1)), now=NOW)
        self.assertIsNone(evaluation)
        self.assertIsInstance(error, PromotionInactive)
        self.assertEqual(error.code, "PROMOTION_INACTIVE")


class RuleConstructionTests(SimpleTestCase):
    def test_percentage_above_100_is_invalid(self):
        with self.assertRaises(InvalidPromotionConfiguration):
            _rule(value=101)

    def test_unknown_discount_type_is_invalid(self):
        with self.assertRaises(InvalidPromotionConfiguration):
            _rule(discount_type="bogo")

    def test_rule_survives_session_round_trip(self):
        rule = _rule(scope=CategoryScope("Coffee"), min_quantity=2, ends_at=None)
        self.assertEqual(PromotionRule.from_dict(rule.to_dict()), rule)


class PromotionModelTests(TestCase):
    def setUp(self):
        self.latte = Product.objects.create(name="Latte", unit_price=25000, category="Coffee")

    def test_code_is_stored_uppercase_and_looked_up_case_insensitively(self):
        Promotion.objects.create(code="  hemat10 ", discount_type=Promotion.TYPE_PERCENTAGE, value=10)

        rule = fetch_promotion_by_code("Hemat10")

        self.assertEqual(rule.code, "HEMAT10")
        self.assertIsInstance(rule.scope, OrderScope)

    def test_unknown_code(self):
        with self.assertRaises(PromotionNotFound):
            fetch_promotion_by_code("NOPE")
        with self.assertRaises(PromotionNotFound):
            fetch_promotion_by_code("   ")

    def test_scoped_promotion_requires_its_target(self):
        promo = Promotion.objects.create(
            code="COFFEE20",
            discount_type=Promotion.TYPE_PERCENTAGE,
            value=20,
            scope=Promotion.SCOPE_CATEGORY,
        )
        with self.assertRaises(InvalidPromotionConfiguration):
            fetch_promotion_by_code("coffee20")

        PromotionTarget.objects.create(promotion=promo, target_category=" Coffee ")
        rule = fetch_promotion_by_code("coffee20")
        self.assertEqual(rule.scope, CategoryScope("Coffee"))

    def test_product_target_builds_product_scope(self):
        promo = Promotion.objects.create(
            code="LATTE5K",
            discount_type=Promotion.TYPE_FIXED_AMOUNT,
            value=5000,
            scope=Promotion.SCOPE_PRODUCT,
        )
        PromotionTarget.objects.create(promotion=promo, target_product=self.latte)

        promo.refresh_from_db()
        self.assertEqual(build_rule(promo).scope, ProductScope(self.latte.pk))

    def test_category_target_on_product_scope_is_invalid(self):
        promo = Promotion.objects.create(
            code="MISMATCH",
            discount_type=Promotion.TYPE_FIXED_AMOUNT,
            value=5000,
            scope=Promotion.SCOPE_PRODUCT,
        )
        PromotionTarget.objects.create(promotion=promo, target_category="Coffee")

        with self.assertRaises(InvalidPromotionConfiguration):
            fetch_promotion_by_code("MISMATCH")

    def test_target_needs_exactly_one_of_category_or_product(self):
        promo = Promotion.objects.create(
            code="BOTH", discount_type=Promotion.TYPE_PERCENTAGE, value=5, scope=Promotion.SCOPE_CATEGORY
        )
        with self.assertRaises(ValidationError):
            PromotionTarget.objects.create(promotion=promo, target_category="Coffee", target_product=self.latte)
        with self.assertRaises(ValidationError):
            PromotionTarget.objects.create(promotion=promo)

    def test_model_rejects_percentage_above_100(self):
        with self.assertRaises(ValidationError):
            Promotion.objects.create(code="TOOMUCH", discount_type=Promotion.TYPE_PERCENTAGE, value=150)

    def test_model_rejects_window_ending_before_start(self):
        with self.assertRaises(ValidationError):
            Promotion.objects.create(
                code="BACKWARDS",
                discount_type=Promotion.TYPE_PERCENTAGE,
                value=10,
                ends_at=timezone.now() - timedelta(days=1),
            )
