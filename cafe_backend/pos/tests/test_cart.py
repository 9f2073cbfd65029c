# pos/tests/test_cart.py

"""
CART LEDGER + SESSION STATE TESTS (no database)

Run with:
    python manage.py test pos -v 2
"""

from __future__ import annotations

from datetime import timedelta

from django.test import SimpleTestCase
from django.utils import timezone

from catalog.models import ModifierGroup
from catalog.services.catalog_snapshot import (
    ModifierGroupSpec,
    ModifierOptionSpec,
    ProductSnapshot,
)
from catalog.services.exceptions import ModifierSelectionError
from loyalty.services.exceptions import ExceedsRedeemableCap, InvalidPointsAmount
from pos.services.cart_ledger import Cart, canonical_selections, make_line_key
from pos.services.exceptions import InvalidQuantityError, ProductUnavailableError
from pos.services.pricing import compute_pricing
from pos.services.session_state import NOTICE_POINTS_ADJUSTED, SessionState
from promotions.models import Promotion
from promotions.services.exceptions import MinimumOrderNotMet
from promotions.services.promotion_rules import CategoryScope, OrderScope, PromotionRule

NOW = timezone.now()

LATTE = ProductSnapshot(
    id=12,
    name="Iced Latte",
    price=28000,
    category="Iced",
    modifier_groups=(
        ModifierGroupSpec(
            id="milk",
            name="Milk",
            is_required=True,
            options=(
                ModifierOptionSpec(id="fresh", name="Fresh milk"),
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
    ),
)

CROISSANT = ProductSnapshot(id=30, name="Croissant", price=22000, category="Pastry")
SOLD_OUT = ProductSnapshot(id=31, name="Banana Bread", price=18000, category="Pastry", is_available=False)


def _promo(**overrides) -> PromotionRule:
    data = dict(
        code="HEMAT10",
        discount_type=Promotion.TYPE_PERCENTAGE,
        value=10,
        scope=OrderScope(),
        starts_at=NOW - timedelta(days=1),
    )
    data.update(overrides)
    return PromotionRule(**data)


class LineKeyTests(SimpleTestCase):
    def test_canonical_form_is_order_independent(self):
        a = canonical_selections({"milk": ("oat",), "addons": ("shot", "syrup")})
        self.assertEqual(a, "addons=shot,syrup;milk=oat")
        self.assertEqual(make_line_key(12, {}), "12-")

    def test_same_selections_in_any_order_share_a_line(self):
        cart = Cart()
        cart.add_line(LATTE, 1, {"milk": ["oat"], "addons": ["syrup", "shot"]})
        cart.add_line(LATTE, 2, {"addons": ["shot", "syrup"], "milk": ["oat"]})

        self.assertEqual(len(cart), 1)
        self.assertEqual(cart.lines[0].quantity, 3)
        self.assertEqual(cart.lines[0].line_key, "12-addons=shot,syrup;milk=oat")


class CartLedgerTests(SimpleTestCase):
    def test_unit_price_includes_modifiers(self):
        cart = Cart()
        line = cart.add_line(LATTE, 2, {"milk": ["oat"], "addons": ["shot"]})

        self.assertEqual(line.unit_price, 39000)
        self.assertEqual(line.line_total, 78000)
        self.assertEqual(cart.subtotal, 78000)
        self.assertEqual(cart.item_count, 2)

    def test_different_selections_make_distinct_lines(self):
        cart = Cart()
        cart.add_line(LATTE, 1, {"milk": ["oat"]})
        cart.add_line(LATTE, 1, {"milk": ["fresh"]})
        cart.add_line(CROISSANT, 1)

        self.assertEqual(len(cart), 3)
        self.assertEqual(cart.subtotal, 34000 + 28000 + 22000)

    def test_note_is_not_part_of_the_key(self):
        cart = Cart()
        cart.add_line(CROISSANT, 1, note="warm it up")
        cart.add_line(CROISSANT, 1)
        self.assertEqual(cart.lines[0].note, "warm it up")

        cart.add_line(CROISSANT, 1, note="  cut in half ")
        self.assertEqual(len(cart), 1)
        self.assertEqual(cart.lines[0].note, "cut in half")

    def test_decrement_remove_clear(self):
        cart = Cart()
        cart.add_line(CROISSANT, 2)
        key = cart.lines[0].line_key

        cart.decrement(key)
        self.assertEqual(cart.lines[0].quantity, 1)
        cart.decrement(key)
        self.assertTrue(cart.is_empty)

        cart.decrement("nope")
        cart.add_line(CROISSANT, 1)
        cart.add_line(LATTE, 1, {"milk": ["fresh"]})
        cart.remove_line(key)
        self.assertEqual([line.product_id for line in cart.lines], [12])

        cart.clear()
        self.assertEqual(cart.subtotal, 0)

    def test_rejected_adds_leave_cart_untouched(self):
        cart = Cart()
        cart.add_line(CROISSANT, 1)

        with self.assertRaises(InvalidQuantityError):
            cart.add_line(CROISSANT, 0)
        with self.assertRaises(InvalidQuantityError):
            cart.add_line(CROISSANT, 1.5)
        with self.assertRaises(ProductUnavailableError):
            cart.add_line(SOLD_OUT, 1)
        with self.assertRaises(ModifierSelectionError):
            cart.add_line(LATTE, 1)

        self.assertEqual(cart.item_count, 1)

    def test_dict_round_trip_keeps_snapshot_prices(self):
        cart = Cart()
        cart.add_line(LATTE, 2, {"milk": ["oat"]}, note="less ice")

        restored = Cart.from_dict(cart.to_dict())

        self.assertEqual(restored.fingerprint(), cart.fingerprint())
        self.assertEqual(restored.lines[0].note, "less ice")
        self.assertEqual(restored.lines[0].modifier_labels, [{"group": "Milk", "options": "Oat milk", "extra": 6000}])


class PricingTests(SimpleTestCase):
    def test_final_total_never_negative(self):
        cart = Cart()
        cart.add_line(CROISSANT, 1)
        pricing = compute_pricing(cart, promo_discount=20000, points_used=5000)
        self.assertEqual(pricing.final_total, 0)
        self.assertEqual(pricing.points_earned_estimate, 0)

    def test_earn_estimate_uses_final_total(self):
        cart = Cart()
        cart.add_line(CROISSANT, 5)
        pricing = compute_pricing(cart, promo_discount=10000)
        self.assertEqual(pricing.final_total, 100000)
        self.assertEqual(pricing.points_earned_estimate, 500)


class SessionStateTests(SimpleTestCase):
    def _state(self, *items) -> SessionState:
        state = SessionState()
        for product, qty in items:
            state.add_item(product, qty, balance=0, now=NOW)
        state.notices.clear()
        return state

    def test_every_mutation_bumps_revision(self):
        state = SessionState()
        state.add_item(CROISSANT, 1, balance=0, now=NOW)
        state.decrement(state.cart.lines[0].line_key, balance=0, now=NOW)
        state.clear()
        self.assertEqual(state.revision, 3)

    def test_invalid_promotion_is_rejected_without_change(self):
        state = self._state((CROISSANT, 1))
        before = state.to_dict()

        with self.assertRaises(MinimumOrderNotMet):
            state.apply_promotion(_promo(min_order_value=50000), balance=0, now=NOW)

        self.assertEqual(state.to_dict(), before)

    def test_promotion_detached_when_cart_no_longer_qualifies(self):
        state = self._state((CROISSANT, 3))
        pricing = state.apply_promotion(_promo(min_order_value=50000), balance=0, now=NOW)
        self.assertEqual(pricing.promo_discount, 6600)

        pricing = state.decrement(state.cart.lines[0].line_key, balance=0, now=NOW)

        self.assertIsNone(state.promotion)
        self.assertEqual(pricing.promo_discount, 0)
        self.assertEqual(state.notices[0]["code"], "PROMOTION_MINIMUM_ORDER_NOT_MET")

    def test_category_promotion_detached_when_last_matching_line_removed(self):
        state = self._state((CROISSANT, 1))
        state.add_item(LATTE, 1, {"milk": ["fresh"]}, balance=0, now=NOW)
        state.apply_promotion(_promo(scope=CategoryScope("Iced")), balance=0, now=NOW)

        state.remove_line("12-milk=fresh", balance=0, now=NOW)

        self.assertIsNone(state.promotion)
        self.assertEqual(state.notices[-1]["code"], "PROMOTION_SCOPE_NOT_ELIGIBLE")

    def test_points_are_clamped_after_cart_shrinks(self):
        state = self._state((CROISSANT, 2))
        state.apply_points(30000, balance=50000, now=NOW)
        self.assertEqual(state.points_requested, 30000)

        pricing = state.decrement(state.cart.lines[0].line_key, balance=50000, now=NOW)

        self.assertEqual(pricing.points_used, 22000)
        self.assertEqual(pricing.final_total, 0)
        self.assertEqual(state.notices[-1]["code"], NOTICE_POINTS_ADJUSTED)

    def test_points_request_above_total_is_rejected(self):
        state = self._state((CROISSANT, 1))
        with self.assertRaises(ExceedsRedeemableCap) as ctx:
            state.apply_points(30000, balance=50000, now=NOW)
        self.assertEqual(ctx.exception.cap, 22000)
        self.assertEqual(state.points_requested, 0)

        with self.assertRaises(InvalidPointsAmount):
            state.apply_points(-5, balance=50000, now=NOW)

    def test_points_cap_uses_total_after_promotion(self):
        state = self._state((CROISSANT, 1))
        state.apply_promotion(_promo(value=50), balance=0, now=NOW)

        with self.assertRaises(ExceedsRedeemableCap) as ctx:
            state.apply_points(12000, balance=50000, now=NOW)
        self.assertEqual(ctx.exception.cap, 11000)

    def test_session_round_trip(self):
        state = self._state((CROISSANT, 3))
        state.apply_promotion(_promo(), balance=0, now=NOW)
        state.apply_points(1000, balance=1000, now=NOW)

        restored = SessionState.from_dict(state.to_dict())

        self.assertEqual(restored.revision, state.revision)
        self.assertEqual(restored.promotion, state.promotion)
        self.assertEqual(restored.points_requested, 1000)
        self.assertEqual(restored.notices, [])

    def test_reset_after_checkout_respects_newer_changes(self):
        state = self._state((CROISSANT, 1))
        token = state.issue_token()
        state.add_item(CROISSANT, 1, balance=0, now=NOW)

        self.assertFalse(state.reset_after_checkout(token))
        self.assertEqual(state.cart.item_count, 2)

        self.assertTrue(state.reset_after_checkout(state.issue_token()))
        self.assertTrue(state.cart.is_empty)
