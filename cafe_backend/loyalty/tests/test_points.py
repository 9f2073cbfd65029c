# loyalty/tests/test_points.py

"""
LOYALTY POINTS TESTS

Run with:
    python manage.py test loyalty -v 2
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from loyalty.models import LoyaltyAccount, PointsLedgerEntry
from loyalty.services.balance_service import fetch_points_balance, ledger_balance
from loyalty.services.exceptions import (
    ExceedsRedeemableCap,
    InsufficientPointsBalance,
    InvalidPointsAmount,
)
from loyalty.services.points_engine import (
    balance_from_ledger,
    clamp_redemption,
    max_redeemable,
    points_earned,
    request_redemption,
)
from loyalty.services.points_insights import (
    build_insights,
    next_tier_for,
    tier_for,
)
from loyalty.services.points_posting import post_earn, post_redeem, post_refund
from sales.models import Order

User = get_user_model()


# -----------------------------
# Shared seeding helpers
# -----------------------------

_next_order_id = iter(range(2610190001, 2610199999))


def _order(user, *, status=Order.STATUS_PENDING, points_earned=0, points_used=0, final_total=10000):
    return Order.objects.create(
        id=next(_next_order_id),
        user=user,
        customer_name="Sari",
        customer_phone="0812",
        subtotal=final_total + points_used,
        points_used=points_used,
        discount_total=points_used,
        final_total=final_total,
        points_earned=points_earned,
        status=status,
    )


def _entry(user, kind, delta, *, order=None, created_at=None):
    data = dict(user=user, kind=kind, points_delta=delta, order=order)
    if created_at is not None:
        data["created_at"] = created_at
    return PointsLedgerEntry.objects.create(**data)


class PointsEngineTests(SimpleTestCase):
    def test_redeemable_cap_is_min_of_balance_and_total(self):
        self.assertEqual(max_redeemable(500, 300), 300)
        self.assertEqual(max_redeemable(200, 300), 200)
        self.assertEqual(max_redeemable(-5, 300), 0)

    def test_request_above_total_is_rejected_with_cap(self):
        with self.assertRaises(ExceedsRedeemableCap) as ctx:
            request_redemption(400, 500, 300)
        self.assertEqual(ctx.exception.cap, 300)
        self.assertEqual(ctx.exception.code, "POINTS_EXCEED_TOTAL")

    def test_request_above_balance_is_rejected(self):
        with self.assertRaises(InsufficientPointsBalance):
            request_redemption(600, 500, 10000)

    def test_request_must_be_positive_integer(self):
        for bad in (0, -1, 1.5, "10", True, None):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidPointsAmount):
                    request_redemption(bad, 500, 10000)

    def test_valid_request_is_returned(self):
        self.assertEqual(request_redemption(300, 500, 300), 300)

    def test_clamp_reports_adjustment(self):
        clamp = clamp_redemption(500, 500, 300)
        self.assertEqual((clamp.points, clamp.adjusted), (300, True))

        clamp = clamp_redemption(200, 500, 300)
        self.assertEqual((clamp.points, clamp.adjusted), (200, False))

        clamp = clamp_redemption(0, 500, 300)
        self.assertEqual((clamp.points, clamp.adjusted), (0, False))

    def test_earn_is_floored(self):
        self.assertEqual(points_earned(100000, Decimal("0.005")), 500)
        self.assertEqual(points_earned(99999, Decimal("0.005")), 499)
        self.assertEqual(points_earned(0, Decimal("0.005")), 0)

    @override_settings(LOYALTY={"EARN_RATE": Decimal("0.01")})
    def test_earn_rate_comes_from_settings(self):
        self.assertEqual(points_earned(12345), 123)

    def test_balance_never_negative(self):
        self.assertEqual(balance_from_ledger([100, -30, -20]), 50)
        self.assertEqual(balance_from_ledger([10, -30]), 0)
        self.assertEqual(balance_from_ledger([]), 0)


class LedgerModelTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="sari", password="pass1234")

    def test_entries_are_immutable(self):
        entry = _entry(self.user, PointsLedgerEntry.KIND_EARN, 100)

        entry.points_delta = 1000
        with self.assertRaises(ValidationError):
            entry.save()
        with self.assertRaises(ValidationError):
            entry.delete()

        self.assertEqual(PointsLedgerEntry.objects.get(pk=entry.pk).points_delta, 100)

    def test_sign_must_match_kind(self):
        with self.assertRaises(ValidationError):
            _entry(self.user, PointsLedgerEntry.KIND_EARN, -10)
        with self.assertRaises(ValidationError):
            _entry(self.user, PointsLedgerEntry.KIND_REDEEM, 10)
        with self.assertRaises(ValidationError):
            _entry(self.user, PointsLedgerEntry.KIND_ADJUSTMENT, 0)

        _entry(self.user, PointsLedgerEntry.KIND_ADJUSTMENT, -5)
        _entry(self.user, PointsLedgerEntry.KIND_ADJUSTMENT, 5)


class BalanceTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="sari", password="pass1234")

    def test_balance_falls_back_to_ledger_without_cache(self):
        _entry(self.user, PointsLedgerEntry.KIND_EARN, 700)
        _entry(self.user, PointsLedgerEntry.KIND_REDEEM, -200)

        LoyaltyAccount.objects.filter(user=self.user).update(points_balance=None)
        self.assertEqual(fetch_points_balance(self.user), 500)

    def test_cached_balance_wins_when_present(self):
        _entry(self.user, PointsLedgerEntry.KIND_EARN, 700)
        LoyaltyAccount.objects.filter(user=self.user).update(points_balance=650)

        self.assertEqual(fetch_points_balance(self.user), 650)
        self.assertEqual(ledger_balance(self.user), 700)

    def test_manual_adjustment_refreshes_cached_balance(self):
        _entry(self.user, PointsLedgerEntry.KIND_EARN, 500)
        self.assertEqual(fetch_points_balance(self.user), 500)

        _entry(self.user, PointsLedgerEntry.KIND_ADJUSTMENT, -300)
        _entry(self.user, PointsLedgerEntry.KIND_EXPIRE, -50)

        self.assertEqual(ledger_balance(self.user), 150)
        self.assertEqual(fetch_points_balance(self.user), 150)
        self.assertEqual(LoyaltyAccount.objects.get(user=self.user).points_balance, 150)

    def test_anonymous_has_zero(self):
        self.assertEqual(fetch_points_balance(None), 0)


class PostingTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="sari", password="pass1234")
        _entry(self.user, PointsLedgerEntry.KIND_EARN, 1000)

    def test_redeem_then_refund_restores_balance(self):
        order = _order(self.user, points_used=300)

        post_redeem(user=self.user, order=order, points=300)
        self.assertEqual(fetch_points_balance(self.user), 700)

        post_refund(order=order)
        post_refund(order=order)
        self.assertEqual(fetch_points_balance(self.user), 1000)
        self.assertEqual(
            PointsLedgerEntry.objects.filter(order=order, kind=PointsLedgerEntry.KIND_REFUND).count(), 1
        )

    def test_earn_is_posted_once(self):
        order = _order(self.user, points_earned=250, status=Order.STATUS_COMPLETED)

        post_earn(order=order)
        post_earn(order=order)

        self.assertEqual(fetch_points_balance(self.user), 1250)
        self.assertEqual(LoyaltyAccount.objects.get(user=self.user).points_balance, 1250)

    def test_guest_orders_post_nothing(self):
        order = _order(None, points_earned=250)
        self.assertIsNone(post_earn(order=order))
        self.assertIsNone(post_refund(order=order))

    def test_zero_redeem_posts_nothing(self):
        order = _order(self.user)
        self.assertIsNone(post_redeem(user=self.user, order=order, points=0))


class InsightsTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="sari", password="pass1234")

    def test_tiers(self):
        self.assertEqual(tier_for(0), "Bronze")
        self.assertEqual(tier_for(2000), "Silver")
        self.assertEqual(tier_for(4999), "Silver")
        self.assertEqual(tier_for(5000), "Gold")
        self.assertEqual(next_tier_for(1500), ("Silver", 500))
        self.assertEqual(next_tier_for(6000), (None, 0))

    def test_summary_numbers(self):
        now = timezone.now()
        completed = _order(self.user, status=Order.STATUS_COMPLETED, points_earned=2100, points_used=400)
        _order(self.user, status=Order.STATUS_PENDING, points_earned=60)
        _order(self.user, status=Order.STATUS_ASSIGNED, points_earned=40)
        _order(self.user, status=Order.STATUS_CANCELLED, points_earned=999)

        # 85 days old: expires in 5 days, inside the 7 day warning window
        _entry(self.user, PointsLedgerEntry.KIND_EARN, 300, created_at=now - timedelta(days=85))
        _entry(self.user, PointsLedgerEntry.KIND_EARN, 2100, order=completed)
        _entry(self.user, PointsLedgerEntry.KIND_REDEEM, -400, order=completed)

        insights = build_insights(self.user, now=now)

        self.assertEqual(insights.balance, 2000)
        self.assertEqual(insights.lifetime_earned, 2400)
        self.assertEqual(insights.lifetime_used, 400)
        self.assertEqual(insights.tier, "Silver")
        self.assertEqual((insights.next_tier, insights.points_to_next_tier), ("Gold", 2600))
        self.assertEqual(insights.pending_points, 100)
        self.assertEqual(insights.expiring_soon, 300)
        self.assertEqual(len(insights.orders), 1)
        self.assertEqual(insights.orders[0].order_id, completed.pk)
        self.assertEqual((insights.orders[0].earned, insights.orders[0].used), (2100, 400))

    def test_already_expired_points_are_not_expiring_soon(self):
        now = timezone.now()
        _entry(self.user, PointsLedgerEntry.KIND_EARN, 300, created_at=now - timedelta(days=120))
        _entry(self.user, PointsLedgerEntry.KIND_EARN, 200, created_at=now - timedelta(days=10))

        self.assertEqual(build_insights(self.user, now=now).expiring_soon, 0)

    def test_refund_reduces_used_points_per_order(self):
        order = _order(self.user, status=Order.STATUS_CANCELLED, points_used=300)
        _entry(self.user, PointsLedgerEntry.KIND_EARN, 1000)
        _entry(self.user, PointsLedgerEntry.KIND_REDEEM, -300, order=order)
        _entry(self.user, PointsLedgerEntry.KIND_REFUND, 300, order=order)

        row = build_insights(self.user).orders[0]
        self.assertEqual((row.earned, row.used), (0, 0))


class LoyaltyApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="sari", password="pass1234")
        _entry(self.user, PointsLedgerEntry.KIND_EARN, 500)

    def test_summary_requires_authentication(self):
        res = self.client.get(reverse("loyalty:summary"))
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_summary_and_ledger(self):
        self.client.force_authenticate(user=self.user)

        res = self.client.get(reverse("loyalty:summary"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["balance"], 500)
        self.assertEqual(res.data["tier"], "Bronze")
        self.assertEqual(res.data["next_tier"], "Silver")

        res = self.client.get(reverse("loyalty:ledger"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["points_delta"], 500)
