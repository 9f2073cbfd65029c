# pos/services/session_state.py

"""
STOREFRONT SESSION STATE

Owns everything a browser session accumulates before checkout:
- the cart (lines)
- the applied promotion (rule snapshot, re-evaluated on every change)
- the requested points redemption (clamped on every change)
- a revision counter bumped by every mutation

Reactive rules (after EVERY mutation):
- promotion no longer valid  -> detached + notice (code, message)
- points above the new cap   -> clamped + notice

Explicit actions (apply promo / apply points) are different: an invalid request is
REJECTED with the domain error and the state stays exactly as it was.
A promotion that fails at checkout is detached the same way as a reactive one.

Stored under settings.STOREFRONT_SESSION_KEY as plain JSON-able dicts.
"""

from __future__ import annotations

import logging
from importlib import import_module

from django.conf import settings

from loyalty.services.exceptions import PointsError
from loyalty.services.points_engine import clamp_redemption, request_redemption
from pos.services.cart_ledger import Cart
from pos.services.pricing import PricingSummary, compute_pricing
from promotions.services.promotion_evaluator import (
    evaluate_promotion,
    try_evaluate_promotion,
)
from promotions.services.promotion_rules import PromotionRule

logger = logging.getLogger(__name__)

NOTICE_POINTS_ADJUSTED = "POINTS_ADJUSTED"


class SessionState:
    def __init__(
        self,
        *,
        cart: Cart | None = None,
        promotion: PromotionRule | None = None,
        points_requested: int = 0,
        revision: int = 0,
    ):
        self.cart = cart or Cart()
        self.promotion = promotion
        self.points_requested = int(points_requested or 0)
        self.revision = int(revision or 0)
        self.notices: list[dict] = []

    # -----------------------------
    # Persistence
    # -----------------------------

    @classmethod
    def from_dict(cls, data: dict | None) -> "SessionState":
        data = data or {}
        promotion = data.get("promotion")
        return cls(
            cart=Cart.from_dict(data.get("cart")),
            promotion=PromotionRule.from_dict(promotion) if promotion else None,
            points_requested=int(data.get("points") or 0),
            revision=int(data.get("revision") or 0),
        )

    def to_dict(self) -> dict:
        return {
            "cart": self.cart.to_dict(),
            "promotion": self.promotion.to_dict() if self.promotion else None,
            "points": self.points_requested,
            "revision": self.revision,
        }

    @classmethod
    def load(cls, request) -> "SessionState":
        return cls.from_dict(request.session.get(settings.STOREFRONT_SESSION_KEY))

    def save(self, request) -> None:
        request.session[settings.STOREFRONT_SESSION_KEY] = self.to_dict()
        request.session.modified = True

    @classmethod
    def load_stored(cls, request) -> "SessionState":
        """
        State as last persisted by ANY request sharing this session cookie,
        read from the session backend rather than this request's copy.
        """
        session_key = request.session.session_key
        if not session_key:
            return cls.load(request)
        store = import_module(settings.SESSION_ENGINE).SessionStore(session_key=session_key)
        return cls.from_dict(store.get(settings.STOREFRONT_SESSION_KEY))

    # -----------------------------
    # Staleness guard
    # -----------------------------

    def issue_token(self) -> int:
        return self.revision

    def is_current(self, token) -> bool:
        try:
            return int(token) == self.revision
        except (TypeError, ValueError):
            return False

    def _bump(self) -> None:
        self.revision += 1

    # -----------------------------
    # Pricing
    # -----------------------------

    def _notice(self, code: str, message: str) -> None:
        self.notices.append({"code": code, "message": message})

    def reprice(self, *, balance: int, now=None) -> PricingSummary:
        """
        Re-evaluate the applied promotion and re-clamp points against the current cart.
        Mutates state (detach / clamp) and records notices.
        """
        promo_discount = 0
        promo_code = ""

        if self.promotion is not None:
            evaluation, error = try_evaluate_promotion(self.promotion, self.cart, now=now)
            if error is not None:
                logger.info(
                    "Promotion detached",
                    extra={"code": self.promotion.code, "reason": error.code},
                )
                self._notice(error.code, str(error))
                self.promotion = None
            else:
                promo_discount = evaluation.discount_amount
                promo_code = evaluation.code

        after_promo = max(0, self.cart.subtotal - promo_discount)
        clamp = clamp_redemption(self.points_requested, balance, after_promo)
        if clamp.adjusted:
            self._notice(
                NOTICE_POINTS_ADJUSTED,
                f"Points adjusted to {clamp.points} to match your balance and total.",
            )
        self.points_requested = clamp.points

        return compute_pricing(
            self.cart,
            promo_discount=promo_discount,
            points_used=self.points_requested,
            promo_code=promo_code,
        )

    # -----------------------------
    # Cart mutations
    # -----------------------------

    def add_item(self, product, quantity=1, selections=None, note="", *, balance: int, now=None) -> PricingSummary:
        self.cart.add_line(product, quantity, selections, note)
        self._bump()
        return self.reprice(balance=balance, now=now)

    def decrement(self, line_key: str, *, balance: int, now=None) -> PricingSummary:
        self.cart.decrement(line_key)
        self._bump()
        return self.reprice(balance=balance, now=now)

    def remove_line(self, line_key: str, *, balance: int, now=None) -> PricingSummary:
        self.cart.remove_line(line_key)
        self._bump()
        return self.reprice(balance=balance, now=now)

    def clear(self) -> None:
        self.cart.clear()
        self.promotion = None
        self.points_requested = 0
        self._bump()

    # -----------------------------
    # Explicit promotion / points actions
    # -----------------------------

    def apply_promotion(self, rule: PromotionRule, *, balance: int, now=None) -> PricingSummary:
        # Raises PromotionError before any state change.
        evaluate_promotion(rule, self.cart, now=now)
        self.promotion = rule
        self._bump()
        return self.reprice(balance=balance, now=now)

    def detach_promotion(self, error, *, balance: int, now=None) -> PricingSummary:
        """Drop a promotion that failed re-validation (e.g. at checkout) and reprice."""
        if self.promotion is not None:
            logger.info(
                "Promotion detached",
                extra={"code": self.promotion.code, "reason": getattr(error, "code", "")},
            )
            self.promotion = None
        self._notice(getattr(error, "code", "PROMOTION_ERROR"), str(error))
        self._bump()
        return self.reprice(balance=balance, now=now)

    def remove_promotion(self, *, balance: int, now=None) -> PricingSummary:
        self.promotion = None
        self._bump()
        return self.reprice(balance=balance, now=now)

    def apply_points(self, requested, *, balance: int, now=None) -> PricingSummary:
        current = self.reprice(balance=balance, now=now)
        try:
            points = request_redemption(requested, balance, current.total_after_promo)
        except PointsError:
            logger.info(
                "Points redemption rejected",
                extra={"requested": requested, "balance": balance},
            )
            raise
        self.points_requested = points
        self._bump()
        return self.reprice(balance=balance, now=now)

    def remove_points(self, *, balance: int, now=None) -> PricingSummary:
        self.points_requested = 0
        self._bump()
        return self.reprice(balance=balance, now=now)

    def reset_after_checkout(self, token) -> bool:
        """Clear cart / promo / points only if no newer change happened meanwhile."""
        if not self.is_current(token):
            return False
        self.clear()
        return True
