# pos/views/api.py

"""
STOREFRONT CART API VIEWS

Purpose:
- Session-scoped cart lifecycle (guests and signed-in customers)
- Add / decrement / remove / clear lines (server-owned pricing)
- Apply / remove promo code and loyalty points
- Checkout endpoint that finalizes the cart into an Order via the checkout orchestrator

Hard rules:
- Money is server-owned: prices are snapshotted from the catalog on add.
- Every response carries the re-priced totals plus any notices
  (promotion detached, points adjusted) produced by the change.
- Optional `revision` in a write request must match the session state,
  otherwise the request is refused with STALE_CART (409).
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from catalog.services.catalog_snapshot import fetch_product
from catalog.services.exceptions import CatalogError, ProductNotFoundError
from loyalty.services.balance_service import fetch_points_balance
from loyalty.services.exceptions import PointsError
from pos.serializers import (
    AddCartItemInputSerializer,
    ApplyPointsInputSerializer,
    ApplyPromoInputSerializer,
    CartSerializer,
    CheckoutInputSerializer,
    CheckoutResultSerializer,
    RevisionInputSerializer,
    StorefrontStateSerializer,
)
from pos.services.exceptions import CartValidationError
from pos.services.session_state import SessionState
from promotions.services.exceptions import PromotionError, PromotionNotFound
from promotions.services.promotion_lookup import fetch_promotion_by_code
from sales.services.checkout_orchestrator import (
    CustomerInfo,
    FulfillmentInfo,
    finalize_order,
)
from sales.services.exceptions import (
    CheckoutError,
    OrderIdConflictError,
    OrderPersistenceError,
)

logger = logging.getLogger(__name__)


class StorefrontWriteThrottle(UserRateThrottle):
    scope = "storefront_write"


class CheckoutThrottle(UserRateThrottle):
    scope = "checkout"


# =====================================================
# API ERROR NORMALIZATION
# =====================================================


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def domain_error_response(exc: Exception):
    if isinstance(exc, (ProductNotFoundError, PromotionNotFound)):
        http_status = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, OrderIdConflictError):
        http_status = status.HTTP_409_CONFLICT
    elif isinstance(exc, OrderPersistenceError):
        http_status = status.HTTP_502_BAD_GATEWAY
    else:
        http_status = status.HTTP_400_BAD_REQUEST

    return error_response(
        code=getattr(exc, "code", "ERROR"),
        message=str(exc),
        http_status=http_status,
    )


def stale_response():
    return error_response(
        code="STALE_CART",
        message="Your cart changed in the meantime. Please review it and try again.",
        http_status=status.HTTP_409_CONFLICT,
    )


# =====================================================
# HELPERS
# =====================================================


def _is_stale(state: SessionState, validated: dict) -> bool:
    revision = validated.get("revision")
    return revision is not None and not state.is_current(revision)


def _state_payload(state: SessionState, pricing, balance: int) -> dict:
    return {
        "revision": state.revision,
        "cart": CartSerializer(state.cart).data,
        "pricing": pricing.to_dict(),
        "points_balance": balance,
        "notices": list(state.notices),
    }


def _respond(request, state: SessionState, pricing, balance: int, http_status=status.HTTP_200_OK):
    state.save(request)
    return Response(_state_payload(state, pricing, balance), status=http_status)


class StorefrontAPIView(APIView):
    """
    Shared base: AllowAny, JWT optional (signed-in customers see their points).
    """

    permission_classes = [AllowAny]

    def load(self, request):
        state = SessionState.load(request)
        balance = fetch_points_balance(request.user)
        return state, balance


# =====================================================
# CART VIEWS
# =====================================================


class ActiveCartView(StorefrontAPIView):
    serializer_class = StorefrontStateSerializer

    @extend_schema(
        responses={200: StorefrontStateSerializer},
        description="Current session cart with live pricing and notices.",
    )
    def get(self, request):
        state, balance = self.load(request)
        pricing = state.reprice(balance=balance)
        return _respond(request, state, pricing, balance)


class CartPricingView(StorefrontAPIView):
    @extend_schema(
        responses={200: dict},
        description="Pricing read model: subtotal, promo discount, points, final total, points estimate.",
    )
    def get(self, request):
        state, balance = self.load(request)
        pricing = state.reprice(balance=balance)
        state.save(request)
        return Response(
            {
                "revision": state.revision,
                "pricing": pricing.to_dict(),
                "points_balance": balance,
                "notices": list(state.notices),
            }
        )


class AddCartItemView(StorefrontAPIView):
    """
    Add a product to the session cart.

    Money rule:
    - Base price and modifier prices are OWNED by the catalog and snapshotted server-side.
    """

    serializer_class = StorefrontStateSerializer
    throttle_classes = [StorefrontWriteThrottle]

    @extend_schema(
        request=AddCartItemInputSerializer,
        responses={200: StorefrontStateSerializer},
        description="Add a product (with modifier selections) to the cart; same selections merge.",
        examples=[
            OpenApiExample(
                "Iced latte, oat milk, extra shot",
                value={
                    "product_id": 12,
                    "quantity": 2,
                    "selections": {"milk": ["oat"], "addons": ["extra-shot"]},
                    "note": "less ice",
                },
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        state, balance = self.load(request)
        if _is_stale(state, data):
            return stale_response()

        try:
            product = fetch_product(data["product_id"])
            pricing = state.add_item(
                product,
                data["quantity"],
                data.get("selections") or {},
                data.get("note") or "",
                balance=balance,
            )
        except (CatalogError, CartValidationError) as exc:
            return domain_error_response(exc)

        return _respond(request, state, pricing, balance)


class DecrementCartItemView(StorefrontAPIView):
    serializer_class = StorefrontStateSerializer
    throttle_classes = [StorefrontWriteThrottle]

    @extend_schema(
        request=RevisionInputSerializer,
        responses={200: StorefrontStateSerializer},
        description="Decrease a line by one; the line disappears at zero. Unknown keys are ignored.",
    )
    def post(self, request, line_key):
        serializer = RevisionInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        state, balance = self.load(request)
        if _is_stale(state, serializer.validated_data):
            return stale_response()

        pricing = state.decrement(line_key, balance=balance)
        return _respond(request, state, pricing, balance)


class RemoveCartItemView(StorefrontAPIView):
    serializer_class = StorefrontStateSerializer
    throttle_classes = [StorefrontWriteThrottle]

    @extend_schema(
        request=RevisionInputSerializer,
        responses={200: StorefrontStateSerializer},
        description="Remove a whole line from the cart.",
    )
    def post(self, request, line_key):
        serializer = RevisionInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        state, balance = self.load(request)
        if _is_stale(state, serializer.validated_data):
            return stale_response()

        pricing = state.remove_line(line_key, balance=balance)
        return _respond(request, state, pricing, balance)


class ClearCartView(StorefrontAPIView):
    serializer_class = StorefrontStateSerializer
    throttle_classes = [StorefrontWriteThrottle]

    @extend_schema(
        responses={200: StorefrontStateSerializer},
        description="Empty the cart and drop the applied promotion and points.",
    )
    def post(self, request):
        state, balance = self.load(request)
        state.clear()
        pricing = state.reprice(balance=balance)
        return _respond(request, state, pricing, balance)


# =====================================================
# PROMOTION / POINTS VIEWS
# =====================================================


class CartPromotionView(StorefrontAPIView):
    serializer_class = StorefrontStateSerializer
    throttle_classes = [StorefrontWriteThrottle]

    @extend_schema(
        request=ApplyPromoInputSerializer,
        responses={200: StorefrontStateSerializer},
        description="Apply a promo code. Invalid or ineligible codes are rejected; the cart is unchanged.",
    )
    def post(self, request):
        serializer = ApplyPromoInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        state, balance = self.load(request)
        if _is_stale(state, data):
            return stale_response()

        try:
            rule = fetch_promotion_by_code(data["code"])
            pricing = state.apply_promotion(rule, balance=balance)
        except PromotionError as exc:
            return domain_error_response(exc)

        return _respond(request, state, pricing, balance)

    @extend_schema(
        responses={200: StorefrontStateSerializer},
        description="Remove the applied promo code.",
    )
    def delete(self, request):
        state, balance = self.load(request)
        pricing = state.remove_promotion(balance=balance)
        return _respond(request, state, pricing, balance)


class CartPointsView(StorefrontAPIView):
    serializer_class = StorefrontStateSerializer
    throttle_classes = [StorefrontWriteThrottle]

    @extend_schema(
        request=ApplyPointsInputSerializer,
        responses={200: StorefrontStateSerializer},
        description="Redeem loyalty points (1 point = 1 currency unit), capped by balance and total.",
    )
    def post(self, request):
        serializer = ApplyPointsInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        state, balance = self.load(request)
        if _is_stale(state, data):
            return stale_response()

        try:
            pricing = state.apply_points(data["points"], balance=balance)
        except PointsError as exc:
            response = domain_error_response(exc)
            cap = getattr(exc, "cap", None)
            if cap is not None:
                response.data["error"]["cap"] = cap
            return response

        return _respond(request, state, pricing, balance)

    @extend_schema(
        responses={200: StorefrontStateSerializer},
        description="Stop redeeming points.",
    )
    def delete(self, request):
        state, balance = self.load(request)
        pricing = state.remove_points(balance=balance)
        return _respond(request, state, pricing, balance)


# =====================================================
# CHECKOUT
# =====================================================


class CheckoutCartView(StorefrontAPIView):
    """
    Finalize the session cart into a pending Order.

    Calls:
    - sales.services.checkout_orchestrator.finalize_order()
    """

    serializer_class = CheckoutResultSerializer
    throttle_classes = [CheckoutThrottle]

    @extend_schema(
        request=CheckoutInputSerializer,
        responses={201: CheckoutResultSerializer},
        description="Place the order. Promotion and points are re-validated against the live cart.",
        examples=[
            OpenApiExample(
                "Delivery",
                value={
                    "customer_name": "Sari",
                    "customer_phone": "081234567890",
                    "fulfillment_type": "delivery",
                    "address": "Jl. Melati 5",
                    "maps_link": "",
                    "notes": "Ring the bell",
                },
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = CheckoutInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        state = SessionState.load(request)
        if _is_stale(state, data):
            return stale_response()

        token = state.issue_token()

        try:
            result = finalize_order(
                cart=state.cart,
                customer=CustomerInfo(
                    name=data["customer_name"],
                    phone=data["customer_phone"],
                ),
                fulfillment=FulfillmentInfo(
                    type=data["fulfillment_type"],
                    address=data.get("address") or "",
                    maps_link=data.get("maps_link") or "",
                    notes=data.get("notes") or "",
                ),
                promo_code=state.promotion.code if state.promotion else None,
                points_to_use=state.points_requested,
                user=request.user,
            )
        except PromotionError as exc:
            state.detach_promotion(exc, balance=fetch_points_balance(request.user))
            state.save(request)
            return domain_error_response(exc)
        except CheckoutError as exc:
            return domain_error_response(exc)

        # Another request may have changed the cart while the order was written.
        stored = SessionState.load_stored(request)
        if stored.reset_after_checkout(token):
            stored.save(request)
        else:
            logger.info("Cart changed during checkout; keeping it", extra={"order_id": result.order_id})

        return Response(result.to_dict(), status=status.HTTP_201_CREATED)
