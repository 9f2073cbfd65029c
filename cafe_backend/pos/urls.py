"""
PATH: pos/urls.py

STOREFRONT CART URLS

Purpose:
- Session cart lifecycle
- Cart line operations (keyed by line_key)
- Promo code / loyalty points
- Pricing read model
- Checkout (finalizes to Order via checkout orchestrator)
"""

from django.urls import path

from pos.views.api import (
    ActiveCartView,
    AddCartItemView,
    CartPointsView,
    CartPricingView,
    CartPromotionView,
    CheckoutCartView,
    ClearCartView,
    DecrementCartItemView,
    RemoveCartItemView,
)

app_name = "pos"

urlpatterns = [
    path("cart/", ActiveCartView.as_view(), name="active-cart"),
    path("cart/clear/", ClearCartView.as_view(), name="clear-cart"),
    path("cart/pricing/", CartPricingView.as_view(), name="cart-pricing"),

    path("cart/items/add/", AddCartItemView.as_view(), name="add-cart-item"),
    path("cart/items/<str:line_key>/decrement/", DecrementCartItemView.as_view(), name="decrement-cart-item"),
    path("cart/items/<str:line_key>/remove/", RemoveCartItemView.as_view(), name="remove-cart-item"),

    path("cart/promo/", CartPromotionView.as_view(), name="cart-promo"),
    path("cart/points/", CartPointsView.as_view(), name="cart-points"),

    path("checkout/", CheckoutCartView.as_view(), name="checkout"),
]
