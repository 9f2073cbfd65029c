from .cart import (
    AddCartItemInputSerializer,
    ApplyPointsInputSerializer,
    ApplyPromoInputSerializer,
    CartSerializer,
    CheckoutInputSerializer,
    CheckoutResultSerializer,
    RevisionInputSerializer,
    StorefrontStateSerializer,
)

__all__ = [
    "AddCartItemInputSerializer",
    "ApplyPointsInputSerializer",
    "ApplyPromoInputSerializer",
    "CartSerializer",
    "CheckoutInputSerializer",
    "CheckoutResultSerializer",
    "RevisionInputSerializer",
    "StorefrontStateSerializer",
]
