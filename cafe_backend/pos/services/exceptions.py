# pos/services/exceptions.py

"""
CART SERVICE ERRORS

Raised by the cart ledger when a mutation is rejected.
A rejected mutation leaves the cart exactly as it was.
"""


class CartValidationError(Exception):
    """Base exception for rejected cart mutations."""

    code = "CART_VALIDATION_ERROR"


class InvalidQuantityError(CartValidationError):
    code = "INVALID_QUANTITY"


class ProductUnavailableError(CartValidationError):
    code = "PRODUCT_UNAVAILABLE"
