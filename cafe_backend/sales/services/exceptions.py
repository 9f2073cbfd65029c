# sales/services/exceptions.py

"""
CHECKOUT / ORDER SERVICE ERRORS

Nothing is persisted when any of these is raised from finalize_order().
"""


class CheckoutError(Exception):
    """Base checkout exception."""

    code = "CHECKOUT_FAILED"


class EmptyCartError(CheckoutError):
    code = "EMPTY_CART"


class MissingCustomerInfoError(CheckoutError):
    code = "MISSING_CUSTOMER_INFO"


class MissingDeliveryLocationError(CheckoutError):
    code = "MISSING_DELIVERY_LOCATION"


class OrderIdConflictError(CheckoutError):
    """Generated order id already exists (retried once before surfacing)."""

    code = "ORDER_ID_CONFLICT"


class OrderPersistenceError(CheckoutError):
    """Writing the order failed; the whole transaction was rolled back."""

    code = "ORDER_PERSISTENCE_FAILED"


class OrderLifecycleError(Exception):
    code = "ORDER_LIFECYCLE_ERROR"


class InvalidOrderTransitionError(OrderLifecycleError):
    code = "INVALID_ORDER_TRANSITION"
