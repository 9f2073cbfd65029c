# catalog/services/exceptions.py

"""
CATALOG SERVICE ERRORS

Centralized domain errors for catalog lookups and modifier rules.
Each error carries a stable `code` for API responses.
"""


class CatalogError(Exception):
    """Base exception for all catalog failures."""

    code = "CATALOG_ERROR"


class ProductNotFoundError(CatalogError):
    """Raised when a product id does not exist (or is hidden from the storefront)."""

    code = "PRODUCT_NOT_FOUND"


class ModifierSelectionError(CatalogError):
    """Raised when modifier selections break a group's required / single-choice rule."""

    code = "INVALID_MODIFIER_SELECTION"
