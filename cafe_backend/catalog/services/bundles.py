# catalog/services/bundles.py

"""
BUNDLE PRICING (READ-ONLY)

A bundle is sold at its own unit_price. Its "list price" is what the
children would cost separately; the storefront shows it struck out.
"""

from __future__ import annotations

from catalog.models import Product


def bundle_list_price(product: Product) -> int:
    if not product.is_bundle:
        return int(product.unit_price or 0)

    total = 0
    for item in product.bundle_items.select_related("child").all():
        total += int(item.child.unit_price or 0) * int(item.quantity or 0)
    return total


def bundle_savings(product: Product) -> int:
    if not product.is_bundle:
        return 0
    return max(0, bundle_list_price(product) - int(product.unit_price or 0))
