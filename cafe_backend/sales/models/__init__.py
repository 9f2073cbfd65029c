# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS
"""

from .order import Order
from .order_line import OrderLine

__all__ = [
    "Order",
    "OrderLine",
]
