from .order import OrderLineSerializer, OrderSerializer, OrderStatusInputSerializer

__all__ = ["OrderLineSerializer", "OrderSerializer", "OrderStatusInputSerializer"]
