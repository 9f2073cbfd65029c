# sales/serializers/order.py

from rest_framework import serializers

from sales.models import Order, OrderLine


class OrderLineSerializer(serializers.ModelSerializer):
    """
    Order line (read-only snapshot).
    """

    class Meta:
        model = OrderLine
        fields = [
            "id",
            "product",
            "product_ref",
            "product_name",
            "base_price",
            "unit_price",
            "quantity",
            "line_total",
            "selections",
            "modifier_labels",
            "note",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    lines = OrderLineSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user",
            "customer_name",
            "customer_phone",
            "fulfillment_type",
            "address",
            "maps_link",
            "order_notes",
            "subtotal",
            "promo_code",
            "promo_discount",
            "points_used",
            "discount_total",
            "final_total",
            "points_earned",
            "status",
            "lines",
            "created_at",
            "updated_at",
            "completed_at",
            "cancelled_at",
        ]
        read_only_fields = fields


class OrderStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
