# pos/serializers/cart.py

"""
CART SERIALIZERS (STOREFRONT)

Purpose:
- Return the session cart in a frontend-friendly shape.
- Keep money + totals server-derived (single source of truth).
- Validate storefront input (add item / promo / points / checkout).
"""

from rest_framework import serializers

from sales.models import Order


# =====================================================
# OUTPUT
# =====================================================


class ModifierLabelSerializer(serializers.Serializer):
    group = serializers.CharField()
    options = serializers.CharField()
    extra = serializers.IntegerField()


class CartLineSerializer(serializers.Serializer):
    line_key = serializers.CharField()
    product_id = serializers.IntegerField()
    name = serializers.CharField()
    category = serializers.CharField()
    base_price = serializers.IntegerField()
    unit_price = serializers.IntegerField()
    quantity = serializers.IntegerField()
    line_total = serializers.IntegerField()
    selections = serializers.DictField(child=serializers.ListField(child=serializers.CharField()))
    modifier_labels = ModifierLabelSerializer(many=True)
    note = serializers.CharField(allow_blank=True)


class CartSerializer(serializers.Serializer):
    """
    Guarantees:
    - lines are read-only
    - subtotal / item_count computed server-side (never trusted from client)
    """

    lines = CartLineSerializer(many=True)
    subtotal = serializers.IntegerField()
    item_count = serializers.IntegerField()


class NoticeSerializer(serializers.Serializer):
    code = serializers.CharField()
    message = serializers.CharField()


class PricingSerializer(serializers.Serializer):
    subtotal = serializers.IntegerField()
    promo_code = serializers.CharField(allow_null=True)
    promo_discount = serializers.IntegerField()
    points_used = serializers.IntegerField()
    final_total = serializers.IntegerField()
    points_earned_estimate = serializers.IntegerField()


class StorefrontStateSerializer(serializers.Serializer):
    revision = serializers.IntegerField()
    cart = CartSerializer()
    pricing = PricingSerializer()
    points_balance = serializers.IntegerField()
    notices = NoticeSerializer(many=True)


# =====================================================
# INPUT
# =====================================================


class AddCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    selections = serializers.DictField(
        child=serializers.ListField(child=serializers.CharField(), allow_empty=True),
        required=False,
        default=dict,
    )
    note = serializers.CharField(required=False, allow_blank=True, default="", max_length=500)
    revision = serializers.IntegerField(required=False)


class RevisionInputSerializer(serializers.Serializer):
    revision = serializers.IntegerField(required=False)


class ApplyPromoInputSerializer(RevisionInputSerializer):
    code = serializers.CharField(max_length=64)


class ApplyPointsInputSerializer(RevisionInputSerializer):
    points = serializers.IntegerField()


class CheckoutInputSerializer(RevisionInputSerializer):
    customer_name = serializers.CharField(max_length=120, allow_blank=True)
    customer_phone = serializers.CharField(max_length=40, allow_blank=True)
    fulfillment_type = serializers.ChoiceField(
        choices=Order.FULFILLMENT_CHOICES,
        default=Order.FULFILLMENT_TAKEAWAY,
    )
    address = serializers.CharField(required=False, allow_blank=True, default="")
    maps_link = serializers.CharField(required=False, allow_blank=True, default="", max_length=500)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class CheckoutResultSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    subtotal = serializers.IntegerField()
    promo_code = serializers.CharField(allow_null=True)
    promo_discount = serializers.IntegerField()
    points_used = serializers.IntegerField()
    final_total = serializers.IntegerField()
    points_earned = serializers.IntegerField()
    points_adjusted = serializers.BooleanField()
    whatsapp_url = serializers.CharField(allow_null=True)
