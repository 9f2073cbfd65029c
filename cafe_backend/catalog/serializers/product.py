# catalog/serializers/product.py

"""
PRODUCT SERIALIZER (STOREFRONT)

Purpose:
- Read-only product payload for the menu page.
- Modifier groups are nested so the product modal can render without extra calls.
- Bundles expose list_price + savings (struck-out price on the product card).
"""

from rest_framework import serializers

from catalog.models import BundleItem, ModifierGroup, ModifierOption, Product
from catalog.services.bundles import bundle_list_price, bundle_savings


class ModifierOptionSerializer(serializers.ModelSerializer):
    id = serializers.CharField(source="code", read_only=True)

    class Meta:
        model = ModifierOption
        fields = ["id", "name", "price"]
        read_only_fields = fields


class ModifierGroupSerializer(serializers.ModelSerializer):
    id = serializers.CharField(source="code", read_only=True)
    options = ModifierOptionSerializer(many=True, read_only=True)

    class Meta:
        model = ModifierGroup
        fields = ["id", "name", "is_required", "selection_type", "options"]
        read_only_fields = fields


class BundleItemSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(source="child.id", read_only=True)
    product_name = serializers.CharField(source="child.name", read_only=True)
    unit_price = serializers.IntegerField(source="child.unit_price", read_only=True)

    class Meta:
        model = BundleItem
        fields = ["product_id", "product_name", "unit_price", "quantity"]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    modifier_groups = ModifierGroupSerializer(many=True, read_only=True)
    bundle_items = BundleItemSerializer(many=True, read_only=True)

    list_price = serializers.SerializerMethodField(read_only=True)
    savings = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "unit_price",
            "category",
            "image_url",
            "is_available",
            "is_bundle",
            "is_recommended",
            "modifier_groups",
            "bundle_items",
            "list_price",
            "savings",
        ]
        read_only_fields = fields

    def get_list_price(self, obj) -> int:
        return bundle_list_price(obj)

    def get_savings(self, obj) -> int:
        return bundle_savings(obj)
