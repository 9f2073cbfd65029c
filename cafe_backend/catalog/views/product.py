# catalog/views/product.py

"""
PRODUCT VIEWSET (STOREFRONT, READ-ONLY)

Purpose:
- Public menu browsing: list + retrieve
- Filters: ?category=<label> (or "Bundles"), ?q=<search>

Rules:
- AllowAny
- Archived products (is_available=False) are hidden
- Product editing happens in Django admin only
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.permissions import AllowAny

from catalog.serializers import ProductSerializer
from catalog.services.catalog_snapshot import list_products


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_queryset(self):
        params = self.request.query_params
        return list_products(
            category=(params.get("category") or "").strip() or None,
            search=(params.get("q") or "").strip() or None,
        ).prefetch_related("bundle_items__child")

    @extend_schema(
        parameters=[
            OpenApiParameter(name="category", type=str, required=False, description="Menu section, or 'Bundles'"),
            OpenApiParameter(name="q", type=str, required=False, description="Name search"),
        ],
        description="Public menu listing (available products only).",
        tags=["Catalog"],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)
