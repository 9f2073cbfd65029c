# sales/api/viewsets/order.py

"""
======================================================
PATH: sales/api/viewsets/order.py
======================================================
ORDER VIEWSET (ADMIN)

Purpose:
- Order queue for café staff: list + retrieve orders, filter by status.
- Status transitions (assign / complete / cancel) through the lifecycle service.

Security:
- IsAdminUser (Django staff flag)
======================================================
"""

from __future__ import annotations

from django_filters import rest_framework as filters
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from pos.views.api import error_response
from sales.models import Order
from sales.serializers import OrderSerializer, OrderStatusInputSerializer
from sales.services.exceptions import OrderLifecycleError
from sales.services.order_lifecycle import transition_order


class OrderFilter(filters.FilterSet):
    created_from = filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    created_to = filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Order
        fields = ["status", "fulfillment_type", "user"]


class OrderViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = OrderSerializer
    permission_classes = [IsAdminUser]
    filterset_class = OrderFilter

    def get_queryset(self):
        return (
            Order.objects.all()
            .select_related("user")
            .prefetch_related("lines")
            .order_by("-created_at")
        )

    # ======================================================
    # STATUS TRANSITION
    # POST /api/sales/orders/:id/status/
    # ======================================================

    @extend_schema(
        request=OrderStatusInputSerializer,
        responses={200: OrderSerializer},
        description=(
            "Move an order through its lifecycle. "
            "Completing posts earned points; cancelling refunds redeemed points."
        ),
    )
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        serializer = OrderStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self.get_object()

        try:
            order = transition_order(
                order=order,
                target_status=serializer.validated_data["status"],
            )
        except OrderLifecycleError as exc:
            return error_response(
                code=exc.code,
                message=str(exc),
                http_status=status.HTTP_409_CONFLICT,
            )

        order = self.get_queryset().get(pk=order.pk)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)
