# loyalty/views.py

"""
LOYALTY API VIEWS

- GET /api/loyalty/summary/  balance, tier, pending + expiring points, per-order breakdown
- GET /api/loyalty/ledger/   raw ledger rows (paginated)
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import generics
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from loyalty.serializers import PointsLedgerEntrySerializer, PointsSummarySerializer
from loyalty.services.balance_service import fetch_points_ledger
from loyalty.services.points_insights import build_insights


class PointsSummaryView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PointsSummarySerializer

    @extend_schema(
        responses={200: PointsSummarySerializer},
        description="Loyalty summary for the authenticated customer.",
    )
    def get(self, request):
        insights = build_insights(request.user)
        return Response(PointsSummarySerializer(insights).data)


class PointsLedgerView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PointsLedgerEntrySerializer

    def get_queryset(self):
        return fetch_points_ledger(self.request.user).order_by("-created_at", "-id")
