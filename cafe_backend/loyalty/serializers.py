# loyalty/serializers.py

from rest_framework import serializers

from loyalty.models import PointsLedgerEntry


class PointsLedgerEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = PointsLedgerEntry
        fields = ["id", "order", "kind", "points_delta", "note", "created_at"]
        read_only_fields = fields


class OrderPointsSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    earned = serializers.IntegerField()
    used = serializers.IntegerField()


class PointsSummarySerializer(serializers.Serializer):
    """Read-only shape of loyalty.services.points_insights.PointsInsights."""

    balance = serializers.IntegerField()
    lifetime_earned = serializers.IntegerField()
    lifetime_used = serializers.IntegerField()
    tier = serializers.CharField()
    next_tier = serializers.CharField(allow_null=True)
    points_to_next_tier = serializers.IntegerField()
    pending_points = serializers.IntegerField()
    expiring_soon = serializers.IntegerField()
    orders = OrderPointsSerializer(many=True)
