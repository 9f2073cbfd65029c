# loyalty/admin.py

from django.contrib import admin

from loyalty.models import LoyaltyAccount, PointsLedgerEntry


@admin.register(LoyaltyAccount)
class LoyaltyAccountAdmin(admin.ModelAdmin):
    list_display = ("user", "points_balance", "updated_at")
    search_fields = ("user__username", "user__email")
    readonly_fields = ("points_balance", "updated_at")


@admin.register(PointsLedgerEntry)
class PointsLedgerEntryAdmin(admin.ModelAdmin):
    """
    Ledger rows are append-only: admins may add manual adjustments,
    never edit or delete existing entries.
    """

    list_display = ("created_at", "user", "kind", "points_delta", "order", "note")
    list_filter = ("kind", "created_at")
    search_fields = ("user__username", "user__email", "note")
    raw_id_fields = ("user", "order")

    def has_change_permission(self, request, obj=None):
        return obj is None

    def has_delete_permission(self, request, obj=None):
        return False
