# sales/admin.py

from django.contrib import admin

from sales.models import Order, OrderLine


# ======================================================
# ORDER ADMIN
# ======================================================


class OrderLineInline(admin.TabularInline):
    model = OrderLine
    extra = 0
    can_delete = False
    readonly_fields = (
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
    )


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "customer_name",
        "customer_phone",
        "fulfillment_type",
        "final_total",
        "promo_code",
        "points_used",
        "status",
        "created_at",
    )
    readonly_fields = (
        "id",
        "user",
        "subtotal",
        "promo_discount",
        "points_used",
        "discount_total",
        "final_total",
        "promo_code",
        "points_earned",
        "status",
        "created_at",
        "updated_at",
        "completed_at",
        "cancelled_at",
    )
    search_fields = ("id", "customer_name", "customer_phone")
    list_filter = ("status", "fulfillment_type", "created_at")
    inlines = [OrderLineInline]
