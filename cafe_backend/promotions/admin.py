# promotions/admin.py

from django.contrib import admin

from promotions.models import Promotion, PromotionTarget


# ======================================================
# PROMOTION ADMIN
# ======================================================


class PromotionTargetInline(admin.StackedInline):
    model = PromotionTarget
    extra = 0
    max_num = 1
    autocomplete_fields = ("target_product",)


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "discount_type",
        "value",
        "scope",
        "min_order_value",
        "min_quantity",
        "starts_at",
        "ends_at",
        "is_active",
    )
    list_filter = ("is_active", "discount_type", "scope")
    search_fields = ("code", "description")
    inlines = [PromotionTargetInline]
