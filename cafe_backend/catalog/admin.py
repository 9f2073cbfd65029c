# catalog/admin.py
"""
=====================================================
PATH: catalog/admin.py
=====================================================

Admin rules:
- Products are archived (is_available=False) rather than deleted;
  order lines keep their own name + price snapshot either way.
- Modifier groups are edited inline on the product; options inline on the group.
- Bundle composition is edited inline on the bundle product.
"""

from __future__ import annotations

from django.contrib import admin

from catalog.models import BundleItem, ModifierGroup, ModifierOption, Product


class ModifierGroupInline(admin.TabularInline):
    model = ModifierGroup
    extra = 0
    fields = ("code", "name", "is_required", "selection_type", "position")
    show_change_link = True


class BundleItemInline(admin.TabularInline):
    model = BundleItem
    fk_name = "parent"
    extra = 0
    autocomplete_fields = ("child",)


class ModifierOptionInline(admin.TabularInline):
    model = ModifierOption
    extra = 0
    fields = ("code", "name", "price", "position")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "category",
        "unit_price",
        "is_available",
        "is_bundle",
        "is_recommended",
        "updated_at",
    )
    list_filter = ("category", "is_available", "is_bundle", "is_recommended")
    search_fields = ("name",)
    inlines = [ModifierGroupInline, BundleItemInline]
    actions = ["archive_products"]

    @admin.action(description="Archive selected products (hide from menu)")
    def archive_products(self, request, queryset):
        queryset.update(is_available=False)


@admin.register(ModifierGroup)
class ModifierGroupAdmin(admin.ModelAdmin):
    list_display = ("product", "name", "code", "is_required", "selection_type", "position")
    list_filter = ("selection_type", "is_required")
    search_fields = ("name", "product__name")
    inlines = [ModifierOptionInline]
