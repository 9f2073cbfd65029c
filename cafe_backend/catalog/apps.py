# catalog/apps.py

"""
CATALOG APP CONFIG

Menu catalog module:
- Products (single items + bundles)
- Modifier groups / options (add-ons, sugar level, milk choice...)
- Read-only to the cart; edited through Django admin only
"""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
    verbose_name = "Menu Catalog"
