# catalog/urls.py

"""
CATALOG URLS

Purpose:
- Register menu routes under /api/catalog/
    /api/catalog/products/         (AllowAny list)
    /api/catalog/products/<id>/    (AllowAny retrieve)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from catalog.views import ProductViewSet

router = DefaultRouter()

router.register(r"products", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
