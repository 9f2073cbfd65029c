# sales/api/urls.py

"""
SALES API URLS

Admin order queue:
    GET  /api/sales/orders/
    GET  /api/sales/orders/<id>/
    POST /api/sales/orders/<id>/status/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from sales.api.viewsets.order import OrderViewSet

router = DefaultRouter()
router.register(r"orders", OrderViewSet, basename="orders")

urlpatterns = [
    path("", include(router.urls)),
]
