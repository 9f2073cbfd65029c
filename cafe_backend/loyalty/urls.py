from django.urls import path

from loyalty.views import PointsLedgerView, PointsSummaryView

app_name = "loyalty"

urlpatterns = [
    path("summary/", PointsSummaryView.as_view(), name="summary"),
    path("ledger/", PointsLedgerView.as_view(), name="ledger"),
]
