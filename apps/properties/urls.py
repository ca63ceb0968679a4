"""URL routing for the properties domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import BlockedPeriodViewSet, PropertyViewSet

router = DefaultRouter()
router.register(r"", PropertyViewSet, basename="property")

blocked_period_list = BlockedPeriodViewSet.as_view({"get": "list", "post": "create"})
blocked_period_detail = BlockedPeriodViewSet.as_view({"delete": "destroy"})

urlpatterns = [
    path(
        "<int:property_id>/blocked-periods/",
        blocked_period_list,
        name="property-blocked-period-list",
    ),
    path(
        "<int:property_id>/blocked-periods/<int:pk>/",
        blocked_period_detail,
        name="property-blocked-period-detail",
    ),
    path("", include(router.urls)),
]
