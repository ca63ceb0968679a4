"""URL routing for the rentals domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AvailabilityView, ExpiredLeasesView, ExpiringLeasesView, RentalRequestViewSet

router = DefaultRouter()
router.register(r"requests", RentalRequestViewSet, basename="rental-request")

urlpatterns = [
    path("availability/", AvailabilityView.as_view(), name="rental-availability"),
    path("leases/expiring/", ExpiringLeasesView.as_view(), name="rental-leases-expiring"),
    path("leases/expired/", ExpiredLeasesView.as_view(), name="rental-leases-expired"),
    path("", include(router.urls)),
]
