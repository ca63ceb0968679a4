"""
Wiring of the rental core to the Django stores

Views, tasks and event handlers build their collaborators here. Nothing
is cached between calls: each build_* returns a fresh object graph bound
to the current settings and clock.
"""

from __future__ import annotations

from django.utils import timezone  # type: ignore

from apps.bookings.stores import DjangoBookingStore
from apps.properties.stores import DjangoBlockedPeriodStore, DjangoPropertyLookup
from apps.rentals import conf
from apps.rentals.application.availability import AvailabilityEngine
from apps.rentals.application.coordinator import RentalCoordinator
from apps.rentals.application.lease_calculator import LeaseCalculator
from apps.rentals.application.rental_requests import RentalRequestService

from .stores import DjangoRentalRequestStore, DjangoRentalsUnitOfWork, DjangoTenantStore


def build_lease_calculator() -> LeaseCalculator:
    return LeaseCalculator(
        DjangoTenantStore(),
        DjangoRentalRequestStore(),
        today=timezone.localdate,
        min_lease_days=conf.get("MIN_LEASE_DAYS"),
        expiring_soon_days=conf.get("EXPIRING_SOON_DAYS"),
    )


def build_availability_engine(lease_calculator: LeaseCalculator | None = None) -> AvailabilityEngine:
    return AvailabilityEngine(
        properties=DjangoPropertyLookup(),
        bookings=DjangoBookingStore(),
        rental_requests=DjangoRentalRequestStore(),
        blocked_periods=DjangoBlockedPeriodStore(),
        lease_calculator=lease_calculator or build_lease_calculator(),
    )


def build_rental_request_service() -> RentalRequestService:
    lease_calculator = build_lease_calculator()
    return RentalRequestService(
        rental_requests=DjangoRentalRequestStore(),
        tenants=DjangoTenantStore(),
        availability=build_availability_engine(lease_calculator),
        lease_calculator=lease_calculator,
        uow_factory=DjangoRentalsUnitOfWork,
        clock=timezone.now,
        min_lease_months=conf.get("MIN_LEASE_MONTHS"),
    )


def build_coordinator() -> RentalCoordinator:
    service = build_rental_request_service()
    return RentalCoordinator(
        properties=DjangoPropertyLookup(),
        bookings=DjangoBookingStore(),
        availability=service.availability,
        lease_calculator=service.lease_calculator,
        rental_requests=service,
        uow_factory=DjangoRentalsUnitOfWork,
    )
