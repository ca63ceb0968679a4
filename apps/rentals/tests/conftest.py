from dataclasses import dataclass
from datetime import date

import pytest

from shared.application.message_bus import MessageBus

from apps.rentals.application.availability import AvailabilityEngine
from apps.rentals.application.coordinator import RentalCoordinator
from apps.rentals.application.lease_calculator import LeaseCalculator
from apps.rentals.application.lease_expiry import LeaseExpiryService
from apps.rentals.application.rental_requests import RentalRequestService

from .fakes import (
    FakeClock,
    InMemoryBlockedPeriodStore,
    InMemoryBookingStore,
    InMemoryDatabase,
    InMemoryPropertyLookup,
    InMemoryRentalRequestStore,
    InMemoryTenantStore,
    InMemoryUnitOfWork,
)

TODAY = date(2025, 2, 15)


@dataclass
class World:
    db: InMemoryDatabase
    clock: FakeClock
    bus: MessageBus
    properties: InMemoryPropertyLookup
    bookings: InMemoryBookingStore
    tenants: InMemoryTenantStore
    rental_requests: InMemoryRentalRequestStore
    blocked_periods: InMemoryBlockedPeriodStore
    lease_calculator: LeaseCalculator
    availability: AvailabilityEngine
    service: RentalRequestService
    coordinator: RentalCoordinator
    expiry: LeaseExpiryService

    def uow(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self.db, self.bus)


def build_world(today: date = TODAY) -> World:
    db = InMemoryDatabase()
    clock = FakeClock(today)
    bus = MessageBus()
    properties = InMemoryPropertyLookup(db)
    bookings = InMemoryBookingStore(db)
    tenants = InMemoryTenantStore(db)
    rental_requests = InMemoryRentalRequestStore(db)
    blocked_periods = InMemoryBlockedPeriodStore(db)

    def uow_factory():
        return InMemoryUnitOfWork(db, bus)

    lease_calculator = LeaseCalculator(tenants, rental_requests, today=clock.today)
    availability = AvailabilityEngine(
        properties=properties,
        bookings=bookings,
        rental_requests=rental_requests,
        blocked_periods=blocked_periods,
        lease_calculator=lease_calculator,
    )
    service = RentalRequestService(
        rental_requests=rental_requests,
        tenants=tenants,
        availability=availability,
        lease_calculator=lease_calculator,
        uow_factory=uow_factory,
        clock=clock.now,
    )
    coordinator = RentalCoordinator(
        properties=properties,
        bookings=bookings,
        availability=availability,
        lease_calculator=lease_calculator,
        rental_requests=service,
        uow_factory=uow_factory,
    )
    expiry = LeaseExpiryService(
        tenants=tenants,
        lease_calculator=lease_calculator,
        uow_factory=uow_factory,
        bus=bus,
    )
    return World(
        db=db, clock=clock, bus=bus, properties=properties, bookings=bookings,
        tenants=tenants, rental_requests=rental_requests, blocked_periods=blocked_periods,
        lease_calculator=lease_calculator, availability=availability, service=service,
        coordinator=coordinator, expiry=expiry,
    )


@pytest.fixture
def world() -> World:
    return build_world()


@pytest.fixture
def boom():
    """Stand-in for a store method whose backend is down."""

    def _boom(*args, **kwargs):
        raise RuntimeError("store unavailable")

    return _boom
