"""In-memory stores and unit of work for exercising the rental core without a database."""

from __future__ import annotations

import copy
import itertools
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, List, Optional

from shared.application.message_bus import MessageBus
from shared.domain.value_objects import DateRange, overlaps

from apps.bookings.domain.entities import Booking, BookingStatus
from apps.rentals.application.unit_of_work import RentalsUnitOfWork
from apps.rentals.domain.entities import (
    BlockedPeriod,
    RentalMode,
    RentalRequest,
    RentalRequestStatus,
    Tenant,
    TenantStatus,
)
from apps.rentals.domain.stores import (
    BlockedPeriodStore,
    BookingStore,
    PropertyLookup,
    RentalRequestStore,
    TenantStore,
)


class FakeClock:
    """Settable clock; today() and now() always agree."""

    def __init__(self, today: date):
        self.current = today

    def today(self) -> date:
        return self.current

    def now(self) -> datetime:
        return datetime.combine(self.current, time(12, 0))

    def set(self, day: date) -> None:
        self.current = day


@dataclass
class PropertyRecord:
    id: int
    rental_mode: Optional[RentalMode]
    owner_id: int


@dataclass
class InMemoryDatabase:
    properties: Dict[int, PropertyRecord] = field(default_factory=dict)
    bookings: Dict[int, Booking] = field(default_factory=dict)
    tenants: Dict[int, Tenant] = field(default_factory=dict)
    rental_requests: Dict[int, RentalRequest] = field(default_factory=dict)
    blocked_periods: Dict[int, BlockedPeriod] = field(default_factory=dict)
    published: List = field(default_factory=list)

    def __post_init__(self):
        self._ids = itertools.count(1)
        self.guard = threading.Lock()
        self._property_locks: Dict[int, threading.Lock] = defaultdict(threading.Lock)

    def next_id(self) -> int:
        with self.guard:
            return next(self._ids)

    def lock_for(self, property_id: int) -> threading.Lock:
        with self.guard:
            return self._property_locks[property_id]

    def snapshot(self) -> dict:
        with self.guard:
            return copy.deepcopy({
                'bookings': self.bookings,
                'tenants': self.tenants,
                'rental_requests': self.rental_requests,
                'blocked_periods': self.blocked_periods,
            })

    def restore(self, snapshot: dict) -> None:
        with self.guard:
            for name, rows in snapshot.items():
                setattr(self, name, rows)

    # ------------------------------------------------------------------
    # Seeding helpers

    def add_property(self, mode: Optional[RentalMode], owner_id: int = 100) -> int:
        property_id = self.next_id()
        self.properties[property_id] = PropertyRecord(property_id, mode, owner_id)
        return property_id

    def add_booking(self, property_id: int, start: date, end: Optional[date] = None,
                    status: BookingStatus = BookingStatus.UPCOMING, user_id: int = 200) -> Booking:
        booking = Booking(
            id=self.next_id(), property_id=property_id, user_id=user_id,
            start=start, end=end, status=status,
        )
        self.bookings[booking.id] = booking
        return booking

    def add_request(self, property_id: int, user_id: int, start: date, end: date, months: int,
                    status: RentalRequestStatus = RentalRequestStatus.PENDING,
                    request_date: Optional[datetime] = None) -> RentalRequest:
        request = RentalRequest(
            id=self.next_id(), property_id=property_id, user_id=user_id,
            proposed_start=start, proposed_end=end, lease_duration_months=months,
            status=status, request_date=request_date or datetime(2020, 1, 1),
        )
        self.rental_requests[request.id] = request
        return request

    def add_tenant(self, property_id: int, user_id: int, lease_start: date,
                   status: TenantStatus = TenantStatus.ACTIVE) -> Tenant:
        tenant = Tenant(
            id=self.next_id(), property_id=property_id, user_id=user_id,
            lease_start=lease_start, status=status,
        )
        self.tenants[tenant.id] = tenant
        return tenant

    def add_lease(self, property_id: int, user_id: int, lease_start: date, months: int,
                  proposed_end: Optional[date] = None) -> Tenant:
        """Approved request plus the tenant it materialized"""
        from apps.rentals.application.lease_calculator import add_months

        end = proposed_end or add_months(lease_start, months)
        self.add_request(property_id, user_id, lease_start, end, months, status=RentalRequestStatus.APPROVED)
        return self.add_tenant(property_id, user_id, lease_start)

    def add_block(self, property_id: int, start: date, end: date, reason: str = '') -> BlockedPeriod:
        period = BlockedPeriod(id=self.next_id(), property_id=property_id, start=start, end=end, reason=reason)
        self.blocked_periods[period.id] = period
        return period


def _copy(entity):
    return copy.deepcopy(entity)


class InMemoryPropertyLookup(PropertyLookup):

    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def get_rental_mode(self, property_id):
        record = self.db.properties.get(property_id)
        return record.rental_mode if record else None

    def get_owner_id(self, property_id):
        record = self.db.properties.get(property_id)
        return record.owner_id if record else None


class InMemoryBookingStore(BookingStore):

    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def find_overlapping(self, property_id, dates, exclude_cancelled=True):
        return [
            _copy(b) for b in list(self.db.bookings.values())
            if b.property_id == property_id
            and overlaps(b.occupied_range, dates)
            and not (exclude_cancelled and b.status == BookingStatus.CANCELLED)
        ]

    def get(self, booking_id):
        booking = self.db.bookings.get(booking_id)
        return _copy(booking) if booking else None

    def create(self, booking):
        booking.id = self.db.next_id()
        with self.db.guard:
            self.db.bookings[booking.id] = _copy(booking)
        return booking

    def update_status(self, booking, reason=''):
        with self.db.guard:
            self.db.bookings[booking.id].status = booking.status


class InMemoryTenantStore(TenantStore):

    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def get(self, tenant_id):
        tenant = self.db.tenants.get(tenant_id)
        return _copy(tenant) if tenant else None

    def find_active(self):
        return [_copy(t) for t in list(self.db.tenants.values()) if t.is_active]

    def find_active_by_property(self, property_id):
        return [t for t in self.find_active() if t.property_id == property_id]

    def find_active_by_user_and_property(self, user_id, property_id):
        for tenant in self.find_active():
            if tenant.user_id == user_id and tenant.property_id == property_id:
                return tenant
        return None

    def create(self, tenant):
        tenant.id = self.db.next_id()
        with self.db.guard:
            self.db.tenants[tenant.id] = _copy(tenant)
        return tenant

    def update_status(self, tenant_id, status):
        with self.db.guard:
            self.db.tenants[tenant_id].status = status


class InMemoryRentalRequestStore(RentalRequestStore):

    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def _all(self) -> List[RentalRequest]:
        return [_copy(r) for r in list(self.db.rental_requests.values())]

    def get(self, request_id):
        request = self.db.rental_requests.get(request_id)
        return _copy(request) if request else None

    def _overlapping(self, property_id, dates: DateRange, status):
        return [
            r for r in self._all()
            if r.property_id == property_id and r.status == status and overlaps(r.proposed_range, dates)
        ]

    def find_approved_overlapping(self, property_id, dates):
        return self._overlapping(property_id, dates, RentalRequestStatus.APPROVED)

    def find_pending_overlapping(self, property_id, dates):
        return self._overlapping(property_id, dates, RentalRequestStatus.PENDING)

    def find_latest_approved(self, user_id, property_id):
        approved = [
            r for r in self._all()
            if r.user_id == user_id and r.property_id == property_id and r.status == RentalRequestStatus.APPROVED
        ]
        if not approved:
            return None
        return max(approved, key=lambda r: (r.request_date, r.id))

    def find_by_user(self, user_id):
        return [r for r in self._all() if r.user_id == user_id]

    def find_by_property(self, property_id):
        return [r for r in self._all() if r.property_id == property_id]

    def find_pending_for_owner(self, owner_id):
        owned = {p.id for p in self.db.properties.values() if p.owner_id == owner_id}
        return [r for r in self._all() if r.property_id in owned and r.is_pending]

    def find_approved_starting_before(self, day):
        approved = [
            r for r in self._all()
            if r.status == RentalRequestStatus.APPROVED and r.proposed_start <= day
        ]
        return sorted(approved, key=lambda r: r.proposed_start)

    def create(self, request):
        request.id = self.db.next_id()
        with self.db.guard:
            self.db.rental_requests[request.id] = _copy(request)
        return request

    def update_status(self, request):
        with self.db.guard:
            stored = self.db.rental_requests[request.id]
            stored.status = request.status
            stored.landlord_response = request.landlord_response
            stored.response_date = request.response_date


class InMemoryBlockedPeriodStore(BlockedPeriodStore):

    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def find_overlapping(self, property_id, dates):
        return [
            _copy(p) for p in list(self.db.blocked_periods.values())
            if p.property_id == property_id and overlaps(p.range, dates)
        ]


class InMemoryUnitOfWork(RentalsUnitOfWork):
    """
    Per-property threading.Lock plus snapshot rollback

    The snapshot is retaken when the first property lock is acquired, so a
    rollback only undoes writes made while this unit of work held it.
    """

    def __init__(self, db: InMemoryDatabase, bus: Optional[MessageBus] = None):
        super().__init__()
        self.db = db
        self.bus = bus or MessageBus()
        self._held: List[threading.Lock] = []
        self._snapshot = None

    def __enter__(self):
        self._snapshot = self.db.snapshot()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            while self._held:
                self._held.pop().release()

    def lock_property(self, property_id: int) -> None:
        lock = self.db.lock_for(property_id)
        if lock in self._held:
            return
        lock.acquire()
        if not self._held:
            self._snapshot = self.db.snapshot()
        self._held.append(lock)

    def commit(self):
        events = self._take_events()
        self.db.published.extend(events)
        self.bus.publish_events(events)

    def rollback(self):
        self.db.restore(self._snapshot)
        self._events.clear()
