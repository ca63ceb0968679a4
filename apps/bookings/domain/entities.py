"""
Booking Domain Entities

- Booking: a daily (short-term) reservation of a property
- BookingStatus: lifecycle states of a booking
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from shared.domain.base import Aggregate
from shared.domain.value_objects import DateRange


class BookingStatus(str, Enum):
    """
    Booking lifecycle

    - UPCOMING -> ACTIVE (guest checked in)
    - ACTIVE -> COMPLETED (guest checked out)
    - UPCOMING/ACTIVE -> CANCELLED

    Cancelled bookings never block dates.
    """
    UPCOMING = 'Upcoming'
    ACTIVE = 'Active'
    COMPLETED = 'Completed'
    CANCELLED = 'Cancelled'


@dataclass
class Booking(Aggregate):
    """
    Booking Aggregate Root

    A null end marks an open-ended booking. For every conflict check it
    occupies exactly one day, [start, start + 1).
    """

    property_id: int
    user_id: int
    start: date
    end: date | None = None
    status: BookingStatus = BookingStatus.UPCOMING
    special_requests: str = ''

    def __post_init__(self):
        if self.end is not None and self.end <= self.start:
            raise ValueError(f"Booking end ({self.end}) must be after start ({self.start})")

    @property
    def occupied_range(self) -> DateRange:
        if self.end is None:
            return DateRange.single_day(self.start)
        return DateRange(self.start, self.end)

    @property
    def is_open_ended(self) -> bool:
        return self.end is None

    def blocks_dates(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    def record_created(self):
        from apps.bookings.domain.events import DailyBookingCreated

        self.add_event(DailyBookingCreated(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            user_id=self.user_id,
            dates=self.occupied_range,
        ))

    def cancel(self, reason: str = ''):
        """Cancel booking (UPCOMING/ACTIVE -> CANCELLED)"""
        if self.status in (BookingStatus.COMPLETED, BookingStatus.CANCELLED):
            raise ValueError(f"Cannot cancel booking with status {self.status.value}")

        from apps.bookings.domain.events import BookingCancelled

        self.status = BookingStatus.CANCELLED
        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            reason=reason,
        ))

    def __str__(self):
        return f"Booking #{self.id} ({self.status.value}, {self.occupied_range})"
