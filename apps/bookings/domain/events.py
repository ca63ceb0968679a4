"""
Booking Domain Events

Published on the message bus after the unit of work commits.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange


@dataclass
class DailyBookingCreated(DomainEvent):
    """
    Event: A daily booking passed the availability check and was stored

    Triggers:
    - Notify property owner
    """
    booking_id: int
    property_id: int
    user_id: int
    dates: DateRange


@dataclass
class BookingCancelled(DomainEvent):
    """Event: Booking was cancelled and its dates are free again"""
    booking_id: int
    property_id: int
    reason: str
