"""
Conflict records

ConflictInfo is the uniform output of conflict aggregation: bookings,
leases (active tenants and approved requests) and blocked periods all
collapse into one sorted list.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, List

from shared.domain.base import ValueObject
from shared.domain.value_objects import DateRange

from apps.bookings.domain.entities import Booking
from apps.rentals.domain.entities import BlockedPeriod, RentalMode, RentalRequest, Tenant


class ConflictType(str, Enum):
    BOOKING = 'Booking'
    LEASE = 'Lease'
    BLOCKED = 'Blocked'


@dataclass(frozen=True)
class ConflictInfo(ValueObject):
    """
    A single commitment standing in the way of a requested range

    end is None only for a lease whose end cannot be derived.
    """
    type: ConflictType
    start: date
    end: date | None
    description: str
    source_id: int | None

    @classmethod
    def for_booking(cls, booking: Booking) -> 'ConflictInfo':
        occupied = booking.occupied_range
        return cls(
            type=ConflictType.BOOKING,
            start=occupied.start,
            end=occupied.end,
            description=f"Existing booking #{booking.id}",
            source_id=booking.id,
        )

    @classmethod
    def for_lease(cls, tenant: Tenant, lease_end: date | None) -> 'ConflictInfo':
        return cls(
            type=ConflictType.LEASE,
            start=tenant.lease_start,
            end=lease_end,
            description=f"Active tenant lease (Tenant ID: {tenant.id})",
            source_id=tenant.id,
        )

    @classmethod
    def for_approved_request(cls, request: RentalRequest) -> 'ConflictInfo':
        return cls(
            type=ConflictType.LEASE,
            start=request.proposed_start,
            end=request.proposed_end,
            description=f"Approved rental request #{request.id}",
            source_id=request.id,
        )

    @classmethod
    def for_blocked_period(cls, period: BlockedPeriod) -> 'ConflictInfo':
        return cls(
            type=ConflictType.BLOCKED,
            start=period.start,
            end=period.end,
            description=period.reason or "Property blocked",
            source_id=period.id,
        )

    def to_dict(self) -> dict:
        return {
            'type': self.type.value,
            'start': self.start.isoformat(),
            'end': self.end.isoformat() if self.end else None,
            'description': self.description,
            'source_id': self.source_id,
        }


_TYPE_ORDER = {ConflictType.BOOKING: 0, ConflictType.LEASE: 1, ConflictType.BLOCKED: 2}


def sort_conflicts(conflicts: Iterable[ConflictInfo]) -> List[ConflictInfo]:
    """Order by start; ties are broken by type and source id so output is stable."""
    return sorted(
        conflicts,
        key=lambda c: (c.start, _TYPE_ORDER[c.type], c.source_id if c.source_id is not None else -1),
    )


@dataclass
class AvailabilityResult:
    """Outcome of CheckAvailability: the boolean, the reason and the conflicts behind it"""
    property_id: int
    dates: DateRange
    mode: RentalMode
    available: bool = False
    reason: str = ''
    conflicts: List[ConflictInfo] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'property_id': self.property_id,
            'start': self.dates.start.isoformat(),
            'end': self.dates.end.isoformat(),
            'mode': self.mode.value,
            'available': self.available,
            'reason': self.reason,
            'conflicts': [conflict.to_dict() for conflict in self.conflicts],
        }
