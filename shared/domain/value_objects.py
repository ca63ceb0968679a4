"""
Common Value Objects

- DateRange: a half-open range of calendar dates [start, end)
- overlaps(): the one and only overlap predicate of the project

Every availability decision in the system goes through overlaps().
ORM stores pre-filter with the equivalent lookups
(start__lt=other.end, end__gt=other.start) and the domain re-checks
fetched rows with overlaps().
"""

from dataclasses import dataclass
from datetime import date, timedelta

from shared.domain.base import ValueObject


def overlaps(a: 'DateRange', b: 'DateRange') -> bool:
    """
    Half-open interval overlap

    Two ranges overlap iff a.start < b.end and b.start < a.end.
    Adjacent ranges ([Jan 1, Jan 10) and [Jan 10, Jan 20)) do not overlap.
    """
    return a.start < b.end and b.start < a.end


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start (inclusive) to end (exclusive).
    Used for bookings, lease windows, rental requests and blocked periods.
    """
    start: date
    end: date

    def __post_init__(self):
        if not isinstance(self.start, date) or not isinstance(self.end, date):
            raise TypeError("DateRange bounds must be dates")
        if self.start >= self.end:
            raise ValueError(f"Start date ({self.start}) must be before end date ({self.end})")

    @classmethod
    def single_day(cls, day: date) -> 'DateRange':
        """The one-day range [day, day + 1)"""
        return cls(day, day + timedelta(days=1))

    def overlaps_with(self, other: 'DateRange') -> bool:
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return overlaps(self, other)

    def contains(self, check_date: date) -> bool:
        """Whether the single day check_date falls inside this range"""
        return overlaps(self, DateRange.single_day(check_date))

    def __len__(self) -> int:
        """Number of days (nights) in this range"""
        return (self.end - self.start).days

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start}, {self.end})"
