"""ORM implementation of the booking store."""

from __future__ import annotations

from typing import List, Optional

from django.db.models import Q  # type: ignore

from shared.domain.value_objects import DateRange

from apps.bookings.domain.entities import Booking as BookingEntity, BookingStatus
from apps.rentals.domain.stores import BookingStore

from .models import Booking


def overlapping_filter(dates: DateRange) -> Q:
    """
    Half-open overlap against [start_date, end_date)

    A null end_date occupies [start_date, start_date + 1 day), which
    overlaps dates exactly when dates.start <= start_date < dates.end.
    """
    return Q(start_date__lt=dates.end) & (
        Q(end_date__gt=dates.start) | Q(end_date__isnull=True, start_date__gte=dates.start)
    )


class DjangoBookingStore(BookingStore):

    def find_overlapping(
        self, property_id: int, dates: DateRange, exclude_cancelled: bool = True
    ) -> List[BookingEntity]:
        bookings = Booking.objects.filter(property_id=property_id).filter(overlapping_filter(dates))
        if exclude_cancelled:
            bookings = bookings.exclude(status=Booking.Status.CANCELLED)
        return [to_entity(booking) for booking in bookings]

    def get(self, booking_id: int) -> Optional[BookingEntity]:
        record = Booking.objects.filter(pk=booking_id).first()
        return to_entity(record) if record else None

    def update_status(self, booking: BookingEntity, reason: str = "") -> None:
        record = Booking.objects.get(pk=booking.id)
        if booking.status == BookingStatus.CANCELLED:
            record.mark_cancelled(reason)
            return
        record.status = booking.status.value
        record.save(update_fields=["status", "updated_at"])

    def create(self, booking: BookingEntity) -> BookingEntity:
        record = Booking.objects.create(
            property_id=booking.property_id,
            guest_id=booking.user_id,
            start_date=booking.start,
            end_date=booking.end,
            status=booking.status.value,
            special_requests=booking.special_requests,
        )
        booking.id = record.pk
        return booking


def to_entity(record: Booking) -> BookingEntity:
    return BookingEntity(
        id=record.pk,
        property_id=record.property_id,
        user_id=record.guest_id,
        start=record.start_date,
        end=record.end_date,
        status=BookingStatus(record.status),
        special_requests=record.special_requests,
    )
