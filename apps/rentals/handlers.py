"""
Rental event subscribers

Registered on the global message bus when the app is ready. Delivery
channels (mail, Telegram, push) are outside this service; subscribers
record who has to be told what.
"""

from __future__ import annotations

import logging

from shared.application.message_bus import message_bus

from apps.bookings.domain.events import BookingCancelled, DailyBookingCreated
from apps.rentals.domain.events import (
    LeaseExpired,
    LeaseExpiringSoon,
    RentalRequestApproved,
    RentalRequestRejected,
    RentalRequestSubmitted,
    RentalRequestWithdrawn,
    TenantMaterialized,
)

logger = logging.getLogger(__name__)


@message_bus.subscribe(RentalRequestSubmitted, RentalRequestWithdrawn)
def notify_landlord(event) -> None:
    logger.info(
        "Landlord of property %s notified: request %s %s",
        event.property_id, event.request_id, type(event).__name__,
    )


@message_bus.subscribe(RentalRequestApproved, RentalRequestRejected)
def notify_applicant(event) -> None:
    logger.info(
        "User %s notified: request %s %s",
        event.user_id, event.request_id, type(event).__name__,
    )


@message_bus.subscribe(TenantMaterialized)
def welcome_tenant(event: TenantMaterialized) -> None:
    logger.info(
        "Tenant %s created for user %s on property %s, lease from %s",
        event.tenant_id, event.user_id, event.property_id, event.lease_start,
    )


@message_bus.subscribe(LeaseExpiringSoon, LeaseExpired)
def notify_lease_parties(event) -> None:
    logger.info(
        "Lease of tenant %s on property %s: %s (ends %s)",
        event.tenant_id, event.property_id, type(event).__name__, event.lease_end,
    )


@message_bus.subscribe(DailyBookingCreated)
def notify_booking_created(event: DailyBookingCreated) -> None:
    logger.info(
        "Booking %s created on property %s for %s",
        event.booking_id, event.property_id, event.dates,
    )


@message_bus.subscribe(BookingCancelled)
def notify_booking_cancelled(event: BookingCancelled) -> None:
    logger.info(
        "Booking %s on property %s cancelled: %s",
        event.booking_id, event.property_id, event.reason or "no reason given",
    )
