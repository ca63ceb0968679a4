"""
Rental Coordinator

Entry point for the HTTP views and Celery tasks. It only sequences the
availability checks in front of the two creation paths:

- daily: rental mode -> is_available_for_daily -> create booking
- monthly: rental mode -> is_available_for_annual -> duration -> submit request

Responses, withdrawals and booking cancellations go through here as well.

Expected business failures come back as not-created results, False or
a refused ActionResult.
Unexpected collaborator errors are logged and fail safe the same way.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional
import logging

from shared.domain.value_objects import DateRange

from apps.bookings.domain.entities import Booking, BookingStatus
from apps.rentals.application.availability import AvailabilityEngine
from apps.rentals.application.lease_calculator import LeaseCalculator
from apps.rentals.application.rental_requests import (
    RentalRequestService,
    SubmissionResult,
    SubmitRentalRequestCommand,
)
from apps.rentals.application.unit_of_work import RentalsUnitOfWork
from apps.rentals.domain.conflicts import AvailabilityResult
from apps.rentals.domain.entities import RentalMode
from apps.rentals.domain.errors import (
    InvalidTransitionError,
    NotRequestOwnerError,
    RentalError,
    RentalRequestNotFound,
)
from apps.rentals.domain.stores import BookingStore, PropertyLookup

logger = logging.getLogger(__name__)


@dataclass
class CreateDailyBookingCommand:
    """end may be None for an open-ended stay; it then occupies one night."""
    property_id: int
    user_id: int
    start: date
    end: Optional[date] = None
    special_requests: str = ''


@dataclass
class BookingResult:
    created: bool
    reason: str
    booking: Optional[Booking] = None
    invalid: bool = False


class Refusal(str, Enum):
    NOT_FOUND = 'not_found'
    FORBIDDEN = 'forbidden'
    INVALID = 'invalid'
    CONFLICT = 'conflict'


@dataclass
class ActionResult:
    """
    Outcome of a response, withdrawal or cancellation

    Truthy when the action went through. A refused action names why in
    refusal; an unexpected failure leaves refusal empty.
    """
    done: bool
    reason: str
    refusal: Optional[Refusal] = None

    def __bool__(self) -> bool:
        return self.done

    @classmethod
    def refused(cls, refusal: Refusal, reason: str) -> 'ActionResult':
        return cls(done=False, reason=reason, refusal=refusal)


def refusal_for(exc: RentalError) -> Refusal:
    if isinstance(exc, RentalRequestNotFound):
        return Refusal.NOT_FOUND
    if isinstance(exc, NotRequestOwnerError):
        return Refusal.FORBIDDEN
    if isinstance(exc, InvalidTransitionError):
        return Refusal.INVALID
    return Refusal.CONFLICT


class RentalCoordinator:

    def __init__(
        self,
        *,
        properties: PropertyLookup,
        bookings: BookingStore,
        availability: AvailabilityEngine,
        lease_calculator: LeaseCalculator,
        rental_requests: RentalRequestService,
        uow_factory: Callable[[], RentalsUnitOfWork],
    ):
        self.properties = properties
        self.bookings = bookings
        self.availability = availability
        self.lease_calculator = lease_calculator
        self.rental_requests = rental_requests
        self.uow_factory = uow_factory

    # ------------------------------------------------------------------
    # Daily path

    def create_daily_booking(self, command: CreateDailyBookingCommand) -> BookingResult:
        try:
            booking = Booking(
                property_id=command.property_id,
                user_id=command.user_id,
                start=command.start,
                end=command.end,
                status=BookingStatus.UPCOMING,
                special_requests=command.special_requests,
            )
        except (TypeError, ValueError) as exc:
            return BookingResult(created=False, reason=str(exc), invalid=True)

        try:
            with self.uow_factory() as uow:
                uow.lock_property(command.property_id)

                if not self.availability.supports_rental_mode(command.property_id, RentalMode.DAILY):
                    return BookingResult(
                        created=False, reason="Property does not support daily rentals", invalid=True,
                    )
                if not self.availability.is_available_for_daily(command.property_id, booking.occupied_range):
                    return BookingResult(created=False, reason="Property is not available for the requested dates")

                booking = self.bookings.create(booking)
                booking.record_created()
                uow.collect_events(booking)
        except Exception:
            logger.exception("Error creating daily booking for property %s", command.property_id)
            return BookingResult(created=False, reason="Booking could not be created")

        logger.info("Daily booking %s created for property %s", booking.id, command.property_id)
        return BookingResult(created=True, reason="Booking created", booking=booking)

    # ------------------------------------------------------------------
    # Monthly path

    def submit_rental_request(self, command: SubmitRentalRequestCommand) -> SubmissionResult:
        try:
            dates = DateRange(command.start, command.end)
        except (TypeError, ValueError) as exc:
            return SubmissionResult.invalid(str(exc))

        try:
            if self.availability.supports_rental_mode(command.property_id, RentalMode.DAILY):
                return SubmissionResult.invalid("Property only supports daily rentals")
            if not self.availability.is_available_for_annual(command.property_id, dates):
                return SubmissionResult.conflict("Property is not available for the requested dates")
            if not self.lease_calculator.is_valid_lease_duration(dates.start, dates.end):
                return SubmissionResult.invalid(
                    f"Monthly rentals require a minimum of {self.lease_calculator.min_lease_days} days"
                )
            return self.rental_requests.submit(command)
        except Exception:
            logger.exception("Error submitting rental request for property %s", command.property_id)
            return SubmissionResult(created=False, available=False, reason="Rental request could not be submitted")

    def respond_to_request(
        self, request_id: int, approved: bool, note: str = '', user_id: Optional[int] = None,
    ) -> ActionResult:
        """
        Approve or reject a pending request

        With user_id set, only the owner of the requested property may
        respond.
        """
        try:
            if user_id is not None:
                if self.rental_requests.get(request_id) is None:
                    return ActionResult.refused(Refusal.NOT_FOUND, f"Rental request {request_id} not found")
                if not self.can_approve_request(request_id, user_id):
                    return ActionResult.refused(
                        Refusal.FORBIDDEN, "Only the property owner may respond to a rental request",
                    )
            if approved:
                self.rental_requests.approve(request_id, note)
            else:
                self.rental_requests.reject(request_id, note)
        except RentalError as exc:
            logger.info("Response to rental request %s refused: %s", request_id, exc)
            return ActionResult.refused(refusal_for(exc), str(exc))
        except Exception:
            logger.exception("Error responding to rental request %s", request_id)
            return ActionResult(done=False, reason="Rental request could not be updated")
        return ActionResult(done=True, reason="Rental request approved" if approved else "Rental request rejected")

    def withdraw_request(self, request_id: int, user_id: int) -> ActionResult:
        try:
            self.rental_requests.withdraw(request_id, user_id)
        except RentalError as exc:
            logger.info("Withdrawal of rental request %s refused: %s", request_id, exc)
            return ActionResult.refused(refusal_for(exc), str(exc))
        except Exception:
            logger.exception("Error withdrawing rental request %s", request_id)
            return ActionResult(done=False, reason="Rental request could not be withdrawn")
        return ActionResult(done=True, reason="Rental request withdrawn")

    # ------------------------------------------------------------------
    # Cancellation

    def cancel_booking(self, booking_id: int, reason: str = '') -> ActionResult:
        """Cancel a booking under the property lock; its dates are free once this commits"""
        try:
            booking = self.bookings.get(booking_id)
            if booking is None:
                return ActionResult.refused(Refusal.NOT_FOUND, f"Booking {booking_id} not found")

            with self.uow_factory() as uow:
                uow.lock_property(booking.property_id)
                booking = self.bookings.get(booking_id)
                try:
                    booking.cancel(reason)
                except ValueError as exc:
                    return ActionResult.refused(Refusal.INVALID, str(exc))
                self.bookings.update_status(booking, reason)
                uow.collect_events(booking)
        except Exception:
            logger.exception("Error cancelling booking %s", booking_id)
            return ActionResult(done=False, reason="Booking could not be cancelled")

        logger.info("Booking %s on property %s cancelled", booking_id, booking.property_id)
        return ActionResult(done=True, reason="Booking cancelled")

    # ------------------------------------------------------------------
    # Queries

    def check_availability(self, property_id: int, dates: DateRange, mode: RentalMode) -> AvailabilityResult:
        return self.availability.check(property_id, dates, mode)

    def can_approve_request(self, request_id: int, user_id: int) -> bool:
        """Only the owner of the requested property may respond"""
        try:
            request = self.rental_requests.get(request_id)
            if request is None:
                return False
            return self.properties.get_owner_id(request.property_id) == user_id
        except Exception:
            logger.exception("Error checking approval rights on rental request %s", request_id)
            return False

    def can_request_property(self, user_id: int, property_id: int) -> bool:
        return self.rental_requests.can_request_property(user_id, property_id)

    def validate_rental_availability(self, property_id: int, dates: DateRange) -> bool:
        return self.availability.has_no_conflicts(property_id, dates)
