"""
Rental Request Use Cases

Commands:
- SubmitRentalRequestCommand: a prospective tenant asks for a lease

Every write runs inside a RentalsUnitOfWork that holds the property
lock, so the availability check and the write that depends on it cannot
interleave with another writer on the same property. Domain events are
collected by the unit of work and published after commit.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, List, Optional
import logging

from shared.domain.value_objects import DateRange, overlaps

from apps.rentals.application.availability import AvailabilityEngine
from apps.rentals.application.lease_calculator import LeaseCalculator
from apps.rentals.application.unit_of_work import RentalsUnitOfWork
from apps.rentals.domain.entities import RentalMode, RentalRequest, RentalRequestStatus, Tenant
from apps.rentals.domain.errors import (
    CommitmentConflictError,
    RentalRequestNotFound,
    TenantMaterializationError,
)
from apps.rentals.domain.stores import RentalRequestStore, TenantStore

logger = logging.getLogger(__name__)

MIN_LEASE_MONTHS = 6


# ===== Commands and results =====

@dataclass
class SubmitRentalRequestCommand:
    property_id: int
    user_id: int
    start: date
    end: date
    lease_duration_months: int
    message: str = ''


class Rejection(str, Enum):
    INVALID = 'invalid'
    CONFLICT = 'conflict'


@dataclass
class SubmissionResult:
    """
    Outcome of a submission

    A rejected submission never inserts anything. rejection tells a
    malformed request (INVALID) apart from a busy property (CONFLICT).
    """
    created: bool
    available: bool
    reason: str
    request: Optional[RentalRequest] = None
    rejection: Optional[Rejection] = None

    @classmethod
    def invalid(cls, reason: str) -> 'SubmissionResult':
        return cls(created=False, available=False, reason=reason, rejection=Rejection.INVALID)

    @classmethod
    def conflict(cls, reason: str) -> 'SubmissionResult':
        return cls(created=False, available=False, reason=reason, rejection=Rejection.CONFLICT)


# ===== Service =====

class RentalRequestService:
    """Pending -> Approved | Rejected | Withdrawn, and tenant materialization"""

    def __init__(
        self,
        *,
        rental_requests: RentalRequestStore,
        tenants: TenantStore,
        availability: AvailabilityEngine,
        lease_calculator: LeaseCalculator,
        uow_factory: Callable[[], RentalsUnitOfWork],
        clock: Callable[[], datetime] = datetime.now,
        min_lease_months: int = MIN_LEASE_MONTHS,
    ):
        self.rental_requests = rental_requests
        self.tenants = tenants
        self.availability = availability
        self.lease_calculator = lease_calculator
        self.uow_factory = uow_factory
        self.clock = clock
        self.min_lease_months = min_lease_months

    # ------------------------------------------------------------------
    # Submission

    def submit(self, command: SubmitRentalRequestCommand) -> SubmissionResult:
        try:
            dates = DateRange(command.start, command.end)
        except (TypeError, ValueError) as exc:
            return SubmissionResult.invalid(str(exc))

        with self.uow_factory() as uow:
            uow.lock_property(command.property_id)

            rejection = self._validate_submission(command, dates)
            if rejection is not None:
                logger.info(
                    "Rental request by user %s for property %s rejected: %s",
                    command.user_id, command.property_id, rejection.reason,
                )
                return rejection

            request = self.rental_requests.create(RentalRequest(
                property_id=command.property_id,
                user_id=command.user_id,
                proposed_start=dates.start,
                proposed_end=dates.end,
                lease_duration_months=command.lease_duration_months,
                status=RentalRequestStatus.PENDING,
                request_date=self.clock(),
                message=command.message,
            ))
            request.record_submitted()
            uow.collect_events(request)

        logger.info(
            "Rental request %s submitted by user %s for property %s (%s)",
            request.id, command.user_id, command.property_id, dates,
        )
        return SubmissionResult(
            created=True,
            available=True,
            reason="Rental request submitted",
            request=request,
        )

    def _validate_submission(
        self, command: SubmitRentalRequestCommand, dates: DateRange
    ) -> Optional[SubmissionResult]:
        if not self.lease_calculator.is_valid_lease_duration(dates.start, dates.end):
            return SubmissionResult.invalid(
                f"Monthly rentals require a minimum of {self.lease_calculator.min_lease_days} days"
            )
        if command.lease_duration_months < self.min_lease_months:
            return SubmissionResult.invalid(
                f"Lease duration must be at least {self.min_lease_months} months"
            )
        if dates.start < self.lease_calculator.today():
            return SubmissionResult.invalid("Lease cannot start in the past")
        if not self.availability.supports_rental_mode(command.property_id, RentalMode.MONTHLY):
            return SubmissionResult.invalid("Property does not support monthly rentals")
        if not self.availability.is_available_for_annual(command.property_id, dates):
            return SubmissionResult.conflict("Property is not available for the requested dates")

        pending = [
            request
            for request in self.rental_requests.find_pending_overlapping(command.property_id, dates)
            if overlaps(request.proposed_range, dates)
        ]
        if pending:
            return SubmissionResult.conflict("Another request for these dates is awaiting a response")

        blocker = self._request_blocker(command.user_id, command.property_id)
        if blocker is not None:
            return SubmissionResult.conflict(blocker)
        return None

    def _request_blocker(self, user_id: int, property_id: int) -> Optional[str]:
        """
        Why a user may not file a new request for a property, if anything

        A property takes no new requests while it has an approved lease
        that has not ended yet or any Active tenant, including one whose
        lease ended but which the expiry task has not deactivated yet.
        """
        today = self.lease_calculator.today()
        for request in self.rental_requests.find_by_property(property_id):
            if request.user_id == user_id and request.is_pending:
                return "You already have a pending request for this property"
            if request.status == RentalRequestStatus.APPROVED and request.proposed_end > today:
                return "Property already has an approved lease"
        if self.tenants.find_active_by_property(property_id):
            return "Property has an active tenant"
        return None

    # ------------------------------------------------------------------
    # Landlord and tenant responses

    def approve(self, request_id: int, note: str = '') -> RentalRequest:
        """
        Approve a pending request and materialize its tenant in one unit of work

        Approving an already approved request is a no-op. Commitments made
        since submission are re-checked under the property lock; a clash
        raises CommitmentConflictError and nothing changes.

        An applicant who already holds an Active tenancy here may only
        extend it from the same lease start; the tenancy keeps its start
        and its lease end is derived from it.
        """
        with self.uow_factory() as uow:
            request = self._get(request_id)
            uow.lock_property(request.property_id)
            request = self._get(request_id)

            if request.status == RentalRequestStatus.APPROVED:
                logger.info("Rental request %s is already approved", request_id)
                return request

            if request.is_pending and not self.availability.is_available_for_annual(
                request.property_id, request.proposed_range, ignore_user_id=request.user_id,
            ):
                raise CommitmentConflictError(
                    f"Property {request.property_id} is no longer available for {request.proposed_range}"
                )

            existing = self.tenants.find_active_by_user_and_property(request.user_id, request.property_id)
            if request.is_pending and existing is not None and existing.lease_start != request.proposed_start:
                raise CommitmentConflictError(
                    f"User {request.user_id} already holds tenancy {existing.id} on property "
                    f"{request.property_id} starting {existing.lease_start}"
                )

            request.approve(note, self.clock())
            self.rental_requests.update_status(request)
            tenant = self._materialize_tenant(request, existing)

            uow.collect_events(request)
            uow.collect_events(tenant)

        logger.info("Rental request %s approved, tenant %s", request.id, tenant.id)
        return request

    def reject(self, request_id: int, note: str = '') -> RentalRequest:
        with self.uow_factory() as uow:
            request = self._get(request_id)
            request.reject(note, self.clock())
            self.rental_requests.update_status(request)
            uow.collect_events(request)

        logger.info("Rental request %s rejected", request.id)
        return request

    def withdraw(self, request_id: int, user_id: int) -> RentalRequest:
        with self.uow_factory() as uow:
            request = self._get(request_id)
            request.withdraw(user_id, self.clock())
            self.rental_requests.update_status(request)
            uow.collect_events(request)

        logger.info("Rental request %s withdrawn by user %s", request.id, user_id)
        return request

    def _materialize_tenant(self, request: RentalRequest, existing: Optional[Tenant]) -> Tenant:
        if existing is not None:
            logger.info(
                "Active tenant %s already exists for user %s on property %s",
                existing.id, request.user_id, request.property_id,
            )
            return existing

        tenant = request.materialize_tenant()
        try:
            tenant = self.tenants.create(tenant)
        except Exception as exc:
            logger.error("Failed to create tenant for rental request %s", request.id, exc_info=True)
            raise TenantMaterializationError(
                f"Could not create tenant for rental request {request.id}"
            ) from exc

        tenant.record_materialized(request.id)
        return tenant

    def _get(self, request_id: int) -> RentalRequest:
        request = self.rental_requests.get(request_id)
        if request is None:
            raise RentalRequestNotFound(f"Rental request {request_id} not found")
        return request

    # ------------------------------------------------------------------
    # Queries

    def can_request_property(self, user_id: int, property_id: int) -> bool:
        """Whether a user may file a new request for a property"""
        try:
            return self._request_blocker(user_id, property_id) is None
        except Exception:
            logger.exception("Error checking whether user %s can request property %s", user_id, property_id)
            return False

    def get(self, request_id: int) -> Optional[RentalRequest]:
        return self.rental_requests.get(request_id)

    def pending_for_landlord(self, owner_id: int) -> List[RentalRequest]:
        return self.rental_requests.find_pending_for_owner(owner_id)

    def for_user(self, user_id: int) -> List[RentalRequest]:
        return self.rental_requests.find_by_user(user_id)

    def for_property(self, property_id: int) -> List[RentalRequest]:
        return self.rental_requests.find_by_property(property_id)

    def expiring_contracts(self, days_ahead: int = 30) -> List[RentalRequest]:
        """Approved requests whose lease starts within days_ahead"""
        horizon = self.lease_calculator.today() + timedelta(days=days_ahead)
        return self.rental_requests.find_approved_starting_before(horizon)
