"""
Rental Domain Entities

- RentalMode: the per-property occupancy mode (Daily | Monthly)
- Tenant: an active long-term lease record
- RentalRequest: a prospective tenant's request for a lease, with its
  Pending -> Approved | Rejected | Withdrawn state machine
- BlockedPeriod: a landlord-imposed block on a property
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from shared.domain.base import Aggregate, Entity
from shared.domain.value_objects import DateRange

from apps.rentals.domain.errors import InvalidTransitionError, NotRequestOwnerError


class RentalMode(str, Enum):
    DAILY = 'Daily'
    MONTHLY = 'Monthly'


class TenantStatus(str, Enum):
    ACTIVE = 'Active'
    INACTIVE = 'Inactive'


class RentalRequestStatus(str, Enum):
    """
    Rental request finite state machine

    - PENDING -> APPROVED (landlord approval, materializes a Tenant)
    - PENDING -> REJECTED (landlord rejection)
    - PENDING -> WITHDRAWN (tenant withdrawal)

    The three outcomes are terminal.
    """
    PENDING = 'Pending'
    APPROVED = 'Approved'
    REJECTED = 'Rejected'
    WITHDRAWN = 'Withdrawn'

    @property
    def is_terminal(self) -> bool:
        return self is not RentalRequestStatus.PENDING


@dataclass
class Tenant(Aggregate):
    """
    Tenant (lease) record

    The lease end is never stored here. LeaseCalculator derives it from
    the most recent approved rental request of the same user and property.
    """

    user_id: int
    property_id: int
    lease_start: date
    status: TenantStatus = TenantStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE

    def record_materialized(self, request_id: int):
        from apps.rentals.domain.events import TenantMaterialized

        self.add_event(TenantMaterialized(
            aggregate_id=self.id,
            tenant_id=self.id,
            request_id=request_id,
            property_id=self.property_id,
            user_id=self.user_id,
            lease_start=self.lease_start,
        ))

    def deactivate(self, lease_end: date | None = None):
        if not self.is_active:
            return

        from apps.rentals.domain.events import LeaseExpired

        self.status = TenantStatus.INACTIVE
        self.add_event(LeaseExpired(
            aggregate_id=self.id,
            tenant_id=self.id,
            property_id=self.property_id,
            user_id=self.user_id,
            lease_end=lease_end,
        ))


@dataclass
class RentalRequest(Aggregate):
    """Rental Request Aggregate Root"""

    property_id: int
    user_id: int
    proposed_start: date
    proposed_end: date
    lease_duration_months: int
    status: RentalRequestStatus = RentalRequestStatus.PENDING
    request_date: datetime | None = None
    landlord_response: str = ''
    response_date: datetime | None = None
    message: str = ''

    @property
    def proposed_range(self) -> DateRange:
        return DateRange(self.proposed_start, self.proposed_end)

    @property
    def is_pending(self) -> bool:
        return self.status == RentalRequestStatus.PENDING

    def _ensure_pending(self, target: RentalRequestStatus):
        if not self.is_pending:
            raise InvalidTransitionError(
                f"Cannot move rental request {self.id} from {self.status.value} to {target.value}. "
                f"Only pending requests can change state."
            )

    def record_submitted(self):
        from apps.rentals.domain.events import RentalRequestSubmitted

        self.add_event(RentalRequestSubmitted(
            aggregate_id=self.id,
            request_id=self.id,
            property_id=self.property_id,
            user_id=self.user_id,
            dates=self.proposed_range,
        ))

    def approve(self, note: str, now: datetime):
        """PENDING -> APPROVED"""
        self._ensure_pending(RentalRequestStatus.APPROVED)

        from apps.rentals.domain.events import RentalRequestApproved

        self.status = RentalRequestStatus.APPROVED
        self.landlord_response = note or ''
        self.response_date = now
        self.add_event(RentalRequestApproved(
            aggregate_id=self.id,
            request_id=self.id,
            property_id=self.property_id,
            user_id=self.user_id,
            landlord_response=self.landlord_response,
        ))

    def reject(self, note: str, now: datetime):
        """PENDING -> REJECTED"""
        self._ensure_pending(RentalRequestStatus.REJECTED)

        from apps.rentals.domain.events import RentalRequestRejected

        self.status = RentalRequestStatus.REJECTED
        self.landlord_response = note or ''
        self.response_date = now
        self.add_event(RentalRequestRejected(
            aggregate_id=self.id,
            request_id=self.id,
            property_id=self.property_id,
            user_id=self.user_id,
            landlord_response=self.landlord_response,
        ))

    def withdraw(self, user_id: int, now: datetime):
        """PENDING -> WITHDRAWN, tenant-initiated"""
        if user_id != self.user_id:
            raise NotRequestOwnerError("You can only withdraw your own requests")
        self._ensure_pending(RentalRequestStatus.WITHDRAWN)

        from apps.rentals.domain.events import RentalRequestWithdrawn

        self.status = RentalRequestStatus.WITHDRAWN
        self.response_date = now
        self.add_event(RentalRequestWithdrawn(
            aggregate_id=self.id,
            request_id=self.id,
            property_id=self.property_id,
            user_id=self.user_id,
        ))

    def materialize_tenant(self) -> Tenant:
        """Build the tenant record an approved request turns into."""
        if self.status != RentalRequestStatus.APPROVED:
            raise InvalidTransitionError(
                f"Rental request {self.id} is {self.status.value}; only approved requests create tenants"
            )
        return Tenant(
            user_id=self.user_id,
            property_id=self.property_id,
            lease_start=self.proposed_start,
            status=TenantStatus.ACTIVE,
        )


@dataclass
class BlockedPeriod(Entity):
    """Landlord-imposed block; a conflict source in every rental mode."""

    property_id: int
    start: date
    end: date
    reason: str = ''

    @property
    def range(self) -> DateRange:
        return DateRange(self.start, self.end)
