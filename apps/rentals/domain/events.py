"""
Rental Domain Events

Events that represent things that have happened in the rental domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from datetime import date

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange


# ===== Rental request events =====

@dataclass
class RentalRequestSubmitted(DomainEvent):
    """
    Event: A prospective tenant submitted a lease request (now Pending)

    Triggers:
    - Notify the landlord about a request waiting for a response
    """
    request_id: int
    property_id: int
    user_id: int
    dates: DateRange


@dataclass
class RentalRequestApproved(DomainEvent):
    """Event: Landlord approved the request (PENDING -> APPROVED)"""
    request_id: int
    property_id: int
    user_id: int
    landlord_response: str


@dataclass
class RentalRequestRejected(DomainEvent):
    """Event: Landlord rejected the request (PENDING -> REJECTED)"""
    request_id: int
    property_id: int
    user_id: int
    landlord_response: str


@dataclass
class RentalRequestWithdrawn(DomainEvent):
    """Event: Tenant withdrew the request (PENDING -> WITHDRAWN)"""
    request_id: int
    property_id: int
    user_id: int


# ===== Lease events =====

@dataclass
class TenantMaterialized(DomainEvent):
    """
    Event: An approved request produced its tenant record

    Triggers:
    - Welcome message to the tenant
    """
    tenant_id: int
    request_id: int
    property_id: int
    user_id: int
    lease_start: date


@dataclass
class LeaseExpiringSoon(DomainEvent):
    """Event: The derived lease end falls inside the notice window"""
    tenant_id: int
    property_id: int
    user_id: int
    lease_end: date


@dataclass
class LeaseExpired(DomainEvent):
    """Event: Tenant record was deactivated because its lease ended"""
    tenant_id: int
    property_id: int
    user_id: int
    lease_end: date | None
