"""
Lease Calculator

The single source of truth for lease expiry. A tenant's lease end is
derived on every read from the most recent approved rental request of the
same user and property:

    lease_end = tenant.lease_start + request.lease_duration_months

An underivable end is "unknown" (None), never "never ends".
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, List, Optional

from shared.domain.value_objects import DateRange

from apps.rentals.domain.entities import RentalRequest, Tenant
from apps.rentals.domain.stores import RentalRequestStore, TenantStore

logger = logging.getLogger(__name__)

MIN_LEASE_DAYS = 180
EXPIRING_SOON_DAYS = 30


def add_months(start: date, months: int) -> date:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


@dataclass(frozen=True)
class TenantLeaseInfo:
    tenant: Tenant
    lease_start: date
    lease_end: Optional[date]
    lease_duration_months: Optional[int]
    remaining_days: Optional[int]
    is_expired: bool
    is_expiring_soon: bool
    request_id: Optional[int] = None

    @property
    def lease_range(self) -> Optional[DateRange]:
        if self.lease_end is None or self.lease_end <= self.lease_start:
            return None
        return DateRange(self.lease_start, self.lease_end)


class LeaseCalculator:
    """
    Derives lease ends and classifies tenants by expiry.

    derive_lease_end() and lease_info() let store errors propagate so the
    availability engine can fail closed. is_expired() and remaining_days()
    are the "never raise" variants used for display.
    """

    def __init__(
        self,
        tenants: TenantStore,
        rental_requests: RentalRequestStore,
        *,
        today: Callable[[], date] = date.today,
        min_lease_days: int = MIN_LEASE_DAYS,
        expiring_soon_days: int = EXPIRING_SOON_DAYS,
    ):
        self.tenants = tenants
        self.rental_requests = rental_requests
        self.today = today
        self.min_lease_days = min_lease_days
        self.expiring_soon_days = expiring_soon_days

    # ------------------------------------------------------------------
    # Derivation

    def deriving_request(self, tenant: Tenant) -> Optional[RentalRequest]:
        """The approved request a tenant's lease end is derived from"""
        return self.rental_requests.find_latest_approved(tenant.user_id, tenant.property_id)

    def derive_lease_end(self, tenant: Tenant) -> Optional[date]:
        request = self.deriving_request(tenant)
        if request is None:
            logger.warning("No approved rental request found for tenant %s", tenant.id)
            return None
        lease_end = self._lease_end_from(tenant, request)
        logger.debug(
            "Derived lease end for tenant %s: %s (duration: %s months)",
            tenant.id, lease_end, request.lease_duration_months,
        )
        return lease_end

    @staticmethod
    def _lease_end_from(tenant: Tenant, request: RentalRequest) -> date:
        return add_months(tenant.lease_start, request.lease_duration_months)

    def lease_duration_months(self, tenant: Tenant) -> Optional[int]:
        request = self.deriving_request(tenant)
        return request.lease_duration_months if request else None

    def lease_range(self, tenant: Tenant) -> Optional[DateRange]:
        return self.lease_info(tenant).lease_range

    def lease_info(self, tenant: Tenant) -> TenantLeaseInfo:
        today = self.today()
        request = self.deriving_request(tenant)
        lease_end = self._lease_end_from(tenant, request) if request else None
        remaining = (lease_end - today).days if lease_end else None
        return TenantLeaseInfo(
            tenant=tenant,
            lease_start=tenant.lease_start,
            lease_end=lease_end,
            lease_duration_months=request.lease_duration_months if request else None,
            remaining_days=remaining,
            is_expired=lease_end is not None and lease_end < today,
            is_expiring_soon=(
                lease_end is not None
                and today <= lease_end <= today + timedelta(days=self.expiring_soon_days)
            ),
            request_id=request.id if request else None,
        )

    def active_leases(self, property_id: Optional[int] = None) -> List[TenantLeaseInfo]:
        if property_id is None:
            tenants = self.tenants.find_active()
        else:
            tenants = self.tenants.find_active_by_property(property_id)
        return [self.lease_info(tenant) for tenant in tenants]

    def is_holding(self, info: TenantLeaseInfo) -> bool:
        """
        Whether an active tenant still occupies the property today

        A lease whose end cannot be derived counts as still running.
        """
        return info.tenant.is_active and (info.lease_end is None or info.lease_end > self.today())

    # ------------------------------------------------------------------
    # Thin derivations by tenant id

    def is_expired(self, tenant_id: int) -> bool:
        try:
            tenant = self.tenants.get(tenant_id)
            if tenant is None:
                logger.warning("Tenant %s not found", tenant_id)
                return False
            lease_end = self.derive_lease_end(tenant)
        except Exception:
            logger.exception("Error checking lease expiry for tenant %s", tenant_id)
            return False
        return lease_end is not None and lease_end < self.today()

    def remaining_days(self, tenant_id: int) -> Optional[int]:
        try:
            tenant = self.tenants.get(tenant_id)
            if tenant is None:
                logger.warning("Tenant %s not found", tenant_id)
                return None
            lease_end = self.derive_lease_end(tenant)
        except Exception:
            logger.exception("Error calculating remaining lease days for tenant %s", tenant_id)
            return None
        if lease_end is None:
            return None
        return (lease_end - self.today()).days

    # ------------------------------------------------------------------
    # Filters over the active-tenant set

    def list_expiring(self, days_ahead: int) -> List[Tenant]:
        """Active tenants whose lease ends within [today, today + days_ahead]"""
        today = self.today()
        horizon = today + timedelta(days=days_ahead)
        expiring = []
        for tenant in self.tenants.find_active():
            lease_end = self.derive_lease_end(tenant)
            if lease_end is not None and today <= lease_end <= horizon:
                expiring.append(tenant)
        logger.info("Found %d tenants with leases expiring within %d days", len(expiring), days_ahead)
        return expiring

    def list_expired(self) -> List[Tenant]:
        """Active tenants whose lease ended before today"""
        today = self.today()
        expired = []
        for tenant in self.tenants.find_active():
            lease_end = self.derive_lease_end(tenant)
            if lease_end is not None and lease_end < today:
                expired.append(tenant)
        logger.info("Found %d tenants with expired leases", len(expired))
        return expired

    # ------------------------------------------------------------------

    def is_valid_lease_duration(self, start: date, end: date) -> bool:
        """The sole minimum-length gate: the lease must span at least 180 days."""
        return (end - start).days >= self.min_lease_days
