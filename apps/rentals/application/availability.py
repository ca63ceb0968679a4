"""
Availability Engine

Decides whether a property can take a new commitment for a date range.
Four conflict sources are consulted: daily bookings, active leases
(through the LeaseCalculator), approved rental requests and
landlord-imposed blocked periods.

The boolean checks are fail-safe-closed: any collaborator error makes the
property unavailable. get_conflicts() is the diagnostic counterpart and
is built from the same collectors, so for a property in mode M an empty
conflict list and is_available_for_M() always agree.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from shared.domain.value_objects import DateRange, overlaps

from apps.rentals.application.lease_calculator import LeaseCalculator, TenantLeaseInfo
from apps.rentals.domain.conflicts import AvailabilityResult, ConflictInfo, sort_conflicts
from apps.rentals.domain.entities import RentalMode
from apps.rentals.domain.stores import (
    BlockedPeriodStore,
    BookingStore,
    PropertyLookup,
    RentalRequestStore,
)

logger = logging.getLogger(__name__)


class AvailabilityEngine:

    def __init__(
        self,
        *,
        properties: PropertyLookup,
        bookings: BookingStore,
        rental_requests: RentalRequestStore,
        blocked_periods: BlockedPeriodStore,
        lease_calculator: LeaseCalculator,
    ):
        self.properties = properties
        self.bookings = bookings
        self.rental_requests = rental_requests
        self.blocked_periods = blocked_periods
        self.lease_calculator = lease_calculator

    # ------------------------------------------------------------------
    # Rental mode

    def supports_rental_mode(self, property_id: int, mode: RentalMode) -> bool:
        try:
            actual = self.properties.get_rental_mode(property_id)
        except Exception:
            logger.exception("Error checking rental mode for property %s", property_id)
            return False
        if actual is None:
            logger.warning("Property %s not found or has no rental mode", property_id)
            return False
        return actual == mode

    # ------------------------------------------------------------------
    # Boolean checks

    def is_available_for_daily(self, property_id: int, dates: DateRange) -> bool:
        try:
            if not self.supports_rental_mode(property_id, RentalMode.DAILY):
                return False

            leases, _ = self._lease_conflicts(property_id, dates, include_holding=False)
            if leases:
                logger.info("Daily rental blocked by active lease for property %s", property_id)
                return False

            if self._approved_request_conflicts(property_id, dates):
                logger.info("Daily rental blocked by approved rental request for property %s", property_id)
                return False

            return self._is_free_of_bookings_and_blocks(property_id, dates)
        except Exception:
            logger.exception("Error checking daily rental availability for property %s", property_id)
            return False

    def is_available_for_annual(
        self, property_id: int, dates: DateRange, *, ignore_user_id: Optional[int] = None
    ) -> bool:
        """
        A monthly property hosts at most one tenant at a time. While an active
        tenant still holds it, no new lease is possible for any dates.

        ignore_user_id skips that user's own tenancy (approval re-check).
        """
        try:
            if not self.supports_rental_mode(property_id, RentalMode.MONTHLY):
                return False

            leases, _ = self._lease_conflicts(
                property_id, dates, include_holding=True, ignore_user_id=ignore_user_id
            )
            if leases:
                logger.info("Annual rental blocked by active lease for property %s", property_id)
                return False

            return self._is_free_of_bookings_and_blocks(property_id, dates)
        except Exception:
            logger.exception("Error checking annual rental availability for property %s", property_id)
            return False

    def is_property_available(self, property_id: int, dates: DateRange) -> bool:
        """Bookings and blocked periods only, regardless of rental mode"""
        try:
            return self._is_free_of_bookings_and_blocks(property_id, dates)
        except Exception:
            logger.exception("Error in basic availability check for property %s", property_id)
            return False

    def has_blocked_periods(self, property_id: int, dates: DateRange) -> bool:
        try:
            return bool(self._blocked_conflicts(property_id, dates))
        except Exception:
            logger.exception("Error checking blocked periods for property %s", property_id)
            return True

    # ------------------------------------------------------------------
    # Conflict aggregation

    def get_conflicts(self, property_id: int, dates: DateRange) -> List[ConflictInfo]:
        """
        Every commitment that makes the range unavailable, sorted by start

        Collaborator errors propagate; callers choose how to fail.
        """
        mode = self.properties.get_rental_mode(property_id)
        leases, overlapping = self._lease_conflicts(
            property_id, dates, include_holding=mode == RentalMode.MONTHLY
        )
        conflicts = self._booking_conflicts(property_id, dates) + leases
        if mode == RentalMode.DAILY:
            covered = {info.request_id for info in overlapping if info.request_id is not None}
            conflicts += self._approved_request_conflicts(property_id, dates, covered=covered)
        conflicts += self._blocked_conflicts(property_id, dates)
        return sort_conflicts(conflicts)

    def has_no_conflicts(self, property_id: int, dates: DateRange) -> bool:
        try:
            return not self.get_conflicts(property_id, dates)
        except Exception:
            logger.exception("Error validating rental availability for property %s", property_id)
            return False

    def check(self, property_id: int, dates: DateRange, mode: RentalMode) -> AvailabilityResult:
        result = AvailabilityResult(property_id=property_id, dates=dates, mode=mode)
        try:
            result.conflicts = self.get_conflicts(property_id, dates)
        except Exception:
            logger.exception("Error in comprehensive availability check for property %s", property_id)
            result.reason = "Error occurred during availability check"
            return result

        label = mode.value.lower()
        if not self.supports_rental_mode(property_id, mode):
            result.reason = f"Property does not support {label} rentals"
            return result

        if mode == RentalMode.DAILY:
            result.available = self.is_available_for_daily(property_id, dates)
        else:
            result.available = self.is_available_for_annual(property_id, dates)
        result.reason = (
            f"Available for {label} rental" if result.available else f"Conflicts found for {label} rental"
        )
        return result

    # ------------------------------------------------------------------
    # Collectors (raise on collaborator errors)

    def _is_free_of_bookings_and_blocks(self, property_id: int, dates: DateRange) -> bool:
        if self._booking_conflicts(property_id, dates):
            return False
        return not self._blocked_conflicts(property_id, dates)

    def _booking_conflicts(self, property_id: int, dates: DateRange) -> List[ConflictInfo]:
        bookings = self.bookings.find_overlapping(property_id, dates, exclude_cancelled=True)
        return [
            ConflictInfo.for_booking(booking)
            for booking in bookings
            if booking.blocks_dates() and overlaps(booking.occupied_range, dates)
        ]

    def _blocked_conflicts(self, property_id: int, dates: DateRange) -> List[ConflictInfo]:
        periods = self.blocked_periods.find_overlapping(property_id, dates)
        return [
            ConflictInfo.for_blocked_period(period)
            for period in periods
            if overlaps(period.range, dates)
        ]

    def _lease_conflicts(
        self, property_id: int, dates: DateRange, *, include_holding: bool,
        ignore_user_id: Optional[int] = None,
    ) -> Tuple[List[ConflictInfo], List[TenantLeaseInfo]]:
        """
        Lease conflicts plus the lease infos whose window overlaps dates

        A lease with an unknown end never overlaps anything; it only
        conflicts through include_holding.
        """
        conflicts: List[ConflictInfo] = []
        overlapping: List[TenantLeaseInfo] = []
        for info in self.lease_calculator.active_leases(property_id):
            if ignore_user_id is not None and info.tenant.user_id == ignore_user_id:
                continue
            lease = info.lease_range
            if lease is not None and overlaps(lease, dates):
                overlapping.append(info)
                conflicts.append(ConflictInfo.for_lease(info.tenant, info.lease_end))
            elif include_holding and self.lease_calculator.is_holding(info):
                conflicts.append(ConflictInfo.for_lease(info.tenant, info.lease_end))
        return conflicts, overlapping

    def _approved_request_conflicts(
        self, property_id: int, dates: DateRange, covered: Iterable[int] = ()
    ) -> List[ConflictInfo]:
        """Approved requests overlapping dates, minus those already reported as a lease"""
        covered = set(covered)
        requests = self.rental_requests.find_approved_overlapping(property_id, dates)
        return [
            ConflictInfo.for_approved_request(request)
            for request in requests
            if overlaps(request.proposed_range, dates) and request.id not in covered
        ]
