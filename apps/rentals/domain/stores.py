"""
Collaborator contracts of the rental core

The core never touches persistence directly. It talks to these stores;
apps/*/stores.py implement them over the Django ORM and the test suite
ships in-memory versions.

Range lookups (find_overlapping and friends) may over-fetch. Callers
always re-check fetched rows with shared.domain.value_objects.overlaps.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from shared.domain.value_objects import DateRange

from apps.bookings.domain.entities import Booking
from apps.rentals.domain.entities import (
    BlockedPeriod,
    RentalMode,
    RentalRequest,
    Tenant,
    TenantStatus,
)


class PropertyLookup(ABC):

    @abstractmethod
    def get_rental_mode(self, property_id: int) -> Optional[RentalMode]:
        """None when the property does not exist"""

    @abstractmethod
    def get_owner_id(self, property_id: int) -> Optional[int]:
        pass


class BookingStore(ABC):

    @abstractmethod
    def find_overlapping(
        self, property_id: int, dates: DateRange, exclude_cancelled: bool = True
    ) -> List[Booking]:
        """Bookings whose occupied range (null end = one day) overlaps dates"""

    @abstractmethod
    def get(self, booking_id: int) -> Optional[Booking]:
        pass

    @abstractmethod
    def create(self, booking: Booking) -> Booking:
        pass

    @abstractmethod
    def update_status(self, booking: Booking, reason: str = '') -> None:
        """Persist booking.status; reason is kept for cancellations"""


class TenantStore(ABC):

    @abstractmethod
    def get(self, tenant_id: int) -> Optional[Tenant]:
        pass

    @abstractmethod
    def find_active(self) -> List[Tenant]:
        pass

    @abstractmethod
    def find_active_by_property(self, property_id: int) -> List[Tenant]:
        pass

    @abstractmethod
    def find_active_by_user_and_property(self, user_id: int, property_id: int) -> Optional[Tenant]:
        pass

    @abstractmethod
    def create(self, tenant: Tenant) -> Tenant:
        pass

    @abstractmethod
    def update_status(self, tenant_id: int, status: TenantStatus) -> None:
        pass


class RentalRequestStore(ABC):

    @abstractmethod
    def get(self, request_id: int) -> Optional[RentalRequest]:
        pass

    @abstractmethod
    def find_approved_overlapping(self, property_id: int, dates: DateRange) -> List[RentalRequest]:
        pass

    @abstractmethod
    def find_pending_overlapping(self, property_id: int, dates: DateRange) -> List[RentalRequest]:
        pass

    @abstractmethod
    def find_latest_approved(self, user_id: int, property_id: int) -> Optional[RentalRequest]:
        """Most recent approved request by request_date"""

    @abstractmethod
    def find_by_user(self, user_id: int) -> List[RentalRequest]:
        pass

    @abstractmethod
    def find_by_property(self, property_id: int) -> List[RentalRequest]:
        pass

    @abstractmethod
    def find_pending_for_owner(self, owner_id: int) -> List[RentalRequest]:
        pass

    @abstractmethod
    def find_approved_starting_before(self, day: date) -> List[RentalRequest]:
        """Approved requests whose proposed start is on or before day"""

    @abstractmethod
    def create(self, request: RentalRequest) -> RentalRequest:
        pass

    @abstractmethod
    def update_status(self, request: RentalRequest) -> None:
        """Persist status, landlord_response and response_date"""


class BlockedPeriodStore(ABC):

    @abstractmethod
    def find_overlapping(self, property_id: int, dates: DateRange) -> List[BlockedPeriod]:
        pass
