"""
Lease Expiry

Periodic housekeeping over the active-tenant set:

- notify_expiring(): LeaseExpiringSoon for every lease ending inside the notice window
- deactivate_expired(): Active -> Inactive for every lease that already ended
"""

from typing import Callable, List
import logging

from shared.application.message_bus import MessageBus

from apps.rentals.application.lease_calculator import LeaseCalculator
from apps.rentals.application.unit_of_work import RentalsUnitOfWork
from apps.rentals.domain.entities import Tenant
from apps.rentals.domain.events import LeaseExpiringSoon
from apps.rentals.domain.stores import TenantStore

logger = logging.getLogger(__name__)


class LeaseExpiryService:

    def __init__(
        self,
        *,
        tenants: TenantStore,
        lease_calculator: LeaseCalculator,
        uow_factory: Callable[[], RentalsUnitOfWork],
        bus: MessageBus,
    ):
        self.tenants = tenants
        self.lease_calculator = lease_calculator
        self.uow_factory = uow_factory
        self.bus = bus

    def notify_expiring(self, days_ahead: int) -> List[LeaseExpiringSoon]:
        events = []
        for tenant in self.lease_calculator.list_expiring(days_ahead):
            events.append(LeaseExpiringSoon(
                aggregate_id=tenant.id,
                tenant_id=tenant.id,
                property_id=tenant.property_id,
                user_id=tenant.user_id,
                lease_end=self.lease_calculator.derive_lease_end(tenant),
            ))
        self.bus.publish_events(events)
        return events

    def deactivate_expired(self) -> List[Tenant]:
        """
        Deactivate every tenant whose derived lease end is in the past

        A failure on one tenant is logged and does not stop the others.
        """
        deactivated = []
        for tenant in self.lease_calculator.list_expired():
            try:
                self._deactivate(tenant)
            except Exception:
                logger.error("Error deactivating expired lease of tenant %s", tenant.id, exc_info=True)
                continue
            deactivated.append(tenant)

        if deactivated:
            logger.info("Deactivated %d expired leases", len(deactivated))
        return deactivated

    def _deactivate(self, tenant: Tenant):
        with self.uow_factory() as uow:
            uow.lock_property(tenant.property_id)
            lease_end = self.lease_calculator.derive_lease_end(tenant)
            tenant.deactivate(lease_end)
            self.tenants.update_status(tenant.id, tenant.status)
            uow.collect_events(tenant)
