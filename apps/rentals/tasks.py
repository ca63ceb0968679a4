"""Celery tasks for the rental domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from shared.application.message_bus import message_bus

from . import conf
from .application.lease_expiry import LeaseExpiryService
from .services import build_lease_calculator
from .stores import DjangoRentalsUnitOfWork, DjangoTenantStore

logger = logging.getLogger(__name__)


def _lease_expiry_service() -> LeaseExpiryService:
    return LeaseExpiryService(
        tenants=DjangoTenantStore(),
        lease_calculator=build_lease_calculator(),
        uow_factory=DjangoRentalsUnitOfWork,
        bus=message_bus,
    )


# ============================================================================
# PERIODIC TASKS (Celery Beat)
# ============================================================================

@shared_task(name="rentals.notify_expiring_leases")
def notify_expiring_leases(days_ahead: int | None = None) -> dict[str, int]:
    """
    Уведомления об окончании договоров.

    Публикует LeaseExpiringSoon для каждого действующего договора,
    который заканчивается в ближайшие EXPIRY_NOTICE_DAYS дней.

    Returns:
        dict: {"notified": количество договоров}
    """
    days = days_ahead if days_ahead is not None else conf.get("EXPIRY_NOTICE_DAYS")
    events = _lease_expiry_service().notify_expiring(days)
    logger.info("Sent %d lease expiry notices (window %d days)", len(events), days)
    return {"notified": len(events)}


@shared_task(name="rentals.deactivate_expired_leases")
def deactivate_expired_leases() -> dict[str, int]:
    """
    Завершение истёкших договоров.

    Переводит арендаторов с прошедшей датой окончания договора
    в статус Inactive.

    Returns:
        dict: {"deactivated": количество договоров}
    """
    deactivated = _lease_expiry_service().deactivate_expired()
    return {"deactivated": len(deactivated)}
