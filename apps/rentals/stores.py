"""ORM implementations of the tenant and rental request stores, and the unit of work."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from django.db import transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import DateRange

from apps.properties.models import Property
from apps.rentals.application.unit_of_work import RentalsUnitOfWork
from apps.rentals.domain.entities import (
    RentalRequest as RentalRequestEntity,
    RentalRequestStatus,
    Tenant as TenantEntity,
    TenantStatus,
)
from apps.rentals.domain.stores import RentalRequestStore, TenantStore

from .models import RentalRequest, Tenant


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


class DjangoRentalsUnitOfWork(DjangoUnitOfWork, RentalsUnitOfWork):
    """
    transaction.atomic() plus a row lock on the property

    Backends without SELECT ... FOR UPDATE (SQLite) serialize writers on
    their own, so the lock degrades to a plain read there.
    """

    def lock_property(self, property_id: int) -> None:
        queryset = _lock_queryset_if_possible(Property.objects.filter(pk=property_id))
        list(queryset.values_list("pk", flat=True))


# ===== Tenants =====

class DjangoTenantStore(TenantStore):

    def get(self, tenant_id: int) -> Optional[TenantEntity]:
        record = Tenant.objects.filter(pk=tenant_id).first()
        return tenant_to_entity(record) if record else None

    def find_active(self) -> List[TenantEntity]:
        return [tenant_to_entity(t) for t in Tenant.objects.filter(status=Tenant.Status.ACTIVE)]

    def find_active_by_property(self, property_id: int) -> List[TenantEntity]:
        tenants = Tenant.objects.filter(property_id=property_id, status=Tenant.Status.ACTIVE)
        return [tenant_to_entity(t) for t in tenants]

    def find_active_by_user_and_property(self, user_id: int, property_id: int) -> Optional[TenantEntity]:
        record = Tenant.objects.filter(
            user_id=user_id, property_id=property_id, status=Tenant.Status.ACTIVE,
        ).first()
        return tenant_to_entity(record) if record else None

    def create(self, tenant: TenantEntity) -> TenantEntity:
        record = Tenant.objects.create(
            user_id=tenant.user_id,
            property_id=tenant.property_id,
            lease_start=tenant.lease_start,
            status=tenant.status.value,
        )
        tenant.id = record.pk
        return tenant

    def update_status(self, tenant_id: int, status: TenantStatus) -> None:
        Tenant.objects.filter(pk=tenant_id).update(status=status.value)


def tenant_to_entity(record: Tenant) -> TenantEntity:
    return TenantEntity(
        id=record.pk,
        user_id=record.user_id,
        property_id=record.property_id,
        lease_start=record.lease_start,
        status=TenantStatus(record.status),
    )


# ===== Rental requests =====

class DjangoRentalRequestStore(RentalRequestStore):

    def get(self, request_id: int) -> Optional[RentalRequestEntity]:
        record = RentalRequest.objects.filter(pk=request_id).first()
        return request_to_entity(record) if record else None

    def _overlapping(self, property_id: int, dates: DateRange, status: str):
        return RentalRequest.objects.filter(
            property_id=property_id,
            status=status,
            proposed_start__lt=dates.end,
            proposed_end__gt=dates.start,
        )

    def find_approved_overlapping(self, property_id: int, dates: DateRange) -> List[RentalRequestEntity]:
        records = self._overlapping(property_id, dates, RentalRequest.Status.APPROVED)
        return [request_to_entity(r) for r in records]

    def find_pending_overlapping(self, property_id: int, dates: DateRange) -> List[RentalRequestEntity]:
        records = self._overlapping(property_id, dates, RentalRequest.Status.PENDING)
        return [request_to_entity(r) for r in records]

    def find_latest_approved(self, user_id: int, property_id: int) -> Optional[RentalRequestEntity]:
        record = (
            RentalRequest.objects.filter(
                user_id=user_id, property_id=property_id, status=RentalRequest.Status.APPROVED,
            )
            .order_by("-request_date", "-pk")
            .first()
        )
        return request_to_entity(record) if record else None

    def find_by_user(self, user_id: int) -> List[RentalRequestEntity]:
        return [request_to_entity(r) for r in RentalRequest.objects.filter(user_id=user_id)]

    def find_by_property(self, property_id: int) -> List[RentalRequestEntity]:
        return [request_to_entity(r) for r in RentalRequest.objects.filter(property_id=property_id)]

    def find_pending_for_owner(self, owner_id: int) -> List[RentalRequestEntity]:
        records = RentalRequest.objects.filter(
            property__owner_id=owner_id, status=RentalRequest.Status.PENDING,
        )
        return [request_to_entity(r) for r in records]

    def find_approved_starting_before(self, day: date) -> List[RentalRequestEntity]:
        records = RentalRequest.objects.filter(
            status=RentalRequest.Status.APPROVED, proposed_start__lte=day,
        ).order_by("proposed_start")
        return [request_to_entity(r) for r in records]

    def create(self, request: RentalRequestEntity) -> RentalRequestEntity:
        record = RentalRequest.objects.create(
            user_id=request.user_id,
            property_id=request.property_id,
            proposed_start=request.proposed_start,
            proposed_end=request.proposed_end,
            lease_duration_months=request.lease_duration_months,
            status=request.status.value,
            message=request.message,
            request_date=request.request_date or timezone.now(),
        )
        request.id = record.pk
        return request

    def update_status(self, request: RentalRequestEntity) -> None:
        RentalRequest.objects.filter(pk=request.id).update(
            status=request.status.value,
            landlord_response=request.landlord_response,
            response_date=request.response_date,
        )


def request_to_entity(record: RentalRequest) -> RentalRequestEntity:
    return RentalRequestEntity(
        id=record.pk,
        property_id=record.property_id,
        user_id=record.user_id,
        proposed_start=record.proposed_start,
        proposed_end=record.proposed_end,
        lease_duration_months=record.lease_duration_months,
        status=RentalRequestStatus(record.status),
        request_date=record.request_date,
        landlord_response=record.landlord_response,
        response_date=record.response_date,
        message=record.message,
    )
