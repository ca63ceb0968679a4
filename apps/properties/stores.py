"""ORM implementations of the property-side collaborators of the rental core."""

from __future__ import annotations

from typing import List, Optional

from shared.domain.value_objects import DateRange

from apps.rentals.domain.entities import BlockedPeriod as BlockedPeriodEntity, RentalMode
from apps.rentals.domain.stores import BlockedPeriodStore, PropertyLookup

from .models import BlockedPeriod, Property


class DjangoPropertyLookup(PropertyLookup):

    def get_rental_mode(self, property_id: int) -> Optional[RentalMode]:
        mode = Property.objects.filter(pk=property_id).values_list("rental_mode", flat=True).first()
        return RentalMode(mode) if mode else None

    def get_owner_id(self, property_id: int) -> Optional[int]:
        return Property.objects.filter(pk=property_id).values_list("owner_id", flat=True).first()


class DjangoBlockedPeriodStore(BlockedPeriodStore):

    def find_overlapping(self, property_id: int, dates: DateRange) -> List[BlockedPeriodEntity]:
        periods = BlockedPeriod.objects.filter(
            property_id=property_id,
            start_date__lt=dates.end,
            end_date__gt=dates.start,
        )
        return [to_entity(period) for period in periods]


def to_entity(period: BlockedPeriod) -> BlockedPeriodEntity:
    return BlockedPeriodEntity(
        id=period.pk,
        property_id=period.property_id,
        start=period.start_date,
        end=period.end_date,
        reason=period.reason,
    )
