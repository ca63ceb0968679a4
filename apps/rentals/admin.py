"""Admin registrations for the rentals domain."""

from __future__ import annotations

from django.contrib import admin

from .models import RentalRequest, Tenant
from .services import build_lease_calculator
from .stores import tenant_to_entity


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "property", "lease_start", "lease_months", "lease_end", "status")
    list_filter = ("status",)
    search_fields = ("property__title", "user__username", "user__email")
    readonly_fields = ("lease_months", "lease_end", "created_at", "updated_at")

    @admin.display(description="Lease months")
    def lease_months(self, obj: Tenant):
        if obj.pk is None:
            return None
        return build_lease_calculator().lease_duration_months(tenant_to_entity(obj))

    @admin.display(description="Lease end")
    def lease_end(self, obj: Tenant):
        if obj.pk is None:
            return None
        return build_lease_calculator().derive_lease_end(tenant_to_entity(obj))


@admin.register(RentalRequest)
class RentalRequestAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "property",
        "user",
        "proposed_start",
        "proposed_end",
        "lease_duration_months",
        "status",
        "request_date",
    )
    list_filter = ("status",)
    search_fields = ("property__title", "user__username", "user__email")
    readonly_fields = ("request_date", "response_date")
