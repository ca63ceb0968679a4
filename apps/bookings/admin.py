"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "property",
        "guest",
        "status",
        "start_date",
        "end_date",
        "created_at",
    )
    list_filter = ("status", "start_date")
    search_fields = ("property__title", "guest__username", "guest__email")
    readonly_fields = (
        "created_at",
        "updated_at",
        "cancelled_at",
    )
