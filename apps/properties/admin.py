"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin

from .models import BlockedPeriod, Property


class BlockedPeriodInline(admin.TabularInline):
    model = BlockedPeriod
    extra = 0
    fields = ("start_date", "end_date", "reason", "created_by")


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("title", "rental_mode", "status", "owner", "created_at")
    list_filter = ("status", "rental_mode")
    search_fields = ("title", "owner__username", "owner__email")
    inlines = (BlockedPeriodInline,)
    readonly_fields = ("created_at", "updated_at", "published_at")


@admin.register(BlockedPeriod)
class BlockedPeriodAdmin(admin.ModelAdmin):
    list_display = ("property", "start_date", "end_date", "reason", "created_by")
    search_fields = ("property__title", "reason")
