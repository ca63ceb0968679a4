"""Rental settings with defaults, read from settings.RENTALS."""

from __future__ import annotations

from django.conf import settings  # type: ignore

DEFAULTS = {
    "MIN_LEASE_DAYS": 180,
    "MIN_LEASE_MONTHS": 6,
    "EXPIRING_SOON_DAYS": 30,
    "EXPIRY_NOTICE_DAYS": 60,
}


def get(name: str) -> int:
    overrides = getattr(settings, "RENTALS", {}) or {}
    return overrides.get(name, DEFAULTS[name])
