from datetime import date

import pytest

from shared.domain.value_objects import DateRange

from apps.bookings.domain.entities import BookingStatus
from apps.rentals.domain.conflicts import ConflictType
from apps.rentals.domain.entities import RentalMode, RentalRequestStatus

MARCH = DateRange(date(2025, 3, 1), date(2025, 4, 1))


def r(start: str, end: str) -> DateRange:
    return DateRange(date.fromisoformat(start), date.fromisoformat(end))


# ===== Rental mode =====

def test_modes_are_mutually_exclusive(world):
    daily = world.db.add_property(RentalMode.DAILY)
    monthly = world.db.add_property(RentalMode.MONTHLY)

    assert world.availability.is_available_for_daily(daily, MARCH)
    assert not world.availability.is_available_for_annual(daily, MARCH)
    assert world.availability.is_available_for_annual(monthly, MARCH)
    assert not world.availability.is_available_for_daily(monthly, MARCH)


def test_missing_property_supports_nothing(world, caplog):
    assert not world.availability.supports_rental_mode(404, RentalMode.DAILY)
    assert not world.availability.is_available_for_daily(404, MARCH)
    assert not world.availability.is_available_for_annual(404, MARCH)
    assert "Property 404 not found" in caplog.text


# ===== Daily =====

def test_daily_blocked_by_overlapping_booking(world):
    pid = world.db.add_property(RentalMode.DAILY)
    world.db.add_booking(pid, date(2025, 3, 10), date(2025, 3, 12))

    assert not world.availability.is_available_for_daily(pid, MARCH)
    assert world.availability.is_available_for_daily(pid, r("2025-03-12", "2025-03-15"))
    assert world.availability.is_available_for_daily(pid, r("2025-03-05", "2025-03-10"))


def test_cancelled_booking_frees_dates(world):
    pid = world.db.add_property(RentalMode.DAILY)
    world.db.add_booking(pid, date(2025, 3, 10), date(2025, 3, 12), status=BookingStatus.CANCELLED)

    assert world.availability.is_available_for_daily(pid, MARCH)


def test_open_ended_booking_blocks_only_its_first_day(world):
    pid = world.db.add_property(RentalMode.DAILY)
    world.db.add_booking(pid, date(2025, 3, 10))

    assert not world.availability.is_available_for_daily(pid, r("2025-03-10", "2025-03-11"))
    assert not world.availability.is_available_for_daily(pid, r("2025-03-01", "2025-03-11"))
    assert world.availability.is_available_for_daily(pid, r("2025-03-11", "2025-03-20"))
    assert world.availability.is_available_for_daily(pid, r("2025-03-01", "2025-03-10"))


def test_blocked_period_blocks_every_mode(world):
    daily = world.db.add_property(RentalMode.DAILY)
    monthly = world.db.add_property(RentalMode.MONTHLY)
    world.db.add_block(daily, date(2025, 3, 20), date(2025, 3, 25), reason="Repairs")
    world.db.add_block(monthly, date(2025, 3, 20), date(2025, 3, 25))

    assert not world.availability.is_available_for_daily(daily, MARCH)
    assert not world.availability.is_available_for_annual(monthly, MARCH)
    assert world.availability.has_blocked_periods(daily, MARCH)
    assert not world.availability.has_blocked_periods(daily, r("2025-03-25", "2025-03-30"))


def test_daily_blocked_by_approved_request(world):
    pid = world.db.add_property(RentalMode.DAILY)
    world.db.add_request(pid, 5, date(2025, 3, 15), date(2025, 9, 15), 6, status=RentalRequestStatus.APPROVED)

    assert not world.availability.is_available_for_daily(pid, MARCH)


def test_daily_ignores_pending_and_rejected_requests(world):
    pid = world.db.add_property(RentalMode.DAILY)
    world.db.add_request(pid, 5, date(2025, 3, 15), date(2025, 9, 15), 6)
    world.db.add_request(pid, 6, date(2025, 3, 15), date(2025, 9, 15), 6, status=RentalRequestStatus.REJECTED)

    assert world.availability.is_available_for_daily(pid, MARCH)


def test_daily_blocked_by_overlapping_lease(world):
    pid = world.db.add_property(RentalMode.DAILY)
    world.db.add_lease(pid, 5, date(2025, 1, 1), months=6)

    assert not world.availability.is_available_for_daily(pid, MARCH)
    assert world.availability.is_available_for_daily(pid, r("2025-07-01", "2025-07-05"))


def test_daily_skips_lease_with_unknown_end(world):
    pid = world.db.add_property(RentalMode.DAILY)
    world.db.add_tenant(pid, 5, date(2025, 1, 1))

    assert world.availability.is_available_for_daily(pid, MARCH)


# ===== Annual =====

def test_holding_tenant_blocks_any_new_lease(world):
    pid = world.db.add_property(RentalMode.MONTHLY)
    world.db.add_lease(pid, 5, date(2024, 9, 1), months=12)

    assert not world.availability.is_available_for_annual(pid, r("2026-01-01", "2026-07-01"))


def test_tenant_with_unknown_end_holds_the_property(world):
    pid = world.db.add_property(RentalMode.MONTHLY)
    world.db.add_tenant(pid, 5, date(2024, 9, 1))

    assert not world.availability.is_available_for_annual(pid, r("2026-01-01", "2026-07-01"))


def test_ended_lease_frees_the_future_but_not_its_own_window(world):
    pid = world.db.add_property(RentalMode.MONTHLY)
    world.db.add_lease(pid, 5, date(2024, 1, 1), months=12)

    assert world.availability.is_available_for_annual(pid, r("2025-02-01", "2025-08-01"))
    assert not world.availability.is_available_for_annual(pid, r("2024-10-01", "2025-04-01"))


def test_annual_can_ignore_the_applicant_own_tenancy(world):
    pid = world.db.add_property(RentalMode.MONTHLY)
    world.db.add_lease(pid, 5, date(2024, 9, 1), months=12)
    wanted = r("2025-09-01", "2026-03-01")

    assert not world.availability.is_available_for_annual(pid, wanted)
    assert world.availability.is_available_for_annual(pid, wanted, ignore_user_id=5)
    assert not world.availability.is_available_for_annual(pid, wanted, ignore_user_id=6)


def test_annual_blocked_by_booking(world):
    pid = world.db.add_property(RentalMode.MONTHLY)
    world.db.add_booking(pid, date(2025, 5, 1), date(2025, 5, 3))

    assert not world.availability.is_available_for_annual(pid, r("2025-03-01", "2025-09-01"))


def test_property_available_ignores_mode_and_leases(world):
    pid = world.db.add_property(RentalMode.MONTHLY)
    world.db.add_tenant(pid, 5, date(2024, 9, 1))

    assert world.availability.is_property_available(pid, MARCH)

    world.db.add_booking(pid, date(2025, 3, 3), date(2025, 3, 4))

    assert not world.availability.is_property_available(pid, MARCH)


# ===== Fail-safe =====

def test_store_errors_make_property_unavailable(world, boom, monkeypatch):
    daily = world.db.add_property(RentalMode.DAILY)
    monthly = world.db.add_property(RentalMode.MONTHLY)
    monkeypatch.setattr(world.bookings, "find_overlapping", boom)

    assert world.availability.is_available_for_daily(daily, MARCH) is False
    assert world.availability.is_available_for_annual(monthly, MARCH) is False
    assert world.availability.is_property_available(daily, MARCH) is False
    assert world.availability.has_no_conflicts(daily, MARCH) is False
    with pytest.raises(RuntimeError):
        world.availability.get_conflicts(daily, MARCH)


def test_blocked_period_errors_count_as_blocked(world, boom, monkeypatch):
    pid = world.db.add_property(RentalMode.DAILY)
    monkeypatch.setattr(world.blocked_periods, "find_overlapping", boom)

    assert world.availability.has_blocked_periods(pid, MARCH) is True


def test_mode_lookup_error_supports_nothing(world, boom, monkeypatch):
    pid = world.db.add_property(RentalMode.DAILY)
    monkeypatch.setattr(world.properties, "get_rental_mode", boom)

    assert world.availability.supports_rental_mode(pid, RentalMode.DAILY) is False
    assert world.availability.is_available_for_daily(pid, MARCH) is False


def test_lease_derivation_error_fails_closed(world, boom, monkeypatch):
    pid = world.db.add_property(RentalMode.MONTHLY)
    world.db.add_tenant(pid, 5, date(2024, 9, 1))
    monkeypatch.setattr(world.rental_requests, "find_latest_approved", boom)

    assert world.availability.is_available_for_annual(pid, MARCH) is False


def test_check_reports_error(world, boom, monkeypatch):
    pid = world.db.add_property(RentalMode.DAILY)
    monkeypatch.setattr(world.blocked_periods, "find_overlapping", boom)

    result = world.availability.check(pid, MARCH, RentalMode.DAILY)

    assert not result.available
    assert result.reason == "Error occurred during availability check"
    assert result.conflicts == []


# ===== Conflict aggregation =====

def test_conflicts_are_sorted_by_start(world):
    pid = world.db.add_property(RentalMode.DAILY)
    world.db.add_block(pid, date(2025, 3, 20), date(2025, 3, 22), reason="Owner visit")
    world.db.add_booking(pid, date(2025, 3, 25), date(2025, 3, 27))
    world.db.add_booking(pid, date(2025, 3, 2))

    conflicts = world.availability.get_conflicts(pid, MARCH)

    assert [c.type for c in conflicts] == [ConflictType.BOOKING, ConflictType.BLOCKED, ConflictType.BOOKING]
    assert [c.start for c in conflicts] == [date(2025, 3, 2), date(2025, 3, 20), date(2025, 3, 25)]
    assert conflicts[0].end == date(2025, 3, 3)
    assert conflicts[1].description == "Owner visit"


def test_lease_and_its_request_are_reported_once(world):
    pid = world.db.add_property(RentalMode.DAILY)
    tenant = world.db.add_lease(pid, 5, date(2024, 1, 1), months=12)

    conflicts = world.availability.get_conflicts(pid, r("2024-06-01", "2024-07-01"))

    assert len(conflicts) == 1
    assert conflicts[0].type == ConflictType.LEASE
    assert conflicts[0].source_id == tenant.id
    assert conflicts[0].end == date(2025, 1, 1)


def test_approved_request_without_tenant_is_a_daily_conflict(world):
    pid = world.db.add_property(RentalMode.DAILY)
    request = world.db.add_request(
        pid, 5, date(2025, 3, 15), date(2025, 9, 15), 6, status=RentalRequestStatus.APPROVED,
    )

    conflicts = world.availability.get_conflicts(pid, MARCH)

    assert [(c.type, c.source_id) for c in conflicts] == [(ConflictType.LEASE, request.id)]


def test_holding_tenant_is_a_monthly_conflict_only(world):
    monthly = world.db.add_property(RentalMode.MONTHLY)
    daily = world.db.add_property(RentalMode.DAILY)
    world.db.add_tenant(monthly, 5, date(2024, 9, 1))
    world.db.add_tenant(daily, 5, date(2024, 9, 1))
    later = r("2027-01-01", "2027-02-01")

    assert [c.type for c in world.availability.get_conflicts(monthly, later)] == [ConflictType.LEASE]
    assert world.availability.get_conflicts(monthly, later)[0].end is None
    assert world.availability.get_conflicts(daily, later) == []


SCENARIOS = [
    [],
    [("booking", "2025-03-10", "2025-03-12")],
    [("booking", "2025-03-31", None)],
    [("booking", "2025-04-01", None)],
    [("cancelled", "2025-03-10", "2025-03-12")],
    [("block", "2025-02-20", "2025-03-01")],
    [("block", "2025-02-20", "2025-03-02")],
    [("lease", "2024-01-01", 12)],
    [("lease", "2024-10-01", 6)],
    [("lease", "2024-10-01", 5)],
    [("lease", "2025-06-01", 6)],
    [("tenant", "2024-10-01", None)],
    [("approved", "2025-03-15", "2025-09-15")],
    [("pending", "2025-03-15", "2025-09-15")],
    [("approved", "2025-03-15", "2025-09-15"), ("booking", "2025-04-01", "2025-04-02")],
]


def _seed(world, pid, items):
    for kind, start, extra in items:
        start = date.fromisoformat(start)
        if kind == "booking":
            world.db.add_booking(pid, start, date.fromisoformat(extra) if extra else None)
        elif kind == "cancelled":
            world.db.add_booking(pid, start, date.fromisoformat(extra), status=BookingStatus.CANCELLED)
        elif kind == "block":
            world.db.add_block(pid, start, date.fromisoformat(extra))
        elif kind == "lease":
            world.db.add_lease(pid, 50, start, months=extra)
        elif kind == "tenant":
            world.db.add_tenant(pid, 51, start)
        elif kind == "approved":
            world.db.add_request(pid, 52, start, date.fromisoformat(extra), 6, status=RentalRequestStatus.APPROVED)
        elif kind == "pending":
            world.db.add_request(pid, 53, start, date.fromisoformat(extra), 6)


@pytest.mark.parametrize("items", SCENARIOS)
@pytest.mark.parametrize("mode", [RentalMode.DAILY, RentalMode.MONTHLY])
def test_empty_conflicts_iff_available(world, mode, items):
    pid = world.db.add_property(mode)
    _seed(world, pid, items)

    conflicts = world.availability.get_conflicts(pid, MARCH)
    if mode == RentalMode.DAILY:
        available = world.availability.is_available_for_daily(pid, MARCH)
    else:
        available = world.availability.is_available_for_annual(pid, MARCH)

    assert available == (not conflicts)
    assert world.availability.has_no_conflicts(pid, MARCH) == available


# ===== check() =====

def test_check_unsupported_mode(world):
    pid = world.db.add_property(RentalMode.DAILY)

    result = world.availability.check(pid, MARCH, RentalMode.MONTHLY)

    assert not result.available
    assert result.reason == "Property does not support monthly rentals"


def test_check_available_and_conflicting(world):
    pid = world.db.add_property(RentalMode.DAILY)
    world.db.add_booking(pid, date(2025, 3, 10), date(2025, 3, 12))

    free = world.availability.check(pid, r("2025-04-01", "2025-04-05"), RentalMode.DAILY)
    busy = world.availability.check(pid, MARCH, RentalMode.DAILY)

    assert free.available and free.reason == "Available for daily rental"
    assert not busy.available and busy.reason == "Conflicts found for daily rental"
    assert busy.to_dict()["conflicts"] == [{
        "type": "Booking",
        "start": "2025-03-10",
        "end": "2025-03-12",
        "description": f"Existing booking #{busy.conflicts[0].source_id}",
        "source_id": busy.conflicts[0].source_id,
    }]


def test_lease_window_worked_example(world):
    """Lease from 2024-01-01 for 12 months, checked on 2025-02-15."""
    pid = world.db.add_property(RentalMode.MONTHLY)
    tenant = world.db.add_lease(pid, 5, date(2024, 1, 1), months=12)

    past = world.availability.check(pid, r("2024-06-01", "2024-07-01"), RentalMode.MONTHLY)
    now = world.availability.check(pid, r("2025-02-01", "2025-03-01"), RentalMode.MONTHLY)

    assert not past.available
    assert [(c.type, c.source_id, c.start, c.end) for c in past.conflicts] == [
        (ConflictType.LEASE, tenant.id, date(2024, 1, 1), date(2025, 1, 1)),
    ]
    assert now.available
    assert now.conflicts == []
