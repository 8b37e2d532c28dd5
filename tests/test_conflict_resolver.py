"""Tests for slot admissibility checks."""

import pytest

from scheduling.errors import ErrorKind, HolidayError, SlotFullError, ValidationError
from tests.conftest import CHRISTMAS, MONDAY, SATURDAY, make_window


class TestCheckAvailability:
    def test_empty_slot_is_admissible(self, resolver):
        check = resolver.check_availability("V1", SATURDAY, "SAT-1000")
        assert check.admissible
        assert check.remaining_capacity == 1
        assert check.window.id == "SAT-1000"

    def test_full_slot(self, resolver, ledger):
        ledger.create("V1", SATURDAY, "SAT-1000")
        check = resolver.check_availability("V1", SATURDAY, "SAT-1000")
        assert not check.admissible
        assert check.reason == ErrorKind.SLOT_FULL
        assert check.remaining_capacity == 0

    def test_capacity_is_per_resource(self, resolver, ledger):
        ledger.create("V1", SATURDAY, "SAT-1000")
        assert resolver.check_availability("V2", SATURDAY, "SAT-1000").admissible

    def test_remaining_capacity_counts_active_only(self, resolver, ledger):
        first = ledger.create("V1", MONDAY, "MON-0900")
        ledger.create("V1", MONDAY, "MON-0900")
        assert resolver.check_availability("V1", MONDAY, "MON-0900").remaining_capacity == 1

        ledger.cancel(first.id)
        assert resolver.check_availability("V1", MONDAY, "MON-0900").remaining_capacity == 2

    def test_holiday_checked_first(self, resolver):
        # No Wednesday window id matches, but the holiday answer wins
        check = resolver.check_availability("V1", CHRISTMAS, "SAT-1000")
        assert check.reason == ErrorKind.HOLIDAY
        assert not check.admissible

    def test_exclude_booking(self, resolver, ledger):
        booking = ledger.create("V1", SATURDAY, "SAT-1000")
        check = resolver.check_availability("V1", SATURDAY, "SAT-1000", exclude_booking_id=booking.id)
        assert check.admissible

    def test_uses_current_template_capacity(self, resolver, ledger, calendar):
        ledger.create("V1", SATURDAY, "SAT-1000")
        stale = calendar.get_window("SAT-1000")
        calendar.configure_window(make_window("SAT-1000", 5, "10:00", "11:00", capacity=2))
        assert resolver.check_availability("V1", SATURDAY, stale).admissible


class TestValidation:
    def test_blank_resource(self, resolver):
        with pytest.raises(ValidationError, match="resource id is required"):
            resolver.check_availability("  ", SATURDAY, "SAT-1000")

    def test_unknown_window(self, resolver):
        with pytest.raises(ValidationError, match="Unknown time window"):
            resolver.check_availability("V1", SATURDAY, "SAT-0700")

    def test_wrong_day_of_week(self, resolver):
        with pytest.raises(ValidationError, match="runs on Saturday"):
            resolver.check_availability("V1", MONDAY, "SAT-1000")

    def test_inactive_window(self, resolver, calendar):
        calendar.configure_window(make_window("SAT-1000", 5, "10:00", "11:00", active=False))
        with pytest.raises(ValidationError, match="not active"):
            resolver.check_availability("V1", SATURDAY, "SAT-1000")


class TestEnsureAdmissible:
    def test_raises_holiday(self, resolver):
        with pytest.raises(HolidayError):
            resolver.ensure_admissible("V1", CHRISTMAS, "WED-0900")

    def test_raises_slot_full(self, resolver, ledger):
        ledger.create("V1", SATURDAY, "SAT-1000")
        with pytest.raises(SlotFullError, match="no longer available") as exc_info:
            resolver.ensure_admissible("V1", SATURDAY, "SAT-1000")
        assert exc_info.value.details["window_id"] == "SAT-1000"

    def test_returns_check_when_open(self, resolver):
        check = resolver.ensure_admissible("V1", MONDAY, "MON-1000")
        assert check.remaining_capacity == 2
