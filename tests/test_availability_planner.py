"""Tests for per-date availability and alternative suggestions."""

from datetime import date, time, timedelta

from scheduling.schemas.slot_schema import Holiday
from tests.conftest import CHRISTMAS, MONDAY, SATURDAY


class TestGetAvailability:
    def test_lists_every_window(self, planner):
        slots = planner.get_availability("V1", SATURDAY)
        assert [(s.window_id, s.start, s.remaining_capacity) for s in slots] == [
            ("SAT-1000", time(10, 0), 1),
            ("SAT-1100", time(11, 0), 2),
        ]

    def test_full_window_reported_with_zero(self, planner, ledger):
        ledger.create("V1", SATURDAY, "SAT-1000")
        slots = {s.window_id: s for s in planner.get_availability("V1", SATURDAY)}
        assert slots["SAT-1000"].remaining_capacity == 0
        assert slots["SAT-1000"].is_full
        assert not slots["SAT-1100"].is_full

    def test_holiday_has_no_slots(self, planner):
        assert planner.get_availability("V1", CHRISTMAS) == []

    def test_day_without_templates(self, planner):
        assert planner.get_availability("V1", SATURDAY + timedelta(days=1)) == []

    def test_repeated_reads_are_identical(self, planner, ledger):
        ledger.create("V1", MONDAY, "MON-0900")
        first = planner.get_availability("V1", MONDAY)
        second = planner.get_availability("V1", MONDAY)
        assert first == second

    def test_reflects_new_holiday(self, planner, calendar):
        calendar.configure_holiday(Holiday(id="flood", start_date=MONDAY))
        assert planner.get_availability("V1", MONDAY) == []

    def test_iter_is_lazy_generator(self, planner):
        slots = planner.iter_availability("V1", SATURDAY)
        assert next(slots).window_id == "SAT-1000"


class TestFindAlternatives:
    def test_same_day_first(self, planner, ledger):
        ledger.create("V1", SATURDAY, "SAT-1000")
        alternatives = planner.find_alternatives("V1", SATURDAY, skip_window_id="SAT-1000")
        assert alternatives[0].window_id == "SAT-1100"
        assert alternatives[0].date == SATURDAY

    def test_following_days(self, planner):
        alternatives = planner.find_alternatives("V1", SATURDAY, days_ahead=2, skip_window_id="SAT-1000")
        assert [(a.date, a.window_id) for a in alternatives] == [
            (SATURDAY, "SAT-1100"),
            (MONDAY, "MON-0900"),
            (MONDAY, "MON-1000"),
        ]

    def test_limit(self, planner):
        assert len(planner.find_alternatives("V1", SATURDAY, days_ahead=7, limit=2)) == 2

    def test_zero_limit(self, planner):
        assert planner.find_alternatives("V1", SATURDAY, limit=0) == []

    def test_skips_holidays(self, planner, ledger):
        ledger.create("V1", date(2024, 12, 23), "MON-0900")
        alternatives = planner.find_alternatives("V1", date(2024, 12, 23), days_ahead=2, limit=10)
        assert all(a.date != CHRISTMAS for a in alternatives)
        assert ("MON-0900", 2) in [(a.window_id, a.remaining_capacity) for a in alternatives]
