"""Tests for window templates and holiday blackouts."""

from datetime import date, time, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from scheduling.engine.slot_calendar import SlotCalendar
from scheduling.errors import ValidationError
from scheduling.schemas.calendar_schema import CalendarView, EntryKind
from scheduling.schemas.slot_schema import Holiday
from scheduling.seed import DEFAULT_HOLIDAYS, default_windows, seed_defaults
from scheduling.utils import daterange
from tests.conftest import CHRISTMAS, MONDAY, SATURDAY, make_window


class TestWindowsFor:
    def test_saturday_windows_in_start_order(self, calendar):
        windows = calendar.windows_for(5)
        assert [w.id for w in windows] == ["SAT-1000", "SAT-1100"]

    def test_day_without_windows_is_empty(self, calendar):
        assert calendar.windows_for(6) == []

    def test_windows_on_uses_weekday(self, calendar):
        assert [w.id for w in calendar.windows_on(MONDAY)] == ["MON-0900", "MON-1000"]

    def test_inactive_windows_hidden(self, calendar):
        calendar.configure_window(make_window("SAT-1400", 5, "14:00", "15:00", active=False))
        assert "SAT-1400" not in [w.id for w in calendar.windows_for(5)]
        assert calendar.get_window("SAT-1400") is not None


class TestConfigureWindow:
    def test_overlapping_window_rejected(self, calendar):
        with pytest.raises(ValidationError, match="overlaps SAT-1000"):
            calendar.configure_window(make_window("SAT-1030", 5, "10:30", "11:30"))

    def test_adjacent_window_allowed(self, calendar):
        calendar.configure_window(make_window("SAT-1200", 5, "12:00", "13:00"))
        assert len(calendar.windows_for(5)) == 3

    def test_same_id_can_be_updated(self, calendar):
        calendar.configure_window(make_window("SAT-1000", 5, "10:00", "11:00", capacity=4))
        assert calendar.get_window("SAT-1000").capacity == 4

    def test_inactive_window_may_overlap(self, calendar):
        calendar.configure_window(make_window("SAT-1015", 5, "10:15", "10:45", active=False))
        assert calendar.get_window("SAT-1015").active is False

    def test_start_must_precede_end(self):
        with pytest.raises(PydanticValidationError, match="must start before it ends"):
            make_window("BAD", 1, "11:00", "10:00")

    def test_capacity_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            make_window("BAD", 1, "10:00", "11:00", capacity=0)


class TestHolidays:
    def test_single_day_holiday(self, calendar):
        assert calendar.is_holiday(CHRISTMAS)
        assert not calendar.is_holiday(date(2024, 12, 24))

    def test_holiday_blocks_immediately(self, calendar):
        assert not calendar.is_holiday(SATURDAY)
        calendar.configure_holiday(Holiday(id="closure", start_date=SATURDAY))
        assert calendar.is_holiday(SATURDAY)

    def test_inclusive_range(self, calendar):
        calendar.configure_holiday(
            Holiday(id="stocktake", start_date=date(2024, 6, 10), end_date=date(2024, 6, 12))
        )
        assert calendar.is_holiday(date(2024, 6, 10))
        assert calendar.is_holiday(date(2024, 6, 12))
        assert not calendar.is_holiday(date(2024, 6, 13))

    def test_inactive_holiday_does_not_block(self, calendar):
        calendar.configure_holiday(Holiday(id="christmas", start_date=CHRISTMAS, active=False))
        assert not calendar.is_holiday(CHRISTMAS)

    def test_recurring_holiday_repeats(self, calendar):
        calendar.configure_holiday(Holiday(id="new-year", start_date=date(2024, 1, 1), recurring=True))
        assert calendar.is_holiday(date(2027, 1, 1))
        assert not calendar.is_holiday(date(2027, 1, 2))

    def test_recurring_range_wrapping_year_end(self):
        holiday = Holiday(
            id="year-end", start_date=date(2024, 12, 31), end_date=date(2025, 1, 1), recurring=True,
        )
        assert holiday.covers(date(2030, 12, 31))
        assert holiday.covers(date(2031, 1, 1))
        assert not holiday.covers(date(2031, 1, 2))

    def test_end_before_start_rejected(self):
        with pytest.raises(PydanticValidationError, match="ends before it starts"):
            Holiday(id="bad", start_date=date(2024, 5, 2), end_date=date(2024, 5, 1))

    def test_holiday_on_returns_record(self, calendar):
        assert calendar.holiday_on(CHRISTMAS).label == "Christmas Day"
        assert calendar.holiday_on(SATURDAY) is None

    def test_holidays_between_recurring(self, calendar):
        calendar.configure_holiday(Holiday(id="new-year", start_date=date(2024, 1, 1), recurring=True))
        found = calendar.holidays_between(date(2025, 12, 1), date(2026, 2, 1))
        assert [(h.id, first) for h, first, _ in found] == [
            ("new-year", date(2026, 1, 1)),
        ]

    def test_holidays_between_excludes_end(self, calendar):
        assert calendar.holidays_between(date(2024, 12, 1), CHRISTMAS) == []


class TestSeed:
    def test_default_windows_skip_lunch_hour(self):
        windows = default_windows()
        starts = {w.start for w in windows if w.day_of_week == 0}
        assert time(13, 0) not in starts
        assert len(starts) == 7

    def test_default_windows_weekdays_only(self):
        assert {w.day_of_week for w in default_windows()} == {0, 1, 2, 3, 4}

    def test_noon_window_has_reduced_capacity(self):
        by_id = {w.id: w for w in default_windows()}
        assert by_id["TUE-1200"].capacity == 2
        assert by_id["TUE-1000"].capacity == 3

    def test_seed_defaults_populates_store(self, store):
        calendar = SlotCalendar(store)
        seed_defaults(calendar)
        assert len(calendar.windows_for(0)) == 7
        assert calendar.windows_for(5) == []
        assert calendar.is_holiday(date(2031, 12, 25))
        assert len(store.list_holidays()) == len(DEFAULT_HOLIDAYS)


class TestRecurringAcrossLeapDay:
    def test_leap_year_range_blocks_what_calendar_shows(self, calendar, aggregator):
        calendar.configure_holiday(
            Holiday(id="stocktake", start_date=date(2024, 2, 28), end_date=date(2024, 3, 1), recurring=True)
        )
        # In 2025 the three-day closure runs Feb 28 - Mar 2
        assert calendar.is_holiday(date(2025, 3, 2))
        assert not calendar.is_holiday(date(2025, 3, 3))

        days = {d.date: d for d in aggregator.get_days(CalendarView.MONTH, date(2025, 3, 1))}
        assert days[date(2025, 3, 2)].is_holiday
        assert [e.kind for e in days[date(2025, 3, 2)].entries] == [EntryKind.HOLIDAY]
        assert not days[date(2025, 3, 3)].is_holiday

    def test_non_leap_range_in_leap_year(self, calendar):
        calendar.configure_holiday(
            Holiday(id="stocktake", start_date=date(2025, 2, 28), end_date=date(2025, 3, 1), recurring=True)
        )
        assert calendar.is_holiday(date(2028, 2, 29))
        assert not calendar.is_holiday(date(2028, 3, 1))

    def test_blocking_matches_calendar_every_day(self, calendar):
        calendar.configure_holiday(
            Holiday(id="stocktake", start_date=date(2024, 2, 28), end_date=date(2024, 3, 1), recurring=True)
        )
        for day in daterange(date(2025, 2, 20), date(2028, 3, 10)):
            shown = bool(calendar.holidays_between(day, day + timedelta(days=1)))
            assert calendar.is_holiday(day) == shown, day
