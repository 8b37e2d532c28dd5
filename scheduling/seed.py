"""Default dealership opening templates and recurring holidays."""

import logging
from datetime import date, time

from scheduling.engine.slot_calendar import SlotCalendar
from scheduling.schemas.slot_schema import Holiday, TimeWindow

logger = logging.getLogger(__name__)

WEEKDAYS = range(0, 5)  # Monday .. Friday
OPENING_HOURS = [9, 10, 11, 12, 14, 15, 16]  # lunch break at 13:00
DEFAULT_CAPACITY = 3
LUNCHTIME_CAPACITY = 2

DEFAULT_HOLIDAYS: list[Holiday] = [
    Holiday(id="new-year", start_date=date(2024, 1, 1), label="New Year's Day", recurring=True),
    Holiday(id="christmas", start_date=date(2024, 12, 25), label="Christmas Day", recurring=True),
]


def default_windows() -> list[TimeWindow]:
    day_codes = ["MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"]
    return [
        TimeWindow(
            id=f"{day_codes[day]}-{hour:02d}00",
            day_of_week=day,
            start=time(hour, 0),
            end=time(hour + 1, 0),
            capacity=LUNCHTIME_CAPACITY if hour == 12 else DEFAULT_CAPACITY,
        )
        for day in WEEKDAYS
        for hour in OPENING_HOURS
    ]


def seed_defaults(calendar: SlotCalendar) -> None:
    """Configure the default weekday windows and holidays through the slot calendar."""
    windows = default_windows()
    for window in windows:
        calendar.configure_window(window)
    for holiday in DEFAULT_HOLIDAYS:
        calendar.configure_holiday(holiday)
    logger.info("Seeded %d windows and %d holidays", len(windows), len(DEFAULT_HOLIDAYS))
