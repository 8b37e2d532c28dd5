"""Recurring availability templates and holiday blackouts."""

from datetime import date, time, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class TimeWindow(BaseModel):
    """A recurring bookable interval on one day of the week."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    day_of_week: int = Field(ge=0, le=6)
    start: time
    end: time
    capacity: int = Field(default=1, ge=1)
    active: bool = True
    label: Optional[str] = None

    @model_validator(mode="after")
    def _start_before_end(self) -> "TimeWindow":
        if self.start >= self.end:
            raise ValueError(
                f"Window {self.id} must start before it ends "
                f"({self.start:%H:%M} >= {self.end:%H:%M})"
            )
        return self

    def overlaps(self, other: "TimeWindow") -> bool:
        return (
            self.day_of_week == other.day_of_week
            and self.start < other.end
            and other.start < self.end
        )

    def describe(self) -> str:
        return f"{DAY_NAMES[self.day_of_week]} {self.start:%H:%M}-{self.end:%H:%M}"


class Holiday(BaseModel):
    """
    A date or inclusive date range on which nothing can be booked.

    Recurring holidays start on the same month/day every year and last the
    same number of days; the range may wrap the year end (e.g. Dec 31 - Jan 1).
    A Feb 29 start only recurs in leap years.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    start_date: date
    end_date: Optional[date] = None
    label: Optional[str] = None
    recurring: bool = False
    active: bool = True

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "Holiday":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError(f"Holiday {self.id} ends before it starts")
        return self

    @property
    def last_date(self) -> date:
        return self.end_date or self.start_date

    @property
    def span_days(self) -> int:
        return (self.last_date - self.start_date).days

    def covers(self, day: date) -> bool:
        """
        True if ``day`` falls inside this holiday (inclusive bounds).

        Derived from ``occurrences_between`` so blocking and calendar display
        always agree, including recurring ranges that cross Feb 29.
        """
        return bool(self.occurrences_between(day, day + timedelta(days=1)))

    def occurrences_between(self, start: date, end: date) -> list[tuple[date, date]]:
        """Return inclusive (first, last) date ranges intersecting ``[start, end)``."""
        if not self.active or start >= end:
            return []

        if not self.recurring:
            candidates = [(self.start_date, self.last_date)]
        else:
            candidates = []
            for year in range(start.year - 1, end.year + 1):
                try:
                    first = self.start_date.replace(year=year)
                except ValueError:
                    # Feb 29 anchor in a non-leap year
                    continue
                candidates.append((first, first + timedelta(days=self.span_days)))

        return [(first, last) for first, last in candidates if first < end and last >= start]
