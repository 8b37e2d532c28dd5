"""Calendar feed models: entries, filters, per-day summaries, and tasks."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from scheduling.schemas.booking_schema import BookingStatus


class EntryKind(str, Enum):
    HOLIDAY = "holiday"
    BOOKING = "booking"
    TASK = "task"


# Tie-break order for entries starting at the same instant
KIND_PRIORITY: dict[EntryKind, int] = {
    EntryKind.HOLIDAY: 0,
    EntryKind.BOOKING: 1,
    EntryKind.TASK: 2,
}


class CalendarView(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class Task(BaseModel):
    """An internal task or event record from the task feed."""

    id: str
    title: str
    start: AwareDatetime
    end: AwareDatetime
    all_day: bool = False
    location: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def _end_after_start(self) -> "Task":
        if self.end < self.start:
            raise ValueError(f"Task {self.id} ends before it starts")
        return self


class CalendarEntry(BaseModel):
    """One displayable calendar item. Produced fresh per request, never stored."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: EntryKind
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    status: Optional[BookingStatus] = None
    resource_id: Optional[str] = None
    color: str = "#6b7280"
    description: Optional[str] = None


class CalendarFilters(BaseModel):
    """Optional narrowing of a calendar request. Empty filters show everything active."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    include_kinds: Optional[frozenset[EntryKind]] = None
    exclude_kinds: frozenset[EntryKind] = frozenset()
    statuses: Optional[frozenset[BookingStatus]] = None
    resource_ids: Optional[frozenset[str]] = None

    def wants(self, kind: EntryKind) -> bool:
        if kind in self.exclude_kinds:
            return False
        return self.include_kinds is None or kind in self.include_kinds


class CalendarDay(BaseModel):
    """Summary of a single date in a calendar view."""

    date: date
    is_holiday: bool = False
    is_weekend: bool = False
    booking_count: int = 0
    window_count: int = 0
    entries: list[CalendarEntry] = Field(default_factory=list)
