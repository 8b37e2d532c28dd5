"""
Unified calendar feed for dashboard display.

Merges active bookings, holidays, and internal tasks for a day, week, or
month view into one list ordered by start instant. Entries starting at the
same instant are ordered holiday, booking, task. Filters are applied while
each source is fetched, before the merge. This is a pure read path.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from scheduling.config import settings
from scheduling.engine.slot_calendar import SlotCalendar
from scheduling.logging_context import get_request_logger
from scheduling.schemas.booking_schema import ACTIVE_STATUSES, Booking, BookingKind, BookingStatus
from scheduling.schemas.calendar_schema import (
    KIND_PRIORITY,
    CalendarDay,
    CalendarEntry,
    CalendarFilters,
    CalendarView,
    EntryKind,
)
from scheduling.schemas.slot_schema import TimeWindow
from scheduling.store.base import RecordStore
from scheduling.tools.tasks import TaskFeed
from scheduling.utils import daterange, start_of_next_month, start_of_week

logger = get_request_logger(__name__)

STATUS_COLORS: dict[BookingStatus, str] = {
    BookingStatus.PENDING: "#f59e0b",
    BookingStatus.CONFIRMED: "#10b981",
    BookingStatus.CANCELLED: "#ef4444",
    BookingStatus.COMPLETED: "#3b82f6",
}
HOLIDAY_COLOR = "#ef4444"
TASK_COLOR = "#6366f1"
DEFAULT_COLOR = "#6b7280"


def _sort_key(entry: CalendarEntry) -> tuple:
    return (entry.start, KIND_PRIORITY[entry.kind], entry.id)


class CalendarAggregator:
    """Builds CalendarEntry feeds and per-day summaries for a view window."""

    def __init__(
        self,
        calendar: SlotCalendar,
        store: RecordStore,
        task_feed: Optional[TaskFeed] = None,
        timezone_name: str = settings.scheduling.timezone,
        week_start_day: int = settings.scheduling.week_start_day,
        weekend_days: tuple[int, ...] = settings.scheduling.weekend_days,
    ) -> None:
        self._calendar = calendar
        self._store = store
        self._task_feed = task_feed
        self._tz: tzinfo = ZoneInfo(timezone_name)
        self._week_start_day = week_start_day
        self._weekend_days = frozenset(weekend_days)

    # --- Ranges ---

    def view_range(self, view: CalendarView, anchor: date) -> tuple[date, date]:
        """Return the ``[first, end)`` dates covered by ``view`` around ``anchor``."""
        if view == CalendarView.DAY:
            return anchor, anchor + timedelta(days=1)
        if view == CalendarView.WEEK:
            first = start_of_week(anchor, self._week_start_day)
            return first, first + timedelta(days=7)
        first = anchor.replace(day=1)
        return first, start_of_next_month(anchor)

    def instant(self, day: date, at: time = time.min) -> datetime:
        return datetime.combine(day, at, tzinfo=self._tz)

    def instant_range(self, view: CalendarView, anchor: date) -> tuple[datetime, datetime]:
        first, end = self.view_range(view, anchor)
        return self.instant(first), self.instant(end)

    # --- Feed ---

    def get_entries(
        self,
        view: CalendarView,
        anchor: date,
        filters: Optional[CalendarFilters] = None,
    ) -> list[CalendarEntry]:
        first, end = self.view_range(view, anchor)
        return self.get_entries_between(first, end, filters)

    def get_entries_between(
        self,
        first: date,
        end: date,
        filters: Optional[CalendarFilters] = None,
    ) -> list[CalendarEntry]:
        """Merged, sorted entries whose start lies in ``[first, end)``."""
        filters = filters or CalendarFilters()
        entries: list[CalendarEntry] = []

        if filters.wants(EntryKind.HOLIDAY):
            entries.extend(self._holiday_entries(first, end))
        if filters.wants(EntryKind.BOOKING):
            entries.extend(self._booking_entries(first, end, filters))
        if filters.wants(EntryKind.TASK) and self._task_feed is not None:
            entries.extend(self._task_entries(first, end))

        entries.sort(key=_sort_key)
        logger.debug("Calendar %s..%s: %d entries", first, end, len(entries))
        return entries

    def get_days(
        self,
        view: CalendarView,
        anchor: date,
        filters: Optional[CalendarFilters] = None,
    ) -> list[CalendarDay]:
        """One CalendarDay per date in the view, each with the entries touching it."""
        first, end = self.view_range(view, anchor)
        entries = self.get_entries_between(first, end, filters)

        days = []
        for day in daterange(first, end):
            day_start, day_end = self.instant(day), self.instant(day + timedelta(days=1))
            day_entries = [
                e for e in entries
                if e.start < day_end and (e.end > day_start or e.start >= day_start)
            ]
            days.append(
                CalendarDay(
                    date=day,
                    is_holiday=self._calendar.is_holiday(day),
                    is_weekend=day.weekday() in self._weekend_days,
                    booking_count=sum(1 for e in day_entries if e.kind == EntryKind.BOOKING),
                    window_count=len(self._calendar.windows_on(day)),
                    entries=day_entries,
                )
            )
        return days

    # --- Sources ---

    def _booking_entries(self, first: date, end: date, filters: CalendarFilters) -> list[CalendarEntry]:
        statuses = filters.statuses if filters.statuses is not None else ACTIVE_STATUSES
        bookings = self._store.list_bookings(start_date=first, end_date=end, statuses=statuses)
        if filters.resource_ids is not None:
            bookings = [b for b in bookings if b.resource_id in filters.resource_ids]

        windows: dict[str, Optional[TimeWindow]] = {}
        entries = []
        for booking in bookings:
            if booking.window_id not in windows:
                windows[booking.window_id] = self._calendar.get_window(booking.window_id)
            window = windows[booking.window_id]
            if window is None:
                logger.warning(
                    "Booking %s references missing window %s, not shown",
                    booking.id, booking.window_id,
                )
                continue
            entries.append(self._booking_entry(booking, window))
        return entries

    def _booking_entry(self, booking: Booking, window: TimeWindow) -> CalendarEntry:
        label = "Test drive" if booking.kind == BookingKind.TEST_DRIVE else "Service"
        return CalendarEntry(
            id=f"booking-{booking.id}",
            kind=EntryKind.BOOKING,
            title=f"{label} - {booking.resource_id}",
            start=self.instant(booking.date, window.start),
            end=self.instant(booking.date, window.end),
            status=booking.status,
            resource_id=booking.resource_id,
            color=STATUS_COLORS.get(booking.status, DEFAULT_COLOR),
            description=booking.note,
        )

    def _holiday_entries(self, first: date, end: date) -> list[CalendarEntry]:
        entries = []
        for holiday, occ_first, occ_last in self._calendar.holidays_between(first, end):
            shown_first = max(occ_first, first)
            shown_end = min(occ_last + timedelta(days=1), end)
            entries.append(
                CalendarEntry(
                    id=f"holiday-{holiday.id}-{occ_first.isoformat()}",
                    kind=EntryKind.HOLIDAY,
                    title=holiday.label or "Holiday",
                    start=self.instant(shown_first),
                    end=self.instant(shown_end),
                    all_day=True,
                    color=HOLIDAY_COLOR,
                )
            )
        return entries

    def _task_entries(self, first: date, end: date) -> list[CalendarEntry]:
        range_start, range_end = self.instant(first), self.instant(end)
        entries = []
        for task in self._task_feed.list_between(range_start, range_end):
            start, finish = self._localize(task.start), self._localize(task.end)
            if not (start < range_end and (finish > range_start or start >= range_start)):
                continue
            entries.append(
                CalendarEntry(
                    id=f"task-{task.id}",
                    kind=EntryKind.TASK,
                    title=task.title,
                    start=max(start, range_start),
                    end=min(finish, range_end),
                    all_day=task.all_day,
                    color=TASK_COLOR,
                    description=task.description,
                )
            )
        return entries

    def _localize(self, moment: datetime) -> datetime:
        return moment.astimezone(self._tz)
