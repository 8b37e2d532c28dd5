"""
Recurring availability templates and holiday blackouts.

Answers two questions for the rest of the engine: which time windows exist
on a given day of the week, and whether a date is blacked out. Every answer
is read straight from the record store, so a holiday blocks new bookings as
soon as it is saved.
"""

from datetime import date
from typing import Optional

from scheduling.errors import ValidationError
from scheduling.logging_context import get_request_logger
from scheduling.schemas.slot_schema import Holiday, TimeWindow
from scheduling.store.base import RecordStore

logger = get_request_logger(__name__)


class SlotCalendar:
    """Read path over time-window templates and holidays, plus config-time validation."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def windows_for(self, day_of_week: int) -> list[TimeWindow]:
        """Active windows for a day of week, ordered by start time. Empty if none configured."""
        return [w for w in self._store.list_windows(day_of_week) if w.active]

    def windows_on(self, day: date) -> list[TimeWindow]:
        return self.windows_for(day.weekday())

    def get_window(self, window_id: str) -> Optional[TimeWindow]:
        """Current template for ``window_id``, including inactive ones."""
        return self._store.get_window(window_id)

    def is_holiday(self, day: date) -> bool:
        return self.holiday_on(day) is not None

    def holiday_on(self, day: date) -> Optional[Holiday]:
        """Return the first active holiday covering ``day``, if any."""
        for holiday in self._store.list_holidays():
            if holiday.covers(day):
                return holiday
        return None

    def holidays_between(self, start: date, end: date) -> list[tuple[Holiday, date, date]]:
        """Holiday occurrences intersecting ``[start, end)`` as (holiday, first, last) triples."""
        occurrences = []
        for holiday in self._store.list_holidays():
            for first, last in holiday.occurrences_between(start, end):
                occurrences.append((holiday, first, last))
        return sorted(occurrences, key=lambda item: (item[1], item[0].id))

    # --- Administrative configuration ---

    def configure_window(self, window: TimeWindow) -> TimeWindow:
        """
        Save a window template after checking it against its day's other windows.

        Raises:
            ValidationError: If an active window on the same day overlaps it.
        """
        if window.active:
            for existing in self.windows_for(window.day_of_week):
                if existing.id != window.id and existing.overlaps(window):
                    raise ValidationError(
                        f"Window {window.id} ({window.describe()}) overlaps "
                        f"{existing.id} ({existing.describe()})",
                        window_id=window.id,
                        overlaps=existing.id,
                    )
        saved = self._store.save_window(window)
        logger.info("Time window configured: %s %s cap=%d", saved.id, saved.describe(), saved.capacity)
        return saved

    def configure_holiday(self, holiday: Holiday) -> Holiday:
        saved = self._store.save_holiday(holiday)
        logger.info(
            "Holiday saved: %s (%s to %s%s)",
            saved.label or saved.id, saved.start_date, saved.last_date,
            ", recurring" if saved.recurring else "",
        )
        return saved
