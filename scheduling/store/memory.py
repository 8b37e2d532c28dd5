"""
Thread-safe in-memory record store.

Used by tests, the command line demo, and single-process deployments. A
shared database backend would implement the same RecordStore interface with
a row lock or a conditional insert in place of the per-slot mutexes below.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Iterator, Optional

from scheduling.schemas.booking_schema import ACTIVE_STATUSES, Booking, BookingStatus
from scheduling.schemas.slot_schema import Holiday, TimeWindow
from scheduling.store.base import RecordStore

logger = logging.getLogger(__name__)

SlotKey = tuple[str, date, str]


@dataclass
class _SlotLock:
    """A slot mutex plus the number of callers holding or waiting on it."""

    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


class InMemoryRecordStore(RecordStore):
    """
    Dict-backed store guarded by one data lock plus one lock per slot.

    Slot locks exist only while some caller holds or waits on them, so the
    lock map stays as small as the number of slots in contention.

    Reads copy records out under the data lock, so callers always see a
    consistent snapshot and can never mutate stored state by accident.
    """

    def __init__(self) -> None:
        self._data_lock = threading.RLock()
        self._windows: dict[str, TimeWindow] = {}
        self._holidays: dict[str, Holiday] = {}
        self._bookings: dict[str, Booking] = {}
        self._slot_locks: dict[SlotKey, _SlotLock] = {}

    # --- Templates ---

    def get_window(self, window_id: str) -> Optional[TimeWindow]:
        with self._data_lock:
            return self._windows.get(window_id)

    def list_windows(self, day_of_week: Optional[int] = None) -> list[TimeWindow]:
        with self._data_lock:
            windows = list(self._windows.values())
        if day_of_week is not None:
            windows = [w for w in windows if w.day_of_week == day_of_week]
        return sorted(windows, key=lambda w: (w.day_of_week, w.start, w.id))

    def save_window(self, window: TimeWindow) -> TimeWindow:
        with self._data_lock:
            self._windows[window.id] = window
        logger.debug("Window saved: %s (%s)", window.id, window.describe())
        return window

    # --- Holidays ---

    def list_holidays(self) -> list[Holiday]:
        with self._data_lock:
            return sorted(self._holidays.values(), key=lambda h: (h.start_date, h.id))

    def save_holiday(self, holiday: Holiday) -> Holiday:
        with self._data_lock:
            self._holidays[holiday.id] = holiday
        return holiday

    # --- Bookings ---

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        with self._data_lock:
            booking = self._bookings.get(booking_id)
            return booking.model_copy(deep=True) if booking else None

    def list_bookings(
        self,
        *,
        resource_id: Optional[str] = None,
        window_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        statuses: Optional[Iterable[BookingStatus]] = None,
    ) -> list[Booking]:
        wanted = frozenset(statuses) if statuses is not None else None
        with self._data_lock:
            matches = [
                b.model_copy(deep=True)
                for b in self._bookings.values()
                if (resource_id is None or b.resource_id == resource_id)
                and (window_id is None or b.window_id == window_id)
                and (start_date is None or b.date >= start_date)
                and (end_date is None or b.date < end_date)
                and (wanted is None or b.status in wanted)
            ]
        return sorted(matches, key=lambda b: (b.date, b.created_at, b.id))

    def count_active(
        self,
        resource_id: str,
        day: date,
        window_id: str,
        exclude_booking_id: Optional[str] = None,
    ) -> int:
        with self._data_lock:
            return sum(
                1
                for b in self._bookings.values()
                if b.resource_id == resource_id
                and b.date == day
                and b.window_id == window_id
                and b.status in ACTIVE_STATUSES
                and b.id != exclude_booking_id
            )

    def insert_booking(self, booking: Booking) -> Booking:
        with self._data_lock:
            if booking.id in self._bookings:
                raise KeyError(f"Booking {booking.id} already exists")
            self._bookings[booking.id] = booking.model_copy(deep=True)
        return booking.model_copy(deep=True)

    def update_booking_if(self, booking: Booking, expected_version: int) -> Optional[Booking]:
        with self._data_lock:
            current = self._bookings.get(booking.id)
            if current is None or current.version != expected_version:
                return None
            stored = booking.model_copy(update={"version": expected_version + 1}, deep=True)
            self._bookings[booking.id] = stored
            return stored.model_copy(deep=True)

    @contextmanager
    def slot_lock(self, resource_id: str, day: date, window_id: str) -> Iterator[None]:
        key = (resource_id, day, window_id)
        with self._data_lock:
            entry = self._slot_locks.get(key)
            if entry is None:
                entry = self._slot_locks[key] = _SlotLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._data_lock:
                entry.holders -= 1
                if entry.holders == 0 and self._slot_locks.get(key) is entry:
                    del self._slot_locks[key]

    def reset(self) -> None:
        """Clear all records. Used by test fixtures for isolation."""
        with self._data_lock:
            self._windows.clear()
            self._holidays.clear()
            self._bookings.clear()
            self._slot_locks.clear()
