"""
Narrow record-store interface the scheduling core depends on.

The core never talks to a concrete database client. Any backend that can
offer get/list/insert, a conditional update, and a per-slot lock can host
the booking ledger; implementations raise StoreFailureError when the backend
is unreachable.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import ContextManager, Iterable, Optional

from scheduling.schemas.booking_schema import Booking, BookingStatus
from scheduling.schemas.slot_schema import Holiday, TimeWindow


class RecordStore(ABC):
    """Persistence for time windows, holidays, and bookings."""

    # --- Templates ---

    @abstractmethod
    def get_window(self, window_id: str) -> Optional[TimeWindow]: ...

    @abstractmethod
    def list_windows(self, day_of_week: Optional[int] = None) -> list[TimeWindow]: ...

    @abstractmethod
    def save_window(self, window: TimeWindow) -> TimeWindow: ...

    # --- Holidays ---

    @abstractmethod
    def list_holidays(self) -> list[Holiday]: ...

    @abstractmethod
    def save_holiday(self, holiday: Holiday) -> Holiday: ...

    # --- Bookings ---

    @abstractmethod
    def get_booking(self, booking_id: str) -> Optional[Booking]: ...

    @abstractmethod
    def list_bookings(
        self,
        *,
        resource_id: Optional[str] = None,
        window_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        statuses: Optional[Iterable[BookingStatus]] = None,
    ) -> list[Booking]:
        """List bookings matching every given filter; dates select ``[start_date, end_date)``."""

    @abstractmethod
    def count_active(
        self,
        resource_id: str,
        day: date,
        window_id: str,
        exclude_booking_id: Optional[str] = None,
    ) -> int:
        """Count PENDING/CONFIRMED bookings occupying one slot."""

    @abstractmethod
    def insert_booking(self, booking: Booking) -> Booking: ...

    @abstractmethod
    def update_booking_if(self, booking: Booking, expected_version: int) -> Optional[Booking]:
        """
        Replace a stored booking only if its version still equals ``expected_version``.

        Returns the stored booking (with its version bumped), or None when the
        booking changed underneath the caller or no longer exists.
        """

    @abstractmethod
    def slot_lock(self, resource_id: str, day: date, window_id: str) -> ContextManager[None]:
        """
        Exclusive lock over one (resource, date, window) slot.

        Every check-and-write against a slot's capacity must run while holding
        this lock so concurrent requests cannot both see the last free place.
        """
