"""
Admissibility checks for prospective bookings.

The resolver is the one place the capacity rule lives: a slot admits a new
booking only while its active (PENDING/CONFIRMED) count is below the
window's capacity, and never on a holiday. It always re-reads the current
window template instead of trusting the caller's copy.

The resolver itself does not lock. BookingLedger runs it inside the store's
per-slot lock so the count and the following write form one unit.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from scheduling.engine.slot_calendar import SlotCalendar
from scheduling.errors import ErrorKind, HolidayError, SlotFullError, ValidationError
from scheduling.logging_context import get_request_logger
from scheduling.schemas.slot_schema import DAY_NAMES, TimeWindow
from scheduling.store.base import RecordStore

logger = get_request_logger(__name__)

WindowRef = Union[TimeWindow, str]


@dataclass(frozen=True)
class AvailabilityCheck:
    """Outcome of checking one slot."""

    admissible: bool
    remaining_capacity: int
    active_count: int = 0
    window: Optional[TimeWindow] = None
    reason: Optional[ErrorKind] = None


class ConflictResolver:
    """Decides whether a (resource, date, window) slot can take another booking."""

    def __init__(self, calendar: SlotCalendar, store: RecordStore) -> None:
        self._calendar = calendar
        self._store = store

    def resolve_window(self, day: date, window: WindowRef) -> TimeWindow:
        """
        Look up the current template for ``window`` and check it applies to ``day``.

        Raises:
            ValidationError: Unknown or inactive window, or wrong day of week.
        """
        window_id = window.id if isinstance(window, TimeWindow) else window
        current = self._calendar.get_window(window_id)
        if current is None:
            raise ValidationError(f"Unknown time window '{window_id}'", window_id=window_id)
        if not current.active:
            raise ValidationError(f"Time window '{window_id}' is not active", window_id=window_id)
        if current.day_of_week != day.weekday():
            raise ValidationError(
                f"Time window '{window_id}' runs on {DAY_NAMES[current.day_of_week]}, "
                f"but {day.isoformat()} is a {DAY_NAMES[day.weekday()]}",
                window_id=window_id,
                date=day.isoformat(),
            )
        return current

    def check_availability(
        self,
        resource_id: str,
        day: date,
        window: WindowRef,
        exclude_booking_id: Optional[str] = None,
    ) -> AvailabilityCheck:
        """
        Check whether one more booking fits in the slot.

        Args:
            resource_id: Vehicle or service bay being reserved.
            day: Calendar date of the booking.
            window: Window template (or its id) on that date.
            exclude_booking_id: Booking to ignore, so a booking being
                rescheduled does not conflict with itself.

        Raises:
            ValidationError: Missing resource, or a window that does not
                belong to ``day``'s day of week.
        """
        if not resource_id or not resource_id.strip():
            raise ValidationError("A resource id is required")

        if self._calendar.is_holiday(day):
            logger.debug("Slot check %s %s: holiday", resource_id, day)
            return AvailabilityCheck(admissible=False, remaining_capacity=0, reason=ErrorKind.HOLIDAY)

        current = self.resolve_window(day, window)
        count = self._store.count_active(resource_id, day, current.id, exclude_booking_id)

        if count >= current.capacity:
            logger.debug(
                "Slot check %s %s %s: full (%d/%d)",
                resource_id, day, current.id, count, current.capacity,
            )
            return AvailabilityCheck(
                admissible=False,
                remaining_capacity=0,
                active_count=count,
                window=current,
                reason=ErrorKind.SLOT_FULL,
            )

        return AvailabilityCheck(
            admissible=True,
            remaining_capacity=current.capacity - count,
            active_count=count,
            window=current,
        )

    def ensure_admissible(
        self,
        resource_id: str,
        day: date,
        window: WindowRef,
        exclude_booking_id: Optional[str] = None,
    ) -> AvailabilityCheck:
        """Like check_availability, but raises HolidayError / SlotFullError on rejection."""
        check = self.check_availability(resource_id, day, window, exclude_booking_id)
        if check.reason == ErrorKind.HOLIDAY:
            raise HolidayError(f"{day.isoformat()} is not available for bookings", date=day.isoformat())
        if check.reason == ErrorKind.SLOT_FULL:
            window_id = check.window.id if check.window else str(window)
            raise SlotFullError(
                f"Slot {window_id} on {day.isoformat()} is no longer available for {resource_id}",
                resource_id=resource_id,
                date=day.isoformat(),
                window_id=window_id,
            )
        return check
