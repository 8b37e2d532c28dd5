"""
Per-date availability for a "choose a time" screen.

Combines the slot calendar's windows with the conflict resolver's current
occupancy. Results are recomputed on every call since capacity changes with
every booking. Full windows are reported with zero remaining capacity
rather than dropped, so the UI can show them as fully booked.
"""

from datetime import date, timedelta
from typing import Iterator, Optional

from scheduling.engine.conflict_resolver import ConflictResolver
from scheduling.engine.slot_calendar import SlotCalendar
from scheduling.logging_context import get_request_logger
from scheduling.schemas.booking_schema import AvailabilitySlot
from scheduling.schemas.slot_schema import TimeWindow

logger = get_request_logger(__name__)


def _to_slot(window: TimeWindow, day: date, remaining: int) -> AvailabilitySlot:
    return AvailabilitySlot(
        window_id=window.id,
        date=day,
        start=window.start,
        end=window.end,
        capacity=window.capacity,
        remaining_capacity=remaining,
    )


class AvailabilityPlanner:
    """Lists every window on a date with its remaining capacity for one resource."""

    def __init__(self, calendar: SlotCalendar, resolver: ConflictResolver) -> None:
        self._calendar = calendar
        self._resolver = resolver

    def iter_availability(
        self,
        resource_id: str,
        day: date,
        exclude_booking_id: Optional[str] = None,
    ) -> Iterator[AvailabilitySlot]:
        """
        Yield one AvailabilitySlot per window on ``day``, in start-time order.

        Yields nothing on a holiday. Each call starts a fresh computation.
        """
        if self._calendar.is_holiday(day):
            logger.debug("No availability for %s on %s: holiday", resource_id, day)
            return

        for window in self._calendar.windows_on(day):
            check = self._resolver.check_availability(resource_id, day, window, exclude_booking_id)
            yield _to_slot(check.window or window, day, check.remaining_capacity)

    def get_availability(self, resource_id: str, day: date) -> list[AvailabilitySlot]:
        return list(self.iter_availability(resource_id, day))

    def find_alternatives(
        self,
        resource_id: str,
        day: date,
        days_ahead: int = 7,
        limit: int = 5,
        skip_window_id: Optional[str] = None,
    ) -> list[AvailabilitySlot]:
        """
        Suggest open slots for a rejected request.

        Remaining open windows on ``day`` come first, then open windows on the
        following ``days_ahead`` days, up to ``limit`` suggestions.
        """
        suggestions: list[AvailabilitySlot] = []
        if limit <= 0:
            return suggestions

        for offset in range(days_ahead + 1):
            candidate_day = day + timedelta(days=offset)
            for slot in self.iter_availability(resource_id, candidate_day):
                if slot.is_full or (offset == 0 and slot.window_id == skip_window_id):
                    continue
                suggestions.append(slot)
                if len(suggestions) >= limit:
                    return suggestions
        return suggestions
