from scheduling.schemas.booking_schema import (
    ACTIVE_STATUSES,
    AvailabilityResponse,
    AvailabilitySlot,
    Booking,
    BookingKind,
    BookingResponse,
    BookingStatus,
    CreateBookingRequest,
    StatusChange,
    UpdateBookingStatusRequest,
)
from scheduling.schemas.calendar_schema import (
    CalendarDay,
    CalendarEntry,
    CalendarFilters,
    CalendarView,
    EntryKind,
    Task,
)
from scheduling.schemas.slot_schema import Holiday, TimeWindow

__all__ = [
    "ACTIVE_STATUSES",
    "AvailabilityResponse",
    "AvailabilitySlot",
    "Booking",
    "BookingKind",
    "BookingResponse",
    "BookingStatus",
    "CreateBookingRequest",
    "StatusChange",
    "UpdateBookingStatusRequest",
    "CalendarDay",
    "CalendarEntry",
    "CalendarFilters",
    "CalendarView",
    "EntryKind",
    "Task",
    "Holiday",
    "TimeWindow",
]
