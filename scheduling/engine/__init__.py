from scheduling.engine.availability_planner import AvailabilityPlanner
from scheduling.engine.booking_ledger import BookingLedger, Transition
from scheduling.engine.calendar_aggregator import CalendarAggregator
from scheduling.engine.conflict_resolver import AvailabilityCheck, ConflictResolver
from scheduling.engine.slot_calendar import SlotCalendar

__all__ = [
    "SlotCalendar",
    "ConflictResolver",
    "AvailabilityCheck",
    "BookingLedger",
    "Transition",
    "AvailabilityPlanner",
    "CalendarAggregator",
]
