"""Shared test fixtures and helpers."""

from datetime import date, time
from typing import Optional

import pytest

from scheduling.config import AppConfig, StoreConfig
from scheduling.engine.availability_planner import AvailabilityPlanner
from scheduling.engine.booking_ledger import BookingLedger
from scheduling.engine.calendar_aggregator import CalendarAggregator
from scheduling.engine.conflict_resolver import ConflictResolver
from scheduling.engine.slot_calendar import SlotCalendar
from scheduling.schemas.slot_schema import Holiday, TimeWindow
from scheduling.service import SchedulingService
from scheduling.store.memory import InMemoryRecordStore
from scheduling.tools.notifications import OutboxNotificationSender
from scheduling.tools.permissions import Actor, Role
from scheduling.tools.resources import InMemoryResourceDirectory
from scheduling.tools.tasks import InMemoryTaskFeed

SATURDAY = date(2024, 3, 2)
MONDAY = date(2024, 3, 4)
CHRISTMAS = date(2024, 12, 25)


def make_window(
    window_id: str,
    day_of_week: int,
    start: str,
    end: str,
    capacity: int = 1,
    active: bool = True,
) -> TimeWindow:
    """Helper to create a TimeWindow from HH:MM strings."""
    sh, sm = (int(p) for p in start.split(":"))
    eh, em = (int(p) for p in end.split(":"))
    return TimeWindow(
        id=window_id,
        day_of_week=day_of_week,
        start=time(sh, sm),
        end=time(eh, em),
        capacity=capacity,
        active=active,
    )


def fast_retry_config(attempts: int = 3) -> AppConfig:
    """AppConfig with zero retry delay so store-failure tests run instantly."""
    store = StoreConfig.__new__(StoreConfig)
    object.__setattr__(store, "retry_attempts", attempts)
    object.__setattr__(store, "retry_base_delay_sec", 0.0)

    config = AppConfig()
    object.__setattr__(config, "store", store)
    return config


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def calendar(store):
    """
    Slot calendar seeded with:
      SAT-1000  Saturday 10:00-11:00, capacity 1
      SAT-1100  Saturday 11:00-12:00, capacity 2
      MON-0900  Monday 09:00-10:00, capacity 3
      MON-1000  Monday 10:00-11:00, capacity 2
      christmas 2024-12-25 (a Wednesday)
      WED-0900  Wednesday 09:00-10:00, capacity 2
    """
    cal = SlotCalendar(store)
    cal.configure_window(make_window("SAT-1000", 5, "10:00", "11:00", capacity=1))
    cal.configure_window(make_window("SAT-1100", 5, "11:00", "12:00", capacity=2))
    cal.configure_window(make_window("MON-0900", 0, "09:00", "10:00", capacity=3))
    cal.configure_window(make_window("MON-1000", 0, "10:00", "11:00", capacity=2))
    cal.configure_window(make_window("WED-0900", 2, "09:00", "10:00", capacity=2))
    cal.configure_holiday(Holiday(id="christmas", start_date=CHRISTMAS, label="Christmas Day"))
    return cal


@pytest.fixture
def resolver(calendar, store):
    return ConflictResolver(calendar, store)


@pytest.fixture
def notifier():
    return OutboxNotificationSender(sender="test@dealership.local", enabled=True)


@pytest.fixture
def ledger(store, resolver, notifier):
    return BookingLedger(store, resolver, notifier)


@pytest.fixture
def planner(calendar, resolver):
    return AvailabilityPlanner(calendar, resolver)


@pytest.fixture
def task_feed():
    return InMemoryTaskFeed()


@pytest.fixture
def aggregator(calendar, store, task_feed):
    return CalendarAggregator(
        calendar,
        store,
        task_feed,
        timezone_name="UTC",
        week_start_day=6,
        weekend_days=(4, 5),
    )


@pytest.fixture
def service(store, calendar, notifier, task_feed):
    # calendar fixture seeds the shared store before the service wraps it
    return SchedulingService(
        store,
        notifier=notifier,
        task_feed=task_feed,
        resources=InMemoryResourceDirectory(),
        config=fast_retry_config(),
    )


@pytest.fixture
def customer():
    return Actor(id="cust-1", role=Role.CUSTOMER)


@pytest.fixture
def staff():
    return Actor(id="staff-1", role=Role.STAFF)


@pytest.fixture
def manager():
    return Actor(id="mgr-1", role=Role.BRANCH_MANAGER)


def booking_payload(
    resource_id: str = "V1",
    day: date = SATURDAY,
    window_id: str = "SAT-1000",
    note: Optional[str] = None,
    **extra,
) -> dict:
    """Helper to build a CreateBooking payload."""
    payload = {"resource_id": resource_id, "date": day.isoformat(), "window_id": window_id}
    if note is not None:
        payload["note"] = note
    payload.update(extra)
    return payload
