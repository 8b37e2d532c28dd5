"""Booking and availability data models."""

from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from scheduling.errors import ErrorKind


class BookingKind(str, Enum):
    TEST_DRIVE = "test_drive"
    SERVICE = "service"


class BookingStatus(str, Enum):
    """Lifecycle status of a booking. COMPLETED and CANCELLED are terminal."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StatusChange(BaseModel):
    """Audit entry recorded every time a booking changes status or slot."""

    status: BookingStatus
    changed_at: datetime = Field(default_factory=utcnow)
    actor_id: Optional[str] = None
    note: Optional[str] = None


class Booking(BaseModel):
    """A reservation of one time window on one date for one resource."""

    id: str
    resource_id: str
    kind: BookingKind
    date: date
    window_id: str
    status: BookingStatus = BookingStatus.PENDING
    note: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    version: int = 1
    history: list[StatusChange] = Field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


class CreateBookingRequest(BaseModel):
    """Validated CreateBooking input. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    resource_id: str = Field(min_length=1)
    date: date
    window_id: str = Field(min_length=1)
    kind: BookingKind = BookingKind.TEST_DRIVE
    note: Optional[str] = Field(default=None, max_length=2000)


class UpdateBookingStatusRequest(BaseModel):
    """
    Validated UpdateBookingStatus input.

    A new date and/or window turns the update into a reschedule; the status
    is kept unless ``new_status`` asks for a transition as well.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    booking_id: str = Field(min_length=1)
    new_status: Optional[BookingStatus] = None
    new_date: Optional[date] = None
    new_window_id: Optional[str] = Field(default=None, min_length=1)
    note: Optional[str] = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def _has_change(self) -> "UpdateBookingStatusRequest":
        if self.new_status is None and self.new_date is None and self.new_window_id is None:
            raise ValueError("Nothing to update: give new_status, new_date or new_window_id")
        return self

    @property
    def is_reschedule(self) -> bool:
        return self.new_date is not None or self.new_window_id is not None


class AvailabilitySlot(BaseModel):
    """One time window on one date with its remaining capacity."""

    window_id: str
    date: date
    start: time
    end: time
    capacity: int
    remaining_capacity: int

    @property
    def is_full(self) -> bool:
        return self.remaining_capacity <= 0


class AvailabilityResponse(BaseModel):
    """GetAvailability result."""

    resource_id: str
    date: date
    is_holiday: bool = False
    slots: list[AvailabilitySlot] = Field(default_factory=list)


class BookingResponse(BaseModel):
    """CreateBooking / UpdateBookingStatus result."""

    success: bool
    booking: Optional[Booking] = None
    error: Optional[ErrorKind] = None
    message: str = ""
    alternatives: list[AvailabilitySlot] = Field(default_factory=list)
