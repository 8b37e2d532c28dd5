"""
Authoritative store of bookings and their status transitions.

Status lifecycle:
    PENDING -> CONFIRMED -> COMPLETED
    PENDING -> CANCELLED
    CONFIRMED -> CANCELLED

COMPLETED and CANCELLED are terminal. Bookings are never deleted; every
change appends a StatusChange to the booking's history.

Capacity-increasing writes (create, reschedule) run the conflict check and
the write while holding the store's lock for the target slot. Every other
write is a conditional update on the booking's version, so two staff members
editing the same booking cannot silently overwrite each other.

Usage:
    ledger = BookingLedger(store, resolver, notifier)
    booking = ledger.create("V1", date(2024, 3, 2), "SAT-1000")
    ledger.update_status(booking.id, BookingStatus.CONFIRMED)
"""

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Optional

from scheduling.engine.conflict_resolver import ConflictResolver, WindowRef
from scheduling.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from scheduling.logging_context import get_request_logger
from scheduling.schemas.booking_schema import (
    ACTIVE_STATUSES,
    Booking,
    BookingKind,
    BookingStatus,
    StatusChange,
    utcnow,
)
from scheduling.schemas.slot_schema import TimeWindow
from scheduling.store.base import RecordStore
from scheduling.tools.notifications import NotificationSender, notify_safely

logger = get_request_logger(__name__)


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus


def _window_id(window: WindowRef) -> str:
    return window.id if isinstance(window, TimeWindow) else window


def new_booking_id() -> str:
    return f"BK-{uuid.uuid4().hex[:8].upper()}"


class BookingLedger:
    """Creates bookings and moves them through their lifecycle."""

    TRANSITIONS: list[Transition] = [
        # --- Confirmation ---
        Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED),

        # --- Completion ---
        Transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED),

        # --- Cancellation ---
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED),
        Transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    ]

    # Statuses whose arrival triggers a customer notification
    NOTIFY_ON = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

    def __init__(
        self,
        store: RecordStore,
        resolver: ConflictResolver,
        notifier: Optional[NotificationSender] = None,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._notifier = notifier

    # --- Transition table ---

    @classmethod
    def valid_targets(cls, status: BookingStatus) -> list[BookingStatus]:
        """Return all statuses reachable from ``status`` in one step."""
        return [t.to_status for t in cls.TRANSITIONS if t.from_status == status]

    @classmethod
    def is_valid_transition(cls, current: BookingStatus, requested: BookingStatus) -> bool:
        return any(
            t.from_status == current and t.to_status == requested for t in cls.TRANSITIONS
        )

    @classmethod
    def is_terminal(cls, status: BookingStatus) -> bool:
        return not cls.valid_targets(status)

    # --- Reads ---

    def get(self, booking_id: str) -> Booking:
        """
        Raises:
            NotFoundError: If no booking has this id.
        """
        booking = self._store.get_booking(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found", booking_id=booking_id)
        return booking

    # --- Writes ---

    def create(
        self,
        resource_id: str,
        day: date,
        window: WindowRef,
        note: Optional[str] = None,
        kind: BookingKind = BookingKind.TEST_DRIVE,
        actor_id: Optional[str] = None,
    ) -> Booking:
        """
        Reserve a slot. The capacity check and the insert run under the slot lock.

        Raises:
            ValidationError: Bad resource or window for this date.
            HolidayError: The date is blacked out.
            SlotFullError: The slot has no remaining capacity.
        """
        with self._store.slot_lock(resource_id, day, _window_id(window)):
            check = self._resolver.ensure_admissible(resource_id, day, window)
            now = utcnow()
            booking = Booking(
                id=new_booking_id(),
                resource_id=resource_id,
                kind=kind,
                date=day,
                window_id=check.window.id,
                status=BookingStatus.PENDING,
                note=note,
                created_by=actor_id,
                created_at=now,
                updated_at=now,
                history=[StatusChange(status=BookingStatus.PENDING, changed_at=now, actor_id=actor_id)],
            )
            stored = self._store.insert_booking(booking)

        logger.info(
            "Booking created: %s for %s on %s in %s (%d left)",
            stored.id, resource_id, day, stored.window_id, check.remaining_capacity - 1,
        )
        self._notify(stored, BookingStatus.PENDING)
        return stored

    def update_status(
        self,
        booking_id: str,
        new_status: Optional[BookingStatus] = None,
        *,
        new_date: Optional[date] = None,
        new_window: Optional[WindowRef] = None,
        actor_id: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Booking:
        """
        Change a booking's status, its slot, or both.

        Moving to a different date or window is a reschedule: the new slot is
        re-checked, excluding this booking, and the current status is kept
        unless ``new_status`` asks for a transition too.

        Raises:
            NotFoundError: Unknown booking id.
            InvalidTransitionError: Status change not in TRANSITIONS, or a
                reschedule of a completed/cancelled booking. State is unchanged.
            ValidationError, HolidayError, SlotFullError: The new slot is not admissible.
            ConflictError: The booking was modified concurrently.
        """
        current = self.get(booking_id)

        target_day = new_date or current.date
        target_window_id = _window_id(new_window) if new_window is not None else current.window_id
        is_reschedule = (target_day, target_window_id) != (current.date, current.window_id)
        status_change = new_status is not None and new_status != current.status

        if new_status is not None and not status_change and not is_reschedule:
            raise InvalidTransitionError(current.status, new_status)
        if status_change and not self.is_valid_transition(current.status, new_status):
            valid = [s.value for s in self.valid_targets(current.status)]
            raise InvalidTransitionError(
                current.status,
                new_status,
                f"Cannot move booking {booking_id} from '{current.status.value}' to "
                f"'{new_status.value}'. Valid targets: {valid}",
            )
        if not status_change and not is_reschedule:
            return current

        target_status = new_status if status_change else current.status

        if is_reschedule:
            if current.status not in ACTIVE_STATUSES:
                raise InvalidTransitionError(
                    current.status,
                    current.status,
                    f"Booking {booking_id} is {current.status.value} and cannot be rescheduled",
                )
            if target_status not in ACTIVE_STATUSES:
                raise ValidationError(
                    "A reschedule cannot also close the booking; cancel or complete it separately",
                    booking_id=booking_id,
                )
            with self._store.slot_lock(current.resource_id, target_day, target_window_id):
                check = self._resolver.ensure_admissible(
                    current.resource_id,
                    target_day,
                    new_window if new_window is not None else current.window_id,
                    exclude_booking_id=current.id,
                )
                stored = self._apply(
                    current,
                    target_status,
                    actor_id,
                    note or f"Rescheduled from {current.date} {current.window_id}",
                    date=target_day,
                    window_id=check.window.id,
                )
            logger.info(
                "Booking rescheduled: %s to %s in %s (%s)",
                stored.id, stored.date, stored.window_id, stored.status.value,
            )
        else:
            stored = self._apply(current, target_status, actor_id, note)
            logger.info(
                "Booking status changed: %s %s -> %s",
                stored.id, current.status.value, stored.status.value,
            )

        if status_change and target_status in self.NOTIFY_ON:
            self._notify(stored, target_status)
        return stored

    def cancel(self, booking_id: str, actor_id: Optional[str] = None, note: Optional[str] = None) -> Booking:
        return self.update_status(booking_id, BookingStatus.CANCELLED, actor_id=actor_id, note=note)

    def reschedule(
        self,
        booking_id: str,
        new_date: date,
        new_window: WindowRef,
        actor_id: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Booking:
        return self.update_status(
            booking_id, new_date=new_date, new_window=new_window, actor_id=actor_id, note=note,
        )

    # --- Internals ---

    def _apply(
        self,
        current: Booking,
        status: BookingStatus,
        actor_id: Optional[str],
        note: Optional[str],
        **changes,
    ) -> Booking:
        now = utcnow()
        entry = StatusChange(status=status, changed_at=now, actor_id=actor_id, note=note)
        updated = current.model_copy(
            update={
                **changes,
                "status": status,
                "updated_at": now,
                "history": [*current.history, entry],
            },
            deep=True,
        )
        stored = self._store.update_booking_if(updated, expected_version=current.version)
        if stored is None:
            logger.warning("Concurrent modification of booking %s, update rejected", current.id)
            raise ConflictError(
                f"Booking {current.id} was changed by another request; reload and retry",
                booking_id=current.id,
            )
        return stored

    def _notify(self, booking: Booking, status: BookingStatus) -> None:
        if self._notifier is not None:
            notify_safely(self._notifier, booking, status)
