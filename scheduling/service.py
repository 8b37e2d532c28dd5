"""
External interface of the scheduling core.

SchedulingService wires the slot calendar, conflict resolver, booking
ledger, availability planner, and calendar aggregator together and exposes
the operations the surrounding application calls:

    GetAvailability(resourceId, date)
    CreateBooking(resourceId, date, window, note, actor)
    UpdateBookingStatus(bookingId, newStatus, actor)
    GetCalendar(view, anchorDate, filters)

Payloads are validated at this boundary. Every rejection comes back as a
BookingResponse carrying an ErrorKind; only STORE_FAILURE escapes as an
exception, after the configured retries are used up.
"""

from datetime import date
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from scheduling.config import AppConfig, settings
from scheduling.engine.availability_planner import AvailabilityPlanner
from scheduling.engine.booking_ledger import BookingLedger
from scheduling.engine.calendar_aggregator import CalendarAggregator
from scheduling.engine.conflict_resolver import ConflictResolver
from scheduling.engine.slot_calendar import SlotCalendar
from scheduling.errors import (
    ConflictError,
    ErrorKind,
    HolidayError,
    NotFoundError,
    PermissionDeniedError,
    SchedulingError,
    SlotFullError,
    StoreFailureError,
    ValidationError,
    retry_store_failures,
)
from scheduling.logging_context import get_request_logger, request_scope
from scheduling.schemas.booking_schema import (
    AvailabilityResponse,
    AvailabilitySlot,
    BookingKind,
    BookingResponse,
    BookingStatus,
    CreateBookingRequest,
    UpdateBookingStatusRequest,
)
from scheduling.schemas.calendar_schema import CalendarDay, CalendarEntry, CalendarFilters, CalendarView
from scheduling.store.base import RecordStore
from scheduling.tools.notifications import NotificationSender
from scheduling.tools.permissions import Actor, BookingAction, PermissionChecker, RolePermissionChecker
from scheduling.tools.resources import Resource, ResourceDirectory
from scheduling.tools.tasks import TaskFeed
from scheduling.utils import DateLike, parse_date

logger = get_request_logger(__name__)

Payload = Union[dict[str, Any], Any]


def _describe_validation(error: PydanticValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "request"
        parts.append(f"{location}: {item['msg']}")
    return "Invalid request - " + "; ".join(parts)


def _coerce_date(value: DateLike) -> date:
    try:
        return parse_date(value)
    except (ValueError, TypeError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None


class SchedulingService:
    """Facade over the scheduling engine for request handlers and the CLI."""

    def __init__(
        self,
        store: RecordStore,
        notifier: Optional[NotificationSender] = None,
        permissions: Optional[PermissionChecker] = None,
        task_feed: Optional[TaskFeed] = None,
        resources: Optional[ResourceDirectory] = None,
        config: AppConfig = settings,
    ) -> None:
        self.store = store
        self.calendar = SlotCalendar(store)
        self.resolver = ConflictResolver(self.calendar, store)
        self.ledger = BookingLedger(store, self.resolver, notifier)
        self.planner = AvailabilityPlanner(self.calendar, self.resolver)
        self.aggregator = CalendarAggregator(
            self.calendar,
            store,
            task_feed,
            timezone_name=config.scheduling.timezone,
            week_start_day=config.scheduling.week_start_day,
            weekend_days=config.scheduling.weekend_days,
        )
        self._permissions = permissions or RolePermissionChecker()
        self._resources = resources
        self._config = config
        self._retry = retry_store_failures(
            attempts=config.store.retry_attempts,
            base_delay=config.store.retry_base_delay_sec,
        )

    # --- GetAvailability ---

    def get_availability(
        self, resource_id: str, day: DateLike, request_id: Optional[str] = None,
    ) -> AvailabilityResponse:
        """
        Every window on ``day`` with its remaining capacity for ``resource_id``.

        Holidays produce an empty slot list. Full windows are included with
        ``remaining_capacity == 0``.

        Raises:
            ValidationError: Malformed resource id or date.
            NotFoundError: The resource directory does not know the resource.
            StoreFailureError: The store stayed unavailable through all retries.
        """
        with request_scope(request_id):
            parsed = _coerce_date(day)
            if not resource_id or not resource_id.strip():
                raise ValidationError("A resource id is required")
            self._call(self._require_resource, resource_id)
            is_holiday = self._call(self.calendar.is_holiday, parsed)
            slots = [] if is_holiday else self._call(self.planner.get_availability, resource_id, parsed)
            logger.debug("Availability %s on %s: %d windows", resource_id, parsed, len(slots))
            return AvailabilityResponse(
                resource_id=resource_id, date=parsed, is_holiday=is_holiday, slots=slots,
            )

    # --- CreateBooking ---

    def create_booking(
        self, request: Payload, actor: Actor, request_id: Optional[str] = None,
    ) -> BookingResponse:
        """Validate, authorize, and reserve a slot."""
        with request_scope(request_id):
            try:
                req = CreateBookingRequest.model_validate(request)
            except PydanticValidationError as e:
                return self._failure(ValidationError(_describe_validation(e)))

            try:
                self._authorize(actor, BookingAction.CREATE, req.kind)
                self._call(self._check_resource, req.resource_id, req.kind)
                booking = self._call(
                    self.ledger.create,
                    req.resource_id,
                    req.date,
                    req.window_id,
                    req.note,
                    req.kind,
                    actor.id,
                )
            except (HolidayError, SlotFullError) as e:
                return self._failure(e, alternatives=self._alternatives(req.resource_id, req.date, req.window_id))
            except StoreFailureError:
                raise
            except SchedulingError as e:
                return self._failure(e)

            return BookingResponse(
                success=True,
                booking=booking,
                message=f"Booking {booking.id} created for {booking.resource_id} on {booking.date}.",
            )

    # --- UpdateBookingStatus ---

    def update_booking_status(
        self, request: Payload, actor: Actor, request_id: Optional[str] = None,
    ) -> BookingResponse:
        """
        Apply a status transition and/or reschedule.

        A reschedule rejected by the conflict resolver (holiday or full
        slot) is reported as CONFLICT, with open alternatives attached.
        """
        with request_scope(request_id):
            try:
                req = UpdateBookingStatusRequest.model_validate(request)
            except PydanticValidationError as e:
                return self._failure(ValidationError(_describe_validation(e)))

            current = None
            try:
                current = self._call(self.ledger.get, req.booking_id)
                for action in self._actions_for(req):
                    self._authorize(actor, action, current.kind)
                booking = self._call(
                    self.ledger.update_status,
                    req.booking_id,
                    req.new_status,
                    new_date=req.new_date,
                    new_window=req.new_window_id,
                    actor_id=actor.id,
                    note=req.note,
                )
            except (HolidayError, SlotFullError) as e:
                conflict = ConflictError(e.message, reason=e.kind.value, **e.details)
                day = req.new_date or current.date
                window_id = req.new_window_id or current.window_id
                return self._failure(
                    conflict, alternatives=self._alternatives(current.resource_id, day, window_id),
                )
            except StoreFailureError:
                raise
            except SchedulingError as e:
                return self._failure(e)

            return BookingResponse(
                success=True,
                booking=booking,
                message=f"Booking {booking.id} is {booking.status.value} on {booking.date}.",
            )

    def cancel_booking(
        self, booking_id: str, actor: Actor, note: Optional[str] = None, request_id: Optional[str] = None,
    ) -> BookingResponse:
        return self.update_booking_status(
            {"booking_id": booking_id, "new_status": BookingStatus.CANCELLED, "note": note},
            actor,
            request_id,
        )

    def reschedule_booking(
        self,
        booking_id: str,
        new_date: DateLike,
        window_id: str,
        actor: Actor,
        request_id: Optional[str] = None,
    ) -> BookingResponse:
        return self.update_booking_status(
            {"booking_id": booking_id, "new_date": new_date, "new_window_id": window_id},
            actor,
            request_id,
        )

    def get_booking(
        self, booking_id: str, actor: Actor, request_id: Optional[str] = None,
    ) -> BookingResponse:
        with request_scope(request_id):
            try:
                booking = self._call(self.ledger.get, booking_id)
                self._authorize(actor, BookingAction.VIEW, booking.kind)
            except StoreFailureError:
                raise
            except SchedulingError as e:
                return self._failure(e)
            return BookingResponse(success=True, booking=booking)

    # --- GetCalendar ---

    def get_calendar(
        self,
        view: Union[CalendarView, str],
        anchor: DateLike,
        filters: Optional[Payload] = None,
        request_id: Optional[str] = None,
    ) -> list[CalendarEntry]:
        """
        Merged feed of bookings, holidays, and tasks for a day/week/month view.

        Raises:
            ValidationError: Unknown view, malformed date, or malformed filters.
        """
        with request_scope(request_id):
            parsed_view, parsed_anchor, parsed_filters = self._calendar_args(view, anchor, filters)
            return self._call(self.aggregator.get_entries, parsed_view, parsed_anchor, parsed_filters)

    def get_calendar_days(
        self,
        view: Union[CalendarView, str],
        anchor: DateLike,
        filters: Optional[Payload] = None,
        request_id: Optional[str] = None,
    ) -> list[CalendarDay]:
        with request_scope(request_id):
            parsed_view, parsed_anchor, parsed_filters = self._calendar_args(view, anchor, filters)
            return self._call(self.aggregator.get_days, parsed_view, parsed_anchor, parsed_filters)

    # --- Internals ---

    def _call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return self._retry(func)(*args, **kwargs)

    def _authorize(self, actor: Actor, action: BookingAction, kind: BookingKind) -> None:
        if not self._permissions.can(actor, action, kind):
            raise PermissionDeniedError(
                f"{actor.id} may not {action.value.replace('_', ' ')} for {kind.value} bookings",
                actor_id=actor.id,
                action=action.value,
            )

    @staticmethod
    def _actions_for(req: UpdateBookingStatusRequest) -> list[BookingAction]:
        actions = []
        if req.new_status == BookingStatus.CANCELLED:
            actions.append(BookingAction.CANCEL)
        elif req.new_status is not None:
            actions.append(BookingAction.MANAGE_STATUS)
        if req.is_reschedule:
            actions.append(BookingAction.RESCHEDULE)
        return actions

    def _require_resource(self, resource_id: str) -> Optional[Resource]:
        """Look the resource up in the directory, if one is configured."""
        if self._resources is None:
            return None
        resource = self._resources.get(resource_id)
        if resource is None:
            raise NotFoundError(f"Resource {resource_id} not found", resource_id=resource_id)
        return resource

    def _check_resource(self, resource_id: str, kind: BookingKind) -> None:
        resource = self._require_resource(resource_id)
        if resource is None:
            return
        if resource.kind != kind:
            raise ValidationError(
                f"Resource {resource_id} cannot be booked for a {kind.value.replace('_', ' ')}",
                resource_id=resource_id,
            )
        if not resource.available:
            raise ValidationError(f"Resource {resource_id} is currently unavailable", resource_id=resource_id)

    def _alternatives(self, resource_id: str, day: date, window_id: str) -> list[AvailabilitySlot]:
        cfg = self._config.scheduling
        try:
            return self._call(
                self.planner.find_alternatives,
                resource_id,
                day,
                days_ahead=cfg.alternatives_days_ahead,
                limit=cfg.max_alternatives,
                skip_window_id=window_id,
            )
        except ValidationError:
            return []

    def _calendar_args(
        self, view: Union[CalendarView, str], anchor: DateLike, filters: Optional[Payload],
    ) -> tuple[CalendarView, date, Optional[CalendarFilters]]:
        try:
            parsed_view = CalendarView(view)
        except ValueError:
            valid = [v.value for v in CalendarView]
            raise ValidationError(f"Unknown calendar view {view!r}. Valid views: {valid}") from None
        parsed_filters = None
        if filters is not None:
            try:
                parsed_filters = CalendarFilters.model_validate(filters)
            except PydanticValidationError as e:
                raise ValidationError(_describe_validation(e)) from None
        return parsed_view, _coerce_date(anchor), parsed_filters

    @staticmethod
    def _failure(error: SchedulingError, alternatives: Optional[list[AvailabilitySlot]] = None) -> BookingResponse:
        level = logger.info if error.kind in (ErrorKind.SLOT_FULL, ErrorKind.CONFLICT) else logger.warning
        level("Booking request rejected (%s): %s", error.kind.value, error.message)
        return BookingResponse(
            success=False,
            error=error.kind,
            message=error.message,
            alternatives=alternatives or [],
        )
