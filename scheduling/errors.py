"""
Error kinds and exception types for the scheduling core.

Every rejected booking attempt carries a specific ErrorKind so callers can
render an accurate message. Only STORE_FAILURE is ever retried, and only
through ``retry_store_failures``.
"""

import functools
import logging
import time
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class ErrorKind(str, Enum):
    """Caller-visible categories of scheduling failure."""

    VALIDATION = "VALIDATION"
    HOLIDAY = "HOLIDAY"
    SLOT_FULL = "SLOT_FULL"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    FORBIDDEN = "FORBIDDEN"
    STORE_FAILURE = "STORE_FAILURE"


class SchedulingError(Exception):
    """Base error raised by engine components."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(SchedulingError):
    """Malformed input: unknown window, wrong day-of-week, missing resource."""

    kind = ErrorKind.VALIDATION


class HolidayError(SchedulingError):
    """The requested date is blacked out."""

    kind = ErrorKind.HOLIDAY


class SlotFullError(SchedulingError):
    """Capacity for the slot was exhausted at check time."""

    kind = ErrorKind.SLOT_FULL


class InvalidTransitionError(SchedulingError):
    """Raised when a status change is not allowed from the current status."""

    kind = ErrorKind.INVALID_TRANSITION

    def __init__(self, current: Any, requested: Any, message: Optional[str] = None) -> None:
        current_value = getattr(current, "value", current)
        requested_value = getattr(requested, "value", requested)
        super().__init__(
            message or f"Cannot move booking from '{current_value}' to '{requested_value}'",
            current=current_value,
            requested=requested_value,
        )
        self.current = current
        self.requested = requested


class NotFoundError(SchedulingError):
    """Referenced booking or resource does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(SchedulingError):
    """A conditional update lost against a concurrent write."""

    kind = ErrorKind.CONFLICT


class PermissionDeniedError(SchedulingError):
    """The acting user may not perform this operation."""

    kind = ErrorKind.FORBIDDEN


class StoreFailureError(SchedulingError):
    """The backing record store is unavailable."""

    kind = ErrorKind.STORE_FAILURE


def retry_store_failures(attempts: int = 3, base_delay: float = 0.1) -> Callable[[F], F]:
    """
    Decorator retrying a call on StoreFailureError with exponential backoff.

    Args:
        attempts: Total number of tries, including the first.
        base_delay: Delay before the first retry; doubles on every retry.

    Raises:
        StoreFailureError: The last failure once all attempts are used up.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            last_error: Optional[StoreFailureError] = None
            for attempt in range(attempts):
                try:
                    return func(*args, **kwargs)
                except StoreFailureError as e:
                    last_error = e
                    if attempt < attempts - 1:
                        delay = base_delay * (2 ** attempt)
                        logger.warning(
                            "Store failure in %s (attempt %d/%d), retrying in %.2fs: %s",
                            func.__name__, attempt + 1, attempts, delay, e,
                        )
                        time.sleep(delay)
            logger.error(
                "Store failure in %s after %d attempts: %s",
                func.__name__, attempts, last_error,
            )
            raise last_error  # type: ignore[misc]

        return wrapper  # type: ignore[return-value]

    return decorator
