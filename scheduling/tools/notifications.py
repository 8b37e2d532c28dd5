"""
Booking notification sender.

In production, this would hand confirmed bookings to the dealership's
email/SMS delivery service. Delivery is best-effort: a failure to notify is
logged and never undoes the booking that triggered it.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from scheduling.config import settings
from scheduling.schemas.booking_schema import Booking, BookingStatus

logger = logging.getLogger(__name__)


class NotificationSender(Protocol):
    def send(self, booking: Booking, status: BookingStatus) -> None: ...


@dataclass
class SentNotification:
    booking_id: str
    resource_id: str
    status: BookingStatus
    sender: str
    sent_at: datetime


@dataclass
class OutboxNotificationSender:
    """Mock sender that records every notification in an in-memory outbox."""

    sender: str = settings.notifications.sender
    enabled: bool = settings.notifications.enabled
    outbox: list[SentNotification] = field(default_factory=list)

    def send(self, booking: Booking, status: BookingStatus) -> None:
        if not self.enabled:
            logger.debug("Notifications disabled, skipping %s (%s)", booking.id, status.value)
            return
        self.outbox.append(
            SentNotification(
                booking_id=booking.id,
                resource_id=booking.resource_id,
                status=status,
                sender=self.sender,
                sent_at=datetime.now(timezone.utc),
            )
        )
        logger.info("Notification queued for booking %s (%s)", booking.id, status.value)

    def reset(self) -> None:
        """Clear the outbox. Used by test fixtures for isolation."""
        self.outbox.clear()


def notify_safely(sender: NotificationSender, booking: Booking, status: BookingStatus) -> bool:
    """Send a notification, logging and absorbing any failure. Returns True on success."""
    try:
        sender.send(booking, status)
        return True
    except Exception:
        logger.exception("Notification failed for booking %s (%s)", booking.id, status.value)
        return False
