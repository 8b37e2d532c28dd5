"""
Actor and capability checks for booking operations.

In production, the acting user and their permission set come from the
dealership's auth service. The core only asks one question: may this actor
perform this action on bookings of this kind?

A permission string grants an action for every booking kind
(``manage_booking_status``) or for one kind only
(``manage_booking_status:service``).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from scheduling.schemas.booking_schema import BookingKind

logger = logging.getLogger(__name__)


class Role(str, Enum):
    CUSTOMER = "CUSTOMER"
    STAFF = "STAFF"
    BRANCH_MANAGER = "BRANCH_MANAGER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class BookingAction(str, Enum):
    VIEW = "view_bookings"
    CREATE = "create_bookings"
    RESCHEDULE = "edit_bookings"
    CANCEL = "delete_bookings"
    MANAGE_STATUS = "manage_booking_status"


ALL_ACTIONS = frozenset(action.value for action in BookingAction)

DEFAULT_ROLE_PERMISSIONS: dict[Role, frozenset[str]] = {
    Role.CUSTOMER: frozenset({BookingAction.VIEW.value, BookingAction.CREATE.value}),
    Role.STAFF: frozenset({
        BookingAction.VIEW.value,
        BookingAction.CREATE.value,
        BookingAction.CANCEL.value,
        BookingAction.MANAGE_STATUS.value,
    }),
    Role.BRANCH_MANAGER: frozenset({
        BookingAction.VIEW.value,
        BookingAction.CREATE.value,
        BookingAction.RESCHEDULE.value,
        BookingAction.CANCEL.value,
        BookingAction.MANAGE_STATUS.value,
    }),
    Role.ADMIN: ALL_ACTIONS,
    Role.SUPER_ADMIN: ALL_ACTIONS,
}

STAFF_ROLES = frozenset({Role.STAFF, Role.BRANCH_MANAGER, Role.ADMIN, Role.SUPER_ADMIN})


@dataclass(frozen=True)
class Actor:
    """The user on whose behalf a request runs."""

    id: str
    role: Role = Role.CUSTOMER
    permissions: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES


class PermissionChecker(Protocol):
    def can(self, actor: Actor, action: BookingAction, kind: BookingKind) -> bool: ...


class RolePermissionChecker:
    """Grants role defaults plus any explicit permissions carried by the actor."""

    def __init__(self, role_permissions: dict[Role, frozenset[str]] = DEFAULT_ROLE_PERMISSIONS) -> None:
        self._role_permissions = role_permissions

    def can(self, actor: Actor, action: BookingAction, kind: BookingKind) -> bool:
        granted = self._role_permissions.get(actor.role, frozenset()) | actor.permissions
        allowed = action.value in granted or f"{action.value}:{kind.value}" in granted
        # Status changes after creation are reserved for staff
        if action not in (BookingAction.VIEW, BookingAction.CREATE):
            allowed = allowed and actor.is_staff
        if not allowed:
            logger.debug(
                "Denied %s on %s bookings for %s (%s)",
                action.value, kind.value, actor.id, actor.role.value,
            )
        return allowed
