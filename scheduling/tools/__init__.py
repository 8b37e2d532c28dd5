from scheduling.tools.notifications import NotificationSender, OutboxNotificationSender, notify_safely
from scheduling.tools.permissions import Actor, BookingAction, PermissionChecker, Role, RolePermissionChecker
from scheduling.tools.resources import InMemoryResourceDirectory, Resource, ResourceDirectory
from scheduling.tools.tasks import InMemoryTaskFeed, TaskFeed

__all__ = [
    "NotificationSender",
    "OutboxNotificationSender",
    "notify_safely",
    "Actor",
    "BookingAction",
    "PermissionChecker",
    "Role",
    "RolePermissionChecker",
    "InMemoryResourceDirectory",
    "Resource",
    "ResourceDirectory",
    "InMemoryTaskFeed",
    "TaskFeed",
]
