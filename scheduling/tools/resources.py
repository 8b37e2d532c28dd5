"""
Mock resource directory for vehicles and service bays.

In production, this would look up the dealership inventory (vehicles for
test drives) and the workshop configuration (service bays).
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from scheduling.schemas.booking_schema import BookingKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resource:
    """A bookable vehicle or service bay."""

    id: str
    kind: BookingKind
    name: str
    available: bool = True


class ResourceDirectory(Protocol):
    def get(self, resource_id: str) -> Optional[Resource]: ...


_DEFAULT_RESOURCES: list[Resource] = [
    Resource("V1", BookingKind.TEST_DRIVE, "Tata Nexon EV 2024"),
    Resource("V2", BookingKind.TEST_DRIVE, "Tata Harrier 2024"),
    Resource("V3", BookingKind.TEST_DRIVE, "Tata Punch 2023", available=False),
    Resource("BAY-1", BookingKind.SERVICE, "Service bay 1 (general maintenance)"),
    Resource("BAY-2", BookingKind.SERVICE, "Service bay 2 (diagnostics)"),
]


class InMemoryResourceDirectory:
    """Dict-backed directory seeded with a few demo vehicles and bays."""

    def __init__(self, resources: Optional[list[Resource]] = None) -> None:
        source = _DEFAULT_RESOURCES if resources is None else resources
        self._resources: dict[str, Resource] = {r.id: r for r in source}

    def get(self, resource_id: str) -> Optional[Resource]:
        return self._resources.get(resource_id.strip())

    def add(self, resource: Resource) -> Resource:
        self._resources[resource.id] = resource
        logger.info("Resource registered: %s (%s)", resource.id, resource.kind.value)
        return resource
