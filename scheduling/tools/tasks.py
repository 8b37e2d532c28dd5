"""
Internal task/event feed merged into the calendar view.

In production, this would query the CRM's calendar events and follow-up
tasks. The feed is read-only from the scheduling core's point of view.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional, Protocol

from scheduling.schemas.calendar_schema import Task

logger = logging.getLogger(__name__)


class TaskFeed(Protocol):
    def list_between(self, start: datetime, end: datetime) -> list[Task]: ...


class InMemoryTaskFeed:
    """Mock task feed backed by a list."""

    def __init__(self, tasks: Optional[Iterable[Task]] = None) -> None:
        self._tasks: list[Task] = list(tasks or [])

    def add(self, task: Task) -> Task:
        self._tasks.append(task)
        logger.debug("Task added: %s (%s)", task.id, task.title)
        return task

    def list_between(self, start: datetime, end: datetime) -> list[Task]:
        """Tasks intersecting ``[start, end)``; zero-length tasks count if they start inside."""
        return [
            t for t in self._tasks
            if t.start < end and (t.end > start or t.start >= start)
        ]

    def reset(self) -> None:
        self._tasks.clear()
