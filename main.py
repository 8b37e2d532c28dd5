"""
Command line entry point for the scheduling core.

Every invocation runs against a fresh in-memory store seeded with the default
dealership templates and holidays, so the commands are meant for demos and
quick checks rather than persistent bookings.

Usage:
    python main.py availability V1 2024-03-04
    python main.py book V1 2024-03-04 MON-1000 --repeat 4
    python main.py status V1 2024-03-04 MON-1000 --to CONFIRMED COMPLETED
    python main.py calendar week 2024-12-25
"""

import argparse
import logging
import sys
from typing import Optional

from pydantic import BaseModel

from scheduling.errors import SchedulingError
from scheduling.schemas.booking_schema import BookingKind, BookingStatus
from scheduling.schemas.calendar_schema import CalendarView
from scheduling.seed import seed_defaults
from scheduling.service import SchedulingService
from scheduling.store.memory import InMemoryRecordStore
from scheduling.tools.notifications import OutboxNotificationSender
from scheduling.tools.permissions import Actor, Role
from scheduling.tools.resources import InMemoryResourceDirectory

logger = logging.getLogger(__name__)

GREEN = "\033[92m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"

CLI_ACTOR = Actor(id="cli", role=Role.ADMIN)


def build_service() -> SchedulingService:
    """Seeded service with mock notifications and resources."""
    service = SchedulingService(
        InMemoryRecordStore(),
        notifier=OutboxNotificationSender(),
        resources=InMemoryResourceDirectory(),
    )
    seed_defaults(service.calendar)
    return service


def _print(model: BaseModel) -> None:
    print(model.model_dump_json(indent=2, exclude_none=True))


def _report(response) -> bool:
    if response.success:
        print(f"{GREEN}OK{RESET} {response.message}")
    else:
        print(f"{RED}{response.error.value}{RESET} {response.message}")
        for slot in response.alternatives:
            print(f"{DIM}  try {slot.window_id} on {slot.date} ({slot.remaining_capacity} left){RESET}")
    return response.success


def cmd_availability(service: SchedulingService, args: argparse.Namespace) -> int:
    _print(service.get_availability(args.resource, args.date))
    return 0


def cmd_book(service: SchedulingService, args: argparse.Namespace) -> int:
    ok = True
    for _ in range(args.repeat):
        response = service.create_booking(
            {
                "resource_id": args.resource,
                "date": args.date,
                "window_id": args.window,
                "kind": args.kind,
                "note": args.note,
            },
            CLI_ACTOR,
        )
        ok = _report(response)
    return 0 if ok else 1


def cmd_status(service: SchedulingService, args: argparse.Namespace) -> int:
    created = service.create_booking(
        {"resource_id": args.resource, "date": args.date, "window_id": args.window, "kind": args.kind},
        CLI_ACTOR,
    )
    if not _report(created):
        return 1
    booking_id = created.booking.id
    for status in args.to:
        if not _report(service.update_booking_status({"booking_id": booking_id, "new_status": status}, CLI_ACTOR)):
            return 1
    _print(service.get_booking(booking_id, CLI_ACTOR).booking)
    return 0


def cmd_calendar(service: SchedulingService, args: argparse.Namespace) -> int:
    for entry in service.get_calendar(args.view, args.date):
        span = "all day" if entry.all_day else f"{entry.start:%H:%M}-{entry.end:%H:%M}"
        print(f"{entry.start:%Y-%m-%d} {span:>11}  [{entry.kind.value}] {entry.title}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dealership appointment scheduling")
    sub = parser.add_subparsers(dest="command", required=True)

    availability = sub.add_parser("availability", help="List windows and remaining capacity for a date")
    availability.add_argument("resource")
    availability.add_argument("date", help="YYYY-MM-DD")
    availability.set_defaults(handler=cmd_availability)

    kinds = [k.value for k in BookingKind]

    book = sub.add_parser("book", help="Reserve a slot")
    book.add_argument("resource")
    book.add_argument("date", help="YYYY-MM-DD")
    book.add_argument("window", help="Window id, e.g. MON-1000")
    book.add_argument("--kind", choices=kinds, default=BookingKind.TEST_DRIVE.value)
    book.add_argument("--note", default=None)
    book.add_argument("--repeat", type=int, default=1, help="Book the same slot N times")
    book.set_defaults(handler=cmd_book)

    status = sub.add_parser("status", help="Book a slot, then walk it through status changes")
    status.add_argument("resource")
    status.add_argument("date", help="YYYY-MM-DD")
    status.add_argument("window")
    status.add_argument("--kind", choices=kinds, default=BookingKind.TEST_DRIVE.value)
    status.add_argument("--to", nargs="+", choices=[s.value for s in BookingStatus], required=True)
    status.set_defaults(handler=cmd_status)

    calendar = sub.add_parser("calendar", help="Print the merged calendar feed")
    calendar.add_argument("view", choices=[v.value for v in CalendarView])
    calendar.add_argument("date", help="Anchor date, YYYY-MM-DD")
    calendar.set_defaults(handler=cmd_calendar)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    service = build_service()
    try:
        return args.handler(service, args)
    except SchedulingError as e:
        print(f"{RED}{e.kind.value}{RESET} {e.message}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
