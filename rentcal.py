#!/usr/bin/env python3
"""
Unified CLI for rental fleet availability.

Commands:
  vehicles     - List fleet vehicles
  calendar     - Show day-by-day status for one or more vehicles
  conflicts    - List double-booked days
  bookings     - List bookings
  export       - Write the calendar as CSV
  note-add     - Add a maintenance/blocked/general note
  note-edit    - Change an existing note
  note-delete  - Remove a note
"""

import argparse
import logging
import sys
import uuid
from datetime import date, datetime
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional, Tuple

from availability import (
    AvailabilityEngine,
    AvailabilityError,
    Booking,
    BookingStatus,
    CalendarNavigator,
    CalendarResult,
    DayInfo,
    DayStatus,
    InvalidRange,
    Note,
    NoteType,
    VehicleSource,
    YamlFleetSource,
    delete_note,
    find_conflicts,
    save_note,
    update_note,
    write_csv,
)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_status(status: DayStatus) -> str:
    """Format a day status for display."""
    return status.label or "Available"


def format_datetime(value: Optional[datetime]) -> str:
    """Format a timestamp as 'YYYY-MM-DD HH:MM'."""
    return value.strftime("%Y-%m-%d %H:%M") if value is not None else "-"


def format_interval(booking: Booking) -> str:
    return f"{format_datetime(booking.pickup_at)} - {format_datetime(booking.dropoff_at)}"


def format_times(times: List[str]) -> str:
    return ", ".join(times) if times else "-"


def format_bookings(day: DayInfo) -> str:
    """Booking count with cancelled ones called out, e.g. '2 (1 cancelled)'."""
    if not day.bookings:
        return "-"
    cancelled = len(day.cancelled_bookings)
    active = len(day.active_bookings)
    if cancelled:
        return f"{active} ({cancelled} cancelled)"
    return str(active)


def format_notes(day: DayInfo, max_len: int = 30) -> str:
    if not day.notes:
        return "-"
    text = "; ".join(f"{n.note_type.value}: {n.text}" for n in day.notes)
    return truncate(text, max_len)


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}' (expected YYYY-MM-DD)")


# =============================================================================
# Window selection
# =============================================================================


def resolve_window(args, today: Optional[date] = None) -> Tuple[date, date]:
    """
    Work out the date window from command-line options.

    Explicit --start/--end win; otherwise the navigator derives the window
    from --view, --date, --month and --year.
    """
    nav = CalendarNavigator(view_mode=args.view, today=args.date or today)
    if args.year:
        nav.set_year(args.year)
    if args.month:
        nav.set_month(args.month)
    start, end = nav.window
    if args.start:
        start = args.start
    if args.end:
        end = args.end
    return start, end


def selected_vehicle_ids(source: VehicleSource, args) -> List[str]:
    """Vehicle ids from --vehicle, narrowed by --search on vehicle names."""
    nav = CalendarNavigator(search=args.search or "")
    return nav.select_vehicle_ids(source.get_vehicles(), args.vehicle)


def run_query(args) -> CalendarResult:
    """Compute the calendar against one snapshot of the fleet file."""
    start, end = resolve_window(args)
    if start > end:
        raise InvalidRange(start, end)
    fleet = YamlFleetSource(args.fleet_file).load()
    engine = AvailabilityEngine(fleet, fleet, fleet)
    vehicle_ids = selected_vehicle_ids(fleet, args)
    return engine.compute(vehicle_ids, start, end)


def print_errors(result: CalendarResult) -> None:
    for vehicle_id, error in result.errors.items():
        print(f"Error ({vehicle_id}): {error}")


# =============================================================================
# Calendar command
# =============================================================================


def make_calendar_table(days: List[DayInfo]) -> List[List[str]]:
    """Convert DayInfo records to table rows."""
    rows = []
    for day in days:
        rows.append(
            [
                day.date.isoformat(),
                day.date.strftime("%a"),
                format_status(day.status),
                format_bookings(day),
                format_times(day.start_times),
                format_times(day.end_times),
                format_notes(day),
                "CONFLICT" if day.has_conflict else "",
            ]
        )
    return rows


def cmd_calendar(args):
    """Show day-by-day status for the selected vehicles."""
    result = run_query(args)

    print(f"Period: {result.start} to {result.end}")
    print(f"Vehicles: {len(result.days)}")
    print()

    headers = ["Date", "Day", "Status", "Bookings", "Pickups", "Returns", "Notes", ""]
    for vehicle_id, days in result.days.items():
        print(f"{vehicle_id}:")
        print(tabulate(make_calendar_table(days), headers=headers, tablefmt="simple"))
        print()

    print_errors(result)
    return 0 if result.ok else 1


# =============================================================================
# Conflicts command
# =============================================================================


def make_conflict_table(result: CalendarResult) -> List[List[str]]:
    """One row per conflicting booking pair per day."""
    rows = []
    for day in result.conflict_days():
        for first, second in find_conflicts(day.date, day.bookings):
            rows.append(
                [
                    day.vehicle_id,
                    day.date.isoformat(),
                    first.display_name,
                    format_interval(first),
                    second.display_name,
                    format_interval(second),
                ]
            )
    return rows


def cmd_conflicts(args):
    """List days where bookings overlap on the same vehicle."""
    result = run_query(args)
    rows = make_conflict_table(result)

    print(f"Period: {result.start} to {result.end}")
    if not rows:
        print("No conflicts found.")
    else:
        print(f"Conflicts: {len(rows)}")
        print()
        headers = ["Vehicle", "Date", "Booking", "Interval", "Overlaps", "Interval"]
        print(tabulate(rows, headers=headers, tablefmt="simple"))

    print_errors(result)
    return 0 if result.ok else 1


# =============================================================================
# Vehicles / bookings commands
# =============================================================================


def cmd_vehicles(args):
    """List fleet vehicles."""
    source = YamlFleetSource(args.fleet_file)
    nav = CalendarNavigator(search=args.search or "")
    vehicles = nav.filter_vehicles(source.get_vehicles())

    rows = [[v.id, v.name, v.plate or "-"] for v in vehicles]
    print(tabulate(rows, headers=["Id", "Vehicle", "Plate"], tablefmt="simple"))
    return 0


def make_bookings_table(bookings: List[Booking]) -> List[List[str]]:
    """Convert bookings to table rows."""
    rows = []
    for booking in bookings:
        rows.append(
            [
                booking.display_name,
                booking.vehicle_id,
                format_datetime(booking.pickup_at),
                format_datetime(booking.dropoff_at),
                booking.status.value,
                booking.customer_name or "-",
            ]
        )
    return rows


def cmd_bookings(args):
    """List bookings, oldest pickup first."""
    fleet = YamlFleetSource(args.fleet_file).load()
    bookings = fleet.get_bookings_sorted(reverse=args.desc)

    if args.vehicle:
        bookings = [b for b in bookings if b.vehicle_id in args.vehicle]
    if args.status:
        bookings = [b for b in bookings if b.status.value == args.status]

    if not bookings:
        print("No bookings found.")
        return 0

    headers = ["Booking", "Vehicle", "Pickup", "Dropoff", "Status", "Customer"]
    print(tabulate(make_bookings_table(bookings), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Export command
# =============================================================================


def cmd_export(args):
    """Write the calendar as CSV."""
    result = run_query(args)
    if args.output:
        with open(args.output, "w", newline="") as fp:
            write_csv(result, fp)
        print(f"Wrote {sum(len(d) for d in result.days.values())} rows to {args.output}")
    else:
        write_csv(result, sys.stdout)

    if not result.ok:
        for vehicle_id, error in result.errors.items():
            print(f"Error ({vehicle_id}): {error}", file=sys.stderr)
        return 1
    return 0


# =============================================================================
# Note commands
# =============================================================================


def describe_note(note: Note) -> None:
    print(f"  Id:      {note.id}")
    print(f"  Vehicle: {note.vehicle_id}")
    if note.end_date and note.end_date != note.date:
        print(f"  Dates:   {note.date} to {note.end_date}")
    else:
        print(f"  Date:    {note.date}")
    print(f"  Type:    {note.note_type.value}")
    if note.text:
        print(f"  Text:    {note.text}")
    print()


def cmd_note_add(args):
    """Add a calendar note."""
    fleet = YamlFleetSource(args.fleet_file).load()
    if fleet.get_vehicle(args.vehicle_id) is None:
        print(f"Error: Unknown vehicle '{args.vehicle_id}'")
        return 1
    if args.end_date and args.end_date < args.date:
        print("Error: --end-date is before the note date")
        return 1

    note = Note(
        id=args.id or uuid.uuid4().hex[:8],
        vehicle_id=args.vehicle_id,
        date=args.date,
        note_type=NoteType(args.type),
        text=args.text or "",
        end_date=args.end_date,
    )

    print(f"Adding note to {args.fleet_file}:")
    describe_note(note)

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    try:
        save_note(args.fleet_file, note)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    print("Note saved.")
    return 0


def cmd_note_edit(args):
    """Change an existing note."""
    fleet = YamlFleetSource(args.fleet_file).load()
    existing = fleet.get_note(args.note_id)
    if existing is None:
        print(f"Error: Unknown note '{args.note_id}'")
        return 1

    note = Note(
        id=existing.id,
        vehicle_id=existing.vehicle_id,
        date=args.date or existing.date,
        note_type=NoteType(args.type) if args.type else existing.note_type,
        text=args.text if args.text is not None else existing.text,
        end_date=args.end_date or existing.end_date,
    )
    if note.last_date < note.date:
        print("Error: note ends before it starts")
        return 1

    print(f"Updating note in {args.fleet_file}:")
    describe_note(note)

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    update_note(args.fleet_file, note)
    print("Note updated.")
    return 0


def cmd_note_delete(args):
    """Remove a note."""
    try:
        delete_note(args.fleet_file, args.note_id)
    except KeyError:
        print(f"Error: Unknown note '{args.note_id}'")
        return 1
    print(f"Note {args.note_id} deleted.")
    return 0


# =============================================================================
# Main
# =============================================================================


def add_window_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--vehicle",
        action="append",
        help="Vehicle id (repeatable, default: all vehicles)",
    )
    parser.add_argument(
        "--search",
        type=str,
        help="Only vehicles whose name contains text (case-insensitive)",
    )
    parser.add_argument(
        "--view",
        choices=["day", "week", "month", "quarter"],
        default="month",
        help="Period around --date (default: month)",
    )
    parser.add_argument(
        "--date",
        type=parse_date,
        help="Date inside the period to show (default: today)",
    )
    parser.add_argument("--month", type=int, choices=range(1, 13), help="Month 1-12")
    parser.add_argument("--year", type=int, help="Year, e.g. 2024")
    parser.add_argument("--start", type=parse_date, help="Explicit start date")
    parser.add_argument("--end", type=parse_date, help="Explicit end date (inclusive)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rental fleet availability calendar",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fleet.yaml calendar --month 6 --year 2024
  %(prog)s fleet.yaml calendar --vehicle c200-1 --view week --date 2024-06-04
  %(prog)s fleet.yaml conflicts --view quarter
  %(prog)s fleet.yaml export --start 2024-06-01 --end 2024-06-30 -o june.csv
  %(prog)s fleet.yaml bookings --status confirmed
  %(prog)s fleet.yaml note-add c200-1 2024-06-10 --end-date 2024-06-12 \\
      --type maintenance --text "Annual service"
  %(prog)s fleet.yaml note-delete n1
""",
    )
    parser.add_argument(
        "fleet_file",
        type=Path,
        help="Path to fleet YAML file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log engine details to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Vehicles subcommand
    vehicles_parser = subparsers.add_parser("vehicles", help="List fleet vehicles")
    vehicles_parser.add_argument("--search", type=str, help="Filter by name")

    # Calendar subcommand
    calendar_parser = subparsers.add_parser(
        "calendar", help="Show day-by-day status per vehicle"
    )
    add_window_arguments(calendar_parser)

    # Conflicts subcommand
    conflicts_parser = subparsers.add_parser(
        "conflicts", help="List double-booked days"
    )
    add_window_arguments(conflicts_parser)

    # Export subcommand
    export_parser = subparsers.add_parser("export", help="Write the calendar as CSV")
    add_window_arguments(export_parser)
    export_parser.add_argument(
        "-o", "--output", type=Path, help="Output file (default: stdout)"
    )

    # Bookings subcommand
    bookings_parser = subparsers.add_parser("bookings", help="List bookings")
    bookings_parser.add_argument("--vehicle", action="append", help="Vehicle id")
    bookings_parser.add_argument(
        "--status",
        choices=[s.value for s in BookingStatus],
        help="Only bookings in this status",
    )
    bookings_parser.add_argument(
        "--desc", action="store_true", help="Newest pickup first"
    )

    # Note subcommands
    note_add_parser = subparsers.add_parser("note-add", help="Add a calendar note")
    note_add_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    note_add_parser.add_argument("date", type=parse_date, help="Note date (YYYY-MM-DD)")
    note_add_parser.add_argument(
        "--end-date", type=parse_date, help="Last day covered (inclusive)"
    )
    note_add_parser.add_argument(
        "--type",
        choices=[t.value for t in NoteType],
        default=NoteType.GENERAL.value,
        help="Note type (default: general)",
    )
    note_add_parser.add_argument("--text", type=str, help="Note text")
    note_add_parser.add_argument("--id", type=str, help="Note id (default: random)")
    note_add_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    note_edit_parser = subparsers.add_parser("note-edit", help="Change a note")
    note_edit_parser.add_argument("note_id", type=str, help="Note id")
    note_edit_parser.add_argument("--date", type=parse_date, help="New start date")
    note_edit_parser.add_argument("--end-date", type=parse_date, help="New end date")
    note_edit_parser.add_argument(
        "--type", choices=[t.value for t in NoteType], help="New note type"
    )
    note_edit_parser.add_argument("--text", type=str, help="New note text")
    note_edit_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be changed without saving",
    )

    note_delete_parser = subparsers.add_parser("note-delete", help="Remove a note")
    note_delete_parser.add_argument("note_id", type=str, help="Note id")

    return parser


COMMANDS = {
    "vehicles": cmd_vehicles,
    "calendar": cmd_calendar,
    "conflicts": cmd_conflicts,
    "bookings": cmd_bookings,
    "export": cmd_export,
    "note-add": cmd_note_add,
    "note-edit": cmd_note_edit,
    "note-delete": cmd_note_delete,
}


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate fleet file exists
    if not args.fleet_file.exists():
        print(f"Error: File not found: {args.fleet_file}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except AvailabilityError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
