"""Tabular export of calendar results."""

import csv
from typing import List, TextIO

from .engine import CalendarResult

EXPORT_HEADERS = [
    "vehicle",
    "date",
    "status",
    "bookings",
    "cancelled",
    "notes",
    "conflict",
]


def make_export_rows(result: CalendarResult) -> List[List[str]]:
    """Flatten a calendar result into CSV rows, one per vehicle per day."""
    rows = []
    for day in result.day_infos():
        rows.append(
            [
                day.vehicle_id,
                day.date.isoformat(),
                day.status.key,
                " ".join(b.display_name for b in day.active_bookings),
                " ".join(b.display_name for b in day.cancelled_bookings),
                " | ".join(f"{n.note_type.value}: {n.text}" for n in day.notes),
                "yes" if day.has_conflict else "no",
            ]
        )
    return rows


def write_csv(result: CalendarResult, fp: TextIO) -> None:
    writer = csv.writer(fp)
    writer.writerow(EXPORT_HEADERS)
    writer.writerows(make_export_rows(result))
