"""Availability engine: per-vehicle, per-day status and conflict calculation."""

import logging
import threading
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterator, List, Optional, Tuple

from .booking import Booking
from .conflicts import has_conflict
from .day_info import DayInfo
from .errors import AvailabilityError, InvalidRange, SourceUnavailable, UnknownVehicle
from .note import Note
from .resolver import bookings_on, end_times, notes_on, resolve_day_status, start_times
from .sources import (
    ALL_VEHICLES,
    BookingSource,
    NoteSource,
    VehicleSelector,
    VehicleSource,
)

logger = logging.getLogger(__name__)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every calendar date from start to end, inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def check_range(start: date, end: date) -> None:
    if start > end:
        raise InvalidRange(start, end)


@dataclass
class CalendarResult:
    """Outcome of one availability query across several vehicles."""

    start: date
    end: date
    days: "OrderedDict[str, List[DayInfo]]" = field(default_factory=OrderedDict)
    errors: Dict[str, AvailabilityError] = field(default_factory=dict)
    sequence: Optional[int] = None

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def vehicle_ids(self) -> List[str]:
        return list(self.days.keys())

    def day_infos(self) -> Iterator[DayInfo]:
        """All DayInfo records, grouped by vehicle, date ascending."""
        for infos in self.days.values():
            yield from infos

    def conflict_days(self) -> List[DayInfo]:
        return [d for d in self.day_infos() if d.has_conflict]


class AvailabilityEngine:
    """
    Computes one DayInfo per vehicle per day from bookings and notes.

    Read-only over its sources; the same source snapshot always yields
    equal results.
    """

    def __init__(
        self,
        booking_source: BookingSource,
        note_source: NoteSource,
        vehicle_source: Optional[VehicleSource] = None,
    ):
        self.booking_source = booking_source
        self.note_source = note_source
        self.vehicle_source = vehicle_source

    def resolve_vehicle_ids(self, vehicle_ids: VehicleSelector) -> List[str]:
        """Expand ALL_VEHICLES (or a single id) to a list of vehicle ids."""
        if vehicle_ids == ALL_VEHICLES:
            if self.vehicle_source is None:
                raise ValueError("A vehicle source is required to query all vehicles")
            return [v.id for v in self.vehicle_source.get_vehicles()]
        if isinstance(vehicle_ids, str):
            return [vehicle_ids]
        # Drop duplicates, keep caller order
        return list(OrderedDict.fromkeys(vehicle_ids))

    def build_day(
        self, vehicle_id: str, day: date, bookings: List[Booking], notes: List[Note]
    ) -> DayInfo:
        """Compute the DayInfo for one day from the vehicle's bookings and notes."""
        day_bookings = bookings_on(day, bookings)
        day_notes = notes_on(day, notes)
        return DayInfo(
            vehicle_id=vehicle_id,
            date=day,
            status=resolve_day_status(day, day_bookings, day_notes),
            bookings=day_bookings,
            notes=day_notes,
            has_conflict=has_conflict(day, day_bookings),
            start_times=start_times(day, day_bookings),
            end_times=end_times(day, day_bookings),
        )

    def compute_vehicle(self, vehicle_id: str, start: date, end: date) -> List[DayInfo]:
        """
        Compute every day from start to end (inclusive) for one vehicle.

        Raises InvalidRange, SourceUnavailable or UnknownVehicle. Days are
        only built once both sources have answered.
        """
        check_range(start, end)
        bookings = self.booking_source.get_bookings(vehicle_id, start, end)
        notes = self.note_source.get_notes(vehicle_id, start, end)

        # Stable ordering so identical snapshots give identical output
        bookings = sorted(
            (b for b in bookings if b.vehicle_id == vehicle_id),
            key=lambda b: (b.pickup_at, b.dropoff_at, b.id),
        )
        notes = sorted(
            (n for n in notes if n.vehicle_id == vehicle_id),
            key=lambda n: (n.date, n.id),
        )

        days = [
            self.build_day(vehicle_id, day, bookings, notes)
            for day in iter_dates(start, end)
        ]
        logger.debug(
            "Computed %d days for %s (%d bookings, %d notes)",
            len(days),
            vehicle_id,
            len(bookings),
            len(notes),
        )
        return days

    def _compute_one(
        self, vehicle_id: str, start: date, end: date
    ) -> Tuple[str, Optional[List[DayInfo]], Optional[AvailabilityError]]:
        try:
            return vehicle_id, self.compute_vehicle(vehicle_id, start, end), None
        except (SourceUnavailable, UnknownVehicle) as e:
            if e.vehicle_id is None:
                e.vehicle_id = vehicle_id
            logger.warning("Availability for %s failed: %s", vehicle_id, e)
            return vehicle_id, None, e

    def compute(
        self,
        vehicle_ids: VehicleSelector,
        start: date,
        end: date,
        max_workers: Optional[int] = None,
        sequence: Optional[int] = None,
    ) -> CalendarResult:
        """
        Compute availability for several vehicles over an inclusive date range.

        InvalidRange is raised before any source is called. A vehicle whose
        sources fail or don't know it is listed in result.errors and
        contributes no days; the rest of the batch is unaffected.

        With max_workers set, vehicles are computed on a thread pool. Result
        order always follows the requested vehicle order.
        """
        check_range(start, end)
        ids = self.resolve_vehicle_ids(vehicle_ids)
        result = CalendarResult(start=start, end=end, sequence=sequence)

        if max_workers and len(ids) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                outcomes = list(
                    pool.map(lambda vid: self._compute_one(vid, start, end), ids)
                )
        else:
            outcomes = [self._compute_one(vid, start, end) for vid in ids]

        for vehicle_id, days, error in outcomes:
            if error is not None:
                result.errors[vehicle_id] = error
            else:
                result.days[vehicle_id] = days
        return result


class ResultSequencer:
    """
    Orders results of repeated queries (e.g. periodic refresh).

    Tag each query with next() and call accept() when its result arrives;
    results older than the newest accepted one are rejected as stale.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._issued = 0
        self._accepted = 0

    def next(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    @property
    def latest_accepted(self) -> int:
        return self._accepted

    def accept(self, sequence: int) -> bool:
        with self._lock:
            if sequence <= self._accepted:
                return False
            self._accepted = sequence
            return True
