"""Double-booking detection."""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from .booking import Booking


def bookings_overlap(a: Booking, b: Booking) -> bool:
    """Half-open interval test on full timestamps; touching ends don't count."""
    return a.pickup_at < b.dropoff_at and b.pickup_at < a.dropoff_at


def overlap_window(a: Booking, b: Booking) -> Optional[Tuple[datetime, datetime]]:
    """Shared [start, end) interval of two bookings, or None."""
    if not bookings_overlap(a, b):
        return None
    return max(a.pickup_at, b.pickup_at), min(a.dropoff_at, b.dropoff_at)


def window_occupies(window: Tuple[datetime, datetime], day: date) -> bool:
    """
    Whether an interval occupies a calendar day.

    An interval occupies its start date through the day before its end
    date. One that starts and ends on the same date occupies that date.
    """
    start, end = window
    first = start.date()
    last = end.date() - timedelta(days=1)
    if last < first:
        last = first
    return first <= day <= last


def find_conflicts(
    day: date, bookings: Iterable[Booking]
) -> List[Tuple[Booking, Booking]]:
    """
    Pairs of non-cancelled bookings double-booked on the given day.

    Pairwise comparison, O(n^2) in the bookings touching one vehicle on one
    day. Callers pass a single vehicle's bookings.
    """
    active = [b for b in bookings if not b.is_cancelled and b.touches(day)]
    pairs = []
    for i, first in enumerate(active):
        for second in active[i + 1:]:
            window = overlap_window(first, second)
            if window is not None and window_occupies(window, day):
                pairs.append((first, second))
    return pairs


def has_conflict(day: date, bookings: Iterable[Booking]) -> bool:
    """True if two or more non-cancelled bookings overlap on the day."""
    return bool(find_conflicts(day, bookings))
