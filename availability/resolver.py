"""Day status resolution: one status label per vehicle per day."""

from datetime import date
from typing import Iterable, List

from .booking import Booking
from .note import Note
from .status import (
    BookingStatus,
    DayStatus,
    NoteType,
    ON_RENT_STATUSES,
    RESERVED_STATUSES,
)


def bookings_on(day: date, bookings: Iterable[Booking]) -> List[Booking]:
    """Bookings touching the day, cancelled ones included."""
    return [b for b in bookings if b.touches(day)]


def notes_on(day: date, notes: Iterable[Note]) -> List[Note]:
    """Notes covering the day."""
    return [n for n in notes if n.covers(day)]


def resolve_day_status(
    day: date, bookings: Iterable[Booking], notes: Iterable[Note]
) -> DayStatus:
    """
    Pick the single status for a day.

    Priority (first match wins):
    - BLOCKED: a blocked note covers the day
    - MAINTENANCE: a maintenance note covers the day
    - OUT_ON_RENT: an active/confirmed booking touches the day
    - RESERVED: a pending (or waiting_payment) booking touches the day
    - RETURNED: the day is the dropoff date of a completed booking
    - AVAILABLE: otherwise

    General notes and cancelled bookings never count. Inputs may contain
    bookings/notes outside the day; they are ignored.
    """
    note_types = {n.note_type for n in notes if n.covers(day)}
    if NoteType.BLOCKED in note_types:
        return DayStatus.BLOCKED
    if NoteType.MAINTENANCE in note_types:
        return DayStatus.MAINTENANCE

    touching = [b for b in bookings if not b.is_cancelled and b.touches(day)]
    if any(b.status in ON_RENT_STATUSES for b in touching):
        return DayStatus.OUT_ON_RENT
    if any(b.status in RESERVED_STATUSES for b in touching):
        return DayStatus.RESERVED
    if any(
        b.status == BookingStatus.COMPLETED and b.dropoff_date == day
        for b in touching
    ):
        return DayStatus.RETURNED
    return DayStatus.AVAILABLE


def start_times(day: date, bookings: Iterable[Booking]) -> List[str]:
    """Pickup times (HH:MM) of non-cancelled bookings starting that day."""
    return sorted(
        b.pickup_at.strftime("%H:%M")
        for b in bookings
        if not b.is_cancelled and b.pickup_date == day
    )


def end_times(day: date, bookings: Iterable[Booking]) -> List[str]:
    """Dropoff times (HH:MM) of non-cancelled bookings ending that day."""
    return sorted(
        b.dropoff_at.strftime("%H:%M")
        for b in bookings
        if not b.is_cancelled and b.dropoff_date == day
    )
