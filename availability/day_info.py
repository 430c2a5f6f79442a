"""DayInfo dataclass: computed status of one vehicle on one day."""

from dataclasses import dataclass, field
from datetime import date
from typing import List

from .booking import Booking
from .note import Note
from .status import DayStatus


@dataclass
class DayInfo:
    """Calculated availability for a (vehicle, date) pair."""

    vehicle_id: str
    date: date
    status: DayStatus
    bookings: List[Booking] = field(default_factory=list)
    notes: List[Note] = field(default_factory=list)
    has_conflict: bool = False
    start_times: List[str] = field(default_factory=list)
    end_times: List[str] = field(default_factory=list)

    @property
    def active_bookings(self) -> List[Booking]:
        return [b for b in self.bookings if not b.is_cancelled]

    @property
    def cancelled_bookings(self) -> List[Booking]:
        return [b for b in self.bookings if b.is_cancelled]

    @property
    def is_available(self) -> bool:
        return self.status == DayStatus.AVAILABLE
