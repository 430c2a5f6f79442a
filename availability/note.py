"""Note dataclass for manually entered calendar annotations."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .status import NoteType


@dataclass
class Note:
    """An admin note (maintenance window, block, free text) for one vehicle."""

    id: str
    vehicle_id: str
    date: date
    note_type: NoteType
    text: str = ""
    end_date: Optional[date] = None  # inclusive; None = single day

    @property
    def last_date(self) -> date:
        """Final day covered; same as date for single-day notes."""
        return self.end_date or self.date

    @property
    def affects_status(self) -> bool:
        return self.note_type in (NoteType.MAINTENANCE, NoteType.BLOCKED)

    def covers(self, day: date) -> bool:
        return self.date <= day <= self.last_date

    def intersects(self, date_from: date, date_to: date) -> bool:
        return self.date <= date_to and self.last_date >= date_from
