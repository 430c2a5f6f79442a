"""Status enums for bookings, notes and calendar days."""

from enum import Enum


class DayStatus(Enum):
    """Calendar day status. Lower value = higher priority."""

    BLOCKED = 1
    MAINTENANCE = 2
    OUT_ON_RENT = 3
    RESERVED = 4
    RETURNED = 5
    AVAILABLE = 6

    @property
    def key(self) -> str:
        """Machine name, e.g. 'out_on_rent'."""
        return self.name.lower()

    @property
    def label(self) -> str:
        """Short display label for a day cell."""
        return _DAY_LABELS[self]


_DAY_LABELS = {
    DayStatus.BLOCKED: "Blocked",
    DayStatus.MAINTENANCE: "Maintenance",
    DayStatus.OUT_ON_RENT: "Out/On Rent",
    DayStatus.RESERVED: "Reserved",
    DayStatus.RETURNED: "Returned",
    DayStatus.AVAILABLE: "",
}


class BookingStatus(Enum):
    """Lifecycle state of a booking."""

    PENDING = "pending"
    WAITING_PAYMENT = "waiting_payment"
    CONFIRMED = "confirmed"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Bookings that hold the car
ON_RENT_STATUSES = (BookingStatus.ACTIVE, BookingStatus.CONFIRMED)
# Bookings not yet confirmed
RESERVED_STATUSES = (BookingStatus.PENDING, BookingStatus.WAITING_PAYMENT)


class NoteType(Enum):
    """Kind of calendar note. Only maintenance and blocked affect status."""

    MAINTENANCE = "maintenance"
    BLOCKED = "blocked"
    GENERAL = "general"
