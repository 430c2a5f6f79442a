"""Booking dataclass for customer reservations."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .status import BookingStatus


@dataclass
class Booking:
    """One customer reservation for one vehicle.

    pickup_at < dropoff_at is guaranteed by whoever creates the booking.
    Customer fields are carried through for display only.
    """

    id: str
    vehicle_id: str
    pickup_at: datetime
    dropoff_at: datetime
    status: BookingStatus
    booking_number: Optional[str] = None
    customer_name: Optional[str] = None
    customer_contact: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED

    @property
    def pickup_date(self) -> date:
        return self.pickup_at.date()

    @property
    def dropoff_date(self) -> date:
        return self.dropoff_at.date()

    @property
    def display_name(self) -> str:
        """Booking number if known, else the id."""
        return self.booking_number or self.id

    def touches(self, day: date) -> bool:
        """True if the day falls between pickup and dropoff dates, inclusive."""
        return self.pickup_date <= day <= self.dropoff_date

    def intersects(self, date_from: date, date_to: date) -> bool:
        """True if any touched day falls in [date_from, date_to]."""
        return self.pickup_date <= date_to and self.dropoff_date >= date_from
