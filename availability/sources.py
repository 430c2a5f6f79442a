"""Read interfaces the availability engine consumes."""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Union

from .booking import Booking
from .note import Note
from .vehicle import Vehicle

ALL_VEHICLES = "all"

VehicleSelector = Union[str, List[str]]


class BookingSource(ABC):
    """Supplies bookings for a vehicle and date range."""

    @abstractmethod
    def get_bookings(
        self, vehicle_id: str, date_from: date, date_to: date
    ) -> List[Booking]:
        """
        Return every booking touching [date_from, date_to], cancelled ones
        included. vehicle_id may be ALL_VEHICLES.

        Raises SourceUnavailable on transport failure and UnknownVehicle for
        ids the source doesn't know.
        """


class NoteSource(ABC):
    """Supplies calendar notes for a vehicle and date range."""

    @abstractmethod
    def get_notes(self, vehicle_id: str, date_from: date, date_to: date) -> List[Note]:
        """Return every note intersecting [date_from, date_to]."""


class VehicleSource(ABC):
    """Lists the fleet, used to expand ALL_VEHICLES."""

    @abstractmethod
    def get_vehicles(self) -> List[Vehicle]:
        pass
