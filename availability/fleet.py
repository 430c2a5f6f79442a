"""Fleet aggregate: vehicles, bookings and notes held in memory."""

from datetime import date
from typing import List, Optional

from .booking import Booking
from .errors import UnknownVehicle
from .note import Note
from .sources import ALL_VEHICLES, BookingSource, NoteSource, VehicleSource
from .vehicle import Vehicle


class Fleet(BookingSource, NoteSource, VehicleSource):
    """Complete fleet snapshot. Serves as booking, note and vehicle source."""

    def __init__(
        self,
        vehicles: List[Vehicle],
        bookings: Optional[List[Booking]] = None,
        notes: Optional[List[Note]] = None,
    ):
        self.vehicles = vehicles
        self.bookings = bookings or []
        self.notes = notes or []

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        """Find a vehicle by id."""
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    def get_note(self, note_id: str) -> Optional[Note]:
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    def _check_vehicle(self, vehicle_id: str) -> None:
        if vehicle_id != ALL_VEHICLES and self.get_vehicle(vehicle_id) is None:
            raise UnknownVehicle(vehicle_id)

    def get_vehicles(self) -> List[Vehicle]:
        return list(self.vehicles)

    def get_bookings(
        self, vehicle_id: str, date_from: date, date_to: date
    ) -> List[Booking]:
        self._check_vehicle(vehicle_id)
        return [
            b
            for b in self.bookings
            if (vehicle_id == ALL_VEHICLES or b.vehicle_id == vehicle_id)
            and b.intersects(date_from, date_to)
        ]

    def get_notes(self, vehicle_id: str, date_from: date, date_to: date) -> List[Note]:
        self._check_vehicle(vehicle_id)
        return [
            n
            for n in self.notes
            if (vehicle_id == ALL_VEHICLES or n.vehicle_id == vehicle_id)
            and n.intersects(date_from, date_to)
        ]

    def get_bookings_sorted(self, reverse: bool = False) -> List[Booking]:
        """Bookings ordered by pickup time."""
        return sorted(self.bookings, key=lambda b: (b.pickup_at, b.id), reverse=reverse)
