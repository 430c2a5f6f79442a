"""Errors reported by the availability engine and its sources."""

from datetime import date
from typing import Optional


class AvailabilityError(Exception):
    """Base class for availability errors."""

    def __init__(self, message: str, vehicle_id: Optional[str] = None):
        super().__init__(message)
        self.vehicle_id = vehicle_id


class SourceUnavailable(AvailabilityError):
    """Booking or note source failed or timed out."""


class UnknownVehicle(AvailabilityError, LookupError):
    """Vehicle id not recognized by the source."""

    def __init__(self, vehicle_id: str):
        super().__init__(f"Unknown vehicle '{vehicle_id}'", vehicle_id)


class InvalidRange(AvailabilityError, ValueError):
    """Start date after end date."""

    def __init__(self, start: date, end: date):
        super().__init__(f"Invalid range: start {start} is after end {end}")
        self.start = start
        self.end = end
