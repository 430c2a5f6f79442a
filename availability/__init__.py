"""
Rental fleet availability models.

This package computes, for each vehicle and calendar day, one status from
overlapping bookings and admin notes, and flags double bookings:
- DayStatus / BookingStatus / NoteType: status enums
- Booking, Note, Vehicle: source data
- DayInfo: calculated status of one vehicle on one day
- resolve_day_status / has_conflict: per-day rules
- AvailabilityEngine: date-range orchestration across vehicles
- CalendarNavigator: day/week/month/quarter windows and search filter
- Fleet / YamlFleetSource: in-memory and YAML-backed sources
"""

from .status import DayStatus, BookingStatus, NoteType
from .booking import Booking
from .note import Note
from .vehicle import Vehicle
from .day_info import DayInfo
from .errors import AvailabilityError, SourceUnavailable, UnknownVehicle, InvalidRange
from .resolver import resolve_day_status, bookings_on, notes_on
from .conflicts import bookings_overlap, overlap_window, find_conflicts, has_conflict
from .sources import ALL_VEHICLES, BookingSource, NoteSource, VehicleSource
from .fleet import Fleet
from .engine import AvailabilityEngine, CalendarResult, ResultSequencer, iter_dates
from .navigator import CalendarNavigator, ViewMode
from .loader import load_fleet, save_note, update_note, delete_note, YamlFleetSource
from .export import EXPORT_HEADERS, make_export_rows, write_csv

__all__ = [
    "DayStatus",
    "BookingStatus",
    "NoteType",
    "Booking",
    "Note",
    "Vehicle",
    "DayInfo",
    "AvailabilityError",
    "SourceUnavailable",
    "UnknownVehicle",
    "InvalidRange",
    "resolve_day_status",
    "bookings_on",
    "notes_on",
    "bookings_overlap",
    "overlap_window",
    "find_conflicts",
    "has_conflict",
    "ALL_VEHICLES",
    "BookingSource",
    "NoteSource",
    "VehicleSource",
    "Fleet",
    "AvailabilityEngine",
    "CalendarResult",
    "ResultSequencer",
    "iter_dates",
    "CalendarNavigator",
    "ViewMode",
    "load_fleet",
    "save_note",
    "update_note",
    "delete_note",
    "YamlFleetSource",
    "EXPORT_HEADERS",
    "make_export_rows",
    "write_csv",
]
