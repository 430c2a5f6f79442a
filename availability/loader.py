"""YAML loading and saving utilities for fleet data."""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .booking import Booking
from .errors import SourceUnavailable
from .fleet import Fleet
from .note import Note
from .sources import BookingSource, NoteSource, VehicleSource
from .status import BookingStatus, NoteType
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


def _parse_date(value: Any) -> date:
    return date.fromisoformat(str(value)[:10])


def _parse_datetime(value: Any) -> datetime:
    """Parse a naive ISO timestamp. Offsets are refused, timestamps are local."""
    parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is not None:
        raise ValueError(f"Timestamp '{value}' has a UTC offset; use local time")
    return parsed


def _parse_object(dct: Dict[str, Any]) -> Union[Vehicle, Booking, Note, Fleet, dict]:
    """Parse dictionary into appropriate object type."""
    # Vehicle
    if "make" in dct and "model" in dct:
        return Vehicle(
            str(dct["id"]),
            dct["make"],
            dct["model"],
            dct.get("year"),
            dct.get("plate"),
        )
    # Booking
    elif "pickupAt" in dct and "dropoffAt" in dct:
        customer = dct.get("customer") or {}
        return Booking(
            id=str(dct["id"]),
            vehicle_id=str(dct["vehicleId"]),
            pickup_at=_parse_datetime(dct["pickupAt"]),
            dropoff_at=_parse_datetime(dct["dropoffAt"]),
            status=BookingStatus(dct["status"]),
            booking_number=dct.get("bookingNumber"),
            customer_name=customer.get("name"),
            customer_contact=customer.get("contact"),
        )
    # Calendar note
    elif "noteType" in dct:
        start = _parse_date(dct["date"])
        end = _parse_date(dct["endDate"]) if dct.get("endDate") else None
        if end is not None and end < start:
            raise ValueError(f"Note '{dct['id']}' ends before it starts")
        return Note(
            id=str(dct["id"]),
            vehicle_id=str(dct["vehicleId"]),
            date=start,
            note_type=NoteType(dct["noteType"]),
            text=dct.get("text") or "",
            end_date=end,
        )
    # Top-level fleet object
    elif "vehicles" in dct:
        return Fleet(
            dct["vehicles"] or [],
            dct.get("bookings"),
            dct.get("notes"),
        )
    else:
        # Return dict as-is for unknown structures (like 'customer')
        return dct


def load_fleet(filename: Union[str, Path]) -> Fleet:
    """Load a fleet from a YAML file."""
    with open(filename, "rb") as fp:
        # default=str turns YAML dates/timestamps into ISO strings
        json_data = json.dumps(
            yaml.load(fp, Loader=yaml.SafeLoader), indent=4, default=str
        )
        fleet = json.loads(json_data, object_hook=_parse_object)
    if not isinstance(fleet, Fleet):
        raise ValueError(f"{filename}: missing top-level 'vehicles' list")
    return fleet


class YamlFleetSource(BookingSource, NoteSource, VehicleSource):
    """
    Fleet file read fresh on every call.

    Each call sees the file as it is at that moment, so note edits made
    through save_note/update_note/delete_note show up on the next call.
    For a consistent view across one query, call load() once and hand the
    returned Fleet to the engine.
    """

    def __init__(self, filename: Union[str, Path]):
        self.filename = Path(filename)

    def load(self) -> Fleet:
        try:
            return load_fleet(self.filename)
        except (OSError, yaml.YAMLError, KeyError, ValueError) as e:
            logger.warning("Failed to load fleet file %s: %s", self.filename, e)
            raise SourceUnavailable(
                f"Fleet file {self.filename} could not be read: {e}"
            ) from e

    def get_vehicles(self) -> List[Vehicle]:
        return self.load().get_vehicles()

    def get_bookings(
        self, vehicle_id: str, date_from: date, date_to: date
    ) -> List[Booking]:
        return self.load().get_bookings(vehicle_id, date_from, date_to)

    def get_notes(self, vehicle_id: str, date_from: date, date_to: date) -> List[Note]:
        return self.load().get_notes(vehicle_id, date_from, date_to)


def _note_to_dict(note: Note) -> Dict[str, Any]:
    """Serialize a Note to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": note.id,
        "vehicleId": note.vehicle_id,
        "date": note.date.isoformat(),
    }
    if note.end_date is not None and note.end_date != note.date:
        d["endDate"] = note.end_date.isoformat()
    d["noteType"] = note.note_type.value
    if note.text:
        d["text"] = note.text
    return d


def _read_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _write_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _find_note_index(notes: List[Dict[str, Any]], note_id: str) -> int:
    for index, raw in enumerate(notes):
        if str(raw.get("id")) == note_id:
            return index
    raise KeyError(f"Note '{note_id}' not found")


def save_note(filename: Union[str, Path], note: Note) -> None:
    """
    Append a note to a fleet YAML file.

    Loads the raw YAML, appends the note to the notes list,
    and writes back to the file. Note ids must be unique.
    """
    data = _read_raw(filename)

    # Ensure notes list exists
    if data.get("notes") is None:
        data["notes"] = []

    if any(str(raw.get("id")) == note.id for raw in data["notes"]):
        raise ValueError(f"Note '{note.id}' already exists")

    data["notes"].append(_note_to_dict(note))
    _write_raw(filename, data)


def update_note(filename: Union[str, Path], note: Note) -> None:
    """
    Replace the note with the same id in a fleet YAML file.

    Raises KeyError if no note has that id.
    """
    data = _read_raw(filename)
    notes = data.get("notes") or []
    index = _find_note_index(notes, note.id)
    notes[index] = _note_to_dict(note)
    _write_raw(filename, data)


def delete_note(filename: Union[str, Path], note_id: str) -> None:
    """
    Remove the note with the given id from a fleet YAML file.

    Raises KeyError if no note has that id.
    """
    data = _read_raw(filename)
    notes = data.get("notes") or []
    index = _find_note_index(notes, note_id)
    del notes[index]
    _write_raw(filename, data)
