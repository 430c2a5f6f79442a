#!/usr/bin/env python3
"""Tests for YAML loading and saving utilities."""

from datetime import date, datetime

import pytest
import yaml

from availability import (
    AvailabilityEngine,
    Booking,
    BookingStatus,
    Fleet,
    Note,
    NoteType,
    SourceUnavailable,
    UnknownVehicle,
    Vehicle,
    YamlFleetSource,
    delete_note,
    load_fleet,
    save_note,
    update_note,
)

FLEET_YAML = """
vehicles:
  - id: c200-1
    make: Mercedes-Benz
    model: C200
    year: 2022
    plate: AB123CD
  - id: golf-1
    make: Volkswagen
    model: Golf

bookings:
  - id: b1
    bookingNumber: DB-1001
    vehicleId: c200-1
    pickupAt: '2024-06-01T10:00'
    dropoffAt: '2024-06-03T10:00'
    status: pending
    customer:
      name: Jane Doe
      contact: jane@example.com

notes:
  - id: n1
    vehicleId: golf-1
    date: '2024-06-10'
    endDate: '2024-06-12'
    noteType: maintenance
    text: Annual service
"""


@pytest.fixture
def fleet_file(tmp_path):
    path = tmp_path / "fleet.yaml"
    path.write_text(FLEET_YAML)
    return path


# =============================================================================
# load_fleet tests
# =============================================================================


class TestLoadFleet:
    """Tests for load_fleet function."""

    def test_loads_vehicles(self, fleet_file):
        fleet = load_fleet(fleet_file)

        assert isinstance(fleet, Fleet)
        assert len(fleet.vehicles) == 2
        assert isinstance(fleet.vehicles[0], Vehicle)
        assert fleet.vehicles[0].id == "c200-1"
        assert fleet.vehicles[0].name == "2022 Mercedes-Benz C200"
        assert fleet.vehicles[0].plate == "AB123CD"
        assert fleet.vehicles[1].year is None

    def test_loads_bookings(self, fleet_file):
        booking = load_fleet(fleet_file).bookings[0]

        assert isinstance(booking, Booking)
        assert booking.id == "b1"
        assert booking.booking_number == "DB-1001"
        assert booking.vehicle_id == "c200-1"
        assert booking.pickup_at == datetime(2024, 6, 1, 10, 0)
        assert booking.dropoff_at == datetime(2024, 6, 3, 10, 0)
        assert booking.status == BookingStatus.PENDING
        assert booking.customer_name == "Jane Doe"
        assert booking.customer_contact == "jane@example.com"

    def test_loads_notes(self, fleet_file):
        note = load_fleet(fleet_file).notes[0]

        assert isinstance(note, Note)
        assert note.vehicle_id == "golf-1"
        assert note.date == date(2024, 6, 10)
        assert note.end_date == date(2024, 6, 12)
        assert note.note_type == NoteType.MAINTENANCE
        assert note.text == "Annual service"

    def test_unquoted_yaml_dates_and_timestamps(self, tmp_path):
        """YAML-native dates and timestamps are accepted."""
        path = tmp_path / "fleet.yaml"
        path.write_text("""
vehicles:
  - {id: v1, make: Audi, model: A3}
bookings:
  - id: b1
    vehicleId: v1
    pickupAt: 2024-06-01 10:00:00
    dropoffAt: 2024-06-03T10:30:00
    status: confirmed
notes:
  - {id: n1, vehicleId: v1, date: 2024-06-10, noteType: blocked}
""")
        fleet = load_fleet(path)
        assert fleet.bookings[0].pickup_at == datetime(2024, 6, 1, 10, 0)
        assert fleet.bookings[0].dropoff_at == datetime(2024, 6, 3, 10, 30)
        assert fleet.notes[0].date == date(2024, 6, 10)
        assert fleet.notes[0].end_date is None

    def test_numeric_ids_become_strings(self, tmp_path):
        path = tmp_path / "fleet.yaml"
        path.write_text("""
vehicles:
  - {id: 7, make: Audi, model: A3}
notes:
  - {id: 1, vehicleId: 7, date: '2024-06-10', noteType: general}
""")
        fleet = load_fleet(path)
        assert fleet.vehicles[0].id == "7"
        assert fleet.notes[0].vehicle_id == "7"

    def test_missing_sections(self, tmp_path):
        path = tmp_path / "fleet.yaml"
        path.write_text("vehicles:\n  - {id: v1, make: Audi, model: A3}\n")
        fleet = load_fleet(path)
        assert fleet.bookings == []
        assert fleet.notes == []

    def test_unknown_status_rejected(self, tmp_path):
        path = tmp_path / "fleet.yaml"
        path.write_text("""
vehicles:
  - {id: v1, make: Audi, model: A3}
bookings:
  - {id: b1, vehicleId: v1, pickupAt: '2024-06-01T10:00',
     dropoffAt: '2024-06-02T10:00', status: lost}
""")
        with pytest.raises(ValueError):
            load_fleet(path)

    def test_missing_vehicles_rejected(self, tmp_path):
        path = tmp_path / "fleet.yaml"
        path.write_text("bookings: []\n")
        with pytest.raises(ValueError):
            load_fleet(path)


# =============================================================================
# YamlFleetSource tests
# =============================================================================


class TestYamlFleetSource:
    """Tests for the YAML-backed source."""

    def test_get_bookings_in_range(self, fleet_file):
        source = YamlFleetSource(fleet_file)
        assert [b.id for b in source.get_bookings("c200-1", date(2024, 6, 3), date(2024, 6, 9))] == ["b1"]
        assert source.get_bookings("c200-1", date(2024, 6, 4), date(2024, 6, 9)) == []

    def test_get_notes_in_range(self, fleet_file):
        source = YamlFleetSource(fleet_file)
        assert [n.id for n in source.get_notes("golf-1", date(2024, 6, 12), date(2024, 6, 20))] == ["n1"]
        assert source.get_notes("c200-1", date(2024, 6, 1), date(2024, 6, 30)) == []

    def test_all_vehicles(self, fleet_file):
        source = YamlFleetSource(fleet_file)
        assert len(source.get_bookings("all", date(2024, 6, 1), date(2024, 6, 30))) == 1
        assert len(source.get_notes("all", date(2024, 6, 1), date(2024, 6, 30))) == 1

    def test_unknown_vehicle(self, fleet_file):
        with pytest.raises(UnknownVehicle):
            YamlFleetSource(fleet_file).get_bookings("ghost", date(2024, 6, 1), date(2024, 6, 2))

    def test_missing_file_is_source_unavailable(self, tmp_path):
        source = YamlFleetSource(tmp_path / "missing.yaml")
        with pytest.raises(SourceUnavailable):
            source.get_vehicles()

    def test_broken_yaml_is_source_unavailable(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("vehicles: [unclosed\n")
        with pytest.raises(SourceUnavailable):
            YamlFleetSource(path).get_bookings("v1", date(2024, 6, 1), date(2024, 6, 2))

    def test_sees_edits_between_calls(self, fleet_file):
        source = YamlFleetSource(fleet_file)
        assert source.get_notes("c200-1", date(2024, 6, 1), date(2024, 6, 30)) == []
        save_note(fleet_file, Note("n2", "c200-1", date(2024, 6, 5), NoteType.BLOCKED))
        assert [n.id for n in source.get_notes("c200-1", date(2024, 6, 1), date(2024, 6, 30))] == ["n2"]


# =============================================================================
# Note CRUD tests
# =============================================================================


class TestSaveNote:
    """Tests for save_note function."""

    def test_appends_note(self, fleet_file):
        note = Note(
            "n2",
            "c200-1",
            date(2024, 7, 1),
            NoteType.BLOCKED,
            "Private event",
            end_date=date(2024, 7, 3),
        )
        save_note(fleet_file, note)

        with open(fleet_file) as f:
            data = yaml.safe_load(f)
        assert len(data["notes"]) == 2
        assert data["notes"][1] == {
            "id": "n2",
            "vehicleId": "c200-1",
            "date": "2024-07-01",
            "endDate": "2024-07-03",
            "noteType": "blocked",
            "text": "Private event",
        }
        assert load_fleet(fleet_file).notes[1] == note

    def test_creates_notes_section_when_missing(self, tmp_path):
        path = tmp_path / "fleet.yaml"
        path.write_text("vehicles:\n  - {id: v1, make: Audi, model: A3}\n")
        save_note(path, Note("n1", "v1", date(2024, 6, 1), NoteType.GENERAL))

        with open(path) as f:
            data = yaml.safe_load(f)
        assert data["notes"] == [
            {"id": "n1", "vehicleId": "v1", "date": "2024-06-01", "noteType": "general"}
        ]

    def test_rejects_duplicate_id(self, fleet_file):
        with pytest.raises(ValueError):
            save_note(fleet_file, Note("n1", "golf-1", date(2024, 6, 1), NoteType.GENERAL))

    def test_preserves_other_sections(self, fleet_file):
        save_note(fleet_file, Note("n2", "golf-1", date(2024, 6, 1), NoteType.GENERAL))
        fleet = load_fleet(fleet_file)
        assert len(fleet.vehicles) == 2
        assert fleet.bookings[0].customer_name == "Jane Doe"


class TestUpdateNote:
    """Tests for update_note function."""

    def test_replaces_note_with_same_id(self, fleet_file):
        update_note(
            fleet_file,
            Note("n1", "golf-1", date(2024, 6, 11), NoteType.BLOCKED, "Bodywork"),
        )
        notes = load_fleet(fleet_file).notes
        assert len(notes) == 1
        assert notes[0].note_type == NoteType.BLOCKED
        assert notes[0].date == date(2024, 6, 11)
        assert notes[0].end_date is None
        assert notes[0].text == "Bodywork"

    def test_raises_key_error_for_unknown_id(self, fleet_file):
        with pytest.raises(KeyError):
            update_note(fleet_file, Note("nope", "golf-1", date(2024, 6, 1), NoteType.GENERAL))


class TestDeleteNote:
    """Tests for delete_note function."""

    def test_removes_note(self, fleet_file):
        delete_note(fleet_file, "n1")
        assert load_fleet(fleet_file).notes == []

    def test_raises_key_error_for_unknown_id(self, fleet_file):
        with pytest.raises(KeyError):
            delete_note(fleet_file, "nope")


# =============================================================================
# Rejected input
# =============================================================================


class TestRejectedInput:
    """Values the loader refuses instead of carrying into the calendar."""

    def test_timestamp_with_offset_rejected(self, tmp_path):
        path = tmp_path / "fleet.yaml"
        path.write_text("""
vehicles:
  - {id: a, make: Audi, model: A3}
bookings:
  - {id: b1, vehicleId: a, pickupAt: '2024-06-01T10:00+02:00',
     dropoffAt: '2024-06-03T10:00', status: confirmed}
""")
        with pytest.raises(ValueError):
            load_fleet(path)

    def test_offset_reported_per_vehicle_by_engine(self, tmp_path):
        """Mixed naive and offset timestamps become source errors, not a crash."""
        path = tmp_path / "fleet.yaml"
        path.write_text("""
vehicles:
  - {id: a, make: Audi, model: A3}
  - {id: b, make: Fiat, model: Panda}
bookings:
  - {id: b1, vehicleId: a, pickupAt: '2024-06-01T10:00+02:00',
     dropoffAt: '2024-06-03T10:00+02:00', status: confirmed}
  - {id: b2, vehicleId: a, pickupAt: '2024-06-02T10:00',
     dropoffAt: '2024-06-04T10:00', status: confirmed}
""")
        source = YamlFleetSource(path)
        engine = AvailabilityEngine(source, source, source)

        result = engine.compute(["a", "b"], date(2024, 6, 1), date(2024, 6, 5))

        assert result.days == {}
        assert set(result.errors) == {"a", "b"}
        assert all(isinstance(e, SourceUnavailable) for e in result.errors.values())

    def test_note_ending_before_start_rejected(self, tmp_path):
        path = tmp_path / "fleet.yaml"
        path.write_text("""
vehicles:
  - {id: a, make: Audi, model: A3}
notes:
  - {id: n1, vehicleId: a, date: '2024-06-12', endDate: '2024-06-10',
     noteType: maintenance}
""")
        with pytest.raises(ValueError):
            load_fleet(path)
        with pytest.raises(SourceUnavailable):
            YamlFleetSource(path).get_notes("a", date(2024, 6, 1), date(2024, 6, 30))
