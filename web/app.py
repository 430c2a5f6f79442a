"""Flask web application for fleet availability."""

import io
import os
from datetime import date
from pathlib import Path

from flask import Flask, Response, jsonify, request

# Add parent directory to path for package imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from availability import (
    AvailabilityEngine,
    CalendarNavigator,
    DayInfo,
    InvalidRange,
    SourceUnavailable,
    UnknownVehicle,
    VehicleSource,
    YamlFleetSource,
    write_csv,
)

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

# Fleet file (bundled demo unless FLEET_FILE is set)
app.config["FLEET_FILE"] = Path(
    os.environ.get("FLEET_FILE", Path(__file__).parent.parent / "fleets" / "demo.yaml")
)


def get_source() -> YamlFleetSource:
    return YamlFleetSource(app.config["FLEET_FILE"])


def get_engine() -> AvailabilityEngine:
    """Engine over one snapshot of the fleet file, taken per request."""
    fleet = get_source().load()
    return AvailabilityEngine(fleet, fleet, fleet)


def parse_date_arg(name: str):
    """Read an optional YYYY-MM-DD query argument; None if absent."""
    value = request.args.get(name)
    if not value:
        return None
    return date.fromisoformat(value)


def get_window():
    """
    Date window from query args.

    start/end take precedence; otherwise view (day/week/month/quarter),
    date, month and year drive a CalendarNavigator.
    """
    nav = CalendarNavigator(
        view_mode=request.args.get("view", "month"),
        today=parse_date_arg("date"),
    )
    year = request.args.get("year", type=int)
    month = request.args.get("month", type=int)
    if year:
        nav.set_year(year)
    if month:
        nav.set_month(month)
    start, end = nav.window
    return parse_date_arg("start") or start, parse_date_arg("end") or end


def day_to_dict(day: DayInfo) -> dict:
    """Serialize a DayInfo for JSON responses."""
    return {
        "date": day.date.isoformat(),
        "status": day.status.key,
        "label": day.status.label,
        "hasConflict": day.has_conflict,
        "startTimes": day.start_times,
        "endTimes": day.end_times,
        "bookings": [
            {
                "id": b.id,
                "bookingNumber": b.booking_number,
                "status": b.status.value,
                "pickupAt": b.pickup_at.isoformat(),
                "dropoffAt": b.dropoff_at.isoformat(),
                "customer": b.customer_name,
            }
            for b in day.bookings
        ],
        "notes": [
            {
                "id": n.id,
                "noteType": n.note_type.value,
                "text": n.text,
                "date": n.date.isoformat(),
                "endDate": n.last_date.isoformat(),
            }
            for n in day.notes
        ],
    }


def selected_vehicle_ids(source: VehicleSource):
    """Vehicle ids from ?vehicle=... (repeatable), narrowed by ?q=..."""
    nav = CalendarNavigator(search=request.args.get("q", ""))
    requested = request.args.getlist("vehicle")
    return nav.select_vehicle_ids(source.get_vehicles(), requested)


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


@app.errorhandler(InvalidRange)
def handle_invalid_range(e):
    return error_response(str(e), 400)


@app.errorhandler(ValueError)
def handle_bad_value(e):
    return error_response(str(e), 400)


@app.errorhandler(SourceUnavailable)
def handle_source_unavailable(e):
    return error_response(str(e), 503)


@app.route("/vehicles")
def vehicles():
    """Fleet vehicles, optionally filtered by ?q=name."""
    nav = CalendarNavigator()
    nav.set_search_filter(request.args.get("q", ""))
    return jsonify(
        [
            {"id": v.id, "name": v.name, "plate": v.plate}
            for v in nav.filter_vehicles(get_source().get_vehicles())
        ]
    )


@app.route("/availability")
def availability():
    """Day-by-day availability for the selected vehicles."""
    start, end = get_window()
    if start > end:
        raise InvalidRange(start, end)
    engine = get_engine()
    result = engine.compute(selected_vehicle_ids(engine.vehicle_source), start, end)
    return jsonify(
        {
            "start": start.isoformat(),
            "end": end.isoformat(),
            "vehicles": {
                vehicle_id: [day_to_dict(d) for d in days]
                for vehicle_id, days in result.days.items()
            },
            "errors": {vehicle_id: str(e) for vehicle_id, e in result.errors.items()},
        }
    )


@app.route("/vehicle/<vehicle_id>/availability")
def vehicle_availability(vehicle_id: str):
    """Availability for a single vehicle."""
    start, end = get_window()
    try:
        days = get_engine().compute_vehicle(vehicle_id, start, end)
    except UnknownVehicle as e:
        return error_response(str(e), 404)
    return jsonify([day_to_dict(d) for d in days])


@app.route("/availability.csv")
def availability_csv():
    """CSV export of the availability calendar."""
    start, end = get_window()
    if start > end:
        raise InvalidRange(start, end)
    engine = get_engine()
    result = engine.compute(selected_vehicle_ids(engine.vehicle_source), start, end)

    buf = io.StringIO()
    write_csv(result, buf)
    return Response(
        buf.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=availability-{start}.csv"},
    )


if __name__ == "__main__":
    # Run with debug mode for development
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
