"""Destination catalog, timer presets and flight-time estimation."""

from __future__ import annotations

import math
from dataclasses import dataclass

from flightfocus.errors import InvalidSessionError
from flightfocus.models.session import (
    Coordinate,
    Endpoint,
    FlightClass,
    SessionDescriptor,
)

EARTH_RADIUS_KM = 6371.0
CRUISE_SPEED_KMH = 800.0
MIN_FLIGHT_MINUTES = 15
MAX_CUSTOM_MINUTES = 999


@dataclass(frozen=True, slots=True)
class Destination:
    """An airport in the catalog."""

    code: str
    city: str
    country: str
    lat: float
    lon: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lon)

    def to_endpoint(self) -> Endpoint:
        """Endpoint labelled by city, identified by airport code."""
        return Endpoint(code=self.code, label=self.city, coordinate=self.coordinate)


DESTINATIONS: tuple[Destination, ...] = (
    Destination("JFK", "New York", "USA", 40.6413, -73.7781),
    Destination("LHR", "London", "UK", 51.47, -0.4543),
    Destination("NRT", "Tokyo", "Japan", 35.7653, 140.3856),
    Destination("CDG", "Paris", "France", 49.0097, 2.5479),
    Destination("DXB", "Dubai", "UAE", 25.2532, 55.3657),
    Destination("SIN", "Singapore", "Singapore", 1.3644, 103.9915),
    Destination("LAX", "Los Angeles", "USA", 33.9425, -118.4081),
    Destination("SYD", "Sydney", "Australia", -33.9399, 151.1753),
    Destination("AMS", "Amsterdam", "Netherlands", 52.3105, 4.7683),
    Destination("FRA", "Frankfurt", "Germany", 50.0379, 8.5622),
    Destination("HKG", "Hong Kong", "Hong Kong", 22.308, 113.9185),
    Destination("BCN", "Barcelona", "Spain", 41.2974, 2.0833),
    Destination("FCO", "Rome", "Italy", 41.7999, 12.2462),
    Destination("BKK", "Bangkok", "Thailand", 13.69, 100.7501),
    Destination("BOM", "Mumbai", "India", 19.0896, 72.8656),
    Destination("GRU", "São Paulo", "Brazil", -23.4356, -46.4731),
    Destination("CAI", "Cairo", "Egypt", 30.1219, 31.4056),
    Destination("IST", "Istanbul", "Turkey", 41.2753, 28.7519),
    Destination("YYZ", "Toronto", "Canada", 43.6777, -79.6248),
    Destination("SVO", "Moscow", "Russia", 55.9726, 37.4146),
)

_BY_CODE: dict[str, Destination] = {d.code: d for d in DESTINATIONS}


def find_destination(code: str) -> Destination | None:
    """Look up a destination by airport code (case-insensitive)."""
    return _BY_CODE.get(code.strip().upper())


def great_circle_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two points."""
    lat1, lon1 = math.radians(a.lat), math.radians(a.lon)
    lat2, lon2 = math.radians(b.lat), math.radians(b.lon)
    d_lat = lat2 - lat1
    d_lon = lon2 - lon1
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def estimate_flight_minutes(departure: Destination, arrival: Destination) -> int:
    """Rough block time for a route, never shorter than 15 minutes."""
    hours = great_circle_km(departure.coordinate, arrival.coordinate) / CRUISE_SPEED_KMH
    return max(int(math.floor(hours * 60 + 0.5)), MIN_FLIGHT_MINUTES)


@dataclass(frozen=True, slots=True)
class TimerPreset:
    """A quick-start focus timer."""

    name: str
    minutes: int


TIMER_PRESETS: tuple[TimerPreset, ...] = (
    TimerPreset("Quick Focus", 15),
    TimerPreset("Pomodoro", 25),
    TimerPreset("Short Break", 5),
    TimerPreset("Deep Work", 60),
    TimerPreset("Long Break", 15),
    TimerPreset("Extended Focus", 90),
)

# Quick presets skip route selection and fly London -> Paris; custom
# timers fly New York -> Tokyo.
PRESET_ROUTE = ("LHR", "CDG")
CUSTOM_ROUTE = ("JFK", "NRT")


def validate_custom_minutes(minutes: int) -> None:
    """Raise ValueError unless ``minutes`` is within 1..999."""
    if minutes < 1:
        raise ValueError("Please enter a valid number of minutes (1-999).")
    if minutes > MAX_CUSTOM_MINUTES:
        raise ValueError(f"Maximum duration is {MAX_CUSTOM_MINUTES} minutes.")


def plan_flight(
    departure_code: str,
    arrival_code: str,
    minutes: int,
    *,
    flight_class: FlightClass = FlightClass.ECONOMY,
    seat: str = "A1",
) -> SessionDescriptor:
    """Build a session descriptor for a catalog route.

    Raises:
        InvalidSessionError: if either airport code is unknown.
    """
    departure = find_destination(departure_code)
    if departure is None:
        raise InvalidSessionError(f"Unknown departure airport: {departure_code}")
    arrival = find_destination(arrival_code)
    if arrival is None:
        raise InvalidSessionError(f"Unknown arrival airport: {arrival_code}")
    return SessionDescriptor.from_minutes(
        minutes,
        departure.to_endpoint(),
        arrival.to_endpoint(),
        flight_class=flight_class,
        seat=seat.strip().upper(),
    )
