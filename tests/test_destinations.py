"""Tests for the destination catalog, presets and cabin layouts."""

from __future__ import annotations

import random

import pytest

from flightfocus.errors import InvalidSessionError
from flightfocus.models import (
    CABINS,
    CUSTOM_ROUTE,
    DESTINATIONS,
    PRESET_ROUTE,
    TIMER_PRESETS,
    FlightClass,
    estimate_flight_minutes,
    find_destination,
    is_valid_seat,
    occupied_seats,
    plan_flight,
    seat_ids,
    validate_custom_minutes,
)


def test_catalog_codes_are_unique() -> None:
    codes = [d.code for d in DESTINATIONS]
    assert len(codes) == len(set(codes)) == 20


def test_find_destination_is_case_insensitive() -> None:
    tokyo = find_destination(" nrt ")
    assert tokyo is not None
    assert tokyo.city == "Tokyo"
    assert find_destination("XXX") is None


def test_routes_and_presets_use_catalog_airports() -> None:
    for code in (*PRESET_ROUTE, *CUSTOM_ROUTE):
        assert find_destination(code) is not None
    assert [p.minutes for p in TIMER_PRESETS] == [15, 25, 5, 60, 15, 90]


def test_estimate_flight_minutes() -> None:
    london = find_destination("LHR")
    paris = find_destination("CDG")
    new_york = find_destination("JFK")
    assert london and paris and new_york
    assert estimate_flight_minutes(london, paris) == 26
    assert 400 < estimate_flight_minutes(london, new_york) < 450
    assert estimate_flight_minutes(london, london) == 15


def test_plan_flight_builds_descriptor() -> None:
    descriptor = plan_flight(
        "jfk", "nrt", 90, flight_class=FlightClass.BUSINESS, seat="2d"
    )
    assert descriptor.departure.code == "JFK"
    assert descriptor.departure.label == "New York"
    assert descriptor.arrival.label == "Tokyo"
    assert descriptor.duration_seconds == 5400
    assert descriptor.flight_class == FlightClass.BUSINESS
    assert descriptor.seat == "2D"


def test_plan_flight_rejects_unknown_airports() -> None:
    with pytest.raises(InvalidSessionError, match="ZZZ"):
        plan_flight("ZZZ", "CDG", 25)
    with pytest.raises(InvalidSessionError, match="arrival"):
        plan_flight("LHR", "ZZZ", 25)


@pytest.mark.parametrize("minutes", [1, 45, 999])
def test_valid_custom_minutes(minutes: int) -> None:
    validate_custom_minutes(minutes)


@pytest.mark.parametrize("minutes", [0, -1, 1000])
def test_invalid_custom_minutes(minutes: int) -> None:
    with pytest.raises(ValueError):
        validate_custom_minutes(minutes)


class TestCabin:
    """Tests for seat layouts."""

    def test_seat_counts(self) -> None:
        assert len(seat_ids(FlightClass.ECONOMY)) == 30 * 9
        assert len(seat_ids(FlightClass.BUSINESS)) == 12 * 3
        assert seat_ids(FlightClass.BUSINESS)[:3] == ["1A", "1D", "1F"]

    def test_is_valid_seat(self) -> None:
        assert is_valid_seat(FlightClass.ECONOMY, "30i")
        assert not is_valid_seat(FlightClass.ECONOMY, "31A")
        assert not is_valid_seat(FlightClass.BUSINESS, "1B")

    def test_occupied_seats_are_seeded(self) -> None:
        first = occupied_seats(FlightClass.ECONOMY, random.Random(1))
        second = occupied_seats(FlightClass.ECONOMY, random.Random(1))
        assert first == second
        assert first <= set(seat_ids(FlightClass.ECONOMY))
        assert 0 < len(first) < len(seat_ids(FlightClass.ECONOMY))
        assert CABINS[FlightClass.BUSINESS].occupancy == 0.2
