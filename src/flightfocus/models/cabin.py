"""Cabin seat layouts."""

from __future__ import annotations

import random
from dataclasses import dataclass

from flightfocus.models.session import FlightClass


@dataclass(frozen=True, slots=True)
class CabinLayout:
    """Rows and seat letters for one cabin class."""

    rows: int
    letters: tuple[str, ...]
    aisle_after: frozenset[str]
    occupancy: float


CABINS: dict[FlightClass, CabinLayout] = {
    # A B C | D E F G | H I
    FlightClass.ECONOMY: CabinLayout(
        rows=30,
        letters=("A", "B", "C", "D", "E", "F", "G", "H", "I"),
        aisle_after=frozenset({"C", "G"}),
        occupancy=0.3,
    ),
    # A | D | F
    FlightClass.BUSINESS: CabinLayout(
        rows=12,
        letters=("A", "D", "F"),
        aisle_after=frozenset({"A", "D"}),
        occupancy=0.2,
    ),
}


def seat_ids(flight_class: FlightClass) -> list[str]:
    """All seat ids for a cabin, row-major (``1A``, ``1B``, ...)."""
    layout = CABINS[flight_class]
    return [
        f"{row}{letter}"
        for row in range(1, layout.rows + 1)
        for letter in layout.letters
    ]


def is_valid_seat(flight_class: FlightClass, seat: str) -> bool:
    """Whether ``seat`` exists in the cabin for ``flight_class``."""
    return seat.strip().upper() in set(seat_ids(flight_class))


def occupied_seats(flight_class: FlightClass, rng: random.Random) -> set[str]:
    """Randomly mark seats as taken by other passengers."""
    layout = CABINS[flight_class]
    return {seat for seat in seat_ids(flight_class) if rng.random() < layout.occupancy}
