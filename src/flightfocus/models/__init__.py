"""Data models for Flight Focus."""

from .cabin import CABINS, CabinLayout, is_valid_seat, occupied_seats, seat_ids
from .destinations import (
    CUSTOM_ROUTE,
    DESTINATIONS,
    PRESET_ROUTE,
    TIMER_PRESETS,
    Destination,
    TimerPreset,
    estimate_flight_minutes,
    find_destination,
    plan_flight,
    validate_custom_minutes,
)
from .history import (
    HISTORY_CAPACITY,
    HistoryRecord,
    RecordIdFactory,
    decode_history,
    encode_history,
    prepend_record,
)
from .session import (
    Coordinate,
    Endpoint,
    FlightClass,
    SessionDescriptor,
    SessionPhase,
    SessionState,
)

__all__ = [
    "CABINS",
    "CUSTOM_ROUTE",
    "CabinLayout",
    "Coordinate",
    "DESTINATIONS",
    "Destination",
    "Endpoint",
    "FlightClass",
    "HISTORY_CAPACITY",
    "HistoryRecord",
    "PRESET_ROUTE",
    "RecordIdFactory",
    "SessionDescriptor",
    "SessionPhase",
    "SessionState",
    "TIMER_PRESETS",
    "TimerPreset",
    "decode_history",
    "encode_history",
    "estimate_flight_minutes",
    "find_destination",
    "is_valid_seat",
    "occupied_seats",
    "plan_flight",
    "prepend_record",
    "seat_ids",
    "validate_custom_minutes",
]
