"""
Domain value objects for trips, waypoints and vehicles.

All values are immutable: the lifecycle engine never mutates a
``TripState`` in place, it returns a new one.  A vehicle's ordered
waypoint list may interleave waypoints of several trips (pooling and
back-to-back assignments); each ``Waypoint`` refers to its trip by id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .enums import (
    TERMINAL_STATUSES,
    TripStatus,
    TripType,
    VehicleState,
    WaypointType,
)

NO_INTERMEDIATE_DESTINATION = -1


class InvalidWaypointType(Exception):
    """Raised when a waypoint carries a type outside ``WaypointType``."""

    def __init__(self, waypoint_type: str):
        super().__init__(f"Invalid waypoint type: {waypoint_type!r}")
        self.waypoint_type = waypoint_type


class InvalidStateTransition(Exception):
    """Raised when a status update cannot be applied to a trip."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Waypoint:
    trip_id: str
    # Kept as the raw provider string; unknown types are rejected by the engine.
    waypoint_type: str
    location: Optional[Location] = None

    @property
    def is_intermediate(self) -> bool:
        return self.waypoint_type == WaypointType.INTERMEDIATE_DESTINATION.value


@dataclass(frozen=True)
class TripState:
    trip_id: str
    status: TripStatus = TripStatus.NEW
    intermediate_destination_index: int = NO_INTERMEDIATE_DESTINATION

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


@dataclass(frozen=True)
class Vehicle:
    vehicle_id: str
    vehicle_state: VehicleState = VehicleState.OFFLINE
    waypoints: tuple[Waypoint, ...] = ()
    current_trip_ids: tuple[str, ...] = ()
    back_to_back_enabled: bool = False
    supported_trip_types: tuple[TripType, ...] = field(
        default_factory=lambda: (TripType.EXCLUSIVE,)
    )
    maximum_capacity: int = 5
