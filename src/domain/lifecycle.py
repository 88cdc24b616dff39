"""
Trip Lifecycle Engine  (State Pattern)
======================================

Pure transition logic for a single trip::

    NEW -> ENROUTE_TO_PICKUP -> ARRIVED_AT_PICKUP
        -> [ENROUTE_TO_INTERMEDIATE_DESTINATION -> ARRIVED_AT_INTERMEDIATE_DESTINATION]*
        -> ENROUTE_TO_DROPOFF -> COMPLETE

The next waypoint of the trip is consulted only when the vehicle has just
arrived somewhere (pickup or an intermediate stop): it decides whether the
next leg is another intermediate stop or the final drop-off.

Terminal statuses (UNKNOWN, COMPLETE, CANCELED) all map to
UNKNOWN_TRIP_STATUS under ``next_state``.  ``enroute_state_for_waypoint``
on the other hand leaves a COMPLETE state untouched.  Both behaviours are
relied upon by the vehicle controller and are kept as they are.

The engine holds no state and performs no I/O; it is safe to call from
any task or thread.
"""

from __future__ import annotations

from typing import Callable, Optional

from .entities import InvalidWaypointType, TripState, Waypoint
from .enums import ARRIVED_STATUSES, ENROUTE_STATUSES, TripStatus, WaypointType


def _leg_after_stop(next_waypoint: Optional[Waypoint]) -> TripStatus:
    if next_waypoint is not None and next_waypoint.is_intermediate:
        return TripStatus.ENROUTE_TO_INTERMEDIATE_DESTINATION
    return TripStatus.ENROUTE_TO_DROPOFF


def _always(status: TripStatus) -> Callable[[Optional[Waypoint]], TripStatus]:
    return lambda _next_waypoint: status


# current status -> rule computing the next status from the next waypoint
NEXT_STATUS_RULES: dict[TripStatus, Callable[[Optional[Waypoint]], TripStatus]] = {
    TripStatus.NEW: _always(TripStatus.ENROUTE_TO_PICKUP),
    TripStatus.ENROUTE_TO_PICKUP: _always(TripStatus.ARRIVED_AT_PICKUP),
    TripStatus.ARRIVED_AT_PICKUP: _leg_after_stop,
    TripStatus.ENROUTE_TO_INTERMEDIATE_DESTINATION: _always(
        TripStatus.ARRIVED_AT_INTERMEDIATE_DESTINATION
    ),
    TripStatus.ARRIVED_AT_INTERMEDIATE_DESTINATION: _leg_after_stop,
    TripStatus.ENROUTE_TO_DROPOFF: _always(TripStatus.COMPLETE),
    TripStatus.COMPLETE: _always(TripStatus.UNKNOWN_TRIP_STATUS),
    TripStatus.CANCELED: _always(TripStatus.UNKNOWN_TRIP_STATUS),
    TripStatus.UNKNOWN_TRIP_STATUS: _always(TripStatus.UNKNOWN_TRIP_STATUS),
}

ENROUTE_STATUS_BY_WAYPOINT_TYPE: dict[WaypointType, TripStatus] = {
    WaypointType.PICKUP: TripStatus.ENROUTE_TO_PICKUP,
    WaypointType.INTERMEDIATE_DESTINATION: TripStatus.ENROUTE_TO_INTERMEDIATE_DESTINATION,
    WaypointType.DROP_OFF: TripStatus.ENROUTE_TO_DROPOFF,
}

_missing = set(TripStatus) - set(NEXT_STATUS_RULES)
if _missing:
    raise RuntimeError(f"No transition rule for statuses: {sorted(_missing)}")
del _missing


def _advance_index(state: TripState, new_status: TripStatus) -> int:
    if new_status == TripStatus.ENROUTE_TO_INTERMEDIATE_DESTINATION:
        return state.intermediate_destination_index + 1
    return state.intermediate_destination_index


class TripLifecycleEngine:
    """Computes trip states.  Every method returns a new ``TripState``."""

    @staticmethod
    def initial_state(trip_id: str) -> TripState:
        """State assigned to a trip the moment it is accepted."""
        return TripState(trip_id=trip_id, status=TripStatus.NEW)

    @staticmethod
    def next_state(
        current: TripState, next_waypoint: Optional[Waypoint] = None
    ) -> TripState:
        """
        Move *current* one step forward.

        *next_waypoint* is the next pending waypoint of the same trip; it
        only matters when the trip is at its pickup or at an intermediate
        destination.  ``None`` there means the next leg is the drop-off.
        """
        new_status = NEXT_STATUS_RULES[current.status](next_waypoint)
        return TripState(
            trip_id=current.trip_id,
            status=new_status,
            intermediate_destination_index=_advance_index(current, new_status),
        )

    @staticmethod
    def enroute_state_for_waypoint(
        current: TripState, waypoint: Waypoint
    ) -> TripState:
        """
        The "enroute" state to assume once *waypoint* becomes the head of
        the vehicle's queue.

        A COMPLETE trip is returned unchanged whatever the waypoint.
        Otherwise raises ``InvalidWaypointType`` for waypoint data with an
        unknown type.
        """
        if current.status == TripStatus.COMPLETE:
            return current

        try:
            waypoint_type = WaypointType(waypoint.waypoint_type)
        except ValueError:
            raise InvalidWaypointType(waypoint.waypoint_type) from None

        new_status = ENROUTE_STATUS_BY_WAYPOINT_TYPE[waypoint_type]
        return TripState(
            trip_id=current.trip_id,
            status=new_status,
            intermediate_destination_index=_advance_index(current, new_status),
        )

    @staticmethod
    def is_enroute(status: TripStatus) -> bool:
        return status in ENROUTE_STATUSES

    @staticmethod
    def is_arrived(status: TripStatus) -> bool:
        return status in ARRIVED_STATUSES
