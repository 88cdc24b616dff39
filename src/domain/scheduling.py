"""
Vehicle waypoint scheduling.

Given the vehicle's ordered waypoint list (possibly interleaving several
trips) and the trips already accepted, work out in one pass:

* which trips appear for the first time and must be accepted,
* the current waypoint (head of the list),
* the immediate next waypoint (second entry, any trip),
* the next waypoint belonging to the same trip as the current one.

Complexity: O(n) in the number of waypoints.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .entities import Waypoint


@dataclass(frozen=True)
class WaypointSchedule:
    trips_to_accept: tuple[str, ...] = ()
    current_waypoint: Optional[Waypoint] = None
    next_waypoint: Optional[Waypoint] = None
    next_waypoint_of_current_trip: Optional[Waypoint] = None

    @property
    def is_idle(self) -> bool:
        return self.current_waypoint is None


EMPTY_SCHEDULE = WaypointSchedule()


def plan_schedule(
    waypoints: Sequence[Waypoint], accepted_trip_ids: Iterable[str] = ()
) -> WaypointSchedule:
    if not waypoints:
        return EMPTY_SCHEDULE

    seen = set(accepted_trip_ids)
    to_accept: list[str] = []
    current = waypoints[0]
    next_of_current_trip: Optional[Waypoint] = None

    for index, waypoint in enumerate(waypoints):
        if waypoint.trip_id not in seen:
            seen.add(waypoint.trip_id)
            to_accept.append(waypoint.trip_id)

        if (
            index > 0
            and next_of_current_trip is None
            and waypoint.trip_id == current.trip_id
        ):
            next_of_current_trip = waypoint

    return WaypointSchedule(
        trips_to_accept=tuple(to_accept),
        current_waypoint=current,
        next_waypoint=waypoints[1] if len(waypoints) > 1 else None,
        next_waypoint_of_current_trip=next_of_current_trip,
    )
