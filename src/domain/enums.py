"""Domain enumerations and status groupings."""

import enum


class TripStatus(str, enum.Enum):
    UNKNOWN_TRIP_STATUS = "UNKNOWN_TRIP_STATUS"
    NEW = "NEW"
    ENROUTE_TO_PICKUP = "ENROUTE_TO_PICKUP"
    ARRIVED_AT_PICKUP = "ARRIVED_AT_PICKUP"
    ENROUTE_TO_INTERMEDIATE_DESTINATION = "ENROUTE_TO_INTERMEDIATE_DESTINATION"
    ARRIVED_AT_INTERMEDIATE_DESTINATION = "ARRIVED_AT_INTERMEDIATE_DESTINATION"
    ENROUTE_TO_DROPOFF = "ENROUTE_TO_DROPOFF"
    COMPLETE = "COMPLETE"
    CANCELED = "CANCELED"

    @property
    def code(self) -> int:
        """Fleet Engine numeric code (trips.proto)."""
        return TRIP_STATUS_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> "TripStatus":
        for status, value in TRIP_STATUS_CODES.items():
            if value == code:
                return status
        return cls.UNKNOWN_TRIP_STATUS


TRIP_STATUS_CODES: dict[TripStatus, int] = {
    TripStatus.UNKNOWN_TRIP_STATUS: 0,
    TripStatus.NEW: 1,
    TripStatus.ENROUTE_TO_PICKUP: 2,
    TripStatus.ARRIVED_AT_PICKUP: 3,
    TripStatus.ENROUTE_TO_DROPOFF: 4,
    TripStatus.COMPLETE: 5,
    TripStatus.CANCELED: 6,
    TripStatus.ARRIVED_AT_INTERMEDIATE_DESTINATION: 7,
    TripStatus.ENROUTE_TO_INTERMEDIATE_DESTINATION: 8,
}

TERMINAL_STATUSES: frozenset[TripStatus] = frozenset(
    {TripStatus.UNKNOWN_TRIP_STATUS, TripStatus.COMPLETE, TripStatus.CANCELED}
)

ENROUTE_STATUSES: frozenset[TripStatus] = frozenset(
    {
        TripStatus.ENROUTE_TO_PICKUP,
        TripStatus.ENROUTE_TO_INTERMEDIATE_DESTINATION,
        TripStatus.ENROUTE_TO_DROPOFF,
    }
)

# COMPLETE counts as "arrived": the vehicle is stationed at the dropoff.
ARRIVED_STATUSES: frozenset[TripStatus] = frozenset(
    {
        TripStatus.ARRIVED_AT_PICKUP,
        TripStatus.ARRIVED_AT_INTERMEDIATE_DESTINATION,
        TripStatus.COMPLETE,
    }
)


class WaypointType(str, enum.Enum):
    PICKUP = "PICKUP_WAYPOINT_TYPE"
    INTERMEDIATE_DESTINATION = "INTERMEDIATE_DESTINATION_WAYPOINT_TYPE"
    DROP_OFF = "DROP_OFF_WAYPOINT_TYPE"


class TripType(str, enum.Enum):
    EXCLUSIVE = "EXCLUSIVE"
    SHARED = "SHARED"


class VehicleState(str, enum.Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


class ConsumerAppState(enum.IntEnum):
    UNINITIALIZED = 0
    INITIALIZED = 1
    SELECTING_DROPOFF = 2
    SELECTING_PICKUP = 3
    CONFIRMING_TRIP = 4
    JOURNEY_SHARING = 5
    TRIP_CANCELED = 6
    TRIP_COMPLETE = 7
