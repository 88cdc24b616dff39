"""Unit tests for the trip lifecycle engine (State Pattern)."""

import pytest

from src.domain.entities import InvalidWaypointType, TripState, Waypoint
from src.domain.enums import TripStatus
from src.domain.lifecycle import NEXT_STATUS_RULES, TripLifecycleEngine
from tests.conftest import drop_off, pickup, stop

engine = TripLifecycleEngine()


def _drive(state, *next_waypoints):
    """Apply next_state once per given waypoint, collecting statuses."""
    statuses = [state.status]
    for waypoint in next_waypoints:
        state = engine.next_state(state, waypoint)
        statuses.append(state.status)
    return state, statuses


class TestInitialState:
    def test_initial_status_is_new(self):
        state = engine.initial_state("trip-1")
        assert state.status == TripStatus.NEW

    def test_initial_index_is_minus_one(self):
        assert engine.initial_state("trip-1").intermediate_destination_index == -1

    def test_trip_id_is_kept(self):
        assert engine.initial_state("abc").trip_id == "abc"


class TestNextState:
    # ── Full sequences ────────────────────────────────────────────

    def test_trip_without_intermediate_stops(self):
        state, statuses = _drive(
            engine.initial_state("t"), None, None, drop_off("t"), None
        )
        assert statuses == [
            TripStatus.NEW,
            TripStatus.ENROUTE_TO_PICKUP,
            TripStatus.ARRIVED_AT_PICKUP,
            TripStatus.ENROUTE_TO_DROPOFF,
            TripStatus.COMPLETE,
        ]
        assert state.intermediate_destination_index == -1

    def test_trip_with_one_intermediate_stop(self):
        state = engine.initial_state("t")
        state = engine.next_state(state)  # ENROUTE_TO_PICKUP
        state = engine.next_state(state)  # ARRIVED_AT_PICKUP

        state = engine.next_state(state, stop("t"))
        assert state.status == TripStatus.ENROUTE_TO_INTERMEDIATE_DESTINATION
        assert state.intermediate_destination_index == 0

        state = engine.next_state(state)
        assert state.status == TripStatus.ARRIVED_AT_INTERMEDIATE_DESTINATION
        assert state.intermediate_destination_index == 0

        state = engine.next_state(state, drop_off("t"))
        assert state.status == TripStatus.ENROUTE_TO_DROPOFF
        assert state.intermediate_destination_index == 0

        state = engine.next_state(state)
        assert state.status == TripStatus.COMPLETE
        assert state.intermediate_destination_index == 0

    def test_two_intermediate_stops_increment_index_each_time(self):
        state = TripState("t", TripStatus.ARRIVED_AT_PICKUP)
        state = engine.next_state(state, stop("t"))
        state = engine.next_state(state)
        state = engine.next_state(state, stop("t"))
        assert state.status == TripStatus.ENROUTE_TO_INTERMEDIATE_DESTINATION
        assert state.intermediate_destination_index == 1

    # ── Waypoint-dependent branches ───────────────────────────────

    def test_arrived_at_pickup_without_next_waypoint_goes_to_dropoff(self):
        state = engine.next_state(TripState("t", TripStatus.ARRIVED_AT_PICKUP), None)
        assert state.status == TripStatus.ENROUTE_TO_DROPOFF

    def test_arrived_at_intermediate_without_next_waypoint_goes_to_dropoff(self):
        state = engine.next_state(
            TripState("t", TripStatus.ARRIVED_AT_INTERMEDIATE_DESTINATION, 2), None
        )
        assert state.status == TripStatus.ENROUTE_TO_DROPOFF
        assert state.intermediate_destination_index == 2

    def test_waypoint_ignored_outside_arrival_statuses(self):
        state = engine.next_state(TripState("t", TripStatus.NEW), stop("t"))
        assert state.status == TripStatus.ENROUTE_TO_PICKUP
        assert state.intermediate_destination_index == -1

    # ── Terminal statuses ─────────────────────────────────────────

    @pytest.mark.parametrize(
        "status",
        [TripStatus.COMPLETE, TripStatus.CANCELED, TripStatus.UNKNOWN_TRIP_STATUS],
    )
    def test_terminal_statuses_collapse_to_unknown(self, status):
        state = engine.next_state(TripState("t", status, 3), drop_off("t"))
        assert state.status == TripStatus.UNKNOWN_TRIP_STATUS
        assert state.intermediate_destination_index == 3

    @pytest.mark.parametrize("status", [TripStatus.CANCELED, TripStatus.UNKNOWN_TRIP_STATUS])
    def test_repeated_next_state_on_terminal_never_raises(self, status):
        state = TripState("t", status)
        for _ in range(5):
            state = engine.next_state(state, None)
            assert state.status == TripStatus.UNKNOWN_TRIP_STATUS

    # ── Totality / immutability ───────────────────────────────────

    @pytest.mark.parametrize("status", list(TripStatus))
    @pytest.mark.parametrize("waypoint", [None, pickup("t"), stop("t"), drop_off("t")])
    def test_every_status_has_a_next_status(self, status, waypoint):
        state = engine.next_state(TripState("t", status), waypoint)
        assert isinstance(state.status, TripStatus)
        assert state.trip_id == "t"

    def test_rules_cover_every_status(self):
        assert set(NEXT_STATUS_RULES) == set(TripStatus)

    def test_argument_is_not_mutated(self):
        current = TripState("t", TripStatus.ARRIVED_AT_PICKUP)
        engine.next_state(current, stop("t"))
        assert current == TripState("t", TripStatus.ARRIVED_AT_PICKUP)

    def test_state_is_frozen(self):
        with pytest.raises(AttributeError):
            TripState("t").status = TripStatus.COMPLETE  # type: ignore[misc]


class TestEnrouteStateForWaypoint:
    def test_pickup(self):
        state = engine.enroute_state_for_waypoint(TripState("t", TripStatus.NEW), pickup("t"))
        assert state.status == TripStatus.ENROUTE_TO_PICKUP
        assert state.intermediate_destination_index == -1

    def test_intermediate_increments_index(self):
        state = engine.enroute_state_for_waypoint(
            TripState("t", TripStatus.ARRIVED_AT_PICKUP), stop("t")
        )
        assert state.status == TripStatus.ENROUTE_TO_INTERMEDIATE_DESTINATION
        assert state.intermediate_destination_index == 0

    def test_dropoff_keeps_index(self):
        state = engine.enroute_state_for_waypoint(
            TripState("t", TripStatus.ARRIVED_AT_INTERMEDIATE_DESTINATION, 1), drop_off("t")
        )
        assert state.status == TripStatus.ENROUTE_TO_DROPOFF
        assert state.intermediate_destination_index == 1

    def test_invalid_waypoint_type_raises(self):
        with pytest.raises(InvalidWaypointType):
            engine.enroute_state_for_waypoint(
                TripState("t", TripStatus.NEW), Waypoint("t", "INVALID")
            )

    @pytest.mark.parametrize(
        "waypoint", [pickup("t"), stop("t"), drop_off("t"), Waypoint("t", "INVALID")]
    )
    def test_complete_is_returned_unchanged(self, waypoint):
        current = TripState("t", TripStatus.COMPLETE, 4)
        assert engine.enroute_state_for_waypoint(current, waypoint) is current


class TestStatusGroups:
    @pytest.mark.parametrize("status", list(TripStatus))
    def test_is_enroute(self, status):
        expected = status in {
            TripStatus.ENROUTE_TO_PICKUP,
            TripStatus.ENROUTE_TO_INTERMEDIATE_DESTINATION,
            TripStatus.ENROUTE_TO_DROPOFF,
        }
        assert engine.is_enroute(status) is expected

    @pytest.mark.parametrize("status", list(TripStatus))
    def test_is_arrived(self, status):
        expected = status in {
            TripStatus.ARRIVED_AT_PICKUP,
            TripStatus.ARRIVED_AT_INTERMEDIATE_DESTINATION,
            TripStatus.COMPLETE,
        }
        assert engine.is_arrived(status) is expected


class TestStatusCodes:
    def test_codes_match_fleet_engine(self):
        assert TripStatus.NEW.code == 1
        assert TripStatus.ENROUTE_TO_DROPOFF.code == 4
        assert TripStatus.ENROUTE_TO_INTERMEDIATE_DESTINATION.code == 8

    def test_unknown_code_maps_to_unknown_status(self):
        assert TripStatus.from_code(42) == TripStatus.UNKNOWN_TRIP_STATUS
        assert TripStatus.from_code(5) == TripStatus.COMPLETE
