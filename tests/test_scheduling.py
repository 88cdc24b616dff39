"""Unit tests for vehicle waypoint scheduling."""

from src.domain.scheduling import EMPTY_SCHEDULE, plan_schedule
from tests.conftest import drop_off, pickup, stop


class TestPlanSchedule:
    def test_empty_route_is_idle(self):
        schedule = plan_schedule([], accepted_trip_ids={"a"})
        assert schedule == EMPTY_SCHEDULE
        assert schedule.is_idle
        assert schedule.trips_to_accept == ()

    def test_single_trip(self):
        route = [pickup("a"), drop_off("a")]
        schedule = plan_schedule(route)
        assert schedule.trips_to_accept == ("a",)
        assert schedule.current_waypoint == route[0]
        assert schedule.next_waypoint == route[1]
        assert schedule.next_waypoint_of_current_trip == route[1]

    def test_last_waypoint_has_no_next(self):
        route = [drop_off("a")]
        schedule = plan_schedule(route, {"a"})
        assert schedule.current_waypoint == route[0]
        assert schedule.next_waypoint is None
        assert schedule.next_waypoint_of_current_trip is None
        assert schedule.trips_to_accept == ()

    def test_already_accepted_trips_are_skipped(self):
        route = [pickup("a"), drop_off("a"), pickup("b"), drop_off("b")]
        schedule = plan_schedule(route, {"a"})
        assert schedule.trips_to_accept == ("b",)

    def test_back_to_back_trips(self):
        route = [drop_off("a"), pickup("b"), drop_off("b")]
        schedule = plan_schedule(route, {"a"})
        assert schedule.trips_to_accept == ("b",)
        assert schedule.current_waypoint.trip_id == "a"
        assert schedule.next_waypoint == route[1]
        assert schedule.next_waypoint_of_current_trip is None

    def test_pooled_trips_find_next_waypoint_of_same_trip(self):
        route = [pickup("a"), pickup("b"), stop("a"), drop_off("b"), drop_off("a")]
        schedule = plan_schedule(route)
        assert schedule.trips_to_accept == ("a", "b")
        assert schedule.next_waypoint == route[1]
        assert schedule.next_waypoint_of_current_trip == route[2]

    def test_accept_order_follows_route(self):
        route = [pickup("c"), pickup("a"), pickup("b"), drop_off("a")]
        assert plan_schedule(route).trips_to_accept == ("c", "a", "b")
