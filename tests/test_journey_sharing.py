"""Tests for the consumer-side trip status observer."""

import pytest

from src.domain.enums import ConsumerAppState, TripStatus
from src.domain.journey_sharing import TripStatusObserver, app_state_for_status


class TestAppStateMapping:
    @pytest.mark.parametrize(
        "status,expected",
        [
            (TripStatus.COMPLETE, ConsumerAppState.TRIP_COMPLETE),
            (TripStatus.CANCELED, ConsumerAppState.TRIP_CANCELED),
            (TripStatus.UNKNOWN_TRIP_STATUS, ConsumerAppState.INITIALIZED),
            (TripStatus.NEW, ConsumerAppState.JOURNEY_SHARING),
            (TripStatus.ENROUTE_TO_PICKUP, ConsumerAppState.JOURNEY_SHARING),
            (
                TripStatus.ARRIVED_AT_INTERMEDIATE_DESTINATION,
                ConsumerAppState.JOURNEY_SHARING,
            ),
        ],
    )
    def test_mapping(self, status, expected):
        assert app_state_for_status(status) == expected


class TestTripStatusObserver:
    def test_non_terminal_status_keeps_journey_sharing(self):
        observer = TripStatusObserver()
        observer.start_journey_sharing()
        observer.on_trip_status_updated(TripStatus.ARRIVED_AT_PICKUP)
        assert observer.app_state == ConsumerAppState.JOURNEY_SHARING
        assert observer.trip_status == TripStatus.ARRIVED_AT_PICKUP

    @pytest.mark.asyncio
    async def test_terminal_status_resets_to_idle_after_delay(self):
        observer = TripStatusObserver(idle_reset_delay_seconds=0)
        observer.on_trip_status_updated(TripStatus.COMPLETE)
        assert observer.app_state == ConsumerAppState.TRIP_COMPLETE

        await observer.wait_for_reset()
        assert observer.app_state == ConsumerAppState.INITIALIZED

    @pytest.mark.asyncio
    async def test_new_journey_cancels_pending_reset(self):
        observer = TripStatusObserver(idle_reset_delay_seconds=60)
        observer.on_trip_status_updated(TripStatus.CANCELED)
        observer.start_journey_sharing()
        await observer.wait_for_reset()
        assert observer.app_state == ConsumerAppState.JOURNEY_SHARING

    @pytest.mark.asyncio
    async def test_listeners_are_notified_until_removed(self):
        observer = TripStatusObserver(idle_reset_delay_seconds=0)
        seen = []

        def listener(state, status):
            seen.append((state, status))

        observer.add_listener(listener)
        observer.on_trip_status_updated(TripStatus.ENROUTE_TO_DROPOFF)
        observer.remove_listener(listener)
        observer.on_trip_status_updated(TripStatus.COMPLETE)
        await observer.wait_for_reset()

        assert seen == [
            (ConsumerAppState.JOURNEY_SHARING, TripStatus.ENROUTE_TO_DROPOFF)
        ]
