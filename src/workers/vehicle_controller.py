"""
Vehicle Controller Worker
=========================

Driver-side orchestrator.  Polls the provider for the vehicle every
``POLL_INTERVAL_SECONDS`` (default 10 s) and drives the trip lifecycle
engine when the driver moves on to the next step.

Concurrency safety
------------------
* All reads and writes of the trip-state map happen under one
  ``asyncio.Lock``: the poll loop and "driver pressed next" never compute
  a transition from a state that has since been replaced.
* A **Redis distributed lock** per vehicle keeps a second controller
  process from polling and advancing the same vehicle.
* A trip state is stored only after the provider accepted it, so a failed
  request leaves the previous state in place and the next poll retries.
  When the current trip moved on but the follow-on enroute report for the
  next trip failed, that report is kept pending and sent again before the
  next poll or "next" press is applied.

Per poll
--------
1. Fetch the vehicle (ordered waypoints across all assigned trips).
2. Accept every trip seen for the first time (state NEW).
3. Re-point current / next / next-of-current-trip waypoints.
4. Notify listeners with the current trip and its status.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Sequence

import redis.asyncio as aioredis

from src.config import settings
from src.domain.entities import TripState, Vehicle
from src.domain.enums import TripStatus
from src.domain.lifecycle import TripLifecycleEngine
from src.domain.scheduling import EMPTY_SCHEDULE, WaypointSchedule, plan_schedule
from src.infrastructure.locks import DistributedLock
from src.infrastructure.provider_client import ProviderClient, ProviderError

logger = logging.getLogger(__name__)

NO_TRIP_ID = ""

# (trip_id, status, matched_trip_ids)
TripListener = Callable[[str, TripStatus, Sequence[str]], None]


class VehicleController:
    def __init__(
        self,
        provider: ProviderClient,
        vehicle_id: str = settings.vehicle_id,
        redis: Optional[aioredis.Redis] = None,
        engine: TripLifecycleEngine | None = None,
        poll_interval_seconds: float = settings.poll_interval_seconds,
    ):
        self.provider = provider
        self.vehicle_id = vehicle_id
        self.redis = redis
        self.engine = engine or TripLifecycleEngine()
        self.poll_interval = poll_interval_seconds

        self._lock = asyncio.Lock()
        self._trip_states: dict[str, TripState] = {}
        self._schedule: WaypointSchedule = EMPTY_SCHEDULE
        self._matched_trip_ids: tuple[str, ...] = ()
        self._listeners: list[TripListener] = []
        self._pending_advance: Optional[TripState] = None

        self._task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None

    # ── Listeners ─────────────────────────────────────────────────────

    def add_listener(self, listener: TripListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: TripListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ── Read side ─────────────────────────────────────────────────────

    @property
    def schedule(self) -> WaypointSchedule:
        return self._schedule

    def snapshot(self) -> dict[str, TripState]:
        """Copy of the current trip states; safe to read from anywhere."""
        return dict(self._trip_states)

    def is_next_current_trip_waypoint_intermediate(self) -> bool:
        waypoint = self._schedule.next_waypoint_of_current_trip
        return waypoint is not None and waypoint.is_intermediate

    # ── State updates ─────────────────────────────────────────────────

    async def on_vehicle_state_update(self, vehicle: Vehicle) -> None:
        """Apply a vehicle snapshot fetched from the provider."""
        async with self._lock:
            try:
                await self._flush_pending_advance(
                    {w.trip_id for w in vehicle.waypoints}
                )
            except ProviderError:
                logger.exception("Pending trip update failed; retrying next poll")
            self._matched_trip_ids = vehicle.current_trip_ids
            schedule = plan_schedule(vehicle.waypoints, self._trip_states.keys())
            for trip_id in schedule.trips_to_accept:
                await self._accept_trip(trip_id)
            self._schedule = schedule
            if schedule.is_idle:
                logger.info("Vehicle %s has no waypoints left", self.vehicle_id)
            self._notify()

    async def process_next_state(self) -> Optional[TripState]:
        """
        Advance the trip at the head of the route one step.

        Returns the new state, or ``None`` when there is no current trip.
        On arrival, the trip owning the next waypoint (possibly a
        back-to-back or pooled trip) is moved to its enroute status.
        If only that follow-on report fails, ``ProviderError`` is raised and
        the report is sent again before the next poll or press is applied.
        """
        async with self._lock:
            await self._flush_pending_advance()
            current = self._schedule.current_waypoint
            if current is None:
                return None
            previous = self._trip_states.get(current.trip_id)
            if previous is None:
                return None

            updated = self.engine.next_state(
                previous, self._schedule.next_waypoint_of_current_trip
            )
            await self._store_and_report(updated)
            logger.info(
                "Trip %s: %s -> %s (intermediate index %d)",
                updated.trip_id,
                previous.status.value,
                updated.status.value,
                updated.intermediate_destination_index,
            )

            if self.engine.is_arrived(updated.status):
                await self._advance_next_waypoint_on_arrival()

            self._notify()
            return updated

    async def _advance_next_waypoint_on_arrival(self) -> None:
        waypoint = self._schedule.next_waypoint
        if waypoint is None:
            return
        state = self._trip_states.get(waypoint.trip_id)
        if state is None:
            return
        advanced = self.engine.enroute_state_for_waypoint(state, waypoint)
        try:
            await self._store_and_report(advanced)
        except ProviderError:
            self._pending_advance = advanced
            raise

    async def _flush_pending_advance(
        self, route_trip_ids: Optional[set[str]] = None
    ) -> None:
        pending = self._pending_advance
        if pending is None:
            return
        state = self._trip_states.get(pending.trip_id)
        if (
            state is None
            or state.is_terminal
            or (route_trip_ids is not None and pending.trip_id not in route_trip_ids)
        ):
            logger.info("Dropping stale update for trip %s", pending.trip_id)
            self._pending_advance = None
            return
        await self._store_and_report(pending)
        self._pending_advance = None
        logger.info(
            "Trip %s: %s (retried)", pending.trip_id, pending.status.value
        )

    async def _accept_trip(self, trip_id: str) -> None:
        logger.info("Accepting trip %s", trip_id)
        try:
            await self._store_and_report(self.engine.initial_state(trip_id))
        except ProviderError:
            logger.exception("Could not accept trip %s; retrying next poll", trip_id)

    async def _store_and_report(self, state: TripState) -> None:
        # UNKNOWN is kept locally but never sent to the provider.
        if state.status != TripStatus.UNKNOWN_TRIP_STATUS:
            await self.provider.update_trip(state)
        self._trip_states[state.trip_id] = state

    def _notify(self) -> None:
        current = self._schedule.current_waypoint
        state = self._trip_states.get(current.trip_id) if current else None
        if state is None:
            trip_id, status, matched = NO_TRIP_ID, TripStatus.UNKNOWN_TRIP_STATUS, ()
        else:
            trip_id, status, matched = state.trip_id, state.status, self._matched_trip_ids
        for listener in list(self._listeners):
            try:
                listener(trip_id, status, matched)
            except Exception:
                logger.exception("Trip listener failed")

    # ── Poll loop ─────────────────────────────────────────────────────

    async def run_poll_iteration(self) -> bool:
        """Fetch the vehicle once and apply it.  Returns False if skipped."""
        lock = None
        if self.redis is not None:
            lock = DistributedLock.for_vehicle(
                self.redis, self.vehicle_id, ttl_seconds=settings.lock_ttl_seconds
            )
            if not await lock.acquire():
                logger.debug(
                    "Vehicle %s locked by another controller - skipping poll",
                    self.vehicle_id,
                )
                return False

        try:
            vehicle = await self.provider.get_vehicle(self.vehicle_id)
            await self.on_vehicle_state_update(vehicle)
            return True
        finally:
            if lock is not None:
                await lock.release()

    async def start(self) -> None:
        await self.stop()
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._loop())
        logger.info(
            "Vehicle controller started for %s (interval=%ss)",
            self.vehicle_id,
            self.poll_interval,
        )

    async def stop(self) -> None:
        if self._stop_event:
            self._stop_event.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Vehicle controller stopped for %s", self.vehicle_id)

    async def _loop(self) -> None:
        """Periodic loop: poll once then sleep."""
        assert self._stop_event is not None
        while not self._stop_event.is_set():
            try:
                await self.run_poll_iteration()
            except Exception:
                logger.exception("Vehicle poll failed; retrying next interval")
            try:
                await asyncio.wait_for(
                    self._stop_event.wait(), timeout=self.poll_interval
                )
                break
            except asyncio.TimeoutError:
                pass  # next poll
