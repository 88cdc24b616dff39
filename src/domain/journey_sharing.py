"""
Consumer-side trip status observer.

Maps the trip statuses pushed to the rider app into the app's own
``ConsumerAppState``.  Once a trip reaches a terminal status the app
falls back to ``INITIALIZED`` after a short delay, purely for pacing.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from .enums import TERMINAL_STATUSES, ConsumerAppState, TripStatus

logger = logging.getLogger(__name__)

AppStateListener = Callable[[ConsumerAppState, TripStatus], None]


def app_state_for_status(status: TripStatus) -> ConsumerAppState:
    if status == TripStatus.COMPLETE:
        return ConsumerAppState.TRIP_COMPLETE
    if status == TripStatus.CANCELED:
        return ConsumerAppState.TRIP_CANCELED
    if status == TripStatus.UNKNOWN_TRIP_STATUS:
        return ConsumerAppState.INITIALIZED
    return ConsumerAppState.JOURNEY_SHARING


class TripStatusObserver:
    def __init__(self, idle_reset_delay_seconds: float = 5.0):
        self.idle_reset_delay = idle_reset_delay_seconds
        self.app_state = ConsumerAppState.INITIALIZED
        self.trip_status: Optional[TripStatus] = None
        self._listeners: list[AppStateListener] = []
        self._reset_task: Optional[asyncio.Task] = None

    def add_listener(self, listener: AppStateListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: AppStateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start_journey_sharing(self) -> None:
        self._cancel_reset()
        self._set_state(ConsumerAppState.JOURNEY_SHARING)

    def on_trip_status_updated(self, status: TripStatus) -> None:
        """Record *status*; schedule the idle reset when it is terminal."""
        self.trip_status = status
        self._set_state(app_state_for_status(status))

        if status in TERMINAL_STATUSES:
            logger.info("Journey sharing stopped (status=%s)", status.value)
            self._cancel_reset()
            self._reset_task = asyncio.get_running_loop().create_task(
                self._reset_to_idle()
            )

    async def wait_for_reset(self) -> None:
        if self._reset_task:
            await self._reset_task

    async def _reset_to_idle(self) -> None:
        await asyncio.sleep(self.idle_reset_delay)
        self._set_state(ConsumerAppState.INITIALIZED)

    def _cancel_reset(self) -> None:
        if self._reset_task and not self._reset_task.done():
            self._reset_task.cancel()
        self._reset_task = None

    def _set_state(self, state: ConsumerAppState) -> None:
        self.app_state = state
        status = self.trip_status or TripStatus.UNKNOWN_TRIP_STATUS
        for listener in list(self._listeners):
            listener(state, status)
