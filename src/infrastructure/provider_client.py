"""
HTTP client for the local provider.

Thin ``httpx.AsyncClient`` wrapper used by the driver-side vehicle
controller.  Transport errors and 5xx responses are retried a few times
with linear backoff; anything else surfaces as ``ProviderError``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Sequence

import httpx

from src.config import settings
from src.domain.entities import (
    NO_INTERMEDIATE_DESTINATION,
    Location,
    TripState,
    Vehicle,
    Waypoint,
)
from src.domain.enums import TripStatus, TripType, VehicleState

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Raised when the provider cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


# ── Wire -> domain ────────────────────────────────────────────────────


def parse_waypoint(data: dict[str, Any]) -> Waypoint:
    point = (data.get("location") or {}).get("point")
    location = (
        Location(point.get("latitude", 0.0), point.get("longitude", 0.0))
        if point
        else None
    )
    return Waypoint(
        trip_id=data.get("tripId", ""),
        waypoint_type=data.get("waypointType", ""),
        location=location,
    )


def parse_vehicle(data: dict[str, Any]) -> Vehicle:
    return Vehicle(
        vehicle_id=data.get("vehicleId") or data.get("name", ""),
        vehicle_state=VehicleState(data.get("vehicleState", VehicleState.OFFLINE.value)),
        waypoints=tuple(parse_waypoint(w) for w in data.get("waypoints", [])),
        current_trip_ids=tuple(data.get("currentTripsIds", [])),
        back_to_back_enabled=data.get("backToBackEnabled", False),
        supported_trip_types=tuple(
            TripType(t) for t in data.get("supportedTripTypes", [])
        ),
        maximum_capacity=data.get("maximumCapacity", 5),
    )


def parse_trip_state(data: dict[str, Any]) -> TripState:
    """Trip status as seen by the provider; the numeric code wins when present."""
    if "statusCode" in data:
        status = TripStatus.from_code(data["statusCode"])
    else:
        status = TripStatus(data.get("status", TripStatus.UNKNOWN_TRIP_STATUS.value))
    return TripState(
        trip_id=data.get("tripId", ""),
        status=status,
        intermediate_destination_index=data.get(
            "intermediateDestinationIndex", NO_INTERMEDIATE_DESTINATION
        ),
    )


def trip_update_body(state: TripState) -> dict[str, Any]:
    body: dict[str, Any] = {"status": state.status.value}
    if state.intermediate_destination_index >= 0:
        body["intermediateDestinationIndex"] = state.intermediate_destination_index
    return body


# ── Client ────────────────────────────────────────────────────────────


class ProviderClient:
    def __init__(
        self,
        base_url: str = settings.provider_base_url,
        timeout: float = settings.request_timeout_seconds,
        retries: int = settings.request_retries,
        backoff_seconds: float = settings.retry_backoff_seconds,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.retries = max(1, retries)
        self.backoff = backoff_seconds
        self.client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def _request(
        self, method: str, path: str, json: Optional[dict[str, Any]] = None
    ) -> Any:
        last_error: Optional[Exception] = None
        for attempt in range(1, self.retries + 1):
            try:
                response = await self.client.request(method, path, json=json)
            except httpx.TransportError as exc:
                last_error = exc
                logger.warning(
                    "%s %s failed (attempt %d/%d): %s",
                    method, path, attempt, self.retries, exc,
                )
            else:
                if response.status_code < 500:
                    if response.is_error:
                        raise ProviderError(
                            f"{method} {path} -> {response.status_code}",
                            status_code=response.status_code,
                        )
                    return response.json()
                last_error = ProviderError(
                    f"{method} {path} -> {response.status_code}",
                    status_code=response.status_code,
                )
                logger.warning(
                    "%s %s returned %d (attempt %d/%d)",
                    method, path, response.status_code, attempt, self.retries,
                )

            if attempt < self.retries:
                await asyncio.sleep(self.backoff * attempt)

        if isinstance(last_error, ProviderError):
            raise last_error
        raise ProviderError(f"{method} {path} failed: {last_error}") from last_error

    async def get_vehicle(self, vehicle_id: str) -> Vehicle:
        return parse_vehicle(await self._request("GET", f"/vehicle/{vehicle_id}"))

    async def create_vehicle(
        self,
        vehicle_id: str,
        back_to_back_enabled: bool = True,
        maximum_capacity: int = 5,
        supported_trip_types: Sequence[TripType] = (TripType.EXCLUSIVE,),
    ) -> Vehicle:
        body = {
            "vehicleId": vehicle_id,
            "backToBackEnabled": back_to_back_enabled,
            "maximumCapacity": maximum_capacity,
            "supportedTripTypes": [t.value for t in supported_trip_types],
        }
        return parse_vehicle(await self._request("POST", "/vehicle/new", json=body))

    async def get_or_create_vehicle(self, vehicle_id: str) -> Vehicle:
        """Fetch the vehicle, registering it with B2B enabled when missing."""
        try:
            return await self.get_vehicle(vehicle_id)
        except ProviderError:
            logger.info("Vehicle %s not found, registering it", vehicle_id)
            return await self.create_vehicle(vehicle_id, back_to_back_enabled=True)

    async def get_trip(self, trip_id: str) -> TripState:
        return parse_trip_state(await self._request("GET", f"/trip/{trip_id}"))

    async def update_trip(self, state: TripState) -> dict[str, Any]:
        if state.status == TripStatus.UNKNOWN_TRIP_STATUS:
            raise ValueError("UNKNOWN_TRIP_STATUS is never reported to the provider")
        body = trip_update_body(state)
        data = await self._request("PUT", f"/trip/{state.trip_id}", json=body)
        logger.info("Successfully updated trip %s with %s", state.trip_id, body)
        return data
