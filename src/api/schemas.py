"""
Pydantic request / response schemas for the REST API.

Field names are camelCase on the wire, matching the payloads the
driver and consumer sample apps exchange with the provider.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.enums import TripStatus, TripType, VehicleState


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class PointSchema(_CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class LocationSchema(_CamelModel):
    point: PointSchema


# ── Requests ──────────────────────────────────────────────────────────


class VehicleCreateRequest(_CamelModel):
    vehicle_id: str = Field(..., min_length=1, max_length=64)
    back_to_back_enabled: bool = False
    maximum_capacity: int = Field(5, ge=1, le=20)
    supported_trip_types: list[TripType] = [TripType.EXCLUSIVE]


class TripCreateRequest(_CamelModel):
    vehicle_id: str
    pickup: PointSchema
    dropoff: PointSchema
    intermediate_destinations: list[PointSchema] = []
    trip_type: TripType = TripType.EXCLUSIVE
    trip_id: Optional[str] = Field(None, max_length=64)


class TripUpdateRequest(_CamelModel):
    status: TripStatus
    intermediate_destination_index: Optional[int] = Field(None, ge=0)


# ── Responses ─────────────────────────────────────────────────────────


class WaypointResponse(_CamelModel):
    trip_id: str
    waypoint_type: str
    location: LocationSchema


class VehicleResponse(_CamelModel):
    name: str
    vehicle_id: str
    vehicle_state: VehicleState
    waypoints: list[WaypointResponse] = []
    current_trips_ids: list[str] = []
    back_to_back_enabled: bool
    supported_trip_types: list[TripType] = []
    maximum_capacity: int


class TripResponse(_CamelModel):
    name: str
    trip_id: str
    vehicle_id: str
    status: TripStatus
    status_code: int
    trip_type: TripType
    intermediate_destination_index: int
    waypoints: list[WaypointResponse] = []


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
