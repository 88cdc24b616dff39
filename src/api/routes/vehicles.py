"""
Vehicle endpoints
=================

GET  /api/v1/vehicle/{vehicle_id} -- vehicle snapshot polled by the driver app
POST /api/v1/vehicle/new          -- register (or update) a vehicle
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.dependencies import get_vehicle_repository
from src.api.middleware import limiter
from src.api.schemas import (
    LocationSchema,
    PointSchema,
    VehicleCreateRequest,
    VehicleResponse,
    WaypointResponse,
)
from src.config import settings
from src.domain.entities import Location, Vehicle, Waypoint
from src.infrastructure.repositories import VehicleRepository

router = APIRouter(prefix="/vehicle", tags=["vehicles"])


def waypoint_response(waypoint: Waypoint) -> WaypointResponse:
    location = waypoint.location or Location(0.0, 0.0)
    return WaypointResponse(
        trip_id=waypoint.trip_id,
        waypoint_type=waypoint.waypoint_type,
        location=LocationSchema(
            point=PointSchema(
                latitude=location.latitude, longitude=location.longitude
            )
        ),
    )


def vehicle_response(vehicle: Vehicle) -> VehicleResponse:
    return VehicleResponse(
        name=f"providers/{settings.provider_id}/vehicles/{vehicle.vehicle_id}",
        vehicle_id=vehicle.vehicle_id,
        vehicle_state=vehicle.vehicle_state,
        waypoints=[waypoint_response(w) for w in vehicle.waypoints],
        current_trips_ids=list(vehicle.current_trip_ids),
        back_to_back_enabled=vehicle.back_to_back_enabled,
        supported_trip_types=list(vehicle.supported_trip_types),
        maximum_capacity=vehicle.maximum_capacity,
    )


@router.post(
    "/new",
    response_model=VehicleResponse,
    summary="Register or update a vehicle",
)
@limiter.limit(settings.rate_limit)
async def create_vehicle(
    request: Request,
    body: VehicleCreateRequest,
    repo: VehicleRepository = Depends(get_vehicle_repository),
):
    vehicle = await repo.create_or_update(
        vehicle_id=body.vehicle_id,
        back_to_back_enabled=body.back_to_back_enabled,
        maximum_capacity=body.maximum_capacity,
        supported_trip_types=body.supported_trip_types,
    )
    return vehicle_response(await repo.to_domain(vehicle))


@router.get(
    "/{vehicle_id}",
    response_model=VehicleResponse,
    summary="Get the vehicle's remaining waypoints and trips",
)
@limiter.limit(settings.rate_limit)
async def get_vehicle(
    request: Request,
    vehicle_id: str,
    repo: VehicleRepository = Depends(get_vehicle_repository),
):
    vehicle = await repo.get_by_id(vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle_response(await repo.to_domain(vehicle))
