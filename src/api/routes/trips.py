"""
Trip endpoints
==============

POST /api/v1/trip/new        -- create a trip and assign it to a vehicle
GET  /api/v1/trip/{trip_id}  -- trip status, stop index and waypoints
PUT  /api/v1/trip/{trip_id}  -- report a new status from the driver app

Reporting an arrival (ARRIVED_AT_PICKUP, ARRIVED_AT_INTERMEDIATE_DESTINATION,
COMPLETE) removes the trip's first remaining waypoint from the vehicle's
route; CANCELED removes all of them.  UNKNOWN_TRIP_STATUS is refused, as
is any update to a trip that already reached a terminal status.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.dependencies import get_trip_repository, get_vehicle_repository
from src.api.middleware import limiter
from src.api.routes.vehicles import waypoint_response
from src.api.schemas import TripCreateRequest, TripResponse, TripUpdateRequest
from src.config import settings
from src.domain.entities import InvalidStateTransition, Location
from src.domain.enums import (
    ARRIVED_STATUSES,
    TERMINAL_STATUSES,
    TripStatus,
    TripType,
    WaypointType,
)
from src.infrastructure.models import TripModel
from src.infrastructure.repositories import (
    TripRepository,
    VehicleRepository,
    to_waypoint,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trip", tags=["trips"])


async def _trip_response(repo: TripRepository, trip: TripModel) -> TripResponse:
    waypoints = await repo.get_waypoints(trip.id)
    status = TripStatus(trip.status)
    return TripResponse(
        name=f"providers/{settings.provider_id}/trips/{trip.id}",
        trip_id=trip.id,
        vehicle_id=trip.vehicle_id,
        status=status,
        status_code=status.code,
        trip_type=TripType(trip.trip_type),
        intermediate_destination_index=trip.intermediate_destination_index,
        waypoints=[waypoint_response(to_waypoint(w)) for w in waypoints],
    )


def _check_transition(trip: TripModel, new_status: TripStatus) -> None:
    if new_status == TripStatus.UNKNOWN_TRIP_STATUS:
        # Local placeholder status; the provider never stores it.
        raise InvalidStateTransition(
            f"Trip {trip.id} cannot be set to {new_status.value}"
        )
    if TripStatus(trip.status) in TERMINAL_STATUSES:
        raise InvalidStateTransition(
            f"Trip {trip.id} is {TripStatus(trip.status).value}; "
            f"cannot move to {new_status.value}"
        )


@router.post(
    "/new",
    status_code=201,
    response_model=TripResponse,
    summary="Create a trip",
    description=(
        "Creates a NEW trip and appends its pickup, intermediate "
        "destinations and drop-off to the vehicle's route."
    ),
)
@limiter.limit(settings.rate_limit)
async def create_trip(
    request: Request,
    body: TripCreateRequest,
    vehicle_repo: VehicleRepository = Depends(get_vehicle_repository),
    trip_repo: TripRepository = Depends(get_trip_repository),
):

    vehicle = await vehicle_repo.get_by_id(body.vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")

    if body.trip_type.value not in (vehicle.supported_trip_types or []):
        raise HTTPException(
            status_code=409,
            detail=f"Vehicle does not support {body.trip_type.value} trips",
        )

    active = await vehicle_repo.get_active_trip_ids(vehicle.id)
    if (
        active
        and body.trip_type == TripType.EXCLUSIVE
        and not vehicle.back_to_back_enabled
    ):
        raise HTTPException(
            status_code=409,
            detail="Vehicle is busy and back-to-back trips are disabled",
        )

    if body.trip_id and await trip_repo.get_by_id(body.trip_id):
        raise HTTPException(status_code=409, detail="Trip already exists")

    stops = [(WaypointType.PICKUP.value, Location(body.pickup.latitude, body.pickup.longitude))]
    stops += [
        (WaypointType.INTERMEDIATE_DESTINATION.value, Location(p.latitude, p.longitude))
        for p in body.intermediate_destinations
    ]
    stops.append(
        (WaypointType.DROP_OFF.value, Location(body.dropoff.latitude, body.dropoff.longitude))
    )

    trip = await trip_repo.create_trip(
        vehicle_id=vehicle.id,
        stops=stops,
        trip_type=body.trip_type,
        trip_id=body.trip_id,
    )
    logger.info("Trip %s assigned to vehicle %s", trip.id, vehicle.id)
    return await _trip_response(trip_repo, trip)


@router.get(
    "/{trip_id}",
    response_model=TripResponse,
    summary="Get trip status and waypoints",
)
@limiter.limit(settings.rate_limit)
async def get_trip(
    request: Request,
    trip_id: str,
    repo: TripRepository = Depends(get_trip_repository),
):
    trip = await repo.get_by_id(trip_id)
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return await _trip_response(repo, trip)


@router.put(
    "/{trip_id}",
    response_model=TripResponse,
    summary="Update trip status",
)
@limiter.limit(settings.rate_limit)
async def update_trip(
    request: Request,
    trip_id: str,
    body: TripUpdateRequest,
    repo: TripRepository = Depends(get_trip_repository),
):
    trip = await repo.get_by_id(trip_id)
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")

    try:
        _check_transition(trip, body.status)
    except InvalidStateTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc))

    previous = TripStatus(trip.status)
    trip.status = body.status
    if body.intermediate_destination_index is not None:
        trip.intermediate_destination_index = body.intermediate_destination_index

    if body.status == TripStatus.CANCELED:
        await repo.drop_pending_waypoints(trip.id)
    elif body.status in ARRIVED_STATUSES and body.status != previous:
        await repo.pass_next_waypoint(trip.id)

    logger.info(
        "Trip %s: %s -> %s", trip.id, previous.value, body.status.value
    )
    return await _trip_response(repo, trip)
