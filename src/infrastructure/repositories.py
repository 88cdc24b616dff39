"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.
"""

from __future__ import annotations

import uuid
from typing import Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import TripModel, VehicleModel, WaypointModel
from src.domain.entities import Location, Vehicle, Waypoint
from src.domain.enums import TERMINAL_STATUSES, TripStatus, TripType, VehicleState


def to_waypoint(model: WaypointModel) -> Waypoint:
    return Waypoint(
        trip_id=model.trip_id,
        waypoint_type=model.waypoint_type,
        location=Location(model.latitude, model.longitude),
    )


class VehicleRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, vehicle_id: str) -> Optional[VehicleModel]:
        return await self.session.get(VehicleModel, vehicle_id)

    async def create_or_update(
        self,
        *,
        vehicle_id: str,
        back_to_back_enabled: bool = False,
        maximum_capacity: int = 5,
        supported_trip_types: Sequence[TripType] = (TripType.EXCLUSIVE,),
    ) -> VehicleModel:
        vehicle = await self.get_by_id(vehicle_id)
        if vehicle is None:
            vehicle = VehicleModel(id=vehicle_id)
            self.session.add(vehicle)
        vehicle.vehicle_state = VehicleState.ONLINE
        vehicle.back_to_back_enabled = back_to_back_enabled
        vehicle.maximum_capacity = maximum_capacity
        vehicle.supported_trip_types = [t.value for t in supported_trip_types]
        await self.session.flush()
        return vehicle

    async def list_all(self) -> list[VehicleModel]:
        result = await self.session.execute(
            select(VehicleModel).order_by(VehicleModel.id)
        )
        return list(result.scalars().all())

    async def get_pending_waypoints(self, vehicle_id: str) -> list[WaypointModel]:
        result = await self.session.execute(
            select(WaypointModel)
            .where(
                WaypointModel.vehicle_id == vehicle_id,
                WaypointModel.is_pending.is_(True),
            )
            .order_by(WaypointModel.position)
        )
        return list(result.scalars().all())

    async def get_active_trip_ids(self, vehicle_id: str) -> list[str]:
        result = await self.session.execute(
            select(TripModel.id)
            .where(
                TripModel.vehicle_id == vehicle_id,
                TripModel.status.not_in(list(TERMINAL_STATUSES)),
            )
            .order_by(TripModel.created_at)
        )
        return list(result.scalars().all())

    async def to_domain(self, vehicle: VehicleModel) -> Vehicle:
        """Assemble the snapshot the driver app polls for."""
        waypoints = await self.get_pending_waypoints(vehicle.id)
        active = await self.get_active_trip_ids(vehicle.id)
        # route order first, then active trips with nothing left to visit
        trip_ids = list(dict.fromkeys(w.trip_id for w in waypoints if w.trip_id in active))
        trip_ids += [t for t in active if t not in trip_ids]
        return Vehicle(
            vehicle_id=vehicle.id,
            vehicle_state=VehicleState(vehicle.vehicle_state),
            waypoints=tuple(to_waypoint(w) for w in waypoints),
            current_trip_ids=tuple(trip_ids),
            back_to_back_enabled=vehicle.back_to_back_enabled,
            supported_trip_types=tuple(
                TripType(t) for t in (vehicle.supported_trip_types or [])
            ),
            maximum_capacity=vehicle.maximum_capacity,
        )


class TripRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, trip_id: str) -> Optional[TripModel]:
        return await self.session.get(TripModel, trip_id)

    async def create_trip(
        self,
        *,
        vehicle_id: str,
        stops: Sequence[tuple[str, Location]],
        trip_type: TripType = TripType.EXCLUSIVE,
        trip_id: str | None = None,
    ) -> TripModel:
        """Create a NEW trip and append its stops to the vehicle's route."""
        trip = TripModel(
            id=trip_id or str(uuid.uuid4()),
            vehicle_id=vehicle_id,
            status=TripStatus.NEW,
            trip_type=trip_type,
            intermediate_destination_index=-1,
        )
        self.session.add(trip)
        await self.session.flush()

        for waypoint_type, location in stops:
            await self.append_waypoint(trip, waypoint_type, location)
        return trip

    async def append_waypoint(
        self, trip: TripModel, waypoint_type: str, location: Location
    ) -> WaypointModel:
        """Add a stop of *trip* at the end of its vehicle's route."""
        result = await self.session.execute(
            select(func.max(WaypointModel.position)).where(
                WaypointModel.vehicle_id == trip.vehicle_id
            )
        )
        last_position = result.scalar()
        waypoint = WaypointModel(
            vehicle_id=trip.vehicle_id,
            trip_id=trip.id,
            position=0 if last_position is None else last_position + 1,
            waypoint_type=waypoint_type,
            latitude=location.latitude,
            longitude=location.longitude,
            is_pending=True,
        )
        self.session.add(waypoint)
        await self.session.flush()
        return waypoint

    async def get_waypoints(self, trip_id: str) -> list[WaypointModel]:
        result = await self.session.execute(
            select(WaypointModel)
            .where(WaypointModel.trip_id == trip_id)
            .order_by(WaypointModel.position)
        )
        return list(result.scalars().all())

    async def pass_next_waypoint(self, trip_id: str) -> Optional[WaypointModel]:
        """Mark the first pending waypoint of the trip as visited."""
        result = await self.session.execute(
            select(WaypointModel)
            .where(
                WaypointModel.trip_id == trip_id,
                WaypointModel.is_pending.is_(True),
            )
            .order_by(WaypointModel.position)
            .limit(1)
        )
        waypoint = result.scalar_one_or_none()
        if waypoint is not None:
            waypoint.is_pending = False
            await self.session.flush()
        return waypoint

    async def drop_pending_waypoints(self, trip_id: str) -> None:
        await self.session.execute(
            update(WaypointModel)
            .where(
                WaypointModel.trip_id == trip_id,
                WaypointModel.is_pending.is_(True),
            )
            .values(is_pending=False)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
