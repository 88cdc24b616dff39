"""
SQLAlchemy ORM models for the local provider.

Tables
------
* ``vehicles``   -- drivers' vehicles and their B2B / pooling settings
* ``trips``      -- rider trips with lifecycle status and stop index
* ``waypoints``  -- every stop of every trip, ordered per vehicle

A waypoint is *pending* until the vehicle passes it; the vehicle's
remaining route is its pending waypoints ordered by ``position``.

Indexes
-------
* **B-Tree** on ``trips.vehicle_id``, ``trips.status`` and
  ``(waypoints.vehicle_id, waypoints.position)`` for the look-ups the
  vehicle poll performs every few seconds.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)

from .database import Base
from src.domain.enums import TripStatus, TripType, VehicleState


class VehicleModel(Base):
    __tablename__ = "vehicles"

    id = Column(String(64), primary_key=True)
    vehicle_state = Column(
        Enum(VehicleState), default=VehicleState.ONLINE, nullable=False
    )
    back_to_back_enabled = Column(Boolean, default=False, nullable=False)
    maximum_capacity = Column(Integer, default=5, nullable=False)
    supported_trip_types = Column(JSON, default=lambda: [TripType.EXCLUSIVE.value])
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class TripModel(Base):
    __tablename__ = "trips"

    id = Column(String(64), primary_key=True)
    vehicle_id = Column(String(64), ForeignKey("vehicles.id"), nullable=False)
    status = Column(Enum(TripStatus), default=TripStatus.NEW, nullable=False)
    trip_type = Column(Enum(TripType), default=TripType.EXCLUSIVE, nullable=False)
    intermediate_destination_index = Column(Integer, default=-1, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_trips_vehicle", "vehicle_id"),
        Index("idx_trips_status", "status"),
    )


class WaypointModel(Base):
    __tablename__ = "waypoints"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(String(64), ForeignKey("vehicles.id"), nullable=False)
    trip_id = Column(String(64), ForeignKey("trips.id"), nullable=False)
    position = Column(Integer, nullable=False)
    waypoint_type = Column(String(64), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    is_pending = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_waypoints_vehicle_position", "vehicle_id", "position"),
        Index("idx_waypoints_trip", "trip_id"),
    )
