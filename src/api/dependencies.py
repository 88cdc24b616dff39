"""FastAPI dependency injection helpers."""

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import session_scope
from src.infrastructure.repositories import TripRepository, VehicleRepository


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One unit of work per request; routes never commit themselves."""
    async with session_scope() as session:
        yield session


def get_vehicle_repository(db: AsyncSession = Depends(get_db)) -> VehicleRepository:
    return VehicleRepository(db)


def get_trip_repository(db: AsyncSession = Depends(get_db)) -> TripRepository:
    return TripRepository(db)
