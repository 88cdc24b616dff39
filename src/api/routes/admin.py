"""
Admin / observability endpoints
===============================

GET /api/v1/admin/vehicles -- every vehicle with its remaining route
GET /api/v1/admin/health   -- simple health check
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_vehicle_repository
from src.api.middleware import limiter
from src.api.routes.vehicles import vehicle_response
from src.api.schemas import HealthResponse, VehicleResponse
from src.config import settings
from src.infrastructure.repositories import VehicleRepository

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/vehicles",
    response_model=list[VehicleResponse],
    summary="List all vehicles with their remaining waypoints",
)
@limiter.limit(settings.rate_limit)
async def list_vehicles(
    request: Request,
    repo: VehicleRepository = Depends(get_vehicle_repository),
):
    return [
        vehicle_response(await repo.to_domain(v)) for v in await repo.list_all()
    ]


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
