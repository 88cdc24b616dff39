"""
FastAPI application factory for the local provider.

* Registers routes for vehicles, trips and admin under ``/api/v1``.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.middleware import limiter
from src.api.routes import admin, trips, vehicles

logging.basicConfig(level=logging.INFO)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Trip Lifecycle Provider API",
        description=(
            "Local provider for the driver and consumer apps: vehicles "
            "with an ordered waypoint list, trips moving through their "
            "lifecycle, and back-to-back / shared trip assignment."
        ),
        version="1.0.0",
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(vehicles.router, prefix="/api/v1")
    app.include_router(trips.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
