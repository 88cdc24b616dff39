"""
Seed script -- populates the provider database with sample data.

Run after migrations:
    python seed.py

Creates:
  - 3 vehicles (exclusive only, back-to-back enabled, shared pooling)
  - 1 plain trip
  - 2 back-to-back trips on the same vehicle, the second with two
    intermediate stops
  - 2 pooled trips with interleaved waypoints
"""

import asyncio

from sqlalchemy import text

from src.domain.entities import Location
from src.domain.enums import TripType, WaypointType
from src.infrastructure.database import engine, session_scope
from src.infrastructure.repositories import TripRepository, VehicleRepository

PICKUP = WaypointType.PICKUP.value
STOP = WaypointType.INTERMEDIATE_DESTINATION.value
DROP_OFF = WaypointType.DROP_OFF.value

# Mountain View area (approx)
CAMPUS = Location(37.4220, -122.0841)
DOWNTOWN = Location(37.3947, -122.0790)
STATION = Location(37.3945, -122.0760)
SHORELINE = Location(37.4268, -122.0806)
PARK = Location(37.4005, -122.1090)
MALL = Location(37.4173, -122.1093)


VEHICLES = [
    {"vehicle_id": "Vehicle_1", "back_to_back_enabled": False,
     "supported_trip_types": (TripType.EXCLUSIVE,)},
    {"vehicle_id": "Vehicle_2", "back_to_back_enabled": True,
     "supported_trip_types": (TripType.EXCLUSIVE,)},
    {"vehicle_id": "Vehicle_3", "back_to_back_enabled": True,
     "supported_trip_types": (TripType.EXCLUSIVE, TripType.SHARED)},
]

TRIPS = [
    # Plain trip
    {"trip_id": "trip-plain", "vehicle_id": "Vehicle_1",
     "stops": [(PICKUP, CAMPUS), (DROP_OFF, DOWNTOWN)]},
    # Back-to-back on Vehicle_2; the second has two intermediate stops
    {"trip_id": "trip-b2b-1", "vehicle_id": "Vehicle_2",
     "stops": [(PICKUP, STATION), (DROP_OFF, SHORELINE)]},
    {"trip_id": "trip-b2b-2", "vehicle_id": "Vehicle_2",
     "stops": [(PICKUP, SHORELINE), (STOP, PARK), (STOP, MALL), (DROP_OFF, CAMPUS)]},
]


async def seed():
    async with session_scope() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM vehicles"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        vehicle_repo = VehicleRepository(session)
        trip_repo = TripRepository(session)

        # ── Vehicles ──────────────────────────────────────────────────
        for v in VEHICLES:
            await vehicle_repo.create_or_update(**v)
        print(f"  Created {len(VEHICLES)} vehicles")

        # ── Trips ─────────────────────────────────────────────────────
        for t in TRIPS:
            await trip_repo.create_trip(**t)

        # Pooled trips: waypoints interleave on Vehicle_3
        #   P(a) P(b) D(a) D(b)
        pool_a = await trip_repo.create_trip(
            trip_id="trip-pool-a", vehicle_id="Vehicle_3",
            trip_type=TripType.SHARED, stops=[(PICKUP, DOWNTOWN)],
        )
        pool_b = await trip_repo.create_trip(
            trip_id="trip-pool-b", vehicle_id="Vehicle_3",
            trip_type=TripType.SHARED, stops=[(PICKUP, STATION)],
        )
        await trip_repo.append_waypoint(pool_a, DROP_OFF, CAMPUS)
        await trip_repo.append_waypoint(pool_b, DROP_OFF, MALL)
        print(f"  Created {len(TRIPS) + 2} trips")

    print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
