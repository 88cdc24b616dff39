"""
Driver-side vehicle controller
==============================
Registers the vehicle with the provider and keeps polling it, accepting
new trips as they are assigned. Run with: python driver.py

Press Enter to advance the current trip to its next status; Ctrl+C quits.
"""

import asyncio
import logging

from src.config import settings
from src.infrastructure.provider_client import ProviderClient, ProviderError
from src.infrastructure.redis_client import close_redis, get_redis
from src.workers.vehicle_controller import VehicleController

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("driver")


def show_trip(trip_id, status, matched_trip_ids):
    if not trip_id:
        logger.info("No active trip")
    else:
        logger.info(
            "Trip %s: %s (matched: %s)",
            trip_id, status.value, ", ".join(matched_trip_ids) or "-",
        )


async def main():
    async with ProviderClient() as provider:
        await provider.get_or_create_vehicle(settings.vehicle_id)
        controller = VehicleController(
            provider, settings.vehicle_id, redis=await get_redis()
        )
        controller.add_listener(show_trip)
        await controller.start()
        try:
            while True:
                await asyncio.to_thread(input)
                try:
                    await controller.process_next_state()
                except ProviderError:
                    logger.exception("Could not advance trip; press Enter to retry")
        finally:
            controller.remove_listener(show_trip)
            await controller.stop()
            await close_redis()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
