from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator, Optional

from fastapi import FastAPI

import config
from api import create_router, register_exception_handlers
from availability import AvailabilityIndex
from catalog import InMemoryCatalog
from graphql_api import create_graphql_router
from queries import BookingQueries
from repository import InMemoryBookingRepository
from seed import seed_bookings, seed_catalog
from services import BookingService

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("booking")


async def completion_sweep_loop(service: BookingService, interval_seconds: int) -> None:
    """Periodically move elapsed CONFIRMED bookings to COMPLETED."""
    while True:
        try:
            await asyncio.to_thread(service.complete_elapsed_bookings)
        except Exception:
            logger.exception("Completion sweep failed")
        await asyncio.sleep(interval_seconds)


def create_app(service: BookingService, queries: BookingQueries, lifespan=None) -> FastAPI:
    app = FastAPI(title=config.APP_NAME, version=config.APP_VERSION, lifespan=lifespan)
    register_exception_handlers(app)
    app.include_router(create_router(service, queries))
    app.include_router(create_graphql_router(service, queries), prefix="/graphql")
    return app


# Wire up dependencies (in-memory stores)
_repo = InMemoryBookingRepository()
_index = AvailabilityIndex()
_catalog = InMemoryCatalog()
_service = BookingService(_repo, _index, _catalog)
_queries = BookingQueries(_catalog, _repo)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if config.SEED_DEMO_DATA and seed_catalog(_catalog) and config.SEED_BOOKINGS > 0:
        seed_bookings(_service, _catalog, config.SEED_BOOKINGS)
    _index.rebuild(_repo.get_all())

    sweep: Optional[asyncio.Task] = None
    if config.COMPLETION_SWEEP_SECONDS > 0:
        sweep = asyncio.create_task(completion_sweep_loop(_service, config.COMPLETION_SWEEP_SECONDS))
    logger.info("Startup complete")
    try:
        yield
    finally:
        if sweep is not None:
            sweep.cancel()
            with suppress(asyncio.CancelledError):
                await sweep
        logger.info("Shutdown complete")


app = create_app(_service, _queries, lifespan=lifespan)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
