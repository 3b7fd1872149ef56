"""
FastAPI application factory.

This file:
1. Creates the FastAPI app
2. Runs startup logic (create the RealTimeScheduler the routes share)
3. Registers all routers (realtime, health)

The `lifespan` context manager is FastAPI's way of handling startup/shutdown.

To run:  uvicorn api.main:app --host 0.0.0.0 --port 8000 --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from config.settings import settings
from api.routers import health, realtime
from scheduler.engine import RealTimeScheduler

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: attach one scheduler instance to the app. It is owned by the
    app, not by a module global, so each app (and each test) gets its own.
    """
    app.state.scheduler = RealTimeScheduler()
    logger.info(f"API ready — default policy: {settings.DEFAULT_SCHEDULING_POLICY}")

    yield

    logger.info("API shut down")


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    app = FastAPI(
        title="Real-Time Scheduler",
        description="Discrete-time simulator for periodic tasks under RMS, EDF, DMS and LST",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(realtime.router)

    return app


# This is what uvicorn imports: `uvicorn api.main:app`
app = create_app()
