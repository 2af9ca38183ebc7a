"""
FastAPI application for the training session scheduler.

Builds the app with its middleware stack and routers. Startup configures
logging; shutdown drains in-flight notifications and closes the database
pool.

Dependencies: fastapi, uvicorn, training_backend.api.routers
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from training_backend.api.deps.dependencies import get_notification_dispatcher
from training_backend.boundary.db import dispose_engine
from training_backend.configs import get_settings
from training_backend.observability.logger import configure_logging
from training_backend.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

from .routers import health_router, sessions_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(
        "Training session scheduler starting",
        extra={"environment": settings.environment},
    )

    yield

    dispatcher = get_notification_dispatcher()
    logger.info("Draining notifications", extra={"pending": dispatcher.pending})
    await dispatcher.drain()
    await dispose_engine()
    logger.info("Training session scheduler stopped")


def create_app() -> FastAPI:
    """
    Create the scheduler API.

    Returns:
        FastAPI: Application with middleware and /api/v1 routers registered
    """
    app = FastAPI(
        title="Training Session Scheduler API",
        description="Scheduling, registration and attendance for training sessions",
        version="0.1.0",
        debug=get_settings().debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last added runs first: correlation ID is bound before the request is logged
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.include_router(health_router, prefix="/api/v1")
    app.include_router(sessions_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "training_backend.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
