"""
FastAPI application entry point for Planter backend.

This module creates the FastAPI app instance, registers all routers and the
domain error handler, and runs the watering reminder job for the lifetime of
the app.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from planter.config import settings
from planter.db.client import get_service_role_client
from planter.jobs.watering_notifications import WateringNotificationsJob
from planter.routes.chat import router as chat_router
from planter.routes.health import router as health_router
from planter.routes.plants import router as plants_router
from planter.routes.recommendations import router as recommendations_router
from planter.services.notification_service import NotificationService, NotificationStore
from planter.utils.exceptions import PlanterError

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: CORS_ALLOWED_ORIGINS (empty allows none)
    - otherwise: all origins, for local development
    """
    if settings.is_production():
        origins = [origin.strip() for origin in settings.CORS_ORIGINS if origin.strip()]
        if not origins:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed. Set CORS_ALLOWED_ORIGINS for web clients."
            )
        else:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


def _build_watering_job() -> Optional[WateringNotificationsJob]:
    """Watering job over the service_role client, or None when disabled/unconfigured."""
    interval = settings.WATERING_CHECK_INTERVAL_SECONDS
    if interval <= 0:
        logger.info("Watering notifications job disabled (interval <= 0)")
        return None

    if not settings.SUPABASE_URL or not settings.SUPABASE_SECRET_KEY:
        logger.warning("SUPABASE_SECRET_KEY not set; watering notifications job not started")
        return None

    def service_factory() -> NotificationService:
        return NotificationService(NotificationStore(get_service_role_client()))

    return WateringNotificationsJob(service_factory, interval)


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the non-serializable ``ctx``/``input`` payloads."""
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg")}
        for error in exc.errors()
    ]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    job = _build_watering_job()
    if job is not None:
        job.start()

    yield

    if job is not None:
        await job.stop()


# Create FastAPI app
app = FastAPI(
    title="Planter API",
    description="Plant catalog, recommendations and plant-care chat assistant",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


@app.exception_handler(PlanterError)
async def planter_exception_handler(request: Request, exc: PlanterError):
    """Render domain errors as {"error", "details"} with the error's status code."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Custom validation error handler to log detailed errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log detailed validation errors for debugging."""
    logger.error(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "details": jsonable_errors(exc),
        }
    )


# Configure CORS with environment-based origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(plants_router)
app.include_router(recommendations_router)
app.include_router(chat_router)

logger.info("FastAPI app initialized successfully")
