"""
FastAPI application entry point.

Configures middleware, routes, and exception handlers.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sprintcap import __version__
from sprintcap.core.config import settings
from sprintcap.core.dependencies import get_sprint_config
from sprintcap.core.logging import configure_logging
from sprintcap.engine.exceptions import SprintDetectionOverflow

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging(settings.LOG_LEVEL)
    # Fail fast on inconsistent sprint/work-week settings
    config = get_sprint_config()
    logger.info(
        "Starting Sprintcap API in %s mode (sprint 1 starts %s, %d-week sprints)",
        settings.ENVIRONMENT,
        config.first_sprint_start_date.isoformat(),
        config.sprint_length_weeks,
    )
    yield
    logger.info("Shutting down Sprintcap API")


app = FastAPI(
    title="Sprintcap API",
    description="Sprint detection and team capacity calculations",
    version=__version__,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    openapi_url="/api/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SprintDetectionOverflow)
async def detection_overflow_handler(request: Request, exc: SprintDetectionOverflow) -> JSONResponse:
    logger.error("Sprint detection overflow: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": {
                "code": "SPRINT_DETECTION_OVERFLOW",
                "message": str(exc),
            }
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if settings.DEBUG:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": {
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": str(exc),
                    "type": type(exc).__name__,
                }
            },
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "version": __version__,
    }


from sprintcap.routers import capacity, sprints

app.include_router(sprints.router, prefix="/api/v1", tags=["Sprints"])
app.include_router(capacity.router, prefix="/api/v1", tags=["Capacity"])
