# pyright: reportMissingTypeStubs=false
"""
Doctor Scheduling Backend API

A FastAPI application for hospital staff to manage doctors' recurring weekly
schedules and leaves, and to book patients into the time slots derived from
them.

Features:
- Weekly schedule management with consistency checks
- Leave / holiday overrides (full-day and partial-day)
- Per-date slot availability with advisory capacity and overbooking warnings
- PostgreSQL database with SQLAlchemy ORM
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import availability, doctors, leaves, schedules
from core.config import AUTO_CREATE_TABLES, LOG_LEVEL
from core.constants import CORS_ORIGINS
from core.database import create_tables
from core.exceptions import NotFoundError, ValidationError

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger(__name__)
logger.info("🏥 Doctor Scheduling API starting...")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("🚀 Starting Doctor Scheduling Backend API")

    if AUTO_CREATE_TABLES:
        create_tables()
        logger.info("✅ Database tables ensured (AUTO_CREATE_TABLES)")

    yield

    logger.info("🛑 Shutting down Doctor Scheduling Backend API")


# Create FastAPI application
app = FastAPI(
    title="Doctor Scheduling Backend",
    description="Weekly schedules, leaves and slot booking for hospital doctors",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI
    redoc_url="/redoc",  # ReDoc
    lifespan=lifespan,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(
    doctors.router,
    prefix="/api",
    tags=["doctors"],
    responses={
        500: {"description": "Internal server error"},
    },
)
app.include_router(
    schedules.router,
    prefix="/api",
    tags=["schedules"],
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Resource not found"},
        500: {"description": "Internal server error"},
    },
)
app.include_router(
    leaves.router,
    prefix="/api",
    tags=["leaves"],
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Resource not found"},
        500: {"description": "Internal server error"},
    },
)
app.include_router(
    availability.router,
    prefix="/api",
    tags=["availability"],
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Resource not found"},
        500: {"description": "Internal server error"},
    },
)


@app.get(
    "/",
    summary="Root endpoint",
    description="Returns basic API information",
)
async def root() -> dict[str, str]:
    """Get API information."""
    return {
        "message": "Doctor Scheduling Backend API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get(
    "/health",
    summary="Health check",
    description="Returns the health status of the API",
)
async def health_check() -> dict[str, str]:
    """Check if the API is healthy and responding."""
    return {"status": "healthy"}


# Global exception handlers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions globally."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "type": "internal_error"},
    )


@app.exception_handler(ValidationError)
async def scheduling_validation_error_handler(request: Request, exc: ValidationError):
    """Handle invalid schedule, leave or booking input."""
    logger.info(f"ValidationError on {request.url.path}: field={exc.field} {exc.message}")
    return JSONResponse(
        status_code=400,
        content={"detail": exc.message, "type": "validation_error", "field": exc.field},
    )


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    """Handle references to unknown doctors, schedules, leaves or bookings."""
    return JSONResponse(
        status_code=404,
        content={"detail": exc.message, "type": "not_found"},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle ValueError exceptions."""
    logger.warning(f"ValueError: {exc}")
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "type": "validation_error"},
    )
