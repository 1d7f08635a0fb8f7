"""
Course Marketplace Backend - FastAPI Application

Main entry point for the application.
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated, AsyncGenerator

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import check_db, close_db, get_db, init_db
from app.api.routes import router as api_router


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info("Starting Course Marketplace Backend (%s)", settings.ENVIRONMENT)
    if settings.is_development and settings.is_sqlite:
        # Local SQLite databases are created on the fly; use Alembic elsewhere
        await init_db()
    yield
    logger.info("Shutting down Course Marketplace Backend")
    await close_db()


# Create FastAPI application
app = FastAPI(
    title="Course Marketplace Backend",
    description="Online course marketplace with enrollment, payments, progress tracking and certificates.",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn unexpected errors into a 500; details only leak in development."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    detail = str(exc) if settings.is_development else "Server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": detail},
    )


# Include API routers
app.include_router(api_router, prefix="/api")


@app.get("/api/healthz", tags=["Health"])
async def health_check(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """
    Health check endpoint.

    Returns:
        dict: Service status, database connectivity and environment.
    """
    database_ok = await check_db(db)
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "connected" if database_ok else "unavailable",
        "environment": settings.ENVIRONMENT,
        "version": API_VERSION,
    }


@app.get("/", tags=["Root"])
async def root() -> dict:
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links.
    """
    return {
        "message": "Welcome to the Course Marketplace API",
        "docs": "/docs",
        "health": "/api/healthz",
    }
