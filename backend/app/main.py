"""
FastAPI application entry point.
Sets up the API with lifespan events for database initialization.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from app.config import settings
from app.database import init_db
from app.api.router import api_router
from app.auth.firebase import initialize_firebase
from app.errors import PortalError
from app.middleware.metrics_middleware import MetricsMiddleware
from app.utils.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    - Startup: Initialize database and Firebase Admin SDK
    - Shutdown: Cleanup (if needed)
    """
    # Configure structured JSON logging
    configure_logging('portal-api', settings.log_level)

    # Startup
    await init_db()

    # Skip if Firebase config not provided (local dev without Firebase)
    if settings.firebase_project_id:
        try:
            initialize_firebase()
        except (ValueError, OSError) as e:
            # In production, this should fail fast
            if settings.environment == "production":
                raise
            logger.warning(f"Firebase initialization failed: {e}")

    yield
    # Shutdown (if needed)


# Create FastAPI app
app = FastAPI(
    title="Client Portal API",
    description="Backend API for the multi-tenant client portal",
    version="0.1.0",
    lifespan=lifespan
)

# CORS middleware (browser uploads and API calls)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware (must be after CORS to track all requests)
app.add_middleware(MetricsMiddleware)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    """Render domain errors as {"error": message} with their status code."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Client Portal API",
        "version": "0.1.0",
        "environment": settings.environment
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
