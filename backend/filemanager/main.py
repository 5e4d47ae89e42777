"""
FastAPI application entry point.
Sets up the API with lifespan events for storage initialization.

Run with:
    uvicorn filemanager.main:app
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from filemanager import __version__
from filemanager.config import get_settings
from filemanager.api.router import api_router
from filemanager.middleware.metrics_middleware import MetricsMiddleware
from filemanager.storage.s3_client import S3ObjectStore
from filemanager.utils.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    - Startup: Load settings and build the object store client. Missing
      storage configuration fails startup here, not on the first request.
    - Shutdown: Cleanup (if needed)
    """
    settings = get_settings()

    # Configure structured JSON logging
    configure_logging('filemanager-api', settings.log_level)

    app.state.object_store = S3ObjectStore.from_settings(settings)

    yield
    # Shutdown (if needed)


# Create FastAPI app
app = FastAPI(
    title="File Manager API",
    description="Upload, list and delete files in an S3-compatible bucket",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware (for browser clients)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware (must be after CORS to track all requests)
app.add_middleware(MetricsMiddleware)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "File Manager API",
        "version": __version__,
        "environment": get_settings().environment
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
