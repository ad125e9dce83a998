"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.config import settings
from app.middleware.error_handler import ErrorHandlerMiddleware
from app.api.v1.routers import carbon, scene

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_requests}/minute"],
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Logs the effective configuration on startup.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Carbon constants: absorbed={settings.co2_absorbed_per_tree_per_year}kg/tree/year, "
                f"released={settings.co2_released_per_cut_tree}kg/cut tree")
    logger.info(f"Scene defaults: {settings.scene_total_slots} markers, "
                f"{settings.scene_width}x{settings.scene_height}, "
                f"separation={settings.scene_min_separation} ({settings.layout_separation_metric})")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")

    yield

    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Carbon Accounting API for Forest Monitoring

    This API turns a log of tree planting and cutting activity into
    per-period statistics, a CO₂ balance and a decorative forest scene.

    ## Features

    - **Period Aggregation**: Daily, weekly, monthly and yearly totals
    - **Carbon Accounting**: Prorated absorption for planted trees, one-time
      release for cut trees
    - **Impact Status**: Five-tier classification of the CO₂ balance
    - **Forest Scene**: Non-overlapping tree/stump markers inside a diamond
    - **Rate Limiting**: Protects the API from abuse

    ## Carbon Model

    Impact in tons for a bucket:
    (planted x 21.8kg x period_fraction - cut x 150kg) / 1000,
    with period_fraction = 1/365, 1/52, 1/12 or 1.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(carbon.router, prefix="/api/v1")
app.include_router(scene.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
