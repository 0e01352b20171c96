"""Main application file for the Pre-Build Simulation API service."""

import logging
from contextlib import asynccontextmanager

from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.utils.config import get_settings
from app.routers import simulation
from app.middleware.rate_limiter import RateLimitMiddleware
from app.services.simulation_runner import simulation_runner

# Load settings
settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan events.
    """
    # Startup
    logger.info("🚀 Pre-Build Simulation API starting up...")
    logger.info(
        "Loaded %d infrastructure tiers and %d sector presets",
        len(simulation_runner.get_infrastructure_catalogue().tiers),
        len(simulation_runner.get_sector_presets()),
    )

    yield

    # Shutdown
    logger.info("👋 Pre-Build Simulation API shutting down...")


app = FastAPI(
    title="Pre-Build Simulation API",
    description="Capacity and risk simulation for platforms before they are built",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware
app.add_middleware(
    RateLimitMiddleware,
    requests_per_minute=settings.rate_limit_per_minute,
    exempt_paths=settings.rate_limit_exempt_paths,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

# Include routers
app.include_router(simulation.router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint providing basic info about the API."""
    return {
        "message": "Pre-Build Simulation API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "simulations": len(simulation_runner.get_all()),
    }


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Report request validation errors without echoing the rejected input.

    Rejected values such as Infinity or NaN cannot be written back as JSON.
    """
    errors = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    logger.warning("Rejected request to %s: %d validation error(s)", request.url.path, len(errors))
    return JSONResponse(
        status_code=422,
        content={"detail": errors},
    )
