"""
Hostflow - Main FastAPI Application.

REST API for hosting and domain orders: order intake, payment
webhooks and the admin operations that drive fulfillment.
"""
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import dependencies
from api.routes import admin, domains, health, orders, packages, payments
from core.domain.exceptions import (
    ConflictError,
    HostflowError,
    IllegalTransition,
    InvalidPackage,
    NotFound,
    ProviderError,
    ValidationError,
)
from core.infrastructure.database.config import close_database, init_database
from core.infrastructure.database.seed import seed_packages


# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Hostflow - Hosting & Domain Orders API",
    description="""
    Order management for a hosting and domain reseller.

    Features:
    - Order intake with fixed pricing
    - Mollie payment webhooks
    - Admin approval, suspension and cancellation
    - Fulfillment against Plesk, OpenProvider and Moneybird with per-task retry
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)


# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()

    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"← {request.method} {request.url.path} "
        f"[{response.status_code}] ({duration:.3f}s)"
    )

    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

ERROR_STATUS = (
    (ValidationError, 422),
    (InvalidPackage, 422),
    (NotFound, 404),
    (IllegalTransition, 409),
    (ConflictError, 409),
    (ProviderError, 502),
)


def status_for(exc: HostflowError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


@app.exception_handler(HostflowError)
async def domain_exception_handler(request: Request, exc: HostflowError):
    """Map domain errors to HTTP status codes."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(exc).__name__,
            "detail": str(exc),
            "path": request.url.path,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "path": request.url.path
        }
    )


# =============================================================================
# STARTUP/SHUTDOWN EVENTS
# =============================================================================

@app.on_event("startup")
async def startup_event():
    """Create tables, seed the catalog and start the in-process worker if enabled."""
    logger.info("🚀 Hostflow API starting up...")
    settings = dependencies.get_settings().fulfillment

    await init_database()
    if settings.seed_catalog:
        await seed_packages(dependencies.get_session_factory())

    if settings.run_worker:
        dependencies.get_worker().start()
        logger.info("⚙️ In-process fulfillment worker started")

    logger.info("📚 Swagger UI available at: /docs")


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the worker and release connections."""
    logger.info("👋 Hostflow API shutting down...")
    if dependencies.get_settings().fulfillment.run_worker:
        await dependencies.get_worker().stop()

    publisher = dependencies.get_redis_publisher()
    if publisher is not None:
        await publisher.disconnect()

    await close_database()


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(health.router, tags=["Health"])
app.include_router(packages.router, prefix="/api/v1/packages", tags=["Packages"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(domains.router, prefix="/api/v1/domains", tags=["Domains"])
app.include_router(payments.router, prefix="/api/v1/webhooks", tags=["Payments"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["Admin"])


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """API root endpoint."""
    return {
        "message": "Hostflow - Hosting & Domain Orders API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
