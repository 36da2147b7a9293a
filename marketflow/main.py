"""FastAPI application entry point.

Workflow service for the organic marketplace: product requests, orders,
fulfillment, availability, deliveries and dashboard statistics.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketflow import __version__
from marketflow.config import settings
from marketflow.core.exceptions import MarketflowError
from marketflow.core.workflow_config import get_workflow_loader, load_workflow_config
from marketflow.infra.database import close_db_engine, init_db, verify_db_connection
from marketflow.infra.draft_store import reset_draft_store
from marketflow.infra.logging import get_logger, setup_logging
from marketflow.schemas.common import ErrorResponse
from marketflow.services.record_store_client import get_record_store_client

# Import routers
from marketflow.api.routes.availability import router as availability_router
from marketflow.api.routes.deliveries import router as deliveries_router
from marketflow.api.routes.farmer_orders import router as farmer_orders_router
from marketflow.api.routes.health import router as health_router
from marketflow.api.routes.insights import router as insights_router
from marketflow.api.routes.orders import router as orders_router
from marketflow.api.routes.product_requests import router as product_requests_router

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Startup:
    - Load workflow transition tables
    - Create draft tables and verify the database (database backend only)

    Shutdown:
    - Close record store client and database connections
    - Clear config cache
    """
    logger.info(
        "Marketflow starting",
        environment=settings.environment,
        draft_store_backend=settings.draft_store_backend,
    )

    config = load_workflow_config()
    logger.info(
        "Workflow config loaded",
        version=config.version,
        workflows=config.get_available_workflows(),
    )

    if settings.draft_store_backend == "database":
        try:
            await init_db()
        except Exception as e:
            logger.warning("Failed to create draft tables", error=str(e))

        db_ok = await verify_db_connection()
        if not db_ok:
            logger.warning("Database connection failed - will retry on first request")

    yield

    # Shutdown
    logger.info("Marketflow shutting down")

    await get_record_store_client().close()
    await close_db_engine()
    reset_draft_store()
    get_workflow_loader().clear_cache()
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="Marketflow",
    description="Order, request and fulfillment workflows for the organic marketplace",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "dev" else None,
    redoc_url=None,
)

# CORS middleware (mainly for local development)
if settings.environment == "dev":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log member-scoped requests with context."""
    member_id = request.headers.get("X-Member-Id", "")

    if member_id:
        logger.debug(
            "Member request received",
            member_id=member_id,
            role=request.headers.get("X-Member-Role", ""),
            method=request.method,
            path=request.url.path,
        )

    response = await call_next(request)

    return response


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(MarketflowError)
async def marketflow_exception_handler(request: Request, exc: MarketflowError) -> JSONResponse:
    """Map domain errors to structured error responses."""
    logger.warning(
        "Request failed",
        error=exc.message,
        error_type=exc.error_type,
        status_code=exc.status_code,
        path=request.url.path,
    )
    body = ErrorResponse(error=exc.message, error_type=exc.error_type, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "error_type": type(exc).__name__,
        },
    )


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router, tags=["Health"])
app.include_router(product_requests_router, prefix="/product-requests", tags=["Product Requests"])
app.include_router(orders_router, prefix="/orders", tags=["Orders"])
app.include_router(farmer_orders_router, prefix="/farmer-orders", tags=["Fulfillment"])
app.include_router(availability_router, prefix="/availability", tags=["Availability"])
app.include_router(deliveries_router, prefix="/deliveries", tags=["Deliveries"])
app.include_router(insights_router, prefix="/insights", tags=["Insights"])


# =============================================================================
# Root Endpoint
# =============================================================================


@app.get("/")
async def root() -> dict:
    """Root endpoint - basic service info."""
    return {
        "service": "Marketflow",
        "version": __version__,
        "environment": settings.environment,
        "draft_store_backend": settings.draft_store_backend,
    }
