"""Health check endpoints.

Provides health status for Cloud Run probes and monitoring.
"""

from fastapi import APIRouter

from marketflow import __version__
from marketflow.api.deps import Drafts
from marketflow.config import settings
from marketflow.core.workflow_config import load_workflow_config
from marketflow.infra.logging import get_logger
from marketflow.schemas.common import HealthResponse

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Basic health check.

    Returns 200 if service is running.
    Used by Cloud Run startup probe.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment,
        checks={},
    )


@router.get("/health/ready", response_model=HealthResponse)
async def health_ready(drafts: Drafts) -> HealthResponse:
    """Readiness check.

    Verifies all dependencies are available:
    - Draft store reachable
    - Workflow tables loaded

    Used by Cloud Run to determine if service can accept traffic.
    """
    checks: dict[str, bool] = {}

    checks["draft_store"] = await drafts.ping()

    try:
        checks["workflows"] = bool(load_workflow_config().workflows)
    except Exception as e:
        logger.warning("Workflow config check failed", error=str(e))
        checks["workflows"] = False

    all_healthy = all(checks.values()) if checks else True

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        version=__version__,
        environment=settings.environment,
        checks=checks,
    )


@router.get("/health/live", response_model=HealthResponse)
async def health_live() -> HealthResponse:
    """Liveness check.

    Basic check that service is responding.
    Used by Cloud Run liveness probe.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment,
        checks={"alive": True},
    )
