"""Health check endpoints."""

from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sommelier_service import __version__
from sommelier_service.api.deps import get_gateway_config
from sommelier_service.config import Settings, get_settings
from sommelier_service.exceptions import CatalogError
from sommelier_service.infrastructure.catalog import load_catalog
from sommelier_service.services.generation_gateway import GatewayConfig

logger = structlog.get_logger()

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str
    timestamp: str
    dependencies: dict[str, Any]


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    ready: bool
    checks: dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
    gateway_config: GatewayConfig = Depends(get_gateway_config),
) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns the service status, version, and which generation providers
    have credentials. Without any credentials the service still answers
    from the local recommendation path.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc).isoformat(),
        dependencies={
            "providers": {
                name: "configured" if gateway_config.has_api_key(name) else "not_configured"
                for name in gateway_config.providers
            },
            "catalog": "static",
        },
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """
    Readiness check endpoint.

    Verifies that the strain catalog loads and is non-empty.
    """
    checks: dict[str, bool] = {}

    try:
        checks["catalog"] = len(load_catalog()) > 0
    except (CatalogError, OSError) as e:
        logger.error("Catalog failed to load", error=str(e))
        checks["catalog"] = False

    return ReadinessResponse(
        ready=all(checks.values()),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness check endpoint.

    Simple endpoint that returns 200 if the service is running.
    """
    return {"status": "alive"}
