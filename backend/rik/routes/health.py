"""
RIK — Service Health Route
===========================

What:  GET /health, the liveness probe of the whole service (outside /api).
Why:   Per-resource health checks only exist where a healthcheck.yml does;
       load balancers need one endpoint that always answers.
How:   Reports the resources wired at boot (read from app.state, set by
       create_app) and the process uptime.
"""

import logging
import time

from fastapi import APIRouter, Request

from rik import __version__
from rik.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module-level: initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    registry = getattr(request.app.state, "registry", None)
    api_settings = getattr(request.app.state, "api_settings", None)

    resources = {}
    if registry is not None:
        resources = {version: registry.resources(version) for version in registry.versions()}

    return HealthResponse(
        status="healthy",
        version=__version__,
        api_version_mode=api_settings.api_version.mode if api_settings else None,
        resources=resources,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
