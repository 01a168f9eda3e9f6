"""
RIK — Pydantic Response Schemas
================================

What:  Pydantic models for the responses RIK itself produces (health checks
       and errors). Resource responses belong to the controllers.
Why:   Automatic serialization and OpenAPI documentation for the built-in routes.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for every error RIK renders.

    Example:
        {
            "error": "not_found",
            "message": "API version 'v9' was not found",
            "details": {"resource": "api version", "version": "v9"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class ResourceHealthResponse(BaseModel):
    """
    What:  Body of a resource health-check route (`.../{resource}/healthcheck`).
    Why:   The healthcheck.yml document is returned verbatim under `checks`;
           RIK does not interpret its shape.
    """
    status: str = Field(default="ok", description="Always 'ok' when the route answers")
    version: str = Field(description="API version serving the resource")
    resource: str = Field(description="Resource name")
    checks: Any = Field(default=None, description="Parsed healthcheck.yml document")


class HealthResponse(BaseModel):
    """
    What:  Service health returned by GET /health.
    Who:   Docker health checks, load balancers, monitoring.
    """
    status: str = Field(description="Overall service status")
    version: str = Field(description="RIK version")
    api_version_mode: Optional[str] = Field(default=None, description="path or header")
    resources: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Resources wired at boot, per API version",
    )
    uptime_seconds: float = Field(description="Seconds since service started")
