"""
RIK — API Builder Shared Helpers
=================================

What:  Route-wiring pieces common to the path-version and header-version
       builders: resource paths, handler invocation, schema documents for
       OpenAPI, health-check bodies and version ordering.
Why:   The two builders differ only in how a request selects its version.

Route shapes (relative to the version prefix in path mode):
    flat resource          /{name}                /{name}/{id}
    sub_of = "parent"      /{parent}/{parent_id}/{name}
                           /{parent}/{parent_id}/{name}/{id}
    health check           /{name}/healthcheck
"""

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import yaml
from fastapi import Request, Response

from rik.controller import Handler, HandlerContext
from rik.models.resource import ResourceDescriptor, ResourcesCatalog
from rik.schemas.health import ErrorResponse, ResourceHealthResponse
from rik.services.home_manager import VERSION_PATTERN, HomeManager

logger = logging.getLogger(__name__)

HEALTHCHECK_SEGMENT = "healthcheck"

# Verbs that carry a request body worth documenting
BODY_METHODS = ("post", "patch")

# Error bodies rendered by the exception handlers in rik.main
ERROR_RESPONSES = {
    400: {"description": "Validation error", "model": ErrorResponse},
    404: {"description": "Not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


def resource_paths(descriptor: ResourceDescriptor) -> Tuple[str, str]:
    """(collection_path, item_path) for a resource, honouring sub_of nesting."""
    base = f"/{descriptor.name}"
    parent = descriptor.metadata.sub_of
    if parent:
        base = f"/{parent}/{{parent_id}}{base}"
    return base, base + "/{id}"


def health_check_path(name: str) -> str:
    return f"/{name}/{HEALTHCHECK_SEGMENT}"


def version_sort_key(version: str) -> Tuple[int, str]:
    """'v' < 'v2' < 'v2-preview' < 'v10': leading digits first, then the full name."""
    digits = VERSION_PATTERN.match(version).group()[1:]
    return (int(digits) if digits else 0, version)


def latest_version(versions: List[str]) -> str:
    return max(versions, key=version_sort_key)


def load_descriptors(manager: HomeManager, catalog: ResourcesCatalog) -> Dict[str, List[ResourceDescriptor]]:
    """
    Load every catalogued resource. Fails on the first invalid controller.
    """
    descriptors: Dict[str, List[ResourceDescriptor]] = {}
    for version, names in catalog.items():
        descriptors[version] = [manager.get_resource_config(version, name) for name in names]
    return descriptors


def load_health_checks(manager: HomeManager, catalog: ResourcesCatalog) -> Dict[Tuple[str, str], Any]:
    """(version, name) → parsed healthcheck.yml, only for resources that have one."""
    documents = {}
    for version, names in catalog.items():
        for name in names:
            document = manager.get_health_check(version, name)
            if document is not None:
                documents[(version, name)] = document
    return documents


def health_check_body(version: str, name: str, document: Any) -> ResourceHealthResponse:
    return ResourceHealthResponse(status="ok", version=version, resource=name, checks=document)


# ══════════════════════════════════════════════════════════════════════════
# Handler invocation
# ══════════════════════════════════════════════════════════════════════════

def make_context(
    descriptor: ResourceDescriptor, method: str, manager: HomeManager
) -> HandlerContext:
    return HandlerContext(
        version=descriptor.version,
        resource=descriptor.name,
        method=method,
        settings=manager.get_settings(),
        logger=logging.getLogger(f"rik.resources.{descriptor.version}.{descriptor.name}"),
        schemas=descriptor.metadata.schemas,
    )


async def invoke_handler(
    descriptor: ResourceDescriptor,
    method: str,
    context: HandlerContext,
    request: Request,
    response: Response,
) -> Any:
    """
    Await the controller's handler with the fixed four-argument call.

    A returned Response is sent as-is; anything else is serialised by FastAPI
    using the status code and headers the handler set on `response`.
    """
    handler: Handler = descriptor.handler(method)
    result = await handler(request, response, dict(request.path_params), context)
    if isinstance(result, Response):
        return result
    if result is None and response.status_code in (204, 304):
        return Response(status_code=response.status_code, headers=dict(response.headers))
    return result


# ══════════════════════════════════════════════════════════════════════════
# OpenAPI documentation from schema files
# ══════════════════════════════════════════════════════════════════════════

def load_schema_document(path: str) -> Optional[Any]:
    """Parsed schema YAML, or None when the file does not exist or cannot be parsed."""
    if not os.path.isfile(path):
        return None
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning("Ignoring unparseable schema document %s: %s", path, e)
        return None


def openapi_extra_for(descriptor: ResourceDescriptor, method: str) -> Optional[Dict[str, Any]]:
    """
    OpenAPI fragments built from the resource's schema files for `method`.

    Documentation only: payloads are never validated against these schemas.
    """
    request_path, response_path = descriptor.metadata.schemas.for_method(method)
    extra: Dict[str, Any] = {}

    if method in BODY_METHODS:
        request_schema = load_schema_document(request_path)
        if request_schema is not None:
            extra["requestBody"] = {
                "content": {"application/json": {"schema": request_schema}},
            }

    response_schema = load_schema_document(response_path)
    if response_schema is not None:
        extra["responses"] = {
            "200": {
                "description": "Successful Response",
                "content": {"application/json": {"schema": response_schema}},
            }
        }

    return extra or None
