"""
RIK — Header-Version API Builder
=================================

What:  Wires resources WITHOUT a version path segment (/api/widgets); each
       request picks its version with a header ("api-version: v2" by default,
       see ApiSettings.api_version.header).
How:   Routes are grouped by (path, verb). Each route holds a version → handler
       table and dispatches per request.

Version selection:
    header present   that exact version; 404 if it does not serve the route
    header absent    the highest version serving the route ("v10" > "v9")

Version customization hooks all receive the shared router: every version's
setup_router_before_api runs before any resource route is added, every
setup_router_after_api after all of them.
"""

import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, Tuple

from fastapi import APIRouter, Request, Response

from rik.api_builders.base import (
    ERROR_RESPONSES,
    health_check_body,
    health_check_path,
    invoke_handler,
    latest_version,
    load_descriptors,
    load_health_checks,
    make_context,
    openapi_extra_for,
    resource_paths,
)
from rik.controller import HandlerContext
from rik.exceptions import NotFoundError
from rik.models.resource import ResourceDescriptor, ResourcesCatalog
from rik.schemas.health import ResourceHealthResponse
from rik.services.home_manager import HomeManager

logger = logging.getLogger(__name__)

DEFAULT_VERSION_HEADER = "api-version"

# version → (descriptor, context) for one (path, verb)
VersionHandlers = Dict[str, Tuple[ResourceDescriptor, HandlerContext]]


def _version_header(manager: HomeManager) -> str:
    settings = manager.get_settings()
    if settings is None:
        return DEFAULT_VERSION_HEADER
    return settings.api_version.header


def select_version(request: Request, header: str, available: Dict[str, Any], what: str) -> str:
    """
    Version that serves `request` among `available`.

    Raises:
        NotFoundError: the requested version does not serve this route
    """
    requested = request.headers.get(header)
    if not requested:
        return latest_version(list(available))
    requested = requested.strip()
    if requested not in available:
        raise NotFoundError(
            resource="api version",
            message=f"API version '{requested}' does not serve {what}",
            context={"version": requested, "available": sorted(available)},
        )
    return requested


def build_health_checks(router: APIRouter, catalog: ResourcesCatalog, manager: HomeManager) -> None:
    """GET /{name}/healthcheck, dispatched by version header."""
    header = _version_header(manager)
    by_name: Dict[str, Dict[str, ResourceHealthResponse]] = OrderedDict()
    for (version, name), document in load_health_checks(manager, catalog).items():
        by_name.setdefault(name, {})[version] = health_check_body(version, name, document)

    for name, bodies in by_name.items():
        router.add_api_route(
            health_check_path(name),
            _make_health_check_endpoint(name, bodies, header),
            methods=["GET"],
            response_model=ResourceHealthResponse,
            name=f"{name}_healthcheck",
            tags=["health"],
        )
        logger.debug("Health check wired for %s (versions: %s)", name, ", ".join(bodies))


def build_api(router: APIRouter, catalog: ResourcesCatalog, manager: HomeManager) -> None:
    """Load every catalogued resource and add version-dispatching routes."""
    header = _version_header(manager)
    customizations = OrderedDict()
    for version in catalog:
        customization = manager.get_customization(version)
        if customization:
            customizations[version] = customization

    for customization in customizations.values():
        customization.setup_router_before_api(router)

    table: Dict[Tuple[str, str], VersionHandlers] = OrderedDict()
    for version, descriptors in load_descriptors(manager, catalog).items():
        for descriptor in descriptors:
            for method in descriptor.methods:
                for path in resource_paths(descriptor):
                    table.setdefault((path, method), {})[version] = (
                        descriptor,
                        make_context(descriptor, method, manager),
                    )

    for (path, method), handlers in table.items():
        # The highest version documents the route
        documented, _ = handlers[latest_version(list(handlers))]
        router.add_api_route(
            path,
            _make_endpoint(path, method, handlers, header),
            methods=[method.upper()],
            name=f"{method}_{path}",
            tags=[documented.name],
            openapi_extra=openapi_extra_for(documented, method),
            responses=ERROR_RESPONSES,
        )

    for customization in customizations.values():
        customization.setup_router_after_api(router)
    logger.info("API wired in header mode (%d route(s), header '%s')", len(table), header)


def _make_endpoint(
    path: str,
    method: str,
    handlers: VersionHandlers,
    header: str,
) -> Callable:
    what = f"{method.upper()} {path}"

    async def endpoint(request: Request, response: Response):
        version = select_version(request, header, handlers, what)
        descriptor, context = handlers[version]
        return await invoke_handler(descriptor, method, context, request, response)

    return endpoint


def _make_health_check_endpoint(name: str, bodies: Dict[str, ResourceHealthResponse], header: str):
    what = f"the '{name}' health check"

    async def health_check(request: Request) -> ResourceHealthResponse:
        return bodies[select_version(request, header, bodies, what)]

    return health_check
