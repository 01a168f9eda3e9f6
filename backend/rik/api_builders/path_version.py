"""
RIK — Path-Version API Builder
===============================

What:  Wires resources under a version path segment: /api/v1/widgets.
How:   One APIRouter per version (prefix "/{version}"). The version's own
       customization hooks run on that router, before and after its
       resource routes are added.

Example (catalog {"v1": ["shops", "widgets"]}, widgets.sub_of = "shops"):
    GET  /api/v1/shops                       Controller.get
    GET  /api/v1/shops/{id}                  Controller.get
    GET  /api/v1/shops/{parent_id}/widgets   Controller.get
    GET  /api/v1/widgets/healthcheck         healthcheck.yml
"""

import logging

from fastapi import APIRouter, Request, Response

from rik.api_builders.base import (
    ERROR_RESPONSES,
    health_check_body,
    health_check_path,
    invoke_handler,
    load_health_checks,
    make_context,
    openapi_extra_for,
    resource_paths,
)
from rik.models.resource import ResourceDescriptor, ResourcesCatalog
from rik.schemas.health import ResourceHealthResponse
from rik.services.home_manager import HomeManager

logger = logging.getLogger(__name__)


def build_health_checks(router: APIRouter, catalog: ResourcesCatalog, manager: HomeManager) -> None:
    """GET /{version}/{name}/healthcheck for every resource with a healthcheck.yml."""
    for (version, name), document in load_health_checks(manager, catalog).items():
        router.add_api_route(
            f"/{version}{health_check_path(name)}",
            _make_health_check_endpoint(health_check_body(version, name, document)),
            methods=["GET"],
            response_model=ResourceHealthResponse,
            name=f"{version}_{name}_healthcheck",
            tags=[f"{version} health"],
        )
        logger.debug("Health check wired for %s/%s", version, name)


def build_api(router: APIRouter, catalog: ResourcesCatalog, manager: HomeManager) -> None:
    """Load every catalogued resource and add its routes under /{version}."""
    for version, names in catalog.items():
        version_router = APIRouter(prefix=f"/{version}")
        customization = manager.get_customization(version)
        if customization:
            customization.setup_router_before_api(version_router)

        for name in names:
            descriptor = manager.get_resource_config(version, name)
            add_resource_routes(version_router, descriptor, manager)

        if customization:
            customization.setup_router_after_api(version_router)
        router.include_router(version_router)
        logger.info("API %s wired with %d resource(s)", version, len(names))


def add_resource_routes(router: APIRouter, descriptor: ResourceDescriptor, manager: HomeManager) -> None:
    collection_path, item_path = resource_paths(descriptor)
    for method in descriptor.methods:
        endpoint = _make_endpoint(descriptor, method, manager)
        extra = openapi_extra_for(descriptor, method)
        for kind, path in (("collection", collection_path), ("item", item_path)):
            router.add_api_route(
                path,
                endpoint,
                methods=[method.upper()],
                name=f"{descriptor.version}_{descriptor.name}_{method}_{kind}",
                tags=[descriptor.name],
                openapi_extra=extra,
                responses=ERROR_RESPONSES,
            )


def _make_endpoint(descriptor: ResourceDescriptor, method: str, manager: HomeManager):
    context = make_context(descriptor, method, manager)

    async def endpoint(request: Request, response: Response):
        return await invoke_handler(descriptor, method, context, request, response)

    endpoint.__name__ = f"{descriptor.version}_{descriptor.name}_{method}"
    return endpoint


def _make_health_check_endpoint(body: ResourceHealthResponse):
    async def health_check() -> ResourceHealthResponse:
        return body

    return health_check
