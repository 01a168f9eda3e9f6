"""
RIK — Resource Controller Authoring API
========================================

What:  The contract a resource's `controller.py` implements.
Why:   Every handler is invoked the same way regardless of verb, so the API
       builders can wire any controller without knowing what it does.

Example `v1/resources/widgets/controller.py`:

    from rik.controller import ResourceController


    class Controller(ResourceController):
        sub_of = "shops"      # optional: nest under /shops/{parent_id}/widgets

        async def get(self, request, response, path_params, context):
            return {"id": path_params.get("id"), "version": context.version}

        async def post(self, request, response, path_params, context):
            response.status_code = 201
            return await request.json()

Handler contract (checked at boot by the home manager):
    - named get, post, patch or delete
    - declared `async def`
    - exactly four parameters after `self`:
        request      starlette Request
        response     starlette Response (set status_code / headers on it)
        path_params  dict of path parameters ("id", "parent_id")
        context      HandlerContext
    - returns a JSON-serialisable body, or a Response that is sent as-is

Subclassing ResourceController is optional; any class exposing a suitable
`Controller` attribute works.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from starlette.requests import Request
from starlette.responses import Response

from rik.config import ApiSettings
from rik.models.resource import SchemaPathTable


@dataclass(frozen=True)
class HandlerContext:
    """Per-request information handed to every handler as its fourth argument."""
    version: str
    resource: str
    method: str
    settings: Optional[ApiSettings]
    logger: logging.Logger
    # Where this resource's request/response schema documents would live
    schemas: Optional[SchemaPathTable] = None


Handler = Callable[[Request, Response, Dict[str, str], HandlerContext], Awaitable[Any]]


class ResourceController:
    """
    Optional base class for resource controllers.

    Defines no verb methods on purpose: a verb is served only if the
    subclass defines it.
    """

    # Name of the parent resource this one nests under, read from the class.
    sub_of: Optional[str] = None
