"""
RIK — Customization Hooks
==========================

What:  Optional hook set a deployment ships as `rik_customization.py`, either
       at the RIK home root (global) or inside a version folder.
Why:   Lets a deployment plug in its own logging and router middleware
       around the generated routes without forking RIK.
How:   The loaded module is wrapped in `Customization`, which checks for each
       capability explicitly and warns (never fails) when one is missing.

Capabilities (all optional):
    get_custom_logger()               → logging.Handler | logging.Logger
    setup_router_before_api(router)   called before resource routes are added
    setup_router_after_api(router)    called after resource routes are added

Example `rik_customization.py`:

    import logging

    def get_custom_logger():
        return logging.FileHandler("/var/log/rik.log")

    def setup_router_before_api(router):
        @router.get("/ping")
        async def ping():
            return {"pong": True}
"""

import logging
from types import ModuleType
from typing import Any, Optional

logger = logging.getLogger(__name__)

CUSTOMIZATION_FILENAME = "rik_customization.py"

GET_CUSTOM_LOGGER = "get_custom_logger"
SETUP_ROUTER_BEFORE_API = "setup_router_before_api"
SETUP_ROUTER_AFTER_API = "setup_router_after_api"


class Customization:
    """A loaded customization module with explicit capability checks."""

    def __init__(self, module: ModuleType, scope: str = "global"):
        self.module = module
        # "global" or the version path ("v1")
        self.scope = scope

    def has(self, capability: str) -> bool:
        return callable(getattr(self.module, capability, None))

    def get_custom_logger(self) -> Optional[Any]:
        """The module's custom logger, or None when it provides none."""
        if not self.has(GET_CUSTOM_LOGGER):
            return None
        return getattr(self.module, GET_CUSTOM_LOGGER)()

    def setup_router_before_api(self, router: Any) -> bool:
        return self._invoke_router_hook(SETUP_ROUTER_BEFORE_API, router)

    def setup_router_after_api(self, router: Any) -> bool:
        return self._invoke_router_hook(SETUP_ROUTER_AFTER_API, router)

    def _invoke_router_hook(self, capability: str, router: Any) -> bool:
        """Calls the hook if present; warns and returns False otherwise."""
        if not self.has(capability):
            logger.warning(
                "Found a %s RIK customization file, but it doesn't export the %s function",
                self.scope,
                capability,
                extra={"component": "Customization", "action": capability},
            )
            return False
        getattr(self.module, capability)(router)
        logger.debug("Applied %s customization hook %s", self.scope, capability)
        return True

    def __repr__(self) -> str:
        return f"Customization(scope={self.scope!r}, module={self.module.__name__!r})"
