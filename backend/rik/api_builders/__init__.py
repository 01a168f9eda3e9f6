"""
RIK — API Builders
===================

What:  Turn the resources catalog into FastAPI routes.
How:   Each builder module exposes the same two functions:

    build_health_checks(router, catalog, manager)
    build_api(router, catalog, manager)

    path_version    /api/v1/widgets
    header_version  /api/widgets  +  "api-version: v1"
"""

from types import ModuleType

from rik.api_builders import header_version, path_version
from rik.exceptions import UnsupportedApiVersionModeError

BUILDERS = {
    "path": path_version,
    "header": header_version,
}


def get_api_builder(mode: str) -> ModuleType:
    """
    The builder module for an api_version.mode.

    Raises:
        UnsupportedApiVersionModeError: mode is neither "path" nor "header"
    """
    try:
        return BUILDERS[mode]
    except (KeyError, TypeError):
        raise UnsupportedApiVersionModeError(mode) from None
