"""
RIK — Resource Home Manager
============================

What:  Discovers API versions and resources on disk, loads and validates
       resource controllers, and resolves health-check documents and
       customization hooks.
Why:   The whole API surface is defined by convention in the RIK home; this
       is the single place that interprets that layout.
Who:   Built once by the boot sequence (rik.main.create_app) and passed to
       the API builders.
When:  Only during startup. Every operation is synchronous and blocking.

RIK home layout:
    {root}/
    ├── rik_customization.py               optional, global hooks
    ├── v1/
    │   ├── rik_customization.py           optional, version hooks
    │   └── resources/
    │       └── widgets/
    │           ├── controller.py          required
    │           ├── healthcheck.yml        optional
    │           └── schemas/
    │               ├── get.request.yml    optional (x8, see SchemaPathTable)
    │               └── ...
    └── v2/ ...

Error policy (two tiers):
    Discovery   permissive: bad version names and resource folders without
                a controller are logged as warnings and skipped.
    Loading     strict: once a resource is loaded, every contract violation
                of its controller is collected and raised as ONE
                ResourceValidationError, aborting startup.
"""

import inspect
import logging
import re
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml

from rik.config import ApiSettings
from rik.exceptions import (
    HomeNotInitializedError,
    ResourceLoadError,
    ResourceValidationError,
)
from rik.models.resource import (
    HTTP_METHODS,
    ResourceDescriptor,
    ResourceMetadata,
    ResourcesCatalog,
    SchemaPathTable,
)
from rik.services.controller_loader import (
    ControllerRegistry,
    load_module_from_path,
    module_name_for,
)
from rik.services.customization import CUSTOMIZATION_FILENAME, Customization

logger = logging.getLogger(__name__)

# ── Layout Conventions ────────────────────────────────────────────────────
VERSION_PATTERN = re.compile(r"v[0-9]*")
RESOURCES_FOLDER = "resources"
CONTROLLER_FILENAME = "controller.py"
CONTROLLER_CLASS_ATTR = "Controller"
HEALTHCHECK_FILENAME = "healthcheck.yml"

# Known root entries skipped without a warning; __pycache__ appears once the
# global customization has been imported
ROOT_ENTRIES_NOT_VERSIONS = frozenset({CUSTOMIZATION_FILENAME, "__pycache__"})

# Every handler is called as handler(request, response, path_params, context)
HANDLER_ARITY = 4


def is_version_name(name: str) -> bool:
    """A version name starts with "v" followed by zero or more digits: 'v', 'v1', 'v2-preview'."""
    return VERSION_PATTERN.match(name) is not None


def count_positional_parameters(func: Any) -> int:
    """
    Number of leading positional parameters without a default value.

    `self` is excluded for bound methods. *args, **kwargs and keyword-only
    parameters are never counted; counting stops at the first default.
    """
    count = 0
    for param in inspect.signature(func).parameters.values():
        if param.kind not in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            break
        if param.default is not param.empty:
            break
        count += 1
    return count


class HomeManager:
    """
    Reads the RIK home and turns it into validated resource descriptors.

    State:
        resources_path: root of the RIK home, set by initialize()
        settings:       ApiSettings, set by set_settings()
        registry:       controller classes loaded so far
    """

    def __init__(self) -> None:
        self.resources_path: Optional[Path] = None
        self.settings: Optional[ApiSettings] = None
        self.registry = ControllerRegistry()

    # ══════════════════════════════════════════════════════════════════════
    # State
    # ══════════════════════════════════════════════════════════════════════

    def initialize(self, resources_path: Union[str, Path]) -> None:
        self.resources_path = Path(resources_path)

    def set_settings(self, settings: Optional[ApiSettings]) -> None:
        self.settings = settings

    def get_settings(self) -> Optional[ApiSettings]:
        return self.settings

    def _root(self, operation: str) -> Path:
        if self.resources_path is None:
            raise HomeNotInitializedError(operation)
        return self.resources_path

    def _resource_dir(self, version: str, name: str, operation: str) -> Path:
        return self._root(operation) / version / RESOURCES_FOLDER / name

    # ══════════════════════════════════════════════════════════════════════
    # Discovery (permissive)
    # ══════════════════════════════════════════════════════════════════════

    def get_available_resources(self) -> ResourcesCatalog:
        """
        Map every version folder to the resource folders that carry a controller.

        Order follows the filesystem listing; nothing is sorted. A version
        folder without a `resources` directory is recorded with no resources.
        """
        root = self._root("get_available_resources")
        catalog: ResourcesCatalog = {}

        for version_dir in root.iterdir():
            if version_dir.name in ROOT_ENTRIES_NOT_VERSIONS:
                continue
            if not is_version_name(version_dir.name):
                logger.warning(
                    "Ignoring '%s' found at RIK home (it doesn't have version format)",
                    version_dir.name,
                    extra={"component": "HomeManager", "action": "GetAvailableResources"},
                )
                continue
            if not version_dir.is_dir():
                logger.warning(
                    "Ignoring '%s' found at RIK home (it isn't a directory)",
                    version_dir.name,
                    extra={"component": "HomeManager", "action": "GetAvailableResources"},
                )
                continue

            catalog[version_dir.name] = []
            resources_dir = version_dir / RESOURCES_FOLDER
            if not resources_dir.is_dir():
                continue

            for resource_dir in resources_dir.iterdir():
                if not resource_dir.is_dir():
                    continue
                if (resource_dir / CONTROLLER_FILENAME).is_file():
                    catalog[version_dir.name].append(resource_dir.name)
                else:
                    logger.warning(
                        "Ignoring directory '%s/%s' found at resources folder "
                        "(it lacks a %s file)",
                        version_dir.name,
                        resource_dir.name,
                        CONTROLLER_FILENAME,
                        extra={"component": "HomeManager", "action": "GetAvailableResources"},
                    )

        return catalog

    # ══════════════════════════════════════════════════════════════════════
    # Loading & validation (strict)
    # ══════════════════════════════════════════════════════════════════════

    def get_resource_config(self, version: str, name: str) -> ResourceDescriptor:
        """
        Load, instantiate and validate the controller of `version`/`name`.

        Raises:
            ResourceLoadError:       controller.py missing, broken, or without
                                     an instantiable `Controller` class
            ResourceValidationError: one or more handler contract violations
        """
        root = self._root("get_resource_config")
        resource_dir = self._resource_dir(version, name, "get_resource_config")
        controller_path = resource_dir / CONTROLLER_FILENAME

        module = load_module_from_path(module_name_for(root, controller_path), controller_path)
        controller_class = getattr(module, CONTROLLER_CLASS_ATTR, None)
        if not inspect.isclass(controller_class):
            raise ResourceLoadError(
                message=(
                    f'Resource "{name}" ({version}): {controller_path} does not define '
                    f"a {CONTROLLER_CLASS_ATTR} class"
                ),
                context={"version": version, "resource": name, "path": str(controller_path)},
            )

        try:
            controller = controller_class()
        except Exception as e:
            raise ResourceLoadError(
                message=f'Resource "{name}" ({version}): could not instantiate controller: {e}',
                context={"version": version, "resource": name, "path": str(controller_path)},
            ) from e

        validation_errors = self._check_resource_controller_functions(controller)
        if validation_errors:
            raise ResourceValidationError(name, validation_errors)

        metadata = ResourceMetadata(
            name=name,
            # Read off the class, never the instance
            sub_of=getattr(controller_class, "sub_of", None),
            schemas=SchemaPathTable.for_resource_dir(str(resource_dir)),
        )
        self.registry.register(version, name, controller_class)
        logger.info("Loaded resource %s/%s", version, name)
        return ResourceDescriptor(
            name=name,
            version=version,
            controller=controller,
            metadata=metadata,
        )

    def _check_resource_controller_functions(self, controller: Any) -> List[str]:
        validation_errors: List[str] = []
        for method in HTTP_METHODS:
            self._check_method(controller, method, validation_errors)
        return validation_errors

    def _check_method(self, controller: Any, method: str, validation_errors: List[str]) -> None:
        handler = getattr(controller, method, None)
        if handler is None:
            return
        if not callable(handler):
            validation_errors.append(
                f'The "{method}" attribute of the ResourceController is not a function'
            )
            return
        if count_positional_parameters(handler) != HANDLER_ARITY:
            validation_errors.append(self._method_args_error_msg(method))
        if not inspect.iscoroutinefunction(handler):
            validation_errors.append(self._method_not_async_error_msg(method))

    @staticmethod
    def _method_args_error_msg(method: str) -> str:
        return f'The "{method}" method of the ResourceController doesn\'t expect four arguments'

    @staticmethod
    def _method_not_async_error_msg(method: str) -> str:
        return f'The "{method}" method of the ResourceController isn\'t declared as async'

    # ══════════════════════════════════════════════════════════════════════
    # Optional documents & hooks
    # ══════════════════════════════════════════════════════════════════════

    def get_health_check(self, version: str, name: str) -> Optional[Any]:
        """Parsed healthcheck.yml of a resource, or None when it has none."""
        healthcheck_yml = self._resource_dir(version, name, "get_health_check") / HEALTHCHECK_FILENAME
        if not healthcheck_yml.is_file():
            return None
        with open(healthcheck_yml, encoding="utf-8") as f:
            return yaml.safe_load(f)

    def get_customization(self, version_path: Optional[str] = None) -> Optional[Customization]:
        """
        The customization module at `{root}/[version_path/]rik_customization.py`.

        Called without a version path for the global customization.
        """
        root = self._root("get_customization")
        customization_path = root / (version_path or "") / CUSTOMIZATION_FILENAME
        if not customization_path.is_file():
            return None
        module = load_module_from_path(module_name_for(root, customization_path), customization_path)
        return Customization(module, scope=version_path or "global")
