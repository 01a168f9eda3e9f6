"""
RIK — Controller Loader & Registry
===================================

What:  Loads Python modules (controllers, customizations) from file paths and
       keeps a registry of the controller classes wired at boot.
Why:   Resource directories are not Python packages: names like "order-items"
       or "v1" cannot be imported with a normal import statement.
How:   importlib.util.spec_from_file_location + exec_module, with each module
       registered in sys.modules under a stable, collision-free name.

Module naming:
    {root}/v1/resources/widgets/controller.py  →  rik_home.v1.resources.widgets.controller
    {root}/v1/rik_customization.py             →  rik_home.v1.rik_customization

    Registering in sys.modules lets dataclasses, pickling and tracebacks
    resolve `__module__` for classes defined inside a controller.
"""

import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict, List, Optional, Tuple

from rik.exceptions import ResourceLoadError

logger = logging.getLogger(__name__)

MODULE_NAMESPACE = "rik_home"


def module_name_for(root: Path, path: Path) -> str:
    """Dotted sys.modules name for a file located under the RIK home."""
    relative = Path(path).with_suffix("").relative_to(root)
    return ".".join((MODULE_NAMESPACE,) + relative.parts)


def load_module_from_path(module_name: str, path: Path) -> ModuleType:
    """
    Execute the Python file at `path` as module `module_name`.

    Raises:
        ResourceLoadError: the file is missing or raised while executing.
    """
    path = Path(path)
    if not path.is_file():
        raise ResourceLoadError(
            message=f"Module file not found: {path}",
            context={"path": str(path)},
        )

    spec = importlib.util.spec_from_file_location(module_name, str(path))
    if spec is None or spec.loader is None:
        raise ResourceLoadError(
            message=f"Could not create module spec for {path}",
            context={"path": str(path)},
        )

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ResourceLoadError(
            message=f"Error loading {path}: {e}",
            context={"path": str(path), "module": module_name},
        ) from e

    logger.debug("Loaded module %s from %s", module_name, path)
    return module


class ControllerRegistry:
    """
    Controller classes loaded during this boot, keyed by (version, resource).

    What:    An explicit record of what was wired, in load order.
    Who:     Filled by HomeManager.get_resource_config(); read by /health.
    """

    def __init__(self) -> None:
        self._controllers: Dict[Tuple[str, str], type] = {}

    def register(self, version: str, name: str, controller_class: type) -> None:
        key = (version, name)
        if key in self._controllers and self._controllers[key] is not controller_class:
            logger.debug("Replacing registered controller for %s/%s", version, name)
        self._controllers[key] = controller_class

    def get(self, version: str, name: str) -> Optional[type]:
        return self._controllers.get((version, name))

    def versions(self) -> List[str]:
        seen: List[str] = []
        for version, _ in self._controllers:
            if version not in seen:
                seen.append(version)
        return seen

    def resources(self, version: str) -> List[str]:
        return [name for v, name in self._controllers if v == version]

    def __contains__(self, key: Tuple[str, str]) -> bool:
        return key in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)
