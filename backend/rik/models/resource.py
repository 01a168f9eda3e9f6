"""
RIK — Resource Descriptor Models
=================================

What:  Immutable data types produced by the home manager and consumed by the
       API builders.
Why:   The builders only need to know what a resource is called, which
       controller serves it, whether it nests under another resource, and
       where its schema documents would live.
How:   Frozen dataclasses (not pydantic): these objects are never parsed from
       untrusted input and carry a live controller instance.

Descriptor layout:
    ResourceDescriptor
    ├── name            "widgets"
    ├── version         "v1"
    ├── controller      Controller()
    └── metadata
        ├── name        "widgets"
        ├── sub_of      "shops" | None
        └── schemas     SchemaPathTable (8 paths)
"""

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

HTTP_METHODS: Tuple[str, ...] = ("get", "post", "patch", "delete")
SCHEMAS_FOLDER = "schemas"

# version -> resource names, in filesystem listing order
ResourcesCatalog = Dict[str, List[str]]


@dataclass(frozen=True)
class SchemaPathTable:
    """
    Expected location of every request/response schema document of a resource.

    Paths are computed, never checked: consumers test existence themselves.
    """
    get_request: str
    get_response: str
    post_request: str
    post_response: str
    patch_request: str
    patch_response: str
    delete_request: str
    delete_response: str

    @classmethod
    def for_resource_dir(cls, resource_dir: str) -> "SchemaPathTable":
        schemas_dir = os.path.join(resource_dir, SCHEMAS_FOLDER)
        paths = {}
        for method in HTTP_METHODS:
            for direction in ("request", "response"):
                paths[f"{method}_{direction}"] = os.path.join(
                    schemas_dir, f"{method}.{direction}.yml"
                )
        return cls(**paths)

    def for_method(self, method: str) -> Tuple[str, str]:
        """Returns (request_path, response_path) for an HTTP verb."""
        return getattr(self, f"{method}_request"), getattr(self, f"{method}_response")

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class ResourceMetadata:
    name: str
    schemas: SchemaPathTable
    sub_of: Optional[str] = None


@dataclass(frozen=True)
class ResourceDescriptor:
    """A loaded and validated resource, ready to be wired into a router."""
    name: str
    version: str
    controller: Any
    metadata: ResourceMetadata

    def handler(self, method: str):
        """The controller's bound handler for `method`, or None if not defined."""
        candidate = getattr(self.controller, method, None)
        return candidate if callable(candidate) else None

    @property
    def methods(self) -> List[str]:
        """HTTP verbs this resource serves, in canonical order."""
        return [m for m in HTTP_METHODS if self.handler(m) is not None]
