"""
RIK — Data Models
==================

What:  Descriptor types shared between the home manager and the API builders.
"""

from rik.models.resource import (
    HTTP_METHODS,
    ResourceDescriptor,
    ResourceMetadata,
    ResourcesCatalog,
    SchemaPathTable,
)

__all__ = [
    "HTTP_METHODS",
    "ResourceDescriptor",
    "ResourceMetadata",
    "ResourcesCatalog",
    "SchemaPathTable",
]
