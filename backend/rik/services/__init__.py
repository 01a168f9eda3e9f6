# Services package init
"""
RIK — Services Layer
=====================

What:  Everything that reads the RIK home: discovery, module loading,
       controller validation and customization lookup.
Why:   Keeps filesystem conventions out of the HTTP layer. The API builders
       only ever see ResourceDescriptor objects and Customization wrappers.

Service Inventory:
    - HomeManager: version/resource discovery, controller loading and
      validation, health-check documents, customization lookup
    - controller_loader: load a .py file as a module; ControllerRegistry
    - Customization: optional hook set with explicit capability checks
"""

from rik.services.customization import Customization
from rik.services.home_manager import HomeManager

__all__ = ["Customization", "HomeManager"]
