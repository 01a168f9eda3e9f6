"""
RIK — Custom Exception Hierarchy
=================================

What:  Defines application-specific exceptions for boot-time and request-time
       error scenarios.
Why:   Boot errors must abort startup with a complete, readable message.
       Request errors raised by resource controllers must map to the right
       HTTP status without each controller building responses by hand.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch the
       request-time ones and return structured JSON error responses.

Exception Hierarchy:
    RIKError (base)
    ├── HomeNotInitializedError          boot: filesystem used before initialize()
    ├── ResourceLoadError                boot: controller module cannot be loaded
    ├── ResourceValidationError          boot: controller breaks the handler contract
    ├── UnsupportedApiVersionModeError   boot: api_version.mode not path/header
    ├── ValidationError                  → 400 Bad Request
    └── NotFoundError                    → 404 Not Found
"""

from typing import Any, Dict, List, Optional


class RIKError(Exception):
    """
    Base exception for all RIK errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, returned only for 4xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ══════════════════════════════════════════════════════════════════════════
# Boot-time errors: abort startup
# ══════════════════════════════════════════════════════════════════════════


class HomeNotInitializedError(RIKError):
    """Raised when the home manager is asked to read the filesystem before initialize()."""

    def __init__(self, operation: str):
        super().__init__(
            message=f"HomeManager.{operation}() called before initialize()",
            context={"operation": operation},
        )


class ResourceLoadError(RIKError):
    """
    Raised when a resource controller module cannot be turned into an instance.

    When:  controller.py is missing, fails to import, has no `Controller`
           class, or the class cannot be instantiated without arguments.
    """

    def __init__(
        self,
        message: str = "Could not load resource controller",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ResourceValidationError(RIKError):
    """
    Raised when a loaded controller violates the handler contract.

    What:    Carries EVERY violation found on the resource, not only the first.
    Message: 'Encountered validation errors on resource "<name>":' followed by
             one line per violation.
    """

    def __init__(self, resource: str, errors: List[str]):
        message = (
            f'Encountered validation errors on resource "{resource}":\n'
            + "\n".join(errors)
        )
        super().__init__(message=message, context={"resource": resource, "errors": errors})
        self.resource = resource
        self.errors = errors


class UnsupportedApiVersionModeError(RIKError):
    """Raised at boot when api_version.mode selects no known API builder."""

    def __init__(self, mode: Any):
        super().__init__(
            message=f"Unsupported apiVersion mode: {mode}",
            context={"mode": mode},
        )
        self.mode = mode


# ══════════════════════════════════════════════════════════════════════════
# Request-time errors: raised by resource controllers
# ══════════════════════════════════════════════════════════════════════════


class ValidationError(RIKError):
    """
    Raised when client input fails validation.

    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Field 'name' is required",
            "details": {"field": "name"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(RIKError):
    """
    Raised when a requested resource, item or API version does not exist.

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
