"""
Custom exceptions for resourceful controllers.
"""
from pydantic import ValidationError

__all__ = [
    "ResourcefulError",
    "ResolutionError",
    "ParameterError",
    "MissingImplementationError",
    "ResourceNotFoundError",
    "UnknownFormatError",
    "ValidationError",
]


class ResourcefulError(Exception):
    """Base exception for resourceful errors."""

    pass


class ResolutionError(ResourcefulError):
    """Raised when a resource class cannot be inferred from a controller identity."""

    def __init__(self, identity: str, reason: str):
        self.identity = identity
        self.reason = reason
        super().__init__(
            f"Could not infer resource class for {identity}: {reason}. "
            f"Set `model` on the controller."
        )


class ParameterError(ResourcefulError):
    """Raised when required parameters are missing or invalid."""

    pass


class MissingImplementationError(ResourcefulError, NotImplementedError):
    """Raised when a controller does not provide a required extension point."""

    pass


class ResourceNotFoundError(ResourcefulError):
    """Raised when a resource cannot be found and the controller is configured to fail."""

    def __init__(self, resource_class_name: str, resource_id=None):
        self.resource_class_name = resource_class_name
        self.resource_id = resource_id
        super().__init__(f"{resource_class_name} with id={resource_id!r} not found")


class UnknownFormatError(ResourcefulError):
    """Raised when none of the registered formats is acceptable to the request."""

    def __init__(self, requested: str, available=None):
        self.requested = requested
        self.available = list(available or [])
        super().__init__(
            f"No registered format matches {requested!r} "
            f"(available: {', '.join(self.available) or 'none'})"
        )
