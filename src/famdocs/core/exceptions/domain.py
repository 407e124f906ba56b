"""Domain exceptions for famdocs.

Generic categories that feature-level exceptions specialize.
"""

from .base import FamdocsError


# Configuration Errors
class ConfigurationError(FamdocsError):
    """Raised when there's a configuration issue."""
    pass


# Validation Errors
class ValidationError(FamdocsError):
    """Raised when input validation fails."""
    pass


# Authorization Errors
class AuthorizationError(FamdocsError):
    """Base class for authorization errors."""
    pass


class PermissionDeniedError(AuthorizationError):
    """Raised when an actor lacks the permission for an action."""
    pass


# Business Logic Errors
class BusinessLogicError(FamdocsError):
    """Base class for business logic errors."""
    pass


class ResourceNotFoundError(BusinessLogicError):
    """Raised when required resource is not found."""
    pass


class ConflictError(BusinessLogicError):
    """Raised when operation conflicts with the current state of a resource."""
    pass


# Infrastructure Errors
class TransportError(FamdocsError):
    """Raised when the transport returns an unexpected response."""

    def __init__(self, message: str, status_code: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code
