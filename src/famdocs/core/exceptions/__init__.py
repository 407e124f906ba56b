"""Exceptions module for famdocs.

This module provides the exception hierarchy shared by all famdocs
features.
"""

from .base import (
    FamdocsError,
    get_http_status_code,
    create_error_response,
)

from .domain import (
    ConfigurationError,
    ValidationError,
    AuthorizationError,
    PermissionDeniedError,
    BusinessLogicError,
    ResourceNotFoundError,
    ConflictError,
    TransportError,
)

from .http_mapping import HTTP_STATUS_MAP, register_http_status

__all__ = [
    "FamdocsError",
    "get_http_status_code",
    "create_error_response",
    "ConfigurationError",
    "ValidationError",
    "AuthorizationError",
    "PermissionDeniedError",
    "BusinessLogicError",
    "ResourceNotFoundError",
    "ConflictError",
    "TransportError",
    "HTTP_STATUS_MAP",
    "register_http_status",
]
