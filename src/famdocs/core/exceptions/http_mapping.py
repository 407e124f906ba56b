"""HTTP status code mapping for exceptions.

Maps exception classes to HTTP status codes by walking the class MRO, so
feature-level subclasses inherit the status of their category.
"""

from typing import Dict, Type

from .domain import (
    AuthorizationError,
    BusinessLogicError,
    ConfigurationError,
    ConflictError,
    PermissionDeniedError,
    ResourceNotFoundError,
    TransportError,
    ValidationError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    BusinessLogicError: 400,

    # 403 Forbidden
    AuthorizationError: 403,
    PermissionDeniedError: 403,

    # 404 Not Found
    ResourceNotFoundError: 404,

    # 409 Conflict
    ConflictError: 409,

    # 422 Unprocessable Entity
    ValidationError: 422,

    # 500 Internal Server Error
    ConfigurationError: 500,

    # 502 Bad Gateway
    TransportError: 502,
}


def register_http_status(exception_class: Type[Exception], status_code: int) -> None:
    """Register or override the status code for an exception class."""
    HTTP_STATUS_MAP[exception_class] = status_code


def get_http_status_code(exception: Exception) -> int:
    """Resolve the status code for an exception instance.

    The most specific registered class in the exception's MRO wins.
    Unknown exceptions map to 500.
    """
    for klass in type(exception).__mro__:
        status = HTTP_STATUS_MAP.get(klass)
        if status is not None:
            return status
    return 500
