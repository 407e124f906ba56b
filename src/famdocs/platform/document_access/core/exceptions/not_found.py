"""Not found exception.

ONLY missing resources - absent, or hidden because it was soft-deleted or
revoked.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Any, Dict, Optional

from .....config.constants import ErrorCodes
from .....core.exceptions import ResourceNotFoundError
from ..value_objects import ResourceKey


class NotFound(ResourceNotFoundError):
    """Raised when a document, grant, user or family cannot be found."""

    def __init__(
        self,
        message: str,
        resource_key: Optional[ResourceKey] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        enhanced_details = details or {}
        if resource_key:
            enhanced_details["resource"] = str(resource_key)
        super().__init__(
            message=message,
            error_code=error_code or ErrorCodes.NOT_FOUND,
            details=enhanced_details
        )
        self.resource_key = resource_key
