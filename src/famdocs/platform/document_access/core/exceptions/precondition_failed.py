"""Precondition failed exception.

ONLY version mismatch - raised when the version token sent with a write no
longer matches the resource's current state. Never retried automatically.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Any, Dict, Optional

from .....config.constants import ErrorCodes
from .....core.exceptions import ConflictError
from ..value_objects import ResourceKey, VersionToken


class PreconditionFailed(ConflictError):
    """Raised when a write is rejected because someone else changed the resource.

    The caller must re-read the resource and decide again; the guard has
    already discarded its recorded token.
    """

    DEFAULT_MESSAGE = "Someone else changed this item. Reload it and try again."

    def __init__(
        self,
        message: Optional[str] = None,
        resource_key: Optional[ResourceKey] = None,
        expected_version: Optional[VersionToken] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize precondition failed exception.

        Args:
            message: Human-readable error message
            resource_key: Resource whose version did not match
            expected_version: Token the write presented
            error_code: Specific error code for the failure
            details: Additional details about the failure
        """
        enhanced_details = details or {}
        if resource_key:
            enhanced_details["resource"] = str(resource_key)
        if expected_version:
            enhanced_details["expected_version"] = str(expected_version)

        super().__init__(
            message=message or self.DEFAULT_MESSAGE,
            error_code=error_code or ErrorCodes.PRECONDITION_FAILED,
            details=enhanced_details
        )

        self.resource_key = resource_key
        self.expected_version = expected_version

    def attach(self, resource_key: ResourceKey, expected_version: Optional[VersionToken]) -> None:
        """Fill in resource context when raised below the guard."""
        if self.resource_key is None:
            self.resource_key = resource_key
            self.details["resource"] = str(resource_key)
        if self.expected_version is None and expected_version is not None:
            self.expected_version = expected_version
            self.details["expected_version"] = str(expected_version)
