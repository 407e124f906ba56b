"""Permission denied exception.

ONLY access denial - raised when an action reaches a write path the access
gate does not allow. The UI should never have offered the action.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Any, Dict, Optional

from .....config.constants import ErrorCodes
from .....core.exceptions import PermissionDeniedError


class PermissionDenied(PermissionDeniedError):
    """Raised when an actor is not allowed to perform a document action."""

    def __init__(
        self,
        message: str,
        actor_id: Optional[str] = None,
        action: Optional[str] = None,
        document_id: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize permission denied exception.

        Args:
            message: Human-readable error message
            actor_id: Actor that attempted the action
            action: Action that was denied
            document_id: Document the action targeted
            error_code: Specific error code for the failure
            details: Additional details about the failure
        """
        enhanced_details = details or {}
        if actor_id:
            enhanced_details["actor_id"] = actor_id
        if action:
            enhanced_details["action"] = action
        if document_id:
            enhanced_details["document_id"] = document_id

        super().__init__(
            message=message,
            error_code=error_code or ErrorCodes.PERMISSION_DENIED,
            details=enhanced_details
        )

        self.actor_id = actor_id
        self.action = action
        self.document_id = document_id
