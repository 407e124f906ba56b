"""Document access core exceptions.

Each exception represents one error kind callers can branch on without
string matching.
"""

from .....core.exceptions import register_http_status

from .precondition_failed import PreconditionFailed
from .validation_failed import FieldIssue, MissingVersionToken, ValidationFailed
from .permission_denied import PermissionDenied
from .not_found import NotFound

register_http_status(PreconditionFailed, 412)

__all__ = [
    "PreconditionFailed",
    "FieldIssue",
    "MissingVersionToken",
    "ValidationFailed",
    "PermissionDenied",
    "NotFound",
]
